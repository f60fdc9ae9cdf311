"""Main CLI entry point for yt2blog.

This module provides the command-line interface for generating articles,
browsing the provider catalog, checking API keys and running the relay server.
"""

import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Optional, Tuple

import click
from rich.console import Console
from rich.markdown import Markdown
from rich.markup import escape
from rich.table import Table

from yt2blog import __version__
from yt2blog.core.config import api_key_env_candidates, load_settings, resolve_api_key
from yt2blog.core.constants import DEFAULT_OUTPUT_LANGUAGE, DEFAULT_STYLE
from yt2blog.core.error_translation import ErrorTranslator
from yt2blog.core.generation import (
    ArticleGenerator,
    ChunkEvent,
    CompletedEvent,
    FailedEvent,
    GenerationFailedError,
    GenerationRejectedError,
    GenerationRequest,
    GenerationResult,
)
from yt2blog.core.providers import available_providers, list_descriptors
from yt2blog.core.providers.errors import UnsupportedProviderError
from yt2blog.utils.log import enable_file_logging, get_logger

console = Console()
logger = get_logger()


def _read_transcript(source: str) -> str:
    if source == "-":
        return click.get_text_stream("stdin").read()
    return Path(source).read_text(encoding="utf-8")


def _fail(message: str) -> None:
    console.print(f"[red]{escape(message)}[/red]")
    sys.exit(1)


async def _stream_article(
    generator: ArticleGenerator, request: GenerationRequest
) -> Tuple[str, Optional[str]]:
    """Echo fragments as they arrive; return (article, error message)."""
    async for event in generator.stream(request):
        if isinstance(event, ChunkEvent):
            click.echo(event.text, nl=False)
        elif isinstance(event, CompletedEvent):
            click.echo("")
            return event.result.article, None
        elif isinstance(event, FailedEvent):
            click.echo("")
            return "", event.message
    return "", None


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Also write debug logs to this file",
)
@click.option("--verbose", is_flag=True, help="Verbose output")
def cli(log_file: Optional[Path], verbose: bool) -> None:
    """yt2blog - turn YouTube transcripts into SEO blog articles"""
    if verbose:
        logger.set_console_level(logging.DEBUG)
    if log_file:
        enable_file_logging(log_file)
    logger.debug("[cli] Starting CLI invocation", extra={"verbose": verbose})


@cli.command(name="providers")
@click.option("--json", "as_json", is_flag=True, help="Print the catalog as JSON")
def providers_cmd(as_json: bool) -> None:
    """List supported AI providers and their models"""
    descriptors = list_descriptors()
    if as_json:
        payload = [descriptor.to_catalog_entry() for descriptor in descriptors]
        click.echo(json.dumps(payload, ensure_ascii=False, indent=2))
        return

    table = Table(title="AI providers")
    table.add_column("ID", style="cyan")
    table.add_column("Name")
    table.add_column("Free tier")
    table.add_column("Default model")
    table.add_column("Models")
    for descriptor in descriptors:
        table.add_row(
            descriptor.id,
            descriptor.display_name,
            "yes" if descriptor.supports_free_tier else "no",
            descriptor.default_model,
            ", ".join(model.id for model in descriptor.models),
        )
    console.print(table)


@cli.command(name="generate")
@click.argument("transcript_file", type=str)
@click.option(
    "--provider",
    default="gemini",
    show_default=True,
    help=f"One of: {', '.join(available_providers())}",
)
@click.option("--model", default=None, help="Model id (defaults to the provider's first model)")
@click.option("--api-key", default=None, help="API key (falls back to <PROVIDER>_API_KEY)")
@click.option("--language", default=DEFAULT_OUTPUT_LANGUAGE, show_default=True, help="Article language")
@click.option("--style", default=DEFAULT_STYLE.value, show_default=True, help="Article style")
@click.option("--locale", default=None, help="Language of error messages (en, zh_TW, zh_CN)")
@click.option("--stream/--no-stream", default=False, help="Print the article while it is generated")
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write the article to this file",
)
def generate_cmd(
    transcript_file: str,
    provider: str,
    model: Optional[str],
    api_key: Optional[str],
    language: str,
    style: str,
    locale: Optional[str],
    stream: bool,
    output: Optional[Path],
) -> None:
    """Generate a blog article from TRANSCRIPT_FILE ('-' reads stdin)"""
    try:
        transcript = _read_transcript(transcript_file)
    except OSError as exc:
        _fail(f"Cannot read transcript: {exc}")
        return

    key = resolve_api_key(provider, api_key)
    request = GenerationRequest(
        transcript=transcript,
        provider=provider,
        api_key=key or "",
        model=model,
        language=language,
        style=style,
        stream=stream,
        locale=locale,
    )
    settings = load_settings()
    generator = ArticleGenerator(translator=ErrorTranslator(default_locale=settings.default_locale))
    logger.info(
        "[cli] Generating article",
        extra={"provider": provider, "model": model, "stream": stream, "output": str(output or "")},
    )

    try:
        if stream:
            article, error = asyncio.run(_stream_article(generator, request))
            if error is not None:
                _fail(error)
                return
        else:
            result: GenerationResult = asyncio.run(generator.generate(request))
            article = result.article
    except GenerationRejectedError as exc:
        hint = ""
        if exc.reason == "missing_api_key":
            hint = f" (set --api-key or {' / '.join(api_key_env_candidates(provider))})"
        _fail(exc.message + hint)
        return
    except GenerationFailedError as exc:
        _fail(exc.message)
        return

    if output:
        output.write_text(article, encoding="utf-8")
        console.print(f"[green]Article written to {escape(str(output))}[/green]")
    elif not stream:
        console.print(Markdown(article))


@cli.command(name="validate-key")
@click.option("--provider", required=True, help="Provider id")
@click.option("--api-key", default=None, help="API key (falls back to <PROVIDER>_API_KEY)")
@click.option("--model", default=None, help="Model id used for the check")
def validate_key_cmd(provider: str, api_key: Optional[str], model: Optional[str]) -> None:
    """Check whether a provider accepts an API key"""
    key = resolve_api_key(provider, api_key)
    if not key:
        _fail(f"No API key given (set --api-key or {' / '.join(api_key_env_candidates(provider))})")
        return
    try:
        valid = asyncio.run(ArticleGenerator().validate_api_key(provider, key, model))
    except UnsupportedProviderError as exc:
        _fail(str(exc))
        return
    if valid:
        console.print(f"[green]✓ {escape(provider)} API key is valid[/green]")
    else:
        _fail(f"✗ {provider} API key was rejected")


@cli.command(name="serve")
@click.option("--host", default=None, help="Bind address (default: YT2BLOG_HOST or 0.0.0.0)")
@click.option("--port", type=int, default=None, help="Port (default: PORT or 3000)")
def serve_cmd(host: Optional[str], port: Optional[int]) -> None:
    """Run the HTTP relay server"""
    import uvicorn

    from yt2blog.server.app import create_app

    settings = load_settings()
    overrides = {key: value for key, value in (("host", host), ("port", port)) if value is not None}
    if overrides:
        settings = settings.model_copy(update=overrides)
    if logger.console_level > logging.DEBUG:
        logger.set_console_level(settings.log_level)
    logger.info(
        "[cli] Starting relay server",
        extra={"host": settings.host, "port": settings.port, "env": settings.environment},
    )
    console.print(f"Serving on http://{settings.host}:{settings.port} ({settings.environment})")
    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


def main() -> None:
    """Main entry point."""
    try:
        cli()
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted[/yellow]")
        sys.exit(130)
    except SystemExit:
        raise
    except (
        RuntimeError,
        ValueError,
        TypeError,
        OSError,
        click.ClickException,
    ) as e:
        console.print(f"[red]Fatal error: {escape(str(e))}[/red]")
        logger.warning(
            "[cli] Fatal error in main CLI entrypoint: %s: %s",
            type(e).__name__,
            e,
        )
        sys.exit(1)


if __name__ == "__main__":
    main()
