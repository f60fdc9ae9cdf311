"""CLI tests using click's CliRunner."""

from __future__ import annotations

import json

import pytest
import uvicorn
from click.testing import CliRunner

from yt2blog import __version__
from yt2blog.cli import cli as cli_module
from yt2blog.core.providers.errors import ProviderRateLimitError


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def use_scripted(monkeypatch, scripted_generator):
    """Route every ArticleGenerator the CLI builds to the scripted generator."""
    monkeypatch.setattr(cli_module, "ArticleGenerator", lambda *args, **kwargs: scripted_generator)
    for env_var in ("SCRIPTED_API_KEY", "YT2BLOG_DEFAULT_LOCALE"):
        monkeypatch.delenv(env_var, raising=False)
    return scripted_generator


@pytest.fixture
def transcript_file(tmp_path):
    path = tmp_path / "transcript.txt"
    path.write_text("Hello everyone, today we review a keyboard.", encoding="utf-8")
    return path


def test_version(runner):
    result = runner.invoke(cli_module.cli, ["--version"])

    assert result.exit_code == 0
    assert __version__ in result.output


def test_providers_json(runner):
    result = runner.invoke(cli_module.cli, ["providers", "--json"])

    assert result.exit_code == 0
    catalog = json.loads(result.output)
    assert catalog[0]["providerId"] == "gemini"
    assert len(catalog) == 9


def test_providers_table(runner):
    result = runner.invoke(cli_module.cli, ["providers"])

    assert result.exit_code == 0
    assert "deepseek" in result.output


def test_generate_to_file(runner, use_scripted, scripted_client_cls, transcript_file, tmp_path):
    output = tmp_path / "article.md"

    result = runner.invoke(
        cli_module.cli,
        [
            "generate",
            str(transcript_file),
            "--provider",
            "scripted",
            "--api-key",
            "k",
            "--language",
            "English",
            "-o",
            str(output),
        ],
    )

    assert result.exit_code == 0, result.output
    assert output.read_text(encoding="utf-8") == "# Title\n\nIntro paragraph. Summary."
    assert "Article written to" in result.output
    assert "today we review a keyboard" in scripted_client_cls.calls[0]["prompt"]


def test_generate_prints_markdown(runner, use_scripted, transcript_file):
    result = runner.invoke(
        cli_module.cli,
        ["generate", str(transcript_file), "--provider", "scripted", "--api-key", "k"],
    )

    assert result.exit_code == 0, result.output
    assert "Intro paragraph." in result.output


def test_generate_stream_from_stdin(runner, use_scripted, scripted_client_cls):
    result = runner.invoke(
        cli_module.cli,
        ["generate", "-", "--provider", "scripted", "--api-key", "k", "--stream"],
        input="a transcript piped in",
    )

    assert result.exit_code == 0, result.output
    assert "# Title\n\nIntro paragraph. Summary." in result.output
    assert scripted_client_cls.calls[0]["stream"] is True
    assert "a transcript piped in" in scripted_client_cls.calls[0]["prompt"]


def test_generate_reads_key_from_environment(runner, use_scripted, monkeypatch, transcript_file):
    monkeypatch.setenv("SCRIPTED_API_KEY", "from-env")

    result = runner.invoke(cli_module.cli, ["generate", str(transcript_file), "--provider", "scripted"])

    assert result.exit_code == 0, result.output


def test_generate_missing_key_hints_env_var(runner, use_scripted, transcript_file):
    result = runner.invoke(cli_module.cli, ["generate", str(transcript_file), "--provider", "scripted"])

    assert result.exit_code == 1
    assert "API key is required" in result.output
    assert "SCRIPTED_API_KEY" in result.output


def test_generate_failure_exits_nonzero(runner, use_scripted, scripted_client_cls, transcript_file):
    scripted_client_cls.error = ProviderRateLimitError("Rate limit exceeded (429): slow down")

    result = runner.invoke(
        cli_module.cli,
        ["generate", str(transcript_file), "--provider", "scripted", "--api-key", "k", "--locale", "en"],
    )

    assert result.exit_code == 1
    assert "Quota Exceeded" in result.output


def test_generate_stream_failure_exits_nonzero(runner, use_scripted, scripted_client_cls, transcript_file):
    scripted_client_cls.error = ConnectionError("network down")

    result = runner.invoke(
        cli_module.cli,
        ["generate", str(transcript_file), "--provider", "scripted", "--api-key", "k", "--stream"],
    )

    assert result.exit_code == 1
    assert "Summary." in result.output


def test_generate_missing_file(runner, use_scripted, tmp_path):
    result = runner.invoke(cli_module.cli, ["generate", str(tmp_path / "nope.txt"), "--api-key", "k"])

    assert result.exit_code == 1
    assert "Cannot read transcript" in result.output


def test_validate_key(runner, use_scripted, scripted_client_cls):
    ok = runner.invoke(cli_module.cli, ["validate-key", "--provider", "scripted", "--api-key", "k"])
    assert ok.exit_code == 0
    assert "API key is valid" in ok.output

    scripted_client_cls.key_is_valid = False
    rejected = runner.invoke(cli_module.cli, ["validate-key", "--provider", "scripted", "--api-key", "k"])
    assert rejected.exit_code == 1
    assert "was rejected" in rejected.output


def test_validate_key_unknown_provider(runner, use_scripted):
    result = runner.invoke(cli_module.cli, ["validate-key", "--provider", "llama-farm", "--api-key", "k"])

    assert result.exit_code == 1
    assert "Unsupported provider: llama-farm" in result.output


def test_serve_runs_uvicorn(runner, monkeypatch):
    calls = []
    monkeypatch.setattr(uvicorn, "run", lambda app, **kwargs: calls.append((app, kwargs)))
    monkeypatch.delenv("YT2BLOG_LOG_LEVEL", raising=False)

    result = runner.invoke(cli_module.cli, ["serve", "--host", "127.0.0.1", "--port", "8123"])

    assert result.exit_code == 0, result.output
    app, kwargs = calls[0]
    assert kwargs == {"host": "127.0.0.1", "port": 8123, "log_level": "warning"}
    assert app.state.settings.port == 8123
