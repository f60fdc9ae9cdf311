"""
yt2blog - YouTube transcript to SEO blog article converter

Turns a video transcript into a Markdown blog post using one of several
interchangeable LLM providers.

Features:
- Nine providers behind one adapter contract (Gemini, OpenAI, Anthropic, Groq,
  DeepSeek, Zhipu, Moonshot, Mistral, Cohere)
- Buffered or streamed generation
- Localized, actionable error messages
- FastAPI relay server and a command-line interface

Quick Start:
    pip install -e .
    yt2blog generate transcript.txt --provider gemini
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
