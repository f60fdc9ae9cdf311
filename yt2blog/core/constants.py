"""Shared constants: article styles and suggested output languages."""

from __future__ import annotations

from enum import Enum
from typing import Dict, Tuple


class ArticleStyle(str, Enum):
    """Writing styles understood by the prompt builder."""

    PROFESSIONAL = "professional"
    CASUAL = "casual"
    TECHNICAL = "technical"
    NEWS = "news"


DEFAULT_STYLE = ArticleStyle.PROFESSIONAL

# Output languages offered to users. Values are passed to the model verbatim.
OUTPUT_LANGUAGES: Dict[str, str] = {
    "zh_TW": "繁體中文",
    "zh_CN": "简体中文",
    "en": "English",
    "ja": "日本語",
    "ko": "한국어",
}

DEFAULT_OUTPUT_LANGUAGE = OUTPUT_LANGUAGES["zh_TW"]

SUPPORTED_LOCALES: Tuple[str, ...] = ("en", "zh_TW", "zh_CN")
DEFAULT_LOCALE = "en"
