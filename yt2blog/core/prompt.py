"""Prompt construction for transcript-to-article generation."""

from __future__ import annotations

from textwrap import dedent
from typing import Dict, Optional

from yt2blog.core.constants import DEFAULT_OUTPUT_LANGUAGE, DEFAULT_STYLE, ArticleStyle

_CHINESE_LANGUAGE_HINTS = ("中文", "漢語", "汉语", "chinese", "mandarin")

_STYLE_DESCRIPTIONS_ZH: Dict[ArticleStyle, str] = {
    ArticleStyle.PROFESSIONAL: "專業且正式",
    ArticleStyle.CASUAL: "輕鬆且口語化",
    ArticleStyle.TECHNICAL: "技術性且詳細",
    ArticleStyle.NEWS: "新聞報導風格",
}

_STYLE_DESCRIPTIONS_EN: Dict[ArticleStyle, str] = {
    ArticleStyle.PROFESSIONAL: "professional and formal",
    ArticleStyle.CASUAL: "relaxed and conversational",
    ArticleStyle.TECHNICAL: "technical and detailed",
    ArticleStyle.NEWS: "news report",
}

_TEMPLATE_ZH = dedent(
    """\
    你是一位專業的部落格作家和 SEO 專家。請將以下 YouTube 視頻文字稿轉換為一篇格式完美、SEO 優化的部落格文章。

    文章風格：{style}
    輸出語言：{language}

    要求：
    1. 創建一個吸引人的標題（使用 # 標題格式）
    2. 撰寫引人入勝的開頭段落
    3. 將內容組織成清晰的章節（使用 ## 和 ### 標題）
    4. 使用項目符號和編號列表來提高可讀性
    5. 在適當的地方添加重點強調（使用 **粗體**）
    6. 撰寫一個總結段落
    7. 確保語言流暢、專業且易於理解
    8. 優化 SEO 關鍵字的使用

    原始文字稿：
    {transcript}

    請生成完整的 Markdown 格式部落格文章："""
)

_TEMPLATE_EN = dedent(
    """\
    You are a professional blog writer and SEO expert. Convert the following YouTube video transcript into a well-formatted, SEO-optimized blog article.

    Article style: {style}
    Output language: {language}

    Requirements:
    1. Create a catchy title (use a # heading)
    2. Write an engaging opening paragraph
    3. Organize the content into clear sections (use ## and ### headings)
    4. Use bullet points and numbered lists to improve readability
    5. Add emphasis where appropriate (use **bold**)
    6. Write a closing summary paragraph
    7. Keep the language fluent, professional and easy to understand
    8. Make good use of SEO keywords

    Original transcript:
    {transcript}

    Generate the complete blog article in Markdown format:"""
)


def normalize_style(style: Optional[str]) -> ArticleStyle:
    """Map a user supplied style key to an ``ArticleStyle``.

    Keys match exactly; anything else, including ``"CASUAL"``, falls back to
    ``professional`` without raising.
    """
    if isinstance(style, ArticleStyle):
        return style
    try:
        return ArticleStyle(style)
    except ValueError:
        return DEFAULT_STYLE


def is_chinese_language(language: Optional[str]) -> bool:
    """Return True when the requested output language is a Chinese variant."""
    lowered = (language or "").strip().lower()
    if not lowered:
        return False
    if lowered == "zh" or lowered.startswith(("zh-", "zh_")):
        return True
    return any(hint in lowered for hint in _CHINESE_LANGUAGE_HINTS)


def build_prompt(
    transcript: str,
    language: str = DEFAULT_OUTPUT_LANGUAGE,
    style: Optional[str] = DEFAULT_STYLE.value,
) -> str:
    """Build the instruction prompt sent to every provider.

    The instructions are written in Chinese when the article itself should be
    Chinese and in English otherwise; ``language`` is still passed through
    verbatim as the requested output language.
    """
    article_style = normalize_style(style)
    language = language or DEFAULT_OUTPUT_LANGUAGE
    if is_chinese_language(language):
        template = _TEMPLATE_ZH
        style_desc = _STYLE_DESCRIPTIONS_ZH[article_style]
    else:
        template = _TEMPLATE_EN
        style_desc = _STYLE_DESCRIPTIONS_EN[article_style]
    return template.format(style=style_desc, language=language, transcript=transcript)
