"""Tests for prompt construction."""

import pytest

from yt2blog.core.constants import ArticleStyle
from yt2blog.core.prompt import build_prompt, is_chinese_language, normalize_style


@pytest.mark.parametrize("style", [style.value for style in ArticleStyle])
def test_every_style_renders_full_template(style):
    prompt = build_prompt("hello world transcript", language="English", style=style)

    assert prompt.startswith("You are a professional blog writer and SEO expert")
    assert "Output language: English" in prompt
    assert "hello world transcript" in prompt
    assert "# heading" in prompt
    assert "## and ### headings" in prompt
    assert "**bold**" in prompt
    assert prompt.rstrip().endswith("Markdown format:")


def test_unknown_style_falls_back_to_professional():
    assert build_prompt("t", language="English", style="poetic") == build_prompt(
        "t", language="English", style="professional"
    )
    assert normalize_style(None) is ArticleStyle.PROFESSIONAL
    assert normalize_style("casual") is ArticleStyle.CASUAL


@pytest.mark.parametrize("style", ["CASUAL", " news ", "Technical", ""])
def test_style_keys_are_matched_exactly(style):
    assert normalize_style(style) is ArticleStyle.PROFESSIONAL
    assert build_prompt("t", language="English", style=style) == build_prompt(
        "t", language="English", style="professional"
    )


def test_style_descriptions_differ():
    casual = build_prompt("t", language="English", style="casual")
    news = build_prompt("t", language="English", style="news")

    assert "Article style: relaxed and conversational" in casual
    assert "Article style: news report" in news


def test_default_language_uses_chinese_instructions():
    prompt = build_prompt("字幕內容")

    assert prompt.startswith("你是一位專業的部落格作家和 SEO 專家")
    assert "文章風格：專業且正式" in prompt
    assert "輸出語言：繁體中文" in prompt
    assert "原始文字稿：\n字幕內容" in prompt


def test_instruction_locale_is_independent_of_transcript_language():
    prompt = build_prompt("字幕內容", language="日本語", style="technical")

    assert prompt.startswith("You are a professional blog writer")
    assert "Output language: 日本語" in prompt
    assert "字幕內容" in prompt


@pytest.mark.parametrize(
    "language,expected",
    [
        ("繁體中文", True),
        ("简体中文", True),
        ("Chinese (Traditional)", True),
        ("Mandarin", True),
        ("zh", True),
        ("zh-TW", True),
        ("zh_CN", True),
        ("English", False),
        ("日本語", False),
        ("zulu", False),
        ("", False),
        (None, False),
    ],
)
def test_is_chinese_language(language, expected):
    assert is_chinese_language(language) is expected


def test_prompt_is_deterministic():
    assert build_prompt("abc", "English", "news") == build_prompt("abc", "English", "news")
