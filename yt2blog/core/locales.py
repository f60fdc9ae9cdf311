"""Localized user-facing message catalogs."""

from __future__ import annotations

from typing import Any, Dict, Optional

from yt2blog.core.constants import DEFAULT_LOCALE, SUPPORTED_LOCALES

_LOCALE_ALIASES: Dict[str, str] = {
    "en": "en",
    "en_us": "en",
    "en_gb": "en",
    "english": "en",
    "zh_tw": "zh_TW",
    "zh_hk": "zh_TW",
    "zh_hant": "zh_TW",
    "zh_cn": "zh_CN",
    "zh_sg": "zh_CN",
    "zh_hans": "zh_CN",
    "zh": "zh_TW",
}

# Error templates keyed by category value. ``{provider}`` is the provider's
# display name; ``{excerpt}`` is the (possibly truncated) raw vendor message.
ERROR_TEMPLATES: Dict[str, Dict[str, str]] = {
    "en": {
        "quota": (
            "❌ {provider} Quota Exceeded (429)\n\n"
            "Possible reasons:\n"
            "1. Free API usage limit reached\n"
            "2. Insufficient account credits\n\n"
            "Suggestions:\n"
            "• Wait a few minutes and try again\n"
            "• Switch to another AI provider (e.g., Groq or Gemini)"
        ),
        "auth": (
            "❌ Invalid API Key or Insufficient Permissions\n\n"
            "Please check your {provider} API Key.\n\n"
            "• Ensure no extra spaces\n"
            "• Confirm the key hasn't expired\n"
            "• Click 'Get API Key' to apply for a new one"
        ),
        "model-not-found": (
            "❌ Model Not Found or No Permission\n\n"
            "The selected model may not be available for your account type.\n"
            "Try switching to a different model."
        ),
        "overloaded": (
            "❌ {provider} System Busy\n\n"
            "The AI server is currently overloaded.\n"
            "Please wait a moment and try again."
        ),
        "safety-filtered": (
            "❌ Content Blocked by AI Safety Filter\n\n"
            "The video content may contain topics that {provider} considers "
            "sensitive, so it refused to generate."
        ),
        "network": (
            "❌ Network Connection Error\n\n"
            "Unable to connect to the {provider} server.\n"
            "Please check your network or firewall/VPN settings."
        ),
        "unexpected": (
            "❌ Unexpected Error\n\n"
            "Please retry or switch to another provider.\n"
            "(System error: {excerpt}...)"
        ),
        "other": "❌ An error occurred: {excerpt}",
    },
    "zh_TW": {
        "quota": (
            "❌ {provider} 配額已達上限 (429)\n\n"
            "原因可能是：\n"
            "1. 免費版 API 使用次數/速度已達限制\n"
            "2. 帳戶額度不足\n\n"
            "建議採取行動：\n"
            "• 稍等幾分鐘後再試 (通常每分鐘限制會重置)\n"
            "• 切換到其他 AI 供應商 (如 Groq 或 Gemini)"
        ),
        "auth": (
            "❌ API Key 無效或權限不足\n\n"
            "請檢查您輸入的 {provider} API Key 是否正確。\n\n"
            "• 確認沒有多餘的空白\n"
            "• 確認 Key 是否已過期\n"
            "• 您可以點擊「取得 API Key」連結重新申請"
        ),
        "model-not-found": (
            "❌ 找不到模型或無權限\n\n"
            "您選擇的模型可能不支援您的帳號類別，或已停用。\n"
            "請嘗試切換該供應商底下的其他模型 (例如從 Pro 切換為 Flash)。"
        ),
        "overloaded": (
            "❌ {provider} 系統繁忙\n\n"
            "AI 服務器目前負載過高，暫時無法回應。\n"
            "請稍等片刻再試。"
        ),
        "safety-filtered": (
            "❌ 內容被 AI 安全機制攔截\n\n"
            "影片內容可能包含 {provider} 判定為敏感或不安全的議題，因此拒絕生成。"
        ),
        "network": (
            "❌ 網路連線錯誤\n\n"
            "無法連接到 {provider} 伺服器。\n"
            "請檢查網路狀態，或確認防火牆/VPN 設定。"
        ),
        "unexpected": (
            "❌ 發生未預期的錯誤\n\n"
            "請重試或切換其他供應商。\n"
            "(系統錯誤: {excerpt}...)"
        ),
        "other": "❌ 發生錯誤: {excerpt}",
    },
    "zh_CN": {
        "quota": (
            "❌ {provider} 配额已达上限 (429)\n\n"
            "原因可能是：\n"
            "1. 免费版 API 使用次数/速度已达限制\n"
            "2. 账户额度不足\n\n"
            "建议采取行动：\n"
            "• 稍等几分钟后再试 (通常每分钟限制会重置)\n"
            "• 切换到其他 AI 供应商 (如 Groq 或 Gemini)"
        ),
        "auth": (
            "❌ API Key 无效或权限不足\n\n"
            "请检查您输入的 {provider} API Key 是否正确。\n\n"
            "• 确认没有多余的空格\n"
            "• 确认 Key 是否已过期\n"
            "• 您可以点击「获取 API Key」链接重新申请"
        ),
        "model-not-found": (
            "❌ 找不到模型或无权限\n\n"
            "您选择的模型可能不支持您的账号类别，或已停用。\n"
            "请尝试切换该供应商下的其他模型 (例如从 Pro 切换为 Flash)。"
        ),
        "overloaded": (
            "❌ {provider} 系统繁忙\n\n"
            "AI 服务器目前负载过高，暂时无法响应。\n"
            "请稍等片刻再试。"
        ),
        "safety-filtered": (
            "❌ 内容被 AI 安全机制拦截\n\n"
            "视频内容可能包含 {provider} 判定为敏感或不安全的议题，因此拒绝生成。"
        ),
        "network": (
            "❌ 网络连接错误\n\n"
            "无法连接到 {provider} 服务器。\n"
            "请检查网络状态，或确认防火墙/VPN 设置。"
        ),
        "unexpected": (
            "❌ 发生未预期的错误\n\n"
            "请重试或切换其他供应商。\n"
            "(系统错误: {excerpt}...)"
        ),
        "other": "❌ 发生错误: {excerpt}",
    },
}

VALIDATION_MESSAGES: Dict[str, Dict[str, str]] = {
    "en": {
        "missing_transcript": "Transcript content is required",
        "missing_api_key": "API key is required",
        "unsupported_provider": "Unsupported AI provider: {provider}",
        "generation_failed": "Generation failed",
        "internal_error": "Internal server error",
    },
    "zh_TW": {
        "missing_transcript": "缺少文字稿內容",
        "missing_api_key": "缺少 API 密鑰",
        "unsupported_provider": "不支援的 AI 供應商: {provider}",
        "generation_failed": "生成失敗",
        "internal_error": "服務器錯誤",
    },
    "zh_CN": {
        "missing_transcript": "缺少文字稿内容",
        "missing_api_key": "缺少 API 密钥",
        "unsupported_provider": "不支持的 AI 供应商: {provider}",
        "generation_failed": "生成失败",
        "internal_error": "服务器错误",
    },
}


def normalize_locale(locale: Optional[str], default: str = DEFAULT_LOCALE) -> str:
    """Map tags like ``zh-TW``, ``zh_Hant`` or ``en-US`` to a supported locale.

    Anything unrecognized resolves to ``default``.
    """
    if not locale:
        return default
    parts = str(locale).strip().replace("-", "_").lower().split("_")
    # Try the most specific tag first: zh_hans_cn, zh_hans, zh.
    for end in range(len(parts), 0, -1):
        resolved = _LOCALE_ALIASES.get("_".join(parts[:end]))
        if resolved in SUPPORTED_LOCALES:
            return resolved
    return default


def get_message(key: str, locale: Optional[str] = None, **kwargs: Any) -> str:
    """Return a localized validation/server message, formatted with ``kwargs``."""
    catalog = VALIDATION_MESSAGES[normalize_locale(locale)]
    template = catalog.get(key) or VALIDATION_MESSAGES[DEFAULT_LOCALE].get(key, key)
    try:
        return template.format(**kwargs)
    except (KeyError, IndexError):
        return template
