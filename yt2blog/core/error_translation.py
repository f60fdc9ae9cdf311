"""Turn raw vendor error text into short, localized, actionable messages.

Classification is a fixed list of substring rules evaluated in order; the
first match wins. The order matters: ``"401 ... model ... not found"`` is an
auth problem, not a missing model.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Sequence, Tuple

from yt2blog.core.constants import DEFAULT_LOCALE, SUPPORTED_LOCALES
from yt2blog.core.locales import ERROR_TEMPLATES, normalize_locale
from yt2blog.utils.log import get_logger

logger = get_logger()


class ErrorCategory(str, Enum):
    QUOTA = "quota"
    AUTH = "auth"
    MODEL_NOT_FOUND = "model-not-found"
    OVERLOADED = "overloaded"
    SAFETY_FILTERED = "safety-filtered"
    NETWORK = "network"
    UNEXPECTED = "unexpected"
    OTHER = "other"


NETWORK_HINTS: Tuple[str, ...] = ("fetch", "network", "connection")
# The browser extension also treats CSP/"security" failures as network trouble.
EXTENSION_NETWORK_HINTS: Tuple[str, ...] = NETWORK_HINTS + ("security",)

UNEXPECTED_EXCERPT_LENGTH = 50
LONG_MESSAGE_THRESHOLD = 150
FALLBACK_PROVIDER_NAME = "AI"

# Status prefix adapters put in front of the vendor body, e.g. "API error (500): ".
_ADAPTER_PREFIX = re.compile(r"^[A-Za-z ]+(?:\(\d+\))?:\s*")


@dataclass(frozen=True)
class ClassifiedError:
    category: ErrorCategory
    provider_name: str
    original_message_excerpt: str


def _contains_any(text: str, needles: Sequence[str]) -> bool:
    return any(needle in text for needle in needles)


class ErrorTranslator:
    """Classify and render provider failures.

    Args:
        network_hints: substrings that mark a network failure.
        default_locale: locale used when the caller's locale is unknown.
    """

    def __init__(
        self,
        network_hints: Sequence[str] = NETWORK_HINTS,
        default_locale: str = DEFAULT_LOCALE,
    ) -> None:
        self.network_hints = tuple(hint.lower() for hint in network_hints)
        self.default_locale = (
            default_locale if default_locale in SUPPORTED_LOCALES else DEFAULT_LOCALE
        )
        self._rules: Tuple[Tuple[ErrorCategory, Callable[[str], bool]], ...] = (
            (
                ErrorCategory.QUOTA,
                lambda m: _contains_any(m, ("429", "quota", "rate limit", "resource has been exhausted")),
            ),
            (
                ErrorCategory.AUTH,
                lambda m: _contains_any(m, ("401", "403", "unauthorized"))
                or ("api key" in m and _contains_any(m, ("invalid", "incorrect"))),
            ),
            (ErrorCategory.MODEL_NOT_FOUND, lambda m: "model" in m and "not found" in m),
            (ErrorCategory.OVERLOADED, lambda m: _contains_any(m, ("overloaded", "503"))),
            (ErrorCategory.SAFETY_FILTERED, lambda m: _contains_any(m, ("safety", "harmful", "blocked"))),
            (ErrorCategory.NETWORK, lambda m: _contains_any(m, self.network_hints)),
        )

    def classify(self, raw_message: Optional[str], provider_name: str = "") -> ClassifiedError:
        raw = str(raw_message or "")
        lowered = raw.lower()
        for category, matches in self._rules:
            if matches(lowered):
                return ClassifiedError(category, provider_name, raw[:LONG_MESSAGE_THRESHOLD])

        vendor_body = _ADAPTER_PREFIX.sub("", raw.strip(), count=1)
        # "Error:" is matched case-sensitively, like a JS/Python exception prefix.
        looks_technical = (
            len(raw) > LONG_MESSAGE_THRESHOLD
            or vendor_body.startswith("{")
            or "Error:" in raw
        )
        if looks_technical or not raw.strip():
            return ClassifiedError(
                ErrorCategory.UNEXPECTED, provider_name, raw[:UNEXPECTED_EXCERPT_LENGTH]
            )
        return ClassifiedError(ErrorCategory.OTHER, provider_name, raw)

    def render(self, classified: ClassifiedError, locale: Optional[str] = None) -> str:
        """Render ``classified`` in ``locale``; never raises."""
        resolved = normalize_locale(locale, self.default_locale)
        templates = ERROR_TEMPLATES.get(resolved) or ERROR_TEMPLATES[self.default_locale]
        try:
            category = ErrorCategory(classified.category).value
        except ValueError:
            category = ErrorCategory.OTHER.value
        template = templates.get(category) or ERROR_TEMPLATES[DEFAULT_LOCALE][category]
        return template.format(
            provider=classified.provider_name or FALLBACK_PROVIDER_NAME,
            excerpt=classified.original_message_excerpt,
        )

    def translate(
        self,
        raw_message: Optional[str],
        provider_name: str = "",
        locale: Optional[str] = None,
    ) -> str:
        classified = self.classify(raw_message, provider_name)
        logger.debug(
            "[error_translation] Classified provider error",
            extra={"category": classified.category.value, "provider": provider_name},
        )
        return self.render(classified, locale)
