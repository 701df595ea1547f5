"""Input cleanup for names and rich-text descriptions."""

import re

_STRIP_BLOCKS = [
    re.compile(rf"<{tag}\b[^<]*(?:(?!</{tag}>)<[^<]*)*</{tag}>", re.IGNORECASE)
    for tag in ("script", "iframe", "object", "embed", "form", "button",
                "select", "textarea", "style", "title")
]
_STRIP_VOID = re.compile(r"<(?:input|link|meta)\b[^>]*>", re.IGNORECASE)
_UNWRAP = re.compile(r"</?(?:html|head|body)\b[^>]*>", re.IGNORECASE)
_EVENT_HANDLER = re.compile(r"""\s*(?<![\w-])on\w+\s*=\s*(?:"[^"]*"|'[^']*'|[^\s>]+)""", re.IGNORECASE)
_JS_URL = re.compile(r"javascript:", re.IGNORECASE)
_NON_IMAGE_DATA_URL = re.compile(r"data:(?!image/)", re.IGNORECASE)
_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]")


def sanitize_html(html: str | None) -> str:
    """Drop scripting and form markup from editor HTML, keeping basic formatting."""
    if not html:
        return ""
    cleaned = html
    for pattern in _STRIP_BLOCKS:
        cleaned = pattern.sub("", cleaned)
    cleaned = _STRIP_VOID.sub("", cleaned)
    cleaned = _UNWRAP.sub("", cleaned)
    cleaned = _EVENT_HANDLER.sub("", cleaned)
    cleaned = _JS_URL.sub("", cleaned)
    cleaned = _NON_IMAGE_DATA_URL.sub("", cleaned)
    return cleaned


def sanitize_input(value: str | None) -> str:
    """Strip control characters (tabs and newlines survive) and surrounding whitespace."""
    if not value:
        return ""
    return _CONTROL_CHARS.sub("", value).strip()
