import re
from typing import Any, Optional

_HTML_TAG_RE = re.compile(r"<[^>]*>")

MAX_TEXT_LEN = 256
MAX_LABEL_LEN = 128
MAX_ADDRESS_LEN = 128


def is_safe_text(value: Optional[str], max_len: int = MAX_TEXT_LEN) -> bool:
    if value is None:
        return False
    text = str(value)
    if len(text) == 0 or len(text) > max_len:
        return False
    for ch in text:
        code = ord(ch)
        if code < 32 or code == 127:
            return False
    return True


def strip_html(value: Optional[str]) -> str:
    if value is None:
        return ""
    return _HTML_TAG_RE.sub("", str(value))


def sanitize_label(value: Optional[str], max_len: int = MAX_LABEL_LEN) -> str:
    """Strip HTML, remove control chars and enforce length."""
    text = strip_html(value)
    cleaned = []
    for ch in text:
        code = ord(ch)
        if code < 32 or code == 127:
            continue
        cleaned.append(ch)
    return "".join(cleaned)[:max_len]


def is_valid_address_key(addr: Any) -> bool:
    return isinstance(addr, str) and is_safe_text(addr, max_len=MAX_ADDRESS_LEN)


def parse_int(value: Any, default: Optional[int] = None) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default
