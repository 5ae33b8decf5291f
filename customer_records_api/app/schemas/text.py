"""Shared validation for free-text fields."""

from typing import Optional


def ensure_utf8(value: Optional[str]) -> Optional[str]:
    """Reject text that cannot be encoded as UTF-8 (e.g. lone surrogates).

    JSON allows escapes such as ``"\\ud800"`` that decode to a string the
    database driver cannot bind, so such input is refused up front.
    """
    if value is None:
        return value
    try:
        value.encode("utf-8")
    except UnicodeEncodeError:
        raise ValueError("text must be valid UTF-8")
    return value
