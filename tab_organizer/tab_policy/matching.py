"""Shared hostname and pattern matching helpers."""

from __future__ import annotations

import re
from typing import Optional, Pattern

# JS-style flag letters accepted in user rules; unknown letters ("g", "u", "y") are ignored.
_FLAG_LETTERS = {
    "i": re.IGNORECASE,
    "m": re.MULTILINE,
    "s": re.DOTALL,
}


def host_matches_base(
    host: str,
    base: str,
    *,
    enable_suffix: bool = True,
    strip_www_host: bool = False,
) -> bool:
    host_norm = str(host or "").strip().lower()
    base_norm = str(base or "").strip().lower()
    if not host_norm or not base_norm:
        return False

    if strip_www_host and host_norm.startswith("www."):
        host_norm = host_norm[4:]

    if host_norm == base_norm:
        return True
    return bool(enable_suffix and host_norm.endswith("." + base_norm))


def host_pattern(host: str) -> Pattern[str]:
    """Match `host` itself or any of its subdomains."""
    return re.compile(rf"(?:^|\.){re.escape(host.strip().lower())}$", re.IGNORECASE)


def regex_flags(flags: Optional[str]) -> int:
    value = 0
    for letter in str(flags if flags is not None else "i"):
        value |= _FLAG_LETTERS.get(letter, 0)
    return value


def compile_pattern(pattern: str, flags: Optional[str] = "i") -> Optional[Pattern[str]]:
    """Compile a rule pattern; returns None for empty or invalid expressions."""
    text = str(pattern or "").strip()
    if not text:
        return None
    try:
        return re.compile(text, regex_flags(flags))
    except re.error:
        return None
