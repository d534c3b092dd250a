"""Shared text normalization helpers."""

from __future__ import annotations

import re
import unicodedata
from collections import Counter
from typing import Dict, List

LABEL_MAX_LEN = 28

STOP_WORDS = frozenset(
    {
        "a",
        "an",
        "and",
        "are",
        "as",
        "at",
        "be",
        "but",
        "by",
        "for",
        "from",
        "has",
        "have",
        "in",
        "is",
        "it",
        "its",
        "of",
        "on",
        "or",
        "the",
        "to",
        "was",
        "with",
        "via",
        "that",
        "this",
        "your",
        "you",
        "me",
        "we",
        "our",
        "they",
        "their",
        "them",
        "http",
        "https",
        "www",
    }
)

# Checked in order; a token may lose more than one suffix ("testers" -> "test").
STEM_SUFFIXES = ("ing", "ers", "er", "ed", "es", "s")

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def deburr(value: str) -> str:
    """Strip accents: NFD-decompose, drop combining marks, recompose."""
    decomposed = unicodedata.normalize("NFD", value or "")
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return unicodedata.normalize("NFC", stripped)


def truncate_label(label: str, max_len: int = LABEL_MAX_LEN) -> str:
    trimmed = re.sub(r"\s+", " ", (label or "").strip())
    if len(trimmed) <= max_len:
        return trimmed
    return f"{trimmed[: max(1, max_len - 3)]}…"


def stem_token(token: str) -> str:
    if len(token) <= 3:
        return token
    for suffix in STEM_SUFFIXES:
        if token.endswith(suffix):
            token = token[: -len(suffix)]
    return token


def tokenize(text: str) -> List[str]:
    normalized = deburr((text or "").lower())
    return [tok for tok in _NON_ALNUM.sub(" ", normalized).split() if tok]


def build_token_frequency(title: str, host: str, path: str) -> Dict[str, int]:
    """Stemmed, stop-word-filtered token counts over host, path and title."""
    text = f"{(host or '').replace('.', ' ')} {(path or '').replace('/', ' ')} {title or ''}"
    freq: Counter = Counter()
    for token in tokenize(text):
        if token in STOP_WORDS:
            continue
        token = stem_token(token)
        if not token or token in STOP_WORDS:
            continue
        freq[token] += 1
    return dict(freq)
