"""
Copyright (c) 2026 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/normalizer.py
Normalizes tag strings (title, artist, album) so that cosmetic differences
do not prevent two recordings from matching.
"""

import re
from functools import lru_cache
from typing import Optional

# Pre-compiled regex patterns (performance optimization)
_PATTERN_BRACKETS = re.compile(r'\([^)]*\)|\[[^\]]*\]|\{[^}]*\}')
_PATTERN_STRAY_BRACKETS = re.compile(r'[()\[\]{}]')
_PATTERN_SYMBOLS = re.compile(r'[\'"/=\-,.:;\n\t<>^`&%$£@#!?§°*+]')
_PATTERN_SPACES = re.compile(r' {2,}')


@lru_cache(maxsize=8192)
def normalize_string(value: str) -> str:
    """
    Normalize a tag value for comparison.

    Normalization rules:
    - Convert to lowercase
    - Remove bracketed annotations: (Live), [Remix], {Demo}
    - Remove a fixed set of punctuation and symbols
    - Collapse runs of spaces into one space
    - Drop a single trailing space

    Examples:
        "Test (Live)"          → "test"
        "test   live"          → "test live"
        "Don't Stop [Remix]"   → "dont stop"
        "AC/DC"                → "acdc"
    """
    if not value:
        return ""

    text = value.lower()

    # Step 1: Remove bracket content, then any unbalanced bracket characters
    text = _PATTERN_BRACKETS.sub('', text)
    text = _PATTERN_STRAY_BRACKETS.sub('', text)

    # Step 2: Remove punctuation and symbols
    text = _PATTERN_SYMBOLS.sub('', text)

    # Step 3: Collapse spaces, trim one trailing space
    text = _PATTERN_SPACES.sub(' ', text)
    if text.endswith(' '):
        text = text[:-1]

    return text


def normalize_optional(value: Optional[str]) -> str:
    """normalize_string that maps None to ""."""
    if value is None:
        return ""
    return normalize_string(value)
