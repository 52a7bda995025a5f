"""Word counts, reading time and tiktoken token counts."""

from __future__ import annotations

import math
import re
from typing import Any

import tiktoken

from ..config import TIKTOKEN_ENCODING, WORDS_PER_MINUTE
from .blocks import strip_code_blocks

WORD_PATTERN = re.compile(r"[\w'’-]+")

# Lazy-loaded encoder
_encoder: Any | None = None


def get_encoder() -> Any:
    """Get or create the tiktoken encoder.

    The first call may download the encoding file.
    """
    global _encoder
    if _encoder is None:
        _encoder = tiktoken.get_encoding(TIKTOKEN_ENCODING)
    return _encoder


def count_tokens(text: str) -> int:
    """Count cl100k_base tokens in text."""
    return len(get_encoder().encode(text))


def count_words(body: str) -> int:
    """Count prose words, ignoring fenced code blocks."""
    return len(WORD_PATTERN.findall(strip_code_blocks(body)))


def reading_minutes(body: str) -> int:
    """Estimated reading time in whole minutes (at least 1)."""
    return max(1, math.ceil(count_words(body) / WORDS_PER_MINUTE))
