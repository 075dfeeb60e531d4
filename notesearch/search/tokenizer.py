"""Shared tokenizer.

Every strategy, the vector model and the analytics read text through
``tokenize``; changing its rules changes every downstream score.
"""

from __future__ import annotations

import re

_NON_WORD_RE = re.compile(r"[^\w\s]")
_MIN_TOKEN_LENGTH = 3


def tokenize(text: str | None) -> list[str]:
    """Lower-case *text*, drop punctuation, split on whitespace.

    Tokens of two characters or fewer are discarded.

    >>> tokenize("Hello, World! It's a test.")
    ['hello', 'world', 'its', 'test']
    """
    if not text:
        return []
    cleaned = _NON_WORD_RE.sub("", text.lower())
    return [token for token in cleaned.split() if len(token) >= _MIN_TOKEN_LENGTH]
