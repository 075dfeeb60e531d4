"""Edit-distance strategies for the fuzzy matcher.

Provides EditDistanceStrategy (interface) and LevenshteinDistance (classic
dynamic programming with a token length cap). An indexed implementation
such as a BK-tree can replace the default without touching the matcher.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable

from notesearch.config import get_settings


class EditDistanceStrategy(ABC):
    """Abstract base class for token edit-distance measures."""

    @abstractmethod
    def distance(self, a: str, b: str) -> int:
        """Return the number of edits turning *a* into *b*."""
        ...

    def similarity(self, a: str, b: str) -> float:
        """Return ``1 - distance / max(len(a), len(b))``, or 0.0 for two empty strings."""
        longest = max(len(a), len(b))
        if longest == 0:
            return 0.0
        return 1.0 - self.distance(a, b) / longest

    def best_match_score(self, query_tokens: list[str], field_tokens: Iterable[str]) -> float:
        """Average over query tokens of the best similarity to any field token.

        Returns 0.0 when either side has no tokens.
        """
        if not query_tokens:
            return 0.0
        candidates = list(dict.fromkeys(field_tokens))
        if not candidates:
            return 0.0
        total = 0.0
        for query_token in query_tokens:
            total += max(self.similarity(query_token, candidate) for candidate in candidates)
        return total / len(query_tokens)


class LevenshteinDistance(EditDistanceStrategy):
    """Levenshtein distance by O(n*m) dynamic programming.

    Both tokens are truncated to ``max_token_length`` characters first so an
    adversarially long token costs at most ``max_token_length ** 2`` steps.

    Args:
        max_token_length: Truncation length (default from settings).
    """

    def __init__(self, max_token_length: int | None = None) -> None:
        if max_token_length is None:
            max_token_length = get_settings().MAX_TOKEN_LENGTH
        self._max_token_length = max_token_length

    def distance(self, a: str, b: str) -> int:
        a = a[: self._max_token_length]
        b = b[: self._max_token_length]
        if a == b:
            return 0
        if not a:
            return len(b)
        if not b:
            return len(a)

        previous = list(range(len(a) + 1))
        for j, char_b in enumerate(b, start=1):
            current = [j]
            for i, char_a in enumerate(a, start=1):
                cost = 0 if char_a == char_b else 1
                current.append(
                    min(
                        current[i - 1] + 1,  # insertion
                        previous[i] + 1,  # deletion
                        previous[i - 1] + cost,  # substitution
                    )
                )
            previous = current
        return previous[-1]

    def similarity(self, a: str, b: str) -> float:
        longest = max(len(a[: self._max_token_length]), len(b[: self._max_token_length]))
        if longest == 0:
            return 0.0
        return 1.0 - self.distance(a, b) / longest
