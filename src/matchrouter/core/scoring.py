"""Edit-distance similarity scoring."""

from __future__ import annotations

from collections.abc import Sequence


def levenshtein(a: Sequence[object], b: Sequence[object]) -> int:
    """Classic dynamic-programming edit distance.

    Builds a (len(b) + 1) x (len(a) + 1) cost table; insertion, deletion and
    substitution each cost 1.
    """
    table = [[0] * (len(a) + 1) for _ in range(len(b) + 1)]

    for i in range(len(a) + 1):
        table[0][i] = i
    for j in range(len(b) + 1):
        table[j][0] = j

    for j in range(1, len(b) + 1):
        for i in range(1, len(a) + 1):
            cost = 0 if a[i - 1] == b[j - 1] else 1
            table[j][i] = min(
                table[j][i - 1] + 1,
                table[j - 1][i] + 1,
                table[j - 1][i - 1] + cost,
            )

    return table[len(b)][len(a)]


def similarity(a: Sequence[object], b: Sequence[object]) -> float:
    """Normalized closeness in [0, 1]: ``1 - distance / max(len(a), len(b))``.

    Two empty sequences are identical and score 1.
    """
    longest = max(len(a), len(b))
    if longest == 0:
        return 1.0
    return 1 - levenshtein(a, b) / longest
