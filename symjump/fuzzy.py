"""Order-preserving query filter for picker labels."""

from __future__ import annotations

from collections.abc import Sequence


def is_subsequence(query: str, candidate: str) -> bool:
    """Return whether every character of ``query`` appears in order in ``candidate``."""
    position = 0
    for needle in query:
        position = candidate.find(needle, position)
        if position < 0:
            return False
        position += 1
    return True


def filter_labels(query: str, labels: Sequence[str], limit: int = 200) -> list[int]:
    """Return indices of ``labels`` matching ``query``, in label order.

    Matching ignores case. Labels containing ``query`` verbatim win; the
    looser in-order subsequence match is used only when none does.
    """
    max_results = max(1, limit)
    if not query:
        return list(range(min(len(labels), max_results)))

    needle = query.casefold()
    folded = [label.casefold() for label in labels]
    matches = [idx for idx, label in enumerate(folded) if needle in label]
    if not matches:
        matches = [idx for idx, label in enumerate(folded) if is_subsequence(needle, label)]
    return matches[:max_results]
