"""Shannon entropy calculator and token extraction."""

from __future__ import annotations

import math
import re
from collections import Counter
from typing import Iterable, List, Tuple

from leaksweep.rules.models import EntropyRange

# Tokens are separated by whitespace and quote characters.
_TOKEN_SPLIT_RE = re.compile(r"""[\s"'`]+""")


def shannon_entropy(s: str) -> float:
    """Compute Shannon entropy (bits per character) of string *s*.

    H = -Σ p(c) · log₂(p(c))  over unique characters c.
    """
    if not s:
        return 0.0
    counts = Counter(s)
    total = len(s)
    return -sum((c / total) * math.log2(c / total) for c in counts.values())


def tokenize(line: str) -> List[str]:
    """Split *line* on whitespace and quotes, dropping empty pieces."""
    return [tok for tok in _TOKEN_SPLIT_RE.split(line) if tok]


def find_in_ranges(
    line: str, ranges: Iterable[EntropyRange]
) -> List[Tuple[str, float]]:
    """Return (token, entropy) pairs whose entropy falls inside any range."""
    ranges = tuple(ranges)
    results: List[Tuple[str, float]] = []
    for token in tokenize(line):
        h = shannon_entropy(token)
        if any(h in r for r in ranges):
            results.append((token, h))
    return results
