"""Rule and entropy-range models — compiled once, immutable afterwards."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Tuple

from leaksweep.config.loader import ConfigurationError

ENTROPY_MIN = 0.0
ENTROPY_MAX = 8.0

_RANGE_RE = re.compile(
    r"^\s*(?P<low>-?\d+(?:\.\d*)?)\s*-\s*(?P<high>-?\d+(?:\.\d*)?)\s*$"
)


def compile_pattern(pattern: str, what: str) -> re.Pattern[str]:
    """Compile *pattern*, turning syntax errors into ConfigurationError."""
    try:
        return re.compile(pattern)
    except re.error as exc:
        raise ConfigurationError(f"unable to compile {what} regex {pattern!r}: {exc}") from exc


@dataclass(frozen=True)
class Rule:
    """A named pattern that positively identifies a known secret format.

    When the pattern defines a ``secret`` group, only that group is reported
    as the offending value; otherwise the whole match is.
    """

    description: str
    pattern: re.Pattern[str]
    tags: Tuple[str, ...] = ()

    @classmethod
    def from_strings(cls, description: str, regex: str, tags=()) -> "Rule":
        if not regex:
            raise ConfigurationError(f"rule {description!r} has no regex")
        return cls(
            description=description,
            pattern=compile_pattern(regex, f"rule {description!r}"),
            tags=tuple(tags),
        )


@dataclass(frozen=True)
class EntropyRange:
    """Inclusive Shannon-entropy band, in bits per character."""

    low: float
    high: float

    def __post_init__(self) -> None:
        if self.low > self.high:
            raise ConfigurationError(
                f"entropy range must be ascending: {self.low}-{self.high}"
            )
        for bound in (self.low, self.high):
            if not ENTROPY_MIN <= bound <= ENTROPY_MAX:
                raise ConfigurationError(
                    f"invalid entropy range {self.low}-{self.high}, "
                    f"must be within {ENTROPY_MIN}-{ENTROPY_MAX}"
                )

    @classmethod
    def parse(cls, text: str) -> "EntropyRange":
        """Parse ``"low-high"``, e.g. ``"4.5-8"``."""
        m = _RANGE_RE.match(text)
        if m is None:
            raise ConfigurationError(f"malformed entropy range {text!r}, expected 'low-high'")
        return cls(low=float(m.group("low")), high=float(m.group("high")))

    def __contains__(self, value: float) -> bool:
        return self.low <= value <= self.high
