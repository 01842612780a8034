"""Leak and Report models."""

from __future__ import annotations

from collections import Counter
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Iterator, List, Tuple


@dataclass(frozen=True)
class Leak:
    """A line suspected of exposing a secret, with where it came from."""

    line: str
    line_no: int
    commit: str
    offender: str
    reason: str  # rule description, or "Entropy: 4.73"
    file: str
    branch: str
    repo: str
    author: str = ""
    email: str = ""
    date: str = ""
    message: str = ""
    tags: Tuple[str, ...] = ()
    redacted: bool = False

    def sort_key(self) -> Tuple[str, str, int, str, str, str]:
        return (self.commit, self.file, self.line_no, self.reason, self.offender, self.branch)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["tags"] = list(self.tags)
        return data


class ReportFrozenError(RuntimeError):
    """Raised when something tries to grow a completed report."""


@dataclass
class Report:
    """Unordered multiset of leaks found by one audit.

    Grown only by the Aggregator; frozen once the Scheduler completes.
    """

    repo: str = ""
    commits_scanned: int = 0
    commits_failed: int = 0
    duration_ms: float = 0.0
    _leaks: List[Leak] = field(default_factory=list, repr=False)
    _frozen: bool = field(default=False, repr=False)

    def append(self, leak: Leak) -> None:
        if self._frozen:
            raise ReportFrozenError("report is frozen; the audit has completed")
        self._leaks.append(leak)

    def freeze(self) -> None:
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def leaks(self) -> Tuple[Leak, ...]:
        return tuple(self._leaks)

    @property
    def total_leaks(self) -> int:
        return len(self._leaks)

    @property
    def has_leaks(self) -> bool:
        return bool(self._leaks)

    def sorted(self) -> List[Leak]:
        """Leaks ordered by commit, file, line for display or comparison."""
        return sorted(self._leaks, key=Leak.sort_key)

    def multiset(self) -> Counter:
        return Counter(self._leaks)

    def __iter__(self) -> Iterator[Leak]:
        return iter(self.leaks)

    def __len__(self) -> int:
        return len(self._leaks)
