"""Data models for commits and parsed diffs."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True)
class Commit:
    """One point in history. Root commits have no parents."""

    id: str
    parents: Tuple[str, ...] = ()
    author: str = ""
    email: str = ""
    date: str = ""  # ISO 8601 author date
    message: str = ""  # subject line

    @property
    def primary_parent(self) -> Optional[str]:
        return self.parents[0] if self.parents else None

    @property
    def short_id(self) -> str:
        return self.id[:12]


@dataclass(frozen=True)
class CommitTarget:
    """A commit as reached from one branch; the unit of scheduled work."""

    commit: Commit
    branch: str


@dataclass(frozen=True, slots=True)
class AddedLine:
    """A line introduced by a commit."""

    path: str
    line_no: int
    text: str


@dataclass(frozen=True)
class FileSkipped:
    """Record of a file whose content was not inspected."""

    path: str
    reason: str  # 'binary', 'mode_only', 'deleted', 'submodule'
