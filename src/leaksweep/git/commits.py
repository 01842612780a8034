"""CommitSource — resolve an audit scope into the commits to examine."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterator, List, Optional

from leaksweep.git.adapter import Repository, SourceAccessError
from leaksweep.git.models import CommitTarget

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuditScope:
    """Which part of history one audit covers."""

    all_refs: bool = False
    branch: Optional[str] = None  # None = checked-out branch
    stop_at_commit: Optional[str] = None  # exclusive
    max_depth: Optional[int] = None  # per branch

    def __post_init__(self) -> None:
        if self.max_depth is not None and self.max_depth < 0:
            raise ValueError("max_depth must be >= 0")


class CommitSource:
    """Finite, restartable sequence of CommitTargets for an AuditScope.

    Commits come newest first in topological order. Under ``all_refs`` every
    branch is walked on its own, so a commit shared by several branches is
    produced once per branch, each time carrying that branch's display name.
    """

    def __init__(self, repo: Repository, scope: AuditScope) -> None:
        self.repo = repo
        self.scope = scope
        self._stop_id: Optional[str] = None
        if scope.stop_at_commit:
            self._stop_id = repo.resolve(scope.stop_at_commit)
            if self._stop_id is None:
                raise SourceAccessError(f"unknown stop commit: {scope.stop_at_commit}")

    def branches(self) -> List[str]:
        """Display names of the branches this scope walks."""
        if self.scope.all_refs:
            return self.repo.branches()
        if self.scope.branch:
            if self.repo.resolve(self.scope.branch) is None:
                raise SourceAccessError(f"unknown branch: {self.scope.branch}")
            return [self.scope.branch]
        if not self.repo.has_commits():
            return []
        return [self.repo.current_branch()]

    def __iter__(self) -> Iterator[CommitTarget]:
        for branch in self.branches():
            yield from self._walk(branch)

    def _walk(self, branch: str) -> Iterator[CommitTarget]:
        count = 0
        for commit in self.repo.log(branch, max_count=self.scope.max_depth):
            if self._stop_id is not None and commit.id == self._stop_id:
                break
            count += 1
            yield CommitTarget(commit=commit, branch=branch)
        logger.debug("branch %s: %d commit(s) in scope", branch, count)
