"""WhitelistEngine — five independent suppression axes.

A candidate is suppressed when ANY axis matches:

  - ``commits``:  exact commit id
  - ``files``:    regex searched in the file path
  - ``branches``: exact branch display name, e.g. ``origin/master``
  - ``regexes``:  regex searched in the offending value
  - ``repos``:    regex searched in the repository name

An empty axis never suppresses.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import FrozenSet, Tuple

from leaksweep.config.schema import WhitelistConfig
from leaksweep.rules.models import compile_pattern


@dataclass(frozen=True)
class WhitelistEngine:
    commits: FrozenSet[str] = frozenset()
    files: Tuple[re.Pattern[str], ...] = ()
    branches: FrozenSet[str] = frozenset()
    regexes: Tuple[re.Pattern[str], ...] = ()
    repos: Tuple[re.Pattern[str], ...] = ()

    @classmethod
    def from_config(cls, config: WhitelistConfig) -> "WhitelistEngine":
        """Compile a [whitelist] section. Raises ConfigurationError."""
        return cls(
            commits=frozenset(config.commits),
            files=tuple(compile_pattern(p, "whitelist file") for p in config.files),
            branches=frozenset(config.branches),
            regexes=tuple(compile_pattern(p, "whitelist content") for p in config.regexes),
            repos=tuple(compile_pattern(p, "whitelist repo") for p in config.repos),
        )

    def commit_whitelisted(self, commit: str) -> bool:
        return commit in self.commits

    def file_whitelisted(self, path: str) -> bool:
        return any(p.search(path) for p in self.files)

    def branch_whitelisted(self, branch: str) -> bool:
        return branch in self.branches

    def content_whitelisted(self, offender: str) -> bool:
        return any(p.search(offender) for p in self.regexes)

    def repo_whitelisted(self, repo: str) -> bool:
        return any(p.search(repo) for p in self.repos)

    def suppresses(
        self,
        offender: str,
        *,
        commit: str,
        path: str,
        branch: str,
        repo: str,
    ) -> bool:
        """Return True if the candidate should be dropped."""
        return (
            self.commit_whitelisted(commit)
            or self.file_whitelisted(path)
            or self.branch_whitelisted(branch)
            or self.content_whitelisted(offender)
            or self.repo_whitelisted(repo)
        )
