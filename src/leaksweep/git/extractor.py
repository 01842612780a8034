"""DiffExtractor — the lines one commit added relative to its primary parent."""

from __future__ import annotations

import logging
from typing import List

from leaksweep.git.adapter import Repository
from leaksweep.git.diff_parser import DiffParser
from leaksweep.git.models import AddedLine, Commit, FileSkipped

logger = logging.getLogger(__name__)


class DiffExtractor:
    def __init__(self, repo: Repository) -> None:
        self.repo = repo

    def extract(self, commit: Commit) -> List[AddedLine]:
        """Return the added lines of *commit*. Raises DiffError."""
        diff_text = self.repo.diff(commit)
        lines: List[AddedLine] = []
        for item in DiffParser(diff_text).parse():
            if isinstance(item, FileSkipped):
                logger.debug("%s: skipped %s (%s)", commit.short_id, item.path, item.reason)
                continue
            lines.append(item)
        return lines
