"""Git interface layer — repository handle, commit source, diffs."""

from leaksweep.git.adapter import DiffError, GitError, Repository, SourceAccessError
from leaksweep.git.commits import AuditScope, CommitSource
from leaksweep.git.diff_parser import DiffParser
from leaksweep.git.extractor import DiffExtractor
from leaksweep.git.models import AddedLine, Commit, CommitTarget, FileSkipped

__all__ = [
    "AddedLine",
    "AuditScope",
    "Commit",
    "CommitSource",
    "CommitTarget",
    "DiffError",
    "DiffExtractor",
    "DiffParser",
    "FileSkipped",
    "GitError",
    "Repository",
    "SourceAccessError",
]
