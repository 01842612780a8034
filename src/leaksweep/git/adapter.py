"""Git subprocess wrapper — repository handle, history walk, per-commit diffs."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import Iterator, List, Optional, Type

from leaksweep.git.models import Commit

logger = logging.getLogger(__name__)

_FIELD_SEP = "\x1f"
_LOG_FORMAT = _FIELD_SEP.join(["%H", "%P", "%an", "%ae", "%aI", "%s"])
_LOG_FORMAT_ARG = "--format=" + _LOG_FORMAT.replace(_FIELD_SEP, "%x1f")

DEFAULT_TIMEOUT = 30
DIFF_TIMEOUT = 300


class GitError(Exception):
    """Raised when git is unavailable or returns an unexpected error."""


class SourceAccessError(GitError):
    """The repository cannot be opened or its history cannot be read."""


class DiffError(GitError):
    """A single commit's diff could not be produced."""


def _run_git(
    args: list[str],
    cwd: Path,
    timeout: int = DEFAULT_TIMEOUT,
    error: Type[GitError] = GitError,
) -> str:
    """Run a git command and return stdout.

    A non-zero exit with a fatal/error message raises *error*; a quiet
    non-zero exit (``rev-parse -q``, ``symbolic-ref -q``) returns stdout.
    """
    try:
        result = subprocess.run(
            ["git", *args],
            cwd=cwd,
            capture_output=True,
            text=True,
            timeout=timeout,
            encoding="utf-8",
            errors="replace",
        )
    except FileNotFoundError:
        raise error("git is not installed or not on PATH")
    except NotADirectoryError:
        raise error(f"not a directory: {cwd}")
    except subprocess.TimeoutExpired:
        raise error(f"git command timed out after {timeout}s: git {' '.join(args)}")

    if result.returncode != 0:
        stderr = result.stderr.strip()
        if not stderr:
            return result.stdout
        lowered = stderr.lower()
        if "fatal" in lowered or "error" in lowered:
            raise error(f"git error: {stderr}")
        logger.debug("git %s exited %d: %s", args[0], result.returncode, stderr)
    return result.stdout


def _stream_git(
    args: list[str],
    cwd: Path,
    error: Type[GitError] = GitError,
) -> Iterator[str]:
    """Yield stdout of a long-running git command line by line.

    No timeout applies; output is consumed as git produces it. Lines end
    only at ``\\n``. If the caller stops early the process is killed.
    """
    try:
        proc = subprocess.Popen(
            ["git", *args],
            cwd=cwd,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
        )
    except FileNotFoundError:
        raise error("git is not installed or not on PATH")
    except NotADirectoryError:
        raise error(f"not a directory: {cwd}")

    finished = False
    try:
        for raw in proc.stdout:
            yield raw.rstrip(b"\n").decode("utf-8", errors="replace")
        stderr = proc.stderr.read().decode("utf-8", errors="replace").strip()
        returncode = proc.wait()
        finished = True
    finally:
        if not finished and proc.poll() is None:
            proc.kill()
        proc.wait()
        proc.stdout.close()
        proc.stderr.close()

    if returncode != 0:
        lowered = stderr.lower()
        if "fatal" in lowered or "error" in lowered:
            raise error(f"git error: {stderr}")
        logger.debug("git %s exited %d: %s", args[0], returncode, stderr)


def _parse_log_line(line: str) -> Optional[Commit]:
    parts = line.split(_FIELD_SEP)
    if len(parts) != 6 or not parts[0]:
        return None
    sha, parents, author, email, date, subject = parts
    return Commit(
        id=sha,
        parents=tuple(parents.split()),
        author=author,
        email=email,
        date=date,
        message=subject,
    )


class Repository:
    """Handle on a local git working copy."""

    def __init__(self, root: Path, name: Optional[str] = None) -> None:
        self.root = root
        self.name = name or root.name

    @classmethod
    def open(cls, path: Path, name: Optional[str] = None) -> "Repository":
        """Open the repository containing *path*. Raises SourceAccessError."""
        path = Path(path)
        if not path.is_dir():
            raise SourceAccessError(f"repository path does not exist: {path}")
        out = _run_git(["rev-parse", "--show-toplevel"], cwd=path, error=SourceAccessError)
        if not out.strip():
            raise SourceAccessError(f"not a git repository: {path}")
        return cls(Path(out.strip()), name=name)

    def git(
        self,
        *args: str,
        timeout: int = DEFAULT_TIMEOUT,
        error: Type[GitError] = SourceAccessError,
    ) -> str:
        return _run_git(list(args), cwd=self.root, timeout=timeout, error=error)

    # ---- refs ----

    def resolve(self, rev: str) -> Optional[str]:
        """Return the full commit id for *rev*, or None if it does not exist."""
        out = self.git("rev-parse", "-q", "--verify", f"{rev}^{{commit}}")
        return out.strip() or None

    def has_commits(self) -> bool:
        return self.resolve("HEAD") is not None

    def current_branch(self) -> str:
        """Short name of the checked-out branch, ``HEAD`` when detached."""
        out = self.git("symbolic-ref", "--short", "-q", "HEAD")
        return out.strip() or "HEAD"

    def branches(self) -> List[str]:
        """Display names of every local and remote-tracking branch tip.

        Symbolic refs such as ``origin/HEAD`` are skipped.
        """
        out = self.git(
            "for-each-ref",
            "--format=%(refname:short)%1f%(symref)",
            "refs/heads",
            "refs/remotes",
        )
        names: List[str] = []
        for line in out.split("\n"):
            name, _, symref = line.partition(_FIELD_SEP)
            if not name or symref:
                continue
            names.append(name)
        return names

    # ---- history ----

    def log(self, ref: str, max_count: Optional[int] = None) -> Iterator[Commit]:
        """Yield commits reachable from *ref*, descendants before ancestors."""
        args = ["log", "--topo-order", "--no-color", _LOG_FORMAT_ARG]
        if max_count is not None:
            args.append(f"--max-count={max_count}")
        args.extend([ref, "--"])
        for line in _stream_git(args, cwd=self.root, error=SourceAccessError):
            commit = _parse_log_line(line)
            if commit is not None:
                yield commit

    def diff(self, commit: Commit) -> str:
        """Unified diff (zero context) of *commit* against its primary parent.

        Root commits are diffed against the empty tree. Raises DiffError.
        """
        args = [
            "-c", "core.quotepath=off",
            "diff-tree", "-p", "-r", "--no-color", "--no-ext-diff",
            "--no-renames", "--unified=0",
        ]
        parent = commit.primary_parent
        if parent is None:
            args.extend(["--root", "--no-commit-id", commit.id])
        else:
            args.extend([parent, commit.id])
        return self.git(*args, timeout=DIFF_TIMEOUT, error=DiffError)
