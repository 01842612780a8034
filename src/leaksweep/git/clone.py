"""Clone a remote repository into a throwaway working copy."""

from __future__ import annotations

import os
import shutil
import subprocess
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from leaksweep.git.adapter import Repository, SourceAccessError

CLONE_TIMEOUT = 600


def repo_name_from_url(url: str) -> str:
    """``git@github.com:org/gronit.git`` and ``https://host/org/gronit`` → ``gronit``."""
    name = url.rstrip("/").split("/")[-1]
    name = name.removesuffix(".git")
    return name.split(":")[-1]


@contextmanager
def cloned_repository(url: str) -> Iterator[Repository]:
    """Clone *url* into a temp dir, yield it as a Repository, always clean up.

    Remote-tracking branches are kept so that all-refs audits see them.
    """
    tmp_dir = Path(tempfile.mkdtemp(prefix="leaksweep-"))
    dest = tmp_dir / "repo"
    env = {**os.environ, "GIT_TERMINAL_PROMPT": "0"}
    try:
        try:
            result = subprocess.run(
                ["git", "clone", "--quiet", url, str(dest)],
                capture_output=True,
                text=True,
                timeout=CLONE_TIMEOUT,
                env=env,
            )
        except FileNotFoundError:
            raise SourceAccessError("git is not installed or not on PATH")
        except subprocess.TimeoutExpired:
            raise SourceAccessError(f"clone of {url} timed out after {CLONE_TIMEOUT}s")
        if result.returncode != 0:
            raise SourceAccessError(f"failed to clone {url}: {result.stderr.strip()}")
        yield Repository.open(dest, name=repo_name_from_url(url))
    finally:
        shutil.rmtree(tmp_dir, ignore_errors=True)
