"""Unified diff parser — turns ``git diff-tree -p`` output into added lines.

Only additions are reported. Binary files, mode-only changes, deletions and
submodule pointer updates are reported as FileSkipped.
"""

from __future__ import annotations

import re
from typing import Iterator, List, Optional, Union

from leaksweep.git.models import AddedLine, FileSkipped

_DIFF_PREFIX = "diff --git "
_DIFF_HEADER_RE = re.compile(r"^diff --git a/(.*) b/(.*)$")
_HUNK_HEADER_RE = re.compile(r"^@@ -\d+(?:,\d+)? \+(\d+)(?:,\d+)? @@")
_BINARY_RE = re.compile(r"^Binary files .* and .* differ$")
_SUBPROJECT_RE = re.compile(r"^\+Subproject commit [0-9a-f]+(?:-dirty)?$")
_NEW_PATH_RE = re.compile(r'^\+\+\+ (?:(b/.*|"b/.*")|/dev/null)$')
_DELETED_FILE_RE = re.compile(r"^deleted file mode \d+$")
_MODE_RE = re.compile(r"^(?:old|new) mode \d+$")

# git's C-style quoting of unusual paths
_C_ESCAPES = {
    "a": 0x07, "b": 0x08, "t": 0x09, "n": 0x0A, "v": 0x0B,
    "f": 0x0C, "r": 0x0D, '"': 0x22, "\\": 0x5C,
}
_OCTAL = frozenset("01234567")

DiffItem = Union[AddedLine, FileSkipped]


def _clean(content: str) -> str:
    """Strip a UTF-8 BOM and a trailing CR."""
    return content.lstrip("\ufeff").rstrip("\r")


def _unquote(name: str) -> str:
    """Reverse git's quoting of a path like ``"b/we\\"ird.py"``.

    Unquoted names are returned unchanged.
    """
    if len(name) < 2 or not (name.startswith('"') and name.endswith('"')):
        return name
    body = name[1:-1]
    out = bytearray()
    i = 0
    while i < len(body):
        ch = body[i]
        if ch == "\\" and i + 1 < len(body):
            nxt = body[i + 1]
            if nxt in _C_ESCAPES:
                out.append(_C_ESCAPES[nxt])
                i += 2
                continue
            octal = body[i + 1:i + 4]
            if len(octal) == 3 and set(octal) <= _OCTAL:
                out.append(int(octal, 8) & 0xFF)
                i += 4
                continue
        out.extend(ch.encode("utf-8"))
        i += 1
    return out.decode("utf-8", errors="replace")


def _strip_prefix(name: str) -> str:
    name = _unquote(name.rstrip("\t"))
    return name[2:] if name.startswith(("a/", "b/")) else name


def _header_path(raw: str) -> Optional[str]:
    """Path named by a ``diff --git`` header, or None if it cannot be split."""
    rest = raw[len(_DIFF_PREFIX):]
    if rest.endswith('"'):
        # a literal quote inside a quoted name is always escaped
        start = rest.rfind(' "')
        if start != -1:
            return _strip_prefix(rest[start + 1:])
    m = _DIFF_HEADER_RE.match(raw)
    return m.group(2) if m else None


class DiffParser:
    """Parse unified diff text and yield AddedLine / FileSkipped items.

    Usage::

        for item in DiffParser(diff_text).parse():
            if isinstance(item, AddedLine):
                ...
    """

    def __init__(self, diff_text: str) -> None:
        # only "\n" ends a diff line; other separators belong to the content
        self._lines = diff_text.split("\n")

    def parse(self) -> Iterator[DiffItem]:
        path: Optional[str] = None
        in_file = False
        in_hunk = False
        saw_hunk = False
        mode_change = False
        line_no = 0

        for raw in self._lines:
            if raw.startswith(_DIFF_PREFIX):
                if in_file and path is not None and not saw_hunk:
                    yield from self._skipped(path, mode_change)
                path = _header_path(raw)
                in_file = True
                in_hunk = saw_hunk = mode_change = False
                continue
            if not in_file:
                continue  # preamble such as a commit id line

            if not in_hunk:
                # File sub-headers: index, mode, new/deleted, ---/+++, Binary
                nm = _NEW_PATH_RE.match(raw)
                if nm:
                    if nm.group(1):
                        path = _strip_prefix(nm.group(1))
                    continue
                if path is None:
                    continue
                if _BINARY_RE.match(raw):
                    yield FileSkipped(path=path, reason="binary")
                    saw_hunk = True  # reported, nothing further to flush
                    continue
                if _DELETED_FILE_RE.match(raw):
                    yield FileSkipped(path=path, reason="deleted")
                    saw_hunk = True
                    continue
                if _MODE_RE.match(raw):
                    mode_change = True
                    continue

            if path is None:
                continue
            hm = _HUNK_HEADER_RE.match(raw)
            if hm:
                in_hunk = saw_hunk = True
                line_no = int(hm.group(1))
                continue
            if not in_hunk:
                continue

            if raw.startswith("+"):
                if _SUBPROJECT_RE.match(raw):
                    yield FileSkipped(path=path, reason="submodule")
                    continue
                yield AddedLine(path=path, line_no=line_no, text=_clean(raw[1:]))
                line_no += 1
            elif raw.startswith(" "):
                line_no += 1
            # removed lines and "\ No newline" markers carry nothing to scan

        if in_file and path is not None and not saw_hunk:
            yield from self._skipped(path, mode_change)

    @staticmethod
    def _skipped(path: str, mode_change: bool) -> List[FileSkipped]:
        if mode_change:
            return [FileSkipped(path=path, reason="mode_only")]
        return []
