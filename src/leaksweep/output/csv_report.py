"""CSV reporter — one row per leak, with a header row."""

from __future__ import annotations

import csv
import io

from leaksweep.findings.models import Report

COLUMNS = [
    "repo",
    "branch",
    "commit",
    "author",
    "email",
    "date",
    "message",
    "file",
    "line_no",
    "reason",
    "tags",
    "offender",
    "line",
    "redacted",
]


def render(report: Report) -> str:
    buf = io.StringIO()
    writer = csv.DictWriter(buf, fieldnames=COLUMNS, lineterminator="\n")
    writer.writeheader()
    for leak in report.sorted():
        row = leak.to_dict()
        row["tags"] = " ".join(leak.tags)
        writer.writerow({col: row[col] for col in COLUMNS})
    return buf.getvalue()
