"""JSON reporter — a list of leak objects."""

from __future__ import annotations

import json
from typing import Any, Dict, List

from leaksweep.findings.models import Report


def to_list(report: Report) -> List[Dict[str, Any]]:
    """Convert a Report to JSON-serialisable leak dicts, sorted for stable diffs."""
    return [leak.to_dict() for leak in report.sorted()]


def render(report: Report) -> str:
    """Return formatted JSON string."""
    return json.dumps(to_list(report), indent=2)
