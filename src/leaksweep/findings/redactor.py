"""Secret value redaction for safe output."""

from __future__ import annotations

import dataclasses

from leaksweep.findings.models import Leak

PLACEHOLDER = "REDACTED"


def redact(leak: Leak) -> Leak:
    """Return *leak* with its offending value replaced by the placeholder.

    Every other field is left as is; the leak itself is never dropped.
    """
    return dataclasses.replace(leak, offender=PLACEHOLDER, redacted=True)
