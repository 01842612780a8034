"""Leak models, aggregation, and redaction."""

from leaksweep.findings.aggregator import Aggregator
from leaksweep.findings.models import Leak, Report
from leaksweep.findings.redactor import PLACEHOLDER, redact

__all__ = ["Aggregator", "Leak", "PLACEHOLDER", "Report", "redact"]
