"""Scanner — detection, whitelisting, scheduling, and the audit engine."""

from leaksweep.scanner.detector import Candidate, DetectionError, Detector
from leaksweep.scanner.engine import audit
from leaksweep.scanner.entropy import shannon_entropy, tokenize
from leaksweep.scanner.scheduler import Scheduler
from leaksweep.scanner.whitelist import WhitelistEngine

__all__ = [
    "Candidate",
    "DetectionError",
    "Detector",
    "Scheduler",
    "WhitelistEngine",
    "audit",
    "shannon_entropy",
    "tokenize",
]
