"""Detector — pattern stage followed by the entropy stage, one line at a time.

Exception safety: evaluation failures are re-raised as DetectionError with
the rule description only, so the scanned line never reaches a traceback.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple

from leaksweep.config.loader import ConfigurationError
from leaksweep.rules.models import Rule
from leaksweep.rules.ruleset import RuleSet
from leaksweep.scanner.entropy import find_in_ranges

ENTROPY_REASON_PREFIX = "Entropy"
ENTROPY_TAGS = ("entropy",)


class DetectionError(ConfigurationError):
    """A rule pattern failed at evaluation time."""


@dataclass(frozen=True)
class Candidate:
    """A suspected secret on one line, before whitelisting."""

    offender: str
    reason: str
    tags: Tuple[str, ...] = ()


def _offender(rule: Rule, match) -> str:
    """Prefer the rule's ``secret`` group over the whole match."""
    if "secret" in rule.pattern.groupindex and match.group("secret") is not None:
        return match.group("secret")
    return match.group(0)


class Detector:
    def __init__(self, ruleset: RuleSet) -> None:
        self.ruleset = ruleset

    def detect(self, line: str, path: str = "") -> List[Candidate]:
        """Return every candidate found on *line* (from file *path*).

        Each rule is searched once; several rules matching the same line each
        produce their own candidate.
        """
        candidates = self._pattern_stage(line)
        if self.ruleset.entropy_enabled:
            candidates.extend(self._entropy_stage(line))
        return candidates

    def _pattern_stage(self, line: str) -> List[Candidate]:
        found: List[Candidate] = []
        for rule in self.ruleset.rules:
            try:
                m = rule.pattern.search(line)
            except Exception:
                raise DetectionError(
                    f"rule {rule.description!r} failed during evaluation"
                ) from None
            if m is None:
                continue
            found.append(
                Candidate(offender=_offender(rule, m), reason=rule.description, tags=rule.tags)
            )
        return found

    def _entropy_stage(self, line: str) -> List[Candidate]:
        line_patterns = self.ruleset.entropy_line_patterns
        if line_patterns and not any(p.search(line) for p in line_patterns):
            return []
        return [
            Candidate(
                offender=token,
                reason=f"{ENTROPY_REASON_PREFIX}: {h:.2f}",
                tags=ENTROPY_TAGS,
            )
            for token, h in find_in_ranges(line, self.ruleset.entropy_ranges)
        ]
