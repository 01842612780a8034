"""Configuration schema — dataclasses for the config document and audit options."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class RuleEntry:
    description: str = ""
    regex: str = ""
    tags: List[str] = field(default_factory=list)


@dataclass
class EntropyConfig:
    ranges: List[str] = field(default_factory=list)  # "low-high", e.g. "4.5-8.0"
    line_regexes: List[str] = field(default_factory=list)  # empty = every line eligible


@dataclass
class WhitelistConfig:
    files: List[str] = field(default_factory=list)
    regexes: List[str] = field(default_factory=list)
    commits: List[str] = field(default_factory=list)
    branches: List[str] = field(default_factory=list)
    repos: List[str] = field(default_factory=list)


@dataclass
class LeakSweepConfig:
    title: str = "leaksweep config"
    rules: List[RuleEntry] = field(default_factory=list)
    entropy: EntropyConfig = field(default_factory=EntropyConfig)
    whitelist: WhitelistConfig = field(default_factory=WhitelistConfig)


@dataclass
class AuditOptions:
    """Caller-supplied knobs for one audit run."""

    branch: Optional[str] = None
    all_refs: bool = False
    stop_at_commit: Optional[str] = None
    max_depth: Optional[int] = None
    concurrency: int = 1
    redact: bool = False
    single_search: Optional[str] = None  # replaces the configured rules
    rules_dir: Optional[str] = None  # extra YAML rule packs
