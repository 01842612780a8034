"""RuleSet — compiled rules plus entropy settings, built once per audit."""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple

import yaml

from leaksweep.config.loader import ConfigurationError
from leaksweep.config.schema import LeakSweepConfig
from leaksweep.rules.models import EntropyRange, Rule, compile_pattern

SINGLE_SEARCH_DESCRIPTION = "single search"


@dataclass(frozen=True)
class RuleSet:
    """Immutable detection configuration shared read-only by every worker."""

    rules: Tuple[Rule, ...] = ()
    entropy_ranges: Tuple[EntropyRange, ...] = ()
    entropy_line_patterns: Tuple[re.Pattern[str], ...] = ()

    @property
    def entropy_enabled(self) -> bool:
        return bool(self.entropy_ranges)

    def __len__(self) -> int:
        return len(self.rules)


def load_rule_files(directory: Path) -> List[Rule]:
    """Load extra rules from every YAML file in *directory* (sorted by name)."""
    if not directory.is_dir():
        raise ConfigurationError(f"rules directory not found: {directory}")
    rules: List[Rule] = []
    for path in sorted(directory.iterdir()):
        if path.suffix not in (".yaml", ".yml"):
            continue
        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as exc:
            raise ConfigurationError(f"problem loading rules from {path}: {exc}") from exc
        if data is None:
            continue
        if not isinstance(data, list):
            data = [data]
        for entry in data:
            if not isinstance(entry, dict) or "regex" not in entry:
                raise ConfigurationError(f"rule entry in {path} needs a 'regex' key")
            rules.append(
                Rule.from_strings(
                    entry.get("description", entry["regex"]),
                    entry["regex"],
                    entry.get("tags", []),
                )
            )
    return rules


def build_ruleset(
    config: LeakSweepConfig,
    *,
    single_search: Optional[str] = None,
    rules_dir: Optional[Path] = None,
) -> RuleSet:
    """Compile *config* into a RuleSet.

    A *single_search* pattern replaces every configured and YAML rule, for
    one-off searches. Raises ConfigurationError on any invalid pattern or
    entropy range.
    """
    if single_search is not None:
        rules = [
            Rule(
                description=SINGLE_SEARCH_DESCRIPTION,
                pattern=compile_pattern(single_search, "single search"),
            )
        ]
    else:
        rules = [Rule.from_strings(r.description, r.regex, r.tags) for r in config.rules]
        if rules_dir is not None:
            rules.extend(load_rule_files(rules_dir))

    ranges = tuple(EntropyRange.parse(span) for span in config.entropy.ranges)
    line_patterns = tuple(
        compile_pattern(p, "entropy line") for p in config.entropy.line_regexes
    )

    return RuleSet(
        rules=tuple(rules),
        entropy_ranges=ranges,
        entropy_line_patterns=line_patterns,
    )
