"""Rule engine — models and the compiled rule set."""

from leaksweep.rules.models import EntropyRange, Rule
from leaksweep.rules.ruleset import RuleSet, build_ruleset

__all__ = ["EntropyRange", "Rule", "RuleSet", "build_ruleset"]
