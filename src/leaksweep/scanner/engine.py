"""Audit engine — builds the per-audit pipeline and runs it over a repository.

RuleSet and WhitelistEngine are constructed here once per call and passed
explicitly into every task, so concurrent audits with different configs in
one process never see each other's state.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Optional

from leaksweep.config.schema import AuditOptions, LeakSweepConfig
from leaksweep.findings.aggregator import Aggregator
from leaksweep.findings.models import Leak, Report
from leaksweep.git.adapter import Repository
from leaksweep.git.commits import AuditScope, CommitSource
from leaksweep.git.extractor import DiffExtractor
from leaksweep.rules.ruleset import build_ruleset
from leaksweep.scanner.detector import Detector
from leaksweep.scanner.scheduler import Scheduler
from leaksweep.scanner.whitelist import WhitelistEngine

logger = logging.getLogger(__name__)


def scope_from_options(options: AuditOptions) -> AuditScope:
    return AuditScope(
        all_refs=options.all_refs,
        branch=options.branch,
        stop_at_commit=options.stop_at_commit,
        max_depth=options.max_depth,
    )


def audit(
    repo: Repository,
    config: LeakSweepConfig,
    options: Optional[AuditOptions] = None,
    *,
    on_leak: Optional[Callable[[Leak], None]] = None,
) -> Report:
    """Audit *repo*'s history and return the completed Report.

    Raises ConfigurationError before any commit is processed if the config
    does not compile, and SourceAccessError if history cannot be read.
    """
    options = options or AuditOptions()
    rules_dir = Path(options.rules_dir) if options.rules_dir else None
    ruleset = build_ruleset(config, single_search=options.single_search, rules_dir=rules_dir)
    whitelist = WhitelistEngine.from_config(config.whitelist)
    source = CommitSource(repo, scope_from_options(options))

    logger.info(
        "auditing %s with %d rule(s), %d entropy range(s), concurrency %d",
        repo.name, len(ruleset), len(ruleset.entropy_ranges), options.concurrency,
    )

    scheduler = Scheduler(
        DiffExtractor(repo),
        Detector(ruleset),
        whitelist,
        repo_name=repo.name,
        concurrency=options.concurrency,
    )
    aggregator = Aggregator(repo.name, redact=options.redact, on_leak=on_leak)
    report = scheduler.run(source, aggregator)

    logger.info(
        "%s: %d leak(s) in %d commit(s), %d diff failure(s)",
        repo.name, len(report), report.commits_scanned, report.commits_failed,
    )
    return report
