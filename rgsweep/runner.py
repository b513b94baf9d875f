"""
Single-pass cleanup run: enumerate, classify, dispatch, optionally monitor.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from .classify import RetentionClassifier
from .config import RunConfig
from .dispatch import DeletionDispatcher
from .errors import AuthError, EnumerationError
from .events import EventTypes, PathLike, emit_event
from .models import Decision, DeletionJobHandle, JobOutcome, RunStatus
from .monitor import JobMonitor
from .provider.base import ResourceGroupProvider
from .summary import RunSummary, build_summary

logger = logging.getLogger(__name__)


@dataclass
class RunResult:
    """Everything a cleanup run produced."""
    status: RunStatus
    summary: RunSummary
    decisions: List[Decision] = field(default_factory=list)
    handles: List[DeletionJobHandle] = field(default_factory=list)
    outcomes: Optional[List[JobOutcome]] = None

    @property
    def exit_code(self) -> int:
        return self.status.exit_code


def run_cleanup(
    provider: ResourceGroupProvider,
    config: RunConfig,
    report_path: Optional[PathLike] = None,
) -> RunResult:
    """
    Run one cleanup pass over the provider's subscription.

    Fatal errors (authentication, enumeration) end the run early with
    whatever partial summary exists. Per-group errors never do.

    Args:
        provider: Cloud provider
        config: Run configuration
        report_path: Optional NDJSON report file

    Returns:
        RunResult with the run status and summary
    """
    emit_event(report_path, EventTypes.RUN_START, {
        "enable_deletion": config.enable_deletion,
        "monitor_jobs": config.monitor_jobs,
        "job_timeout_seconds": config.job_timeout_seconds,
        "tag_key": config.tag_key,
        "keep_value": config.keep_value,
        "exclusions": sorted(config.exclusions),
    })

    decisions: List[Decision] = []
    try:
        containers = provider.list_containers()
        for decision in RetentionClassifier(config.policy()).iter_decisions(containers, tag_source=provider):
            decisions.append(decision)
    except AuthError as e:
        return _fatal(RunStatus.FATAL_AUTH_ERROR, e, decisions, report_path)
    except EnumerationError as e:
        return _fatal(RunStatus.FATAL_ENUMERATION_ERROR, e, decisions, report_path)

    for decision in decisions:
        emit_event(report_path, EventTypes.DECISION, decision.to_dict())

    if not config.enable_deletion:
        logger.warning("Deletion is not enabled, no resource groups will be deleted")
        emit_event(report_path, EventTypes.DELETION_BLOCKED, {
            "would_delete": sorted(d.container_name for d in decisions if not d.keep),
        })
        return _finish(RunResult(
            status=RunStatus.BLOCKED,
            summary=build_summary(RunStatus.BLOCKED, decisions),
            decisions=decisions,
        ), report_path)

    handles = DeletionDispatcher(provider).dispatch(decisions)
    for handle in handles:
        emit_event(report_path, EventTypes.DISPATCH, handle.to_dict())

    outcomes = None
    status = RunStatus.COMPLETED_DISPATCH_ONLY
    if config.monitor_jobs:
        monitor = JobMonitor(provider, config.job_timeout_seconds, max_workers=config.max_workers)
        outcomes = monitor.monitor(handles)
        status = RunStatus.COMPLETED_MONITORED
        for outcome in outcomes:
            emit_event(report_path, EventTypes.JOB_OUTCOME, outcome.to_dict())
    else:
        logger.info("Deletions are running in the background, not waiting for them")

    return _finish(RunResult(
        status=status,
        summary=build_summary(status, decisions, handles, outcomes),
        decisions=decisions,
        handles=handles,
        outcomes=outcomes,
    ), report_path)


def _fatal(status: RunStatus, error: Exception, decisions: List[Decision], report_path) -> RunResult:
    logger.error(f"Cleanup run aborted: {error}")
    emit_event(report_path, EventTypes.FATAL, {"status": status.value, "error": str(error)})
    return _finish(RunResult(
        status=status,
        summary=build_summary(status, decisions, error=str(error)),
        decisions=decisions,
    ), report_path)


def _finish(result: RunResult, report_path) -> RunResult:
    emit_event(report_path, EventTypes.RUN_DONE, result.summary.to_dict())
    return result
