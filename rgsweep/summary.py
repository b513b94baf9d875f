"""
Run summary aggregation and rendering.
"""

from dataclasses import dataclass, field
from operator import attrgetter
from typing import Any, Dict, Iterable, List, Optional

from .models import Decision, DeletionJobHandle, JobOutcome, JobStatus, Outcome, RunStatus


@dataclass
class RunSummary:
    """Report over the decisions, dispatches and outcomes of one run."""
    status: RunStatus
    kept: List[Decision] = field(default_factory=list)
    deleted: List[Decision] = field(default_factory=list)
    dispatch_errors: List[DeletionJobHandle] = field(default_factory=list)
    not_monitored: List[DeletionJobHandle] = field(default_factory=list)
    outcomes: Dict[JobStatus, List[JobOutcome]] = field(default_factory=dict)
    monitored: bool = False
    error: Optional[str] = None

    @property
    def total(self) -> int:
        return len(self.kept) + len(self.deleted)

    def count(self, status: JobStatus) -> int:
        return len(self.outcomes.get(status, []))

    def to_dict(self) -> Dict[str, Any]:
        """Machine-readable form of the summary."""
        return {
            "status": self.status.value,
            "exit_code": self.status.exit_code,
            "error": self.error,
            "monitored": self.monitored,
            "counts": {
                "total": self.total,
                "kept": len(self.kept),
                "deleted": len(self.deleted),
                "dispatch_errors": len(self.dispatch_errors),
                "not_monitored": len(self.not_monitored),
                **{status.value: self.count(status) for status in JobStatus},
            },
            "kept": [d.to_dict() for d in self.kept],
            "deleted": [d.to_dict() for d in self.deleted],
            "dispatch_errors": [h.to_dict() for h in self.dispatch_errors],
            "not_monitored": [h.container_name for h in self.not_monitored],
            "outcomes": {
                status.value: [o.to_dict() for o in self.outcomes.get(status, [])]
                for status in JobStatus
            },
        }

    def render_lines(self) -> List[str]:
        """Human-readable report lines."""
        lines = []

        if self.status.is_fatal:
            lines.append(f"❌ Run aborted ({self.status.value}): {self.error}")

        if self.status is RunStatus.BLOCKED:
            lines.append("⛔ Deletion is NOT enabled: no resource groups were deleted.")
            lines.append("   Re-run with --enable-deletion to remove the groups listed below.")

        lines.append("📊 Resource group sweep:")
        lines.append(f"  • Total resource groups: {self.total}")
        lines.append(f"  • Kept: {len(self.kept)}")
        for d in self.kept:
            lines.append(f"    ✅ {d.container_name} ({d.location}): {d.reason}")

        delete_label = "Would delete" if self.status is RunStatus.BLOCKED else "Marked for deletion"
        lines.append(f"  • {delete_label}: {len(self.deleted)}")
        for d in self.deleted:
            lines.append(f"    🗑️  {d.container_name} ({d.location}): {d.reason}")

        if self.dispatch_errors:
            lines.append(f"  • Delete requests rejected: {len(self.dispatch_errors)}")
            for h in self.dispatch_errors:
                lines.append(f"    ❌ {h.container_name}: {h.dispatch_error}")

        if self.not_monitored:
            lines.append(f"  • Dispatched, not monitored: {len(self.not_monitored)}")
            for h in self.not_monitored:
                lines.append(f"    ⏳ {h.container_name}")

        if self.monitored:
            icons = {
                JobStatus.SUCCEEDED: "✅",
                JobStatus.FAILED: "❌",
                JobStatus.TIMED_OUT: "⏰",
                JobStatus.MONITOR_ERROR: "⚠️ ",
            }
            for status in JobStatus:
                items = self.outcomes.get(status, [])
                lines.append(f"  • Jobs {status.value}: {len(items)}")
                for o in items:
                    suffix = f": {o.detail}" if o.detail else ""
                    lines.append(f"    {icons[status]} {o.container_name}{suffix}")

        return lines


def _by_name(items: Iterable) -> list:
    return sorted(items, key=attrgetter("container_name"))


def build_summary(
    status: RunStatus,
    decisions: Iterable[Decision] = (),
    handles: Iterable[DeletionJobHandle] = (),
    outcomes: Optional[Iterable[JobOutcome]] = None,
    error: Optional[str] = None,
) -> RunSummary:
    """
    Aggregate run results into a summary sorted by resource group name.

    Args:
        status: Overall run status
        decisions: Classifier output
        handles: Dispatcher output
        outcomes: Monitor output, or None if jobs were not monitored
        error: Message of the fatal error that stopped the run, if any

    Returns:
        RunSummary
    """
    decisions = list(decisions)
    handles = list(handles)
    monitored = outcomes is not None

    grouped: Dict[JobStatus, List[JobOutcome]] = {}
    for outcome in _by_name(outcomes or []):
        grouped.setdefault(outcome.status, []).append(outcome)

    return RunSummary(
        status=status,
        kept=_by_name(d for d in decisions if d.outcome is Outcome.KEEP),
        deleted=_by_name(d for d in decisions if d.outcome is Outcome.DELETE),
        dispatch_errors=_by_name(h for h in handles if not h.dispatched),
        not_monitored=[] if monitored else _by_name(h for h in handles if h.dispatched),
        outcomes=grouped,
        monitored=monitored,
        error=error,
    )
