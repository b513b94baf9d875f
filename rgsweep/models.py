"""
Data models for resource group classification and cleanup.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, FrozenSet, Optional


class Outcome(Enum):
    """Retention decision for a resource group."""
    KEEP = "keep"
    DELETE = "delete"


class ReasonCode(Enum):
    """Which retention rule produced a decision."""
    EXCLUDED = "excluded"
    NO_TAGS = "no_tags"
    TAG_NOT_FOUND = "tag_not_found"
    TAG_MATCH = "tag_match"
    TAG_MISMATCH = "tag_mismatch"
    TAG_ERROR = "tag_error"


class JobState(Enum):
    """State reported by a provider after waiting on a deletion job."""
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    RUNNING = "running"


class JobStatus(Enum):
    """Final classification of a monitored deletion job."""
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    TIMED_OUT = "timed_out"
    MONITOR_ERROR = "monitor_error"


class RunStatus(Enum):
    """Overall result of a cleanup run."""
    BLOCKED = "blocked"
    COMPLETED_DISPATCH_ONLY = "completed_dispatch_only"
    COMPLETED_MONITORED = "completed_monitored"
    FATAL_ENUMERATION_ERROR = "fatal_enumeration_error"
    FATAL_AUTH_ERROR = "fatal_auth_error"

    @property
    def exit_code(self) -> int:
        return _EXIT_CODES[self]

    @property
    def is_fatal(self) -> bool:
        return self in (RunStatus.FATAL_ENUMERATION_ERROR, RunStatus.FATAL_AUTH_ERROR)


_EXIT_CODES = {
    RunStatus.COMPLETED_DISPATCH_ONLY: 0,
    RunStatus.COMPLETED_MONITORED: 0,
    RunStatus.FATAL_ENUMERATION_ERROR: 1,
    RunStatus.FATAL_AUTH_ERROR: 1,
    RunStatus.BLOCKED: 2,
}


@dataclass(frozen=True)
class Container:
    """A resource group as seen at enumeration time."""
    name: str
    location: str
    tags: Optional[Dict[str, str]] = None
    id: Optional[str] = None  # ARM resource id, e.g. /subscriptions/<sub>/resourceGroups/<name>


@dataclass(frozen=True)
class RetentionPolicy:
    """Which resource groups survive a sweep."""
    tag_key: str = "keepIt"
    keep_value: str = "true"
    exclusions: FrozenSet[str] = field(default_factory=frozenset)


@dataclass(frozen=True)
class Decision:
    """Keep/delete verdict for one resource group."""
    container_name: str
    location: str
    outcome: Outcome
    reason: str
    reason_code: ReasonCode

    @property
    def keep(self) -> bool:
        return self.outcome is Outcome.KEEP

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.container_name,
            "location": self.location,
            "outcome": self.outcome.value,
            "reason": self.reason,
            "reason_code": self.reason_code.value,
        }


@dataclass(frozen=True)
class DeletionJobHandle:
    """Reference to a requested deletion, or the reason it was rejected."""
    container_name: str
    job: Any = None  # opaque provider handle (an LROPoller for Azure)
    dispatch_error: Optional[str] = None

    @property
    def dispatched(self) -> bool:
        return self.dispatch_error is None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.container_name,
            "dispatched": self.dispatched,
            "dispatch_error": self.dispatch_error,
        }


@dataclass(frozen=True)
class JobWaitResult:
    """What a provider knows about a job once a bounded wait returns."""
    state: JobState
    error: Optional[str] = None


@dataclass(frozen=True)
class JobOutcome:
    """Final monitored status of one deletion job."""
    container_name: str
    status: JobStatus
    detail: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.container_name,
            "status": self.status.value,
            "detail": self.detail,
        }
