"""
Run configuration for rgsweep.

Values come from RGSWEEP_* environment variables; CLI options override them.
"""

import os
from dataclasses import dataclass, field, replace
from typing import FrozenSet, Mapping, Optional

from .errors import ConfigError
from .models import RetentionPolicy
from .tags import parse_name_list

DEFAULT_TAG_KEY = "keepIt"
DEFAULT_KEEP_VALUE = "true"
DEFAULT_JOB_TIMEOUT_SECONDS = 300

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off", ""}


@dataclass(frozen=True)
class RunConfig:
    """Settings for one cleanup run."""
    enable_deletion: bool = False
    monitor_jobs: bool = False
    job_timeout_seconds: int = DEFAULT_JOB_TIMEOUT_SECONDS
    exclusions: FrozenSet[str] = field(default_factory=frozenset)
    tag_key: str = DEFAULT_TAG_KEY
    keep_value: str = DEFAULT_KEEP_VALUE
    subscription_id: Optional[str] = None
    max_workers: Optional[int] = None

    def __post_init__(self):
        if self.job_timeout_seconds <= 0:
            raise ConfigError(f"Job timeout must be a positive number of seconds, got {self.job_timeout_seconds}")
        if not self.tag_key or not self.tag_key.strip():
            raise ConfigError("Tag key must not be empty")
        if self.max_workers is not None and self.max_workers <= 0:
            raise ConfigError(f"max_workers must be positive, got {self.max_workers}")

    def policy(self) -> RetentionPolicy:
        return RetentionPolicy(tag_key=self.tag_key, keep_value=self.keep_value, exclusions=self.exclusions)

    def with_overrides(self, **overrides) -> "RunConfig":
        """Return a copy with every non-None override applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "RunConfig":
        """
        Build configuration from environment variables.

        Args:
            environ: Mapping to read from; defaults to os.environ

        Returns:
            RunConfig

        Raises:
            ConfigError: If a value cannot be parsed
        """
        env = os.environ if environ is None else environ

        return cls(
            enable_deletion=_parse_bool(env, "RGSWEEP_ENABLE_DELETION", False),
            monitor_jobs=_parse_bool(env, "RGSWEEP_MONITOR_JOBS", False),
            job_timeout_seconds=_parse_int(env, "RGSWEEP_JOB_TIMEOUT_SECONDS", DEFAULT_JOB_TIMEOUT_SECONDS),
            exclusions=parse_name_list([env.get("RGSWEEP_EXCLUDE", "")]),
            tag_key=env.get("RGSWEEP_TAG_KEY", DEFAULT_TAG_KEY),
            keep_value=env.get("RGSWEEP_KEEP_VALUE", DEFAULT_KEEP_VALUE),
            subscription_id=env.get("AZURE_SUBSCRIPTION_ID") or None,
            max_workers=_parse_int(env, "RGSWEEP_MAX_WORKERS", None),
        )


def _parse_bool(env: Mapping[str, str], name: str, default: bool) -> bool:
    raw = env.get(name)
    if raw is None:
        return default

    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ConfigError(f"Invalid boolean for {name}: {raw!r}")


def _parse_int(env: Mapping[str, str], name: str, default: Optional[int]) -> Optional[int]:
    raw = env.get(name)
    if raw is None or not raw.strip():
        return default

    try:
        return int(raw)
    except ValueError:
        raise ConfigError(f"Invalid integer for {name}: {raw!r}")
