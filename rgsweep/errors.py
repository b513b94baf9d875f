"""
Exception hierarchy for cleanup runs.

Fatal errors (AuthError, EnumerationError) stop a run. The rest are
recovered per resource group and recorded on its decision or outcome.
"""

from typing import Optional


class CleanupError(Exception):
    """Base class for all rgsweep errors."""


class ConfigError(CleanupError):
    """Invalid run configuration."""


class ProviderError(CleanupError):
    """Any failure reported by the cloud provider."""

    def __init__(self, message: str, resource_group: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.resource_group = resource_group


class AuthError(ProviderError):
    """Credentials were rejected or could not be obtained."""


class EnumerationError(ProviderError):
    """The resource group list could not be read."""


class TagFetchError(ProviderError):
    """Tags for a single resource group could not be read."""


class DispatchError(ProviderError):
    """The provider refused to start a deletion."""


class MonitorError(CleanupError):
    """Waiting on a deletion job failed for a reason other than the job itself."""
