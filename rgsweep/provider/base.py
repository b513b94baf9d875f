"""
Provider interface for resource group operations.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List

from ..models import Container, JobWaitResult


class ResourceGroupProvider(ABC):
    """Abstract cloud provider used by a cleanup run."""

    @abstractmethod
    def list_containers(self) -> List[Container]:
        """
        List every resource group in the subscription.

        Raises:
            AuthError: If credentials are rejected
            EnumerationError: If the list cannot be read
        """
        pass

    @abstractmethod
    def get_tags(self, container: Container) -> Dict[str, str]:
        """
        Read the current tags of a resource group.

        Raises:
            TagFetchError: If the tags cannot be read
        """
        pass

    @abstractmethod
    def request_delete(self, container_name: str) -> Any:
        """
        Start deleting a resource group without waiting for it.

        Returns:
            Opaque job handle accepted by wait_for_job

        Raises:
            DispatchError: If the provider rejects the request
        """
        pass

    @abstractmethod
    def wait_for_job(self, job: Any, timeout: float) -> JobWaitResult:
        """
        Block until the job finishes or timeout seconds elapse.

        Returns:
            JobWaitResult with state RUNNING if the timeout was reached

        Raises:
            MonitorError: If polling itself failed
        """
        pass
