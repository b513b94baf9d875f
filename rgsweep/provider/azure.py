"""
Azure Resource Manager provider.

Wraps ResourceManagementClient.resource_groups and maps azure-core
exceptions onto the rgsweep error hierarchy.
"""

import logging
from typing import Any, Dict, List, Optional

from azure.core.exceptions import AzureError, ClientAuthenticationError, HttpResponseError
from azure.identity import ClientSecretCredential, DefaultAzureCredential
from azure.mgmt.resource import ResourceManagementClient

from ..errors import AuthError, DispatchError, EnumerationError, MonitorError, TagFetchError
from ..models import Container, JobState, JobWaitResult
from .base import ResourceGroupProvider

logger = logging.getLogger(__name__)

FAILED_STATES = ("failed", "canceled", "cancelled")


def build_credential(
    tenant_id: Optional[str] = None,
    client_id: Optional[str] = None,
    client_secret: Optional[str] = None,
):
    """
    Build an Azure credential.

    A service principal is used when all three values are given, otherwise
    DefaultAzureCredential (environment, managed identity, Azure CLI, ...).
    """
    if tenant_id and client_id and client_secret:
        return ClientSecretCredential(tenant_id=tenant_id, client_id=client_id, client_secret=client_secret)
    return DefaultAzureCredential()


def _format_http_error(error) -> str:
    """Extract a readable message from an HttpResponseError."""
    msg = str(error.message) if getattr(error, "message", None) else str(error)
    if getattr(error, "error", None) and getattr(error.error, "message", None):
        msg = error.error.message
    return msg


class AzureResourceGroupProvider(ResourceGroupProvider):
    """Resource group operations against one Azure subscription."""

    def __init__(self, subscription_id: str, credential=None, client: Optional[ResourceManagementClient] = None):
        self.subscription_id = subscription_id
        if client is None:
            client = ResourceManagementClient(credential or build_credential(), subscription_id)
        self.client = client

    def list_containers(self) -> List[Container]:
        try:
            groups = list(self.client.resource_groups.list())
        except ClientAuthenticationError as e:
            raise AuthError(f"Azure authentication failed: {_format_http_error(e)}") from e
        except AzureError as e:
            raise EnumerationError(f"Could not list resource groups in {self.subscription_id}: {e}") from e

        containers = [
            Container(name=rg.name, location=rg.location, tags=dict(rg.tags or {}), id=rg.id)
            for rg in groups
        ]
        logger.info(f"Found {len(containers)} resource groups in subscription {self.subscription_id}")
        return containers

    def get_tags(self, container: Container) -> Dict[str, str]:
        try:
            rg = self.client.resource_groups.get(container.name)
        except AzureError as e:
            raise TagFetchError(f"Could not read tags: {e}", resource_group=container.name) from e
        return dict(rg.tags or {})

    def request_delete(self, container_name: str) -> Any:
        try:
            poller = self.client.resource_groups.begin_delete(container_name)
        except HttpResponseError as e:
            raise DispatchError(_format_http_error(e), resource_group=container_name) from e
        except AzureError as e:
            raise DispatchError(str(e), resource_group=container_name) from e
        logger.debug(f"Delete initiated for {container_name}")
        return poller

    def wait_for_job(self, job: Any, timeout: float) -> JobWaitResult:
        try:
            job.wait(timeout=timeout)
        except ClientAuthenticationError as e:
            raise MonitorError(f"Authentication failed while polling: {_format_http_error(e)}") from e
        except HttpResponseError as e:
            # raised by the poller when the operation itself ended in failure
            return JobWaitResult(state=JobState.FAILED, error=_format_http_error(e))
        except AzureError as e:
            raise MonitorError(str(e)) from e

        if not job.done():
            return JobWaitResult(state=JobState.RUNNING)

        status = job.status() or ""
        if status.lower() in FAILED_STATES:
            return JobWaitResult(state=JobState.FAILED, error=f"Deletion finished with state '{status}'")

        return JobWaitResult(state=JobState.SUCCEEDED)
