"""
Tests for the Azure provider, with the SDK client mocked out.
"""

import pytest
from unittest.mock import MagicMock, Mock, patch

from azure.core.exceptions import (
    ClientAuthenticationError,
    HttpResponseError,
    ResourceNotFoundError,
    ServiceRequestError,
)

from rgsweep.errors import AuthError, DispatchError, EnumerationError, MonitorError, TagFetchError
from rgsweep.models import Container, JobState
from rgsweep.provider.azure import AzureResourceGroupProvider, build_credential


def _rg(name, tags=None, location="westeurope"):
    group = Mock()
    group.name = name
    group.location = location
    group.tags = tags
    group.id = f"/subscriptions/sub-1/resourceGroups/{name}"
    return group


@pytest.fixture
def client():
    return MagicMock()


@pytest.fixture
def provider(client):
    return AzureResourceGroupProvider("sub-1", client=client)


class TestListContainers:

    def test_lists_groups(self, provider, client):
        client.resource_groups.list.return_value = iter([
            _rg("rg-a", {"keepIt": "true"}),
            _rg("rg-b", None, "eastus"),
        ])

        containers = provider.list_containers()

        assert containers[0] == Container(
            name="rg-a", location="westeurope", tags={"keepIt": "true"},
            id="/subscriptions/sub-1/resourceGroups/rg-a",
        )
        assert containers[1].tags == {}
        assert containers[1].location == "eastus"

    def test_auth_error(self, provider, client):
        client.resource_groups.list.side_effect = ClientAuthenticationError(message="AADSTS7000215: Invalid client secret")

        with pytest.raises(AuthError, match="Invalid client secret"):
            provider.list_containers()

    def test_enumeration_error(self, provider, client):
        client.resource_groups.list.side_effect = ServiceRequestError("Connection timed out")

        with pytest.raises(EnumerationError, match="sub-1"):
            provider.list_containers()


class TestGetTags:

    def test_reads_current_tags(self, provider, client):
        client.resource_groups.get.return_value = _rg("rg-a", {"KeepIt": "true"})

        tags = provider.get_tags(Container(name="rg-a", location="westeurope"))

        assert tags == {"KeepIt": "true"}
        client.resource_groups.get.assert_called_once_with("rg-a")

    def test_missing_tags(self, provider, client):
        client.resource_groups.get.return_value = _rg("rg-a", None)
        assert provider.get_tags(Container(name="rg-a", location="westeurope")) == {}

    def test_error_becomes_tag_fetch_error(self, provider, client):
        client.resource_groups.get.side_effect = ResourceNotFoundError(message="ResourceGroupNotFound")

        with pytest.raises(TagFetchError) as excinfo:
            provider.get_tags(Container(name="rg-a", location="westeurope"))

        assert excinfo.value.resource_group == "rg-a"


class TestRequestDelete:

    def test_returns_poller(self, provider, client):
        poller = Mock()
        client.resource_groups.begin_delete.return_value = poller

        assert provider.request_delete("rg-a") is poller
        client.resource_groups.begin_delete.assert_called_once_with("rg-a")

    def test_rejection(self, provider, client):
        client.resource_groups.begin_delete.side_effect = HttpResponseError(message="ScopeLocked")

        with pytest.raises(DispatchError, match="ScopeLocked") as excinfo:
            provider.request_delete("rg-a")

        assert excinfo.value.resource_group == "rg-a"

    def test_transport_error(self, provider, client):
        client.resource_groups.begin_delete.side_effect = ServiceRequestError("DNS lookup failed")

        with pytest.raises(DispatchError):
            provider.request_delete("rg-a")


class TestWaitForJob:

    def _poller(self, done=True, status="Succeeded", wait_error=None):
        poller = Mock()
        poller.done.return_value = done
        poller.status.return_value = status
        if wait_error is not None:
            poller.wait.side_effect = wait_error
        return poller

    def test_succeeded(self, provider):
        poller = self._poller()

        result = provider.wait_for_job(poller, 30)

        assert result.state is JobState.SUCCEEDED
        poller.wait.assert_called_once_with(timeout=30)

    def test_still_running(self, provider):
        result = provider.wait_for_job(self._poller(done=False, status="InProgress"), 1)
        assert result.state is JobState.RUNNING

    def test_failed_operation(self, provider):
        poller = self._poller(wait_error=HttpResponseError(message="Conflict: resources are locked"))

        result = provider.wait_for_job(poller, 30)

        assert result.state is JobState.FAILED
        assert "locked" in result.error

    def test_failed_status(self, provider):
        result = provider.wait_for_job(self._poller(status="Canceled"), 30)

        assert result.state is JobState.FAILED
        assert "Canceled" in result.error

    def test_polling_error(self, provider):
        poller = self._poller(wait_error=ServiceRequestError("Connection reset"))

        with pytest.raises(MonitorError):
            provider.wait_for_job(poller, 30)

    def test_auth_error_while_polling_is_not_a_failed_job(self, provider):
        poller = self._poller(wait_error=ClientAuthenticationError(message="token expired"))

        with pytest.raises(MonitorError, match="token expired"):
            provider.wait_for_job(poller, 30)


class TestCredential:

    @patch("rgsweep.provider.azure.ClientSecretCredential")
    def test_service_principal(self, mock_credential):
        build_credential("tenant", "client", "secret")
        mock_credential.assert_called_once_with(tenant_id="tenant", client_id="client", client_secret="secret")

    @patch("rgsweep.provider.azure.DefaultAzureCredential")
    def test_default_credential(self, mock_credential):
        build_credential()
        mock_credential.assert_called_once_with()

    @patch("rgsweep.provider.azure.ResourceManagementClient")
    def test_builds_client(self, mock_client):
        credential = Mock()
        provider = AzureResourceGroupProvider("sub-1", credential=credential)

        mock_client.assert_called_once_with(credential, "sub-1")
        assert provider.client is mock_client.return_value
