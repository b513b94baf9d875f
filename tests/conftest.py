"""
Shared fixtures: an in-memory provider that records every call.
"""

import threading
import time

import pytest

from rgsweep.errors import DispatchError, EnumerationError, MonitorError, TagFetchError
from rgsweep.models import Container, JobState, JobWaitResult
from rgsweep.provider.base import ResourceGroupProvider


class FakeProvider(ResourceGroupProvider):
    """Provider double driven by plain sets and dicts."""

    def __init__(
        self,
        containers=(),
        tag_errors=(),
        reject=(),
        results=None,
        wait_errors=(),
        slow=(),
        list_error=None,
        tag_raises=None,
        wait_raises=None,
    ):
        self.containers = list(containers)
        self.tag_errors = set(tag_errors)
        self.reject = set(reject)
        self.results = dict(results or {})
        self.wait_errors = set(wait_errors)
        self.slow = set(slow)  # jobs that are still running when the wait times out
        self.list_error = list_error
        self.tag_raises = dict(tag_raises or {})  # name -> exception raised by get_tags
        self.wait_raises = dict(wait_raises or {})  # name -> exception raised by wait_for_job
        self.calls = []
        self._lock = threading.Lock()

    def _record(self, op, arg):
        with self._lock:
            self.calls.append((op, arg))

    def calls_to(self, op):
        return [arg for name, arg in self.calls if name == op]

    def list_containers(self):
        self._record("list_containers", None)
        if self.list_error is not None:
            raise self.list_error
        return list(self.containers)

    def get_tags(self, container):
        self._record("get_tags", container.name)
        if container.name in self.tag_raises:
            raise self.tag_raises[container.name]
        if container.name in self.tag_errors:
            raise TagFetchError("403 Forbidden", resource_group=container.name)
        return dict(container.tags or {})

    def request_delete(self, container_name):
        self._record("request_delete", container_name)
        if container_name in self.reject:
            raise DispatchError(f"ScopeLocked: {container_name} has a delete lock", resource_group=container_name)
        return f"job:{container_name}"

    def wait_for_job(self, job, timeout):
        name = job.split(":", 1)[1]
        self._record("wait_for_job", (name, timeout))
        if name in self.wait_errors:
            raise MonitorError("Connection reset by peer")
        if name in self.wait_raises:
            raise self.wait_raises[name]
        if name in self.slow:
            time.sleep(timeout)
            return JobWaitResult(state=JobState.RUNNING)
        return self.results.get(name, JobWaitResult(state=JobState.SUCCEEDED))


def rg(name, tags=None, location="westeurope"):
    return Container(name=name, location=location, tags=tags, id=f"/subscriptions/sub-1/resourceGroups/{name}")


@pytest.fixture
def make_provider():
    return FakeProvider


@pytest.fixture
def sample_groups():
    return [
        rg("rg-keep", {"KeepIt": "true"}),
        rg("rg-untagged"),
        rg("rg-false", {"keepit": "false"}),
        rg("rg-other", {"owner": "alice"}),
        rg("rg-excluded", {"keepIt": "false"}),
    ]


@pytest.fixture
def enumeration_failure():
    return EnumerationError("Could not list resource groups in sub-1: connection timed out")


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in (
        "RGSWEEP_ENABLE_DELETION",
        "RGSWEEP_MONITOR_JOBS",
        "RGSWEEP_JOB_TIMEOUT_SECONDS",
        "RGSWEEP_EXCLUDE",
        "RGSWEEP_TAG_KEY",
        "RGSWEEP_KEEP_VALUE",
        "RGSWEEP_MAX_WORKERS",
        "AZURE_SUBSCRIPTION_ID",
    ):
        monkeypatch.delenv(name, raising=False)
