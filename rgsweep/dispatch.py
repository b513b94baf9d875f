"""
Deletion dispatch for resource groups marked for removal.
"""

import logging
from typing import Iterable, List

from .errors import ProviderError
from .models import Decision, DeletionJobHandle, Outcome
from .provider.base import ResourceGroupProvider

logger = logging.getLogger(__name__)


class DeletionDispatcher:
    """Starts asynchronous deletions and records a handle for each."""

    def __init__(self, provider: ResourceGroupProvider):
        self.provider = provider

    def dispatch(self, decisions: Iterable[Decision]) -> List[DeletionJobHandle]:
        """
        Request deletion of every resource group with a DELETE decision.

        A rejected request is recorded on that group's handle and does not
        stop the remaining dispatches.

        Args:
            decisions: Classifier output; KEEP decisions are ignored

        Returns:
            One handle per DELETE decision, in input order
        """
        handles = []

        for decision in decisions:
            if decision.outcome is not Outcome.DELETE:
                continue
            handles.append(self._dispatch_one(decision.container_name))

        dispatched = sum(1 for h in handles if h.dispatched)
        logger.info(f"Dispatched {dispatched} deletions, {len(handles) - dispatched} rejected")
        return handles

    def _dispatch_one(self, name: str) -> DeletionJobHandle:
        try:
            job = self.provider.request_delete(name)
        except ProviderError as e:
            logger.warning(f"Delete request for {name} rejected: {e}")
            return DeletionJobHandle(container_name=name, dispatch_error=str(e) or type(e).__name__)
        except Exception as e:
            logger.error(f"Unexpected error requesting delete of {name}: {e}")
            return DeletionJobHandle(container_name=name, dispatch_error=f"{type(e).__name__}: {e}")

        logger.info(f"Delete initiated for {name}")
        return DeletionJobHandle(container_name=name, job=job)
