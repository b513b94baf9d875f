"""
Retention classification of resource groups.
"""

import logging
from typing import Iterable, Iterator, List, Mapping, Optional

from .errors import AuthError, ProviderError
from .models import Container, Decision, Outcome, ReasonCode, RetentionPolicy
from .tags import find_tag

logger = logging.getLogger(__name__)

REASON_EXCLUDED = "Excluded by parameter"
REASON_NO_TAGS = "No tags present"
REASON_TAG_NOT_FOUND = "'{tag_key}' tag not found"
REASON_TAG_MATCH = "'{key}' = '{value}'"
REASON_TAG_MISMATCH = "'{key}' = '{value}' (not '{keep_value}')"
REASON_TAG_ERROR = "Error retrieving tags (will delete by default)"


class RetentionClassifier:
    """Decides whether a resource group is kept or deleted."""

    def __init__(self, policy: Optional[RetentionPolicy] = None):
        self.policy = policy or RetentionPolicy()

    def classify(self, container: Container, tags: Optional[Mapping[str, str]] = None) -> Decision:
        """
        Classify a resource group. The first matching rule wins.

        Args:
            container: Resource group snapshot
            tags: Tags to evaluate; defaults to container.tags

        Returns:
            Decision for the resource group
        """
        if container.name in self.policy.exclusions:
            return self._decide(container, Outcome.KEEP, ReasonCode.EXCLUDED, REASON_EXCLUDED)

        if tags is None:
            tags = container.tags

        if not tags:
            return self._decide(container, Outcome.DELETE, ReasonCode.NO_TAGS, REASON_NO_TAGS)

        match = find_tag(tags, self.policy.tag_key)
        if match is None:
            reason = REASON_TAG_NOT_FOUND.format(tag_key=self.policy.tag_key)
            return self._decide(container, Outcome.DELETE, ReasonCode.TAG_NOT_FOUND, reason)

        key, value = match
        if value == self.policy.keep_value:
            reason = REASON_TAG_MATCH.format(key=key, value=value)
            return self._decide(container, Outcome.KEEP, ReasonCode.TAG_MATCH, reason)

        reason = REASON_TAG_MISMATCH.format(key=key, value=value, keep_value=self.policy.keep_value)
        return self._decide(container, Outcome.DELETE, ReasonCode.TAG_MISMATCH, reason)

    def classify_tag_error(self, container: Container) -> Decision:
        """Classify a resource group whose tags could not be read."""
        if container.name in self.policy.exclusions:
            return self._decide(container, Outcome.KEEP, ReasonCode.EXCLUDED, REASON_EXCLUDED)

        return self._decide(container, Outcome.DELETE, ReasonCode.TAG_ERROR, REASON_TAG_ERROR)

    def iter_decisions(self, containers: Iterable[Container], tag_source=None) -> Iterator[Decision]:
        """
        Classify resource groups one at a time, fetching tags through tag_source.

        A provider error while reading tags defaults that group to delete.
        AuthError is fatal and propagates; decisions already yielded stay
        with the caller.

        Args:
            containers: Resource groups to classify
            tag_source: Object with get_tags(container); when None the
                tags captured at enumeration time are used

        Yields:
            One decision per resource group, in input order
        """
        for container in containers:
            if tag_source is None:
                decision = self.classify(container)
            else:
                try:
                    tags = tag_source.get_tags(container)
                except AuthError:
                    raise
                except ProviderError as e:
                    logger.warning(f"Could not read tags for {container.name}, defaulting to delete: {e}")
                    decision = self.classify_tag_error(container)
                else:
                    decision = self.classify(container, tags or {})

            logger.info(f"{decision.outcome.value.upper()} {decision.container_name}: {decision.reason}")
            yield decision

    def classify_all(self, containers: Iterable[Container], tag_source=None) -> List[Decision]:
        """Classify every resource group; see iter_decisions."""
        return list(self.iter_decisions(containers, tag_source))

    @staticmethod
    def _decide(container: Container, outcome: Outcome, code: ReasonCode, reason: str) -> Decision:
        return Decision(
            container_name=container.name,
            location=container.location,
            outcome=outcome,
            reason=reason,
            reason_code=code,
        )


def classify(container: Container, policy: Optional[RetentionPolicy] = None) -> Decision:
    """Classify a single resource group with the given policy."""
    return RetentionClassifier(policy).classify(container)
