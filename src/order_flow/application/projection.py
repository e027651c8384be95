"""Read-side views over an order's live process instance.

``StatusProjector`` turns the active-activity tree into a status string.
``AffordanceDiscovery`` turns pending message subscriptions into the link
names a caller may follow next.
"""

from __future__ import annotations

import logging

from ..domain.errors import ModelInvariantViolation
from ..domain.links import extract_link_name, link_prefix
from ..domain.workflow import ActivityInstance, WorkflowClient

logger = logging.getLogger(__name__)


def project_activity_tree(
    instance_id: str, tree: ActivityInstance,
) -> str | ModelInvariantViolation:
    """Return the name of the single active activity under ``tree``.

    The order process has no parallel branches, so the root must have
    exactly one child. Any other shape is returned as a
    ``ModelInvariantViolation`` value rather than raised, leaving the
    decision to the caller.
    """
    if len(tree.children) != 1:
        active = [c.activity_name or c.activity_id for c in tree.children]
        return ModelInvariantViolation(instance_id, active)
    child = tree.children[0]
    return child.activity_name or child.activity_id


class StatusProjector:
    def __init__(self, workflow: WorkflowClient):
        self._workflow = workflow

    def status(self, business_key: str) -> str:
        """Current status of the order identified by ``business_key``.

        Raises:
            NotFoundError: No instance exists for the key.
            ModelInvariantViolation: The instance is not in exactly one
                activity.
        """
        instance_id = self._workflow.find_instance_by_business_key(business_key)
        result = project_activity_tree(
            instance_id, self._workflow.get_activity_tree(instance_id),
        )
        if isinstance(result, ModelInvariantViolation):
            logger.error("Status projection failed for %s: %s", business_key, result)
            raise result
        logger.debug("Business key %s is in %r", business_key, result)
        return result


class AffordanceDiscovery:
    def __init__(self, workflow: WorkflowClient):
        self._workflow = workflow

    def available_links(self, business_key: str, resource_type: str) -> list[str]:
        """Link names currently offered for ``resource_type``.

        Only subscriptions whose name starts with
        ``Message_<resource_type>`` are considered; each yields the text
        after its last ``_``. The result keeps the engine's listing order
        and is empty when nothing is possible right now.

        Raises:
            NotFoundError: No instance exists for the key.
            MalformedSubscriptionNameError: A matching subscription has an
                empty link name.
        """
        instance_id = self._workflow.find_instance_by_business_key(business_key)
        prefix = link_prefix(resource_type)
        links = [
            extract_link_name(sub.event_name)
            for sub in self._workflow.list_pending_message_subscriptions(instance_id)
            if sub.event_name.startswith(prefix)
        ]
        logger.debug(
            "Business key %s offers %s links: %s", business_key, resource_type, links,
        )
        return links
