"""Correlation bridge: business key -> process instance -> message."""

from __future__ import annotations

import logging

from ..domain.models import ORDER_PROCESS_KEY, OrderMessage
from ..domain.workflow import WorkflowClient

logger = logging.getLogger(__name__)


class CorrelationBridge:
    """Starts order process instances and sends them lifecycle messages.

    Engine failures are propagated unchanged. In particular a
    ``NotWaitingError`` from ``correlate`` means the requested transition is
    not allowed in the instance's current state, and callers must see it.
    """

    def __init__(self, workflow: WorkflowClient, process_key: str = ORDER_PROCESS_KEY):
        self._workflow = workflow
        self._process_key = process_key

    def start(self, business_key: str) -> str:
        """Start one instance of the order process for ``business_key``.

        Calling this twice for the same key is a caller error; whether the
        second call is rejected is up to the engine.
        """
        instance_id = self._workflow.start_instance(self._process_key, business_key)
        logger.info(
            "Started %s instance %s for business key %s",
            self._process_key, instance_id, business_key,
        )
        return instance_id

    def correlate(self, business_key: str, message_name: str | OrderMessage) -> None:
        """Deliver ``message_name`` to the instance for ``business_key``.

        Raises:
            NotFoundError: No instance exists for the key.
            NotWaitingError: The instance is not waiting for the message.
        """
        if isinstance(message_name, OrderMessage):
            message_name = message_name.value
        self._workflow.correlate_message(message_name, business_key)
        logger.info("Correlated %s to business key %s", message_name, business_key)
