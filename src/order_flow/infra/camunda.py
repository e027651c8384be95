"""Camunda 7 REST adapter implementing WorkflowClient.

Maps the engine's REST resources to the port used by the order bridge:

- ``POST /process-definition/key/{key}/start``  -> start_instance
- ``POST /message``                             -> correlate_message
- ``GET  /process-instance?businessKey=``       -> find_instance_by_business_key
- ``GET  /process-instance/{id}/activity-instances`` -> get_activity_tree
- ``GET  /event-subscription``                  -> list_pending_message_subscriptions
"""

import logging

from ..domain.errors import (
    DuplicateBusinessKeyError,
    NotFoundError,
    NotWaitingError,
    TransportError,
)
from ..domain.workflow import ActivityInstance, EventSubscription
from .http_client import HttpClient, HttpResponseError

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:8080/engine-rest"

_MISMATCH = "MismatchingMessageCorrelationException"


def _parse_activity_instance(raw: dict) -> ActivityInstance:
    if not isinstance(raw, dict) or "activityId" not in raw:
        raise TransportError(f"Malformed activity instance: {raw!r}")
    children = tuple(
        _parse_activity_instance(child)
        for child in raw.get("childActivityInstances") or []
    )
    return ActivityInstance(
        activity_id=raw["activityId"],
        activity_name=raw.get("activityName"),
        children=children,
    )


def _is_correlation_mismatch(err: HttpResponseError) -> bool:
    if err.status_code not in (400, 500) or not isinstance(err.body, dict):
        return False
    text = f"{err.body.get('type', '')} {err.body.get('message', '')}"
    return _MISMATCH in text or "Cannot correlate message" in text


class CamundaRestClient:
    """Workflow client backed by the Camunda 7 REST API.

    Implements the ``WorkflowClient`` protocol.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        max_retries: int = 3,
        timeout: float = 30,
        backoff: float = 1.0,
    ):
        self._http = HttpClient(
            base_url=base_url,
            max_retries=max_retries,
            timeout=timeout,
            backoff=backoff,
        )

    @property
    def engine(self) -> str:
        return "camunda"

    def close(self):
        self._http.close()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()

    # ------------------------------------------------------------------ #
    #  Commands                                                            #
    # ------------------------------------------------------------------ #

    def start_instance(self, definition_key: str, business_key: str) -> str:
        data = self._http.post(
            f"/process-definition/key/{definition_key}/start",
            {"businessKey": business_key},
        )
        if not isinstance(data, dict) or "id" not in data:
            raise TransportError(f"Unexpected start response: {data!r}")
        return data["id"]

    def correlate_message(self, message_name: str, business_key: str) -> None:
        try:
            self._http.post(
                "/message",
                {"messageName": message_name, "businessKey": business_key},
            )
        except HttpResponseError as err:
            if not _is_correlation_mismatch(err):
                raise
            # The engine reports both "no instance" and "not waiting" the
            # same way; look the instance up to tell them apart.
            self.find_instance_by_business_key(business_key)
            raise NotWaitingError(business_key, message_name) from err

    # ------------------------------------------------------------------ #
    #  Queries                                                             #
    # ------------------------------------------------------------------ #

    def find_instance_by_business_key(self, business_key: str) -> str:
        data = self._http.get("/process-instance", {"businessKey": business_key})
        if not isinstance(data, list):
            raise TransportError(f"Unexpected process-instance response: {data!r}")
        if not data:
            raise NotFoundError(business_key)
        if len(data) > 1:
            raise DuplicateBusinessKeyError(business_key)
        logger.debug("Business key %s -> instance %s", business_key, data[0]["id"])
        return data[0]["id"]

    def get_activity_tree(self, instance_id: str) -> ActivityInstance:
        data = self._http.get(f"/process-instance/{instance_id}/activity-instances")
        return _parse_activity_instance(data)

    def list_pending_message_subscriptions(
        self, instance_id: str,
    ) -> list[EventSubscription]:
        data = self._http.get(
            "/event-subscription",
            {"processInstanceId": instance_id, "eventType": "message"},
        )
        if not isinstance(data, list):
            raise TransportError(f"Unexpected event-subscription response: {data!r}")
        return [
            EventSubscription(
                event_name=row["eventName"],
                event_type=row.get("eventType", "message"),
            )
            for row in data
        ]
