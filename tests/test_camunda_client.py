"""Tests for order_flow.infra.camunda (CamundaRestClient)."""

from unittest.mock import patch

import pytest

from order_flow.domain.errors import (
    DuplicateBusinessKeyError,
    NotFoundError,
    NotWaitingError,
    TransportError,
)
from order_flow.domain.workflow import ActivityInstance, EventSubscription
from order_flow.infra.camunda import CamundaRestClient
from order_flow.infra.http_client import HttpResponseError


def _mismatch():
    return HttpResponseError(
        400,
        {
            "type": "RestException",
            "message": "org.camunda.bpm.engine.MismatchingMessageCorrelationException: "
                       "Cannot correlate message 'Message_TAKEN': No process definition "
                       "or execution matches the parameters",
        },
        "...",
    )


ACTIVITY_TREE = {
    "id": "pi-1",
    "activityId": "order:1:abc",
    "activityName": "Order",
    "childActivityInstances": [
        {
            "id": "Task_1:xyz",
            "activityId": "Task_1",
            "activityName": "In preparation",
            "childActivityInstances": [],
        },
    ],
    "childTransitionInstances": [],
}


@pytest.fixture
def client():
    return CamundaRestClient("http://engine/rest", backoff=0)


class TestStartInstance:
    def test_posts_business_key(self, client):
        with patch.object(client._http, "post", return_value={"id": "pi-1"}) as post:
            assert client.start_instance("order", "42") == "pi-1"
        post.assert_called_once_with(
            "/process-definition/key/order/start", {"businessKey": "42"},
        )

    def test_unexpected_body(self, client):
        with patch.object(client._http, "post", return_value={"links": []}):
            with pytest.raises(TransportError, match="Unexpected start response"):
                client.start_instance("order", "42")

    def test_engine_rejection_propagates(self, client):
        error = HttpResponseError(500, {"type": "ProcessEngineException"}, "duplicate")
        with patch.object(client._http, "post", side_effect=error):
            with pytest.raises(HttpResponseError) as exc_info:
                client.start_instance("order", "42")
        assert exc_info.value is error


class TestCorrelateMessage:
    def test_posts_message(self, client):
        with patch.object(client._http, "post", return_value=None) as post:
            client.correlate_message("Message_PAYMENT", "42")
        post.assert_called_once_with(
            "/message", {"messageName": "Message_PAYMENT", "businessKey": "42"},
        )

    def test_mismatch_with_instance_is_not_waiting(self, client):
        with patch.object(client._http, "post", side_effect=_mismatch()), \
                patch.object(client._http, "get", return_value=[{"id": "pi-1"}]):
            with pytest.raises(NotWaitingError) as exc_info:
                client.correlate_message("Message_TAKEN", "42")
        assert exc_info.value.message_name == "Message_TAKEN"

    def test_mismatch_without_instance_is_not_found(self, client):
        with patch.object(client._http, "post", side_effect=_mismatch()), \
                patch.object(client._http, "get", return_value=[]):
            with pytest.raises(NotFoundError):
                client.correlate_message("Message_PAYMENT", "42")

    def test_other_errors_propagate(self, client):
        error = HttpResponseError(503, None, "unavailable")
        with patch.object(client._http, "post", side_effect=error):
            with pytest.raises(TransportError, match="HTTP 503"):
                client.correlate_message("Message_PAYMENT", "42")


class TestFindInstance:
    def test_single_result(self, client):
        with patch.object(client._http, "get", return_value=[{"id": "pi-1"}]) as get:
            assert client.find_instance_by_business_key("42") == "pi-1"
        get.assert_called_once_with("/process-instance", {"businessKey": "42"})

    def test_no_result(self, client):
        with patch.object(client._http, "get", return_value=[]):
            with pytest.raises(NotFoundError, match="'42'"):
                client.find_instance_by_business_key("42")

    def test_several_results(self, client):
        with patch.object(client._http, "get", return_value=[{"id": "a"}, {"id": "b"}]):
            with pytest.raises(DuplicateBusinessKeyError):
                client.find_instance_by_business_key("42")

    def test_malformed_response(self, client):
        with patch.object(client._http, "get", return_value={"oops": 1}):
            with pytest.raises(TransportError):
                client.find_instance_by_business_key("42")


class TestActivityTree:
    def test_parses_nested_tree(self, client):
        with patch.object(client._http, "get", return_value=ACTIVITY_TREE) as get:
            tree = client.get_activity_tree("pi-1")
        get.assert_called_once_with("/process-instance/pi-1/activity-instances")
        assert tree == ActivityInstance(
            "order:1:abc", "Order",
            (ActivityInstance("Task_1", "In preparation"),),
        )

    def test_malformed_tree(self, client):
        with patch.object(client._http, "get", return_value={"id": "pi-1"}):
            with pytest.raises(TransportError, match="Malformed activity instance"):
                client.get_activity_tree("pi-1")


class TestSubscriptions:
    def test_lists_message_subscriptions(self, client):
        rows = [
            {"id": "s1", "eventType": "message", "eventName": "Message_Payment_Settle"},
            {"id": "s2", "eventType": "message", "eventName": "Message_PAYMENT"},
        ]
        with patch.object(client._http, "get", return_value=rows) as get:
            subs = client.list_pending_message_subscriptions("pi-1")
        get.assert_called_once_with(
            "/event-subscription",
            {"processInstanceId": "pi-1", "eventType": "message"},
        )
        assert subs == [
            EventSubscription("Message_Payment_Settle"),
            EventSubscription("Message_PAYMENT"),
        ]

    def test_malformed_response(self, client):
        with patch.object(client._http, "get", return_value=None):
            with pytest.raises(TransportError):
                client.list_pending_message_subscriptions("pi-1")


def test_context_manager():
    with CamundaRestClient() as client:
        assert client.engine == "camunda"
