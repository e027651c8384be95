"""Tests for order_flow.infra.http_client."""

from unittest.mock import MagicMock, patch

import pytest
import requests

from order_flow.domain.errors import TransportError
from order_flow.infra.http_client import HttpClient, HttpResponseError


def _resp(status_code, body=None, text=""):
    resp = MagicMock()
    resp.status_code = status_code
    resp.text = text
    if isinstance(body, Exception):
        resp.json.side_effect = body
    else:
        resp.json.return_value = body
    return resp


# ------------------------------------------------------------------ #
#  GET                                                                 #
# ------------------------------------------------------------------ #


class TestGet:
    def test_successful_request(self):
        client = HttpClient("http://engine/rest/")
        with patch.object(
            client.session, "get", return_value=_resp(200, [{"id": "1"}]),
        ) as get:
            assert client.get("/process-instance", {"businessKey": "1"}) == [{"id": "1"}]
        get.assert_called_once_with(
            "http://engine/rest/process-instance",
            params={"businessKey": "1"},
            timeout=30,
        )

    def test_retry_on_503(self):
        client = HttpClient(max_retries=3)
        with patch.object(
            client.session, "get", side_effect=[_resp(503, text="busy"), _resp(200, {"ok": True})],
        ), patch("order_flow.infra.http_client.time.sleep") as sleep:
            assert client.get("/x") == {"ok": True}
        sleep.assert_called_once()

    def test_retry_on_connection_error(self):
        client = HttpClient(max_retries=2)
        with patch.object(
            client.session, "get",
            side_effect=[requests.exceptions.ConnectionError("down"), _resp(200, [])],
        ), patch("order_flow.infra.http_client.time.sleep"):
            assert client.get("/x") == []

    def test_gives_up_after_max_retries(self):
        client = HttpClient(max_retries=2)
        with patch.object(
            client.session, "get",
            side_effect=requests.exceptions.ConnectionError("down"),
        ), patch("order_flow.infra.http_client.time.sleep"):
            with pytest.raises(TransportError, match="after 2 attempts"):
                client.get("/x")

    def test_client_error_not_retried(self):
        client = HttpClient(max_retries=3)
        with patch.object(
            client.session, "get", return_value=_resp(404, {"type": "x"}, "Not Found"),
        ) as get:
            with pytest.raises(HttpResponseError, match="HTTP 404") as exc_info:
                client.get("/x")
        assert get.call_count == 1
        assert exc_info.value.status_code == 404
        assert exc_info.value.body == {"type": "x"}

    def test_malformed_json(self):
        client = HttpClient()
        with patch.object(
            client.session, "get", return_value=_resp(200, ValueError("bad"), "<html>"),
        ):
            with pytest.raises(TransportError, match="Malformed JSON"):
                client.get("/x")


# ------------------------------------------------------------------ #
#  POST                                                                #
# ------------------------------------------------------------------ #


class TestPost:
    def test_no_content(self):
        client = HttpClient("http://engine")
        with patch.object(client.session, "post", return_value=_resp(204)) as post:
            assert client.post("/message", {"messageName": "m"}) is None
        post.assert_called_once_with(
            "http://engine/message", json={"messageName": "m"}, timeout=30,
        )

    def test_json_body(self):
        client = HttpClient()
        with patch.object(client.session, "post", return_value=_resp(200, {"id": "pi"})):
            assert client.post("/start", {}) == {"id": "pi"}

    def test_never_retried(self):
        client = HttpClient(max_retries=3)
        with patch.object(
            client.session, "post", return_value=_resp(503, text="busy"),
        ) as post:
            with pytest.raises(TransportError, match="HTTP 503"):
                client.post("/message", {})
        assert post.call_count == 1

    def test_connection_error(self):
        client = HttpClient()
        with patch.object(
            client.session, "post",
            side_effect=requests.exceptions.ConnectionError("down"),
        ):
            with pytest.raises(TransportError, match="POST"):
                client.post("/message", {})

    def test_error_body_without_json(self):
        client = HttpClient()
        with patch.object(
            client.session, "post", return_value=_resp(500, ValueError("x"), "oops"),
        ):
            with pytest.raises(HttpResponseError) as exc_info:
                client.post("/message", {})
        assert exc_info.value.body is None


def test_context_manager():
    with HttpClient() as client:
        assert client.session is not None
