"""JSON HTTP client for workflow engine REST APIs.

GET requests are retried with exponential backoff on connection errors,
429 and 5xx responses. POST requests are sent exactly once: starting a
process or correlating a message is not safe to repeat.
"""

import logging
import time

import requests

from ..domain.errors import TransportError

logger = logging.getLogger(__name__)

_RETRYABLE_STATUS = {429, 502, 503, 504}


class HttpResponseError(TransportError):
    """Non-success response; keeps the decoded body for adapters to inspect."""

    def __init__(self, status_code: int, body: dict | list | str | None, text: str):
        self.body = body
        super().__init__(f"HTTP {status_code}: {text}", status_code=status_code)


class HttpClient:
    """Session-backed HTTP client raising ``TransportError`` on failure."""

    def __init__(
        self,
        base_url: str = "",
        max_retries: int = 3,
        timeout: float = 30,
        backoff: float = 1.0,
    ):
        self.base_url = base_url.rstrip("/")
        self.session = requests.Session()
        self.session.headers.update({"Accept": "application/json"})
        self.max_retries = max(1, max_retries)
        self.timeout = timeout
        self.backoff = backoff

    def url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    def get(self, path: str, params: dict | None = None) -> list | dict:
        """GET ``path`` and return the decoded JSON body, with retries."""
        url = self.url(path)
        for attempt in range(self.max_retries):
            last = attempt == self.max_retries - 1
            try:
                resp = self.session.get(url, params=params, timeout=self.timeout)
            except requests.exceptions.RequestException as exc:
                if last:
                    raise TransportError(
                        f"GET {url} failed after {self.max_retries} attempts: {exc}"
                    ) from exc
                self._wait(attempt, f"Request error: {exc}")
                continue

            if resp.status_code == 200:
                return self._decode(resp)
            if resp.status_code in _RETRYABLE_STATUS and not last:
                self._wait(attempt, f"HTTP {resp.status_code}")
                continue
            raise self._error(resp)

        raise TransportError(f"Max retries ({self.max_retries}) exceeded for {url}")

    def post(self, path: str, payload: dict) -> dict | list | None:
        """POST JSON to ``path`` once. Returns the decoded body, or None on 204."""
        url = self.url(path)
        try:
            resp = self.session.post(url, json=payload, timeout=self.timeout)
        except requests.exceptions.RequestException as exc:
            raise TransportError(f"POST {url} failed: {exc}") from exc

        if resp.status_code == 204:
            return None
        if 200 <= resp.status_code < 300:
            return self._decode(resp)
        raise self._error(resp)

    def _wait(self, attempt: int, reason: str) -> None:
        wait = self.backoff * 2 ** attempt
        logger.warning(
            "%s. Retry in %.1fs (%d/%d)", reason, wait, attempt + 1, self.max_retries,
        )
        time.sleep(wait)

    @staticmethod
    def _decode(resp) -> dict | list:
        try:
            return resp.json()
        except ValueError as exc:
            raise TransportError(
                f"Malformed JSON response ({resp.status_code}): {resp.text[:200]}",
                status_code=resp.status_code,
            ) from exc

    @staticmethod
    def _error(resp) -> HttpResponseError:
        try:
            body = resp.json()
        except ValueError:
            body = None
        return HttpResponseError(resp.status_code, body, resp.text)

    def close(self):
        """Close the HTTP session."""
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()
