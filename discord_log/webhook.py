"""Synchronous Discord webhook client.

Design:
- One POST per call, made on the calling thread.
- No queue, no retries: every failure is raised to the caller.
- A zero/unset timeout falls back to DEFAULT_TIMEOUT for that call only.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Optional

import requests

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 5.0


class WebhookError(Exception):
    """Raised when a payload could not be delivered to the webhook."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        """
        Args:
            message: Human readable reason.
            status_code: HTTP status returned by Discord, if a response was received.
        """
        self.message = message
        self.status_code = status_code
        super().__init__(message)


def resolve_timeout(timeout: Optional[float]) -> float:
    """Return `timeout`, or DEFAULT_TIMEOUT when it is zero or unset."""
    if not timeout:
        return DEFAULT_TIMEOUT
    return float(timeout)


class WebhookClient:
    """Blocking webhook sender with a per-call timeout."""

    def __init__(self, webhook_url: str, timeout: Optional[float] = DEFAULT_TIMEOUT) -> None:
        """Create a new webhook client.

        Args:
            webhook_url: Discord webhook URL.
            timeout: Default request timeout in seconds. Zero or None means DEFAULT_TIMEOUT.
        """
        self.url = webhook_url
        self.timeout = timeout

    def send(self, payload: dict[str, Any], timeout: Optional[float] = None) -> int:
        """Serialize and POST a payload to the webhook.

        Args:
            payload: JSON-serializable Discord webhook payload.
            timeout: Override for this call only. Falls back to the client timeout.

        Returns:
            The HTTP status code of the (successful) response.

        Raises:
            WebhookError: On serialization, request construction, transport
                or non-success status failures.
        """
        try:
            body = json.dumps(payload)
        except (TypeError, ValueError) as exc:
            raise WebhookError(f"failed to serialize payload: {exc}") from exc

        resolved = resolve_timeout(timeout if timeout is not None else self.timeout)

        with requests.Session() as session:
            try:
                request = session.prepare_request(
                    requests.Request(
                        "POST",
                        self.url,
                        data=body.encode("utf-8"),
                        headers={"Content-Type": "application/json"},
                    )
                )
            except (requests.RequestException, ValueError) as exc:
                raise WebhookError(f"failed to create request: {exc}") from exc

            # Proxy and CA settings from the environment, as session.post would apply.
            settings = session.merge_environment_settings(request.url, {}, None, None, None)
            try:
                resp = session.send(request, timeout=resolved, **settings)
            except requests.RequestException as exc:
                raise WebhookError(f"request failed: {exc}") from exc
            # Body is never inspected.
            resp.close()

        return self._handle_response(resp)

    def _handle_response(self, resp: requests.Response) -> int:
        """Raise on error statuses, otherwise return the status code."""
        if resp.status_code >= 400:
            raise WebhookError(
                f"discord returned non-OK status: {resp.status_code}",
                status_code=resp.status_code,
            )

        logger.debug("webhook accepted payload with status %d", resp.status_code)
        return resp.status_code
