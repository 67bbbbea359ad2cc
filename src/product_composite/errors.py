"""Domain error taxonomy for downstream calls and channel dispatch."""
from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any


class IntegrationError(Exception):
    """Downstream integration failed. code is stable; message is human-readable."""

    code = "INTEGRATION_ERROR"

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"


class NotFoundError(IntegrationError):
    """Entity absent downstream (404)."""

    code = "NOT_FOUND"


class InvalidInputError(IntegrationError):
    """Downstream rejected the request semantics (422)."""

    code = "INVALID_INPUT"


class UnexpectedError(IntegrationError):
    """
    Any other downstream HTTP error. The original failure is kept as __cause__.
    retryable: True for 5xx, 408 and 429; other 4xx will fail the same way again.
    """

    code = "UNEXPECTED"

    def __init__(self, message: str, status_code: int) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.retryable = status_code >= 500 or status_code in (408, 429)


class ChannelDispatchError(IntegrationError):
    """Event could not be handed to the message channel."""

    code = "CHANNEL_DISPATCH"

    def __init__(self, message: str, channel: str, key: int) -> None:
        super().__init__(message)
        self.channel = channel
        self.key = key


@dataclass(frozen=True)
class HttpErrorInfo:
    """Structured error body returned by downstream services: {path, message, timestamp}."""

    path: str
    message: str
    timestamp: str | None = None

    @classmethod
    def from_json(cls, data: Any) -> HttpErrorInfo:
        if not isinstance(data, dict) or not isinstance(data.get("message"), str):
            raise ValueError("not an error info body")
        return cls(
            path=str(data.get("path", "")),
            message=data["message"],
            timestamp=data.get("timestamp"),
        )

    @classmethod
    def parse(cls, body: str | bytes) -> HttpErrorInfo | None:
        """Parse an error body; None when it is absent or not in the expected shape."""
        if not body:
            return None
        try:
            return cls.from_json(json.loads(body))
        except (ValueError, RecursionError):
            return None
