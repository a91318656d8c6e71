from __future__ import annotations

from typing import Any, Optional


class WebookClientError(RuntimeError):
    """Base error for the webook client."""


class ApiStatusError(WebookClientError):
    """A response carried a non-success HTTP status."""

    def __init__(self, status_code: int, body: Any = None) -> None:
        super().__init__(f"HTTP {status_code} from webook API")
        self.status_code = status_code
        self.body = body


class ApiEnvelopeError(WebookClientError):
    """The response envelope reported a non-zero business code."""

    def __init__(self, code: int, msg: str, *, status_code: Optional[int] = None) -> None:
        super().__init__(f"{msg} (code={code})")
        self.code = code
        self.msg = msg
        self.status_code = status_code


__all__ = [
    "WebookClientError",
    "ApiStatusError",
    "ApiEnvelopeError",
]
