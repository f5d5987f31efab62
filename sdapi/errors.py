"""Error types raised by the sdapi client."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import httpx


class SDAPIError(Exception):
    """Base error: wraps the underlying cause, a message and the HTTP response (if any)."""

    def __init__(self, msg: str, err: BaseException | None = None, response: httpx.Response | None = None) -> None:
        super().__init__(msg)
        self.msg = msg
        self.err = err
        self.response = response
        if err is not None:
            self.__cause__ = err

    def __str__(self) -> str:
        if self.err is None:
            return self.msg
        return f"{self.msg}: {self.err}"


class EncodeError(SDAPIError):
    """Request body could not be serialized to JSON."""


class RequestBuildError(SDAPIError):
    """HTTP request could not be built (bad URL or method)."""


class TransportError(SDAPIError):
    """Network failure, timeout, or cancelled connection."""


class ReadError(SDAPIError):
    """Response body could not be read to completion."""


class StatusError(SDAPIError):
    """Server answered with a status code other than the one expected."""

    def __init__(self, status_code: int, body: str, response: httpx.Response | None = None) -> None:
        super().__init__(f"got bad status {status_code}, body: {body}", response=response)
        self.status_code = status_code
        self.body = body


class DecodeError(SDAPIError):
    """Response body is not valid JSON, or does not match the expected shape."""
