"""HTTP transport layer wrapping httpx."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any, TypeVar

import httpx
from pydantic import ValidationError

from sdapi.config import API_PREFIX, DEFAULT_BASE_URL, DEFAULT_TIMEOUT
from sdapi.errors import DecodeError, EncodeError, ReadError, RequestBuildError, StatusError, TransportError

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

logger = logging.getLogger(__name__)

T = TypeVar("T")

TimeoutTypes = float | httpx.Timeout | None

JSON_HEADERS = {"Content-Type": "application/json"}


def encode_body(body: Any) -> bytes:
    """Serialize a request body; NaN and Infinity are rejected."""
    try:
        return json.dumps(body, allow_nan=False).encode()
    except (TypeError, ValueError) as e:
        raise EncodeError("failed to encode body", e) from e


class _TransportBase:
    """Configuration and request/response handling shared by the sync and async transports."""

    def __init__(self, base_url: str, username: str, password: str) -> None:
        self.base_url = (base_url or DEFAULT_BASE_URL).rstrip("/")
        self.username = username
        self.password = password
        # Credentials are only sent when both halves are set.
        self._auth = httpx.BasicAuth(username, password) if username and password else None

    def url(self, path: str) -> str:
        return f"{self.base_url}{API_PREFIX}{path}"

    def _build(
        self,
        client: httpx.Client | httpx.AsyncClient,
        method: str,
        path: str,
        body: Any,
        params: Mapping[str, str] | None,
        timeout: TimeoutTypes,
    ) -> httpx.Request:
        content = None if body is None else encode_body(body)
        try:
            request = client.build_request(
                method,
                self.url(path),
                content=content,
                params=params,
                headers=JSON_HEADERS,
                timeout=httpx.USE_CLIENT_DEFAULT if timeout is None else timeout,
            )
        except (httpx.InvalidURL, TypeError, ValueError) as e:
            raise RequestBuildError("failed to initialize request", e) from e
        if request.url.scheme not in ("http", "https") or not request.url.host:
            raise RequestBuildError(
                "failed to initialize request",
                httpx.UnsupportedProtocol(f"unsupported request URL: {request.url}"),
            )
        return request

    def _send_auth(self) -> Any:
        return self._auth if self._auth is not None else httpx.USE_CLIENT_DEFAULT

    def _handle(
        self,
        method: str,
        path: str,
        response: httpx.Response,
        expected_status: int,
        parse: Callable[[Any], T] | None,
    ) -> Any:
        if response.status_code != expected_status:
            body = response.text
            logger.error("%s %s → %d: %s", method, path, response.status_code, body[:200])
            raise StatusError(response.status_code, body, response)
        try:
            data = json.loads(response.content)
        except ValueError as e:
            logger.error("%s %s returned invalid JSON: %s", method, path, e)
            raise DecodeError("failed to parse response", e, response) from e
        if parse is None:
            return data
        try:
            return parse(data)
        except ValidationError as e:
            logger.error("%s %s returned unexpected shape: %s", method, path, e)
            raise DecodeError("failed to parse response", e, response) from e


class HttpTransport(_TransportBase):
    def __init__(
        self,
        base_url: str = "",
        username: str = "",
        password: str = "",
        *,
        client: httpx.Client | None = None,
        timeout: TimeoutTypes = DEFAULT_TIMEOUT,
    ) -> None:
        super().__init__(base_url, username, password)
        self._owns_client = client is None
        self._client = client if client is not None else httpx.Client(timeout=timeout)
        logger.debug("transport ready: %s", self.base_url)

    def request(
        self,
        method: str,
        path: str,
        *,
        body: Any = None,
        params: Mapping[str, str] | None = None,
        expected_status: int = 200,
        parse: Callable[[Any], T] | None = None,
        timeout: TimeoutTypes = None,
    ) -> Any:
        """Run one round trip and return the decoded (and optionally parsed) JSON body."""
        request = self._build(self._client, method, path, body, params, timeout)
        logger.debug("%s %s", method, request.url)
        try:
            response = self._client.send(request, auth=self._send_auth(), stream=True)
        except httpx.RequestError as e:
            logger.error("%s %s connection failed: %s", method, path, e)
            raise TransportError("failed to do request", e) from e
        try:
            response.read()
        except (httpx.HTTPError, httpx.StreamError) as e:
            logger.error("%s %s body read failed: %s", method, path, e)
            raise ReadError("failed to read response body", e, response) from e
        finally:
            response.close()
        return self._handle(method, path, response, expected_status, parse)

    def get(self, path: str, **kwargs: Any) -> Any:
        return self.request("GET", path, **kwargs)

    def post(self, path: str, body: Any, **kwargs: Any) -> Any:
        return self.request("POST", path, body=body, **kwargs)

    def close(self) -> None:
        if self._owns_client:
            self._client.close()
        logger.debug("transport closed")


class AsyncHttpTransport(_TransportBase):
    def __init__(
        self,
        base_url: str = "",
        username: str = "",
        password: str = "",
        *,
        client: httpx.AsyncClient | None = None,
        timeout: TimeoutTypes = DEFAULT_TIMEOUT,
    ) -> None:
        super().__init__(base_url, username, password)
        self._owns_client = client is None
        self._client = client if client is not None else httpx.AsyncClient(timeout=timeout)
        logger.debug("async transport ready: %s", self.base_url)

    async def request(
        self,
        method: str,
        path: str,
        *,
        body: Any = None,
        params: Mapping[str, str] | None = None,
        expected_status: int = 200,
        parse: Callable[[Any], T] | None = None,
        timeout: TimeoutTypes = None,
    ) -> Any:
        """Async twin of :meth:`HttpTransport.request`; task cancellation aborts the request."""
        request = self._build(self._client, method, path, body, params, timeout)
        logger.debug("%s %s", method, request.url)
        try:
            response = await self._client.send(request, auth=self._send_auth(), stream=True)
        except httpx.RequestError as e:
            logger.error("%s %s connection failed: %s", method, path, e)
            raise TransportError("failed to do request", e) from e
        try:
            await response.aread()
        except (httpx.HTTPError, httpx.StreamError) as e:
            logger.error("%s %s body read failed: %s", method, path, e)
            raise ReadError("failed to read response body", e, response) from e
        finally:
            await response.aclose()
        return self._handle(method, path, response, expected_status, parse)

    async def get(self, path: str, **kwargs: Any) -> Any:
        return await self.request("GET", path, **kwargs)

    async def post(self, path: str, body: Any, **kwargs: Any) -> Any:
        return await self.request("POST", path, body=body, **kwargs)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
        logger.debug("async transport closed")
