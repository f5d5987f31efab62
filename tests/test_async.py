"""Tests for AsyncSDClient, including cancellation of in-flight requests."""

from __future__ import annotations

import asyncio
import json
import time

import httpx
import pytest

from sdapi import AsyncSDClient
from sdapi.errors import StatusError, TransportError
from sdapi.params import Txt2ImgOptions
from tests.conftest import BASE_URL, PNG_SIZE, TINY_PNG_B64


def _client(handler) -> tuple[AsyncSDClient, httpx.AsyncClient]:
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return AsyncSDClient(BASE_URL, "user", "secret", http_client=http), http


async def _slow(request: httpx.Request) -> httpx.Response:
    await asyncio.sleep(30)
    return httpx.Response(200, json={})


class TestAsyncRequests:
    def test_txt2img(self):
        seen: list[httpx.Request] = []

        async def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"images": [TINY_PNG_B64], "info": "x"})

        async def run():
            c, http = _client(handler)
            async with http, c:
                return await c.txt2img(Txt2ImgOptions(prompt="a cat"))

        res = asyncio.run(run())
        assert res.info == "x"
        assert [img.size for img in res.parsed_images] == [PNG_SIZE]
        request = seen[0]
        assert request.url.path == "/sdapi/v1/txt2img"
        assert request.headers["authorization"].startswith("Basic ")
        assert json.loads(request.content) == {"prompt": "a cat"}

    def test_progress_and_memory(self):
        async def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path.endswith("/progress"):
                assert request.url.params["skip_current_image"] == "true"
                return httpx.Response(200, json={"progress": 0.5, "eta_relative": 1.0, "state": {}})
            return httpx.Response(200, json={"ram": {"free": 1, "used": 2, "total": 3}})

        async def run():
            c, http = _client(handler)
            async with http:
                return await c.progress(skip_current_image=True), await c.memory()

        progress, memory = asyncio.run(run())
        assert progress.progress == 0.5
        assert memory.ram.used == 2

    def test_status_error(self):
        async def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500, text="boom")

        async def run():
            c, http = _client(handler)
            async with http:
                await c.sd_models()

        with pytest.raises(StatusError) as exc_info:
            asyncio.run(run())
        assert "500" in str(exc_info.value)
        assert "boom" in str(exc_info.value)

    def test_connection_error(self):
        async def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        async def run():
            c, http = _client(handler)
            async with http:
                await c.options()

        with pytest.raises(TransportError):
            asyncio.run(run())


class TestCancellation:
    def test_wait_for_deadline_aborts_promptly(self):
        async def run():
            c, http = _client(_slow)
            async with http:
                await asyncio.wait_for(c.memory(), timeout=0.05)

        start = time.monotonic()
        with pytest.raises(asyncio.TimeoutError):
            asyncio.run(run())
        assert time.monotonic() - start < 5

    def test_task_cancel(self):
        async def run():
            c, http = _client(_slow)
            async with http:
                task = asyncio.create_task(c.txt2img(Txt2ImgOptions(prompt="x")))
                await asyncio.sleep(0.01)
                task.cancel()
                with pytest.raises(asyncio.CancelledError):
                    await task
                return task.cancelled()

        start = time.monotonic()
        assert asyncio.run(run()) is True
        assert time.monotonic() - start < 5
