"""Progress, options, model and memory endpoints."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from pydantic import TypeAdapter

from sdapi.options import Options
from sdapi.responses import MemoryResponse, ProgressResponse, SDModel

if TYPE_CHECKING:
    from sdapi._http import AsyncHttpTransport, HttpTransport, TimeoutTypes

logger = logging.getLogger(__name__)

_SD_MODELS = TypeAdapter(list[SDModel])


def _progress_params(skip_current_image: bool) -> dict[str, str]:
    return {"skip_current_image": "true" if skip_current_image else "false"}


def _options_body(options: Options | Mapping[str, Any]) -> dict[str, Any]:
    if isinstance(options, Options):
        return options.to_body()
    return dict(options)


class InfoAPI:
    def __init__(self, http: HttpTransport) -> None:
        self._http = http

    def progress(self, skip_current_image: bool = False, *, timeout: TimeoutTypes = None) -> ProgressResponse:
        """Progress of the running job; the live preview is omitted when skip_current_image is set."""
        return self._http.get(  # type: ignore[no-any-return]
            "/progress",
            params=_progress_params(skip_current_image),
            parse=ProgressResponse.model_validate,
            timeout=timeout,
        )

    def options(self, *, timeout: TimeoutTypes = None) -> Options:
        """Current server options."""
        return self._http.get("/options", parse=Options.model_validate, timeout=timeout)  # type: ignore[no-any-return]

    def set_options(self, options: Options | Mapping[str, Any], *, timeout: TimeoutTypes = None) -> None:
        """Replace server options; only the keys that are set are sent."""
        body = _options_body(options)
        logger.info("updating %d option(s)", len(body))
        self._http.post("/options", body, timeout=timeout)

    def sd_models(self, *, timeout: TimeoutTypes = None) -> list[SDModel]:
        """Available checkpoints."""
        result: list[SDModel] = self._http.get("/sd-models", parse=_SD_MODELS.validate_python, timeout=timeout)
        logger.info("found %d model(s)", len(result))
        return result

    def memory(self, *, timeout: TimeoutTypes = None) -> MemoryResponse:
        """RAM and CUDA memory statistics."""
        return self._http.get("/memory", parse=MemoryResponse.model_validate, timeout=timeout)  # type: ignore[no-any-return]


class AsyncInfoAPI:
    def __init__(self, http: AsyncHttpTransport) -> None:
        self._http = http

    async def progress(self, skip_current_image: bool = False, *, timeout: TimeoutTypes = None) -> ProgressResponse:
        return await self._http.get(  # type: ignore[no-any-return]
            "/progress",
            params=_progress_params(skip_current_image),
            parse=ProgressResponse.model_validate,
            timeout=timeout,
        )

    async def options(self, *, timeout: TimeoutTypes = None) -> Options:
        return await self._http.get("/options", parse=Options.model_validate, timeout=timeout)  # type: ignore[no-any-return]

    async def set_options(self, options: Options | Mapping[str, Any], *, timeout: TimeoutTypes = None) -> None:
        body = _options_body(options)
        logger.info("updating %d option(s)", len(body))
        await self._http.post("/options", body, timeout=timeout)

    async def sd_models(self, *, timeout: TimeoutTypes = None) -> list[SDModel]:
        result: list[SDModel] = await self._http.get("/sd-models", parse=_SD_MODELS.validate_python, timeout=timeout)
        logger.info("found %d model(s)", len(result))
        return result

    async def memory(self, *, timeout: TimeoutTypes = None) -> MemoryResponse:
        return await self._http.get("/memory", parse=MemoryResponse.model_validate, timeout=timeout)  # type: ignore[no-any-return]
