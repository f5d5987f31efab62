"""sdapi: typed client for the Stable Diffusion web UI sdapi/v1 HTTP API."""

from __future__ import annotations

__version__ = "0.1.0"

from typing import TYPE_CHECKING, Any

from sdapi._http import AsyncHttpTransport, HttpTransport
from sdapi.config import DEFAULT_BASE_URL, DEFAULT_TIMEOUT, HiResUpscaler, Settings, Upscaler, load_settings
from sdapi.errors import (
    DecodeError,
    EncodeError,
    ReadError,
    RequestBuildError,
    SDAPIError,
    StatusError,
    TransportError,
)
from sdapi.generation import AsyncGenerationAPI, GenerationAPI
from sdapi.images import (
    DecodedImages,
    decode_image,
    decode_images,
    image_to_base64,
    image_to_raw_base64,
    png_bytes_to_base64,
    save_images,
)
from sdapi.info import AsyncInfoAPI, InfoAPI
from sdapi.options import Options
from sdapi.params import ExtraSingleImageOptions, Img2ImgOptions, Txt2ImgOptions
from sdapi.responses import (
    ExtraSingleImageResponse,
    Img2ImgResponse,
    MemoryResponse,
    ProgressResponse,
    SDModel,
    Txt2ImgResponse,
)

if TYPE_CHECKING:
    import httpx

    from sdapi._http import TimeoutTypes

__all__ = [
    "DEFAULT_BASE_URL",
    "AsyncSDClient",
    "DecodeError",
    "DecodedImages",
    "EncodeError",
    "ExtraSingleImageOptions",
    "ExtraSingleImageResponse",
    "HiResUpscaler",
    "Img2ImgOptions",
    "Img2ImgResponse",
    "MemoryResponse",
    "Options",
    "ProgressResponse",
    "ReadError",
    "RequestBuildError",
    "SDAPIError",
    "SDClient",
    "SDModel",
    "StatusError",
    "TransportError",
    "Txt2ImgOptions",
    "Txt2ImgResponse",
    "Upscaler",
    "decode_image",
    "decode_images",
    "image_to_base64",
    "image_to_raw_base64",
    "png_bytes_to_base64",
    "save_images",
]


class SDClient:
    """Composite client for the sdapi/v1 API.

    Usage::

        with SDClient("http://127.0.0.1:7860") as c:
            res = c.txt2img(Txt2ImgOptions(prompt="a cat", steps=20))
            res.parsed_images[0].save("cat.png")

    Pass ``http_client`` to reuse an existing ``httpx.Client``; it is not
    closed by :meth:`close`.
    """

    def __init__(
        self,
        base_url: str = "",
        username: str = "",
        password: str = "",
        *,
        http_client: httpx.Client | None = None,
        timeout: TimeoutTypes = DEFAULT_TIMEOUT,
    ) -> None:
        self._http = HttpTransport(base_url, username, password, client=http_client, timeout=timeout)
        self.generate = GenerationAPI(self._http)
        self.info = InfoAPI(self._http)

        self.txt2img = self.generate.txt2img
        self.img2img = self.generate.img2img
        self.extra_single_image = self.generate.extra_single_image
        self.progress = self.info.progress
        self.options = self.info.options
        self.set_options = self.info.set_options
        self.sd_models = self.info.sd_models
        self.memory = self.info.memory

    @classmethod
    def from_config(cls, settings: Settings | None = None, **kwargs: Any) -> SDClient:
        """Build a client from the config file and SDAPI_* environment variables."""
        s = settings or load_settings()
        kwargs.setdefault("timeout", s.timeout)
        return cls(s.url, s.username, s.password, **kwargs)

    @property
    def base_url(self) -> str:
        return self._http.base_url

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> SDClient:
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()


class AsyncSDClient:
    """asyncio twin of :class:`SDClient`; cancelling the awaiting task aborts the request."""

    def __init__(
        self,
        base_url: str = "",
        username: str = "",
        password: str = "",
        *,
        http_client: httpx.AsyncClient | None = None,
        timeout: TimeoutTypes = DEFAULT_TIMEOUT,
    ) -> None:
        self._http = AsyncHttpTransport(base_url, username, password, client=http_client, timeout=timeout)
        self.generate = AsyncGenerationAPI(self._http)
        self.info = AsyncInfoAPI(self._http)

        self.txt2img = self.generate.txt2img
        self.img2img = self.generate.img2img
        self.extra_single_image = self.generate.extra_single_image
        self.progress = self.info.progress
        self.options = self.info.options
        self.set_options = self.info.set_options
        self.sd_models = self.info.sd_models
        self.memory = self.info.memory

    @classmethod
    def from_config(cls, settings: Settings | None = None, **kwargs: Any) -> AsyncSDClient:
        s = settings or load_settings()
        kwargs.setdefault("timeout", s.timeout)
        return cls(s.url, s.username, s.password, **kwargs)

    @property
    def base_url(self) -> str:
        return self._http.base_url

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> AsyncSDClient:
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.aclose()
