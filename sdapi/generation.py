"""Image generation endpoints."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sdapi.responses import ExtraSingleImageResponse, Img2ImgResponse, Txt2ImgResponse

if TYPE_CHECKING:
    from sdapi._http import AsyncHttpTransport, HttpTransport, TimeoutTypes
    from sdapi.params import ExtraSingleImageOptions, Img2ImgOptions, Txt2ImgOptions

logger = logging.getLogger(__name__)


def _log_result(name: str, images: int, skipped: int) -> None:
    if skipped:
        logger.warning("%s: got %d image(s), %d could not be decoded", name, images, skipped)
    else:
        logger.info("%s: got %d image(s)", name, images)


class GenerationAPI:
    def __init__(self, http: HttpTransport) -> None:
        self._http = http

    def txt2img(self, opt: Txt2ImgOptions, *, timeout: TimeoutTypes = None) -> Txt2ImgResponse:
        """Generate images from a text prompt."""
        logger.info("txt2img: '%s' %dx%d steps=%d", opt.prompt[:60], opt.width, opt.height, opt.steps)
        res: Txt2ImgResponse = self._http.post(
            "/txt2img", opt.to_body(), parse=Txt2ImgResponse.from_json, timeout=timeout
        )
        _log_result("txt2img", len(res.parsed_images), res.skipped)
        return res

    def img2img(self, opt: Img2ImgOptions, *, timeout: TimeoutTypes = None) -> Img2ImgResponse:
        """Generate images from source image(s) and a prompt."""
        logger.info("img2img: '%s' strength=%.2f steps=%d", opt.prompt[:60], opt.denoising_strength, opt.steps)
        res: Img2ImgResponse = self._http.post(
            "/img2img", opt.to_body(), parse=Img2ImgResponse.from_json, timeout=timeout
        )
        _log_result("img2img", len(res.parsed_images), res.skipped)
        return res

    def extra_single_image(
        self, opt: ExtraSingleImageOptions, *, timeout: TimeoutTypes = None
    ) -> ExtraSingleImageResponse:
        """Upscale and/or face-restore a single image."""
        logger.info("extra-single-image: upscaler=%s resize=%s", opt.upscaler_1 or "-", opt.upscaling_resize)
        return self._http.post(  # type: ignore[no-any-return]
            "/extra-single-image", opt.to_body(), parse=ExtraSingleImageResponse.from_json, timeout=timeout
        )


class AsyncGenerationAPI:
    def __init__(self, http: AsyncHttpTransport) -> None:
        self._http = http

    async def txt2img(self, opt: Txt2ImgOptions, *, timeout: TimeoutTypes = None) -> Txt2ImgResponse:
        logger.info("txt2img: '%s' %dx%d steps=%d", opt.prompt[:60], opt.width, opt.height, opt.steps)
        res: Txt2ImgResponse = await self._http.post(
            "/txt2img", opt.to_body(), parse=Txt2ImgResponse.from_json, timeout=timeout
        )
        _log_result("txt2img", len(res.parsed_images), res.skipped)
        return res

    async def img2img(self, opt: Img2ImgOptions, *, timeout: TimeoutTypes = None) -> Img2ImgResponse:
        logger.info("img2img: '%s' strength=%.2f steps=%d", opt.prompt[:60], opt.denoising_strength, opt.steps)
        res: Img2ImgResponse = await self._http.post(
            "/img2img", opt.to_body(), parse=Img2ImgResponse.from_json, timeout=timeout
        )
        _log_result("img2img", len(res.parsed_images), res.skipped)
        return res

    async def extra_single_image(
        self, opt: ExtraSingleImageOptions, *, timeout: TimeoutTypes = None
    ) -> ExtraSingleImageResponse:
        logger.info("extra-single-image: upscaler=%s resize=%s", opt.upscaler_1 or "-", opt.upscaling_resize)
        return await self._http.post(  # type: ignore[no-any-return]
            "/extra-single-image", opt.to_body(), parse=ExtraSingleImageResponse.from_json, timeout=timeout
        )
