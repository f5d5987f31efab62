"""Pydantic response models for the sdapi/v1 endpoints."""

from __future__ import annotations

import json
from typing import Any, Self

from PIL import Image
from pydantic import BaseModel, ConfigDict, Field, JsonValue

from sdapi.images import decode_image, decode_images


class _Response(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True, protected_namespaces=())


# =============================================================================
# Generation
# =============================================================================


class _GenerationResponse(_Response):
    images: list[str] = Field(default_factory=list)
    parameters: dict[str, JsonValue] | None = None
    info: str = ""

    # Filled by the client after decoding, never sent by the server.
    parsed_images: list[Image.Image] = Field(default_factory=list, exclude=True)
    raw_images: list[bytes] = Field(default_factory=list, exclude=True)
    png_images: list[bytes] = Field(default_factory=list, exclude=True)
    skipped: int = Field(default=0, exclude=True)

    @classmethod
    def from_json(cls, data: Any) -> Self:
        res = cls.model_validate(data)
        decoded = decode_images(res.images)
        res.parsed_images = decoded.images
        res.raw_images = decoded.raw
        res.png_images = decoded.png
        res.skipped = decoded.skipped
        return res

    def parsed_info(self) -> dict[str, Any]:
        """The info string is usually JSON (seeds, prompts, sampler...). Anything else gives ``{}``."""
        try:
            info = json.loads(self.info)
        except ValueError:
            return {}
        return info if isinstance(info, dict) else {}


class Txt2ImgResponse(_GenerationResponse):
    pass


class Img2ImgResponse(_GenerationResponse):
    pass


class ExtraSingleImageResponse(_Response):
    html_info: str = ""
    image: str = ""

    parsed_image: Image.Image | None = Field(default=None, exclude=True)
    raw_image: bytes | None = Field(default=None, exclude=True)

    @classmethod
    def from_json(cls, data: Any) -> Self:
        res = cls.model_validate(data)
        if res.image:
            res.parsed_image, res.raw_image = decode_image(res.image)
        return res


# =============================================================================
# Progress
# =============================================================================


class ProgressState(_Response):
    skipped: bool = False
    interrupted: bool = False
    job: str = ""
    job_count: int = 0
    job_timestamp: str = ""
    job_no: int = 0
    sampling_step: int = 0
    sampling_steps: int = 0


class ProgressResponse(_Response):
    progress: float = 0.0
    eta_relative: float = 0.0
    state: ProgressState = Field(default_factory=ProgressState)
    current_image: str | None = None
    textinfo: str | None = None

    def current_image_decoded(self) -> Image.Image | None:
        if not self.current_image:
            return None
        img, _ = decode_image(self.current_image)
        return img


# =============================================================================
# Models
# =============================================================================


class SDModel(_Response):
    """One checkpoint as listed by /sd-models."""

    title: str = ""
    model_name: str = ""
    hash: str | None = None
    sha256: str | None = None
    filename: str = ""
    config: JsonValue = None


# =============================================================================
# Memory
# =============================================================================


class MemoryUsage(_Response):
    # Byte counts; some servers report RAM as floats.
    free: int | float = 0
    used: int | float = 0
    total: int | float = 0


class MemoryCounter(_Response):
    current: int = 0
    peak: int = 0


class MemoryEvents(_Response):
    retries: int = 0
    peak: int = 0
    oom: int = 0


class CudaMemory(_Response):
    system: MemoryUsage = Field(default_factory=MemoryUsage)
    active: MemoryCounter = Field(default_factory=MemoryCounter)
    allocated: MemoryCounter = Field(default_factory=MemoryCounter)
    reserved: MemoryCounter = Field(default_factory=MemoryCounter)
    inactive: MemoryCounter = Field(default_factory=MemoryCounter)
    events: MemoryEvents = Field(default_factory=MemoryEvents)


class MemoryResponse(_Response):
    ram: MemoryUsage = Field(default_factory=MemoryUsage)
    cuda: CudaMemory = Field(default_factory=CudaMemory)
