"""Request option dataclasses for the generation endpoints."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import TYPE_CHECKING, Any

from sdapi.config import ExtrasResizeMode
from sdapi.images import to_b64

if TYPE_CHECKING:
    from pydantic import JsonValue

    from sdapi.images import ImageInput
    from sdapi.options import Options


def _is_zero(value: Any) -> bool:
    return value is None or value is False or value == 0 or value == "" or value == []


def _omit_zero(obj: Any, images: tuple[str, ...] = ()) -> dict[str, Any]:
    """Serialize a dataclass, leaving out every field still at its zero value."""
    body: dict[str, Any] = {}
    for f in fields(obj):
        value = getattr(obj, f.name)
        if f.name == "override_settings" and value is not None:
            value = value.to_body() if hasattr(value, "to_body") else dict(value)
        if _is_zero(value) or value == {}:
            continue
        if f.name in images:
            value = [to_b64(v) for v in value] if isinstance(value, list) else to_b64(value)
        elif isinstance(value, tuple):
            value = list(value)
        body[f.name] = value
    return body


@dataclass
class Txt2ImgOptions:
    prompt: str = ""
    negative_prompt: str = ""
    steps: int = 0
    cfg_scale: float = 0.0
    width: int = 0
    height: int = 0
    sampler_index: str = ""
    override_settings: Options | None = None
    enable_hr: bool = False
    denoising_strength: float = 0.0
    firstphase_width: int = 0
    firstphase_height: int = 0
    hr_scale: float = 0.0
    hr_upscaler: str = ""
    hr_second_pass_steps: int = 0
    hr_resize_x: int = 0
    hr_resize_y: int = 0
    styles: list[str] = field(default_factory=list)
    seed: int = 0
    subseed: int = 0
    subseed_strength: float = 0.0
    seed_resize_from_h: int = 0
    seed_resize_from_w: int = 0
    sampler_name: str = ""
    batch_size: int = 0
    n_iter: int = 0
    restore_faces: bool = False
    tiling: bool = False
    eta: float = 0.0
    s_churn: float = 0.0
    s_tmax: float = 0.0
    s_tmin: float = 0.0
    s_noise: float = 0.0
    override_settings_restore_afterwards: bool = False
    script_args: list[JsonValue] = field(default_factory=list)
    script_name: str = ""

    def to_body(self) -> dict[str, Any]:
        return _omit_zero(self)


@dataclass
class Img2ImgOptions:
    init_images: list[ImageInput] = field(default_factory=list)
    resize_mode: int = 0
    denoising_strength: float = 0.0
    image_cfg_scale: float = 0.0
    mask: ImageInput | None = None
    mask_blur: int = 0
    inpainting_fill: int = 0
    inpaint_full_res: bool = False
    inpaint_full_res_padding: int = 0
    inpainting_mask_invert: int = 0
    initial_noise_multiplier: float = 0.0
    prompt: str = ""
    styles: list[str] = field(default_factory=list)
    seed: int = 0
    subseed: int = 0
    subseed_strength: float = 0.0
    seed_resize_from_h: int = 0
    seed_resize_from_w: int = 0
    sampler_name: str = ""
    batch_size: int = 0
    n_iter: int = 0
    steps: int = 0
    cfg_scale: float = 0.0
    width: int = 0
    height: int = 0
    restore_faces: bool = False
    tiling: bool = False
    negative_prompt: str = ""
    eta: float = 0.0
    s_churn: float = 0.0
    s_tmax: float = 0.0
    s_tmin: float = 0.0
    s_noise: float = 0.0
    override_settings: Options | None = None
    override_settings_restore_afterwards: bool = False
    script_args: list[JsonValue] = field(default_factory=list)
    sampler_index: str = ""
    include_init_images: bool = False
    script_name: str = ""

    def to_body(self) -> dict[str, Any]:
        return _omit_zero(self, images=("init_images", "mask"))


@dataclass
class ExtraSingleImageOptions:
    """Options for /extra-single-image (upscaling and face restoration)."""

    resize_mode: ExtrasResizeMode = ExtrasResizeMode.scale_by
    # Return the processed image in the response.
    show_extras_results: bool = False
    gfpgan_visibility: float = 0.0
    codeformer_visibility: float = 0.0
    codeformer_weight: float = 0.0
    upscaling_resize: float = 0.0
    upscaling_resize_w: int = 0
    upscaling_resize_h: int = 0
    upscaling_crop: bool = False
    upscaler_1: str = ""
    upscaler_2: str = ""
    extras_upscaler_2_visibility: float = 0.0
    # Run the upscaler before face restoration.
    upscale_first: bool = False
    image: ImageInput | None = None

    def to_body(self) -> dict[str, Any]:
        return _omit_zero(self, images=("image",))
