"""Configuration, constants, and enums for the sdapi client."""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass
from enum import Enum, IntEnum
from pathlib import Path
from typing import Any

# ============================================================================
# API Constants
# ============================================================================

DEFAULT_BASE_URL = "http://127.0.0.1:7860"
API_PREFIX = "/sdapi/v1"
DEFAULT_TIMEOUT = 300.0

# ============================================================================
# XDG Base Directory Configuration
# ============================================================================

# Config: ~/.config/sdapi/config.toml
CONFIG_DIR = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config")) / "sdapi"
CONFIG_FILE = CONFIG_DIR / "config.toml"

ENV_URL = "SDAPI_URL"
ENV_USERNAME = "SDAPI_USERNAME"
ENV_PASSWORD = "SDAPI_PASSWORD"  # noqa: S105
ENV_TIMEOUT = "SDAPI_TIMEOUT"


# ============================================================================
# Enums
# ============================================================================


class Upscaler(str, Enum):
    """Upscaler names accepted by extra-single-image."""

    none = "None"
    lanczos = "Lanczos"
    nearest = "Nearest"
    ldsr = "LDSR"
    bsrgan = "BSRGAN"
    esrgan_4x = "ESRGAN_4x"
    r_esrgan_general_4xv3 = "R-ESRGAN General 4xV3"
    scunet_gan = "ScuNET GAN"
    scunet_psnr = "ScuNET PSNR"
    swinir_4x = "SwinIR 4x"


class HiResUpscaler(str, Enum):
    """Upscaler names accepted by txt2img's hr_upscaler."""

    none = "None"
    latent = "Latent"
    latent_antialiased = "Latent (antialiased)"
    latent_bicubic = "Latent (bicubic)"
    latent_bicubic_antialiased = "Latent (bicubic antialiased)"
    latent_nearest = "Latent (nearest)"
    latent_nearest_exact = "Latent (nearest-exact)"
    lanczos = "Lanczos"
    nearest = "Nearest"
    esrgan_4x = "ESRGAN_4x"
    ldsr = "LDSR"
    scunet_gan = "ScuNET GAN"
    scunet_psnr = "ScuNET PSNR"
    swinir_4x = "SwinIR 4x"


class ExtrasResizeMode(IntEnum):
    """extra-single-image resize_mode values."""

    scale_by = 0  # upscale by upscaling_resize
    scale_to = 1  # upscale to upscaling_resize_w x upscaling_resize_h


# ============================================================================
# Config Functions
# ============================================================================


@dataclass(frozen=True)
class Settings:
    """Resolved connection settings."""

    url: str = DEFAULT_BASE_URL
    username: str = ""
    password: str = ""
    timeout: float = DEFAULT_TIMEOUT


def load_config(path: Path | None = None) -> dict[str, Any]:
    """Load configuration from TOML config file."""
    config_file = path or CONFIG_FILE
    if config_file.exists():
        with config_file.open("rb") as f:
            return tomllib.load(f)
    return {}


def save_config(config: dict[str, Any], path: Path | None = None) -> None:
    """Save configuration to TOML config file."""
    config_file = path or CONFIG_FILE
    config_file.parent.mkdir(parents=True, exist_ok=True)

    lines: list[str] = []
    for key, value in config.items():
        if isinstance(value, dict):
            lines.append(f"[{key}]")
            lines.extend(f"{k} = {_toml_value(v)}" for k, v in value.items())
            lines.append("")
        else:
            lines.append(f"{key} = {_toml_value(value)}")

    config_file.write_text("\n".join(lines) + "\n")


def _toml_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        escaped = value.replace("\\", "\\\\").replace('"', '\\"')
        return f'"{escaped}"'
    return str(value)


def load_settings(path: Path | None = None) -> Settings:
    """Resolve settings: environment over config file over defaults."""
    server = load_config(path).get("server", {})
    if not isinstance(server, dict):
        server = {}

    url = os.environ.get(ENV_URL) or str(server.get("url") or DEFAULT_BASE_URL)
    username = os.environ.get(ENV_USERNAME) or str(server.get("username") or "")
    password = os.environ.get(ENV_PASSWORD) or str(server.get("password") or "")

    raw_timeout = os.environ.get(ENV_TIMEOUT) or server.get("timeout") or DEFAULT_TIMEOUT
    try:
        timeout = float(raw_timeout)
    except (TypeError, ValueError) as e:
        raise ValueError(f"invalid timeout: {raw_timeout!r}") from e

    return Settings(url=url, username=username, password=password, timeout=timeout)
