"""Pytest configuration and fixtures."""

from __future__ import annotations

import base64
import io

import pytest
import respx
from PIL import Image

from sdapi import SDClient

BASE_URL = "http://127.0.0.1:7860"
API = "/sdapi/v1"


def make_png(width: int, height: int, color: str = "red") -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", (width, height), color).save(buf, format="PNG")
    return buf.getvalue()


# 3x2 PNG for image response stubs
PNG_SIZE = (3, 2)
TINY_PNG = make_png(*PNG_SIZE)
TINY_PNG_B64 = base64.b64encode(TINY_PNG).decode()
TINY_PNG_DATA_URL = "data:image/png;base64," + TINY_PNG_B64


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep the user's config file and SDAPI_* variables out of every test."""
    monkeypatch.setattr("sdapi.config.CONFIG_FILE", tmp_path / "config.toml")
    for name in ("SDAPI_URL", "SDAPI_USERNAME", "SDAPI_PASSWORD", "SDAPI_TIMEOUT"):
        monkeypatch.delenv(name, raising=False)
    return tmp_path / "config.toml"


@pytest.fixture()
def mock_api():
    """Activate respx mock for the sdapi base URL."""
    with respx.mock(base_url=BASE_URL, assert_all_called=False) as rsps:
        yield rsps


@pytest.fixture()
def client(mock_api: respx.MockRouter) -> SDClient:  # noqa: ARG001
    """SDClient wired to the mocked transport."""
    c = SDClient(BASE_URL)
    yield c  # type: ignore[misc]
    c.close()
