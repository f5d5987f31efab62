"""Tests for sdapi.images."""

from __future__ import annotations

import base64
from pathlib import Path

import pytest
from PIL import Image

from sdapi.images import (
    DATA_URL_PREFIX,
    decode_image,
    decode_images,
    image_to_base64,
    image_to_raw_base64,
    png_bytes_to_base64,
    save_images,
    strip_data_url,
    to_b64,
)
from tests.conftest import PNG_SIZE, TINY_PNG, TINY_PNG_B64, TINY_PNG_DATA_URL, make_png

# ── decoding ──────────────────────────────────────────────────────────


class TestStripDataUrl:
    def test_plain_payload_unchanged(self):
        assert strip_data_url("abcd") == "abcd"

    def test_prefix_removed(self):
        assert strip_data_url("data:image/png;base64,abcd") == "abcd"

    def test_only_first_comma_splits(self):
        assert strip_data_url("a,b,c") == "b,c"


class TestDecodeImage:
    def test_plain_base64(self):
        img, raw = decode_image(TINY_PNG_B64)
        assert raw == TINY_PNG
        assert img is not None
        assert img.size == PNG_SIZE

    def test_data_url_keeps_payload(self):
        img, raw = decode_image(TINY_PNG_DATA_URL)
        assert raw == TINY_PNG
        assert img is not None
        assert img.size == PNG_SIZE

    def test_invalid_base64(self):
        assert decode_image("not base64!!") == (None, None)

    def test_not_a_png(self):
        data = base64.b64encode(b"GIF89a not really").decode()
        img, raw = decode_image(data)
        assert img is None
        assert raw == b"GIF89a not really"

    def test_oversized_png_skipped(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 1)
        img, raw = decode_image(TINY_PNG_B64)
        assert img is None
        assert raw == TINY_PNG


class TestDecodeImages:
    def test_all_valid(self):
        other = base64.b64encode(make_png(8, 5, "blue")).decode()
        result = decode_images([TINY_PNG_B64, "data:image/png;base64," + other])
        assert [img.size for img in result.images] == [PNG_SIZE, (8, 5)]
        assert len(result.raw) == 2
        assert result.skipped == 0

    def test_failures_skipped(self):
        junk = base64.b64encode(b"junk").decode()
        result = decode_images([TINY_PNG_B64, "%%%", junk, TINY_PNG_DATA_URL])
        assert len(result.images) == 2
        # bytes are kept for entries that were valid base64
        assert result.raw == [TINY_PNG, b"junk", TINY_PNG]
        assert result.skipped == 2
        assert result.png == [TINY_PNG, TINY_PNG]

    def test_oversized_pngs_counted_as_skipped(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 1)
        result = decode_images([TINY_PNG_B64, TINY_PNG_DATA_URL])
        assert result.images == []
        assert result.png == []
        assert result.skipped == 2

    def test_empty(self):
        result = decode_images([])
        assert result.images == []
        assert result.raw == []
        assert result.skipped == 0

    def test_accepts_generator(self):
        result = decode_images(s for s in [TINY_PNG_B64])
        assert len(result.images) == 1


# ── encoding ──────────────────────────────────────────────────────────


class TestEncode:
    def test_raw_base64_round_trips_dimensions(self):
        src = Image.new("RGB", (7, 4), "green")
        img, _ = decode_image(image_to_raw_base64(src))
        assert img is not None
        assert img.size == (7, 4)

    def test_data_url(self):
        encoded = image_to_base64(Image.new("L", (2, 2)))
        assert encoded.startswith(DATA_URL_PREFIX)
        raw = base64.b64decode(encoded.removeprefix(DATA_URL_PREFIX))
        assert raw.startswith(b"\x89PNG")

    def test_png_bytes_to_base64(self):
        assert png_bytes_to_base64(TINY_PNG) == TINY_PNG_DATA_URL


class TestToB64:
    def test_bytes_input(self):
        raw = b"hello"
        assert to_b64(raw) == base64.b64encode(raw).decode()

    def test_file_path(self, tmp_path: Path):
        f = tmp_path / "img.png"
        f.write_bytes(b"\x89PNG")
        result = to_b64(str(f))
        assert base64.b64decode(result) == b"\x89PNG"

    def test_pathlib_path(self, tmp_path: Path):
        f = tmp_path / "img.png"
        f.write_bytes(b"data")
        assert base64.b64decode(to_b64(f)) == b"data"

    def test_pil_image(self):
        result = to_b64(Image.new("RGB", PNG_SIZE, "red"))
        img, _ = decode_image(result)
        assert img is not None
        assert img.size == PNG_SIZE

    def test_passthrough_string(self):
        assert to_b64(TINY_PNG_B64) == TINY_PNG_B64
        assert to_b64(TINY_PNG_DATA_URL) == TINY_PNG_DATA_URL

    def test_unsupported_type(self):
        with pytest.raises(TypeError, match="unsupported image type"):
            to_b64(12345)  # type: ignore[arg-type]


class TestSaveImages:
    def test_saves_files(self, tmp_path: Path):
        images = [b"img0", b"img1", b"img2"]
        paths = save_images(images, str(tmp_path), prefix="test")
        assert len(paths) == 3
        for i, p in enumerate(paths):
            assert p.name == f"test_{i:04d}.png"
            assert p.read_bytes() == images[i]

    def test_creates_directory(self, tmp_path: Path):
        out = tmp_path / "sub" / "dir"
        save_images([b"x"], out)
        assert (out / "output_0000.png").exists()
