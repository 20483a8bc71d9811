"""Tests for upload validation and decoding."""

import cv2
import numpy as np
import pytest

from phytoscan.errors import InvalidImage, InvalidUpload
from phytoscan.upload import MAX_UPLOAD_BYTES, decode_image, load_image, validate_upload


def _encode(rgb: np.ndarray, ext: str = ".png") -> bytes:
    ok, buf = cv2.imencode(ext, cv2.cvtColor(rgb, cv2.COLOR_RGB2BGR))
    assert ok
    return buf.tobytes()


class TestValidateUpload:
    def test_accepts_image(self):
        validate_upload("image/jpeg", 1024)

    @pytest.mark.parametrize("content_type", ["text/plain", "application/pdf", "", None])
    def test_rejects_non_image(self, content_type):
        with pytest.raises(InvalidUpload):
            validate_upload(content_type, 1024)

    def test_size_limit(self):
        validate_upload("image/png", MAX_UPLOAD_BYTES)
        with pytest.raises(InvalidUpload, match="too large"):
            validate_upload("image/png", MAX_UPLOAD_BYTES + 1)


class TestDecodeImage:
    def test_png_roundtrip_keeps_rgb_order(self):
        rgb = np.zeros((8, 6, 3), dtype=np.uint8)
        rgb[..., 0] = 200  # red
        image = decode_image(_encode(rgb))

        assert image.resolution == (6, 8)
        assert image.channels == 3
        arr = image.to_array()
        assert arr[0, 0, 0] == 200
        assert arr[0, 0, 2] == 0

    def test_grayscale_png_becomes_rgb(self):
        gray = np.full((5, 5), 90, dtype=np.uint8)
        ok, buf = cv2.imencode(".png", gray)
        assert ok
        image = decode_image(buf.tobytes())
        assert image.channels == 3
        assert np.all(image.to_array() == 90)

    def test_rgba_png_keeps_alpha(self):
        bgra = np.zeros((4, 4, 4), dtype=np.uint8)
        bgra[..., 3] = 128
        ok, buf = cv2.imencode(".png", bgra)
        assert ok
        image = decode_image(buf.tobytes())
        assert image.channels == 4
        assert np.all(image.to_array()[..., 3] == 128)

    def test_empty_bytes(self):
        with pytest.raises(InvalidImage):
            decode_image(b"")

    def test_garbage_bytes(self):
        with pytest.raises(InvalidImage):
            decode_image(b"definitely not an image")


class TestLoadImage:
    def test_load_png_file(self, tmp_path):
        path = tmp_path / "leaf.png"
        path.write_bytes(_encode(np.full((10, 12, 3), 128, dtype=np.uint8)))
        image = load_image(path)
        assert image.resolution == (12, 10)

    def test_non_image_extension(self, tmp_path):
        path = tmp_path / "notes.txt"
        path.write_text("hello")
        with pytest.raises(InvalidUpload):
            load_image(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_image(tmp_path / "missing.png")
