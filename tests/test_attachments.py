# tests/test_attachments.py
"""
Tests for file encoding in gptsession.attachments.
"""

import base64
import logging

from gptsession.attachments import encode_file_as_base64, encode_image_data_uri


class TestEncodeFileAsBase64:
    def test_encodes_bytes(self, tmp_path):
        path = tmp_path / "blob.bin"
        path.write_bytes(b"\x00\x01binary\xff")
        assert encode_file_as_base64(path) == base64.b64encode(b"\x00\x01binary\xff").decode("ascii")

    def test_no_line_breaks(self, tmp_path):
        path = tmp_path / "big.bin"
        path.write_bytes(b"x" * 4096)
        assert "\n" not in encode_file_as_base64(str(path))

    def test_missing_file_returns_none(self, tmp_path, caplog):
        missing = tmp_path / "missing.png"
        with caplog.at_level(logging.WARNING, logger="gptsession.attachments"):
            assert encode_file_as_base64(missing) is None
        assert f"File not found: <{missing}>" in caplog.text

    def test_directory_returns_none(self, tmp_path):
        assert encode_file_as_base64(tmp_path) is None

    def test_none_path(self):
        assert encode_file_as_base64(None) is None


class TestEncodeImageDataUri:
    def test_png(self, tmp_path):
        path = tmp_path / "a.png"
        path.write_bytes(b"png")
        assert encode_image_data_uri(path) == "data:image/png;base64,cG5n"

    def test_jpeg_mime_type(self, tmp_path):
        path = tmp_path / "photo.jpg"
        path.write_bytes(b"jpg")
        assert encode_image_data_uri(path).startswith("data:image/jpeg;base64,")

    def test_unknown_extension_defaults_to_png(self, tmp_path):
        path = tmp_path / "image.data"
        path.write_bytes(b"raw")
        assert encode_image_data_uri(path).startswith("data:image/png;base64,")

    def test_missing(self, tmp_path):
        assert encode_image_data_uri(tmp_path / "none.png") is None
