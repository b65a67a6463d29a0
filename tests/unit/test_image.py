"""Unit tests for image validation and processing."""

from io import BytesIO

import pytest
from PIL import Image

from gallery.core.decorator import ValidationFailed
from gallery.utils.file_upload import FileUploadService
from gallery.utils.image import process_image, security_scan, validate_image


class TestValidateImage:
    """Tests for validate_image."""

    def test_valid_png(self, image_bytes):
        content = image_bytes("PNG")

        validated = validate_image(content, "nebula.png")

        assert validated.format == "PNG"
        assert validated.mime_type == "image/png"
        assert (validated.width, validated.height) == (320, 240)
        assert len(validated.file_hash) == 64

    def test_valid_jpeg_with_jpeg_extension(self, image_bytes):
        validated = validate_image(image_bytes("JPEG"), "nebula.JPEG")

        assert validated.format == "JPEG"

    def test_empty_file(self):
        with pytest.raises(ValidationFailed, match="Empty file"):
            validate_image(b"", "empty.png")

    def test_not_an_image(self):
        with pytest.raises(ValidationFailed, match="Invalid or corrupted"):
            validate_image(b"just some text, not pixels", "notes.png")

    def test_extension_must_match_content(self, image_bytes):
        with pytest.raises(ValidationFailed, match="extension does not match"):
            validate_image(image_bytes("PNG"), "nebula.jpg")

    def test_disallowed_format(self, image_bytes):
        with pytest.raises(ValidationFailed, match="Invalid file type"):
            validate_image(image_bytes("BMP"), "nebula.bmp")

    def test_too_small(self, image_bytes):
        with pytest.raises(ValidationFailed, match="too small"):
            validate_image(image_bytes("PNG", size=(99, 300)), "tiny.png")

    def test_too_large_file(self, image_bytes, monkeypatch):
        from gallery.core.config import settings

        monkeypatch.setattr(settings, "max_upload_size_mb", 0)

        with pytest.raises(ValidationFailed, match="File too large"):
            validate_image(image_bytes("PNG"), "nebula.png")

    def test_too_large_dimensions(self, image_bytes, monkeypatch):
        from gallery.core.config import settings

        monkeypatch.setattr(settings, "image_max_dimension", 300)

        with pytest.raises(ValidationFailed, match="Image too large"):
            validate_image(image_bytes("PNG", size=(320, 240)), "wide.png")

    def test_decompression_bomb_rejected(self, image_bytes, monkeypatch):
        monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 1000)

        with pytest.raises(ValidationFailed, match="Image too large"):
            validate_image(image_bytes("PNG"), "bomb.png")

    def test_appended_script_rejected(self, image_bytes):
        content = image_bytes("PNG") + b"<script>alert(1)</script>"

        with pytest.raises(ValidationFailed, match="security scan"):
            validate_image(content, "nebula.png")


class TestSecurityScan:
    """Tests for security_scan."""

    def test_clean_image(self, image_bytes):
        assert security_scan(image_bytes("PNG")) == []

    def test_leading_executable_header(self):
        assert security_scan(b"MZ\x90\x00 rest of file")

    def test_mz_inside_data_is_not_a_threat(self):
        assert security_scan(b"\x89PNG....MZ....") == []

    def test_embedded_zip(self):
        threats = security_scan(b"\x89PNG" + b"\x00" * 20 + b"PK\x03\x04payload")

        assert any("ZIP" in t for t in threats)

    def test_eval_call(self):
        assert security_scan(b"GIF89a eval (payload)")


class TestProcessImage:
    """Tests for process_image."""

    def test_large_image_is_downscaled_to_webp(self, image_bytes):
        processed = process_image(image_bytes("PNG", size=(3000, 1500)))

        assert (processed.width, processed.height) == (2048, 1024)
        with Image.open(BytesIO(processed.optimized)) as img:
            assert img.format == "WEBP"

    def test_thumbnail_is_square(self, image_bytes):
        processed = process_image(image_bytes("PNG"))

        with Image.open(BytesIO(processed.thumbnail)) as thumb:
            assert thumb.size == (400, 400)

    def test_palette_and_dominant_colour(self, image_bytes):
        processed = process_image(image_bytes("PNG"))

        assert processed.color_palette
        assert all(c.startswith("#") and len(c) == 7 for c in processed.color_palette)
        assert processed.dominant_color == processed.color_palette[0]


class TestFileUploadService:
    """Tests for FileUploadService storage helpers."""

    def test_save_and_delete(self, tmp_path):
        service = FileUploadService(str(tmp_path))

        url = service.save_bytes(b"data", "artworks", "a.webp")

        assert url == "/storage/artworks/a.webp"
        assert (tmp_path / "artworks" / "a.webp").read_bytes() == b"data"
        assert service.delete_file(url) is True
        assert not (tmp_path / "artworks" / "a.webp").exists()

    def test_delete_refuses_paths_outside_storage(self, tmp_path):
        root = tmp_path / "storage"
        service = FileUploadService(root)
        victim = tmp_path / "victim.txt"
        victim.write_text("keep me")

        assert service.delete_file("../victim.txt") is False
        assert service.delete_file("/storage/../../victim.txt") is False
        assert victim.exists()

    def test_is_stored_url(self, tmp_path):
        service = FileUploadService(tmp_path)

        assert service.is_stored_url("/storage/artworks/a.webp", "artworks")
        assert not service.is_stored_url("/storage/thumbnails/a.webp", "artworks")
        assert not service.is_stored_url("/storage/artworks/../../etc/passwd", "artworks")
        assert not service.is_stored_url("artworks/a.webp", "artworks")

    def test_secure_filename_shape(self):
        name = FileUploadService.generate_secure_filename("abcdef1234567890", ".webp")

        assert name.startswith("artwork_")
        assert "_abcdef12_" in name
        assert name.endswith(".webp")

    def test_sanitize_filename(self):
        assert FileUploadService.sanitize_filename("my cosmic/art?.png") == "my_cosmic_art_.png"
