# gallery/utils/image.py
"""
Artwork image validation and optimisation built on Pillow.

Validation checks size, real format (decoded, not trusted from the
extension), dimensions and embedded script/executable payloads. Processing
produces an optimised WEBP, a square thumbnail and a colour palette.
"""

import hashlib
import logging
import re
from dataclasses import dataclass, field
from io import BytesIO
from pathlib import Path
from typing import List

from PIL import Image, ImageOps, UnidentifiedImageError

from gallery.core.config import settings
from gallery.core.decorator import ValidationFailed

logger = logging.getLogger(__name__)

# Pillow format name -> (mime type, accepted extensions)
ALLOWED_FORMATS = {
    "JPEG": ("image/jpeg", {".jpg", ".jpeg"}),
    "PNG": ("image/png", {".png"}),
    "WEBP": ("image/webp", {".webp"}),
    "GIF": ("image/gif", {".gif"}),
}

SUSPICIOUS_PATTERNS = [
    re.compile(rb"<script[^>]*>", re.IGNORECASE),
    re.compile(rb"eval\s*\(", re.IGNORECASE),
    re.compile(rb"document\.cookie", re.IGNORECASE),
    re.compile(rb"window\.location", re.IGNORECASE),
]

# Executable headers are only meaningful where a file would start
LEADING_SIGNATURES = {
    b"MZ": "PE executable",
    b"\x7fELF": "ELF executable",
    b"PK\x03\x04": "ZIP archive",
}
EMBEDDED_SIGNATURES = {
    b"PK\x03\x04": "ZIP archive",
    b"\x7fELF": "ELF executable",
}

DEFAULT_PALETTE = ["#9333ea", "#6b46c1", "#c084fc"]


@dataclass
class ValidatedImage:
    content: bytes
    format: str
    mime_type: str
    width: int
    height: int
    file_hash: str


@dataclass
class ProcessedImage:
    optimized: bytes
    thumbnail: bytes
    width: int
    height: int
    color_palette: List[str] = field(default_factory=list)

    @property
    def dominant_color(self) -> str:
        return self.color_palette[0] if self.color_palette else DEFAULT_PALETTE[0]


def file_hash(content: bytes) -> str:
    return hashlib.sha256(content).hexdigest()


def security_scan(content: bytes) -> List[str]:
    """Return the list of threats found in the raw upload (empty when clean)."""
    threats = []
    for pattern in SUSPICIOUS_PATTERNS:
        if pattern.search(content):
            threats.append(f"Suspicious pattern detected: {pattern.pattern.decode()}")

    for signature, label in LEADING_SIGNATURES.items():
        if content.startswith(signature):
            threats.append(f"Embedded executable content detected ({label})")

    for signature, label in EMBEDDED_SIGNATURES.items():
        if content.find(signature, 1) != -1:
            threats.append(f"Embedded executable content detected ({label})")

    return threats


def validate_image(content: bytes, filename: str) -> ValidatedImage:
    """
    Validate an uploaded artwork image.

    Raises:
        ValidationFailed: with a user-facing message on the first failed check
    """
    if not content:
        raise ValidationFailed("Empty file uploaded")

    max_bytes = settings.max_upload_size_mb * 1024 * 1024
    if len(content) > max_bytes:
        raise ValidationFailed(
            f"File too large. Maximum size is {settings.max_upload_size_mb}MB"
        )

    extension = Path(filename or "").suffix.lower()

    try:
        with Image.open(BytesIO(content)) as img:
            image_format = img.format
            width, height = img.size
            img.verify()
    except Image.DecompressionBombError as e:
        logger.warning(f"Rejected oversized image '{filename}': {e}")
        max_dim = settings.image_max_dimension
        raise ValidationFailed(
            f"Image too large. Maximum dimensions are {max_dim}x{max_dim} pixels"
        )
    except (UnidentifiedImageError, OSError, SyntaxError) as e:
        logger.warning(f"Rejected unreadable image '{filename}': {e}")
        raise ValidationFailed("Invalid or corrupted image file")

    if image_format not in ALLOWED_FORMATS:
        raise ValidationFailed(
            "Invalid file type. Allowed types: JPEG, PNG, WEBP, GIF"
        )

    mime_type, extensions = ALLOWED_FORMATS[image_format]
    if extension not in extensions:
        raise ValidationFailed("File extension does not match file content")

    min_dim, max_dim = settings.image_min_dimension, settings.image_max_dimension
    if width < min_dim or height < min_dim:
        raise ValidationFailed(
            f"Image too small. Minimum dimensions are {min_dim}x{min_dim} pixels"
        )
    if width > max_dim or height > max_dim:
        raise ValidationFailed(
            f"Image too large. Maximum dimensions are {max_dim}x{max_dim} pixels"
        )

    threats = security_scan(content)
    if threats:
        logger.warning(f"Security scan rejected '{filename}': {threats}")
        raise ValidationFailed("File failed security scan")

    return ValidatedImage(
        content=content,
        format=image_format,
        mime_type=mime_type,
        width=width,
        height=height,
        file_hash=file_hash(content),
    )


def extract_colors(img: Image.Image, count: int = 5) -> List[str]:
    """Most frequent colours of a downscaled copy, as hex strings."""
    try:
        sample = img.convert("RGB")
        sample.thumbnail((64, 64))
        quantized = sample.quantize(colors=count)
        palette = quantized.getpalette() or []
        colors = sorted(quantized.getcolors() or [], reverse=True)
        result = []
        for _, index in colors:
            r, g, b = palette[index * 3 : index * 3 + 3]
            hex_color = f"#{r:02x}{g:02x}{b:02x}"
            if hex_color not in result:
                result.append(hex_color)
        return result or list(DEFAULT_PALETTE)
    except (OSError, ValueError) as e:
        logger.warning(f"Colour extraction failed: {e}")
        return list(DEFAULT_PALETTE)


def process_image(content: bytes) -> ProcessedImage:
    """Produce the optimised WEBP, a square thumbnail and the palette."""
    max_side = settings.image_optimized_max
    thumb_side = settings.image_thumbnail_max

    with Image.open(BytesIO(content)) as img:
        img = ImageOps.exif_transpose(img)
        if img.mode not in ("RGB", "RGBA"):
            img = img.convert("RGBA" if "transparency" in img.info else "RGB")

        optimized = img.copy()
        optimized.thumbnail((max_side, max_side))
        optimized_buffer = BytesIO()
        optimized.save(optimized_buffer, format="WEBP", quality=settings.image_quality)

        thumbnail = ImageOps.fit(img, (thumb_side, thumb_side))
        thumbnail_buffer = BytesIO()
        thumbnail.save(thumbnail_buffer, format="WEBP", quality=75)

        palette = extract_colors(img)

    return ProcessedImage(
        optimized=optimized_buffer.getvalue(),
        thumbnail=thumbnail_buffer.getvalue(),
        width=optimized.width,
        height=optimized.height,
        color_palette=palette,
    )

