"""Magic-byte detection for downloaded image payloads."""

from __future__ import annotations

from .models import ImageFormat

MIN_IMAGE_BYTES = 512

# Leading-byte signatures, checked in order.
SIGNATURES: list[tuple[bytes, ImageFormat]] = [
    (b"\xff\xd8", ImageFormat.JPEG),
    (b"\x89PNG", ImageFormat.PNG),
    (b"GIF", ImageFormat.GIF),
]
BMP_SIGNATURE = b"BM"
RIFF_SIGNATURE = b"RIFF"
WEBP_SIGNATURE = b"WEBP"


def _is_webp(data: bytes) -> bool:
    return data[0:4] == RIFF_SIGNATURE and data[8:12] == WEBP_SIGNATURE


def detect_format(data: bytes) -> ImageFormat | None:
    """Return the image format identified by the leading bytes, if any."""
    for signature, image_format in SIGNATURES:
        if data.startswith(signature):
            return image_format
    if _is_webp(data):
        return ImageFormat.WEBP
    if data.startswith(BMP_SIGNATURE):
        return ImageFormat.BMP
    return None


def content_type_for(data: bytes) -> str:
    """Return the detected MIME type, defaulting to JPEG for unknown payloads."""
    image_format = detect_format(data)
    return (image_format or ImageFormat.JPEG).value


def sniff_valid_image(data: bytes, min_bytes: int = MIN_IMAGE_BYTES) -> ImageFormat | None:
    """Return the format of a payload that clears the size floor, else None."""
    if len(data) <= min_bytes:
        return None
    return detect_format(data)


def is_valid_image(data: bytes, min_bytes: int = MIN_IMAGE_BYTES) -> bool:
    """Return True when the payload is large enough and carries a known signature."""
    return sniff_valid_image(data, min_bytes) is not None
