"""Photo ingestion into embedded data URLs."""

import base64
import logging
from dataclasses import dataclass
from typing import Protocol

from weight_tracker.domain.errors import ConversionError

logger = logging.getLogger(__name__)

FALLBACK_MIME_TYPE = "application/octet-stream"


class PhotoUpload(Protocol):
    """Uploaded binary photo, as provided by the web layer."""

    content_type: str | None

    async def read(self) -> bytes:
        """Return the uploaded bytes."""


@dataclass
class PhotoConverter:
    """Converts uploaded photos into self-describing data URLs."""

    async def to_text(self, upload: PhotoUpload | None) -> str | None:
        """Return a data URL for the upload, or None when nothing was uploaded."""
        if upload is None:
            return None
        try:
            content = await upload.read()
        except (OSError, ValueError) as exc:
            logger.exception("Failed to read uploaded photo")
            raise ConversionError("Failed to read the uploaded photo") from exc
        if not content:
            return None
        return to_data_url(content, upload.content_type)


def to_data_url(content: bytes, content_type: str | None = None) -> str:
    """Encode bytes as a base64 data URL."""
    if content_type and content_type.startswith("image/"):
        mime_type = content_type
    else:
        mime_type = detect_mime_type(content)
    encoded = base64.b64encode(content).decode("ascii")
    return f"data:{mime_type};base64,{encoded}"


def detect_mime_type(content: bytes) -> str:
    """Infer an image MIME type from its file signature."""
    if content.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if content.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if content[:6] in {b"GIF87a", b"GIF89a"}:
        return "image/gif"
    if content[:4] == b"RIFF" and content[8:12] == b"WEBP":
        return "image/webp"
    return FALLBACK_MIME_TYPE
