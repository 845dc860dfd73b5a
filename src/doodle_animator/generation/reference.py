"""
Reference Image Intake
======================

Checks a user-supplied reference image before it is sent to the model.

Rules:
    - Media type must start with "image/"
    - Payload must be non-empty and at most max_size_mb megabytes
"""

import base64
import binascii
from dataclasses import dataclass

from doodle_animator.errors import InvalidReferenceImage


DEFAULT_MAX_SIZE_MB = 4.0


@dataclass(frozen=True, slots=True)
class ReferenceImage:
    """Accepted reference image."""

    mime_type: str
    data: bytes

    def __repr__(self) -> str:
        return f"ReferenceImage(mime_type={self.mime_type!r}, size={len(self.data)})"

    @classmethod
    def from_bytes(
        cls,
        data: bytes,
        mime_type: str,
        max_size_mb: float = DEFAULT_MAX_SIZE_MB,
    ) -> "ReferenceImage":
        """
        Validate raw image bytes.

        Raises:
            InvalidReferenceImage: On a non-image type, empty or oversized payload
        """
        if not mime_type or not mime_type.startswith("image/"):
            raise InvalidReferenceImage("Please select an image file.")
        if not data:
            raise InvalidReferenceImage("Reference image is empty.")
        if len(data) > max_size_mb * 1024 * 1024:
            raise InvalidReferenceImage(f"Image size exceeds {max_size_mb:g}MB limit.")
        return cls(mime_type=mime_type, data=data)

    @classmethod
    def from_base64(
        cls,
        data: str,
        mime_type: str,
        max_size_mb: float = DEFAULT_MAX_SIZE_MB,
    ) -> "ReferenceImage":
        """Validate a base64-encoded image."""
        try:
            raw = base64.b64decode(data, validate=True)
        except (binascii.Error, ValueError):
            raise InvalidReferenceImage("Reference image is not valid base64.")
        return cls.from_bytes(raw, mime_type, max_size_mb)
