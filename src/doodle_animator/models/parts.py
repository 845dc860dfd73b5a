"""
Response Parts
==============

Internal representation of the parts returned by the remote model.

A generation response is an ordered sequence of parts. Each part is either
an inline image payload or a text fragment. These types are immutable and
are discarded once the FrameValidator has looked at them.

Design Rules:
    - Image payload bytes are already base64-decoded here
    - Nothing here decodes or inspects image content
"""

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True, slots=True)
class ImagePart:
    """
    Inline binary payload returned by the model.

    Attributes:
        mime_type: Declared media type (e.g. "image/png")
        data: Raw payload bytes
    """

    mime_type: str
    data: bytes

    def __repr__(self) -> str:
        """Compact repr that doesn't dump the payload."""
        return f"ImagePart(mime_type={self.mime_type!r}, size={len(self.data)})"


@dataclass(frozen=True, slots=True)
class TextPart:
    """Text fragment returned by the model."""

    text: str


RawPart = Union[ImagePart, TextPart]
