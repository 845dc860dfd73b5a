"""
Animation Asset
===============

The finished animation, wrapped as a playable resource handle.

The handle is a ``data:`` URL so that the pipeline never touches the disk;
the UI can put it straight into an <img> tag or offer it for download.
"""

import base64
import re
from dataclasses import dataclass


_SIGNATURES = (
    (b"GIF87a", "image/gif"),
    (b"GIF89a", "image/gif"),
    (b"\x89PNG\r\n\x1a\n", "image/png"),
)

_EXTENSIONS = {
    "image/gif": "gif",
    "image/png": "png",
    "image/webp": "webp",
}

_UNSAFE_CHARS = re.compile(r"[^a-z0-9]", re.IGNORECASE)


def sniff_media_type(data: bytes) -> str:
    """Infer a media type from a container's leading bytes."""
    for signature, media_type in _SIGNATURES:
        if data.startswith(signature):
            return media_type
    if data[:4] == b"RIFF" and data[8:12] == b"WEBP":
        return "image/webp"
    return "application/octet-stream"


def download_name(label: str, media_type: str = "image/gif") -> str:
    """
    Suggested filename for an animation.

    The label is lowercased, non-alphanumerics become underscores and the
    result is cut to 30 characters, e.g. "A cat, waving!" ->
    "animation_a_cat__waving_.gif".
    """
    safe = _UNSAFE_CHARS.sub("_", label).lower()[:30]
    extension = _EXTENSIONS.get(media_type, "bin")
    return f"animation_{safe or 'generated'}.{extension}"


@dataclass(frozen=True)
class AnimationAsset:
    """
    Terminal artifact of one build.

    Attributes:
        data: Container bytes
        media_type: Media type sniffed from data
        width: Canvas width in pixels
        height: Canvas height in pixels
        frame_count: Frames appended to the animation
        delay_ms: Per-frame display time
    """

    data: bytes
    media_type: str
    width: int
    height: int
    frame_count: int
    delay_ms: int

    @classmethod
    def from_bytes(
        cls,
        data: bytes,
        width: int,
        height: int,
        frame_count: int,
        delay_ms: int,
    ) -> "AnimationAsset":
        return cls(
            data=data,
            media_type=sniff_media_type(data),
            width=width,
            height=height,
            frame_count=frame_count,
            delay_ms=delay_ms,
        )

    def __repr__(self) -> str:
        return (
            f"AnimationAsset(media_type={self.media_type!r}, "
            f"frames={self.frame_count}, {self.width}x{self.height}, "
            f"size={self.size})"
        )

    @property
    def size(self) -> int:
        return len(self.data)

    @property
    def url(self) -> str:
        """Playable ``data:`` URL."""
        encoded = base64.b64encode(self.data).decode("ascii")
        return f"data:{self.media_type};base64,{encoded}"
