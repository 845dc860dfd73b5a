"""
Frame Data Model
=================

Validated frame representation for the assembly pipeline.

This is the ONLY frame format passed from the FrameValidator to the
CanvasRasterizer.

Invariants:
    - index is 1-based and contiguous across one response
    - mime_type starts with "image/"
    - data is non-empty
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ValidatedFrame:
    """
    Image payload accepted by the FrameValidator.

    Attributes:
        index: 1-based position among accepted frames
        data: Encoded image bytes (NOT decoded)
        mime_type: Declared image media type
    """

    index: int
    data: bytes
    mime_type: str

    def __post_init__(self) -> None:
        """Validate invariants."""
        if self.index < 1:
            raise ValueError("index must be >= 1")
        if not self.mime_type.startswith("image/"):
            raise ValueError(f"mime_type must be an image type, got {self.mime_type!r}")
        if not self.data:
            raise ValueError("data must be non-empty")

    def __repr__(self) -> str:
        """Compact repr that doesn't dump the payload."""
        return (
            f"ValidatedFrame(index={self.index}, "
            f"mime_type={self.mime_type!r}, "
            f"size={len(self.data)})"
        )
