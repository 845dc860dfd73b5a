"""
Input Message Schemas
=====================

Pydantic models for requests received by the HTTP service.

Part Contract (as returned by the remote model):
    {"mimeType": "image/png", "data": "<base64>"}   # image part
    {"text": "Here is frame 1"}                       # text part

Rules:
    - Parts are kept in the order received
    - A part whose base64 payload cannot be decoded is NOT rejected here;
      it becomes an empty image part and the FrameValidator skips it

Example:
    from doodle_animator.models.input import AnimateRequest

    request = AnimateRequest.model_validate_json(body)
    parts = request.raw_parts()
"""

import base64
import binascii
import logging
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from doodle_animator.models.parts import ImagePart, RawPart, TextPart


logger = logging.getLogger(__name__)


def _b64decode(data: str) -> Optional[bytes]:
    try:
        return base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError):
        return None


class PartMessage(BaseModel):
    """
    One response part, either an inline image or a text fragment.

    Attributes:
        mime_type: Media type of the inline payload (alias: mimeType)
        data: Base64-encoded payload
        text: Text content for text parts
    """

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {"mimeType": "image/png", "data": "iVBORw0KGgo..."},
        },
    )

    mime_type: Optional[str] = Field(
        default=None,
        alias="mimeType",
        description="Media type of the inline payload",
    )
    data: Optional[str] = Field(
        default=None,
        description="Base64-encoded payload",
    )
    text: Optional[str] = Field(
        default=None,
        description="Text content",
    )

    def to_raw_part(self) -> RawPart:
        """Convert to the internal part representation."""
        if self.data is None:
            return TextPart(text=self.text or "")

        payload = _b64decode(self.data)
        if payload is None:
            logger.warning(f"Part with mime_type={self.mime_type!r} has invalid base64 data")
            payload = b""
        return ImagePart(mime_type=self.mime_type or "", data=payload)


class ReferenceImageMessage(BaseModel):
    """Reference image uploaded with a generation request."""

    model_config = ConfigDict(populate_by_name=True)

    mime_type: str = Field(..., alias="mimeType", description="Image media type")
    data: str = Field(..., description="Base64-encoded image")


class AnimateRequest(BaseModel):
    """
    Request to assemble an animation from already generated parts.

    Canvas size is deliberately not range-checked below: non-positive
    values are reported by the pipeline as INVALID_DIMENSIONS.
    """

    parts: List[PartMessage] = Field(..., description="Parts in model order")
    frame_rate_hz: Optional[float] = Field(
        default=None,
        gt=0,
        description="Playback rate; defaults to animation.frame_rate_hz",
    )
    width: Optional[int] = Field(default=None, le=4096, description="Canvas width")
    height: Optional[int] = Field(default=None, le=4096, description="Canvas height")
    name: Optional[str] = Field(
        default=None,
        description="Label used for the download filename",
    )

    def raw_parts(self) -> List[RawPart]:
        """Convert all parts, preserving order."""
        return [part.to_raw_part() for part in self.parts]


class GenerateRequest(BaseModel):
    """Request to generate frames from a prompt and assemble them."""

    prompt: str = Field(..., min_length=1, description="Text prompt")
    reference_image: Optional[ReferenceImageMessage] = Field(
        default=None,
        description="Optional reference image",
    )
