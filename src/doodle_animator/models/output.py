"""
Output Models
=============

Response contract of the HTTP service.

Success:
    {
        "status": "ok",
        "message": "Done!",
        "frame_count": 5,
        "width": 1024,
        "height": 1024,
        "delay_ms": 250,
        "media_type": "image/gif",
        "data_url": "data:image/gif;base64,R0lGODlh...",
        "download_name": "animation_a_cat_waving.gif",
        "frames": ["data:image/png;base64,iVBORw0KGgo...", ...]
    }

Failure:
    {
        "status": "error",
        "code": "DECODE_FAILED",
        "message": "Error generating animation at frame 3: ...",
        "frame_index": 3,
        "observed_count": null
    }
"""

from typing import List, Optional

from pydantic import BaseModel, Field

from doodle_animator.models.failure_codes import FailureCode


class AnimationResponse(BaseModel):
    """Successful build result."""

    status: str = Field(default="ok", description="Always 'ok'")
    message: str = Field(..., description="Human-readable status line")
    frame_count: int = Field(..., ge=1, description="Frames in the animation")
    width: int = Field(..., gt=0, description="Canvas width in pixels")
    height: int = Field(..., gt=0, description="Canvas height in pixels")
    delay_ms: int = Field(..., ge=10, description="Per-frame display time")
    media_type: str = Field(..., description="Media type of the container")
    data_url: str = Field(..., description="Playable data: URL")
    download_name: str = Field(..., description="Suggested filename")
    frames: List[str] = Field(
        default_factory=list,
        description="Accepted source frames as data: URLs, in order",
    )


class ErrorResponse(BaseModel):
    """Failed build result."""

    status: str = Field(default="error", description="Always 'error'")
    code: FailureCode = Field(..., description="Machine-readable failure code")
    message: str = Field(..., description="Human-readable status line")
    frame_index: Optional[int] = Field(
        default=None,
        ge=1,
        description="1-based index of the failing frame, if any",
    )
    observed_count: Optional[int] = Field(
        default=None,
        ge=0,
        description="Usable frames observed, for INSUFFICIENT_FRAMES",
    )
