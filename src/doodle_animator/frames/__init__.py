"""
Frames Module
=============

Validation, decoding and rasterization of model-returned frames.

This module provides:
    - ValidatedFrame: Image payload accepted for animation
    - FrameValidator: Filters response parts down to image frames
    - CanvasRasterizer: Decodes frames onto a white fixed-size canvas
    - PixelBuffer: RGBA pixels for one frame

Example:
    from doodle_animator.frames import FrameValidator, CanvasRasterizer

    frames = FrameValidator().validate(parts).require()
    rasterizer = CanvasRasterizer(width=1024, height=1024)
    pixels = await rasterizer.rasterize(frames[0])
"""

from doodle_animator.frames.frame import ValidatedFrame
from doodle_animator.frames.validator import (
    MIN_FRAMES,
    FrameValidator,
    FrameValidatorMetrics,
    ValidationResult,
)
from doodle_animator.frames.decoder import decode_frame, decode_frame_bgra
from doodle_animator.frames.canvas import (
    CanvasRasterizer,
    CanvasSurface,
    PixelBuffer,
    rasterize,
)


__all__ = [
    "ValidatedFrame",
    "MIN_FRAMES",
    "FrameValidator",
    "FrameValidatorMetrics",
    "ValidationResult",
    "decode_frame",
    "decode_frame_bgra",
    "CanvasRasterizer",
    "CanvasSurface",
    "PixelBuffer",
    "rasterize",
]
