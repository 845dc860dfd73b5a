"""
Canvas Rasterizer
=================

Renders decoded frames onto a uniform white canvas and extracts RGBA pixels.

Every frame of an animation must have the same size, so each decoded image
is stretched to exactly fill the canvas (aspect ratio is not preserved; the
model is asked for square frames) and composited over solid white so that
transparent regions come out white rather than black.

Design Rules:
    - One CanvasSurface per build, reused across frames, cleared before each draw
    - Frames are rasterized one at a time, in order
    - Output is RGBA, 4 bytes per pixel, fully opaque
"""

import logging
from dataclasses import dataclass

import cv2
import numpy as np

from doodle_animator.errors import InvalidDimensions, PixelExtractionError
from doodle_animator.frames.decoder import decode_frame
from doodle_animator.frames.frame import ValidatedFrame


logger = logging.getLogger(__name__)


WHITE = 255


@dataclass(frozen=True, slots=True)
class PixelBuffer:
    """
    Raw RGBA samples for one frame.

    Attributes:
        width: Width in pixels
        height: Height in pixels
        data: np.ndarray (height, width, 4), dtype=uint8
    """

    width: int
    height: int
    data: np.ndarray

    def __repr__(self) -> str:
        return f"PixelBuffer({self.width}x{self.height})"

    @property
    def nbytes(self) -> int:
        return int(self.data.nbytes)


class CanvasSurface:
    """
    Mutable RGBA scratch surface of a fixed size.

    Owned by a single build; not safe for concurrent writers.
    """

    def __init__(self, width: int, height: int) -> None:
        if width <= 0 or height <= 0:
            raise InvalidDimensions(width, height)

        self.width = width
        self.height = height
        self._pixels = np.full((height, width, 4), WHITE, dtype=np.uint8)

    def clear(self) -> None:
        """Fill the surface with opaque white."""
        self._pixels.fill(WHITE)

    def draw(self, bgra: np.ndarray) -> None:
        """
        Stretch a BGRA image over the whole surface and composite it.

        Args:
            bgra: Decoded image, (H, W, 4) uint8
        """
        src_h, src_w = bgra.shape[:2]
        shrinking = src_w > self.width or src_h > self.height
        resized = cv2.resize(
            bgra,
            (self.width, self.height),
            interpolation=cv2.INTER_AREA if shrinking else cv2.INTER_LINEAR,
        )
        rgba = cv2.cvtColor(resized, cv2.COLOR_BGRA2RGBA)

        alpha = rgba[..., 3:4].astype(np.float32) / 255.0
        base = self._pixels[..., :3].astype(np.float32)
        blended = rgba[..., :3].astype(np.float32) * alpha + base * (1.0 - alpha)

        self._pixels[..., :3] = np.rint(blended).astype(np.uint8)
        self._pixels[..., 3] = 255

    def extract(self) -> PixelBuffer:
        """Copy the current surface contents out as a PixelBuffer."""
        return PixelBuffer(
            width=self.width,
            height=self.height,
            data=self._pixels.copy(),
        )


class CanvasRasterizer:
    """
    Decodes validated frames and renders them to fixed-size pixel buffers.

    Attributes:
        width: Canvas width in pixels
        height: Canvas height in pixels
        decode_timeout: Maximum seconds to wait for one decode

    Example:
        rasterizer = CanvasRasterizer(width=1024, height=1024)
        for frame in frames:
            pixels = await rasterizer.rasterize(frame)
    """

    def __init__(
        self,
        width: int = 1024,
        height: int = 1024,
        decode_timeout: float = 10.0,
    ) -> None:
        """
        Initialize rasterizer and allocate its canvas.

        Raises:
            InvalidDimensions: If width or height is not positive
        """
        if width <= 0 or height <= 0:
            raise InvalidDimensions(width, height)

        self.width = width
        self.height = height
        self.decode_timeout = decode_timeout
        self.surface = CanvasSurface(width, height)

    async def rasterize(self, frame: ValidatedFrame) -> PixelBuffer:
        """
        Decode one frame and render it onto the white canvas.

        Args:
            frame: Frame accepted by the FrameValidator

        Returns:
            PixelBuffer of exactly width x height RGBA pixels

        Raises:
            DecodeError: If the payload cannot be decoded in time
            PixelExtractionError: If the canvas yields no pixel data
        """
        image = await decode_frame(frame, self.decode_timeout)
        logger.debug(
            f"Frame {frame.index} decoded: {image.shape[1]}x{image.shape[0]}"
        )

        self.surface.clear()
        self.surface.draw(image)
        pixels = self.surface.extract()

        if pixels.data is None or pixels.data.size == 0:
            raise PixelExtractionError(frame.index, "canvas produced no pixel data")

        return pixels


async def rasterize(
    frame: ValidatedFrame,
    width: int,
    height: int,
    decode_timeout: float = 10.0,
) -> PixelBuffer:
    """Rasterize a single frame on a throwaway canvas."""
    rasterizer = CanvasRasterizer(width, height, decode_timeout)
    return await rasterizer.rasterize(frame)
