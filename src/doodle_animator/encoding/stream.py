"""
Animation Stream
================

Append-only GIF encoder for indexed frames.

Each appended frame keeps its own palette, which ends up as a local color
table in the container. Blocks are produced with Pillow's GifImagePlugin
helpers (getheader for the screen header and loop block, getdata for each
frame) so every appended frame is written, even one identical to the frame
before it.

Container Properties:
    - Loops forever (NETSCAPE2.0 loop count 0)
    - Frame delay stored in hundredths of a second, never below 1
    - Frames in append order, never reordered

Lifecycle:
    open --append_frame()*--> open --finalize()--> finalized
    Any call on a finalized stream raises AlreadyFinalized.
"""

import io
import logging
import math
from dataclasses import dataclass
from typing import List

import numpy as np
from PIL import GifImagePlugin, Image

from doodle_animator.encoding.palette import Palette
from doodle_animator.errors import AlreadyFinalized, InvalidDimensions


logger = logging.getLogger(__name__)


# Some viewers reject or speed up zero-length frames
MIN_DELAY_MS = 10
MIN_DELAY_CS = 1

# GIF loop count 0 = repeat forever
LOOP_FOREVER = 0

GIF_TRAILER = b";"

# Restore-nothing: each frame covers the whole canvas
DISPOSAL_NONE = 1


def frame_delay_ms(frame_rate_hz: float) -> int:
    """
    Per-frame display time for a playback rate.

    Rounds half up, then applies the 10 ms floor.

    Raises:
        ValueError: If frame_rate_hz is not positive
    """
    if frame_rate_hz <= 0:
        raise ValueError(f"frame_rate_hz must be positive, got {frame_rate_hz}")
    return max(MIN_DELAY_MS, int(math.floor(1000.0 / frame_rate_hz + 0.5)))


def to_centiseconds(delay_ms: float) -> int:
    """Convert milliseconds to the container's hundredths of a second."""
    return max(MIN_DELAY_CS, int(math.floor(delay_ms / 10.0 + 0.5)))


@dataclass(frozen=True, slots=True)
class IndexedFrame:
    """
    A frame expressed as palette indices.

    Attributes:
        indices: np.ndarray (height, width), dtype=uint8
        palette: Colors the indices refer to
        delay_cs: Display time in hundredths of a second
    """

    indices: np.ndarray
    palette: Palette
    delay_cs: int

    @property
    def width(self) -> int:
        return int(self.indices.shape[1])

    @property
    def height(self) -> int:
        return int(self.indices.shape[0])

    def to_image(self) -> Image.Image:
        """Build a Pillow P-mode image carrying this frame's palette."""
        data = np.ascontiguousarray(self.indices, dtype=np.uint8)
        image = Image.frombytes("P", (self.width, self.height), data.tobytes())
        image.putpalette(self.palette.to_bytes())
        return image


def _frame_block(frame: IndexedFrame) -> bytes:
    """Graphic control extension, descriptor, local color table and LZW data."""
    chunks = GifImagePlugin.getdata(
        frame.to_image(),
        duration=frame.delay_cs * 10,
        disposal=DISPOSAL_NONE,
        include_color_table=True,
    )
    block = b"".join(chunks)
    # getdata collects into a list shared across calls
    chunks.clear()
    return block


class AnimationStream:
    """
    Accumulates indexed frames and finalizes them into one GIF.

    Attributes:
        width: Frame width every appended frame must match
        height: Frame height every appended frame must match

    Example:
        stream = AnimationStream(1024, 1024)
        stream.append_frame(indices, 1024, 1024, palette, delay_ms=250)
        gif_bytes = stream.finalize()
    """

    def __init__(self, width: int, height: int) -> None:
        if width <= 0 or height <= 0:
            raise InvalidDimensions(width, height)

        self.width = width
        self.height = height
        self._frames: List[IndexedFrame] = []
        self._appended: int = 0
        self._finalized: bool = False

    @property
    def frame_count(self) -> int:
        """Frames appended so far."""
        return self._appended

    @property
    def finalized(self) -> bool:
        return self._finalized

    def append_frame(
        self,
        indices: np.ndarray,
        width: int,
        height: int,
        palette: Palette,
        delay_ms: float,
    ) -> IndexedFrame:
        """
        Append one frame at the end of the animation.

        Args:
            indices: Palette index per pixel, (height, width)
            width: Frame width
            height: Frame height
            palette: Frame-local palette
            delay_ms: Display time; converted to hundredths, min 1

        Returns:
            The IndexedFrame that was stored

        Raises:
            AlreadyFinalized: If finalize() was already called
            ValueError: On size mismatch or out-of-range indices
        """
        if self._finalized:
            raise AlreadyFinalized("Cannot append frames to a finalized animation stream")

        if (width, height) != (self.width, self.height):
            raise ValueError(
                f"Frame size {width}x{height} does not match "
                f"stream size {self.width}x{self.height}"
            )
        if indices.shape != (height, width):
            raise ValueError(
                f"Index array shape {indices.shape} does not match {width}x{height}"
            )
        if indices.size and int(indices.max()) >= len(palette):
            raise ValueError(
                f"Index {int(indices.max())} out of range for palette of {len(palette)}"
            )

        frame = IndexedFrame(
            indices=indices,
            palette=palette,
            delay_cs=to_centiseconds(delay_ms),
        )
        self._frames.append(frame)
        self._appended += 1
        return frame

    def finalize(self) -> bytes:
        """
        Close the stream and encode the GIF container.

        Returns:
            GIF bytes

        Raises:
            AlreadyFinalized: If called a second time
            ValueError: If no frames were appended
        """
        if self._finalized:
            raise AlreadyFinalized("Animation stream was already finalized")
        if not self._frames:
            raise ValueError("No frames to encode")

        self._finalized = True

        buffer = io.BytesIO()
        header, _ = GifImagePlugin.getheader(
            self._frames[0].to_image(),
            info={"loop": LOOP_FOREVER, "optimize": False},
        )
        buffer.write(b"".join(header))
        for frame in self._frames:
            buffer.write(_frame_block(frame))
        buffer.write(GIF_TRAILER)
        data = buffer.getvalue()

        logger.info(
            f"Encoded GIF: {len(self._frames)} frame(s), {self.width}x{self.height}, "
            f"{len(data)} bytes"
        )

        # Frames are no longer needed once encoded
        self._frames = []
        return data

