"""
Animation Builder
=================

Drives the assembly pipeline for one model response:

    FrameValidator -> CanvasRasterizer -> PaletteQuantizer -> AnimationStream

Frames are processed strictly one at a time, in response order. Decoding,
quantization and GIF encoding run in worker threads (asyncio.to_thread),
each awaited before the next step. The next frame is not decoded until
the current one has been quantized and appended.

Failure Policy:
    - Fewer than min_frames usable frames: InsufficientFrames, before any
      rasterization or encoding
    - First frame-level failure aborts the build (no partial GIFs).
      DecodeError / PixelExtractionError propagate as-is; anything else
      raised while handling a frame is wrapped in FrameProcessingError
    - With skip_bad_frames=True, failing frames are dropped instead, and
      the build still needs min_frames survivors
    - No retries

Resources:
    The canvas surface is allocated per build() call and shared by all of
    that call's frames.
"""

import asyncio
import logging
from typing import List, Sequence

from doodle_animator.encoding.asset import AnimationAsset
from doodle_animator.encoding.palette import MAX_PALETTE_SIZE, PaletteQuantizer
from doodle_animator.encoding.stream import AnimationStream, frame_delay_ms
from doodle_animator.errors import FrameProcessingError, InsufficientFrames
from doodle_animator.frames.canvas import CanvasRasterizer
from doodle_animator.frames.frame import ValidatedFrame
from doodle_animator.frames.validator import MIN_FRAMES, FrameValidator
from doodle_animator.models.parts import RawPart


logger = logging.getLogger(__name__)


DEFAULT_FRAME_RATE_HZ = 4.0
DEFAULT_SIZE = 1024


class AnimationBuilder:
    """
    Builds one looping GIF from a model response.

    Attributes:
        max_colors: Palette size limit per frame
        color_format: Quantizer binning precision
        decode_timeout: Seconds allowed for one frame decode
        min_frames: Usable frames required for an animation
        skip_bad_frames: Drop failing frames instead of aborting

    Example:
        builder = AnimationBuilder()
        asset = await builder.build(parts, frame_rate_hz=4)
        html = f'<img src="{asset.url}">'
    """

    def __init__(
        self,
        max_colors: int = MAX_PALETTE_SIZE,
        color_format: str = "rgb444",
        decode_timeout: float = 10.0,
        min_frames: int = MIN_FRAMES,
        skip_bad_frames: bool = False,
    ) -> None:
        if min_frames < 1:
            raise ValueError("min_frames must be >= 1")

        self.quantizer = PaletteQuantizer(max_colors, color_format)
        self.validator = FrameValidator()
        self.decode_timeout = decode_timeout
        self.min_frames = min_frames
        self.skip_bad_frames = skip_bad_frames

        logger.info(
            f"AnimationBuilder initialized: colors={max_colors}, "
            f"format={color_format}, skip_bad_frames={skip_bad_frames}"
        )

    async def build(
        self,
        parts: Sequence[RawPart],
        frame_rate_hz: float = DEFAULT_FRAME_RATE_HZ,
        width: int = DEFAULT_SIZE,
        height: int = DEFAULT_SIZE,
    ) -> AnimationAsset:
        """
        Assemble a looping GIF from response parts.

        Args:
            parts: Parts in the order the model returned them
            frame_rate_hz: Playback rate
            width: Canvas width
            height: Canvas height

        Returns:
            AnimationAsset holding the finished GIF

        Raises:
            ValueError: If frame_rate_hz is not positive
            InsufficientFrames: If too few usable frames
            InvalidDimensions: If width or height is not positive
            DecodeError: If a frame cannot be decoded
            PixelExtractionError: If a frame yields no pixels
            FrameProcessingError: If a frame fails for another reason
        """
        delay_ms = frame_delay_ms(frame_rate_hz)

        frames = self.validator.validate(parts).require(self.min_frames)

        rasterizer = CanvasRasterizer(width, height, self.decode_timeout)
        stream = AnimationStream(width, height)

        logger.info(f"Creating GIF with {len(frames)} frames, delay: {delay_ms}ms")

        skipped: List[int] = []
        for frame in frames:
            logger.info(f"Processing frame {frame.index}/{len(frames)}")
            try:
                await self._process_frame(frame, rasterizer, stream, delay_ms)
            except FrameProcessingError as e:
                if not self.skip_bad_frames:
                    logger.error(f"Error processing frame {frame.index}: {e}")
                    raise
                logger.warning(f"Skipping frame {frame.index}: {e}")
                skipped.append(frame.index)
            except Exception as e:
                if not self.skip_bad_frames:
                    logger.error(f"Error processing frame {frame.index}: {e}")
                    raise FrameProcessingError(
                        frame.index, str(e) or type(e).__name__
                    ) from e
                logger.warning(f"Skipping frame {frame.index}: {e}")
                skipped.append(frame.index)

        if stream.frame_count < self.min_frames:
            raise InsufficientFrames(stream.frame_count, self.min_frames)

        data = await asyncio.to_thread(stream.finalize)
        asset = AnimationAsset.from_bytes(
            data,
            width=width,
            height=height,
            frame_count=stream.frame_count,
            delay_ms=delay_ms,
        )

        if skipped:
            logger.warning(f"GIF created without frame(s) {skipped}")
        logger.info(f"GIF created successfully: {asset!r}")
        return asset

    async def _process_frame(
        self,
        frame: ValidatedFrame,
        rasterizer: CanvasRasterizer,
        stream: AnimationStream,
        delay_ms: int,
    ) -> None:
        """Rasterize, quantize and append one frame."""
        pixels = await rasterizer.rasterize(frame)
        palette, indices = await asyncio.to_thread(self.quantizer.quantize, pixels)
        stream.append_frame(indices, pixels.width, pixels.height, palette, delay_ms)
        logger.info(f"Frame {frame.index} added to GIF ({len(palette)} colors)")


async def build_animation(
    parts: Sequence[RawPart],
    frame_rate_hz: float = DEFAULT_FRAME_RATE_HZ,
    width: int = DEFAULT_SIZE,
    height: int = DEFAULT_SIZE,
    **options,
) -> AnimationAsset:
    """
    Build an animation with a one-off AnimationBuilder.

    Keyword options are passed to AnimationBuilder.
    """
    builder = AnimationBuilder(**options)
    return await builder.build(parts, frame_rate_hz, width, height)
