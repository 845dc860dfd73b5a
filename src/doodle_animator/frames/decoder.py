"""
Image Decoder
=============

Dedicated module for decoding frame payloads into OpenCV matrices.

Design Rules:
    - This is the ONLY place in the codebase that decodes images
    - Always returns 8-bit BGRA (alpha kept for compositing)
    - Fails fast on corrupt frames
    - The async entry point bounds the wait with a timeout
"""

import asyncio
import logging

import cv2
import numpy as np

from doodle_animator.errors import DecodeError
from doodle_animator.frames.frame import ValidatedFrame


logger = logging.getLogger(__name__)


def _to_bgra(image: np.ndarray, frame_index: int) -> np.ndarray:
    """Normalize a decoded matrix to (H, W, 4) uint8 BGRA."""
    if image.dtype == np.uint16:
        image = (image >> 8).astype(np.uint8)
    elif image.dtype != np.uint8:
        raise DecodeError(frame_index, f"unsupported sample type {image.dtype}")

    if image.ndim == 2:
        return cv2.cvtColor(image, cv2.COLOR_GRAY2BGRA)

    if image.ndim != 3:
        raise DecodeError(frame_index, f"invalid image shape {image.shape}")

    channels = image.shape[2]
    if channels == 1:
        return cv2.cvtColor(image, cv2.COLOR_GRAY2BGRA)
    if channels == 3:
        return cv2.cvtColor(image, cv2.COLOR_BGR2BGRA)
    if channels == 4:
        return image

    raise DecodeError(frame_index, f"invalid channel count {channels}")


def decode_frame_bgra(frame: ValidatedFrame) -> np.ndarray:
    """
    Decode an encoded image payload to a BGRA numpy array.

    Args:
        frame: Frame with encoded image bytes

    Returns:
        BGRA image as np.ndarray (H, W, 4), dtype=uint8

    Raises:
        DecodeError: If decoding fails or the image is invalid
    """
    try:
        buffer = np.frombuffer(frame.data, np.uint8)
        image = cv2.imdecode(buffer, cv2.IMREAD_UNCHANGED)

        if image is None or image.size == 0:
            raise DecodeError(
                frame.index,
                f"cv2.imdecode could not read {frame.mime_type} payload "
                f"({len(frame.data)} bytes)",
            )

        return _to_bgra(image, frame.index)

    except DecodeError:
        raise
    except Exception as e:
        raise DecodeError(frame.index, f"unexpected decode failure: {e}") from e


async def decode_frame(frame: ValidatedFrame, timeout: float) -> np.ndarray:
    """
    Decode a frame off the event loop, waiting at most ``timeout`` seconds.

    Only the current frame's pipeline waits on this; the event loop stays
    free for other work.

    A worker thread cannot be cancelled. After a timeout the abandoned
    decode keeps running in the background until cv2 returns, so its
    memory is held alongside the next frame's decode.

    Raises:
        DecodeError: On decode failure or timeout
    """
    try:
        return await asyncio.wait_for(
            asyncio.to_thread(decode_frame_bgra, frame),
            timeout=timeout,
        )
    except asyncio.TimeoutError:
        logger.warning(
            f"Decode of frame {frame.index} timed out after {timeout:.1f}s; "
            f"the worker thread keeps running until it finishes"
        )
        raise DecodeError(frame.index, f"decode did not finish within {timeout:.1f}s")
