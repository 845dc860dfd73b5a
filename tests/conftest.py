"""
Test Configuration
==================

Pytest fixtures and test configuration for the doodle animator.
"""

from typing import Optional, Sequence, Tuple

import cv2
import numpy as np
import pytest


# Distinct solid colors, one per frame
FRAME_COLORS = [
    (220, 40, 40),
    (40, 180, 60),
    (40, 70, 220),
    (240, 200, 30),
    (150, 60, 200),
]


def encode_png(
    rgb: Tuple[int, int, int],
    size: Tuple[int, int] = (16, 16),
    alpha: Optional[int] = None,
) -> bytes:
    """Encode a solid-color PNG. size is (width, height)."""
    width, height = size
    image = np.zeros((height, width, 3), dtype=np.uint8)
    image[:] = rgb[::-1]
    if alpha is not None:
        image = np.dstack([image, np.full((height, width), alpha, dtype=np.uint8)])

    ok, buffer = cv2.imencode(".png", image)
    assert ok
    return buffer.tobytes()


def encode_rgb_png(rgb: np.ndarray) -> bytes:
    """Encode an (H, W, 3) RGB array as PNG."""
    ok, buffer = cv2.imencode(".png", cv2.cvtColor(rgb, cv2.COLOR_RGB2BGR))
    assert ok
    return buffer.tobytes()


@pytest.fixture
def png_factory():
    """Provide the solid-color PNG encoder."""
    return encode_png


@pytest.fixture
def frame_colors():
    """RGB colors of the five test frames."""
    return list(FRAME_COLORS)


@pytest.fixture
def frame_pngs(frame_colors) -> Sequence[bytes]:
    """Five distinct PNG frames."""
    return [encode_png(color) for color in frame_colors]


@pytest.fixture
def image_parts(frame_pngs):
    """Five image parts as the model would return them."""
    from doodle_animator.models.parts import ImagePart

    return [ImagePart(mime_type="image/png", data=data) for data in frame_pngs]


@pytest.fixture
def response_parts(image_parts):
    """A realistic response: a text preamble, then the frames."""
    from doodle_animator.models.parts import TextPart

    return [TextPart(text="Here are the frames of your doodle:"), *image_parts]


@pytest.fixture
def validated_frame(png_factory):
    """A single validated frame."""
    from doodle_animator.frames.frame import ValidatedFrame

    return ValidatedFrame(index=1, data=png_factory((10, 20, 30)), mime_type="image/png")
