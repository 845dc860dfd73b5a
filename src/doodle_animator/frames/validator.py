"""
Frame Validator
===============

Filters a model response down to the image frames worth animating.

This module provides the FrameValidator class which:
    - Walks response parts in the order returned
    - Accepts only non-empty payloads with an image/ media type
    - Numbers accepted frames 1..N
    - Logs and skips text and malformed parts (never fatal)
    - Exposes counters for observability

Design Rules:
    - Does NOT decode image data
    - Does NOT reorder parts
    - The minimum-frame policy is applied by ValidationResult.require()
"""

import logging
from dataclasses import dataclass, field
from typing import List, Sequence

from doodle_animator.errors import InsufficientFrames
from doodle_animator.frames.frame import ValidatedFrame
from doodle_animator.models.parts import ImagePart, RawPart, TextPart


logger = logging.getLogger(__name__)


# An animation needs at least a before/after pair to show motion
MIN_FRAMES = 2


class FrameValidatorMetrics:
    """Counters for FrameValidator observability."""

    __slots__ = (
        "parts_seen",
        "frames_accepted",
        "text_parts",
        "malformed_parts",
    )

    def __init__(self) -> None:
        self.parts_seen: int = 0
        self.frames_accepted: int = 0
        self.text_parts: int = 0
        self.malformed_parts: int = 0

    def to_dict(self) -> dict:
        """Export metrics as dict."""
        return {
            "parts_seen": self.parts_seen,
            "frames_accepted": self.frames_accepted,
            "text_parts": self.text_parts,
            "malformed_parts": self.malformed_parts,
        }


@dataclass(frozen=True)
class ValidationResult:
    """
    Outcome of validating one response.

    Attributes:
        frames: Accepted frames in response order
        rejected: Number of parts that were skipped
    """

    frames: List[ValidatedFrame] = field(default_factory=list)
    rejected: int = 0

    @property
    def count(self) -> int:
        """Number of accepted frames."""
        return len(self.frames)

    def require(self, min_frames: int = MIN_FRAMES) -> List[ValidatedFrame]:
        """
        Return the frames, or fail if there are too few to animate.

        Raises:
            InsufficientFrames: If fewer than min_frames were accepted
        """
        if self.count < min_frames:
            raise InsufficientFrames(self.count, min_frames)
        return self.frames


def is_image_part(part: RawPart) -> bool:
    """Whether a part carries non-empty image data."""
    return (
        isinstance(part, ImagePart)
        and bool(part.data)
        and bool(part.mime_type)
        and part.mime_type.startswith("image/")
    )


class FrameValidator:
    """
    Validates model response parts into numbered frames.

    Example:
        validator = FrameValidator()
        result = validator.validate(parts)
        frames = result.require()
    """

    def __init__(self) -> None:
        self.metrics = FrameValidatorMetrics()

    def validate(self, parts: Sequence[RawPart]) -> ValidationResult:
        """
        Keep the image parts of a response, in order.

        Args:
            parts: Parts as returned by the remote model

        Returns:
            ValidationResult with accepted frames and the rejected count
        """
        frames: List[ValidatedFrame] = []
        rejected = 0

        for position, part in enumerate(parts, start=1):
            self.metrics.parts_seen += 1

            if is_image_part(part):
                frames.append(
                    ValidatedFrame(
                        index=len(frames) + 1,
                        data=part.data,
                        mime_type=part.mime_type,
                    )
                )
                self.metrics.frames_accepted += 1
                continue

            rejected += 1
            if isinstance(part, TextPart):
                self.metrics.text_parts += 1
                logger.info(f"Received text part {position}: {part.text[:80]!r}")
            else:
                self.metrics.malformed_parts += 1
                logger.warning(f"Skipping malformed part {position}: {part!r}")

        logger.info(
            f"Validated {len(frames)} frame(s) from {len(parts)} part(s), "
            f"{rejected} skipped"
        )
        return ValidationResult(frames=frames, rejected=rejected)
