"""
Pipeline Errors
===============

Exception taxonomy for the animation assembly pipeline.

Every error carries a FailureCode. Frame-level errors also carry the
1-based index of the frame that failed.

Propagation Rules:
    - Frame-level errors abort the whole build (no partial GIFs)
    - Nothing in the pipeline retries
    - AnimationBuilder is the single place that classifies errors
"""

from typing import Optional

from doodle_animator.error_text import parse_error_message
from doodle_animator.models.failure_codes import FailureCode


class AnimationError(Exception):
    """Base class for all pipeline errors."""

    code: FailureCode = FailureCode.FRAME_PROCESSING_FAILED

    @property
    def frame_index(self) -> Optional[int]:
        """Frame the error refers to, if any."""
        return None


class InsufficientFrames(AnimationError):
    """Raised when the remote response holds too few usable frames."""

    code = FailureCode.INSUFFICIENT_FRAMES

    def __init__(self, count: int, required: int = 2) -> None:
        self.count = count
        self.required = required
        super().__init__(
            f"Failed to generate enough frames (got {count}, need at least {required})"
        )


class InvalidDimensions(AnimationError):
    """Raised when a non-positive canvas size is requested."""

    code = FailureCode.INVALID_DIMENSIONS

    def __init__(self, width: int, height: int) -> None:
        self.width = width
        self.height = height
        super().__init__(f"Invalid target dimensions: {width}x{height}")


class FrameProcessingError(AnimationError):
    """Raised when a single frame cannot be turned into a GIF frame."""

    code = FailureCode.FRAME_PROCESSING_FAILED

    def __init__(self, frame_index: int, detail: str) -> None:
        self._frame_index = frame_index
        self.detail = detail
        super().__init__(f"Error creating GIF at frame {frame_index}: {detail}")

    @property
    def frame_index(self) -> Optional[int]:
        return self._frame_index


class DecodeError(FrameProcessingError):
    """Raised when a frame's image payload cannot be decoded."""

    code = FailureCode.DECODE_FAILED


class PixelExtractionError(FrameProcessingError):
    """Raised when a decoded frame yields no pixel data."""

    code = FailureCode.PIXEL_EXTRACTION_FAILED


class AlreadyFinalized(AnimationError):
    """Raised when an AnimationStream is used after finalize()."""

    code = FailureCode.ALREADY_FINALIZED


class GenerationError(AnimationError):
    """Raised when the remote frame generation call fails."""

    code = FailureCode.GENERATION_FAILED


class InvalidReferenceImage(AnimationError):
    """Raised when a reference image is rejected before generation."""

    code = FailureCode.INVALID_REFERENCE_IMAGE


def describe_failure(error: BaseException) -> str:
    """
    Build the single human-readable status line for a failed build.

    Args:
        error: Exception raised by the pipeline or a collaborator

    Returns:
        Status message naming what failed and, where known, which frame
    """
    if isinstance(error, InsufficientFrames):
        return (
            f"Failed to generate enough frames (got {error.count}). "
            "Try adjusting prompt or image."
        )
    if isinstance(error, FrameProcessingError):
        return f"Error generating animation at frame {error.frame_index}: {error.detail}"
    return f"Error generating animation: {parse_error_message(str(error))}"
