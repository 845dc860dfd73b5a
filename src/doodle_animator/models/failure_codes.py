"""
Failure Codes
=============

Fixed set of machine-readable codes for failed animation builds.

Each error raised by the pipeline carries exactly ONE failure code so that
the HTTP layer and the UI can react without parsing message text.

Rules:
    - No free-text classification
    - One clear cause per code
"""

from enum import Enum


class FailureCode(str, Enum):
    """
    Machine-readable failure classification.

    Attributes:
        INSUFFICIENT_FRAMES: Fewer than the minimum usable frames returned
        INVALID_DIMENSIONS: Non-positive canvas size requested
        FRAME_PROCESSING_FAILED: A frame failed for an unclassified reason
        DECODE_FAILED: A frame's image payload could not be decoded
        PIXEL_EXTRACTION_FAILED: A decoded frame produced no pixel data
        ALREADY_FINALIZED: Encoder used after finalization
        GENERATION_FAILED: The remote generation call failed
        INVALID_REFERENCE_IMAGE: Reference image rejected at intake
    """

    # Response-level
    INSUFFICIENT_FRAMES = "INSUFFICIENT_FRAMES"
    INVALID_DIMENSIONS = "INVALID_DIMENSIONS"

    # Frame-level
    FRAME_PROCESSING_FAILED = "FRAME_PROCESSING_FAILED"
    DECODE_FAILED = "DECODE_FAILED"
    PIXEL_EXTRACTION_FAILED = "PIXEL_EXTRACTION_FAILED"

    # Programming errors
    ALREADY_FINALIZED = "ALREADY_FINALIZED"

    # Boundary
    GENERATION_FAILED = "GENERATION_FAILED"
    INVALID_REFERENCE_IMAGE = "INVALID_REFERENCE_IMAGE"
