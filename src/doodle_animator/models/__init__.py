"""
Data Models
===========

Models shared across the doodle animator.

Models:
    Parts:
        - ImagePart, TextPart, RawPart: Parts returned by the remote model

    Input:
        - PartMessage: Wire form of a part
        - AnimateRequest: Assemble from caller-provided parts
        - GenerateRequest: Generate frames, then assemble

    Output:
        - AnimationResponse: Successful build
        - ErrorResponse: Failed build

    Codes:
        - FailureCode: Machine-readable failure classification
"""

from doodle_animator.models.failure_codes import FailureCode
from doodle_animator.models.parts import ImagePart, RawPart, TextPart
from doodle_animator.models.input import (
    AnimateRequest,
    GenerateRequest,
    PartMessage,
    ReferenceImageMessage,
)
from doodle_animator.models.output import AnimationResponse, ErrorResponse

__all__ = [
    # Codes
    "FailureCode",
    # Parts
    "ImagePart",
    "TextPart",
    "RawPart",
    # Input
    "PartMessage",
    "ReferenceImageMessage",
    "AnimateRequest",
    "GenerateRequest",
    # Output
    "AnimationResponse",
    "ErrorResponse",
]
