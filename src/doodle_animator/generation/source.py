"""
Frame Sources
=============

Abstraction over "something that turns a prompt into response parts".

Design Rules:
    - Sources return parts exactly as produced (no filtering, no reordering)
    - Validation is left to FrameValidator
    - No retries; a failed call raises GenerationError
"""

import logging
from typing import List, Optional, Protocol, Sequence

from doodle_animator.generation.reference import ReferenceImage
from doodle_animator.models.parts import RawPart


logger = logging.getLogger(__name__)


class FrameSource(Protocol):
    """
    Protocol for frame generation backends.

    Implemented by:
        - StaticFrameSource (tests, offline runs)
        - GeminiFrameSource (production)
    """

    async def generate(
        self,
        prompt: str,
        reference: Optional[ReferenceImage] = None,
    ) -> List[RawPart]:
        """
        Produce response parts for a prompt.

        Args:
            prompt: User prompt text
            reference: Optional reference image

        Returns:
            Parts in model order
        """
        ...

    def get_metrics(self) -> dict:
        """Call and error counters for observability."""
        ...


class StaticFrameSource:
    """
    Returns the same parts for every prompt.

    Records the prompts it was called with so tests can inspect them.
    """

    def __init__(self, parts: Sequence[RawPart]) -> None:
        self.parts = list(parts)
        self.calls: List[str] = []

        logger.info(f"StaticFrameSource initialized with {len(self.parts)} part(s)")

    async def generate(
        self,
        prompt: str,
        reference: Optional[ReferenceImage] = None,
    ) -> List[RawPart]:
        self.calls.append(prompt)
        return list(self.parts)

    def get_metrics(self) -> dict:
        return {"call_count": len(self.calls)}
