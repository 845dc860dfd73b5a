"""
Gemini Frame Source
===================

Production frame source using the Gemini image model via google-genai.

This source:
    - Builds the doodle prompt and system instruction
    - Sends an optional reference image before the text part
    - Requests IMAGE + TEXT response modalities
    - Returns the first candidate's parts as RawParts, unfiltered

Design Rules:
    - Fail fast on misconfiguration (missing API key)
    - One call per request, no retries
    - Log all API calls
"""

import logging
from typing import List, Optional

from google import genai
from google.genai import types

from doodle_animator.errors import GenerationError
from doodle_animator.generation.prompts import (
    build_generation_prompt,
    build_system_instruction,
)
from doodle_animator.generation.reference import ReferenceImage
from doodle_animator.models.parts import ImagePart, RawPart, TextPart


logger = logging.getLogger(__name__)


class GeminiFrameSource:
    """
    Generates animation frames with a Gemini image model.

    Attributes:
        model: Model name
        temperature: Sampling temperature
    """

    def __init__(
        self,
        api_key: Optional[str],
        model: str = "gemini-2.0-flash-preview-image-generation",
        temperature: float = 0.8,
    ) -> None:
        """
        Initialize the Gemini client.

        Raises:
            GenerationError: If no API key is configured
        """
        if not api_key:
            raise GenerationError(
                "API_KEY environment variable not set. "
                "Set API_KEY or GEMINI_API_KEY to enable generation."
            )

        self.model = model
        self.temperature = temperature
        self._client = genai.Client(api_key=api_key)
        self._call_count: int = 0
        self._error_count: int = 0

        logger.info(f"GeminiFrameSource initialized: model={model}, temperature={temperature}")

    async def generate(
        self,
        prompt: str,
        reference: Optional[ReferenceImage] = None,
    ) -> List[RawPart]:
        """
        Ask the model for doodle frames.

        Args:
            prompt: User prompt text
            reference: Optional reference image

        Returns:
            Parts of the first candidate, in model order

        Raises:
            GenerationError: If the API call fails
        """
        contents: List[types.Part] = []
        if reference is not None:
            contents.append(
                types.Part.from_bytes(data=reference.data, mime_type=reference.mime_type)
            )
        contents.append(
            types.Part.from_text(
                text=build_generation_prompt(prompt, has_reference=reference is not None)
            )
        )

        logger.info(
            f"Gemini request: model={self.model}, "
            f"reference={'yes' if reference else 'no'}"
        )

        try:
            response = await self._client.aio.models.generate_content(
                model=self.model,
                contents=[types.Content(role="user", parts=contents)],
                config=types.GenerateContentConfig(
                    system_instruction=build_system_instruction(),
                    temperature=self.temperature,
                    response_modalities=["IMAGE", "TEXT"],
                ),
            )
        except Exception as e:
            self._error_count += 1
            logger.error(f"Gemini API error: {e}. Total errors: {self._error_count}")
            raise GenerationError(str(e)) from e

        self._call_count += 1
        parts = _response_parts(response)
        logger.info(f"Gemini response: {len(parts)} part(s)")
        return parts

    def get_metrics(self) -> dict:
        """Get source metrics for observability."""
        return {
            "call_count": self._call_count,
            "error_count": self._error_count,
            "model": self.model,
        }


def _response_parts(response) -> List[RawPart]:
    """Convert the first candidate's SDK parts to RawParts."""
    candidates = getattr(response, "candidates", None) or []
    if not candidates or candidates[0].content is None:
        return []

    parts: List[RawPart] = []
    for part in candidates[0].content.parts or []:
        inline = part.inline_data
        if inline is not None and inline.data:
            parts.append(ImagePart(mime_type=inline.mime_type or "", data=inline.data))
        elif part.text:
            parts.append(TextPart(text=part.text))
    return parts
