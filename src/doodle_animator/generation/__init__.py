"""
Generation Module
=================

Everything on the "prompt in, parts out" side of the pipeline.

Components:
    - FrameSource: Protocol for generation backends
    - StaticFrameSource: Fixed parts, for tests and offline runs
    - GeminiFrameSource: Gemini image model (production)
    - ReferenceImage: Checked reference image upload
    - build_generation_prompt / build_system_instruction: Prompt templates

The generation backend is a black box: the assembly pipeline consumes only
the parts it returns.
"""

from doodle_animator.generation.prompts import (
    build_generation_prompt,
    build_system_instruction,
)
from doodle_animator.generation.reference import ReferenceImage
from doodle_animator.generation.source import FrameSource, StaticFrameSource

# Gemini source imported separately to avoid a mandatory SDK dependency
try:
    from doodle_animator.generation.client import GeminiFrameSource
    _GENAI_AVAILABLE = True
except ImportError:
    _GENAI_AVAILABLE = False
    GeminiFrameSource = None  # type: ignore

__all__ = [
    "build_generation_prompt",
    "build_system_instruction",
    "ReferenceImage",
    "FrameSource",
    "StaticFrameSource",
    "GeminiFrameSource",
    "_GENAI_AVAILABLE",
]
