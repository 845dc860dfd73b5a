"""
Pipeline Module
===============

Orchestration of the frame-to-animation assembly pipeline.

Example:
    from doodle_animator.pipeline import AnimationBuilder

    builder = AnimationBuilder(color_format="rgb444")
    asset = await builder.build(parts, frame_rate_hz=4, width=1024, height=1024)
"""

from doodle_animator.pipeline.builder import (
    DEFAULT_FRAME_RATE_HZ,
    DEFAULT_SIZE,
    AnimationBuilder,
    build_animation,
)


__all__ = [
    "DEFAULT_FRAME_RATE_HZ",
    "DEFAULT_SIZE",
    "AnimationBuilder",
    "build_animation",
]
