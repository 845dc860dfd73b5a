"""
Doodle Animator
===============

Turns a multimodal model's doodle frames into a looping GIF animation.

A text prompt (and optionally a reference image) is sent to an image model,
which answers with a sequence of image parts. The assembly pipeline then:

    - Validates the parts down to usable image frames
    - Rasterizes each frame onto a white fixed-size canvas
    - Quantizes each frame to its own palette of at most 256 colors
    - Encodes the frames into an infinitely looping GIF

Components:
    - frames: Validation, decoding and rasterization
    - encoding: Palette quantization and GIF encoding
    - pipeline: AnimationBuilder orchestration
    - generation: Prompting and frame sources (Gemini)

Example:
    from doodle_animator.pipeline import AnimationBuilder

    asset = await AnimationBuilder().build(parts, frame_rate_hz=4)

    # The HTTP service is started via main.py
"""

__version__ = "0.1.0"

__all__ = [
    "__version__",
]
