"""
Encoding Module
===============

Color quantization and GIF encoding.

This module provides:
    - Palette, PaletteQuantizer: Per-frame palettes and indexed pixels
    - AnimationStream: Append-only GIF encoder
    - AnimationAsset: Finished animation as a data: URL
"""

from doodle_animator.encoding.palette import (
    COLOR_FORMATS,
    MAX_PALETTE_SIZE,
    Palette,
    PaletteQuantizer,
    apply_palette,
    build_palette,
    quantize,
)
from doodle_animator.encoding.stream import (
    MIN_DELAY_MS,
    AnimationStream,
    IndexedFrame,
    frame_delay_ms,
    to_centiseconds,
)
from doodle_animator.encoding.asset import (
    AnimationAsset,
    download_name,
    sniff_media_type,
)


__all__ = [
    "COLOR_FORMATS",
    "MAX_PALETTE_SIZE",
    "Palette",
    "PaletteQuantizer",
    "apply_palette",
    "build_palette",
    "quantize",
    "MIN_DELAY_MS",
    "AnimationStream",
    "IndexedFrame",
    "frame_delay_ms",
    "to_centiseconds",
    "AnimationAsset",
    "download_name",
    "sniff_media_type",
]
