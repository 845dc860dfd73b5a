#!/usr/bin/env python3
"""
Build a GIF From Image Files
============================

Standalone script that runs the assembly pipeline on frames stored on disk,
without calling the image model.

This script:
    1. Reads the given image files in command-line order
    2. Feeds them through AnimationBuilder as image parts
    3. Writes the looping GIF to --output
    4. Reports a short summary

Usage:
    python scripts/build_from_images.py frames/*.png --output cat.gif
    python scripts/build_from_images.py a.png b.png c.png --fps 8 --size 512
"""

import argparse
import asyncio
import logging
import mimetypes
import os
import sys
from pathlib import Path
from typing import List

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from doodle_animator.errors import AnimationError, describe_failure
from doodle_animator.models.parts import ImagePart, RawPart
from doodle_animator.pipeline import AnimationBuilder


# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%S",
)
logger = logging.getLogger(__name__)


def load_parts(paths: List[str]) -> List[RawPart]:
    """Read image files as parts, guessing media types from extensions."""
    parts: List[RawPart] = []
    for path in paths:
        mime_type, _ = mimetypes.guess_type(path)
        parts.append(ImagePart(mime_type=mime_type or "", data=Path(path).read_bytes()))
        logger.info(f"Loaded {path} ({mime_type or 'unknown type'})")
    return parts


async def run_build(
    paths: List[str],
    output: str,
    fps: float,
    size: int,
    skip_bad_frames: bool,
) -> bool:
    """
    Build the animation and write it to disk.

    Returns:
        True on success
    """
    logger.info("=" * 60)
    logger.info(f"Frames: {len(paths)}")
    logger.info(f"Frame rate: {fps} Hz")
    logger.info(f"Canvas: {size}x{size}")
    logger.info(f"Output: {output}")
    logger.info("=" * 60)

    builder = AnimationBuilder(skip_bad_frames=skip_bad_frames)
    try:
        asset = await builder.build(load_parts(paths), frame_rate_hz=fps, width=size, height=size)
    except AnimationError as e:
        logger.error(f"❌ {describe_failure(e)}")
        return False

    Path(output).write_bytes(asset.data)

    logger.info("=" * 60)
    logger.info(f"✅ Wrote {output}")
    logger.info(f"  Frames: {asset.frame_count}")
    logger.info(f"  Delay: {asset.delay_ms} ms")
    logger.info(f"  Size: {asset.size} bytes")
    logger.info("=" * 60)
    return True


def main():
    parser = argparse.ArgumentParser(
        description="Assemble a looping GIF from image files"
    )
    parser.add_argument(
        "images",
        nargs="+",
        help="Frame images, in playback order",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="animation.gif",
        help="Output GIF path (default: animation.gif)",
    )
    parser.add_argument(
        "--fps",
        type=float,
        default=4.0,
        help="Frames per second (default: 4)",
    )
    parser.add_argument(
        "--size",
        type=int,
        default=1024,
        help="Square canvas size in pixels (default: 1024)",
    )
    parser.add_argument(
        "--skip-bad-frames",
        action="store_true",
        help="Drop frames that fail to decode instead of aborting",
    )

    args = parser.parse_args()
    if args.fps <= 0:
        parser.error("--fps must be positive")

    ok = asyncio.run(run_build(
        paths=args.images,
        output=args.output,
        fps=args.fps,
        size=args.size,
        skip_bad_frames=args.skip_bad_frames,
    ))

    sys.exit(0 if ok else 1)


if __name__ == "__main__":
    main()
