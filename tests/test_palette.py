"""
Palette Quantizer Tests
=======================

Tests for palette size limits, exactness and determinism.
"""

import time

import numpy as np
import pytest


def _pixels(rgb: np.ndarray):
    from doodle_animator.frames.canvas import PixelBuffer

    height, width = rgb.shape[:2]
    alpha = np.full((height, width, 1), 255, dtype=np.uint8)
    return PixelBuffer(width=width, height=height, data=np.concatenate([rgb, alpha], axis=2))


def _gradient(size: int = 64) -> np.ndarray:
    """An image with far more than 256 color bins."""
    y, x = np.mgrid[0:size, 0:size]
    rgb = np.stack([x * 4, y * 4, (x + y) * 2], axis=2)
    return rgb.astype(np.uint8)


class TestBuildPalette:
    """Tests for build_palette()."""

    def test_few_colors_are_exact(self):
        """Verify a frame with few colors keeps them exactly."""
        from doodle_animator.encoding.palette import build_palette

        rgb = np.zeros((4, 4, 3), dtype=np.uint8)
        rgb[:2] = (200, 30, 60)
        rgb[2:] = (255, 255, 255)

        palette = build_palette(_pixels(rgb))

        colors = {tuple(int(v) for v in c) for c in palette.colors}
        assert colors == {(200, 30, 60), (255, 255, 255)}

    def test_many_colors_capped(self):
        """Verify palettes never exceed max_colors."""
        from doodle_animator.encoding.palette import build_palette

        palette = build_palette(_pixels(_gradient()))
        assert 1 <= len(palette) <= 256

    def test_small_max_colors(self):
        """Verify merging reaches a small target exactly."""
        from doodle_animator.encoding.palette import build_palette

        palette = build_palette(_pixels(_gradient(16)), max_colors=8)
        assert len(palette) == 8

    def test_rgb565_format(self):
        """Verify the finer binning format works too."""
        from doodle_animator.encoding.palette import build_palette

        palette = build_palette(_pixels(_gradient(32)), color_format="rgb565")
        assert len(palette) <= 256

    def test_rgb565_noisy_frame_is_fast(self):
        """Verify a frame filling thousands of rgb565 bins quantizes quickly."""
        from doodle_animator.encoding.palette import quantize

        rgb = np.random.default_rng(7).integers(0, 256, size=(128, 128, 3), dtype=np.uint8)

        started = time.perf_counter()
        palette, indices = quantize(_pixels(rgb), color_format="rgb565")
        elapsed = time.perf_counter() - started

        assert len(palette) == 256
        assert int(indices.max()) < len(palette)
        assert elapsed < 10.0

    def test_merge_reaches_target(self):
        """Verify a long merge run ends at exactly max_colors."""
        from doodle_animator.encoding.palette import build_palette

        rgb = np.random.default_rng(3).integers(0, 256, size=(64, 64, 3), dtype=np.uint8)

        palette = build_palette(_pixels(rgb), max_colors=16)
        assert len(palette) == 16

    def test_unknown_format_rejected(self):
        """Verify unknown binning formats raise ValueError."""
        from doodle_animator.encoding.palette import build_palette

        with pytest.raises(ValueError):
            build_palette(_pixels(_gradient(4)), color_format="rgb888")

    @pytest.mark.parametrize("max_colors", [0, 1, 257])
    def test_max_colors_range(self, max_colors):
        """Verify max_colors must be within 2..256."""
        from doodle_animator.encoding.palette import PaletteQuantizer

        with pytest.raises(ValueError):
            PaletteQuantizer(max_colors=max_colors)


class TestFoldBins:
    """Tests for folding fine bins onto the rgb444 grid."""

    def test_fold_preserves_weight(self):
        """Verify folding keeps total pixel count and caps the bin count."""
        from doodle_animator.encoding.palette import _fold_bins, _histogram

        rgb = np.random.default_rng(11).integers(0, 256, size=(20000, 3), dtype=np.uint8)
        _, occupied, counts, means = _histogram(rgb, "rgb565")

        weights, centers = _fold_bins(counts, means)

        assert len(weights) <= 4096
        assert len(weights) < len(occupied)
        assert weights.sum() == counts.sum()
        assert centers.shape == (len(weights), 3)

    def test_fold_matches_coarse_histogram(self):
        """Verify folded centers equal the rgb444 pixel means."""
        from doodle_animator.encoding.palette import _fold_bins, _histogram

        rgb = np.random.default_rng(5).integers(0, 256, size=(5000, 3), dtype=np.uint8)
        _, _, counts, means = _histogram(rgb, "rgb565")
        _, _, coarse_counts, coarse_means = _histogram(rgb, "rgb444")

        weights, centers = _fold_bins(counts, means)

        assert np.array_equal(weights, coarse_counts)
        assert np.allclose(centers, coarse_means)


class TestQuantize:
    """Tests for PaletteQuantizer.quantize()."""

    def test_indices_shape_and_range(self):
        """Verify one in-range index per pixel."""
        from doodle_animator.encoding.palette import quantize

        palette, indices = quantize(_pixels(_gradient()))

        assert indices.shape == (64, 64)
        assert indices.dtype == np.uint8
        assert int(indices.max()) < len(palette)

    def test_exact_colors_roundtrip(self):
        """Verify few-color frames are reproduced exactly through the palette."""
        from doodle_animator.encoding.palette import quantize

        rgb = np.zeros((6, 6, 3), dtype=np.uint8)
        rgb[:, :3] = (0, 0, 0)
        rgb[:, 3:] = (240, 200, 30)

        palette, indices = quantize(_pixels(rgb))

        assert np.array_equal(palette.colors[indices], rgb)

    def test_deterministic(self):
        """Verify identical input gives byte-identical output."""
        from doodle_animator.encoding.palette import quantize

        first_palette, first_indices = quantize(_pixels(_gradient()))
        second_palette, second_indices = quantize(_pixels(_gradient()))

        assert first_palette.to_bytes() == second_palette.to_bytes()
        assert np.array_equal(first_indices, second_indices)

    def test_error_is_bounded(self):
        """Verify merged palettes stay close to the source colors."""
        from doodle_animator.encoding.palette import quantize

        rgb = _gradient()
        palette, indices = quantize(_pixels(rgb))

        error = np.abs(palette.colors[indices].astype(int) - rgb.astype(int))
        assert error.mean() < 12


class TestPalette:
    """Tests for the Palette container."""

    def test_to_bytes(self):
        """Verify flat RGB triplets."""
        from doodle_animator.encoding.palette import Palette

        palette = Palette(colors=np.array([[1, 2, 3], [4, 5, 6]], dtype=np.uint8))
        assert palette.to_bytes() == bytes([1, 2, 3, 4, 5, 6])
        assert len(palette) == 2

    def test_rejects_oversized(self):
        """Verify at most 256 entries."""
        from doodle_animator.encoding.palette import Palette

        with pytest.raises(ValueError):
            Palette(colors=np.zeros((257, 3), dtype=np.uint8))
