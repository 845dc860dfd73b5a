"""
Palette Quantizer
=================

Reduces an RGBA frame to at most 256 colors and an index per pixel.

Algorithm:
    1. Histogram: every pixel is binned by a reduced-precision key
       (rgb444 = 4096 bins, rgb565 = 65536 bins). Each occupied bin keeps
       its pixel count and mean color.
    2. Palette: if no more than max_colors bins are occupied, the bin means
       ARE the palette. Otherwise bins are merged by pairwise nearest
       neighbor (PNN) clustering, always merging the pair with the lowest
       cost

           cost(i, j) = n_i * n_j / (n_i + n_j) * |c_i - c_j|^2

       until max_colors clusters remain. At most 4096 bins enter PNN:
       larger histograms (rgb565) are first folded into their rgb444
       cells, weighted by pixel count.
    3. Indexing: each occupied bin is mapped to the palette entry nearest
       to its mean color; pixels take their bin's entry. No dithering.

Determinism:
    No sampling or randomness. Bins are visited in key order and argmin
    ties resolve to the lowest index, so identical pixels always give
    byte-identical palettes and indices.

Alpha is ignored: frames arrive composited over opaque white.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Tuple

import numpy as np

from doodle_animator.frames.canvas import PixelBuffer


logger = logging.getLogger(__name__)


MAX_PALETTE_SIZE = 256

# Bits kept per channel (r, g, b)
COLOR_FORMATS: Dict[str, Tuple[int, int, int]] = {
    "rgb444": (4, 4, 4),
    "rgb565": (5, 6, 5),
}

# Upper bound on cells per distance block when seeding nearest neighbors
_BLOCK_CELLS = 4_000_000

# Bins allowed into PNN; larger histograms are folded to this grid first
_MERGE_FORMAT = "rgb444"
_MAX_MERGE_BINS = 1 << sum(COLOR_FORMATS[_MERGE_FORMAT])


@dataclass(frozen=True, slots=True)
class Palette:
    """
    Ordered color table for one frame.

    Attributes:
        colors: np.ndarray (n, 3), dtype=uint8, 1 <= n <= 256
    """

    colors: np.ndarray

    def __post_init__(self) -> None:
        if self.colors.ndim != 2 or self.colors.shape[1] != 3:
            raise ValueError(f"palette must be (n, 3), got {self.colors.shape}")
        if not 1 <= len(self.colors) <= MAX_PALETTE_SIZE:
            raise ValueError(f"palette size must be 1..256, got {len(self.colors)}")

    def __len__(self) -> int:
        return len(self.colors)

    def __repr__(self) -> str:
        return f"Palette(size={len(self)})"

    def to_bytes(self) -> bytes:
        """Flat RGB triplets, as used by GIF color tables."""
        return self.colors.astype(np.uint8).tobytes()


def _check_format(color_format: str) -> Tuple[int, int, int]:
    try:
        return COLOR_FORMATS[color_format]
    except KeyError:
        raise ValueError(
            f"Unknown color format {color_format!r}, "
            f"expected one of {sorted(COLOR_FORMATS)}"
        )


def _rgb_samples(pixels: PixelBuffer) -> np.ndarray:
    """Flatten to (N, 3) uint8 RGB."""
    return pixels.data[..., :3].reshape(-1, 3)


def _bin_keys(rgb: np.ndarray, color_format: str) -> np.ndarray:
    """Reduced-precision key per pixel."""
    r_bits, g_bits, b_bits = _check_format(color_format)
    samples = rgb.astype(np.uint32)
    r = samples[:, 0] >> (8 - r_bits)
    g = samples[:, 1] >> (8 - g_bits)
    b = samples[:, 2] >> (8 - b_bits)
    return (r << (g_bits + b_bits)) | (g << b_bits) | b


def _histogram(
    rgb: np.ndarray,
    color_format: str,
) -> Tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
    """
    Bin pixels.

    Returns:
        keys: Bin key per pixel
        occupied: Sorted keys of non-empty bins
        counts: Pixel count per occupied bin
        means: Mean RGB per occupied bin, (n, 3) float64
    """
    r_bits, g_bits, b_bits = _check_format(color_format)
    n_bins = 1 << (r_bits + g_bits + b_bits)

    keys = _bin_keys(rgb, color_format)
    all_counts = np.bincount(keys, minlength=n_bins)
    occupied = np.flatnonzero(all_counts)
    counts = all_counts[occupied].astype(np.float64)

    means = np.empty((len(occupied), 3), dtype=np.float64)
    for channel in range(3):
        sums = np.bincount(keys, weights=rgb[:, channel], minlength=n_bins)
        means[:, channel] = sums[occupied] / counts

    return keys, occupied, counts, means


def _fold_bins(
    counts: np.ndarray,
    means: np.ndarray,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Merge bins that share an rgb444 cell.

    Returns:
        (weights, centers) of the folded bins, in cell key order
    """
    cells = _bin_keys(np.floor(means).astype(np.uint8), _MERGE_FORMAT)
    folded, inverse = np.unique(cells, return_inverse=True)
    inverse = inverse.reshape(-1)

    weights = np.bincount(inverse, weights=counts)
    centers = np.empty((len(folded), 3), dtype=np.float64)
    for channel in range(3):
        centers[:, channel] = np.bincount(inverse, weights=counts * means[:, channel]) / weights

    return weights, centers


def _seed_neighbors(
    weights: np.ndarray,
    centers: np.ndarray,
) -> Tuple[np.ndarray, np.ndarray]:
    """Nearest neighbor and merge cost for every bin, computed in blocks."""
    n = len(weights)
    nn = np.zeros(n, dtype=np.int64)
    err = np.full(n, np.inf)
    squares = np.einsum("ij,ij->i", centers, centers)
    block = max(1, _BLOCK_CELLS // n)

    for start in range(0, n, block):
        stop = min(start + block, n)
        rows = np.arange(stop - start)
        dist = (
            squares[start:stop, None]
            + squares[None, :]
            - 2.0 * centers[start:stop] @ centers.T
        )
        np.maximum(dist, 0.0, out=dist)
        w_rows = weights[start:stop, None]
        cost = w_rows * weights[None, :] / (w_rows + weights[None, :]) * dist
        cost[rows, rows + start] = np.inf

        best = np.argmin(cost, axis=1)
        nn[start:stop] = best
        err[start:stop] = cost[rows, best]

    return nn, err


def _pairwise_nearest(
    weights: np.ndarray,
    centers: np.ndarray,
    max_colors: int,
) -> np.ndarray:
    """
    Merge bins until max_colors clusters remain.

    Args:
        weights: Pixel count per bin
        centers: Mean color per bin, (n, 3)
        max_colors: Target cluster count

    Returns:
        Cluster centers, (max_colors, 3) float64, in bin order
    """
    w = weights.astype(np.float64).copy()
    c = centers.astype(np.float64).copy()
    active = np.ones(len(w), dtype=bool)

    def nearest(i: int) -> Tuple[int, float]:
        delta = c - c[i]
        cost = w[i] * w / (w[i] + w) * np.einsum("ij,ij->i", delta, delta)
        cost[~active] = np.inf
        cost[i] = np.inf
        j = int(np.argmin(cost))
        return j, float(cost[j])

    nn, err = _seed_neighbors(w, c)

    remaining = len(w)
    while remaining > max_colors:
        if remaining <= len(w) // 2:
            # Compact: drop merged-away slots, keeping bin order
            kept = np.flatnonzero(active)
            position = np.full(len(w), -1, dtype=np.int64)
            position[kept] = np.arange(len(kept))
            w, c, err = w[kept], c[kept], err[kept]
            nn = position[nn[kept]]
            active = np.ones(len(kept), dtype=bool)

        i = int(np.argmin(err))
        j = int(nn[i])
        keep, drop = (i, j) if i < j else (j, i)

        total = w[keep] + w[drop]
        c[keep] = (c[keep] * w[keep] + c[drop] * w[drop]) / total
        w[keep] = total
        active[drop] = False
        err[drop] = np.inf
        remaining -= 1

        stale = np.flatnonzero(active & ((nn == keep) | (nn == drop)))
        for k in np.union1d(stale, [keep]):
            nn[k], err[k] = nearest(int(k))

    return c[active]


def build_palette(
    pixels: PixelBuffer,
    max_colors: int = MAX_PALETTE_SIZE,
    color_format: str = "rgb444",
) -> Palette:
    """
    Derive a palette of at most max_colors colors for one frame.

    Args:
        pixels: RGBA pixels of the frame
        max_colors: Palette size limit, 2..256
        color_format: Binning precision ("rgb444" or "rgb565")

    Returns:
        Palette ordered by bin key
    """
    if not 2 <= max_colors <= MAX_PALETTE_SIZE:
        raise ValueError(f"max_colors must be in 2..256, got {max_colors}")

    _, occupied, counts, means = _histogram(_rgb_samples(pixels), color_format)

    weights, centers = counts, means
    if len(weights) > max_colors and len(weights) > _MAX_MERGE_BINS:
        weights, centers = _fold_bins(weights, centers)
        logger.debug(f"Folded {len(occupied)} color bins into {len(weights)} cells")

    if len(weights) > max_colors:
        logger.debug(f"Merging {len(weights)} color bins down to {max_colors}")
        centers = _pairwise_nearest(weights, centers, max_colors)

    colors = np.clip(np.rint(centers), 0, 255).astype(np.uint8)
    return Palette(colors=colors)


def apply_palette(
    pixels: PixelBuffer,
    palette: Palette,
    color_format: str = "rgb444",
) -> np.ndarray:
    """
    Map every pixel to its nearest palette entry.

    Returns:
        Indices, np.ndarray (height, width), dtype=uint8
    """
    rgb = _rgb_samples(pixels)
    keys, occupied, _, means = _histogram(rgb, color_format)

    table = palette.colors.astype(np.float64)
    dist = (
        np.einsum("ij,ij->i", means, means)[:, None]
        + np.einsum("ij,ij->i", table, table)[None, :]
        - 2.0 * means @ table.T
    )
    nearest = np.argmin(dist, axis=1).astype(np.uint8)

    lookup = np.zeros(int(keys.max()) + 1 if keys.size else 1, dtype=np.uint8)
    lookup[occupied] = nearest
    return lookup[keys].reshape(pixels.height, pixels.width)


class PaletteQuantizer:
    """
    Quantizes frames to a per-frame palette plus indices.

    Attributes:
        max_colors: Palette size limit
        color_format: Binning precision

    Example:
        quantizer = PaletteQuantizer(max_colors=256, color_format="rgb444")
        palette, indices = quantizer.quantize(pixels)
    """

    def __init__(
        self,
        max_colors: int = MAX_PALETTE_SIZE,
        color_format: str = "rgb444",
    ) -> None:
        if not 2 <= max_colors <= MAX_PALETTE_SIZE:
            raise ValueError(f"max_colors must be in 2..256, got {max_colors}")
        _check_format(color_format)

        self.max_colors = max_colors
        self.color_format = color_format

    def quantize(self, pixels: PixelBuffer) -> Tuple[Palette, np.ndarray]:
        """
        Quantize one frame.

        Args:
            pixels: RGBA pixels

        Returns:
            (palette, indices) where indices is (height, width) uint8
        """
        palette = build_palette(pixels, self.max_colors, self.color_format)
        indices = apply_palette(pixels, palette, self.color_format)
        return palette, indices


def quantize(
    pixels: PixelBuffer,
    max_colors: int = MAX_PALETTE_SIZE,
    color_format: str = "rgb444",
) -> Tuple[Palette, np.ndarray]:
    """Quantize one frame with a throwaway PaletteQuantizer."""
    return PaletteQuantizer(max_colors, color_format).quantize(pixels)
