"""Ordered dithering with a 4x4 Bayer threshold matrix.

Table palettes: each pixel's two nearest entries are found and the
second one is used where the pixel's relative distance to the first,
d1 / (d1 + d2), exceeds the tiled threshold. A pixel that already has an
exact palette match always keeps it.

Channel-depth palettes: a threshold offset of less than half a level step
is added per channel before rounding to the nearest level.

Pixels are independent, so the result does not depend on visiting order.

Example:
    retroimg photo.png -s cgamode4 --dither bayer
"""

import numpy as np

from retroimg.core.distance import pairwise_distance
from retroimg.core.palette import DepthPalette, EffectivePalette
from retroimg.core.types import DitherOptions, Ditherer

ditherer = Ditherer(
    name='bayer',
    help='4x4 ordered (Bayer matrix) dithering.',
)

BAYER_4X4 = np.array(
    [
        [0, 8, 2, 10],
        [12, 4, 14, 6],
        [3, 11, 1, 9],
        [15, 7, 13, 5],
    ],
    dtype=np.float64,
)

# thresholds strictly inside (0, 1)
THRESHOLDS = (BAYER_4X4 + 0.5) / 16.0


def _tile(h: int, w: int) -> np.ndarray:
    th, tw = THRESHOLDS.shape
    return np.tile(THRESHOLDS, ((h + th - 1) // th, (w + tw - 1) // tw))[:h, :w]


def _depth(pixels: np.ndarray, palette: DepthPalette, options: DitherOptions) -> np.ndarray:
    h, w = pixels.shape[:2]
    offset = (_tile(h, w) - 0.5)[:, :, None] * palette.spread[None, None, :]
    work = np.clip(pixels.astype(np.float64) + offset, 0.0, 255.0)
    return palette.nearest(work.reshape(-1, 3), options.loss).reshape(h, w)


def _table(pixels: np.ndarray, palette: EffectivePalette, options: DitherOptions) -> np.ndarray:
    h, w = pixels.shape[:2]
    flat = pixels.reshape(-1, 3)
    if len(palette) < 2:
        return palette.nearest(flat, options.loss).reshape(h, w)

    thresholds = _tile(h, w).reshape(-1)
    colors = palette.as_array()
    out = np.empty(len(flat), dtype=np.intp)
    step = max(1, (1 << 20) // len(palette))
    for start in range(0, len(flat), step):
        dist = pairwise_distance(flat[start : start + step], colors, options.loss)
        # stable sort keeps the lowest index first among equal distances
        order = np.argsort(dist, axis=1, kind='stable')[:, :2]
        rows = np.arange(len(dist))
        d1 = dist[rows, order[:, 0]]
        d2 = dist[rows, order[:, 1]]
        total = d1 + d2
        factor = np.divide(d1, total, out=np.zeros_like(d1), where=total > 0)
        use_second = factor > thresholds[start : start + step]
        out[start : start + step] = np.where(use_second, order[:, 1], order[:, 0])
    return out.reshape(h, w)


@ditherer.run
def run(pixels: np.ndarray, palette: EffectivePalette, options: DitherOptions) -> np.ndarray:
    if isinstance(palette, DepthPalette):
        return _depth(pixels, palette, options)
    return _table(pixels, palette, options)
