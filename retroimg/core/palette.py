"""Effective palettes: the color sets pixels are actually mapped onto.

Two shapes share one interface (len, nearest, lookup, colors):

- TablePalette: a finite, ordered list of colors (CGA, EGA, reduced VGA...).
- DepthPalette: a whole channel-depth color space (18-bit VGA, 16-bit,
  24-bit). Nearest mapping works per channel over the representable
  levels instead of scanning a table, and an index packs the channel
  levels with red in the high bits.

Also hosts the hex helpers used in reports.
"""

from __future__ import annotations

import numpy as np

from retroimg.core.catalog import ChannelDepth
from retroimg.core.distance import Color, Loss, nearest_index


def hex_to_rgb(hex_str: str) -> Color:
    """Convert '#rrggbb' or '#rgb' to (r, g, b). Invalid input gives black."""
    h = hex_str.lstrip('#')
    if len(h) == 3:
        h = ''.join(c * 2 for c in h)
    if len(h) != 6:
        return (0, 0, 0)
    try:
        return (int(h[0:2], 16), int(h[2:4], 16), int(h[4:6], 16))
    except ValueError:
        return (0, 0, 0)


def rgb_to_hex(color: Color) -> str:
    r, g, b = (int(c) for c in color)
    return f'#{r:02x}{g:02x}{b:02x}'


class TablePalette:
    """A finite ordered palette."""

    def __init__(self, colors, name: str = ''):
        arr = np.asarray(colors, dtype=np.uint8).reshape(-1, 3)
        arr.setflags(write=False)
        self._colors = arr
        self.name = name

    def __len__(self) -> int:
        return len(self._colors)

    def __repr__(self) -> str:
        return f'TablePalette({self.name or len(self)!r})'

    @property
    def colors(self) -> list[Color]:
        return [tuple(int(c) for c in row) for row in self._colors]

    def as_array(self) -> np.ndarray:
        return self._colors

    def nearest(self, pixels, loss: Loss = Loss.L2) -> np.ndarray:
        return nearest_index(pixels, self._colors, loss)

    def lookup(self, indices) -> np.ndarray:
        return self._colors[np.asarray(indices, dtype=np.intp)]

    def snap(self, pixels, loss: Loss = Loss.L2) -> np.ndarray:
        return self.lookup(self.nearest(pixels, loss))


class DepthPalette:
    """Every color representable at a given bit depth per channel."""

    def __init__(self, depth: ChannelDepth, codes=None):
        self.depth = depth
        self.name = depth.name
        self._full = [np.asarray(depth.levels(c), dtype=np.float64) for c in range(3)]
        if codes is None:
            codes = [np.arange(len(levels)) for levels in self._full]
        # level codes each channel may map onto, ascending
        self._codes = [np.asarray(k, dtype=np.intp) for k in codes]
        self._levels = [full[k] for full, k in zip(self._full, self._codes)]
        self._shifts = (depth.bits[1] + depth.bits[2], depth.bits[2], 0)

    def __len__(self) -> int:
        return self.depth.size

    def __repr__(self) -> str:
        return f'DepthPalette({self.name!r})'

    @property
    def spread(self) -> np.ndarray:
        """Gap between adjacent levels of each channel."""
        return np.array([255.0 / (len(levels) - 1) for levels in self._full])

    def nearest_levels(self, pixels) -> np.ndarray:
        """Per-channel nearest level code (N x 3); ties go to the lower level.

        The closest color is separable per channel for both L1 and L2.
        """
        pixels = np.asarray(pixels, dtype=np.float64).reshape(-1, 3)
        out = np.empty(pixels.shape, dtype=np.intp)
        for c, levels in enumerate(self._levels):
            if len(levels) == 1:
                out[:, c] = self._codes[c][0]
                continue
            values = pixels[:, c]
            pos = np.clip(np.searchsorted(levels, values), 1, len(levels) - 1)
            lower = levels[pos - 1]
            upper = levels[pos]
            out[:, c] = self._codes[c][np.where(values - lower <= upper - values, pos - 1, pos)]
        return out

    def used_by(self, pixels) -> DepthPalette:
        """Same index space, limited to the levels some pixel is nearest to."""
        levels = self.nearest_levels(pixels)
        return DepthPalette(self.depth, [np.unique(levels[:, c]) for c in range(3)])

    def nearest(self, pixels, loss: Loss = Loss.L2) -> np.ndarray:
        levels = self.nearest_levels(pixels)
        return (levels[:, 0] << self._shifts[0]) | (levels[:, 1] << self._shifts[1]) | levels[:, 2]

    def lookup(self, indices) -> np.ndarray:
        indices = np.asarray(indices, dtype=np.intp)
        out = np.empty(indices.shape + (3,), dtype=np.uint8)
        for c, levels in enumerate(self._full):
            level = (indices >> self._shifts[c]) & ((1 << self.depth.bits[c]) - 1)
            out[..., c] = levels[level].astype(np.uint8)
        return out

    def snap(self, pixels, loss: Loss = Loss.L2) -> np.ndarray:
        """Map colors onto the nearest representable color (N x 3 uint8)."""
        return self.lookup(self.nearest(pixels, loss))


EffectivePalette = TablePalette | DepthPalette
