"""Color distance model: L2 (Euclidean) and L1 (Manhattan) in the RGB cube.

All arithmetic is done on Python ints or float64 arrays, never on uint8,
so (0 - 200) cannot wrap. Nearest-entry searches resolve ties toward the
lowest palette index (numpy argmin returns the first minimum).
"""

import enum
import math

import numpy as np

from retroimg.core.errors import InvalidLoss

Color = tuple[int, int, int]

CHUNK_ELEMENTS = 1 << 20


class Loss(enum.Enum):
    """Distance algorithm used for nearest-color mapping and loss scores."""

    L2 = 'L2'
    L1 = 'L1'

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, name: 'str | Loss') -> 'Loss':
        if isinstance(name, Loss):
            return name
        try:
            return cls(name.strip().upper())
        except ValueError:
            raise InvalidLoss(name) from None


def color_distance(a: Color, b: Color, loss: Loss = Loss.L2) -> float:
    """Distance between two colors. 0 means identical."""
    dr = int(a[0]) - int(b[0])
    dg = int(a[1]) - int(b[1])
    db = int(a[2]) - int(b[2])
    if loss is Loss.L1:
        return float(abs(dr) + abs(dg) + abs(db))
    return math.sqrt(dr * dr + dg * dg + db * db)


def _as_float(colors) -> np.ndarray:
    return np.asarray(colors, dtype=np.float64).reshape(-1, 3)


def pairwise_cost(pixels, palette, loss: Loss = Loss.L2) -> np.ndarray:
    """Rank-preserving cost matrix (N pixels x K entries).

    For L2 this is the squared distance, which orders entries exactly like
    the true distance without the square root.
    """
    diff = _as_float(pixels)[:, None, :] - _as_float(palette)[None, :, :]
    if loss is Loss.L1:
        return np.abs(diff).sum(axis=-1)
    return (diff * diff).sum(axis=-1)


def pairwise_distance(pixels, palette, loss: Loss = Loss.L2) -> np.ndarray:
    """True distance matrix (N pixels x K entries)."""
    cost = pairwise_cost(pixels, palette, loss)
    if loss is Loss.L2:
        return np.sqrt(cost)
    return cost


def nearest_index(pixels, palette, loss: Loss = Loss.L2) -> np.ndarray:
    """Index of the closest palette entry for every pixel (lowest index wins ties)."""
    pixels = _as_float(pixels)
    palette = _as_float(palette)
    # keep the N x K x 3 intermediate bounded
    step = max(1, CHUNK_ELEMENTS // max(1, len(palette)))
    out = np.empty(len(pixels), dtype=np.intp)
    for start in range(0, len(pixels), step):
        cost = pairwise_cost(pixels[start : start + step], palette, loss)
        out[start : start + step] = np.argmin(cost, axis=1)
    return out


def image_loss(a, b, loss: Loss = Loss.L2) -> float:
    """Sum of per-pixel distances between two equally sized color buffers."""
    fa = _as_float(a)
    fb = _as_float(b)
    if fa.shape != fb.shape:
        raise ValueError(f'Buffers differ in size: {fa.shape[0]} vs {fb.shape[0]} pixels')
    diff = fa - fb
    if loss is Loss.L1:
        return float(np.abs(diff).sum())
    return float(np.sqrt((diff * diff).sum(axis=-1)).sum())
