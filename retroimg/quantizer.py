"""Quantization: map an image onto its effective palette with a dithering strategy.

Dithering only mixes palette entries that are the nearest entry of at
least one pixel, so a flat region whose color is not in the palette
still maps to a single entry instead of a dither pattern.
"""

import numpy as np

from retroimg import registry
from retroimg.core.distance import Loss
from retroimg.core.errors import EmptyPaletteError
from retroimg.core.palette import DepthPalette, EffectivePalette, TablePalette
from retroimg.core.types import DitherOptions, IndexedImage


def dither_palette(flat: np.ndarray, palette: EffectivePalette, loss: Loss = Loss.L2):
    """Restrict `palette` to the entries used by nearest mapping.

    Returns the working palette and, for tables, the original index of each
    working entry (None when indices need no translation).
    """
    if isinstance(palette, DepthPalette):
        return palette.used_by(flat), None
    used = np.unique(palette.nearest(flat, loss))
    if len(used) == len(palette):
        return palette, None
    return TablePalette(palette.as_array()[used], name=palette.name), used


def quantize(
    pixels,
    palette: EffectivePalette,
    dither: str = 'floyd-steinberg',
    loss: Loss = Loss.L2,
    serpentine: bool = False,
) -> IndexedImage:
    """Return one palette index per pixel of an H x W x 3 image.

    The source buffer is never modified; error diffusion works on a copy.
    """
    if len(palette) == 0:
        raise EmptyPaletteError()
    pixels = np.asarray(pixels)
    if pixels.ndim != 3 or pixels.shape[2] != 3:
        raise ValueError(f'Expected an H x W x 3 buffer, got shape {pixels.shape}')

    strategy = registry.get(dither)
    working, original = dither_palette(pixels.reshape(-1, 3), palette, loss)
    indices = strategy.execute(pixels, working, DitherOptions(loss=loss, serpentine=serpentine))
    indices = np.asarray(indices, dtype=np.intp)
    if original is not None:
        indices = original[indices]
    return IndexedImage(indices=indices, palette=palette)
