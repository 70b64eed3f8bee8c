"""Map every pixel independently to its nearest palette entry.

No error is carried between pixels, so flat gradients band into the
palette's steps. Ties go to the lowest palette index.

Example:
    retroimg photo.png -s fullcga --no-dither
"""

import numpy as np

from retroimg.core.palette import EffectivePalette
from retroimg.core.types import DitherOptions, Ditherer

ditherer = Ditherer(
    name='none',
    help='Nearest palette entry per pixel, no dithering.',
)


@ditherer.run
def run(pixels: np.ndarray, palette: EffectivePalette, options: DitherOptions) -> np.ndarray:
    h, w = pixels.shape[:2]
    return palette.nearest(pixels.reshape(-1, 3), options.loss).reshape(h, w)
