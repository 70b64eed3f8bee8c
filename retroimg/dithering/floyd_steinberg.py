"""Floyd-Steinberg error diffusion.

Pixels are visited row by row, left to right (odd rows right to left with
--serpentine, kernel mirrored). The difference between a pixel's working
value and its chosen palette color is pushed to unvisited neighbours:

          *    7/16
    3/16 5/16  1/16

Working values are saturated to [0, 255] when read, so accumulated error
can never wrap a channel. The traversal is strictly sequential.

Example:
    retroimg photo.png -s ega --dither floyd-steinberg --serpentine
"""

import numpy as np

from retroimg.core.palette import EffectivePalette
from retroimg.core.types import DitherOptions, Ditherer

ditherer = Ditherer(
    name='floyd-steinberg',
    help='Error diffusion with the Floyd-Steinberg kernel (default).',
)

# (dx, dy, weight), dx given for a left-to-right pass
KERNEL = (
    (1, 0, 7 / 16),
    (-1, 1, 3 / 16),
    (0, 1, 5 / 16),
    (1, 1, 1 / 16),
)


@ditherer.run
def run(pixels: np.ndarray, palette: EffectivePalette, options: DitherOptions) -> np.ndarray:
    h, w = pixels.shape[:2]
    work = pixels.astype(np.float64)
    out = np.empty((h, w), dtype=np.intp)

    for y in range(h):
        backwards = options.serpentine and y % 2 == 1
        direction = -1 if backwards else 1
        xs = range(w - 1, -1, -1) if backwards else range(w)
        for x in xs:
            value = np.clip(work[y, x], 0.0, 255.0)
            index = int(palette.nearest(value, options.loss)[0])
            out[y, x] = index
            error = value - palette.lookup(index).astype(np.float64)
            if not error.any():
                continue
            for dx, dy, weight in KERNEL:
                nx = x + dx * direction
                ny = y + dy
                if 0 <= nx < w and ny < h:
                    work[ny, nx] += error * weight

    return out
