"""Shared types for retroimg: Ditherer, IndexedImage, PaletteSelection, ConvertOptions, ConversionReport."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from fractions import Fraction

import numpy as np
from PIL import Image

from retroimg.core.catalog import SubPalette
from retroimg.core.distance import Loss
from retroimg.core.errors import EmptyPaletteError
from retroimg.core.palette import EffectivePalette
from retroimg.core.standards import ColorStandard


@dataclass
class CandidateScore:
    """Loss of mapping a whole image onto one (sub-palette, background) pair."""

    sub_palette: SubPalette
    background: int  # index into CGA_4BIT
    loss: float


@dataclass
class PaletteSelection:
    """The effective palette chosen for one image and one standard."""

    standard: ColorStandard
    palette: EffectivePalette
    num_colors: int | None = None  # reduction target, None when not reduced
    sub_palette: SubPalette | None = None
    background: int | None = None
    loss: float | None = None  # selection loss for sub-palette modes
    candidates: list[CandidateScore] = field(default_factory=list)


@dataclass
class IndexedImage:
    """Quantization result: palette indices (H x W) plus the palette they refer to."""

    indices: np.ndarray
    palette: EffectivePalette

    def __post_init__(self) -> None:
        if len(self.palette) == 0:
            raise EmptyPaletteError()
        if self.indices.ndim != 2:
            raise ValueError(f'Index buffer must be 2D, got shape {self.indices.shape}')

    @property
    def width(self) -> int:
        return int(self.indices.shape[1])

    @property
    def height(self) -> int:
        return int(self.indices.shape[0])

    def expand(self) -> np.ndarray:
        """Expand indices back to colors (H x W x 3 uint8)."""
        return self.palette.lookup(self.indices)

    def to_image(self) -> Image.Image:
        return Image.fromarray(self.expand())


class Ditherer:
    """A self-registering dithering strategy.

    Usage in a dithering module:

        ditherer = Ditherer(name='bayer', help='4x4 ordered dithering')

        @ditherer.run
        def run(pixels, palette, options):
            ...  # return H x W palette indices
    """

    def __init__(self, name: str, help: str = ''):
        self.name = name
        self.help = help
        self._run_fn: Callable | None = None

    def run(self, fn: Callable) -> Callable:
        """Decorator to register the run function."""
        self._run_fn = fn
        return fn

    def execute(self, pixels: np.ndarray, palette: EffectivePalette, options: DitherOptions) -> np.ndarray:
        """Execute the strategy's run function over an H x W x 3 buffer."""
        if self._run_fn is None:
            raise RuntimeError(f'Ditherer {self.name} has no run function')
        return self._run_fn(pixels, palette, options)


@dataclass
class DitherOptions:
    loss: Loss = Loss.L2
    serpentine: bool = False  # odd rows right-to-left in error diffusion


@dataclass
class ConvertOptions:
    """Everything the conversion pipeline needs besides the source image."""

    standard: ColorStandard = ColorStandard.VGA_18BIT
    num_colors: int | None = None  # None: the standard's default limit
    no_color_limit: bool = False
    loss: Loss = Loss.L2
    dither: str = 'floyd-steinberg'
    serpentine: bool = False
    sample_limit: int | None = None  # pixels scored per CGA candidate, None = all
    crop: tuple[int, int, int, int] | None = None  # (left, top, width, height)
    resolution: tuple[int, int] = (427, 200)
    out_size: tuple[int, int] = (1920, 1080)
    pixel_ratio: Fraction | None = None
    width: int | None = None
    height: int | None = None

    def __post_init__(self) -> None:
        # names like 'cga' or 'L1' are accepted as well as the enums
        self.standard = ColorStandard.parse(self.standard)
        self.loss = Loss.parse(self.loss)

    @property
    def color_limit(self) -> int | None:
        if self.no_color_limit:
            return None
        if self.num_colors is not None:
            return self.num_colors
        return self.standard.default_colors


@dataclass
class ConversionReport:
    """Accumulates what the pipeline did for text/JSON output."""

    image_path: str = ''
    source_size: tuple[int, int] = (0, 0)
    internal_size: tuple[int, int] = (0, 0)
    output_size: tuple[int, int] = (0, 0)
    standard: str = ''
    ditherer: str = ''
    loss_algorithm: str = ''
    palette_size: int = 0
    palette: list[str] = field(default_factory=list)  # hex colors, empty for depth palettes
    sub_palette: str | None = None
    background: int | None = None
    selection_loss: float | None = None
    image_loss: float = 0.0
