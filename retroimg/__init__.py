"""Convert images to look like in retro IBM PC hardware (CGA, EGA, VGA).

The library can be used without the CLI:

    from PIL import Image
    from retroimg import ColorStandard, ConvertOptions, convert_image

    result = convert_image(Image.open('photo.png'), ConvertOptions(standard=ColorStandard.CGA_MODE4))
    result.image.save('cga.png')
"""

from retroimg.core.distance import Loss, color_distance
from retroimg.core.errors import (
    EmptyPaletteError,
    InvalidColorCount,
    InvalidDitherer,
    InvalidGeometry,
    InvalidLoss,
    InvalidStandard,
    RetroImgError,
)
from retroimg.core.palette import DepthPalette, TablePalette
from retroimg.core.standards import ColorStandard
from retroimg.core.types import ConversionReport, ConvertOptions, IndexedImage, PaletteSelection
from retroimg.pipeline import ConversionResult, convert_file, convert_image
from retroimg.quantizer import quantize
from retroimg.selector import select_palette

__all__ = [
    'ColorStandard',
    'ConversionReport',
    'ConversionResult',
    'ConvertOptions',
    'DepthPalette',
    'EmptyPaletteError',
    'IndexedImage',
    'InvalidColorCount',
    'InvalidDitherer',
    'InvalidGeometry',
    'InvalidLoss',
    'InvalidStandard',
    'Loss',
    'PaletteSelection',
    'RetroImgError',
    'TablePalette',
    'color_distance',
    'convert_file',
    'convert_image',
    'quantize',
    'select_palette',
]
