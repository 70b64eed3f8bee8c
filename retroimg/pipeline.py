"""Conversion pipeline: crop → downscale → palette selection → quantization → expand.

Any error aborts the conversion before an output image exists.
"""

from dataclasses import dataclass
from pathlib import Path

import numpy as np
from PIL import Image

from retroimg.core import geometry
from retroimg.core.distance import image_loss
from retroimg.core.palette import TablePalette, rgb_to_hex
from retroimg.core.types import ConversionReport, ConvertOptions, IndexedImage, PaletteSelection
from retroimg.quantizer import quantize
from retroimg.selector import select_palette

# report at most this many palette entries
REPORT_PALETTE_LIMIT = 256


@dataclass
class ConversionResult:
    image: Image.Image  # final, upscaled output
    indexed: IndexedImage  # low-resolution quantization result
    selection: PaletteSelection
    report: ConversionReport


def output_size(options: ConvertOptions) -> tuple[int, int]:
    in_width, in_height = options.resolution
    if options.pixel_ratio is None and options.width is None and options.height is None:
        return options.out_size
    return geometry.resolve_output_resolution(in_width, in_height, options.width, options.height, options.pixel_ratio)


def convert_image(image: Image.Image, options: ConvertOptions | None = None, image_path: str = '') -> ConversionResult:
    """Run the whole pipeline on a decoded image."""
    options = options or ConvertOptions()
    source_size = image.size
    out_width, out_height = output_size(options)

    image = image.convert('RGB')
    if options.crop is not None:
        image = geometry.crop(image, *options.crop)
    low = geometry.reduce(image, *options.resolution)
    pixels = np.asarray(low, dtype=np.uint8)
    pixels.setflags(write=False)

    selection = select_palette(
        pixels,
        options.standard,
        num_colors=options.color_limit,
        loss=options.loss,
        sample_limit=options.sample_limit,
    )
    indexed = quantize(
        pixels,
        selection.palette,
        dither=options.dither,
        loss=options.loss,
        serpentine=options.serpentine,
    )
    colors = indexed.expand()
    final = geometry.expand(Image.fromarray(colors), out_width, out_height)

    palette = selection.palette
    report = ConversionReport(
        image_path=image_path,
        source_size=source_size,
        internal_size=(indexed.width, indexed.height),
        output_size=final.size,
        standard=options.standard.value,
        ditherer=options.dither,
        loss_algorithm=str(options.loss),
        palette_size=len(palette),
        palette=[rgb_to_hex(c) for c in palette.colors[:REPORT_PALETTE_LIMIT]]
        if isinstance(palette, TablePalette)
        else [],
        sub_palette=selection.sub_palette.name if selection.sub_palette else None,
        background=selection.background,
        selection_loss=selection.loss,
        image_loss=image_loss(pixels, colors, options.loss),
    )
    return ConversionResult(image=final, indexed=indexed, selection=selection, report=report)


def convert_file(input_path: str | Path, output_path: str | Path, options: ConvertOptions | None = None) -> ConversionResult:
    """Decode, convert and save. The output file is only written on success."""
    with Image.open(input_path) as source:
        result = convert_image(source, options, image_path=str(input_path))
    result.image.save(output_path)
    return result
