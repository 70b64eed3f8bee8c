"""Report builder — text and JSON output for retroimg conversions."""

import json
import os
from typing import Any

from retroimg.core.catalog import CGA_COLOR_NAMES
from retroimg.core.types import ConversionReport

# palette entries shown per line in text output
SWATCHES_PER_LINE = 8


def _size(size: tuple[int, int]) -> str:
    return f'{size[0]}×{size[1]}'


def format_text(report: ConversionReport) -> str:
    """Format report as human-readable text."""
    lines = []
    name = os.path.basename(report.image_path) if report.image_path else '(image)'
    lines.append(f'retroimg: {name} ({_size(report.source_size)})')
    lines.append(f'  internal resolution: {_size(report.internal_size)}')
    lines.append(f'  external resolution: {_size(report.output_size)}')
    lines.append(f'  standard: {report.standard}  dither: {report.ditherer}  loss: {report.loss_algorithm}')

    if report.sub_palette is not None and report.background is not None:
        bg_name = CGA_COLOR_NAMES[report.background]
        lines.append(f'  sub-palette: {report.sub_palette}  background: {report.background} ({bg_name})')
    if report.selection_loss is not None:
        lines.append(f'  selection loss: {report.selection_loss:.1f}')

    lines.append(f'  palette: {report.palette_size} colors')
    for start in range(0, len(report.palette), SWATCHES_PER_LINE):
        lines.append('    ' + ' '.join(report.palette[start : start + SWATCHES_PER_LINE]))
    if report.palette and len(report.palette) < report.palette_size:
        lines.append(f'    … {report.palette_size - len(report.palette)} more')

    pixels = report.internal_size[0] * report.internal_size[1]
    mean = report.image_loss / pixels if pixels else 0.0
    lines.append(f'  image loss: {report.image_loss:.1f} (mean {mean:.2f} per pixel)')
    return '\n'.join(lines)


def format_json(report: ConversionReport) -> str:
    """Format report as JSON."""
    obj: dict[str, Any] = {
        'image': report.image_path,
        'dimensions': {
            'source': {'width': report.source_size[0], 'height': report.source_size[1]},
            'internal': {'width': report.internal_size[0], 'height': report.internal_size[1]},
            'output': {'width': report.output_size[0], 'height': report.output_size[1]},
        },
        'standard': report.standard,
        'dither': report.ditherer,
        'loss': report.loss_algorithm,
        'palette': {
            'size': report.palette_size,
            'colors': report.palette,
        },
    }
    if report.sub_palette is not None:
        obj['sub_palette'] = {
            'name': report.sub_palette,
            'background': report.background,
            'loss': report.selection_loss,
        }
    obj['image_loss'] = round(report.image_loss, 3)
    return json.dumps(obj, indent=2)
