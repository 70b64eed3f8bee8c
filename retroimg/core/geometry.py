"""Buffer geometry around the color pipeline: crop, downscale, nearest upscale.

Also parses the textual geometry options (WxH, w:h, l,t,w,h) and resolves
the final output size from a pixel aspect ratio.
"""

from fractions import Fraction

from PIL import Image

from retroimg.core.errors import InvalidGeometry


def parse_resolution(value: str) -> tuple[int, int]:
    parts = value.lower().split('x')
    if len(parts) != 2:
        raise InvalidGeometry(
            f'Invalid resolution {value!r}: number of components should be 2 (<width>x<height>)'
        )
    width, height = (_parse_positive(p, value) for p in parts)
    return (width, height)


def parse_ratio(value: str) -> Fraction:
    parts = value.split(':')
    if len(parts) != 2:
        raise InvalidGeometry(f'Invalid pixel ratio {value!r}: number of components should be 2 (<width>:<height>)')
    return Fraction(_parse_positive(parts[0], value), _parse_positive(parts[1], value))


def parse_rect(value: str) -> tuple[int, int, int, int]:
    parts = value.split(',')
    if len(parts) != 4:
        raise InvalidGeometry(f'Invalid rectangle {value!r}: expected <left>,<top>,<width>,<height>')
    try:
        left, top, width, height = (int(p.strip()) for p in parts)
    except ValueError as exc:
        raise InvalidGeometry(f'Invalid rectangle {value!r}: components must be integers') from exc
    if left < 0 or top < 0 or width <= 0 or height <= 0:
        raise InvalidGeometry(f'Invalid rectangle {value!r}: offsets must be >= 0 and sizes > 0')
    return (left, top, width, height)


def _parse_positive(text: str, whole: str) -> int:
    try:
        n = int(text.strip())
    except ValueError as exc:
        raise InvalidGeometry(f'Invalid component {text!r} in {whole!r}') from exc
    if n <= 0:
        raise InvalidGeometry(f'Components of {whole!r} must be positive')
    return n


def crop(image: Image.Image, left: int, top: int, width: int, height: int) -> Image.Image:
    if left + width > image.width or top + height > image.height:
        raise InvalidGeometry(
            f'Crop rectangle ({left},{top},{width},{height}) exceeds image size {image.width}x{image.height}'
        )
    return image.crop((left, top, left + width, top + height))


def reduce(image: Image.Image, width: int, height: int) -> Image.Image:
    """Downscale to the emulated internal resolution (bicubic, Catmull-Rom)."""
    return image.resize((width, height), Image.Resampling.BICUBIC)


def expand(image: Image.Image, width: int, height: int) -> Image.Image:
    """Upscale to the output size keeping hard pixel edges."""
    return image.resize((width, height), Image.Resampling.NEAREST)


def resolve_output_resolution(
    in_width: int,
    in_height: int,
    out_width: int | None,
    out_height: int | None,
    pixel_ratio: Fraction | None,
) -> tuple[int, int]:
    """Work out the output size from whichever of width, height and pixel ratio are given.

    The pixel ratio is the shape of one emulated pixel (width:height) and
    defaults to square pixels.
    """
    if in_width <= 0 or in_height <= 0:
        raise InvalidGeometry(f'Invalid internal resolution {in_width}x{in_height}')
    if out_width is not None and out_height is not None:
        if pixel_ratio is not None:
            raise InvalidGeometry('Output width, height and pixel ratio cannot all be specified')
        return (out_width, out_height)

    ratio = pixel_ratio if pixel_ratio is not None else Fraction(1)
    if ratio <= 0:
        raise InvalidGeometry(f'Invalid pixel ratio {ratio}')

    if out_width is not None:
        height = round(Fraction(out_width * in_height) / (in_width * ratio))
        return (out_width, max(1, height))
    if out_height is not None:
        width = round(Fraction(out_height * in_width) * ratio / in_height)
        return (max(1, width), out_height)
    return (in_width * ratio.numerator, in_height * ratio.denominator)
