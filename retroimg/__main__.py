"""retroimg — Convert images to look like in retro IBM PC hardware.

Usage: retroimg <image> [-o out.png] [-s standard] [options]

The image is cropped (optional), scaled down to the emulated internal
resolution, mapped onto the color standard's palette with dithering,
then scaled up with nearest-neighbour to the output size.

Environment variables / .env loading:
  OS environment variables are always used first.
  RETROIMG_STANDARD, RETROIMG_NUM_COLORS, RETROIMG_DITHER, RETROIMG_LOSS,
  RETROIMG_RESOLUTION and RETROIMG_OUT_SIZE provide option defaults.
  If a variable is not set, retroimg looks for a .env file starting from
  the current directory and walking up, stopping at the nearest .git boundary.
  Use --env-file to override the .env location explicitly.
"""

import argparse
import os
import sys

from retroimg import registry
from retroimg.core.distance import Loss
from retroimg.core.env import env_default, load_env
from retroimg.core.errors import RetroImgError
from retroimg.core.geometry import parse_ratio, parse_rect, parse_resolution
from retroimg.core.report import format_json, format_text
from retroimg.core.standards import ALIASES, ColorStandard
from retroimg.core.types import ConvertOptions
from retroimg.pipeline import convert_file

PROG = 'retroimg'


def _build_parser() -> argparse.ArgumentParser:
    epilog = (
        'Examples:\n'
        '  retroimg photo.png -o out.png -s vga -c 16\n'
        '  retroimg photo.png -s cga -R 320x200 -r 5:6 --height 1200\n'
        '  retroimg photo.png -s ega --dither bayer --json\n'
        '  retroimg --list-standards\n'
    )
    parser = argparse.ArgumentParser(
        prog=PROG,
        description='Convert images to look like in retro IBM hardware.',
        epilog=epilog,
        formatter_class=argparse.RawTextHelpFormatter,
    )
    parser.add_argument('input', nargs='?', metavar='FILE', help='Image file')
    parser.add_argument('-o', '--out', default='out.png', help='Output image file path (default: out.png)')
    parser.add_argument(
        '-s',
        '--standard',
        default=env_default('standard', 'vga'),
        help='Color standard (default: vga). See --list-standards.',
    )
    parser.add_argument('-C', '--crop', metavar='L,T,W,H', help='Crop the input image to the rectangle (left, top, width, height)')
    parser.add_argument(
        '-R',
        '--res',
        dest='resolution',
        default=env_default('resolution', '427x200'),
        metavar='WxH',
        help='Resolution to resize the image into before color reduction (default: 427x200)',
    )
    parser.add_argument(
        '-S',
        '--out-size',
        default=env_default('out_size', '1920x1080'),
        metavar='WxH',
        help='Output image size (default: 1920x1080)',
    )
    parser.add_argument('-r', '--pixel-ratio', metavar='W:H', help='Pixel ratio (format w:h)')
    parser.add_argument('--width', type=int, help='Output image width (defined separately)')
    parser.add_argument('--height', type=int, help='Output image height (defined separately)')

    colors = parser.add_mutually_exclusive_group()
    colors.add_argument(
        '-c',
        '--num-colors',
        type=int,
        default=None,
        help='Maximum number of simultaneous colors (emulates palette indexing).\n'
        'Default: the standard\'s own limit (256 for vga).',
    )
    colors.add_argument(
        '--no-color-limit',
        action='store_true',
        help='Do not limit number of simultaneous colors (invalidates --num-colors)',
    )

    parser.add_argument(
        '-l',
        '--loss',
        default=env_default('loss', 'L2'),
        help='Distance algorithm for color matching: L1 or L2 (default: L2)',
    )
    dither = parser.add_mutually_exclusive_group()
    dither.add_argument(
        '-d',
        '--dither',
        default=env_default('dither', 'floyd-steinberg'),
        help='Dithering strategy (default: floyd-steinberg). See --list-ditherers.',
    )
    dither.add_argument('--no-dither', action='store_true', help='Map each pixel to its nearest color')
    parser.add_argument('--serpentine', action='store_true', help='Alternate row direction in error diffusion')
    parser.add_argument(
        '--sample-limit',
        type=int,
        default=None,
        metavar='N',
        help='Score CGA sub-palettes on a fixed random sample of N pixels (default: all pixels)',
    )
    parser.add_argument('-j', '--json', action='store_true', help='Print a JSON report to stdout')
    parser.add_argument('-v', '--verbose', action='store_true', help='Print some info to stderr')
    parser.add_argument(
        '--env-file',
        metavar='PATH',
        default=None,
        help='Path to .env file (default: walk up from cwd to .git boundary)',
    )
    parser.add_argument('--list-standards', action='store_true', help='List the color standards and exit')
    parser.add_argument('--list-ditherers', action='store_true', help='List the dithering strategies and exit')
    return parser


def _print_standards() -> None:
    print('Available color standards:\n')
    for standard in ColorStandard:
        names = sorted((alias for alias, s in ALIASES.items() if s is standard), key=len)
        print(f'  {", ".join(names):<16} {standard.description}')


def _print_ditherers() -> None:
    print('Available dithering strategies:\n')
    for name, item in sorted(registry.all_ditherers().items()):
        print(f'  {name:<16} {item.help}')


def _env_int(option: str) -> int | None:
    raw = env_default(option)
    if raw is None:
        return None
    try:
        return int(raw)
    except ValueError as exc:
        raise RetroImgError(f'Invalid integer in environment for {option}: {raw!r}') from exc


def build_options(args: argparse.Namespace) -> ConvertOptions:
    """Turn parsed CLI arguments into pipeline options. Raises RetroImgError."""
    num_colors = args.num_colors
    if num_colors is None and not args.no_color_limit:
        num_colors = _env_int('num_colors')
    return ConvertOptions(
        standard=ColorStandard.parse(args.standard),
        num_colors=num_colors,
        no_color_limit=args.no_color_limit,
        loss=Loss.parse(args.loss),
        dither='none' if args.no_dither else args.dither,
        serpentine=args.serpentine,
        sample_limit=args.sample_limit,
        crop=parse_rect(args.crop) if args.crop else None,
        resolution=parse_resolution(args.resolution),
        out_size=parse_resolution(args.out_size),
        pixel_ratio=parse_ratio(args.pixel_ratio) if args.pixel_ratio else None,
        width=args.width,
        height=args.height,
    )


def main(argv: list[str] | None = None) -> None:
    # .env must be loaded before the parser reads its env defaults
    pre = argparse.ArgumentParser(add_help=False)
    pre.add_argument('--env-file', default=None)
    known, _rest = pre.parse_known_args(argv)
    env_path = load_env(env_file=known.env_file)

    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.verbose and env_path:
        print(f'{PROG}: loaded {env_path}', file=sys.stderr)

    if args.list_standards:
        _print_standards()
        return
    if args.list_ditherers:
        _print_ditherers()
        return

    if not args.input:
        parser.print_help()
        sys.exit(1)
    if not os.path.isfile(args.input):
        print(f'Error: image not found: {args.input}', file=sys.stderr)
        sys.exit(1)

    try:
        options = build_options(args)
        # fail on unknown names before any pixel work
        registry.get(options.dither)
        result = convert_file(args.input, args.out, options)
    except RetroImgError as exc:
        print(f'Error: {exc}', file=sys.stderr)
        sys.exit(1)

    report = result.report
    if args.verbose:
        print(format_text(report), file=sys.stderr)
        print(f'{PROG}: wrote {args.out}', file=sys.stderr)
    if args.json:
        print(format_json(report))


if __name__ == '__main__':
    main()
