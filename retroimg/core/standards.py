"""Closed set of emulated color standards.

Each standard carries its palette rule:

    FIXED        master palette used verbatim (bw, fullcga)
    REDUCIBLE    master palette or channel depth, optionally reduced to N
                 colors per image (ega, 16bit, vga, 24bit)
    SUBPALETTE   CGA sub-palette modes: best (sub-palette, background)
                 pair is searched per image (cgamode4, cgamode4high1, cgamode5)
"""

import enum
from dataclasses import dataclass

from retroimg.core import catalog
from retroimg.core.catalog import ChannelDepth, SubPalette
from retroimg.core.errors import InvalidStandard
from retroimg.core.palette import DepthPalette, TablePalette


class PaletteKind(enum.Enum):
    FIXED = 'fixed'
    REDUCIBLE = 'reducible'
    SUBPALETTE = 'subpalette'


@dataclass(frozen=True)
class StandardInfo:
    description: str
    kind: PaletteKind
    table: tuple[tuple[int, int, int], ...] | None = None
    depth: ChannelDepth | None = None
    sub_palettes: tuple[SubPalette, ...] = ()
    default_colors: int | None = None


class ColorStandard(enum.Enum):
    """Kind of color palette to be simulated. Does not affect resolution."""

    BLACK_WHITE = 'bw'
    CGA_MODE4 = 'cgamode4'
    CGA_MODE4_HIGH1 = 'cgamode4high1'
    CGA_MODE5 = 'cgamode5'
    FULL_CGA = 'fullcga'
    FULL_EGA = 'ega'
    VGA_16BIT = '16bit'
    VGA_18BIT = '18bit'
    TRUE_24BIT = '24bit'

    def __str__(self) -> str:
        return self.value

    @property
    def info(self) -> StandardInfo:
        return _INFO[self]

    @property
    def kind(self) -> PaletteKind:
        return _INFO[self].kind

    @property
    def description(self) -> str:
        return _INFO[self].description

    @property
    def default_colors(self) -> int | None:
        return _INFO[self].default_colors

    @property
    def sub_palettes(self) -> tuple[SubPalette, ...]:
        return _INFO[self].sub_palettes

    @property
    def master_size(self) -> int:
        info = _INFO[self]
        if info.depth is not None:
            return info.depth.size
        if info.table is not None:
            return len(info.table)
        return len(catalog.CGA_4BIT)

    def master_palette(self) -> TablePalette | DepthPalette:
        """Full color set of the standard; CGA sub-palette modes draw from the 16 CGA colors."""
        info = _INFO[self]
        if info.depth is not None:
            return DepthPalette(info.depth)
        return TablePalette(info.table or catalog.CGA_4BIT, name=self.value)

    @classmethod
    def parse(cls, name: 'str | ColorStandard') -> 'ColorStandard':
        if isinstance(name, ColorStandard):
            return name
        key = name.strip().lower()
        if key not in ALIASES:
            raise InvalidStandard(name, sorted(ALIASES))
        return ALIASES[key]


_INFO: dict[ColorStandard, StandardInfo] = {
    ColorStandard.BLACK_WHITE: StandardInfo(
        'Monochrome, black and white',
        PaletteKind.FIXED,
        table=catalog.BW_1BIT,
    ),
    ColorStandard.CGA_MODE4: StandardInfo(
        'Mode 4 of CGA: 3 colors from hardcoded sub-palettes + 1 back color',
        PaletteKind.SUBPALETTE,
        sub_palettes=catalog.CGA_MODE4_SUBPALETTES,
    ),
    ColorStandard.CGA_MODE4_HIGH1: StandardInfo(
        'Mode 4 of CGA, high intensity sub-palette 1: cyan, magenta, white + 1 back color',
        PaletteKind.SUBPALETTE,
        sub_palettes=(catalog.CGA_MODE4_1_HIGH,),
    ),
    ColorStandard.CGA_MODE5: StandardInfo(
        'Mode 5 of CGA (colorburst off): cyan, red, white + 1 back color',
        PaletteKind.SUBPALETTE,
        sub_palettes=catalog.CGA_MODE5_SUBPALETTES,
    ),
    ColorStandard.FULL_CGA: StandardInfo(
        'All 16 colors from the CGA palette',
        PaletteKind.FIXED,
        table=catalog.CGA_4BIT,
    ),
    ColorStandard.FULL_EGA: StandardInfo(
        'All 64 colors from the EGA palette',
        PaletteKind.REDUCIBLE,
        table=catalog.EGA_6BIT,
    ),
    ColorStandard.VGA_16BIT: StandardInfo(
        '16-bit RGB, also called High color (5-6-5 bits per R-G-B channel)',
        PaletteKind.REDUCIBLE,
        depth=catalog.HIGH_16BIT,
    ),
    ColorStandard.VGA_18BIT: StandardInfo(
        '18-bit RGB (6 bits per channel), 256 simultaneous colors by default',
        PaletteKind.REDUCIBLE,
        depth=catalog.VGA_18BIT,
        default_colors=256,
    ),
    ColorStandard.TRUE_24BIT: StandardInfo(
        'True color 24-bit RGB (8 bits per channel)',
        PaletteKind.REDUCIBLE,
        depth=catalog.TRUE_24BIT,
    ),
}

ALIASES: dict[str, ColorStandard] = {
    'bw': ColorStandard.BLACK_WHITE,
    'cga': ColorStandard.CGA_MODE4,
    'cgamode4': ColorStandard.CGA_MODE4,
    'cgamode4high1': ColorStandard.CGA_MODE4_HIGH1,
    'cgamode5': ColorStandard.CGA_MODE5,
    'fullcga': ColorStandard.FULL_CGA,
    'ega': ColorStandard.FULL_EGA,
    'high': ColorStandard.VGA_16BIT,
    '16bit': ColorStandard.VGA_16BIT,
    'vga': ColorStandard.VGA_18BIT,
    '18bit': ColorStandard.VGA_18BIT,
    'true': ColorStandard.TRUE_24BIT,
    '24bit': ColorStandard.TRUE_24BIT,
}
