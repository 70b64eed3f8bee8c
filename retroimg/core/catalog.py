"""Master palettes of the emulated display adapters.

Tables are derived once at import time from the hardware encodings and
never mutated. Entry order is the hardware index order, so indices stay
stable between runs.

    BW_1BIT        2 colors, black and white
    CGA_4BIT      16 colors, IRGB (color 6 is brown, not dark yellow)
    EGA_6BIT      64 colors, rgbRGB (2 bits per channel)
    VGA_18BIT     6 bits per channel, 262144 colors
    HIGH_16BIT    5-6-5 bits per R-G-B channel, 65536 colors
    TRUE_24BIT    8 bits per channel

CGA mode 4 (and the colorburst-off mode 5) can only show three fixed
foreground colors from a sub-palette plus one freely chosen background
color out of the 16 CGA colors.
"""

from dataclasses import dataclass

from retroimg.core.distance import Color

BW_1BIT: tuple[Color, ...] = ((0, 0, 0), (0xFF, 0xFF, 0xFF))


def cga_color(index: int) -> Color:
    """RGB value of a 4-bit IRGB CGA color index."""
    index &= 0x0F
    intensity = 0x55 if index & 0x08 else 0
    r = 0xAA * bool(index & 0x04) + intensity
    g = 0xAA * bool(index & 0x02) + intensity
    b = 0xAA * bool(index & 0x01) + intensity
    if index == 6:
        # the monitor halves the green signal for dark yellow
        g = 0x55
    return (r, g, b)


def ega_color(index: int) -> Color:
    """RGB value of a 6-bit rgbRGB EGA color index."""
    index &= 0x3F
    r = 0xAA * bool(index & 0x04) + 0x55 * bool(index & 0x20)
    g = 0xAA * bool(index & 0x02) + 0x55 * bool(index & 0x10)
    b = 0xAA * bool(index & 0x01) + 0x55 * bool(index & 0x08)
    return (r, g, b)


CGA_4BIT: tuple[Color, ...] = tuple(cga_color(i) for i in range(16))
EGA_6BIT: tuple[Color, ...] = tuple(ega_color(i) for i in range(64))

CGA_COLOR_NAMES = (
    'black',
    'blue',
    'green',
    'cyan',
    'red',
    'magenta',
    'brown',
    'light gray',
    'dark gray',
    'light blue',
    'light green',
    'light cyan',
    'light red',
    'light magenta',
    'yellow',
    'white',
)


@dataclass(frozen=True)
class SubPalette:
    """Three fixed CGA foreground colors, completed by a background color."""

    name: str
    foreground: tuple[int, int, int]  # indices into CGA_4BIT

    @property
    def colors(self) -> tuple[Color, ...]:
        return tuple(CGA_4BIT[i] for i in self.foreground)

    def with_background(self, background: int) -> tuple[Color, ...]:
        """The 4-color effective palette; entry 0 is the background."""
        if not 0 <= background < len(CGA_4BIT):
            raise ValueError(f'Background index {background} is out of range')
        return (CGA_4BIT[background],) + self.colors


CGA_MODE4_0_LOW = SubPalette('mode4-0-low', (2, 4, 6))  # green, red, brown
CGA_MODE4_0_HIGH = SubPalette('mode4-0-high', (10, 12, 14))  # light green, light red, yellow
CGA_MODE4_1_LOW = SubPalette('mode4-1-low', (3, 5, 7))  # cyan, magenta, light gray
CGA_MODE4_1_HIGH = SubPalette('mode4-1-high', (11, 13, 15))  # light cyan, light magenta, white
CGA_MODE5_LOW = SubPalette('mode5-low', (3, 4, 7))  # cyan, red, light gray
CGA_MODE5_HIGH = SubPalette('mode5-high', (11, 12, 15))  # light cyan, light red, white

CGA_MODE4_SUBPALETTES = (CGA_MODE4_0_LOW, CGA_MODE4_0_HIGH, CGA_MODE4_1_LOW, CGA_MODE4_1_HIGH)
CGA_MODE5_SUBPALETTES = (CGA_MODE5_LOW, CGA_MODE5_HIGH)


def expand_level(value: int, bits: int) -> int:
    """Scale an n-bit channel level to 8 bits by bit replication.

    For 6 bits this is the VGA DAC formula (v << 2) | (v >> 4).
    """
    value &= (1 << bits) - 1
    out = 0
    filled = 0
    while filled < 8:
        out = (out << bits) | value
        filled += bits
    return out >> (filled - 8)


@dataclass(frozen=True)
class ChannelDepth:
    """A continuous color space with a fixed number of bits per channel."""

    name: str
    bits: tuple[int, int, int]

    @property
    def size(self) -> int:
        return 1 << sum(self.bits)

    def levels(self, channel: int) -> tuple[int, ...]:
        """Representable 8-bit values of one channel, ascending."""
        bits = self.bits[channel]
        return tuple(expand_level(v, bits) for v in range(1 << bits))


VGA_18BIT = ChannelDepth('18-bit', (6, 6, 6))
HIGH_16BIT = ChannelDepth('16-bit', (5, 6, 5))
TRUE_24BIT = ChannelDepth('24-bit', (8, 8, 8))
