"""Tests for retroimg.core.catalog — master palettes and CGA sub-palettes."""

import pytest
from retroimg.core.catalog import (
    BW_1BIT,
    CGA_4BIT,
    CGA_MODE4_1_HIGH,
    CGA_MODE4_SUBPALETTES,
    CGA_MODE5_SUBPALETTES,
    EGA_6BIT,
    HIGH_16BIT,
    TRUE_24BIT,
    VGA_18BIT,
    cga_color,
    ega_color,
    expand_level,
)

CGA_REFERENCE = [
    (0, 0, 0),
    (0, 0, 0xAA),
    (0, 0xAA, 0),
    (0, 0xAA, 0xAA),
    (0xAA, 0, 0),
    (0xAA, 0, 0xAA),
    (0xAA, 0x55, 0),
    (0xAA, 0xAA, 0xAA),
    (0x55, 0x55, 0x55),
    (0x55, 0x55, 0xFF),
    (0x55, 0xFF, 0x55),
    (0x55, 0xFF, 0xFF),
    (0xFF, 0x55, 0x55),
    (0xFF, 0x55, 0xFF),
    (0xFF, 0xFF, 0x55),
    (0xFF, 0xFF, 0xFF),
]


class TestBlackWhite:
    def test_two_colors(self):
        assert BW_1BIT == ((0, 0, 0), (255, 255, 255))


class TestCga:
    def test_matches_reference_table(self):
        assert list(CGA_4BIT) == CGA_REFERENCE

    def test_brown(self):
        assert cga_color(6) == (0xAA, 0x55, 0)

    def test_unique(self):
        assert len(set(CGA_4BIT)) == 16


class TestEga:
    def test_size_and_unique(self):
        assert len(EGA_6BIT) == 64
        assert len(set(EGA_6BIT)) == 64

    def test_known_entries(self):
        assert ega_color(0) == (0, 0, 0)
        assert ega_color(0x07) == (0xAA, 0xAA, 0xAA)
        assert ega_color(0x3F) == (0xFF, 0xFF, 0xFF)
        assert ega_color(0x14) == (0xAA, 0x55, 0)

    def test_contains_every_cga_color(self):
        assert set(CGA_4BIT) <= set(EGA_6BIT)


class TestSubPalettes:
    def test_mode4_variants(self):
        assert len(CGA_MODE4_SUBPALETTES) == 4
        assert len(CGA_MODE5_SUBPALETTES) == 2

    def test_high1_colors(self):
        assert CGA_MODE4_1_HIGH.colors == ((0x55, 0xFF, 0xFF), (0xFF, 0x55, 0xFF), (0xFF, 0xFF, 0xFF))

    def test_background_is_entry_zero(self):
        palette = CGA_MODE4_1_HIGH.with_background(1)
        assert len(palette) == 4
        assert palette[0] == (0, 0, 0xAA)
        assert palette[1:] == CGA_MODE4_1_HIGH.colors

    def test_background_out_of_range(self):
        with pytest.raises(ValueError):
            CGA_MODE4_1_HIGH.with_background(16)


class TestChannelDepth:
    def test_sizes(self):
        assert VGA_18BIT.size == 1 << 18
        assert HIGH_16BIT.size == 1 << 16
        assert TRUE_24BIT.size == 1 << 24

    def test_vga_dac_formula(self):
        for v in range(64):
            assert expand_level(v, 6) == (v << 2) | (v >> 4)

    def test_five_bit_formula(self):
        for v in range(32):
            assert expand_level(v, 5) == (v << 3) | (v >> 2)

    def test_eight_bit_identity(self):
        assert [expand_level(v, 8) for v in range(256)] == list(range(256))

    def test_matches_truncating_mapper(self):
        # (c & ~3) | c >> 6 is the classic 8-bit to 18-bit VGA mapping
        for c in range(256):
            assert expand_level(c >> 2, 6) == (c & ~0x03) | (c >> 6)

    def test_levels_span_full_range(self):
        for depth in (VGA_18BIT, HIGH_16BIT, TRUE_24BIT):
            for channel in range(3):
                levels = depth.levels(channel)
                assert levels[0] == 0
                assert levels[-1] == 255
                assert list(levels) == sorted(set(levels))
