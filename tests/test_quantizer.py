"""Tests for retroimg.quantizer and the dithering strategies."""

import numpy as np
import pytest
from retroimg.core.catalog import BW_1BIT, CGA_4BIT, HIGH_16BIT, VGA_18BIT
from retroimg.core.errors import EmptyPaletteError, InvalidDitherer
from retroimg.core.palette import DepthPalette, TablePalette
from retroimg.core.standards import ColorStandard
from retroimg.quantizer import quantize
from retroimg.selector import select_palette

DITHERERS = ['none', 'floyd-steinberg', 'bayer']
CGA = TablePalette(CGA_4BIT, name='cga')
BW = TablePalette(BW_1BIT, name='bw')


def _uniform(color: tuple[int, int, int], h: int = 4, w: int = 4) -> np.ndarray:
    img = np.empty((h, w, 3), dtype=np.uint8)
    img[:, :] = color
    return img


def _random_image(h: int = 8, w: int = 8, seed: int = 1) -> np.ndarray:
    return np.random.default_rng(seed).integers(0, 256, size=(h, w, 3), dtype=np.uint8)


class TestNearestMapping:
    @pytest.mark.parametrize('dither', ['none', 'floyd-steinberg'])
    def test_dark_red_maps_to_cga_red(self, dither):
        result = quantize(_uniform((200, 0, 0), 1, 1), CGA, dither=dither)
        assert result.indices.tolist() == [[4]]

    @pytest.mark.parametrize('dither', DITHERERS)
    def test_uniform_palette_color_stays_uniform(self, dither):
        result = quantize(_uniform((0, 0xAA, 0xAA)), CGA, dither=dither)
        assert np.all(result.indices == 3)

    @pytest.mark.parametrize('dither', DITHERERS)
    def test_uniform_representable_color_on_depth_palette(self, dither):
        palette = DepthPalette(VGA_18BIT)
        result = quantize(_uniform((170, 85, 0)), palette, dither=dither)
        expected = (42 << 12) | (21 << 6)
        assert np.all(result.indices == expected)
        assert np.all(result.expand() == (170, 85, 0))

    def test_expanded_colors_belong_to_palette(self):
        result = quantize(_random_image(), CGA, dither='floyd-steinberg')
        colors = {tuple(int(c) for c in px) for px in result.expand().reshape(-1, 3)}
        assert colors <= set(CGA_4BIT)


class TestIndexRange:
    @pytest.mark.parametrize('dither', DITHERERS)
    @pytest.mark.parametrize('standard', list(ColorStandard))
    def test_indices_within_palette(self, standard, dither):
        img = _random_image()
        selection = select_palette(img, standard)
        result = quantize(img, selection.palette, dither=dither)
        assert result.indices.shape == (8, 8)
        assert result.indices.min() >= 0
        assert result.indices.max() < len(selection.palette)

    @pytest.mark.parametrize('dither', DITHERERS)
    def test_reduced_palette(self, dither):
        img = _random_image(seed=6)
        selection = select_palette(img, 'ega', num_colors=5)
        result = quantize(img, selection.palette, dither=dither)
        assert result.indices.max() < len(selection.palette)


class TestFloydSteinberg:
    def test_error_is_saturated(self):
        # 127 -> black pushes +55 onto 255, which must not carry past white
        img = np.array([[(127, 127, 127), (255, 255, 255), (110, 110, 110)]], dtype=np.uint8)
        result = quantize(img, BW, dither='floyd-steinberg')
        assert result.indices.tolist() == [[0, 1, 0]]

    def test_ramp_mixes_black_and_white(self):
        ramp = np.linspace(0, 255, 16).astype(np.uint8)
        img = np.repeat(np.repeat(ramp[None, :, None], 16, axis=0), 3, axis=2)
        result = quantize(img, BW, dither='floyd-steinberg')
        assert set(np.unique(result.indices[:, 6:10]).tolist()) == {0, 1}

    def test_source_untouched(self):
        img = _random_image()
        before = img.copy()
        quantize(img, BW, dither='floyd-steinberg')
        assert np.array_equal(img, before)

    def test_serpentine_is_deterministic(self):
        img = _random_image(seed=8)
        first = quantize(img, CGA, dither='floyd-steinberg', serpentine=True)
        second = quantize(img, CGA, dither='floyd-steinberg', serpentine=True)
        assert np.array_equal(first.indices, second.indices)
        assert first.indices.max() < 16


class TestBayer:
    def test_mid_gray_splits_tile_when_both_entries_in_use(self):
        img = np.zeros((4, 8, 3), dtype=np.uint8)
        img[:, :4] = 128
        result = quantize(img, BW, dither='bayer')
        tile = result.indices[:, :4]
        assert int((tile == 0).sum()) == 8
        assert int((tile == 1).sum()) == 8
        assert np.all(result.indices[:, 4:] == 0)

    def test_same_value_same_position_same_index(self):
        block = _random_image(4, 4, seed=12)
        img = np.concatenate([block, block], axis=1)
        result = quantize(img, CGA, dither='bayer').indices
        assert np.array_equal(result[:, :4], result[:, 4:])


class TestUniformImages:
    @pytest.mark.parametrize('dither', DITHERERS)
    @pytest.mark.parametrize(
        'palette, color',
        [
            (CGA, (128, 128, 128)),
            (CGA, (200, 30, 90)),
            (BW, (100, 100, 100)),
            (BW, (128, 128, 128)),
            (DepthPalette(VGA_18BIT), (128, 128, 128)),
            (DepthPalette(HIGH_16BIT), (77, 130, 201)),
        ],
    )
    def test_color_outside_palette_maps_to_one_entry(self, palette, color, dither):
        result = quantize(_uniform(color, 16, 16), palette, dither=dither)
        expected = int(palette.nearest([color])[0])
        assert np.unique(result.indices).tolist() == [expected]


class TestErrors:
    def test_empty_palette(self):
        with pytest.raises(EmptyPaletteError) as exc_info:
            quantize(_random_image(), TablePalette([]))
        assert exc_info.value.stage == 'quantization'

    def test_unknown_ditherer(self):
        with pytest.raises(InvalidDitherer):
            quantize(_random_image(), CGA, dither='atkinson')

    def test_bad_shape(self):
        with pytest.raises(ValueError):
            quantize(np.zeros((4, 4), dtype=np.uint8), CGA)
