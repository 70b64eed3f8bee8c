"""Tests for the retroimg CLI entry point."""

import json
from pathlib import Path

import numpy as np
import pytest
from PIL import Image
from retroimg.__main__ import main
from retroimg.core.env import ENV_OPTIONS

SMALL = ['-R', '16x10', '-S', '32x20']


@pytest.fixture(autouse=True)
def workspace(tmp_path: Path, monkeypatch) -> Path:
    for var in ENV_OPTIONS.values():
        monkeypatch.setenv(var, '')
        monkeypatch.delenv(var)
    # .git stops the .env walk-up at tmp_path
    (tmp_path / '.git').mkdir()
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def photo(workspace: Path) -> Path:
    path = workspace / 'photo.png'
    rng = np.random.default_rng(0)
    Image.fromarray(rng.integers(0, 256, size=(40, 64, 3), dtype=np.uint8)).save(path)
    return path


class TestConvert:
    def test_writes_default_output(self, photo: Path, workspace: Path):
        main([str(photo), '-s', 'fullcga', *SMALL])
        with Image.open(workspace / 'out.png') as out:
            assert out.size == (32, 20)

    def test_json_report(self, photo: Path, workspace: Path, capsys):
        main([str(photo), '-o', str(workspace / 'cga.png'), '-s', 'cga', '--json', *SMALL])
        obj = json.loads(capsys.readouterr().out)
        assert obj['standard'] == 'cgamode4'
        assert obj['palette']['size'] == 4
        assert 0 <= obj['sub_palette']['background'] < 16
        assert obj['dimensions']['internal'] == {'width': 16, 'height': 10}

    def test_verbose_goes_to_stderr(self, photo: Path, capsys):
        main([str(photo), '-s', 'bw', '-v', '--no-dither', *SMALL])
        captured = capsys.readouterr()
        assert captured.out == ''
        assert 'internal resolution: 16×10' in captured.err
        assert 'dither: none' in captured.err

    def test_num_colors_and_pixel_ratio(self, photo: Path, workspace: Path, capsys):
        main([str(photo), '-s', 'ega', '-c', '4', '-r', '5:6', '-R', '16x10', '--json'])
        obj = json.loads(capsys.readouterr().out)
        assert obj['palette']['size'] <= 4
        assert obj['dimensions']['output'] == {'width': 80, 'height': 60}


class TestErrors:
    def test_invalid_standard(self, photo: Path, workspace: Path, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main([str(photo), '-s', 'sega', *SMALL])
        assert exc_info.value.code == 1
        assert 'Unknown color standard' in capsys.readouterr().err
        assert not (workspace / 'out.png').exists()

    def test_invalid_color_count(self, photo: Path, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main([str(photo), '-s', 'ega', '-c', '65', *SMALL])
        assert exc_info.value.code == 1
        assert '65' in capsys.readouterr().err

    def test_invalid_ditherer(self, photo: Path, capsys):
        with pytest.raises(SystemExit):
            main([str(photo), '-d', 'atkinson', *SMALL])
        assert 'Unknown ditherer' in capsys.readouterr().err

    def test_missing_file(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(['nope.png'])
        assert exc_info.value.code == 1
        assert 'image not found' in capsys.readouterr().err

    def test_no_input_prints_help(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main([])
        assert exc_info.value.code == 1
        assert 'usage' in capsys.readouterr().out.lower()


class TestListings:
    def test_list_standards(self, capsys):
        main(['--list-standards'])
        out = capsys.readouterr().out
        for name in ('bw', 'cgamode4', 'cgamode5', 'fullcga', 'ega', '16bit', '18bit', '24bit'):
            assert name in out

    def test_list_ditherers(self, capsys):
        main(['--list-ditherers'])
        out = capsys.readouterr().out
        assert 'floyd-steinberg' in out
        assert 'bayer' in out


class TestEnvironment:
    def test_standard_from_dotenv(self, photo: Path, workspace: Path, capsys):
        (workspace / '.env').write_text('RETROIMG_STANDARD=bw\n')
        main([str(photo), '--json', *SMALL])
        assert json.loads(capsys.readouterr().out)['standard'] == 'bw'

    def test_flag_beats_environment(self, photo: Path, monkeypatch, capsys):
        monkeypatch.setenv('RETROIMG_STANDARD', 'bw')
        main([str(photo), '-s', 'fullcga', '--json', *SMALL])
        assert json.loads(capsys.readouterr().out)['standard'] == 'fullcga'

    def test_num_colors_from_environment(self, photo: Path, monkeypatch, capsys):
        monkeypatch.setenv('RETROIMG_NUM_COLORS', '2')
        main([str(photo), '-s', 'ega', '--json', *SMALL])
        assert json.loads(capsys.readouterr().out)['palette']['size'] <= 2

    def test_bad_integer_in_environment(self, photo: Path, monkeypatch, capsys):
        monkeypatch.setenv('RETROIMG_NUM_COLORS', 'many')
        with pytest.raises(SystemExit):
            main([str(photo), '-s', 'ega', *SMALL])
        assert 'Invalid integer' in capsys.readouterr().err
