"""Configuration defaults from the environment and .env files.

Precedence for every option (first wins):
  1. Command-line flag.
  2. Existing OS environment variable RETROIMG_<NAME>.
  3. .env file given with --env-file.
  4. First .env found walking up from cwd, stopping at a .git boundary.

Values from .env files are only copied into os.environ for keys that are
not already set.
"""

import os
from pathlib import Path

ENV_PREFIX = 'RETROIMG_'

# option name -> environment variable
ENV_OPTIONS = {
    'standard': 'RETROIMG_STANDARD',
    'num_colors': 'RETROIMG_NUM_COLORS',
    'dither': 'RETROIMG_DITHER',
    'loss': 'RETROIMG_LOSS',
    'resolution': 'RETROIMG_RESOLUTION',
    'out_size': 'RETROIMG_OUT_SIZE',
}


def find_dotenv(start: Path) -> Path | None:
    """Return the nearest .env at or above start, without crossing a repo root."""
    current = start.resolve()
    while True:
        candidate = current / '.env'
        if candidate.is_file():
            return candidate
        # .git is a directory in a clone and a file in a worktree
        if (current / '.git').exists():
            return None
        if current.parent == current:
            return None
        current = current.parent


def parse_dotenv(path: Path) -> dict[str, str]:
    """Read KEY=value lines; quotes around values are stripped, comments skipped."""
    values: dict[str, str] = {}
    for raw in path.read_text(encoding='utf-8').splitlines():
        line = raw.strip()
        if not line or line.startswith('#') or '=' not in line:
            continue
        if line.startswith('export '):
            line = line[len('export ') :]
        key, _, value = line.partition('=')
        key = key.strip()
        if key:
            values[key] = value.strip().strip('"').strip("'")
    return values


def load_env(env_file: str | None = None) -> Path | None:
    """Copy .env entries into os.environ for unset keys. Returns the file used, if any."""
    if env_file:
        path: Path | None = Path(env_file)
        if not path.is_file():
            return None
    else:
        path = find_dotenv(Path.cwd())
        if path is None:
            return None

    for key, value in parse_dotenv(path).items():
        os.environ.setdefault(key, value)
    return path


def env_default(option: str, fallback: str | None = None) -> str | None:
    """Default for a CLI option from its RETROIMG_* variable; empty counts as unset."""
    value = os.environ.get(ENV_OPTIONS[option], '').strip()
    return value or fallback
