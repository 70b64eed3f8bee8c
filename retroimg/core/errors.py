"""Typed failures raised by retroimg.

Every error carries the pipeline stage it was detected in so callers
can report which step and which constraint failed.
"""


class RetroImgError(Exception):
    """Base class for all conversion errors."""

    stage = 'config'


class InvalidStandard(RetroImgError):
    """Unrecognized hardware standard identifier."""

    stage = 'selection'

    def __init__(self, name: str, available: list[str] | None = None):
        self.name = name
        msg = f'Unknown color standard: {name!r}'
        if available:
            msg += f'. Available: {", ".join(available)}'
        super().__init__(msg)


class InvalidColorCount(RetroImgError):
    """Requested color count is <= 0 or larger than the master palette."""

    stage = 'selection'

    def __init__(self, count: int, maximum: int | None = None):
        self.count = count
        self.maximum = maximum
        if count <= 0:
            msg = f'Number of colors must be positive, got {count}'
        else:
            msg = f'Number of colors {count} exceeds the master palette size {maximum}'
        super().__init__(msg)


class EmptyPaletteError(RetroImgError):
    """The effective palette has no entries (internal invariant violation)."""

    stage = 'quantization'

    def __init__(self) -> None:
        super().__init__('Effective palette is empty')


class InvalidDitherer(RetroImgError):
    """Unknown dithering strategy name."""

    stage = 'quantization'

    def __init__(self, name: str, available: list[str] | None = None):
        self.name = name
        msg = f'Unknown ditherer: {name!r}'
        if available:
            msg += f'. Available: {", ".join(available)}'
        super().__init__(msg)


class InvalidLoss(RetroImgError):
    """Unknown distance/loss algorithm name."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f'Invalid distance/loss algorithm {name!r}, should be "L1" or "L2"')


class InvalidGeometry(RetroImgError):
    """Malformed crop rectangle, resolution or pixel ratio."""

    stage = 'geometry'
