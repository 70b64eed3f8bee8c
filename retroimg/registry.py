"""Ditherer auto-discovery and registration.

Scans retroimg/dithering/ for modules that define a `ditherer` object of
type Ditherer and collects them into a dict keyed by name.
"""

import importlib
import pkgutil

import retroimg.dithering as dithering_pkg
from retroimg.core.errors import InvalidDitherer
from retroimg.core.types import Ditherer

_registry: dict[str, Ditherer] = {}


def discover() -> dict[str, Ditherer]:
    """Import all dithering modules and return the registry."""
    if _registry:
        return _registry

    for _importer, modname, _ispkg in pkgutil.iter_modules(dithering_pkg.__path__):
        if modname.startswith('_'):
            continue
        module = importlib.import_module(f'{dithering_pkg.__name__}.{modname}')
        candidate = getattr(module, 'ditherer', None)
        if isinstance(candidate, Ditherer):
            _registry[candidate.name] = candidate

    return _registry


def get(name: str) -> Ditherer:
    """Get a ditherer by name."""
    reg = discover()
    if name not in reg:
        raise InvalidDitherer(name, sorted(reg))
    return reg[name]


def all_ditherers() -> dict[str, Ditherer]:
    """Return all registered ditherers."""
    return discover()
