"""retroimg.core — Foundation layer.

Contains the distance model, master palette catalog, color standards,
effective palettes, shared types, geometry helpers, env loading and the
report builder. This module has NO dependencies on retroimg.dithering,
retroimg.registry or the pipeline modules.
Only stdlib, numpy, and PIL are allowed here.
"""
