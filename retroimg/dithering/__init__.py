"""Dithering strategies.

Every module in this package that defines a `ditherer` object is
registered by retroimg.registry.discover(); modules starting with an
underscore are skipped.
"""
