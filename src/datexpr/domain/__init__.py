"""Domain layer: format tags, calendar units, shapes, and errors.

This layer depends only on the standard library.
It must never import from calendar, codec, expressions, or config.
"""
