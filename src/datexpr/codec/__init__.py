"""Codec layer: reading dates from and writing dates to external forms."""

from datexpr.codec.registry import FORMAT_CODECS, parse, serialize

__all__ = ["FORMAT_CODECS", "parse", "serialize"]
