"""Format dispatch table and the ``parse`` / ``serialize`` entry points.

``FORMAT_CODECS`` maps every registered format tag to a
``(decoder, encoder)`` pair. A tag missing from the table is a token
pattern and is handled by :func:`decode_pattern` / :func:`encode_pattern`.
``CalendarInstantProperty`` is output-only and has no decoder.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from datexpr.calendar.instant import CalendarInstant
from datexpr.codec import decoders, encoders
from datexpr.codec.value import destructure, destructure_format
from datexpr.domain.errors import ShapeValidationError
from datexpr.domain.formats import DateFormatTag
from datexpr.domain.shapes import validate_type

Decoder = Callable[[Any, Any], CalendarInstant]
Encoder = Callable[[CalendarInstant, Any], Any]

FORMAT_CODECS: dict[str, tuple[Decoder | None, Encoder]] = {
    DateFormatTag.ISO: (decoders.decode_iso, encoders.encode_iso),
    DateFormatTag.ISO_DATE: (decoders.decode_iso, encoders.encode_iso_date),
    DateFormatTag.ISO_WEEK_DATE: (decoders.decode_iso, encoders.encode_iso_week_date),
    DateFormatTag.ISO_TIME: (decoders.decode_iso, encoders.encode_iso_time),
    DateFormatTag.RFC2822: (decoders.decode_rfc2822, encoders.encode_rfc2822),
    DateFormatTag.HTTP: (decoders.decode_http, encoders.encode_http),
    DateFormatTag.SQL: (decoders.decode_sql, encoders.encode_sql),
    DateFormatTag.SQL_DATE: (decoders.decode_sql, encoders.encode_sql_date),
    DateFormatTag.SQL_TIME: (decoders.decode_sql, encoders.encode_sql_time),
    DateFormatTag.UNIX_EPOCH_MS: (decoders.decode_epoch_ms, encoders.encode_epoch_ms),
    DateFormatTag.UNIX_EPOCH_S: (decoders.decode_epoch_s, encoders.encode_epoch_s),
    DateFormatTag.NATIVE_DATE: (decoders.decode_native, encoders.encode_native),
    DateFormatTag.PLAIN_OBJECT: (decoders.decode_plain_object, encoders.encode_plain_object),
    DateFormatTag.CALENDAR_INSTANT: (decoders.decode_instant, encoders.encode_instant),
    DateFormatTag.CALENDAR_INSTANT_PROPERTY: (None, encoders.encode_property),
}


def parse(date_value: Any) -> CalendarInstant:
    """Decode a date value (bare, ``[value, options]`` or ``[value, tag, options]``).

    Raises:
        ShapeValidationError: the raw value's type does not fit its format.
    """
    raw, tag, options = destructure(date_value)
    if isinstance(raw, CalendarInstant):
        return raw
    codec = FORMAT_CODECS.get(tag)
    if codec is None:
        return decoders.decode_pattern(raw, tag, options)
    decoder = codec[0]
    if decoder is None:
        msg = f"Format '{tag}' can only be used for output"
        raise ShapeValidationError(msg, expected=tuple(_readable_formats()), actual=tag)
    return decoder(raw, options)


def serialize(instant: CalendarInstant, format_request: Any = None) -> Any:
    """Encode *instant* per a format request (tag or ``[tag, options]``).

    An ``options.zone`` reprojects the instant before rendering; the
    absolute instant is unchanged.
    """
    tag, options = destructure_format(format_request)
    validate_type("string", tag, label="format tag")
    if isinstance(options, Mapping) and options.get("zone"):
        instant = instant.set_zone(options["zone"])
    codec = FORMAT_CODECS.get(tag)
    if codec is None:
        return encoders.encode_pattern(instant, tag)
    return codec[1](instant, options)


def _readable_formats() -> list[str]:
    return [tag for tag, (decoder, _) in FORMAT_CODECS.items() if decoder is not None]
