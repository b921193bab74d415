'''
Helper functions for the library
'''
from __future__ import annotations

import logging

from .exceptions import DeviceReadError, InvalidInputError, ParseError, format_exc
from .types import IntPercentage, RawValue

_logger = logging.getLogger(__name__)


def _div_round_half_up(numerator: int, denominator: int) -> int:
    '''
    Integer division rounding halves away from zero. Works with a negative
    numerator, which the sweep engine relies on when fading downwards.
    '''
    if denominator <= 0:
        raise ValueError(f'denominator must be positive, not {denominator}')
    sign = -1 if numerator < 0 else 1
    return sign * ((2 * abs(numerator) + denominator) // (2 * denominator))


def clamp(value: int, lower: int, upper: int) -> int:
    '''Restrict `value` to the range [`lower`, `upper`]'''
    return min(upper, max(lower, value))


def percent_of(raw: RawValue, max_raw: RawValue) -> IntPercentage:
    '''
    Convert a raw brightness value into a percentage of `max_raw`.

    This is the only raw -> percent conversion in the library. It rounds half
    up and uses integer arithmetic only, so the result never drifts due to
    floating point error.

    Args:
        raw: the raw value. Clamped to [0, max_raw] first
        max_raw: the device's maximum raw value

    Returns:
        `.types.IntPercentage`

    Raises:
        InvalidInputError: if `max_raw` is not positive

    Example:
        ```python
        from sysfs_backlight.helpers import percent_of

        percent_of(128, 255)
        # 50
        ```
    '''
    if max_raw <= 0:
        raise InvalidInputError(f'max brightness must be positive, not {max_raw}')
    return _div_round_half_up(clamp(raw, 0, max_raw) * 100, max_raw)


def to_raw(percent: IntPercentage, max_raw: RawValue) -> RawValue:
    '''
    Convert a percentage into a raw value on a scale of [0, `max_raw`].

    The inverse of `percent_of`. Converting raw -> percent -> raw lands within
    one unit of the original value for any `max_raw` up to 200. Above that a
    single percent spans several raw units, so the error is bounded by
    `ceil(max_raw / 200)` instead.

    Args:
        percent: the percentage. Clamped to [0, 100] first
        max_raw: the device's maximum raw value

    Raises:
        InvalidInputError: if `max_raw` is not positive
    '''
    if max_raw <= 0:
        raise InvalidInputError(f'max brightness must be positive, not {max_raw}')
    return _div_round_half_up(clamp(percent, 0, 100) * max_raw, 100)


def parse_raw(text: str) -> RawValue:
    '''
    Parse the contents of a sysfs brightness attribute.

    Raises:
        ParseError: if the text is not a non-negative ASCII decimal integer
    '''
    stripped = text.strip()
    if not stripped.isascii() or not stripped.isdigit():
        raise ParseError(f'expected a non-negative decimal integer, got {text!r}')
    return int(stripped)


def read_raw(path: str) -> RawValue:
    '''
    Read a brightness attribute (`brightness` or `max_brightness`) from sysfs

    Raises:
        DeviceReadError: if the file cannot be read
        ParseError: if the file does not contain a valid value
    '''
    try:
        with open(path, 'r') as f:
            content = f.read()
    except (OSError, UnicodeDecodeError) as e:
        _logger.debug(f'failed to read {path} - {format_exc(e)}')
        raise DeviceReadError(f'failed to read {path}') from e

    try:
        return parse_raw(content)
    except ParseError as e:
        raise ParseError(f'failed to parse {path}: {e}') from e
