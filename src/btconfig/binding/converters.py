#!/usr/bin/env python3
"""
BTCONFIG CONVERTERS - Scalar Conversion
---------------------------------------
Locale-invariant conversion of leaf strings into primitive and enum values.
Numbers use '.' as decimal separator and never accept digit grouping
('1,000' or '1_000'); booleans are 'true' / 'false' in any case; enums
match member names case-insensitively.
"""

import re
from decimal import Decimal, InvalidOperation
from enum import Enum, Flag
from typing import Any, Optional

from btconfig.core.errors import ConversionError

INT_PATTERN = re.compile(r"^\s*[+-]?[0-9]+\s*$")
FLOAT_PATTERN = re.compile(r"^\s*[+-]?([0-9]+\.?[0-9]*|\.[0-9]+)([eE][+-]?[0-9]+)?\s*$")
FLOAT_SPECIALS = {
    "nan": "nan",
    "infinity": "inf",
    "+infinity": "inf",
    "-infinity": "-inf",
}
BOOL_VALUES = {"true": True, "false": False}


def convert_scalar(value: str, target: Any, path: Optional[str] = None) -> Any:
    """
    Converts `value` to `target`. Raises ConversionError when the string
    does not match the target's format.
    """
    if target is Any or target is object:
        return value

    if isinstance(target, type) and issubclass(target, Enum):
        return _convert_enum(value, target, path)
    if target is bool:
        return _convert_bool(value, path)
    if isinstance(target, type) and issubclass(target, int):
        return target(_convert_int(value, target, path))
    if isinstance(target, type) and issubclass(target, float):
        return target(_convert_float(value, target, path))
    if isinstance(target, type) and issubclass(target, Decimal):
        return target(_convert_decimal(value, target, path))
    if isinstance(target, type) and issubclass(target, str):
        return target(value)

    raise ConversionError(value, target, path, "not a scalar type")


def _convert_bool(value: str, path: Optional[str]) -> bool:
    try:
        return BOOL_VALUES[value.strip().lower()]
    except KeyError:
        raise ConversionError(value, bool, path, "expected 'true' or 'false'")


def _convert_int(value: str, target: type, path: Optional[str]) -> int:
    if not INT_PATTERN.match(value):
        raise ConversionError(value, target, path, "not an integer")
    return int(value)


def _convert_float(value: str, target: type, path: Optional[str]) -> float:
    special = FLOAT_SPECIALS.get(value.strip().lower())
    if special is not None:
        return float(special)
    if not FLOAT_PATTERN.match(value):
        raise ConversionError(value, target, path, "not a number")
    return float(value)


def _convert_decimal(value: str, target: type, path: Optional[str]) -> Decimal:
    special = FLOAT_SPECIALS.get(value.strip().lower())
    if special is not None:
        return Decimal(special)
    if not FLOAT_PATTERN.match(value):
        raise ConversionError(value, target, path, "not a number")
    try:
        return Decimal(value.strip())
    except InvalidOperation:
        raise ConversionError(value, target, path, "not a number")


def _convert_enum(value: str, target: type, path: Optional[str]) -> Enum:
    """
    Case-insensitive member name lookup. Integer strings are looked up
    by value; Flag enums also accept comma separated member names.
    """
    text = value.strip()

    member = _lookup_member(text, target)
    if member is not None:
        return member

    if issubclass(target, Flag) and "," in text:
        combined = None
        for part in text.split(","):
            flag = _lookup_member(part.strip(), target)
            if flag is None:
                raise ConversionError(value, target, path, f"unknown member {part.strip()!r}")
            combined = flag if combined is None else combined | flag
        return combined

    if INT_PATTERN.match(text):
        # Flag enums also accept combined values such as 3 == READ | WRITE
        try:
            return target(int(text))
        except ValueError:
            pass

    raise ConversionError(value, target, path, "no member with that name")


def _lookup_member(name: str, target: type) -> Optional[Enum]:
    if name in target.__members__:
        return target.__members__[name]
    lowered = name.lower()
    for member_name, member in target.__members__.items():
        if member_name.lower() == lowered:
            return member
    return None
