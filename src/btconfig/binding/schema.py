#!/usr/bin/env python3
"""
BTCONFIG SCHEMA - Destination Type Introspection
------------------------------------------------
Explains a destination type to the binder: which of the four shapes it has
(scalar, ordered sequence, keyed mapping, composite), what its element /
key / value types are, which named members it declares and how to build an
empty instance of it.

Supported spellings:
    list, List[T], list[T], Sequence[T], MutableSequence[T]     -> sequence
    dict, Dict[K, V], dict[K, V], Mapping[K, V], ...           -> mapping
    str, int, float, bool, Decimal, Enum subclasses, Any       -> scalar
    any other class (dataclass or annotated class)             -> composite
Optional[X] (and X | None) is treated as X.
"""

import collections.abc
import types
import typing
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Tuple, Union, get_args, get_origin

from btconfig.core.errors import SchemaError


class Shape(Enum):
    SCALAR = "scalar"
    SEQUENCE = "sequence"
    MAPPING = "mapping"
    COMPOSITE = "composite"


SCALAR_TYPES = (str, int, float, bool, Decimal)
SEQUENCE_ORIGINS = (list, collections.abc.Sequence, collections.abc.MutableSequence)
MAPPING_ORIGINS = (dict, collections.abc.Mapping, collections.abc.MutableMapping)
UNION_ORIGINS = tuple(o for o in (Union, getattr(types, "UnionType", None)) if o is not None)


def unwrap_optional(target: Any) -> Any:
    """Optional[X] -> X. Any other union is left alone."""
    if get_origin(target) in UNION_ORIGINS:
        members = [a for a in get_args(target) if a is not type(None)]
        if len(members) == 1:
            return members[0]
    return target


class SchemaDescriptor:
    """
    Introspection wrapper around one destination type.
    Created per lookup; nothing is cached between loads.
    """

    def __init__(self, target: Any):
        self.target = unwrap_optional(target)
        self.origin = get_origin(self.target) or self.target
        self.args = get_args(self.target)
        self.shape = self._classify()

    def __repr__(self) -> str:
        return f"SchemaDescriptor({self.name}, {self.shape.value})"

    @property
    def name(self) -> str:
        return getattr(self.target, "__name__", None) or repr(self.target)

    def classify(self) -> Shape:
        return self.shape

    def _classify(self) -> Shape:
        target = self.target
        if target is Any or target is object:
            return Shape.SCALAR

        origin = self.origin
        if not isinstance(origin, type):
            raise SchemaError(f"unsupported destination type: {target!r}")

        if issubclass(origin, Enum) or issubclass(origin, SCALAR_TYPES):
            return Shape.SCALAR
        if origin in SEQUENCE_ORIGINS:
            return Shape.SEQUENCE
        if origin in MAPPING_ORIGINS:
            return Shape.MAPPING
        return Shape.COMPOSITE

    def element_type(self) -> Any:
        """Declared element type of a sequence; bare lists hold strings."""
        self._expect(Shape.SEQUENCE)
        return self.args[0] if self.args else str

    def key_value_types(self) -> Tuple[Any, Any]:
        """Declared (key, value) types of a mapping; bare dicts map strings to strings."""
        self._expect(Shape.MAPPING)
        if len(self.args) == 2:
            return self.args[0], self.args[1]
        return str, str

    def iterate_members(self, instance: Any = None) -> Dict[str, Any]:
        """
        Named member slots of a composite, in declaration order, collected
        over the whole MRO. ClassVar annotations are not members.

        When `instance` is given, attributes it carries without an annotation
        (plain classes assigning in __init__) are members too, typed by their
        current value. A None value is typed as Any.
        """
        self._expect(Shape.COMPOSITE)
        try:
            hints = typing.get_type_hints(self.origin)
        except (NameError, TypeError) as e:
            raise SchemaError(f"cannot resolve members of {self.name}: {e}")

        members = {
            name: hint for name, hint in hints.items()
            if get_origin(hint) is not typing.ClassVar
        }
        for name, current in getattr(instance, "__dict__", {}).items():
            if name not in hints:
                members[name] = Any if current is None else type(current)
        return members

    def construct_default(self) -> Any:
        """A new, empty instance of the destination type."""
        if self.shape is Shape.SEQUENCE:
            return []
        if self.shape is Shape.MAPPING:
            return {}
        if self.shape is Shape.SCALAR:
            raise SchemaError(f"cannot bind a block into scalar type {self.name}")
        try:
            return self.origin()
        except TypeError as e:
            raise SchemaError(f"cannot construct a default {self.name}: {e}")

    def _expect(self, shape: Shape):
        if self.shape is not shape:
            raise SchemaError(f"{self.name} is a {self.shape.value}, not a {shape.value}")
