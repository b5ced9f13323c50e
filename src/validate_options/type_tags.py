"""Closed type-tag vocabulary and the value classifier.

``classify`` refines Python's native types into the ten tags requirements are written
against. Arrays, ``None`` and compiled patterns get their own tags, so ``object`` only
ever means "some other object".
"""

from __future__ import annotations

import numbers
import re
from collections.abc import Iterable
from enum import Enum, StrEnum
from typing import Final

from validate_options.errors import RequirementDefinitionError


class TypeTag(StrEnum):
    ARRAY = "array"
    BOOLEAN = "boolean"
    FUNCTION = "function"
    NULL = "null"
    NUMBER = "number"
    OBJECT = "object"
    REGEXP = "regexp"
    STRING = "string"
    SYMBOL = "symbol"
    UNDEFINED = "undefined"


class _Undefined:
    """Falsy singleton standing for "no value" (distinct from ``None``)."""

    __slots__ = ()
    _instance: _Undefined | None = None

    def __new__(cls) -> _Undefined:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNDEFINED"

    def __bool__(self) -> bool:
        return False

    def __reduce__(self) -> str:
        return "UNDEFINED"

    def __copy__(self) -> _Undefined:
        return self

    def __deepcopy__(self, memo: dict[int, object]) -> _Undefined:
        return self


UNDEFINED: Final = _Undefined()

ALL_TYPE_TAGS: Final[tuple[TypeTag, ...]] = tuple(TypeTag)
NULLISH_TYPE_TAGS: Final[tuple[TypeTag, ...]] = (TypeTag.UNDEFINED, TypeTag.NULL)


def classify(value: object) -> TypeTag:
    """Return the type tag of ``value``.

    Only ``None`` is ``null``: empty containers keep their own tag. ``StrEnum`` and
    ``IntEnum`` members classify by their value type; other enum members are ``symbol``.
    """

    if value is UNDEFINED:
        return TypeTag.UNDEFINED
    if value is None:
        return TypeTag.NULL
    if isinstance(value, bool):
        return TypeTag.BOOLEAN
    if isinstance(value, str):
        return TypeTag.STRING
    if isinstance(value, numbers.Number):
        return TypeTag.NUMBER
    if isinstance(value, Enum):
        return TypeTag.SYMBOL
    if isinstance(value, re.Pattern):
        return TypeTag.REGEXP
    if isinstance(value, (list, tuple)):
        return TypeTag.ARRAY
    if callable(value):
        return TypeTag.FUNCTION
    return TypeTag.OBJECT


def is_nullish(value: object) -> bool:
    return value is None or value is UNDEFINED


def parse_type_tag(value: object) -> TypeTag:
    """Convert a tag name to ``TypeTag``; names outside the vocabulary are caller bugs."""

    if isinstance(value, TypeTag):
        return value
    if not isinstance(value, str):
        raise RequirementDefinitionError(
            f"Internal error: requirement type must be a tag name, got {type(value).__name__}."
        )
    try:
        return TypeTag(value)
    except ValueError:
        raise RequirementDefinitionError(
            f'Internal error: invalid requirement type "{value}".'
        ) from None


def parse_type_tags(values: Iterable[object] | str) -> tuple[TypeTag, ...]:
    """Parse tag names into an order-preserving, duplicate-free tuple."""

    if isinstance(values, str):
        return (parse_type_tag(values),)
    if not isinstance(values, Iterable):
        raise RequirementDefinitionError(
            f"Internal error: requirement types must be a list of tag names, "
            f"got {type(values).__name__}."
        )
    return union_type_tags(tuple(parse_type_tag(item) for item in values))


def union_type_tags(*groups: Iterable[TypeTag]) -> tuple[TypeTag, ...]:
    """Order-preserving union: each tag once, at its first occurrence."""

    merged: list[TypeTag] = []
    for group in groups:
        for tag in group:
            if tag not in merged:
                merged.append(tag)
    return tuple(merged)


def without_nullish(tags: Iterable[TypeTag]) -> tuple[TypeTag, ...]:
    return tuple(tag for tag in tags if tag not in NULLISH_TYPE_TAGS)


__all__ = [
    "ALL_TYPE_TAGS",
    "NULLISH_TYPE_TAGS",
    "TypeTag",
    "UNDEFINED",
    "classify",
    "is_nullish",
    "parse_type_tag",
    "parse_type_tags",
    "union_type_tags",
    "without_nullish",
]
