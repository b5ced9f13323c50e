"""Requirement combinators and ready-made primitive requirements.

Combinators never mutate their arguments: every call returns a fresh requirement
with its own tag tuple.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Final

from validate_options.errors import RequirementDefinitionError
from validate_options.requirements import Requirement, TypeSource, coerce_requirement, resolve_types
from validate_options.type_tags import (
    ALL_TYPE_TAGS,
    NULLISH_TYPE_TAGS,
    TypeTag,
    union_type_tags,
    without_nullish,
)


def required(requirement: TypeSource) -> Requirement:
    """Forbid absence: drop ``undefined`` and ``null`` from the accepted types.

    A requirement without declared types starts from the full vocabulary.
    """

    base = _as_requirement(requirement)
    types = base.types if base.types is not None else ALL_TYPE_TAGS
    return base.replace(types=without_nullish(types))


def optional(requirement: TypeSource) -> Requirement:
    """Permit absence: accepted types plus ``undefined`` and ``null``, each exactly once.

    A requirement without declared types starts from the empty set, so the result accepts
    only absent values.
    """

    base = _as_requirement(requirement)
    types = base.types if base.types is not None else ()
    return base.replace(types=without_nullish(types) + NULLISH_TYPE_TAGS)


def either(*requirements: TypeSource) -> Requirement:
    """Accept any type accepted by one of ``requirements``.

    Tags keep the order of their first occurrence. An argument that declares no types
    accepts everything, so it contributes the full vocabulary.
    """

    if not requirements:
        raise RequirementDefinitionError("either: expected at least one requirement")

    groups: list[tuple[TypeTag, ...]] = []
    for item in requirements:
        types = resolve_types(item)
        groups.append(types if types is not None else ALL_TYPE_TAGS)
    return Requirement(types=union_type_tags(*groups))


def _as_requirement(source: TypeSource) -> Requirement:
    if isinstance(source, (Requirement, Mapping)):
        return coerce_requirement(source)
    # Raw tag lists are accepted wherever a requirement is.
    return Requirement(types=resolve_types(source))


STRING: Final[Requirement] = Requirement(types=(TypeTag.STRING, *NULLISH_TYPE_TAGS))
NUMBER: Final[Requirement] = Requirement(types=(TypeTag.NUMBER, *NULLISH_TYPE_TAGS))
BOOLEAN: Final[Requirement] = Requirement(types=(TypeTag.BOOLEAN, *NULLISH_TYPE_TAGS))
OBJECT: Final[Requirement] = Requirement(types=(TypeTag.OBJECT, *NULLISH_TYPE_TAGS))
ARRAY: Final[Requirement] = Requirement(types=(TypeTag.ARRAY, *NULLISH_TYPE_TAGS))

PRIMITIVES: Final[dict[str, Requirement]] = {
    "string": STRING,
    "number": NUMBER,
    "boolean": BOOLEAN,
    "object": OBJECT,
    "array": ARRAY,
}


__all__ = [
    "ARRAY",
    "BOOLEAN",
    "NUMBER",
    "OBJECT",
    "PRIMITIVES",
    "STRING",
    "either",
    "optional",
    "required",
]
