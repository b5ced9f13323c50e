"""Immutable per-key requirement model.

A requirement is built once and reused across many validation calls. Its ``types``
field accepts either tag names or a reference to another requirement; references are
resolved while the requirement is constructed, so the engine only ever sees a concrete
tuple of ``TypeTag``.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Final, NoReturn, TypeAlias

from validate_options.errors import RequirementDefinitionError
from validate_options.type_tags import (
    NULLISH_TYPE_TAGS,
    UNDEFINED,
    TypeTag,
    parse_type_tags,
)

Transform: TypeAlias = Callable[[Any], Any]
Predicate: TypeAlias = Callable[[Any], object]
TypeSource: TypeAlias = "Requirement | Mapping[str, object] | Iterable[TypeTag | str] | str"
RequirementLike: TypeAlias = "Requirement | Mapping[str, object]"

REQUIREMENT_FIELDS: Final[frozenset[str]] = frozenset(
    {"default", "transform", "types", "predicate", "message"}
)
# Short field names accepted in inline mappings.
REQUIREMENT_FIELD_ALIASES: Final[Mapping[str, str]] = MappingProxyType(
    {"dflt": "default", "map": "transform", "is": "types", "ok": "predicate", "msg": "message"}
)


@dataclass(frozen=True, slots=True)
class Requirement:
    """Validation rule for one option key.

    Parameters
    ----------
    default : object, optional
        Substituted when the key is absent or ``UNDEFINED``. Not copied: a mutable
        default is shared by every result it lands in.
    transform : callable, optional
        Applied before the type and predicate checks. Exceptions other than this
        package's own are discarded and the original value is kept.
    types : iterable of tag names, Requirement or mapping, optional
        Accepted type tags, or another requirement whose accepted tags are reused.
    predicate : callable, optional
        Acceptance test run after the type check; a falsy result rejects the value.
    message : str, optional
        Failure message used verbatim instead of the generated one.
    """

    default: object = UNDEFINED
    transform: Transform | None = None
    types: tuple[TypeTag, ...] | None = None
    predicate: Predicate | None = None
    message: str | None = None

    def __post_init__(self) -> None:
        if self.transform is not None and not callable(self.transform):
            _fail("transform", f"expected callable, got {type(self.transform).__name__}")
        if self.predicate is not None and not callable(self.predicate):
            _fail("predicate", f"expected callable, got {type(self.predicate).__name__}")
        if self.message is not None and not isinstance(self.message, str):
            _fail("message", f"expected string, got {type(self.message).__name__}")
        object.__setattr__(self, "types", resolve_types(self.types))

    @property
    def has_default(self) -> bool:
        return self.default is not UNDEFINED

    @property
    def is_optional(self) -> bool:
        """True when the accepted types admit both ``undefined`` and ``null``."""

        if self.types is None:
            return False
        return all(tag in self.types for tag in NULLISH_TYPE_TAGS)

    @property
    def type_names(self) -> tuple[str, ...] | None:
        if self.types is None:
            return None
        return tuple(tag.value for tag in self.types)

    def replace(self, **changes: Any) -> Requirement:
        """Return a copy with ``changes`` applied; the original is left untouched."""

        return dataclasses.replace(self, **changes)


def coerce_requirement(value: object) -> Requirement:
    """Return ``value`` as a ``Requirement``, building one from an inline mapping.

    Inline mappings may use the short names ``dflt``, ``map``, ``is``, ``ok`` and ``msg``
    for ``default``, ``transform``, ``types``, ``predicate`` and ``message``.
    """

    if isinstance(value, Requirement):
        return value
    if not isinstance(value, Mapping):
        _fail("requirement", f"expected Requirement or mapping, got {type(value).__name__}")

    fields: dict[str, Any] = {}
    spelled: dict[str, str] = {}
    for key, item in value.items():
        if not isinstance(key, str):
            _fail("requirement", f"field names must be strings, got {type(key).__name__}")
        name = REQUIREMENT_FIELD_ALIASES.get(key, key)
        if name in fields:
            _fail("requirement", f"field {name!r} given twice, as {spelled[name]!r} and {key!r}")
        fields[name] = item
        spelled[name] = key

    unknown = sorted(key for key in fields if key not in REQUIREMENT_FIELDS)
    if unknown:
        _fail("requirement", f"unexpected fields: {unknown}")
    return Requirement(**fields)


def resolve_types(source: object) -> tuple[TypeTag, ...] | None:
    """Resolve a type declaration to a concrete tag tuple.

    ``None`` means "no type constraint". A ``Requirement`` or inline mapping resolves to
    its own accepted types, recursively.
    """

    if source is None:
        return None
    if isinstance(source, Requirement):
        return source.types
    if isinstance(source, Mapping):
        return coerce_requirement(source).types
    return parse_type_tags(source)  # type: ignore[arg-type]


def _fail(path: str, message: str) -> NoReturn:
    raise RequirementDefinitionError(f"{path}: {message}")


__all__ = [
    "REQUIREMENT_FIELDS",
    "REQUIREMENT_FIELD_ALIASES",
    "Predicate",
    "Requirement",
    "RequirementLike",
    "Transform",
    "TypeSource",
    "coerce_requirement",
    "resolve_types",
]
