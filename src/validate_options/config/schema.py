"""
validate-options — requirement document schema.

File: src/validate_options/config/schema.py

Purpose
- Validate declarative requirement documents and build ``Requirement`` objects from them.

Document layout
- ``schema_version`` (optional int, defaults to the current version).
- ``requirements``: table of option key -> entry. Entry fields: ``types``, ``presence``,
  ``default``, ``message``, ``choices``, ``pattern``.

Functional requirements
- Report every malformed field as a structured issue (field path + message).
- Never build a partial requirement set: any issue fails the whole document.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Final

from validate_options.combinators import PRIMITIVES, optional, required
from validate_options.errors import RequirementDefinitionError
from validate_options.requirements import Requirement
from validate_options.type_tags import ALL_TYPE_TAGS, TypeTag, classify, parse_type_tags

REQUIREMENT_SCHEMA_VERSION: Final[int] = 1
PRESENCE_VALUES: Final[tuple[str, ...]] = ("optional", "required")

_DOCUMENT_FIELDS: Final[frozenset[str]] = frozenset({"schema_version", "requirements"})
_ENTRY_FIELDS: Final[frozenset[str]] = frozenset(
    {"types", "presence", "default", "message", "choices", "pattern"}
)


@dataclass(frozen=True, slots=True)
class DocumentIssue:
    """Single structured document problem."""

    path: str
    message: str


@dataclass(frozen=True, slots=True)
class RequirementDocumentResult:
    """Validation result with built requirements when no issues were found."""

    requirements: dict[str, Requirement] | None
    issues: tuple[DocumentIssue, ...]

    @property
    def is_valid(self) -> bool:
        return self.requirements is not None and not self.issues


class RequirementFileError(ValueError):
    """Raised when a requirement or options file cannot be read or parsed."""


class RequirementDocumentError(RequirementFileError):
    """Raised when a requirement document is structurally invalid."""

    def __init__(self, issues: Sequence[DocumentIssue], *, source: str | None = None) -> None:
        self.issues = tuple(issues)
        self.source = source
        if not self.issues:
            rendered = "unknown validation failure"
        else:
            rendered = "\n".join(f"- {item.path}: {item.message}" for item in self.issues)
        where = f" ({source})" if source else ""
        super().__init__(f"invalid requirement document{where}:\n{rendered}")


class _IssueCollector:
    __slots__ = ("_items",)

    def __init__(self) -> None:
        self._items: list[DocumentIssue] = []

    def add(self, path: str, message: str) -> None:
        self._items.append(DocumentIssue(path=path, message=message))

    def items(self) -> tuple[DocumentIssue, ...]:
        return tuple(self._items)

    def __len__(self) -> int:
        return len(self._items)

    @property
    def has_issues(self) -> bool:
        return bool(self._items)


def migration_guidance(found_version: int) -> str:
    """Return migration guidance for a schema version mismatch."""

    if found_version < REQUIREMENT_SCHEMA_VERSION:
        return (
            f"schema version {found_version} is older than supported "
            f"{REQUIREMENT_SCHEMA_VERSION}; upgrade the requirement document"
        )
    if found_version > REQUIREMENT_SCHEMA_VERSION:
        return (
            f"schema version {found_version} is newer than supported "
            f"{REQUIREMENT_SCHEMA_VERSION}; upgrade validate-options"
        )
    return "schema version is current"


def validate_requirement_document(
    payload: Mapping[str, object] | object,
) -> RequirementDocumentResult:
    """Validate a parsed document and build its requirements, collecting every issue."""

    issues = _IssueCollector()
    root = _as_object(payload, "<root>", issues)
    if root is None:
        return RequirementDocumentResult(requirements=None, issues=issues.items())

    _reject_unknown_keys(root, _DOCUMENT_FIELDS, "", issues)

    if "schema_version" in root:
        version = _as_int(root["schema_version"], "schema_version", issues, minimum=1)
        if version is not None and version != REQUIREMENT_SCHEMA_VERSION:
            issues.add("schema_version", migration_guidance(version))

    if "requirements" not in root:
        issues.add("requirements", "missing required field")
        return RequirementDocumentResult(requirements=None, issues=issues.items())

    entries = _as_object(root["requirements"], "requirements", issues)
    built: dict[str, Requirement] = {}
    if entries is not None:
        for key, entry in entries.items():
            requirement = _build_entry(entry, _join("requirements", key), issues)
            if requirement is not None:
                built[key] = requirement

    if issues.has_issues:
        return RequirementDocumentResult(requirements=None, issues=issues.items())
    return RequirementDocumentResult(requirements=built, issues=())


def build_requirements(
    payload: Mapping[str, object] | object,
    *,
    source: str | None = None,
) -> dict[str, Requirement]:
    """Build requirements from a parsed document or raise ``RequirementDocumentError``."""

    result = validate_requirement_document(payload)
    if result.requirements is None:
        raise RequirementDocumentError(result.issues, source=source)
    return result.requirements


def describe_requirement(requirement: Requirement) -> dict[str, Any]:
    """Return a JSON-friendly summary of a requirement (callables are reported as flags)."""

    return {
        "types": list(requirement.type_names) if requirement.type_names is not None else None,
        "optional": requirement.is_optional,
        "default": requirement.default if requirement.has_default else None,
        "has_default": requirement.has_default,
        "has_transform": requirement.transform is not None,
        "has_predicate": requirement.predicate is not None,
        "message": requirement.message,
    }


def _build_entry(entry: object, path: str, issues: _IssueCollector) -> Requirement | None:
    fields = _as_object(entry, path, issues)
    if fields is None:
        return None

    before = len(issues)
    _reject_unknown_keys(fields, _ENTRY_FIELDS, path, issues)

    types: tuple[TypeTag, ...] | None = None
    if "types" in fields:
        types = _as_types(fields["types"], _join(path, "types"), issues)

    presence: str | None = None
    if "presence" in fields:
        presence = _as_enum(
            fields["presence"], _join(path, "presence"), issues, allowed_values=PRESENCE_VALUES
        )

    message: str | None = None
    if "message" in fields:
        message = _as_str(fields["message"], _join(path, "message"), issues)

    checks: list[Callable[[object], bool]] = []
    if "choices" in fields:
        choices = _as_choices(fields["choices"], _join(path, "choices"), issues)
        if choices is not None:
            checks.append(_one_of(choices))
    if "pattern" in fields:
        pattern = _as_pattern(fields["pattern"], _join(path, "pattern"), issues)
        if pattern is not None:
            checks.append(_matches(pattern))

    if len(issues) > before:
        return None

    kwargs: dict[str, Any] = {"types": types, "message": message}
    if "default" in fields:
        kwargs["default"] = fields["default"]
        if types is not None and classify(fields["default"]) not in types:
            issues.add(_join(path, "default"), "default does not match the declared types")
            return None
    if checks:
        kwargs["predicate"] = _all_of(tuple(checks))

    requirement = Requirement(**kwargs)
    if presence == "required":
        return required(requirement)
    if presence == "optional":
        return optional(requirement)
    return requirement


def _as_types(value: object, path: str, issues: _IssueCollector) -> tuple[TypeTag, ...] | None:
    if isinstance(value, str):
        primitive = PRIMITIVES.get(value.strip())
        if primitive is None:
            allowed = ", ".join(sorted(PRIMITIVES))
            issues.add(path, f"unknown primitive {value!r}; expected one of: {allowed}")
            return None
        return primitive.types
    if not isinstance(value, list):
        issues.add(path, f"expected array of type names, got {type(value).__name__}")
        return None
    try:
        return parse_type_tags(value)
    except RequirementDefinitionError:
        allowed = ", ".join(tag.value for tag in TypeTag)
        unknown = [item for item in value if not _is_type_name(item)]
        issues.add(path, f"invalid type names {unknown!r}; expected any of: {allowed}")
        return None


def _is_type_name(value: object) -> bool:
    return isinstance(value, str) and value in ALL_TYPE_TAGS


def _as_choices(value: object, path: str, issues: _IssueCollector) -> tuple[object, ...] | None:
    if not isinstance(value, list):
        issues.add(path, f"expected array, got {type(value).__name__}")
        return None
    if not value:
        issues.add(path, "must not be empty")
        return None
    return tuple(value)


def _as_pattern(value: object, path: str, issues: _IssueCollector) -> re.Pattern[str] | None:
    parsed = _as_str(value, path, issues)
    if parsed is None:
        return None
    try:
        return re.compile(parsed)
    except re.error as exc:
        issues.add(path, f"invalid regular expression: {exc}")
        return None


def _one_of(choices: tuple[object, ...]) -> Callable[[object], bool]:
    def check(value: object) -> bool:
        return value in choices

    return check


def _matches(pattern: re.Pattern[str]) -> Callable[[object], bool]:
    def check(value: object) -> bool:
        return isinstance(value, str) and pattern.fullmatch(value) is not None

    return check


def _all_of(checks: tuple[Callable[[object], bool], ...]) -> Callable[[object], bool]:
    def check(value: object) -> bool:
        return all(item(value) for item in checks)

    return check


def _as_object(value: object, path: str, issues: _IssueCollector) -> dict[str, object] | None:
    if not isinstance(value, Mapping):
        issues.add(path, f"expected object, got {type(value).__name__}")
        return None
    out: dict[str, object] = {}
    for key, item in value.items():
        if not isinstance(key, str):
            issues.add(path, f"object key must be string, got {type(key).__name__}")
            continue
        out[key] = item
    return out


def _as_str(value: object, path: str, issues: _IssueCollector) -> str | None:
    if not isinstance(value, str):
        issues.add(path, f"expected string, got {type(value).__name__}")
        return None
    parsed = value.strip()
    if not parsed:
        issues.add(path, "must not be empty")
        return None
    return parsed


def _as_int(
    value: object,
    path: str,
    issues: _IssueCollector,
    *,
    minimum: int | None = None,
) -> int | None:
    if isinstance(value, bool) or not isinstance(value, int):
        issues.add(path, f"expected integer, got {type(value).__name__}")
        return None
    if minimum is not None and value < minimum:
        issues.add(path, f"must be >= {minimum}")
        return None
    return value


def _as_enum(
    value: object,
    path: str,
    issues: _IssueCollector,
    *,
    allowed_values: tuple[str, ...],
) -> str | None:
    parsed = _as_str(value, path, issues)
    if parsed is None:
        return None
    if parsed not in allowed_values:
        expected = ", ".join(sorted(allowed_values))
        issues.add(path, f"invalid value {parsed!r}; expected one of: {expected}")
        return None
    return parsed


def _reject_unknown_keys(
    payload: Mapping[str, object],
    allowed: frozenset[str],
    path: str,
    issues: _IssueCollector,
) -> None:
    for key in sorted(payload):
        if key not in allowed:
            issues.add(_join(path, key), "unknown field")


def _join(path: str, key: str) -> str:
    if not path:
        return key
    return f"{path}.{key}"


__all__ = [
    "DocumentIssue",
    "PRESENCE_VALUES",
    "REQUIREMENT_SCHEMA_VERSION",
    "RequirementDocumentError",
    "RequirementDocumentResult",
    "RequirementFileError",
    "build_requirements",
    "describe_requirement",
    "migration_guidance",
    "validate_requirement_document",
]
