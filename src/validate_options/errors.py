"""Typed error taxonomy for options validation.

Two disjoint kinds:
- ``ValidationFailure``: the options did not satisfy a requirement.
- ``RequirementDefinitionError``: the requirement itself is malformed (a caller bug).

Neither class derives from the other, so ``except ValidationFailure`` never hides a
broken requirement definition.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ValidationIssue:
    """Single structured validation failure."""

    key: str
    message: str


class ValidationFailure(ValueError):
    """Raised when an option value fails its requirement."""

    def __init__(self, key: str, message: str) -> None:
        self.key = key
        self.message = message
        super().__init__(message)

    @property
    def issue(self) -> ValidationIssue:
        return ValidationIssue(key=self.key, message=self.message)

    def __reduce__(self) -> tuple[type[ValidationFailure], tuple[str, str]]:
        return (self.__class__, (self.key, self.message))


class RequirementDefinitionError(TypeError):
    """Raised when a requirement declares something outside the supported vocabulary."""


def failure_message(key: str, *, message: str | None, type_names: tuple[str, ...] | None) -> str:
    """Render the failure message for ``key``.

    A custom ``message`` wins; otherwise the accepted type names are listed when the
    requirement declared any, and a generic message is used when it did not.
    """

    if message:
        return message
    if type_names is not None:
        return f'The option "{key}" must be one of the following types: {", ".join(type_names)}'
    return f'The option "{key}" is invalid.'


__all__ = [
    "RequirementDefinitionError",
    "ValidationFailure",
    "ValidationIssue",
    "failure_message",
]
