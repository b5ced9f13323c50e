"""Options validation engine.

Each requirement key runs the same fixed pipeline:

1. presence and default substitution
2. transform (failures other than this package's own errors are discarded)
3. type check against the accepted tags
4. predicate check
5. inclusion in the result

The per-key pipeline returns a ``KeyOutcome`` instead of raising, so callers decide
whether a failure aborts the call (``validate_options``) or is collected as an issue
(``check_options``). Option keys without a requirement are never read.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import StrEnum
from types import MappingProxyType
from typing import Any

import structlog

from validate_options.errors import (
    RequirementDefinitionError,
    ValidationFailure,
    ValidationIssue,
    failure_message,
)
from validate_options.requirements import (
    Requirement,
    RequirementLike,
    Transform,
    coerce_requirement,
)
from validate_options.type_tags import UNDEFINED, classify, is_nullish

_LOGGER = structlog.get_logger(__name__)


class OutcomeStatus(StrEnum):
    """Result kind of one key's pass through the pipeline."""

    OK = "ok"
    OMITTED = "omitted"
    TYPE_MISMATCH = "type_mismatch"
    PREDICATE_FAILED = "predicate_failed"


@dataclass(frozen=True, slots=True)
class KeyOutcome:
    """Outcome of validating a single key.

    ``value`` is the final (post-default, post-transform) value. ``message`` is set
    only for failures.
    """

    key: str
    status: OutcomeStatus
    value: object = UNDEFINED
    transform_failed: bool = False
    message: str | None = None

    @property
    def is_failure(self) -> bool:
        return self.status in (OutcomeStatus.TYPE_MISMATCH, OutcomeStatus.PREDICATE_FAILED)

    @property
    def issue(self) -> ValidationIssue | None:
        if not self.is_failure:
            return None
        return ValidationIssue(key=self.key, message=self.message or "")


@dataclass(frozen=True, slots=True)
class OptionsCheckResult:
    """Every key's verdict; ``options`` is set only when no issue was found."""

    options: dict[str, Any] | None
    issues: tuple[ValidationIssue, ...]

    @property
    def is_valid(self) -> bool:
        return self.options is not None and not self.issues


@dataclass(frozen=True, slots=True)
class _TransformApplied:
    value: object


@dataclass(frozen=True, slots=True)
class _TransformFailed:
    error: Exception


class OptionsValidator:
    """Reusable validator over a fixed requirement set.

    Requirements are coerced once, up front, so a malformed definition fails at
    construction instead of on the first call.
    """

    def __init__(
        self,
        requirements: Mapping[str, RequirementLike],
        *,
        logger: Any | None = None,
    ) -> None:
        self._requirements: Mapping[str, Requirement] = MappingProxyType(
            {key: _coerce_for_key(key, item) for key, item in _iter_requirements(requirements)}
        )
        self._logger = logger if logger is not None else _LOGGER

    @property
    def keys(self) -> tuple[str, ...]:
        return tuple(self._requirements)

    @property
    def requirements(self) -> Mapping[str, Requirement]:
        return self._requirements

    def validate(self, options: object) -> dict[str, Any]:
        """Return the validated options or raise ``ValidationFailure`` on the first violation."""

        return _validate(options, self._requirements, self._logger)

    def check(self, options: object) -> OptionsCheckResult:
        """Validate every key and report all violations without raising them."""

        return _check(options, self._requirements, self._logger)

    def evaluate(self, key: str, options: object) -> KeyOutcome:
        if key not in self._requirements:
            raise KeyError(key)
        return evaluate_requirement(key, self._requirements[key], options, logger=self._logger)


def validate_options(
    options: object,
    requirements: Mapping[str, RequirementLike],
    *,
    logger: Any | None = None,
) -> dict[str, Any]:
    """Return a validated options dictionary, raising on the first unmet requirement.

    Parameters
    ----------
    options : Mapping, object or None
        Options to validate; never modified. Falsy values count as an empty mapping;
        non-mapping objects with instance attributes are read through them;
        strings, sequences and other builtin scalars count as empty.
    requirements : Mapping[str, Requirement | Mapping]
        Requirement per expected key, as ``Requirement`` instances or inline mappings.

    Returns
    -------
    dict[str, Any]
        New mapping holding the requirement keys present in ``options`` (or supplied by
        a default, or produced by a transform) with their final values.

    Raises
    ------
    ValidationFailure
        If a value fails its type or predicate check, or a transform raised one.
    RequirementDefinitionError
        If a requirement is malformed.
    """

    return _validate(options, requirements, logger if logger is not None else _LOGGER)


def check_options(
    options: object,
    requirements: Mapping[str, RequirementLike],
    *,
    logger: Any | None = None,
) -> OptionsCheckResult:
    """Validate every key and return structured issues instead of raising."""

    return _check(options, requirements, logger if logger is not None else _LOGGER)


def evaluate_requirement(
    key: str,
    requirement: RequirementLike,
    options: object,
    *,
    logger: Any | None = None,
) -> KeyOutcome:
    """Run the pipeline for one key.

    Raises only what must never be absorbed: a ``ValidationFailure`` raised by the
    transform itself, and ``RequirementDefinitionError``.
    """

    log = logger if logger is not None else _LOGGER
    return _evaluate(key, _coerce_for_key(key, requirement), _options_view(options), log)


def _validate(
    options: object,
    requirements: Mapping[str, RequirementLike],
    logger: Any,
) -> dict[str, Any]:
    view = _options_view(options)
    validated: dict[str, Any] = {}
    for key, item in _iter_requirements(requirements):
        outcome = _evaluate(key, _coerce_for_key(key, item), view, logger)
        match outcome.status:
            case OutcomeStatus.OK:
                validated[key] = outcome.value
            case OutcomeStatus.OMITTED:
                continue
            case _:
                logger.debug("options_validation_failed", key=key, status=outcome.status.value)
                raise ValidationFailure(key, outcome.message or "")
    return validated


def _check(
    options: object,
    requirements: Mapping[str, RequirementLike],
    logger: Any,
) -> OptionsCheckResult:
    view = _options_view(options)
    validated: dict[str, Any] = {}
    issues: list[ValidationIssue] = []
    for key, item in _iter_requirements(requirements):
        requirement = _coerce_for_key(key, item)
        try:
            outcome = _evaluate(key, requirement, view, logger)
        except ValidationFailure as exc:
            issues.append(exc.issue)
            continue
        match outcome.status:
            case OutcomeStatus.OK:
                validated[key] = outcome.value
            case OutcomeStatus.OMITTED:
                continue
            case _:
                issues.append(ValidationIssue(key=key, message=outcome.message or ""))

    if issues:
        logger.debug("options_check_failed", keys=[issue.key for issue in issues])
        return OptionsCheckResult(options=None, issues=tuple(issues))
    return OptionsCheckResult(options=validated, issues=())


def _evaluate(
    key: str,
    requirement: Requirement,
    options: _OptionsView,
    logger: Any,
) -> KeyOutcome:
    present, value = options.lookup(key)
    if requirement.has_default and value is UNDEFINED:
        value = requirement.default
        present = True

    transformed = False
    transform_failed = False
    if requirement.transform is not None:
        match _run_transform(requirement.transform, value):
            case _TransformApplied(value=new_value):
                value = new_value
                transformed = True
            case _TransformFailed(error=error):
                transform_failed = True
                logger.debug(
                    "options_transform_failed",
                    key=key,
                    error_type=type(error).__name__,
                    error=str(error),
                )

    if requirement.types is not None and classify(value) not in requirement.types:
        return KeyOutcome(
            key=key,
            status=OutcomeStatus.TYPE_MISMATCH,
            value=value,
            transform_failed=transform_failed,
            message=_message_for(key, requirement),
        )

    exempt = requirement.is_optional and is_nullish(value)
    if requirement.predicate is not None and not exempt and not requirement.predicate(value):
        return KeyOutcome(
            key=key,
            status=OutcomeStatus.PREDICATE_FAILED,
            value=value,
            transform_failed=transform_failed,
            message=_message_for(key, requirement),
        )

    if present or (transformed and value is not UNDEFINED):
        status = OutcomeStatus.OK
    else:
        status = OutcomeStatus.OMITTED
    return KeyOutcome(key=key, status=status, value=value, transform_failed=transform_failed)


def _run_transform(transform: Transform, value: object) -> _TransformApplied | _TransformFailed:
    try:
        return _TransformApplied(transform(value))
    except (ValidationFailure, RequirementDefinitionError):
        raise
    except Exception as exc:  # noqa: BLE001 - transforms fall back to the untransformed value.
        return _TransformFailed(exc)


def _message_for(key: str, requirement: Requirement) -> str:
    return failure_message(key, message=requirement.message, type_names=requirement.type_names)


class _OptionsView:
    """Read-only key lookup over a mapping, an attribute bag, or nothing."""

    __slots__ = ("_source",)

    def __init__(self, source: object) -> None:
        self._source = source

    def lookup(self, key: str) -> tuple[bool, object]:
        source = self._source
        if source is None:
            return False, UNDEFINED
        if isinstance(source, Mapping):
            if key in source:
                return True, source[key]
            return False, UNDEFINED
        if isinstance(key, str) and hasattr(source, key):
            return True, getattr(source, key)
        return False, UNDEFINED


def _options_view(options: object) -> _OptionsView:
    if isinstance(options, _OptionsView):
        return options
    if options is None or options is UNDEFINED:
        return _OptionsView(None)
    if isinstance(options, Mapping):
        return _OptionsView(options if options else None)
    if not options or not _exposes_attributes(options):
        return _OptionsView(None)
    return _OptionsView(options)


def _exposes_attributes(options: object) -> bool:
    # Strings, sequences and other builtin scalars hold no options, only methods.
    if isinstance(options, (str, bytes, bytearray, Sequence)):
        return False
    return hasattr(options, "__dict__") or hasattr(type(options), "__slots__")


def _iter_requirements(
    requirements: Mapping[str, RequirementLike],
) -> list[tuple[str, RequirementLike]]:
    if not isinstance(requirements, Mapping):
        raise RequirementDefinitionError(
            f"requirements: expected mapping, got {type(requirements).__name__}"
        )
    return list(requirements.items())


def _coerce_for_key(key: str, item: object) -> Requirement:
    try:
        return coerce_requirement(item)
    except RequirementDefinitionError as exc:
        raise RequirementDefinitionError(f"requirement {key!r}: {exc}") from exc


__all__ = [
    "KeyOutcome",
    "OptionsCheckResult",
    "OptionsValidator",
    "OutcomeStatus",
    "check_options",
    "evaluate_requirement",
    "validate_options",
]
