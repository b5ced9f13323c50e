"""
validate-options — declarative options validation.

Purpose
- Validate an options mapping against per-key requirements and return a new, filtered,
  normalized mapping, or raise a typed error naming the offending key.

Public surface
- ``classify`` / ``TypeTag`` / ``UNDEFINED``: the ten-tag type vocabulary.
- ``Requirement`` and the combinators ``required``, ``optional``, ``either``, plus the
  primitive requirements ``STRING``, ``NUMBER``, ``BOOLEAN``, ``OBJECT``, ``ARRAY``.
- ``validate_options`` (raise on first violation), ``check_options`` (collect all),
  ``OptionsValidator`` (reusable requirement set).
- ``load_requirements`` / ``load_options`` for TOML, JSON and YAML files.

Importing the package has no side effects (no logging configuration, no file access).
"""

from validate_options.combinators import (
    ARRAY,
    BOOLEAN,
    NUMBER,
    OBJECT,
    STRING,
    either,
    optional,
    required,
)
from validate_options.config import (
    RequirementDocumentError,
    RequirementFileError,
    load_options,
    load_requirements,
)
from validate_options.engine import (
    KeyOutcome,
    OptionsCheckResult,
    OptionsValidator,
    OutcomeStatus,
    check_options,
    evaluate_requirement,
    validate_options,
)
from validate_options.errors import (
    RequirementDefinitionError,
    ValidationFailure,
    ValidationIssue,
)
from validate_options.requirements import Requirement, coerce_requirement
from validate_options.type_tags import (
    ALL_TYPE_TAGS,
    NULLISH_TYPE_TAGS,
    UNDEFINED,
    TypeTag,
    classify,
    parse_type_tags,
)

__version__ = "1.0.0"

__all__ = [
    "ALL_TYPE_TAGS",
    "ARRAY",
    "BOOLEAN",
    "KeyOutcome",
    "NULLISH_TYPE_TAGS",
    "NUMBER",
    "OBJECT",
    "OptionsCheckResult",
    "OptionsValidator",
    "OutcomeStatus",
    "Requirement",
    "RequirementDefinitionError",
    "RequirementDocumentError",
    "RequirementFileError",
    "STRING",
    "TypeTag",
    "UNDEFINED",
    "ValidationFailure",
    "ValidationIssue",
    "__version__",
    "check_options",
    "classify",
    "coerce_requirement",
    "either",
    "evaluate_requirement",
    "load_options",
    "load_requirements",
    "optional",
    "parse_type_tags",
    "required",
    "validate_options",
]
