"""
validate-options declarative requirement files.

Purpose
- Load requirement documents and option payloads (TOML / JSON / YAML).
- Validate document structure with structured, path-addressed issues.

No I/O happens at import time.
"""

from validate_options.config.loader import (
    SUPPORTED_SUFFIXES,
    load_mapping,
    load_options,
    load_requirements,
)
from validate_options.config.schema import (
    PRESENCE_VALUES,
    REQUIREMENT_SCHEMA_VERSION,
    DocumentIssue,
    RequirementDocumentError,
    RequirementDocumentResult,
    RequirementFileError,
    build_requirements,
    describe_requirement,
    migration_guidance,
    validate_requirement_document,
)

__all__ = [
    "DocumentIssue",
    "PRESENCE_VALUES",
    "REQUIREMENT_SCHEMA_VERSION",
    "RequirementDocumentError",
    "RequirementDocumentResult",
    "RequirementFileError",
    "SUPPORTED_SUFFIXES",
    "build_requirements",
    "describe_requirement",
    "load_mapping",
    "load_options",
    "load_requirements",
    "migration_guidance",
    "validate_requirement_document",
]
