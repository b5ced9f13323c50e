"""
validate-options — requirement and options file loader.

File: src/validate_options/config/loader.py

Purpose
- Read requirement documents and option payloads from TOML, JSON or YAML files.

Functional requirements
- Dispatch on file suffix; reject unsupported suffixes explicitly.
- File roots must be mappings.
- Requirement documents go through schema validation before use.
"""

from __future__ import annotations

import json
import tomllib
from pathlib import Path
from typing import Any, Final

import structlog
import yaml

from validate_options.config.schema import RequirementFileError, build_requirements
from validate_options.requirements import Requirement

SUPPORTED_SUFFIXES: Final[tuple[str, ...]] = (".json", ".toml", ".yaml", ".yml")

_LOGGER = structlog.get_logger(__name__)


def load_mapping(path: str | Path) -> dict[str, Any]:
    """Parse one JSON/TOML/YAML file whose root is a mapping."""

    file_path = Path(path).expanduser()
    suffix = file_path.suffix.lower()
    if suffix not in SUPPORTED_SUFFIXES:
        supported = ", ".join(SUPPORTED_SUFFIXES)
        raise RequirementFileError(
            f"unsupported file extension {suffix!r}; expected one of {supported}"
        )
    if not file_path.is_file():
        raise RequirementFileError(f"file not found: {file_path}")

    try:
        if suffix == ".toml":
            with file_path.open("rb") as handle:
                parsed: object = tomllib.load(handle)
        elif suffix == ".json":
            with file_path.open("r", encoding="utf-8") as handle:
                parsed = json.load(handle)
        else:
            with file_path.open("r", encoding="utf-8") as handle:
                parsed = yaml.safe_load(handle)
    except tomllib.TOMLDecodeError as exc:
        raise RequirementFileError(f"invalid TOML in {file_path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise RequirementFileError(f"invalid JSON in {file_path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise RequirementFileError(f"invalid YAML in {file_path}: {exc}") from exc
    except OSError as exc:
        raise RequirementFileError(f"unable to read {file_path}: {exc}") from exc

    if not isinstance(parsed, dict):
        raise RequirementFileError(f"file root must be an object: {file_path}")
    return parsed


def load_requirements(path: str | Path, *, logger: Any | None = None) -> dict[str, Requirement]:
    """Load and build the requirements declared in a requirement document."""

    log = logger if logger is not None else _LOGGER
    payload = load_mapping(path)
    requirements = build_requirements(payload, source=str(path))
    log.debug("requirement_file_loaded", path=str(path), keys=sorted(requirements))
    return requirements


def load_options(path: str | Path) -> dict[str, Any]:
    """Load an options payload; values are returned as parsed, without coercion."""

    return load_mapping(path)


__all__ = ["SUPPORTED_SUFFIXES", "load_mapping", "load_options", "load_requirements"]
