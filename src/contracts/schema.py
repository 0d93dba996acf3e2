"""JSON Schema validation for puzzle documents and strategy blocks."""

from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List

import jsonschema
from referencing import Registry, Resource

from .errors import ConfigError, ValidationIssue, make_error

_SCHEMA_ROOT = Path(__file__).resolve().parent / "schemas"
_SCHEMA_FILES = {
    "PuzzleDocument": "puzzle.schema.json",
    "Strategy": "strategy.schema.json",
}


def load_schema(name: str) -> Dict[str, Any]:
    """Load a bundled schema by its document type name."""

    try:
        filename = _SCHEMA_FILES[name]
    except KeyError as exc:
        raise ConfigError("schema-not-found", name) from exc
    return json.loads((_SCHEMA_ROOT / filename).read_text("utf-8"))


@lru_cache(maxsize=1)
def _registry() -> Registry:
    resources = []
    for name in _SCHEMA_FILES:
        schema = load_schema(name)
        resources.append((schema["$id"], Resource.from_contents(schema)))
    return Registry().with_resources(resources)


@lru_cache(maxsize=None)
def _validator(name: str) -> jsonschema.protocols.Validator:
    schema = load_schema(name)
    cls = jsonschema.validators.validator_for(schema)
    cls.check_schema(schema)
    return cls(schema, registry=_registry())


def _format_path(error: jsonschema.ValidationError) -> str:
    parts = [str(part) for part in error.absolute_path]
    return "/" + "/".join(parts) if parts else "/"


def collect_issues(payload: Any, name: str) -> List[ValidationIssue]:
    """Return every schema violation in ``payload`` as :class:`ValidationIssue`."""

    validator = _validator(name)
    errors = sorted(validator.iter_errors(payload), key=lambda err: list(err.absolute_path))
    return [make_error("schema", err.message, _format_path(err)) for err in errors]


def validate_document(payload: Any, name: str = "PuzzleDocument") -> None:
    """Raise :class:`ConfigError` when ``payload`` does not match schema ``name``."""

    issues = collect_issues(payload, name)
    if issues:
        first = issues[0]
        raise ConfigError("schema-invalid", f"{first.path}: {first.msg}")


__all__ = ["collect_issues", "load_schema", "validate_document"]
