"""Load and validate extra strategy patterns from YAML."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from pinegenie.patterns.catalog import DEFAULT_CATALOG, PatternCatalog, with_pattern
from pinegenie.patterns.errors import PatternCatalogError
from pinegenie.patterns.schema import PatternCatalogSchema
from pinegenie.patterns.types import Pattern

LOGGER = logging.getLogger(__name__)


def load_pattern_catalog(path: Path, base: PatternCatalog = DEFAULT_CATALOG) -> PatternCatalog:
    payload = _read_yaml(Path(path))
    try:
        schema = PatternCatalogSchema.model_validate(payload)
    except ValidationError as exc:
        raise PatternCatalogError(f"schema_validation_failed: {exc}") from exc
    if schema.schema_version != "1":
        raise PatternCatalogError("schema_version_unsupported")

    catalog = base
    for definition in schema.patterns:
        pattern = Pattern(
            id=definition.id,
            name=definition.name,
            strategy_type=definition.strategy_type,
            keywords=tuple(definition.keywords),
            required_elements=tuple(definition.required_elements),
            optional_elements=tuple(definition.optional_elements),
            confidence=definition.confidence,
            examples=tuple(definition.examples),
            description=definition.description,
        )
        catalog = with_pattern(catalog, pattern)
    LOGGER.info("Loaded %d patterns from %s", len(schema.patterns), path)
    return catalog


def _read_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        raise PatternCatalogError(f"schema_not_found:{path}")
    try:
        payload = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (yaml.YAMLError, UnicodeDecodeError) as exc:
        raise PatternCatalogError("schema_yaml_invalid") from exc
    if not isinstance(payload, dict):
        raise PatternCatalogError("schema_root_invalid")
    return payload
