"""Pydantic schema for user-supplied pattern catalogs."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class PatternDefinition(BaseModel):
    id: str
    name: str
    strategy_type: str
    keywords: list[str]
    required_elements: list[str]
    optional_elements: list[str] = Field(default_factory=list)
    confidence: float = 1.0
    examples: list[str] = Field(default_factory=list)
    description: str = ""

    model_config = ConfigDict(extra="forbid")


class PatternCatalogSchema(BaseModel):
    schema_version: str
    patterns: list[PatternDefinition]

    model_config = ConfigDict(extra="forbid")
