"""Improvement suggestions with step-by-step implementation guides."""

from pinegenie.improvements.suggester import generate_improvements
from pinegenie.improvements.types import (
    ImplementationGuide,
    ImplementationStep,
    ImprovementCategory,
    ImprovementPriority,
    ImprovementSuggestion,
)

__all__ = [
    "ImplementationGuide",
    "ImplementationStep",
    "ImprovementCategory",
    "ImprovementPriority",
    "ImprovementSuggestion",
    "generate_improvements",
]
