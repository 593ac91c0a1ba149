"""Core data models shared by the area resolver, classifier, and extractor."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List


@dataclass
class AreaDefinition:
    description: str = ""
    included_patterns: List[str] = field(default_factory=list)
    excluded_patterns: List[str] = field(default_factory=list)
    prompt: str = ""


@dataclass
class ProjectConfig:
    project_name: str = ""
    default_prompt: str = ""
    areas: Dict[str, AreaDefinition] = field(default_factory=dict)


@dataclass
class PathClassificationSuggestion:
    """A single AI-proposed area for an uncategorized path."""
    path: str
    area: str
    confidence: float
    reasoning: str = ""

    def __str__(self) -> str:
        return f"{self.path} → {self.area} (confidence: {self.confidence:.2f})"


@dataclass
class ExtractionResult:
    """Narrative (Markdown) and structured (XML) artifacts for one response."""
    narrative: str
    structured: str
