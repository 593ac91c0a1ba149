"""Apply classification suggestions to an area configuration."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, List

from .models import PathClassificationSuggestion, ProjectConfig

logger = logging.getLogger(__name__)


@dataclass
class MergeResult:
    """Outcome of a merge.

    Every input suggestion is either ``applied`` or ``skipped``; ``added`` is
    the subset of applied suggestions that introduced a new pattern.
    """
    config: ProjectConfig
    suggestions: List[PathClassificationSuggestion] = field(default_factory=list)
    applied: List[PathClassificationSuggestion] = field(default_factory=list)
    skipped: List[PathClassificationSuggestion] = field(default_factory=list)
    added: List[PathClassificationSuggestion] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.added)


def merge(
    config: ProjectConfig,
    suggestions: Iterable[PathClassificationSuggestion],
    confidence_threshold: float,
) -> MergeResult:
    """Fold confident suggestions into ``config`` in place.

    A suggestion is applied when its confidence meets the threshold and it
    names an existing area; its path is appended to that area's included
    patterns unless already listed. Paths owned by other areas are left alone.

    Args:
        config: Configuration to mutate
        suggestions: Suggestions in the order the provider returned them
        confidence_threshold: Minimum confidence for auto-apply (0.0 to 1.0)

    Returns:
        MergeResult with the updated config and the applied/skipped split
    """
    result = MergeResult(config=config)
    for suggestion in suggestions:
        result.suggestions.append(suggestion)
        area = config.areas.get(suggestion.area)
        if area is None:
            logger.info("Unknown area suggested: %s", suggestion)
            result.skipped.append(suggestion)
            continue
        if suggestion.confidence < confidence_threshold:
            logger.info("Low confidence suggestion: %s", suggestion)
            result.skipped.append(suggestion)
            continue

        result.applied.append(suggestion)
        if suggestion.path not in area.included_patterns:
            area.included_patterns.append(suggestion.path)
            result.added.append(suggestion)
            logger.info("Auto-categorized: %s", suggestion)
    return result
