"""Area ownership resolution over a finished set of repository paths."""

from __future__ import annotations

from typing import Dict, Iterable, List

from .models import ProjectConfig
from .patterns import matches


def areas_for_path(path: str, config: ProjectConfig) -> List[str]:
    """Return every area owning ``path``, in declaration order.

    Overlapping areas are all reported; no tie-break is applied.
    """
    return [
        name
        for name, area in config.areas.items()
        if matches(path, area.included_patterns, area.excluded_patterns)
    ]


def is_categorized(path: str, config: ProjectConfig) -> bool:
    return any(
        matches(path, area.included_patterns, area.excluded_patterns)
        for area in config.areas.values()
    )


def find_uncategorized_paths(all_paths: Iterable[str], config: ProjectConfig) -> List[str]:
    """Identify paths not covered by any area.

    Args:
        all_paths: Repository-relative paths, already filtered of VCS and
            dependency-cache directories
        config: Area configuration

    Returns:
        Paths owned by no area, in input order
    """
    return [path for path in all_paths if not is_categorized(path, config)]


def find_ownership_conflicts(all_paths: Iterable[str], config: ProjectConfig) -> Dict[str, List[str]]:
    """Map each path claimed by more than one area to its owners."""
    conflicts: Dict[str, List[str]] = {}
    for path in all_paths:
        owners = areas_for_path(path, config)
        if len(owners) > 1:
            conflicts[path] = owners
    return conflicts


def group_paths_by_area(all_paths: Iterable[str], config: ProjectConfig) -> Dict[str, List[str]]:
    """Bucket paths under each owning area; shared paths appear in every bucket."""
    grouped: Dict[str, List[str]] = {name: [] for name in config.areas}
    for path in all_paths:
        for name in areas_for_path(path, config):
            grouped[name].append(path)
    return grouped
