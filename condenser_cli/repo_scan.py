"""Filesystem access for area classification: path enumeration and samples."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import AbstractSet, List, Optional

from .config import IGNORED_DIRS

logger = logging.getLogger(__name__)


def collect_repository_paths(root: Path, ignored_dirs: AbstractSet[str] = IGNORED_DIRS) -> List[str]:
    """List every file and directory under ``root`` as relative POSIX paths.

    Hidden entries and ``ignored_dirs`` (VCS metadata, dependency caches,
    build output) are skipped along with everything beneath them. Output is
    sorted so repeated scans enumerate in the same order.

    Args:
        root: Repository root directory
        ignored_dirs: Directory names pruned during the walk

    Returns:
        Relative paths, directories listed before their contents
    """
    root = Path(root)
    paths: List[str] = []
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(
            d for d in dirnames if d not in ignored_dirs and not d.startswith(".")
        )
        rel_dir = Path(dirpath).relative_to(root)
        for name in dirnames:
            paths.append((rel_dir / name).as_posix())
        for name in sorted(filenames):
            if name.startswith("."):
                continue
            paths.append((rel_dir / name).as_posix())
    return sorted(paths)


class FileSampleProvider:
    """Reads sample content for classification requests from a repository."""

    def __init__(self, repo_root: Path):
        self.repo_root = Path(repo_root)

    def __call__(self, rel_path: str) -> Optional[str]:
        """Return the text of ``rel_path``, or None if it is not a readable file."""
        full_path = self.repo_root / rel_path
        if not full_path.is_file():
            return None
        try:
            return full_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Could not read %s: %s", rel_path, exc)
            return None
