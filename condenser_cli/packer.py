"""Thin wrapper around the external Repomix packer."""

from __future__ import annotations

import logging
import shutil
import subprocess
from pathlib import Path

logger = logging.getLogger(__name__)

PACK_STYLES = ("markdown", "plain", "xml")


class PackerError(RuntimeError):
    """Raised when Repomix is unavailable or fails."""


def pack_repository(repo_path: Path, output_dir: Path, style: str = "markdown") -> Path:
    """Pack ``repo_path`` into a single document using Repomix.

    Args:
        repo_path: Repository to pack
        output_dir: Directory receiving ``output.<style>``
        style: One of ``markdown``, ``plain``, ``xml``

    Returns:
        Path to the packed document

    Raises:
        PackerError: If repomix is missing or exits non-zero
    """
    if style not in PACK_STYLES:
        raise ValueError(f"Unsupported pack style '{style}'. Choose from: {', '.join(PACK_STYLES)}")
    if not Path(repo_path).is_dir():
        raise ValueError(f"Repository path '{repo_path}' doesn't exist or is not a directory")

    executable = shutil.which("repomix")
    if executable is None:
        raise PackerError("repomix is not installed. Install it with: npm install -g repomix")

    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    output_file = output_dir / f"output.{style}"

    logger.info("Running Repomix on %s", repo_path)
    result = subprocess.run(
        [executable, "pack", str(repo_path), "-o", str(output_file), "--style", style],
        capture_output=True,
        text=True,
    )
    if result.returncode != 0:
        raise PackerError(f"repomix exited with code {result.returncode}: {result.stderr.strip()}")
    return output_file
