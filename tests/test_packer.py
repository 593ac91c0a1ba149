"""Tests for the Repomix wrapper."""

import subprocess
from pathlib import Path

import pytest

from condenser_cli.packer import PackerError, pack_repository


@pytest.fixture
def fake_repomix(monkeypatch):
    """Pretend repomix is installed and record its invocations."""
    calls = []
    state = {"returncode": 0, "stderr": ""}

    def _run(cmd, capture_output=False, text=False):
        calls.append(cmd)
        return subprocess.CompletedProcess(cmd, state["returncode"], stdout="", stderr=state["stderr"])

    monkeypatch.setattr("condenser_cli.packer.shutil.which", lambda name: "/usr/bin/repomix")
    monkeypatch.setattr("condenser_cli.packer.subprocess.run", _run)
    return calls, state


class TestPackRepository:
    """Tests for pack_repository."""

    def test_runs_repomix(self, fake_repomix, sample_repo_path: Path, temp_dir: Path):
        calls, _ = fake_repomix

        output = pack_repository(sample_repo_path, temp_dir / "packed", "xml")

        assert output == temp_dir / "packed" / "output.xml"
        assert calls[0][:3] == ["/usr/bin/repomix", "pack", str(sample_repo_path)]
        assert calls[0][-2:] == ["--style", "xml"]

    def test_nonzero_exit(self, fake_repomix, sample_repo_path: Path, temp_dir: Path):
        _, state = fake_repomix
        state["returncode"] = 2
        state["stderr"] = "boom"

        with pytest.raises(PackerError, match="boom"):
            pack_repository(sample_repo_path, temp_dir)

    def test_missing_executable(self, monkeypatch, sample_repo_path: Path, temp_dir: Path):
        monkeypatch.setattr("condenser_cli.packer.shutil.which", lambda name: None)

        with pytest.raises(PackerError, match="not installed"):
            pack_repository(sample_repo_path, temp_dir)

    def test_bad_style(self, sample_repo_path: Path, temp_dir: Path):
        with pytest.raises(ValueError, match="Unsupported pack style"):
            pack_repository(sample_repo_path, temp_dir, "html")

    def test_missing_repo(self, temp_dir: Path):
        with pytest.raises(ValueError, match="doesn't exist"):
            pack_repository(temp_dir / "nope", temp_dir)
