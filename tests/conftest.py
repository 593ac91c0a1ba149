"""Pytest configuration and fixtures for Timewave Condenser tests."""

import shutil
import tempfile
from pathlib import Path
from typing import Generator, List

import pytest
import requests

from condenser_cli.config_manager import load_config
from condenser_cli.models import AreaDefinition, ProjectConfig

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture(autouse=True)
def _block_network(monkeypatch):
    """Fail fast on any real HTTP request and hide developer API keys.

    Tests that exercise the HTTP client patch ``requests.post`` themselves.
    """

    def _refuse(*args, **kwargs):
        raise requests.ConnectionError("network access disabled in tests")

    monkeypatch.setattr("condenser_cli.llm.requests.post", _refuse)
    for var in ("CLAUDE_API_KEY", "ANTHROPIC_API_KEY", "OPENAI_API_KEY"):
        monkeypatch.delenv(var, raising=False)


class FakeResponse:
    """Minimal stand-in for ``requests.Response``."""

    def __init__(self, status_code: int = 200, payload=None, text: str = "", reason: str = "OK"):
        self.status_code = status_code
        self._payload = payload
        self.text = text
        self.reason = reason

    def json(self):
        if self._payload is None:
            raise ValueError("No JSON object could be decoded")
        return self._payload


class FakeClassifier:
    """Records classification prompts and replies with canned text."""

    def __init__(self, reply: str = "[]"):
        self.reply = reply
        self.prompts: List[str] = []

    def classify(self, prompt: str) -> str:
        self.prompts.append(prompt)
        return self.reply


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    tmp = Path(tempfile.mkdtemp())
    yield tmp
    shutil.rmtree(tmp, ignore_errors=True)


@pytest.fixture
def sample_repo_path() -> Path:
    """Get path to the sample repository."""
    return FIXTURES / "sample_repo"


@pytest.fixture
def sample_config_path(temp_dir: Path) -> Path:
    """Copy the sample configuration somewhere writable."""
    target = temp_dir / "condenser.toml"
    shutil.copy(FIXTURES / "test-config.toml", target)
    return target


@pytest.fixture
def sample_config(sample_config_path: Path) -> ProjectConfig:
    """Parsed sample configuration."""
    return load_config(sample_config_path)


@pytest.fixture
def simple_config() -> ProjectConfig:
    """Small in-memory configuration with two areas."""
    return ProjectConfig(
        project_name="Demo",
        default_prompt="Summarize the demo project.",
        areas={
            "frontend": AreaDefinition(
                description="Frontend components",
                included_patterns=["src/components"],
                excluded_patterns=["**/*.test.tsx"],
                prompt="Focus on the UI.",
            ),
            "backend": AreaDefinition(
                description="Backend services",
                included_patterns=["src/server/**"],
                prompt="Focus on the API.",
            ),
        },
    )


@pytest.fixture
def fake_classifier():
    """Factory for FakeClassifier instances."""
    return FakeClassifier


@pytest.fixture
def fake_response():
    """Factory for FakeResponse instances."""
    return FakeResponse


@pytest.fixture
def sample_summary_response() -> str:
    """Provider reply containing both a Markdown and an XML summary."""
    return """Here is the analysis you asked for.

```markdown
# Sample Project

A small TypeScript app with a user service.

## Components
- App
```

```xml
<?xml version="1.0" encoding="UTF-8"?>
<summary>
  <project_name>Sample Project</project_name>
  <components>
    <component name="App"/>
  </components>
</summary>
```
"""
