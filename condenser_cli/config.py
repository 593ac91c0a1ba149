"""Runtime defaults and environment lookups for Timewave Condenser."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

DEFAULT_PROVIDER = os.environ.get("CONDENSER_PROVIDER", "claude")
DEFAULT_CONFIG_FILE = Path(os.environ.get("CONDENSER_CONFIG", "condenser.toml")).expanduser()

DEFAULT_MAX_TOKENS = 4000
REQUEST_TIMEOUT = 120  # seconds, single attempt
DEFAULT_CONFIDENCE_THRESHOLD = 0.8

DEFAULT_SYSTEM_PROMPT = "You are a helpful assistant that summarizes codebases."

# Directories never handed to the area resolver
IGNORED_DIRS = {".git", "node_modules", "dist", "build"}

# Classification samples are only drawn from these extensions
SAMPLE_EXTENSIONS = {
    ".ts", ".js", ".tsx", ".jsx", ".py", ".rb", ".java", ".go", ".rs",
    ".php", ".cs", ".cpp", ".c", ".h", ".swift", ".kt", ".md", ".txt",
}
MAX_SAMPLE_FILES = 10
MAX_SAMPLE_LINES = 50

SUMMARY_MARKDOWN_FILE = "summary.md"
SUMMARY_XML_FILE = "summary.xml"

API_KEY_ENV_VARS = {
    "claude": ("CLAUDE_API_KEY", "ANTHROPIC_API_KEY"),
    "openai": ("OPENAI_API_KEY",),
}


def api_key_for(provider: str) -> Optional[str]:
    """Return the first API key found in the environment for ``provider``."""
    for var in API_KEY_ENV_VARS.get(provider.lower(), ()):
        value = os.environ.get(var)
        if value:
            return value
    return None


@dataclass
class RunSettings:
    """Per-invocation settings for the text-generation client.

    Built once by the CLI and passed explicitly to every collaborator.
    """
    provider: str = DEFAULT_PROVIDER
    api_key: Optional[str] = None
    model: Optional[str] = None
    max_tokens: int = DEFAULT_MAX_TOKENS
    timeout: float = REQUEST_TIMEOUT

    def resolved_api_key(self) -> Optional[str]:
        return self.api_key or api_key_for(self.provider)
