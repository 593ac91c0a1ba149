"""Area configuration manager backed by TOML files.

The on-disk layout is a public contract shared with other tooling::

    [general]
    project_name = "My Project"
    default_prompt = "..."

    [areas.frontend]
    description = "Frontend components and UI logic"
    included_paths = ["src/components", "src/pages"]
    excluded_paths = ["**/*.test.tsx"]
    prompt = "..."
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import toml

from .models import AreaDefinition, ProjectConfig

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

_STRING_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\b": "\\b",
    "\t": "\\t",
    "\n": "\\n",
    "\f": "\\f",
    "\r": "\\r",
}


class ConfigParseError(ValueError):
    """Raised when a configuration file exists but cannot be understood."""


@dataclass
class ConfigLoadResult:
    """Outcome of reading a configuration file.

    ``config`` is None both when the file is absent and when it is malformed;
    ``error`` distinguishes the two.
    """
    config: Optional[ProjectConfig] = None
    error: Optional[ConfigParseError] = None

    @property
    def ok(self) -> bool:
        return self.config is not None


def _expect_str(value: Any, where: str) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ConfigParseError(f"{where} must be a string, got {type(value).__name__}")
    return value


def _expect_str_list(value: Any, where: str) -> List[str]:
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ConfigParseError(f"{where} must be a list of strings")
    return list(value)


def config_from_dict(data: Dict[str, Any]) -> ProjectConfig:
    """Build a ProjectConfig from a parsed TOML document.

    Raises:
        ConfigParseError: If sections or fields have the wrong shape
    """
    general = data.get("general", {})
    if not isinstance(general, dict):
        raise ConfigParseError("[general] must be a table")
    areas_table = data.get("areas", {})
    if not isinstance(areas_table, dict):
        raise ConfigParseError("[areas] must be a table")

    areas: Dict[str, AreaDefinition] = {}
    for name, area in areas_table.items():
        if not name.strip():
            raise ConfigParseError("Area names must not be empty")
        if not isinstance(area, dict):
            raise ConfigParseError(f"[areas.{name}] must be a table")
        areas[name] = AreaDefinition(
            description=_expect_str(area.get("description"), f"areas.{name}.description"),
            included_patterns=_expect_str_list(area.get("included_paths"), f"areas.{name}.included_paths"),
            excluded_patterns=_expect_str_list(area.get("excluded_paths"), f"areas.{name}.excluded_paths"),
            prompt=_expect_str(area.get("prompt"), f"areas.{name}.prompt"),
        )

    return ProjectConfig(
        project_name=_expect_str(general.get("project_name"), "general.project_name"),
        default_prompt=_expect_str(general.get("default_prompt"), "general.default_prompt"),
        areas=areas,
    )


def _dump_basic_string(value: str) -> str:
    """Render ``value`` as a TOML basic string that reloads unchanged."""
    chars = []
    for ch in value:
        if ch in _STRING_ESCAPES:
            chars.append(_STRING_ESCAPES[ch])
        elif ch < " " or ch == "\x7f":
            chars.append(f"\\u{ord(ch):04x}")
        else:
            chars.append(ch)
    return '"' + "".join(chars) + '"'


class ConfigEncoder(toml.TomlEncoder):
    """TOML encoder whose strings survive a load/save round trip.

    The stock string dumper leaves some backslash sequences and control
    characters unescaped, which either corrupts the value or makes the
    file unparseable.
    """

    def __init__(self, _dict=dict, preserve=False):
        super().__init__(_dict, preserve)
        self.dump_funcs[str] = _dump_basic_string


def config_to_dict(config: ProjectConfig) -> Dict[str, Any]:
    """Convert a ProjectConfig back to the TOML document layout."""
    return {
        "general": {
            "project_name": config.project_name,
            "default_prompt": config.default_prompt,
        },
        "areas": {
            name: {
                "description": area.description,
                "included_paths": list(area.included_patterns),
                "excluded_paths": list(area.excluded_patterns),
                "prompt": area.prompt,
            }
            for name, area in config.areas.items()
        },
    }


def read_config(config_path: PathLike) -> ConfigLoadResult:
    """Read and validate a configuration file without raising.

    Args:
        config_path: Path to the TOML configuration file

    Returns:
        ConfigLoadResult holding either the parsed config or the parse error
    """
    path = Path(config_path)
    if not path.exists():
        return ConfigLoadResult()

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = toml.load(f)
        return ConfigLoadResult(config=config_from_dict(data))
    except ConfigParseError as exc:
        return ConfigLoadResult(error=exc)
    except (toml.TomlDecodeError, OSError, UnicodeDecodeError) as exc:
        return ConfigLoadResult(error=ConfigParseError(str(exc)))


def load_config(config_path: PathLike) -> Optional[ProjectConfig]:
    """Load area configuration, degrading to None on any problem.

    A malformed file is logged and then treated exactly like a missing one.
    """
    result = read_config(config_path)
    if result.error is not None:
        logger.warning("Error parsing TOML configuration %s: %s", config_path, result.error)
    elif result.config is None:
        logger.info("Configuration file not found at %s", config_path)
    return result.config


def save_config(config_path: PathLike, config: ProjectConfig) -> None:
    """Write ``config`` to ``config_path``, replacing any existing file."""
    path = Path(config_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        toml.dump(config_to_dict(config), f, encoder=ConfigEncoder())
    logger.info("Saved configuration to %s", path)


def resolve_prompt(
    config: Optional[ProjectConfig],
    area_name: Optional[str],
    explicit_prompt: str = "",
) -> str:
    """Pick the guidance prompt for a summarization run.

    Precedence:
        1. No config or no area requested: ``explicit_prompt``
        2. Area exists in config: that area's prompt
        3. Otherwise: the config's ``default_prompt``
    """
    if config is None or not area_name:
        return explicit_prompt
    area = config.areas.get(area_name)
    if area is not None:
        return area.prompt
    return config.default_prompt
