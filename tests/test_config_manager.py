"""Tests for TOML area configuration loading, saving, and prompt resolution."""

from pathlib import Path

import pytest

from condenser_cli.config_manager import (
    ConfigParseError,
    config_from_dict,
    load_config,
    read_config,
    resolve_prompt,
    save_config,
)
from condenser_cli.models import AreaDefinition, ProjectConfig


class TestLoadConfig:
    """Tests for reading configuration files."""

    def test_load_sample(self, sample_config_path: Path):
        """Test the sample file parses into areas in declaration order."""
        config = load_config(sample_config_path)

        assert config is not None
        assert config.project_name == "Sample Project"
        assert list(config.areas) == ["core", "api", "utils"]
        assert config.areas["core"].included_patterns == ["src/index.ts", "src/components"]
        assert config.areas["core"].excluded_patterns == ["**/*.test.ts"]
        assert config.areas["utils"].excluded_patterns == []
        assert "Analyze this API code" in config.areas["api"].prompt

    def test_missing_file(self, temp_dir: Path):
        assert load_config(temp_dir / "absent.toml") is None

    def test_malformed_file_treated_as_absent(self, temp_dir: Path):
        """Test a syntax error degrades to None instead of raising."""
        path = temp_dir / "broken.toml"
        path.write_text("[general\nproject_name = ", encoding="utf-8")

        assert load_config(path) is None

    def test_read_config_reports_error(self, temp_dir: Path):
        path = temp_dir / "broken.toml"
        path.write_text("this is not toml", encoding="utf-8")

        result = read_config(path)

        assert not result.ok
        assert isinstance(result.error, ConfigParseError)

    def test_read_config_missing_has_no_error(self, temp_dir: Path):
        result = read_config(temp_dir / "absent.toml")

        assert result.config is None
        assert result.error is None

    def test_wrong_field_type(self, temp_dir: Path):
        path = temp_dir / "bad.toml"
        path.write_text('[areas.core]\nincluded_paths = "src"\n', encoding="utf-8")

        result = read_config(path)

        assert result.config is None
        assert "included_paths" in str(result.error)

    def test_empty_document(self, temp_dir: Path):
        path = temp_dir / "empty.toml"
        path.write_text("", encoding="utf-8")

        config = load_config(path)

        assert config == ProjectConfig()

    def test_missing_optional_fields_default(self):
        config = config_from_dict({"areas": {"docs": {"included_paths": ["docs"]}}})

        area = config.areas["docs"]
        assert area.description == ""
        assert area.excluded_patterns == []
        assert area.prompt == ""

    def test_area_must_be_table(self):
        with pytest.raises(ConfigParseError):
            config_from_dict({"areas": {"docs": "docs"}})


class TestSaveConfig:
    """Tests for writing configuration files."""

    def test_round_trip(self, sample_config: ProjectConfig, temp_dir: Path):
        """Test save then load reproduces names, patterns, and order."""
        target = temp_dir / "out" / "condenser.toml"

        save_config(target, sample_config)
        reloaded = load_config(target)

        assert reloaded == sample_config
        assert list(reloaded.areas) == list(sample_config.areas)

    def test_round_trip_preserves_pattern_order(self, temp_dir: Path):
        config = ProjectConfig(
            areas={
                "zeta": AreaDefinition(included_patterns=["b", "a", "c"]),
                "alpha": AreaDefinition(included_patterns=["x"], excluded_patterns=["x/y", "x/a"]),
            }
        )
        target = temp_dir / "order.toml"

        save_config(target, config)
        reloaded = load_config(target)

        assert list(reloaded.areas) == ["zeta", "alpha"]
        assert reloaded.areas["zeta"].included_patterns == ["b", "a", "c"]
        assert reloaded.areas["alpha"].excluded_patterns == ["x/y", "x/a"]

    @pytest.mark.parametrize(
        "prompt",
        [
            "Windows path C:\\xampp\\htdocs",
            "bell \x07 and del \x7f char",
            'quote " backslash \\ tab \t newline \n return \r',
            "literal \\u0041 and \\n stay literal",
            "trailing backslash \\",
        ],
    )
    def test_round_trip_escapes(self, temp_dir: Path, prompt: str):
        """Test strings with backslashes and control characters reload unchanged."""
        config = ProjectConfig(
            project_name="Escapes",
            default_prompt=prompt,
            areas={"docs": AreaDefinition(included_patterns=["docs\\legacy", prompt], prompt=prompt)},
        )
        target = temp_dir / "escapes.toml"

        save_config(target, config)
        result = read_config(target)

        assert result.error is None
        assert result.config == config

    def test_writes_public_key_names(self, sample_config: ProjectConfig, temp_dir: Path):
        target = temp_dir / "keys.toml"

        save_config(target, sample_config)
        text = target.read_text(encoding="utf-8")

        assert "[general]" in text
        assert "included_paths" in text
        assert "excluded_paths" in text


class TestResolvePrompt:
    """Tests for prompt precedence."""

    def test_no_config_uses_explicit(self):
        assert resolve_prompt(None, "api", "Custom") == "Custom"

    def test_no_area_uses_explicit(self, simple_config: ProjectConfig):
        assert resolve_prompt(simple_config, None, "Custom") == "Custom"

    def test_known_area_prompt(self, simple_config: ProjectConfig):
        assert resolve_prompt(simple_config, "backend", "Custom") == "Focus on the API."

    def test_unknown_area_uses_default(self, simple_config: ProjectConfig):
        assert resolve_prompt(simple_config, "missing", "Custom") == "Summarize the demo project."

    def test_sample_api_prompt(self, sample_config: ProjectConfig):
        assert "Analyze this API code" in resolve_prompt(sample_config, "api")
