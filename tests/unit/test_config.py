#  Copyright (c) 2025 Tom Villani, Ph.D.

"""Unit tests for configuration discovery and loading."""

import json
from pathlib import Path

import pytest

from flatdown.config import (
    discover_config_file,
    find_config_in_parents,
    load_config_file,
    load_options,
    options_from_config,
)
from flatdown.exceptions import ConfigurationError, ValidationError
from flatdown.options import LexerOptions, RendererOptions


@pytest.mark.unit
class TestLoadConfigFile:
    """Test loading each supported file format."""

    def test_toml(self, tmp_path: Path) -> None:
        path = tmp_path / ".flatdown.toml"
        path.write_text('[renderer]\nbullet_char = "-"\n', encoding="utf-8")
        assert load_config_file(path) == {"renderer": {"bullet_char": "-"}}

    def test_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / ".flatdown.yaml"
        path.write_text("lexer:\n  gfm: false\n", encoding="utf-8")
        assert load_config_file(path) == {"lexer": {"gfm": False}}

    def test_empty_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / ".flatdown.yml"
        path.write_text("", encoding="utf-8")
        assert load_config_file(path) == {}

    def test_json(self, tmp_path: Path) -> None:
        path = tmp_path / ".flatdown.json"
        path.write_text(json.dumps({"renderer": {"quote_prefix": "| "}}), encoding="utf-8")
        assert load_config_file(str(path)) == {"renderer": {"quote_prefix": "| "}}

    def test_pyproject_section(self, tmp_path: Path) -> None:
        path = tmp_path / "pyproject.toml"
        path.write_text('[project]\nname = "x"\n\n[tool.flatdown.lexer]\nparse_tables = false\n', encoding="utf-8")
        assert load_config_file(path) == {"lexer": {"parse_tables": False}}

    def test_pyproject_without_section(self, tmp_path: Path) -> None:
        path = tmp_path / "pyproject.toml"
        path.write_text('[project]\nname = "x"\n', encoding="utf-8")
        assert load_config_file(path) == {}

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigurationError, match="does not exist"):
            load_config_file(tmp_path / "nope.toml")

    def test_directory(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigurationError, match="not a file"):
            load_config_file(tmp_path)

    def test_unsupported_extension(self, tmp_path: Path) -> None:
        path = tmp_path / "config.ini"
        path.write_text("[renderer]\n", encoding="utf-8")
        with pytest.raises(ConfigurationError, match="Unsupported config file format"):
            load_config_file(path)

    @pytest.mark.parametrize(
        "filename,content",
        [
            ("bad.toml", "[renderer\n"),
            ("bad.json", "{not json"),
            ("bad.yaml", "a: [1, 2\n"),
            ("list.json", "[1, 2]"),
            ("list.yaml", "- a\n- b\n"),
        ],
    )
    def test_invalid_content(self, tmp_path: Path, filename: str, content: str) -> None:
        path = tmp_path / filename
        path.write_text(content, encoding="utf-8")
        with pytest.raises(ConfigurationError) as exc_info:
            load_config_file(path)
        assert exc_info.value.config_path == str(path)

    def test_configuration_error_is_validation_error(self, tmp_path: Path) -> None:
        with pytest.raises(ValidationError):
            load_config_file(tmp_path / "missing.json")


@pytest.mark.unit
class TestDiscovery:
    """Test configuration file discovery."""

    def test_finds_file_in_parent(self, isolated_config: Path) -> None:
        config = isolated_config / ".flatdown.toml"
        config.write_text("", encoding="utf-8")
        nested = isolated_config / "a" / "b"
        nested.mkdir(parents=True)
        assert find_config_in_parents(nested) == config.resolve()

    def test_dedicated_file_beats_pyproject(self, isolated_config: Path) -> None:
        (isolated_config / "pyproject.toml").write_text("[tool.flatdown.renderer]\nbullet_char = '*'\n")
        dedicated = isolated_config / ".flatdown.json"
        dedicated.write_text("{}", encoding="utf-8")
        assert find_config_in_parents(isolated_config) == dedicated.resolve()

    def test_pyproject_without_section_is_skipped(self, isolated_config: Path) -> None:
        (isolated_config / "pyproject.toml").write_text('[project]\nname = "x"\n', encoding="utf-8")
        assert find_config_in_parents(isolated_config) is None

    def test_broken_pyproject_is_skipped(self, isolated_config: Path) -> None:
        (isolated_config / "pyproject.toml").write_text("[tool.flatdown\n", encoding="utf-8")
        assert find_config_in_parents(isolated_config) is None

    def test_env_var_wins(self, isolated_config: Path, monkeypatch) -> None:
        (isolated_config / ".flatdown.toml").write_text("", encoding="utf-8")
        other = isolated_config / "other.yaml"
        monkeypatch.setenv("FLATDOWN_CONFIG", str(other))
        assert discover_config_file(isolated_config) == other

    def test_defaults_to_cwd(self, isolated_config: Path) -> None:
        assert discover_config_file() is None


@pytest.mark.unit
class TestOptionsFromConfig:
    """Test building option objects from configuration mappings."""

    def test_empty_config_gives_defaults(self) -> None:
        assert options_from_config({}) == (LexerOptions(), RendererOptions())

    def test_both_sections(self) -> None:
        lexer_options, renderer_options = options_from_config(
            {"lexer": {"gfm": False}, "renderer": {"bullet_char": "*"}}
        )
        assert not lexer_options.gfm
        assert renderer_options.bullet_char == "*"

    def test_unknown_section(self) -> None:
        with pytest.raises(ConfigurationError, match="Unknown configuration section"):
            options_from_config({"output": {}})

    def test_unknown_key(self) -> None:
        with pytest.raises(ConfigurationError, match="Unknown \\[renderer\\] option"):
            options_from_config({"renderer": {"bullet": "*"}})

    def test_bad_value(self) -> None:
        with pytest.raises(ConfigurationError, match="Invalid \\[lexer\\] options") as exc_info:
            options_from_config({"lexer": {"gfm": "no"}}, config_path="x.toml")
        assert exc_info.value.config_path == "x.toml"
        assert isinstance(exc_info.value.original_error, ValueError)

    def test_section_must_be_table(self) -> None:
        with pytest.raises(ConfigurationError, match="must be a table"):
            options_from_config({"renderer": "-"})


@pytest.mark.unit
class TestLoadOptions:
    """Test the priority order of configuration sources."""

    def test_no_config_gives_defaults(self, isolated_config: Path) -> None:
        assert load_options() == (LexerOptions(), RendererOptions())

    def test_explicit_path(self, isolated_config: Path) -> None:
        path = isolated_config / "custom.toml"
        path.write_text('[renderer]\nbullet_char = "+"\n', encoding="utf-8")
        _, renderer_options = load_options(str(path))
        assert renderer_options.bullet_char == "+"

    def test_explicit_path_beats_discovery(self, isolated_config: Path) -> None:
        (isolated_config / ".flatdown.toml").write_text('[renderer]\nbullet_char = "a"\n', encoding="utf-8")
        explicit = isolated_config / "explicit.json"
        explicit.write_text('{"renderer": {"bullet_char": "b"}}', encoding="utf-8")
        _, renderer_options = load_options(str(explicit), start_dir=isolated_config)
        assert renderer_options.bullet_char == "b"

    def test_discovered_file(self, isolated_config: Path) -> None:
        (isolated_config / ".flatdown.toml").write_text("[lexer]\nparse_tables = false\n", encoding="utf-8")
        lexer_options, _ = load_options(start_dir=isolated_config)
        assert not lexer_options.parse_tables

    def test_missing_env_file(self, isolated_config: Path, monkeypatch) -> None:
        monkeypatch.setenv("FLATDOWN_CONFIG", str(isolated_config / "gone.toml"))
        with pytest.raises(ConfigurationError, match="does not exist"):
            load_options()
