#  Copyright (c) 2025 Tom Villani, Ph.D.

"""Configuration file discovery and loading for flatdown.

This module finds configuration files, loads them from TOML, YAML or JSON,
and turns the result into :class:`~flatdown.options.LexerOptions` and
:class:`~flatdown.options.RendererOptions`.

A configuration holds up to two tables:

.. code-block:: toml

    [lexer]
    gfm = true
    parse_tables = false

    [renderer]
    bullet_char = "-"

In ``pyproject.toml`` the same tables live under ``[tool.flatdown]``.
"""

import json
import logging
import os
import sys
from pathlib import Path

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib  # type: ignore[import-not-found,unused-ignore]
from typing import Any, Dict, Mapping, Optional

import yaml

from flatdown.constants import CONFIG_ENV_VAR, CONFIG_FILENAMES, PYPROJECT_FILENAME, PYPROJECT_TOOL_KEY
from flatdown.exceptions import ConfigurationError
from flatdown.options import LexerOptions, RendererOptions

logger = logging.getLogger(__name__)

CONFIG_SECTIONS = ("lexer", "renderer")


def _load_pyproject_section(pyproject_path: Path) -> Dict[str, Any]:
    """Load the ``[tool.flatdown]`` section from a pyproject.toml file.

    Parameters
    ----------
    pyproject_path : Path
        Path to pyproject.toml file

    Returns
    -------
    dict
        Configuration dictionary from ``[tool.flatdown]``, or empty dict if not found

    Raises
    ------
    ConfigurationError
        If pyproject.toml cannot be parsed

    """
    try:
        with open(pyproject_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigurationError(
            f"Invalid TOML in pyproject.toml {pyproject_path}: {e}", config_path=str(pyproject_path), original_error=e
        ) from e
    except OSError as e:
        raise ConfigurationError(
            f"Error reading pyproject.toml {pyproject_path}: {e}", config_path=str(pyproject_path), original_error=e
        ) from e

    config = data.get("tool", {}).get(PYPROJECT_TOOL_KEY)
    if config is None:
        return {}
    if not isinstance(config, dict):
        raise ConfigurationError(
            f"[tool.{PYPROJECT_TOOL_KEY}] section in {pyproject_path} must be a table, got {type(config).__name__}",
            config_path=str(pyproject_path),
        )
    return config


def find_config_in_parents(start_dir: Optional[Path] = None) -> Optional[Path]:
    """Find a configuration file by searching parent directories.

    Walks up from ``start_dir`` to the filesystem root. In each directory the
    dedicated files are checked first (``.flatdown.toml``, ``.flatdown.yaml``,
    ``.flatdown.yml``, ``.flatdown.json``), then ``pyproject.toml`` when it has
    a ``[tool.flatdown]`` section.

    Parameters
    ----------
    start_dir : Path, optional
        Starting directory for search, defaults to current working directory

    Returns
    -------
    Path or None
        Path to first config file found, or None if not found

    """
    if start_dir is None:
        start_dir = Path.cwd()

    current = start_dir.resolve()

    while True:
        for filename in CONFIG_FILENAMES:
            config_path = current / filename
            if config_path.is_file():
                return config_path

        pyproject_path = current / PYPROJECT_FILENAME
        if pyproject_path.is_file():
            try:
                if _load_pyproject_section(pyproject_path):
                    return pyproject_path
            except ConfigurationError as e:
                # A broken pyproject.toml further up must not block discovery
                logger.debug("Skipping %s: %s", pyproject_path, e)

        parent = current.parent
        if parent == current:
            break

        current = parent

    return None


def discover_config_file(start_dir: Optional[Path] = None) -> Optional[Path]:
    """Discover a configuration file in the standard locations.

    The ``FLATDOWN_CONFIG`` environment variable wins when set; otherwise the
    parent directories of ``start_dir`` are searched.

    Parameters
    ----------
    start_dir : Path, optional
        Starting directory for the parent search

    Returns
    -------
    Path or None
        Path to discovered config file, or None if not found

    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path)
    return find_config_in_parents(start_dir)


def load_config_file(config_path: Path | str) -> Dict[str, Any]:
    """Load configuration from a TOML, YAML, JSON or pyproject.toml file.

    The format is picked from the file name and extension.

    Parameters
    ----------
    config_path : Path or str
        Path to the configuration file

    Returns
    -------
    dict
        Configuration dictionary loaded from file

    Raises
    ------
    ConfigurationError
        If the file cannot be read, parsed, or has an unsupported format

    Examples
    --------
    >>> config = load_config_file(".flatdown.toml")
    >>> config.get("renderer", {}).get("bullet_char")
    '-'

    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise ConfigurationError(f"Configuration file does not exist: {config_path}", config_path=str(config_path))

    if not config_path.is_file():
        raise ConfigurationError(f"Configuration path is not a file: {config_path}", config_path=str(config_path))

    filename = config_path.name.lower()
    ext = config_path.suffix.lower()

    if filename == PYPROJECT_FILENAME:
        return _load_pyproject_section(config_path)
    elif ext == ".toml":
        return _load_toml_config(config_path)
    elif ext in (".yaml", ".yml"):
        return _load_yaml_config(config_path)
    elif ext == ".json":
        return _load_json_config(config_path)

    raise ConfigurationError(
        f"Unsupported config file format: {ext}. Use .json, .toml, or .yaml", config_path=str(config_path)
    )


def _load_toml_config(config_path: Path) -> Dict[str, Any]:
    """Load configuration from TOML file."""
    try:
        with open(config_path, "rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigurationError(
            f"Invalid TOML in config file {config_path}: {e}", config_path=str(config_path), original_error=e
        ) from e
    except OSError as e:
        raise ConfigurationError(
            f"Error reading TOML config {config_path}: {e}", config_path=str(config_path), original_error=e
        ) from e


def _load_json_config(config_path: Path) -> Dict[str, Any]:
    """Load configuration from JSON file.

    Parameters
    ----------
    config_path : Path
        Path to JSON configuration file

    Returns
    -------
    dict
        Configuration dictionary

    Raises
    ------
    ConfigurationError
        If JSON file cannot be parsed or is not an object

    """
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            config = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(
            f"Invalid JSON in config file {config_path}: {e}", config_path=str(config_path), original_error=e
        ) from e
    except OSError as e:
        raise ConfigurationError(
            f"Error reading JSON config {config_path}: {e}", config_path=str(config_path), original_error=e
        ) from e

    if not isinstance(config, dict):
        raise ConfigurationError(
            f"JSON config file must contain an object, got {type(config).__name__}", config_path=str(config_path)
        )
    return config


def _load_yaml_config(config_path: Path) -> Dict[str, Any]:
    """Load configuration from YAML file.

    Parameters
    ----------
    config_path : Path
        Path to YAML configuration file

    Returns
    -------
    dict
        Configuration dictionary; an empty file yields an empty dict

    Raises
    ------
    ConfigurationError
        If YAML file cannot be parsed or is not a mapping

    """
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(
            f"Invalid YAML in config file {config_path}: {e}", config_path=str(config_path), original_error=e
        ) from e
    except OSError as e:
        raise ConfigurationError(
            f"Error reading YAML config {config_path}: {e}", config_path=str(config_path), original_error=e
        ) from e

    if config is None:
        return {}
    if not isinstance(config, dict):
        raise ConfigurationError(
            f"YAML config file must contain a mapping, got {type(config).__name__}", config_path=str(config_path)
        )
    return config


def _build_options(cls: Any, section: str, values: Any, config_path: Optional[str]) -> Any:
    if not isinstance(values, Mapping):
        raise ConfigurationError(
            f"[{section}] must be a table, got {type(values).__name__}", config_path=config_path
        )

    known = set(cls.field_names())
    unknown = sorted(set(values) - known)
    if unknown:
        raise ConfigurationError(
            f"Unknown [{section}] option(s): {', '.join(unknown)}. Valid options: {', '.join(sorted(known))}",
            config_path=config_path,
        )

    try:
        return cls(**values)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid [{section}] options: {e}", config_path=config_path, original_error=e) from e


def options_from_config(
    config: Mapping[str, Any], config_path: Optional[str] = None
) -> tuple[LexerOptions, RendererOptions]:
    """Build option objects from a loaded configuration mapping.

    Parameters
    ----------
    config : Mapping
        Configuration with optional ``lexer`` and ``renderer`` tables
    config_path : str, optional
        Source of the configuration, used in error messages

    Returns
    -------
    tuple of (LexerOptions, RendererOptions)
        Options with defaults for everything the configuration leaves out

    Raises
    ------
    ConfigurationError
        If a table or key is unknown, or a value is invalid

    Examples
    --------
    >>> lexer_options, renderer_options = options_from_config({"renderer": {"bullet_char": "*"}})
    >>> renderer_options.bullet_char
    '*'

    """
    unknown = sorted(set(config) - set(CONFIG_SECTIONS))
    if unknown:
        raise ConfigurationError(
            f"Unknown configuration section(s): {', '.join(unknown)}. Valid sections: {', '.join(CONFIG_SECTIONS)}",
            config_path=config_path,
        )

    lexer_options = _build_options(LexerOptions, "lexer", config.get("lexer", {}), config_path)
    renderer_options = _build_options(RendererOptions, "renderer", config.get("renderer", {}), config_path)
    return lexer_options, renderer_options


def load_options(
    explicit_path: Optional[str] = None, start_dir: Optional[Path] = None
) -> tuple[LexerOptions, RendererOptions]:
    """Load options with proper priority handling.

    Priority order (highest to lowest):
    1. Explicit config file path (``--config`` flag)
    2. ``FLATDOWN_CONFIG`` environment variable
    3. Auto-discovered config file

    Parameters
    ----------
    explicit_path : str, optional
        Explicit config file path
    start_dir : Path, optional
        Starting directory for auto-discovery

    Returns
    -------
    tuple of (LexerOptions, RendererOptions)
        Configured options; defaults when no file is found

    """
    config_path: Optional[Path] = Path(explicit_path) if explicit_path else discover_config_file(start_dir)
    if config_path is None:
        logger.debug("No configuration file found, using defaults")
        return LexerOptions(), RendererOptions()

    logger.debug("Loading configuration from %s", config_path)
    return options_from_config(load_config_file(config_path), config_path=str(config_path))
