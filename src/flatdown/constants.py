#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Constants and default values for the flatdown library.

Constants are organized by category:
1. Rendering - glyphs and widths used when flattening
2. Tokenizer - extension defaults and mistune plugin names
3. Configuration - config file names and environment variables
4. CLI - exit codes, output formats and log formats
"""

from __future__ import annotations

from typing import Literal

# =============================================================================
# Rendering
# =============================================================================

DEFAULT_BULLET_CHAR = "•"
DEFAULT_QUOTE_PREFIX = "> "

CHECKBOX_CHECKED = " [x]"
CHECKBOX_UNCHECKED = " [ ]"
CHECKBOX_WIDTH = len(CHECKBOX_CHECKED)

HEADING_MARKER = "#"

# =============================================================================
# Tokenizer
# =============================================================================

DEFAULT_GFM = True
DEFAULT_PARSE_STRIKETHROUGH = True
DEFAULT_PARSE_TABLES = True
DEFAULT_PARSE_TASK_LISTS = True
DEFAULT_PARSE_AUTOLINKS = True

PLUGIN_STRIKETHROUGH = "strikethrough"
PLUGIN_TABLE = "table"
PLUGIN_TASK_LISTS = "task_lists"
PLUGIN_URL = "url"

# =============================================================================
# Configuration
# =============================================================================

CONFIG_ENV_VAR = "FLATDOWN_CONFIG"
CONFIG_FILENAMES = (".flatdown.toml", ".flatdown.yaml", ".flatdown.yml", ".flatdown.json")
PYPROJECT_FILENAME = "pyproject.toml"
PYPROJECT_TOOL_KEY = "flatdown"

# =============================================================================
# CLI
# =============================================================================

OutputFormat = Literal["json", "text", "attrs"]
OUTPUT_FORMATS: tuple[str, ...] = ("json", "text", "attrs")
DEFAULT_OUTPUT_FORMAT: OutputFormat = "json"

EXIT_SUCCESS = 0
EXIT_ERROR = 1
EXIT_VALIDATION_ERROR = 3
EXIT_FILE_ERROR = 4
EXIT_INTERNAL_ERROR = 5

LOG_FORMAT = "%(levelname)s: %(message)s"
TRACE_LOG_FORMAT = "[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s"
TRACE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
