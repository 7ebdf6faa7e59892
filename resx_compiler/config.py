"""Configuration loading, defaults, and .env support.

WHY: Every component needs the same handful of settings (folders, language
set, namespaces, indentation). Keeping them in one immutable value that is
passed explicitly to constructors avoids hidden global state and lets
tests build any configuration they need.

HOW: python-dotenv loads the .env file on import so environment overrides
(config path, log level) can live next to the project. load_config() reads
the JSON config file, validates it with jsonschema, resolves folders
relative to the file, and returns a frozen ResxConfig.

RULES:
- Config file keys are camelCase (tabSize, srcFolder, ...), matching the
  JSON files already in use
- defaultLang must be a member of languages
- Relative srcFolder/distFolder resolve against the config file's directory
- keyDelimiter is optional; when absent, keys are never split
- Errors are reported as ConfigError with a readable message
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import jsonschema
from dotenv import load_dotenv

from resx_compiler.errors import ConfigError

# Load .env from the project root (where the tool is run from)
load_dotenv()

# ---------------------------------------------------------------------------
# Environment defaults
# ---------------------------------------------------------------------------

DEFAULT_CONFIG_FILE = os.getenv("RESX_CONFIG", "resx.config.json")
DEFAULT_LOG_LEVEL = os.getenv("RESX_LOG_LEVEL", "WARNING")

DEFAULT_TAB_SIZE = 4

# ---------------------------------------------------------------------------
# Config file schema
# ---------------------------------------------------------------------------

_IDENTIFIER_PATTERN = "^[A-Za-z_$][A-Za-z0-9_$]*$"

CONFIG_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "tabSize": {"type": "integer", "minimum": 0},
        "srcFolder": {"type": "string", "minLength": 1},
        "distFolder": {"type": "string", "minLength": 1},
        "resxPrefix": {"type": "string", "minLength": 1},
        "jsNamespace": {"type": "string", "pattern": _IDENTIFIER_PATTERN},
        "tsGlobInterface": {"type": "string", "pattern": _IDENTIFIER_PATTERN},
        "languages": {
            "type": "array",
            "items": {"type": "string", "minLength": 1},
            "minItems": 1,
            "uniqueItems": True,
        },
        "defaultLang": {"type": "string", "minLength": 1},
        "currentLangNS": {"type": "string", "pattern": _IDENTIFIER_PATTERN},
        "keyDelimiter": {"type": "string", "minLength": 1},
    },
    "required": [
        "srcFolder",
        "distFolder",
        "resxPrefix",
        "jsNamespace",
        "tsGlobInterface",
        "languages",
        "defaultLang",
        "currentLangNS",
    ],
}


@dataclass(frozen=True)
class ResxConfig:
    """Immutable compiler configuration.

    WHY: The store, the compiler, and the formatters all read the same
    settings. A frozen dataclass can be shared freely without anyone
    mutating it behind another component's back.

    RULES:
    - languages: ordered tuple; artifact generation follows this order
    - default_lang: member of languages; fallback for missing values
    - key_delimiter: None disables hierarchical keys
    """

    src_folder: Path
    dist_folder: Path
    resx_prefix: str
    js_namespace: str
    ts_glob_interface: str
    languages: Tuple[str, ...]
    default_lang: str
    current_lang_ns: str
    tab_size: int = DEFAULT_TAB_SIZE
    key_delimiter: Optional[str] = None

    def __post_init__(self) -> None:
        if self.default_lang not in self.languages:
            raise ConfigError(
                "Default language '{}' is not one of the configured languages: {}".format(
                    self.default_lang, ", ".join(self.languages)
                )
            )
        if self.tab_size < 0:
            raise ConfigError("tabSize must not be negative")

    @classmethod
    def from_dict(cls, data: Dict[str, Any], base_dir: Optional[Path] = None) -> "ResxConfig":
        """Build a config from a camelCase dict as found in the config file.

        Args:
            data: Parsed config file content.
            base_dir: Directory that relative folders resolve against.

        Raises:
            ConfigError: If the dict fails schema validation.
        """
        try:
            jsonschema.validate(instance=data, schema=CONFIG_SCHEMA)
        except jsonschema.ValidationError as e:
            raise ConfigError("Invalid configuration: {}".format(e.message)) from e

        base = base_dir or Path.cwd()
        return cls(
            src_folder=_resolve_folder(data["srcFolder"], base),
            dist_folder=_resolve_folder(data["distFolder"], base),
            resx_prefix=data["resxPrefix"],
            js_namespace=data["jsNamespace"],
            ts_glob_interface=data["tsGlobInterface"],
            languages=tuple(data["languages"]),
            default_lang=data["defaultLang"],
            current_lang_ns=data["currentLangNS"],
            tab_size=data.get("tabSize", DEFAULT_TAB_SIZE),
            key_delimiter=data.get("keyDelimiter"),
        )


def _resolve_folder(folder: str, base: Path) -> Path:
    path = Path(folder)
    if not path.is_absolute():
        path = base / path
    return path


def load_config(path: Optional[str | Path] = None) -> ResxConfig:
    """Load and validate the JSON configuration file.

    WHY: The CLI and the wizard need one call that turns a file on disk
    into a ready-to-use ResxConfig, with clear errors for humans.

    HOW: Reads the file (default: RESX_CONFIG env var or
    ./resx.config.json), parses JSON, validates, and resolves folders
    against the file's directory.

    Args:
        path: Explicit config file path, or None for the default.

    Returns:
        The validated ResxConfig.

    Raises:
        ConfigError: If the file is missing, not JSON, or invalid.
    """
    config_path = Path(path) if path else Path(DEFAULT_CONFIG_FILE)
    if not config_path.is_file():
        raise ConfigError("Configuration file not found: {}".format(config_path))

    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ConfigError("Configuration file {} is not valid JSON: {}".format(config_path, e)) from e

    return ResxConfig.from_dict(data, base_dir=config_path.resolve().parent)
