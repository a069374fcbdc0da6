"""
Interpreter configuration.

Settings come from three layers, later layers winning:

1. Built-in defaults (InterpreterConfig field defaults)
2. A YAML file: an explicit path, else $JLANG_CONFIG, else ./jlang.yaml
3. Environment variables: JLANG_TRACE, JLANG_MAX_CALL_DEPTH,
   JLANG_VALUE_OVERHEAD

Example jlang.yaml:

    schema_version: "1.0"
    trace: false
    max_call_depth: 50
"""

import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from .errors import ConfigError

CONFIG_FILENAME = "jlang.yaml"
CONFIG_ENV = "JLANG_CONFIG"

# Per-value overhead charged on top of a string's encoded length
DEFAULT_VALUE_OVERHEAD = 16


@dataclass(frozen=True)
class InterpreterConfig:
    """Tunable interpreter settings."""
    value_overhead: int = DEFAULT_VALUE_OVERHEAD
    max_call_depth: int = 100
    trace: bool = True
    encoding: str = "utf-8"
    default_window_title: str = "Window"
    script_extension: str = ".jlsh"

    def with_overrides(self, **overrides: Any) -> "InterpreterConfig":
        """Copy of this config with the given fields replaced."""
        return replace(self, **_validate(overrides, source="overrides"))


_ENV_OVERRIDES = {
    "JLANG_TRACE": "trace",
    "JLANG_MAX_CALL_DEPTH": "max_call_depth",
    "JLANG_VALUE_OVERHEAD": "value_overhead",
}


def _field_types() -> Dict[str, type]:
    return {f.name: type(f.default) for f in fields(InterpreterConfig)}


def _validate(data: Dict[str, Any], source: str) -> Dict[str, Any]:
    """Check keys and value types against InterpreterConfig."""
    types = _field_types()
    checked: Dict[str, Any] = {}
    for key, value in data.items():
        if key not in types:
            raise ConfigError(f"Unknown configuration key '{key}' in {source}")
        expected = types[key]
        # bool is a subclass of int; keep them apart
        if expected is int and (isinstance(value, bool) or not isinstance(value, int)):
            raise ConfigError(f"'{key}' in {source} must be an integer, got {value!r}")
        if not isinstance(value, expected):
            raise ConfigError(
                f"'{key}' in {source} must be {expected.__name__}, got {value!r}"
            )
        if expected is int and value < 0:
            raise ConfigError(f"'{key}' in {source} must not be negative")
        checked[key] = value
    return checked


def _parse_env_value(name: str, raw: str, expected: type) -> Any:
    if expected is bool:
        lowered = raw.strip().lower()
        if lowered in ("1", "true", "yes", "on"):
            return True
        if lowered in ("0", "false", "no", "off"):
            return False
        raise ConfigError(f"{name} must be a boolean, got {raw!r}")
    try:
        return int(raw)
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from None


def load_yaml_config(path: Union[str, Path]) -> Dict[str, Any]:
    """Load and validate a YAML configuration file."""
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"Cannot read configuration file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid configuration format in {path}: expected a mapping at root")

    schema_version = data.pop("schema_version", "1.0")
    if not isinstance(schema_version, str) or not schema_version.startswith("1."):
        raise ConfigError(
            f"Unsupported schema version '{schema_version}' in {path}. Expected version 1.x"
        )
    return _validate(data, source=str(path))


def _default_config_path() -> Optional[Path]:
    env_path = os.environ.get(CONFIG_ENV)
    if env_path:
        return Path(env_path)
    local = Path.cwd() / CONFIG_FILENAME
    if local.exists():
        return local
    return None


def load_config(path: Union[str, Path, None] = None) -> InterpreterConfig:
    """
    Build an InterpreterConfig from defaults, a YAML file and the environment.

    Args:
        path: Explicit YAML file. When omitted, $JLANG_CONFIG or
            ./jlang.yaml is used if available.

    Returns:
        The merged configuration

    Raises:
        ConfigError: if the file or an environment override is invalid
    """
    values: Dict[str, Any] = {}

    config_path = Path(path) if path is not None else _default_config_path()
    if config_path is not None:
        values.update(load_yaml_config(config_path))

    types = _field_types()
    for env_name, key in _ENV_OVERRIDES.items():
        raw = os.environ.get(env_name)
        if raw is not None:
            values[key] = _parse_env_value(env_name, raw, types[key])

    return InterpreterConfig(**_validate(values, source="environment"))
