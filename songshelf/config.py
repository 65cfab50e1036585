"""
Configuration for the songshelf service.

Values come from the dataclass defaults, then an optional YAML file, then
environment variables. ``PORT`` is honoured as-is so the service runs on
hosts that assign it; everything else uses the ``SONGSHELF_`` prefix.
"""

import os
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from songshelf.exceptions import ConfigurationError

ENV_PREFIX = "SONGSHELF_"
VALID_LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']


@dataclass
class Config:
    """Service configuration with defaults."""

    songs_dir: str = "songs"
    host: str = "0.0.0.0"
    port: int = 3000

    # Logging
    log_level: str = "INFO"
    log_file: Optional[str] = None

    # HTTP
    cors_origins: list = field(default_factory=lambda: ["*"])
    max_content_length: Optional[int] = None

    @property
    def songs_path(self) -> Path:
        return Path(self.songs_dir).expanduser()


_FIELD_NAMES = frozenset(f.name for f in fields(Config))


def load_config(
    config_path: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Config:
    """
    Build a :class:`Config` from defaults, a YAML file and the environment.

    Args:
        config_path: Path to a YAML file (optional, ignored if missing)
        environ: Environment mapping, ``os.environ`` when omitted

    Returns:
        Validated configuration

    Raises:
        ConfigurationError: If the file or any value is invalid
    """
    environ = os.environ if environ is None else environ
    values: Dict[str, Any] = {}

    if config_path and Path(config_path).exists():
        values.update(_read_yaml(Path(config_path)))

    values.update(_env_overrides(environ))

    unknown = sorted(set(values) - _FIELD_NAMES)
    if unknown:
        raise ConfigurationError(f"Unknown configuration keys: {', '.join(unknown)}")

    config = replace(Config(), **values)
    _validate_config(config)
    return config


def _read_yaml(config_path: Path) -> Dict[str, Any]:
    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in config file: {e}")
    except IOError as e:
        raise ConfigurationError(f"Cannot read config file {config_path}: {e}")

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file {config_path} must contain a mapping")
    return {str(k).replace('-', '_'): v for k, v in data.items()}


def _env_overrides(environ: Mapping[str, str]) -> Dict[str, Any]:
    overrides: Dict[str, Any] = {}

    if environ.get("PORT"):
        overrides["port"] = _parse_int("PORT", environ["PORT"])

    for key, value in environ.items():
        if not key.startswith(ENV_PREFIX) or value == "":
            continue
        name = key[len(ENV_PREFIX):].lower()
        if name not in _FIELD_NAMES:
            continue
        if name in ("port", "max_content_length"):
            overrides[name] = _parse_int(key, value)
        elif name == "cors_origins":
            overrides[name] = [o.strip() for o in value.split(",") if o.strip()]
        else:
            overrides[name] = value

    return overrides


def _parse_int(name: str, value: str) -> int:
    try:
        return int(value)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {value!r}")


def _validate_config(config: Config):
    if not isinstance(config.port, int) or not 0 < config.port < 65536:
        raise ConfigurationError("port must be an integer between 1 and 65535")

    if not config.songs_dir:
        raise ConfigurationError("songs_dir must not be empty")

    if str(config.log_level).upper() not in VALID_LOG_LEVELS:
        raise ConfigurationError(f"log_level must be one of {VALID_LOG_LEVELS}")

    if not isinstance(config.cors_origins, list) or not config.cors_origins:
        raise ConfigurationError("cors_origins must be a non-empty list")

    if config.max_content_length is not None and (
        not isinstance(config.max_content_length, int) or config.max_content_length < 1
    ):
        raise ConfigurationError("max_content_length must be a positive integer")
