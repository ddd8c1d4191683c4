"""Frozen dataclasses for settings, the YAML defaults loader and layered resolution."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Mapping

import yaml

from .exceptions import ConfigError

DEFAULT_CONFIG_PATH = "~/.ossh.yml"
CONFIG_PATH_ENV = "OSSH_CONFIG"
DEFAULT_USER = "ec2-user"

_ENV_PATTERN = re.compile(r"\$\{([^}]+)\}")
_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _interpolate_env(value: str, environ: Mapping[str, str]) -> str:
    """Replace ${ENV_VAR} placeholders with environment variable values."""

    def _replace(match: re.Match) -> str:
        env_key = match.group(1)
        env_val = environ.get(env_key)
        if env_val is None:
            raise ConfigError(f"Environment variable '{env_key}' is not set")
        return env_val

    return _ENV_PATTERN.sub(_replace, value)


def _walk_and_interpolate(obj: Any, environ: Mapping[str, str]) -> Any:
    if isinstance(obj, str):
        return _interpolate_env(obj, environ)
    if isinstance(obj, dict):
        return {k: _walk_and_interpolate(v, environ) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_walk_and_interpolate(v, environ) for v in obj]
    return obj


@dataclass(frozen=True)
class LoggingConfig:
    level: str = "WARNING"


@dataclass(frozen=True)
class FileDefaults:
    """Values read from the optional defaults file; every key may be absent."""

    profile: str | None = None
    region: str | None = None
    user: str | None = None
    logging: LoggingConfig = field(default_factory=LoggingConfig)


@dataclass(frozen=True)
class Settings:
    """Everything one invocation needs, resolved before any inventory call."""

    profile: str
    region: str
    user: str
    host_pattern: str | None = None
    stack_pattern: str | None = None
    show_only: bool = False
    case_sensitive: bool = False
    logging: LoggingConfig = field(default_factory=LoggingConfig)


_SECTIONS: dict[str, type] = {"logging": LoggingConfig}


def _build(cls: type, data: dict[str, Any]) -> Any:
    """Construct a frozen dataclass from a mapping, ignoring unknown keys."""
    known = {f.name for f in fields(cls)}
    kwargs: dict[str, Any] = {}
    for key, value in data.items():
        if key not in known:
            continue
        section = _SECTIONS.get(key)
        if section is not None:
            if not isinstance(value, dict):
                raise ConfigError(f"'{key}' must be a mapping")
            value = _build(section, value)
        kwargs[key] = value
    return cls(**kwargs)


def default_config_path(environ: Mapping[str, str] | None = None) -> Path:
    environ = os.environ if environ is None else environ
    return Path(environ.get(CONFIG_PATH_ENV) or DEFAULT_CONFIG_PATH).expanduser()


def load_defaults(
    path: str | Path,
    environ: Mapping[str, str] | None = None,
    required: bool = False,
) -> FileDefaults:
    """Load the defaults file.

    A missing file yields empty defaults unless ``required`` is set, as it is
    for a path the user named explicitly with --config.
    """
    environ = os.environ if environ is None else environ
    path = Path(path).expanduser()
    if not path.is_file():
        if required:
            raise ConfigError(f"Configuration file not found: {path}")
        return FileDefaults()

    try:
        with open(path) as f:
            raw = yaml.safe_load(f)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Cannot parse {path}: {exc}") from exc

    if raw is None:
        return FileDefaults()
    if not isinstance(raw, dict):
        raise ConfigError(f"Configuration file {path} must be a YAML mapping")

    raw = _walk_and_interpolate(raw, environ)
    defaults = _build(FileDefaults, raw)
    _validate(defaults)
    return defaults


def _validate(defaults: FileDefaults) -> None:
    for name in ("profile", "region", "user"):
        value = getattr(defaults, name)
        if value is not None and not isinstance(value, str):
            raise ConfigError(f"'{name}' must be a string")

    if str(defaults.logging.level).upper() not in _LOG_LEVELS:
        raise ConfigError(f"logging.level must be one of {', '.join(_LOG_LEVELS)}")


def _first(*candidates: str | None) -> str | None:
    for candidate in candidates:
        if candidate:
            return candidate
    return None


def resolve_settings(
    args: Any,
    defaults: FileDefaults,
    environ: Mapping[str, str] | None = None,
) -> Settings:
    """Merge CLI arguments over file defaults over the environment.

    ``args`` is the argparse namespace from :func:`opsworks_ssh.cli.build_parser`.
    Raises ConfigError when no region or no profile can be found.
    """
    environ = os.environ if environ is None else environ

    region = _first(
        args.region,
        defaults.region,
        environ.get("AWS_DEFAULT_REGION"),
        environ.get("AWS_REGION"),
    )
    if not region:
        raise ConfigError("region is required: pass --region or set 'region' in the config file")

    profile = _first(args.profile, defaults.profile, environ.get("AWS_PROFILE"))
    if not profile:
        raise ConfigError("profile is required: pass --profile or set 'profile' in the config file")

    user = _first(args.user, defaults.user, environ.get("USER"), environ.get("LOGNAME")) or DEFAULT_USER

    log_config = defaults.logging
    # --verbose only ever raises verbosity, a DEBUG level from the file stays
    if args.verbose and _LOG_LEVELS.index(log_config.level.upper()) > _LOG_LEVELS.index("INFO"):
        log_config = replace(log_config, level="INFO")

    return Settings(
        profile=profile,
        region=region,
        user=user,
        host_pattern=args.hostname or None,
        stack_pattern=args.stack or None,
        show_only=bool(args.show_only),
        case_sensitive=bool(args.csensitive),
        logging=log_config,
    )
