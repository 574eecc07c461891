from __future__ import annotations

import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

import yaml

from tools.sound_extract.errors import ConfigError

DEFAULT_CONFIG_FILE = Path("sound_extract.yaml")

ENV_SOURCE_DIR = "SOUND_EXTRACT_SOURCE_DIR"
ENV_OUTPUT_DIR = "SOUND_EXTRACT_OUTPUT_DIR"
ENV_SUFFIXES = "SOUND_EXTRACT_SUFFIXES"
ENV_FIRST_MATCH = "SOUND_EXTRACT_FIRST_MATCH"
ENV_METRICS_PROM_PATH = "SOUND_EXTRACT_METRICS_PROM_PATH"


@dataclass(frozen=True)
class ExtractorSettings:
    source_dir: Path
    output_dir: Path
    suffixes: Tuple[str, ...]
    output_suffix: str
    first_match: bool
    metrics_prom_path: Optional[Path] = None


DEFAULT_SETTINGS = ExtractorSettings(
    source_dir=Path("soundcn") / "registry" / "soundcn" / "sounds",
    output_dir=Path("src"),
    suffixes=(".ts", ".tsx"),
    output_suffix=".mp3",
    first_match=False,
)


def _normalize(value: str | None) -> str | None:
    if value is None:
        return None
    trimmed = value.strip()
    return trimmed or None


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in {"1", "true", "yes", "on"}


def _as_suffixes(value: Any) -> Tuple[str, ...]:
    if isinstance(value, str):
        items = [item.strip() for item in value.split(",")]
    elif isinstance(value, (list, tuple)):
        items = [str(item).strip() for item in value]
    else:
        raise ConfigError(f"suffixes must be a list or comma separated string, got {value!r}")
    suffixes = tuple(item if item.startswith(".") else f".{item}" for item in items if item)
    if not suffixes:
        raise ConfigError("at least one source file suffix is required")
    return suffixes


def _coerce(key: str, value: Any) -> Any:
    if key in {"source_dir", "output_dir"}:
        if value is None or not str(value).strip():
            raise ConfigError(f"{key} must not be empty")
        return Path(str(value)).expanduser()
    if key == "metrics_prom_path":
        return None if value is None else Path(str(value)).expanduser()
    if key == "suffixes":
        return _as_suffixes(value)
    if key == "first_match":
        return _as_bool(value)
    if key == "output_suffix":
        suffix = "" if value is None else str(value).strip()
        if suffix in {"", "."}:
            raise ConfigError("output_suffix must not be empty")
        if not suffix.startswith("."):
            suffix = f".{suffix}"
        return suffix
    raise ConfigError(f"unknown setting '{key}'")


def _apply(settings: ExtractorSettings, values: Mapping[str, Any]) -> ExtractorSettings:
    return replace(settings, **{key: _coerce(key, value) for key, value in values.items()})


def load_config_file(path: Path) -> Dict[str, Any]:
    with path.open("r", encoding="utf-8") as handle:
        try:
            data = yaml.safe_load(handle)
        except yaml.YAMLError as exc:
            raise ConfigError(f"{path} is not valid YAML: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a mapping of settings")
    known = {f.name for f in fields(ExtractorSettings)}
    unknown = sorted(set(data) - known, key=str)
    if unknown:
        raise ConfigError(
            f"{path} has unknown setting(s): {', '.join(str(key) for key in unknown)}"
        )
    return data


def settings_from_env(environ: Mapping[str, str]) -> Dict[str, Any]:
    values: Dict[str, Any] = {}
    for key, env_name in (
        ("source_dir", ENV_SOURCE_DIR),
        ("output_dir", ENV_OUTPUT_DIR),
        ("suffixes", ENV_SUFFIXES),
        ("first_match", ENV_FIRST_MATCH),
        ("metrics_prom_path", ENV_METRICS_PROM_PATH),
    ):
        raw = _normalize(environ.get(env_name))
        if raw is not None:
            values[key] = raw
    return values


def resolve_settings(
    overrides: Optional[Mapping[str, Any]] = None,
    config_path: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> ExtractorSettings:
    """Combine defaults, the YAML config file, the environment and CLI overrides.

    Later sources win: CLI overrides beat environment variables, which beat the
    config file. ``config_path`` must exist when given explicitly; the default
    ``sound_extract.yaml`` is only read when present.
    """

    environ = os.environ if environ is None else environ
    settings = DEFAULT_SETTINGS

    if config_path is not None:
        if not config_path.is_file():
            raise ConfigError(f"config file not found: {config_path}")
        settings = _apply(settings, load_config_file(config_path))
    elif DEFAULT_CONFIG_FILE.is_file():
        settings = _apply(settings, load_config_file(DEFAULT_CONFIG_FILE))

    settings = _apply(settings, settings_from_env(environ))
    if overrides:
        settings = _apply(
            settings, {key: value for key, value in overrides.items() if value is not None}
        )
    return settings
