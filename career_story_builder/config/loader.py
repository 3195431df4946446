from __future__ import annotations

from pathlib import Path
from typing import Any, Callable
import os

import yaml
from loguru import logger

from career_story_builder.config.schema import AppConfigRoot

ENV_PREFIX = "CAREER_STORY_BUILDER_"


def _split_csv(raw: str) -> list[str]:
    return [item.strip() for item in raw.split(",") if item.strip()]


# env suffix -> (section, key, parser)
_ENV_FIELDS: dict[str, tuple[str, str, Callable[[str], Any]]] = {
    "LOG_LEVEL": ("app", "log_level", str),
    "HOST": ("server", "host", str),
    "PORT": ("server", "port", int),
    "CORS_ORIGINS": ("server", "cors_origins", _split_csv),
    "CLARIFY_ROUNDS": ("wizard", "clarify_rounds", int),
}


def _read_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file must contain a mapping: {path}")
    return data


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            base[key] = _deep_merge(base[key], value)
        else:
            base[key] = value
    return base


def _load_dotenv(dotenv_path: Path) -> None:
    """Export ``KEY=value`` lines from ``.env``; real environment variables win."""
    if not dotenv_path.exists():
        return
    for raw_line in dotenv_path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        os.environ.setdefault(key.strip(), value.strip().strip("\"'"))


def _apply_env(config_data: dict[str, Any]) -> dict[str, Any]:
    for suffix, (section, key, parse) in _ENV_FIELDS.items():
        name = f"{ENV_PREFIX}{suffix}"
        raw = os.getenv(name)
        if not raw:
            continue
        try:
            value = parse(raw)
        except ValueError as exc:
            raise ValueError(f"Invalid value for {name}: {raw!r}") from exc
        config_data.setdefault(section, {})[key] = value
    return config_data


def load_config(
    config_path: Path | None = None,
    profile: str | None = None,
    overrides: dict[str, Any] | None = None,
) -> AppConfigRoot:
    """Build the effective config.

    Later sources win: ``configs/default.yaml``, the profile file, ``config_path``,
    ``overrides``, then ``CAREER_STORY_BUILDER_*`` environment variables.
    """
    base_dir = Path.cwd()
    _load_dotenv(base_dir / ".env")

    sources = [base_dir / "configs" / "default.yaml"]
    if profile:
        profile_path = base_dir / "configs" / "profiles" / f"{profile}.yaml"
        if not profile_path.exists():
            logger.warning("Config profile '{}' not found at {}", profile, profile_path)
        sources.append(profile_path)
    if config_path:
        sources.append(config_path)

    config_data: dict[str, Any] = {}
    for path in sources:
        config_data = _deep_merge(config_data, _read_yaml(path))
    if overrides:
        config_data = _deep_merge(config_data, overrides)

    config = AppConfigRoot.model_validate(_apply_env(config_data))
    logger.debug("Loaded config (profile={}) from {}", profile or "-", base_dir)
    return config


def masked_env_snapshot() -> dict[str, str | None]:
    return {f"{ENV_PREFIX}{suffix}": os.getenv(f"{ENV_PREFIX}{suffix}") for suffix in _ENV_FIELDS}
