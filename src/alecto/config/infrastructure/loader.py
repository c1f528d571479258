"""Config loader — parses YAML or JSON, interpolates env vars, validates, and emits observer events."""

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from alecto.config.domain.config import AppConfig
from alecto.config.domain.observer import ConfigObserver
from alecto.config.infrastructure.env_interpolation import resolve_env_refs
from alecto.config.infrastructure.errors import (
    ConfigLoadError,
    ConfigValidationError,
    MissingEnvVarsError,
)

DEFAULT_CONFIG_PATH = Path(".alecto") / "config.json"


class ConfigLoader:
    """Loads, interpolates, validates, and returns an AppConfig from a file.

    JSON is a subset of YAML, so one parser serves both formats.
    """

    def __init__(self, observer: ConfigObserver) -> None:
        self._observer = observer

    def load(self, path: Path) -> AppConfig:
        """
        Load, interpolate, validate, and return an AppConfig.

        Raises:
            ConfigLoadError: if the file is missing, unreadable, or not YAML/JSON.
            MissingEnvVarsError: if any ${ENV_VAR} without a fallback is unset (all collected first).
            ConfigValidationError: if the schema is violated.
        """
        raw = _parse(path=path)
        cfg = _build_config(resolved=_resolve_env_vars(raw=raw))

        if not cfg.providers:
            self._observer.config_no_providers_warning(path=str(path))
        self._observer.config_loaded(
            path=str(path),
            provider_count=len(cfg.providers),
            model=cfg.model.model,
        )
        return cfg


def _parse(path: Path) -> Any:
    try:
        with path.open("r", encoding="utf-8") as fh:
            raw = yaml.safe_load(fh)
    except FileNotFoundError as exc:
        raise ConfigLoadError(path=path) from exc
    except OSError as exc:
        raise ConfigLoadError(path=path, reason=exc.strerror or str(exc)) from exc
    except yaml.YAMLError as exc:
        raise ConfigLoadError(path=path, reason=f"invalid YAML/JSON ({exc})") from exc

    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigValidationError(
            f"top-level value must be a mapping, got {type(raw).__name__}"
        )
    return raw


def _resolve_env_vars(raw: Any) -> Any:
    resolution = resolve_env_refs(raw)
    if resolution.missing:
        raise MissingEnvVarsError(list(resolution.missing))
    return resolution.value


def _build_config(resolved: Any) -> AppConfig:
    try:
        return AppConfig.model_validate(resolved)
    except ValidationError as exc:
        raise ConfigValidationError(str(exc)) from exc
