from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml
from dotenv import dotenv_values
from pydantic import BaseModel

from vault_formatter.config.models import AppConfig, ConfigLoadRequest

logger = logging.getLogger(__name__)


def _merge_layers(*layers: Mapping[str, Any]) -> dict[str, Any]:
    """Fold layers left to right into a new dict. Nested mappings merge, anything else replaces."""
    merged: dict[str, Any] = {}
    for layer in layers:
        for key, value in layer.items():
            current = merged.get(key)
            if isinstance(value, Mapping) and isinstance(current, Mapping):
                merged[key] = _merge_layers(current, value)
            elif isinstance(value, Mapping):
                merged[key] = _merge_layers(value)
            else:
                merged[key] = value
    return merged


def _read_yaml_layer(path: Path) -> dict[str, Any]:
    if not path.exists():
        logger.debug("Config file not found, using defaults. path=%s", path)
        return {}

    data = yaml.safe_load(path.read_text(encoding="utf-8"))
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Top-level YAML must be a mapping, got: {type(data).__name__}")
    return data


def _read_dotenv_layer(path: Optional[str]) -> dict[str, str]:
    if path is None or not Path(path).exists():
        return {}
    return {name: value for name, value in dotenv_values(path).items() if value is not None}


def _section_model(annotation: Any) -> Optional[type[BaseModel]]:
    if isinstance(annotation, type) and issubclass(annotation, BaseModel):
        return annotation
    return None


def _override_path(name: str, prefix: str) -> list[str]:
    """
    Map an override variable name to a config key path.

    `VAULT_FORMATTER__ENGINE__TIMEOUT_SECONDS` becomes `["engine", "timeout_seconds"]`.
    Every segment but the last must name a section, and the last must name a value.
    """
    segments = [part.lower() for part in name[len(prefix) :].split("__") if part]
    if not segments:
        raise ValueError(f"Invalid environment variable override name: {name}")

    dotted = ".".join(segments)
    model: Optional[type[BaseModel]] = AppConfig
    for index, segment in enumerate(segments):
        if model is None:
            raise TypeError(f"Configuration key path does not point to a section: {dotted}")
        field = model.model_fields.get(segment)
        if field is None:
            raise KeyError(f"Unknown configuration key path: {dotted}")
        model = _section_model(field.annotation)
        if index == len(segments) - 1 and model is not None:
            raise TypeError(f"Configuration key path names a section, not a value: {dotted}")
    return segments


def _env_layer(variables: Mapping[str, str], prefix: str) -> dict[str, Any]:
    layer: dict[str, Any] = {}
    for name in sorted(variables):
        if not name.startswith(prefix):
            continue
        *parents, leaf = _override_path(name, prefix)
        target = layer
        for segment in parents:
            target = target.setdefault(segment, {})
        # Raw strings; pydantic coerces them to the field's type.
        target[leaf] = variables[name]
    return layer


class YamlConfigLoader:
    """
    Build `AppConfig` from model defaults, a YAML file and prefixed variables.

    Precedence, lowest first: defaults, YAML file, `.env` file, process environment.
    The `.env` file is read without touching `os.environ`.
    """

    def __init__(self, *, environ: Optional[Mapping[str, str]] = None) -> None:
        self._environ = environ

    async def load(self, request: ConfigLoadRequest = ConfigLoadRequest()) -> AppConfig:
        environ = os.environ if self._environ is None else self._environ
        variables = {**_read_dotenv_layer(request.dotenv_path), **environ}

        merged = _merge_layers(
            _read_yaml_layer(Path(request.yaml_path)),
            _env_layer(variables, request.env_prefix),
        )
        return AppConfig.model_validate(merged)
