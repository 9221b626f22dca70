from __future__ import annotations

from typing import Any, Protocol

from vault_formatter.config.models import AppConfig, ConfigLoadRequest


class ConfigLoader(Protocol):
    """
    Loads effective runtime configuration.

    Precedence, lowest first: model defaults, the YAML file, environment overrides.
    """

    async def load(self, request: ConfigLoadRequest = ConfigLoadRequest()) -> AppConfig:
        ...


class OptionsResolver(Protocol):
    """Resolves the formatting options for one formatting operation."""

    async def resolve_effective_options(self, baseline: dict[str, Any]) -> dict[str, Any]:
        ...
