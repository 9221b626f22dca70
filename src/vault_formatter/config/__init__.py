"""Runtime configuration loading and vault-level option resolution."""

from vault_formatter.config.cascade import DEFAULT_CANDIDATES, ConfigCandidate, ConfigCascade
from vault_formatter.config.loader import YamlConfigLoader

__all__ = ["ConfigCandidate", "ConfigCascade", "DEFAULT_CANDIDATES", "YamlConfigLoader"]
