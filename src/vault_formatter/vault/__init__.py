"""Vault storage contracts and implementations."""

from vault_formatter.vault.filesystem import FileSystemVault, normalize_path
from vault_formatter.vault.interfaces import VaultStorage

__all__ = ["FileSystemVault", "VaultStorage", "normalize_path"]
