from __future__ import annotations


class VaultFormatterError(Exception):
    """Base class for all errors raised by this package."""


class ConfigDecodeError(VaultFormatterError):
    """A configuration candidate exists but could not be read or decoded."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason


class DocumentNotFoundError(VaultFormatterError):
    """The target document no longer exists in the vault."""

    def __init__(self, path: str) -> None:
        super().__init__(f"Document not found: {path}")
        self.path = path


class FormatError(VaultFormatterError):
    """Formatting a single document failed. The stored content is untouched."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Failed to format {path}: {reason}")
        self.path = path
        self.reason = reason


class DocumentReadError(FormatError):
    pass


class EngineError(FormatError):
    pass


class DocumentWriteError(FormatError):
    pass
