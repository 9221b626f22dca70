from __future__ import annotations

from typing import Protocol


class VaultStorage(Protocol):
    """
    Host file storage.

    Paths are normalized and relative to the vault root. `read` and `write` raise
    `OSError` (including `FileNotFoundError`) on failure.
    """

    async def exists(self, path: str) -> bool:
        ...

    async def read(self, path: str) -> str:
        ...

    async def write(self, path: str, text: str) -> None:
        ...
