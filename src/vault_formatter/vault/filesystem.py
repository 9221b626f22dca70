from __future__ import annotations

import logging
from pathlib import Path

logger = logging.getLogger(__name__)


def normalize_path(path: str) -> str:
    """
    Normalize a vault path to a relative POSIX form.

    Backslashes become slashes, empty and "." segments are dropped and ".." is
    resolved. A path that escapes the vault root raises ValueError.
    """
    segments: list[str] = []
    for part in path.replace("\\", "/").split("/"):
        if part in ("", "."):
            continue
        if part == "..":
            if not segments:
                raise ValueError(f"Path escapes the vault root: {path}")
            segments.pop()
            continue
        segments.append(part)
    if not segments:
        raise ValueError(f"Empty vault path: {path!r}")
    return "/".join(segments)


class FileSystemVault:
    """Vault storage backed by a directory on the local file system."""

    def __init__(self, root: str | Path) -> None:
        self._root = Path(root).resolve()

    @property
    def root(self) -> Path:
        return self._root

    def _resolve(self, path: str) -> Path:
        return self._root.joinpath(*normalize_path(path).split("/"))

    async def exists(self, path: str) -> bool:
        try:
            return self._resolve(path).is_file()
        except ValueError:
            return False

    async def read(self, path: str) -> str:
        file_path = self._resolve(path)
        with file_path.open("r", encoding="utf-8", newline="") as f:
            return f.read()

    async def write(self, path: str, text: str) -> None:
        file_path = self._resolve(path)
        file_path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = file_path.with_name(file_path.name + ".tmp")
        with tmp_path.open("w", encoding="utf-8", newline="") as f:
            f.write(text)
        tmp_path.replace(file_path)
        logger.debug("Document written. path=%s chars=%d", path, len(text))
