from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol

_PARSERS_BY_EXTENSION: Mapping[str, str] = {
    "md": "markdown",
    "markdown": "markdown",
    "js": "babel",
    "jsx": "babel",
    "mjs": "babel",
    "cjs": "babel",
    "ts": "typescript",
    "tsx": "typescript",
    "mts": "typescript",
    "cts": "typescript",
    "css": "css",
    "scss": "scss",
    "less": "less",
    "html": "html",
    "htm": "html",
    "yaml": "yaml",
    "yml": "yaml",
    "json": "json",
}


def parser_for_path(path: str) -> Optional[str]:
    """Prettier parser name for a document path, or None to let the engine infer it."""
    name = path.replace("\\", "/").rsplit("/", 1)[-1]
    if "." not in name.lstrip("."):
        return None
    return _PARSERS_BY_EXTENSION.get(name.rsplit(".", 1)[-1].lower())


class FormattingEngine(Protocol):
    async def format(
        self,
        text: str,
        options: Mapping[str, Any],
        *,
        parser: Optional[str],
        filepath: str,
    ) -> str:
        """Return the formatted text. Raises EngineError when the content cannot be formatted."""
