"""
Vault-level formatting configuration.

Candidate files are evaluated in a fixed precedence order and shallow-merged over
the caller's baseline, later candidates winning per key. A candidate that is
missing, unreadable or malformed is skipped; nothing here raises to the caller.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Literal, Optional, Sequence, Tuple

import yaml

from vault_formatter.errors import ConfigDecodeError
from vault_formatter.vault.interfaces import VaultStorage

logger = logging.getLogger(__name__)

Encoding = Literal["json", "yaml"]


@dataclass(frozen=True, slots=True)
class ConfigCandidate:
    path: str
    encodings: Tuple[Encoding, ...]


DEFAULT_CANDIDATES: Tuple[ConfigCandidate, ...] = (
    ConfigCandidate(path=".prettierrc", encodings=("json", "yaml")),
    ConfigCandidate(path=".prettierrc.json", encodings=("json",)),
    ConfigCandidate(path="prettierrc.json", encodings=("json",)),
    ConfigCandidate(path=".prettierrc.yaml", encodings=("yaml",)),
    ConfigCandidate(path=".prettierrc.yml", encodings=("yaml",)),
)


def _decode_json(raw: str) -> Any:
    return json.loads(raw)


def _decode_yaml(raw: str) -> Any:
    data = yaml.safe_load(raw)
    return {} if data is None else data


_DECODERS: Dict[Encoding, Callable[[str], Any]] = {
    "json": _decode_json,
    "yaml": _decode_yaml,
}


def decode_candidate(candidate: ConfigCandidate, raw: str) -> dict[str, Any]:
    """Decode with each accepted encoding in order; the first that yields a mapping wins."""
    errors: list[str] = []
    for encoding in candidate.encodings:
        try:
            data = _DECODERS[encoding](raw)
        except (ValueError, yaml.YAMLError) as e:
            errors.append(f"{encoding}: {e}")
            continue
        if not isinstance(data, dict):
            errors.append(f"{encoding}: top-level value must be a mapping, got {type(data).__name__}")
            continue
        return {str(k): v for k, v in data.items()}
    raise ConfigDecodeError(candidate.path, "; ".join(errors) or "no accepted encodings")


class ConfigSourceReader:
    """Reads candidate files through the host storage."""

    def __init__(self, storage: VaultStorage) -> None:
        self._storage = storage

    async def read(self, path: str) -> Optional[str]:
        """Return raw text, or None when the file does not exist. Read faults raise ConfigDecodeError."""
        if not await self._storage.exists(path):
            return None
        try:
            return await self._storage.read(path)
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as e:
            raise ConfigDecodeError(path, f"unreadable: {e}") from e


class ConfigCascade:
    def __init__(
        self,
        storage: VaultStorage,
        candidates: Sequence[ConfigCandidate] = DEFAULT_CANDIDATES,
    ) -> None:
        self._reader = ConfigSourceReader(storage)
        self._candidates = tuple(candidates)

    @property
    def candidates(self) -> Tuple[ConfigCandidate, ...]:
        return self._candidates

    async def resolve_effective_options(self, baseline: dict[str, Any]) -> dict[str, Any]:
        options = dict(baseline)
        for candidate in self._candidates:
            try:
                raw = await self._reader.read(candidate.path)
                if raw is None:
                    continue
                overrides = decode_candidate(candidate, raw)
            except ConfigDecodeError as e:
                logger.warning("Skipping unusable formatter config. path=%s reason=%s", e.path, e.reason)
                continue
            except Exception:
                logger.exception("Unexpected error reading formatter config. path=%s", candidate.path)
                continue

            logger.debug("Loaded formatter config. path=%s keys=%s", candidate.path, sorted(overrides))
            options.update(overrides)
        return options
