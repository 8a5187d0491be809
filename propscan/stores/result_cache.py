"""Persistent cache for per-file extraction results."""

from __future__ import annotations

import hashlib
import json
from datetime import UTC, datetime
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from ..logging import get_logger
from ..models import FinderResult

_CACHE_VERSION = 1


def fingerprint_source(source: str) -> str:
    """Content digest used to invalidate a cached file result."""
    return hashlib.sha256(source.encode("utf-8")).hexdigest()


class ResultCache:
    """Stores ``FinderResult`` payloads keyed by relative file path."""

    def __init__(self, path: Path | None) -> None:
        self._path = path
        self._entries: Dict[str, Dict[str, object]] = {}
        self._dirty = False
        self.logger = get_logger("cache")
        if self._path is not None:
            self._load(self._path)

    def __len__(self) -> int:
        return len(self._entries)

    def keys(self) -> List[str]:
        return list(self._entries)

    def get(self, key: str, *, signature: str, fingerprint: str) -> Optional[FinderResult]:
        entry = self._entries.get(key)
        if not entry:
            return None
        if entry.get("signature") != signature:
            return None
        if entry.get("fingerprint") != fingerprint:
            return None
        payload = entry.get("result")
        if not isinstance(payload, dict):
            return None
        try:
            return FinderResult.from_dict(payload)
        except ValueError as exc:
            self.logger.debug("Discarding unreadable cache entry %s: %s", key, exc)
            return None

    def store(
        self,
        key: str,
        *,
        signature: str,
        fingerprint: str,
        result: FinderResult,
    ) -> None:
        self._entries[key] = {
            "signature": signature,
            "fingerprint": fingerprint,
            "result": result.to_dict(),
            "updated_at": datetime.now(UTC).isoformat().replace("+00:00", "Z"),
        }
        self._dirty = True

    def prune(self, keys_to_keep: Iterable[str]) -> None:
        keep = set(keys_to_keep)
        removed = [key for key in self._entries if key not in keep]
        if removed:
            for key in removed:
                self._entries.pop(key, None)
            self._dirty = True

    def persist(self) -> None:
        if not self._dirty or self._path is None:
            return
        payload = {
            "version": _CACHE_VERSION,
            "entries": self._entries,
        }
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps(payload, indent=2, sort_keys=True), encoding="utf-8")
        self._dirty = False

    # ------------------------------------------------------------------
    # Internal helpers

    def _load(self, path: Path) -> None:
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return
        except (OSError, json.JSONDecodeError) as exc:
            self.logger.warning("Ignoring unreadable cache %s: %s", path, exc)
            return
        if not isinstance(data, dict) or data.get("version") != _CACHE_VERSION:
            return
        entries = data.get("entries")
        if not isinstance(entries, dict):
            return
        self._entries = {
            key: raw
            for key, raw in entries.items()
            if isinstance(key, str)
            and isinstance(raw, dict)
            and {"signature", "fingerprint", "result"} <= raw.keys()
        }
        self._dirty = False


__all__ = ["ResultCache", "fingerprint_source"]
