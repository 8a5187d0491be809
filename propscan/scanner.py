"""Walks source trees and runs one extraction pass per TypeScript file."""

from __future__ import annotations

import os
from dataclasses import dataclass
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Sequence

from .classifier import ClassificationContext, TypeClassifier
from .config import PropScanConfig
from .errors import SourceParseError
from .known_symbols import extend_registry
from .locator import ComponentLocator
from .logging import get_logger
from .models import FinderResult
from .stores.result_cache import ResultCache, fingerprint_source
from .typegraph.graph import GraphAccessor
from .typegraph.typescript import SUPPORTED_SUFFIXES, TypeScriptParser

_EXCLUDED_DIRS = {
    ".git",
    ".hg",
    ".svn",
    ".venv",
    "node_modules",
    "__pycache__",
    ".propscan",
}


@dataclass
class IgnoreRule:
    """Represents an ``exclude_paths`` pattern from .propscan.yml."""

    pattern: str
    directory_only: bool
    has_slash: bool

    def matches(self, rel_path: str, is_dir: bool) -> bool:
        if self.directory_only and not is_dir:
            return False
        if self.has_slash:
            return fnmatchcase(rel_path, self.pattern) or rel_path.startswith(f"{self.pattern}/")
        return any(fnmatchcase(part, self.pattern) for part in rel_path.split("/"))


def _build_ignore_rule(pattern: str) -> Optional[IgnoreRule]:
    pattern = pattern.strip().lstrip("/")
    directory_only = pattern.endswith("/")
    pattern = pattern.rstrip("/")
    if not pattern:
        return None
    return IgnoreRule(pattern=pattern, directory_only=directory_only, has_slash="/" in pattern)


def _should_ignore(rel_path: str, is_dir: bool, rules: Sequence[IgnoreRule]) -> bool:
    return any(rule.matches(rel_path, is_dir) for rule in rules)


def _iter_sources(root: Path, rules: Sequence[IgnoreRule]) -> Iterator[Path]:
    for dirpath, dirnames, filenames in os.walk(root):
        current_dir = Path(dirpath)
        rel_dir = current_dir.relative_to(root).as_posix() if current_dir != root else ""

        kept = []
        for name in sorted(dirnames):
            rel_path = f"{rel_dir}/{name}" if rel_dir else name
            if name in _EXCLUDED_DIRS or _should_ignore(rel_path, True, rules):
                continue
            kept.append(name)
        dirnames[:] = kept

        for filename in sorted(filenames):
            if not filename.endswith(SUPPORTED_SUFFIXES):
                continue
            rel_path = f"{rel_dir}/{filename}" if rel_dir else filename
            if _should_ignore(rel_path, False, rules):
                continue
            yield current_dir / filename


class SourceScanner:
    """Extracts component props from files and directories.

    Each file gets its own graph and reference table; per-file results are
    merged afterwards with their reference indices re-based.
    """

    def __init__(
        self,
        config: PropScanConfig,
        *,
        use_cache: bool = True,
        parser: Optional[TypeScriptParser] = None,
    ) -> None:
        self.config = config
        self.parser = parser or TypeScriptParser()
        self.known_symbols = extend_registry(config.known_symbols)
        self.rules = [
            rule for rule in (_build_ignore_rule(p) for p in config.exclude_paths) if rule is not None
        ]
        self.cache: Optional[ResultCache] = None
        if use_cache and config.cache.enabled:
            self.cache = ResultCache(config.cache_path)
        self._signature = config.signature()
        self.logger = get_logger("scanner")

    def scan_source(self, source: str, path: str = "<memory>.tsx") -> FinderResult:
        """Run one extraction pass over in-memory source text."""
        module = self.parser.parse(source, path)
        accessor = GraphAccessor()
        classifier = TypeClassifier(
            accessor, known_symbols=self.known_symbols, policy=self.config.error_policy
        )
        locator = ComponentLocator(accessor, classifier, self.config.component_markers)
        return locator.find_components(module.exported_declarations(), ClassificationContext())

    def scan_file(self, path: Path) -> FinderResult:
        try:
            source = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise SourceParseError(f"Cannot read {path}: {exc}") from exc

        key = self._cache_key(path)
        fingerprint = fingerprint_source(source)
        if self.cache is not None:
            cached = self.cache.get(key, signature=self._signature, fingerprint=fingerprint)
            if cached is not None:
                self.logger.info("Using cached result for %s", key)
                return cached

        self.logger.info("Scanning %s", key)
        result = self.scan_source(source, str(path))
        if self.cache is not None:
            self.cache.store(key, signature=self._signature, fingerprint=fingerprint, result=result)
        return result

    def iter_files(self, paths: Iterable[Path]) -> Iterator[Path]:
        for path in paths:
            path = path.expanduser()
            if path.is_dir():
                yield from _iter_sources(path, self.rules)
            elif path.is_file():
                yield path
            else:
                raise SourceParseError(f"Source path not found: {path}")

    def scan(self, paths: Iterable[Path]) -> FinderResult:
        """Scan every file under ``paths`` and merge the results in walk order."""
        merged = FinderResult()
        files: List[Path] = list(self.iter_files(paths))
        for path in files:
            merged = merged.merge(self.scan_file(path))
        if self.cache is not None:
            self._prune_cache(self.cache, (self._cache_key(path) for path in files))
            self.cache.persist()
        self.logger.info(
            "Found %d component(s) across %d file(s)", len(merged.components), len(files)
        )
        return merged

    def _prune_cache(self, cache: ResultCache, scanned: Iterable[str]) -> None:
        """Drop cached entries whose source file no longer exists."""
        keep = set(scanned)
        keep.update(key for key in cache.keys() if (self.config.root / key).is_file())
        cache.prune(keep)

    def _cache_key(self, path: Path) -> str:
        resolved = path.resolve()
        try:
            return resolved.relative_to(self.config.root.resolve()).as_posix()
        except ValueError:
            return resolved.as_posix()


__all__ = ["IgnoreRule", "SourceScanner"]
