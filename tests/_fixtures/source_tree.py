"""Helper utilities for writing TypeScript sources in tests."""

from __future__ import annotations

import textwrap
from pathlib import Path
from typing import Mapping

from propscan.config import PropScanConfig
from propscan.models import FinderResult
from propscan.scanner import SourceScanner


class SourceTree:
    """Writes source files into a throwaway project and scans them."""

    def __init__(self, tmp_path: Path) -> None:
        self.root = tmp_path / "project"
        self.root.mkdir()

    def write(self, files: Mapping[str, str]) -> None:
        """Write `path -> contents` entries into the project."""
        for relative, content in files.items():
            path = self.root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            normalised = textwrap.dedent(content).lstrip("\n")
            path.write_text(normalised, encoding="utf-8")

    def config(self, **overrides: object) -> PropScanConfig:
        return PropScanConfig(root=self.root, **overrides)  # type: ignore[arg-type]

    def scan(self, *relative: str, use_cache: bool = False, **overrides: object) -> FinderResult:
        """Scan the given paths (the whole project by default)."""
        scanner = SourceScanner(self.config(**overrides), use_cache=use_cache)
        paths = [self.root / rel for rel in relative] or [self.root]
        return scanner.scan(paths)


__all__ = ["SourceTree"]
