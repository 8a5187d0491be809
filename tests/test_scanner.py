"""Tests for the source scanner."""

from __future__ import annotations

import pytest

from propscan.errors import SourceParseError
from propscan.models import ComponentSpec
from propscan.scanner import IgnoreRule, SourceScanner, _build_ignore_rule
from propscan.stores import ResultCache
from propscan.typegraph.typescript import TREE_SITTER_AVAILABLE, TypeScriptParser
from tests._fixtures.source_tree import SourceTree

requires_tree_sitter = pytest.mark.skipif(
    not TREE_SITTER_AVAILABLE, reason="tree-sitter-typescript not installed"
)

_BUTTON = """
import * as React from "react";

interface ButtonProps {
    label: string;
}

export class Button extends React.Component<ButtonProps> {}
"""

_CARD = """
import * as React from "react";

interface CardProps {
    title: string;
    footer?: CardProps;
}

export class Card extends React.Component<CardProps> {}
"""


class _ExplodingParser(TypeScriptParser):
    def parse(self, source: str, path: str = "<memory>.tsx"):  # type: ignore[override]
        raise AssertionError(f"unexpected parse of {path}")


def test_ignore_rules_match_directories_and_globs() -> None:
    directory = _build_ignore_rule("dist/")
    glob = _build_ignore_rule("*.stories.tsx")
    nested = _build_ignore_rule("src/legacy")

    assert isinstance(directory, IgnoreRule)
    assert directory.matches("packages/ui/dist", is_dir=True)
    assert not directory.matches("dist", is_dir=False)
    assert glob is not None and glob.matches("src/Button.stories.tsx", is_dir=False)
    assert nested is not None and nested.matches("src/legacy/Old.tsx", is_dir=False)
    assert _build_ignore_rule("  /  ") is None


@requires_tree_sitter
def test_scan_merges_files_in_walk_order(source_tree: SourceTree) -> None:
    source_tree.write({"src/Button.tsx": _BUTTON, "src/Card.tsx": _CARD})

    result = source_tree.scan()

    assert result.components == (ComponentSpec("Button", 0), ComponentSpec("Card", 1))
    assert result.refs[1].name == "CardProps"
    footer = result.refs[1].member("footer")
    assert footer is not None and footer.is_nullable
    assert list(footer.prop_type.ref_indices()) == [1]


@requires_tree_sitter
def test_scan_honours_exclusions(source_tree: SourceTree) -> None:
    source_tree.write(
        {
            "src/Button.tsx": _BUTTON,
            "dist/Button.tsx": _BUTTON,
            "node_modules/lib/Card.tsx": _CARD,
            "src/notes.md": "# not typescript",
        }
    )

    result = source_tree.scan(exclude_paths=["dist/"])

    assert [c.name for c in result.components] == ["Button"]


@requires_tree_sitter
def test_scan_reuses_cached_results(source_tree: SourceTree) -> None:
    source_tree.write({"Button.tsx": _BUTTON})
    config = source_tree.config()

    first = SourceScanner(config).scan([source_tree.root])
    assert config.cache_path.exists()

    cached = SourceScanner(config, parser=_ExplodingParser()).scan([source_tree.root])
    assert cached == first


@requires_tree_sitter
def test_cache_is_invalidated_by_content_change(source_tree: SourceTree) -> None:
    source_tree.write({"Button.tsx": _BUTTON})
    config = source_tree.config()
    SourceScanner(config).scan([source_tree.root])

    source_tree.write({"Button.tsx": _CARD})
    result = SourceScanner(config).scan([source_tree.root])

    assert [c.name for c in result.components] == ["Card"]


def test_scan_rejects_missing_paths(source_tree: SourceTree) -> None:
    scanner = SourceScanner(source_tree.config(), use_cache=False)

    with pytest.raises(SourceParseError, match="not found"):
        scanner.scan([source_tree.root / "missing.tsx"])


def test_scan_of_empty_directory_is_empty(source_tree: SourceTree) -> None:
    result = SourceScanner(source_tree.config(), use_cache=False).scan([source_tree.root])

    assert result.components == ()
    assert result.refs == ()


@requires_tree_sitter
def test_scan_drops_cache_entries_for_deleted_files(source_tree: SourceTree) -> None:
    source_tree.write({"Button.tsx": _BUTTON, "Card.tsx": _CARD})
    config = source_tree.config()
    SourceScanner(config).scan([source_tree.root])
    assert sorted(ResultCache(config.cache_path).keys()) == ["Button.tsx", "Card.tsx"]

    SourceScanner(config).scan([source_tree.root / "Button.tsx"])
    assert sorted(ResultCache(config.cache_path).keys()) == ["Button.tsx", "Card.tsx"]

    (source_tree.root / "Card.tsx").unlink()
    SourceScanner(config).scan([source_tree.root])
    assert ResultCache(config.cache_path).keys() == ["Button.tsx"]
