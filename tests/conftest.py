from __future__ import annotations

from pathlib import Path

import pytest

from propscan.classifier import ClassificationContext, ErrorPolicy, TypeClassifier
from propscan.typegraph.graph import GraphAccessor
from tests._fixtures.source_tree import SourceTree


@pytest.fixture
def source_tree(tmp_path: Path) -> SourceTree:
    """Provide a reusable source tree rooted at the pytest tmp_path."""
    return SourceTree(tmp_path)


@pytest.fixture
def accessor() -> GraphAccessor:
    return GraphAccessor()


@pytest.fixture
def context() -> ClassificationContext:
    return ClassificationContext()


@pytest.fixture
def classifier(accessor: GraphAccessor) -> TypeClassifier:
    return TypeClassifier(accessor)


@pytest.fixture
def strict_classifier(accessor: GraphAccessor) -> TypeClassifier:
    return TypeClassifier(accessor, policy=ErrorPolicy.STRICT)
