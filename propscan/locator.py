"""Discovery of component classes and their props types."""

from __future__ import annotations

from typing import Any, Hashable, Iterable, List, Optional, Sequence, Set

from .classifier import ClassificationContext, TypeClassifier
from .logging import get_logger
from .models import ComponentSpec, FinderResult
from .typegraph.base import TypeAccessor

DEFAULT_COMPONENT_MARKERS = ("React.Component",)


class ComponentLocator:
    """Finds classes deriving from a base marker and records their props."""

    def __init__(
        self,
        accessor: TypeAccessor,
        classifier: TypeClassifier,
        markers: Sequence[str] = DEFAULT_COMPONENT_MARKERS,
    ) -> None:
        self.accessor = accessor
        self.classifier = classifier
        self.markers = frozenset(markers)
        self.logger = get_logger("locator")

    def derives_from_marker(self, type_node: Any) -> bool:
        """Return True when ``type_node`` or any transitive base type is a marker.

        Types without symbol information cannot match themselves, but their
        base types are still searched.
        """
        pending = [type_node]
        seen: Set[Hashable] = set()
        while pending:
            current = pending.pop()
            key = self.accessor.identity(current)
            if key in seen:
                continue
            seen.add(key)
            name = self.accessor.fully_qualified_name(current)
            if name is not None and name in self.markers:
                return True
            pending.extend(self.accessor.base_types(current))
        return False

    def find_components(
        self,
        declarations: Iterable[Any],
        context: Optional[ClassificationContext] = None,
    ) -> FinderResult:
        """Classify the props of every component class among ``declarations``."""
        context = context if context is not None else ClassificationContext()
        components: List[ComponentSpec] = []
        seen: Set[Hashable] = set()
        for declaration in declarations:
            if not self.accessor.is_class_declaration(declaration):
                continue
            if id(declaration) in seen:
                continue
            seen.add(id(declaration))
            component = self.find_component_in_class(declaration, context)
            if component is not None:
                components.append(component)
        return context.result(components)

    def find_component_in_class(
        self, declaration: Any, context: ClassificationContext
    ) -> Optional[ComponentSpec]:
        name = self.accessor.declaration_name(declaration)
        base_type = next(
            (base for base in self.accessor.base_types(declaration) if self.derives_from_marker(base)),
            None,
        )
        if base_type is None:
            return None

        type_arguments = self.accessor.type_arguments(base_type)
        if not type_arguments:
            self.logger.debug("Component %s binds no props type; skipping", name)
            return None

        index = self.classifier.classify_props(type_arguments[0], context)
        self.logger.debug("Found component %s with props ref %d", name, index)
        return ComponentSpec(name=name, props_ref_index=index)


__all__ = ["ComponentLocator", "DEFAULT_COMPONENT_MARKERS"]
