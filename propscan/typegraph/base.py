"""Contract for type-graph accessors consumed by the classifier and locator."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Hashable, List, Optional, Sequence


@dataclass(frozen=True)
class SourceLocation:
    """Position of a declaration in a source file (1-based line and column)."""

    path: str
    line: int
    column: int

    def __str__(self) -> str:
        return f"{self.path}:{self.line}:{self.column}"


@dataclass
class ParameterInfo:
    name: str
    type: Any


@dataclass
class SignatureInfo:
    """Parameter list and return type of a callable declaration."""

    parameters: List[ParameterInfo] = field(default_factory=list)
    return_type: Any = None


class TypeShape(Enum):
    """Structural category of a type node, listed in classification precedence order."""

    CALLABLE = "callable"
    VOID = "void"
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    ANY = "any"
    LITERAL = "literal"
    BOOLEAN_LITERAL = "boolean_literal"
    TUPLE = "tuple"
    ARRAY = "array"
    UNION = "union"
    PARTIAL = "partial"
    OBJECT = "object"
    UNKNOWN = "unknown"


class TypeAccessor(ABC):
    """Read-only view over an immutable host type graph.

    Nodes are opaque handles. ``identity`` must return a key that is equal for
    the same node and distinct for different nodes, never a rendered name.
    """

    def __init__(self) -> None:
        self._shapes: Dict[Hashable, TypeShape] = {}

    # ------------------------------------------------------------------
    # Identity and naming

    def identity(self, node: Any) -> Hashable:
        return node

    @abstractmethod
    def fully_qualified_name(self, node: Any) -> Optional[str]:
        """Return the symbol name (or alias symbol name) used for registry lookups."""

    @abstractmethod
    def symbol_name(self, node: Any) -> Optional[str]:
        """Return the short symbol name, if the node has one."""

    @abstractmethod
    def declared_name(self, node: Any) -> Optional[str]:
        """Return the declared name of a record type, ``None`` when anonymous."""

    @abstractmethod
    def type_text(self, node: Any) -> str:
        """Render the node as source text."""

    @abstractmethod
    def location(self, node: Any) -> Optional[SourceLocation]:
        """Return where the node was declared, when known."""

    # ------------------------------------------------------------------
    # Inheritance

    @abstractmethod
    def base_types(self, node: Any) -> Sequence[Any]:
        """Return the base types of a class declaration or type."""

    @abstractmethod
    def type_arguments(self, node: Any) -> Sequence[Any]:
        """Return the type arguments bound on a (base) type reference."""

    @abstractmethod
    def is_class_declaration(self, declaration: Any) -> bool: ...

    @abstractmethod
    def declaration_name(self, declaration: Any) -> str: ...

    # ------------------------------------------------------------------
    # Nullability and primitives

    @abstractmethod
    def is_nullable(self, node: Any) -> bool: ...

    @abstractmethod
    def non_nullable(self, node: Any) -> Any: ...

    @abstractmethod
    def is_void_like(self, node: Any) -> bool: ...

    @abstractmethod
    def is_string(self, node: Any) -> bool: ...

    @abstractmethod
    def is_number(self, node: Any) -> bool: ...

    @abstractmethod
    def is_boolean(self, node: Any) -> bool: ...

    @abstractmethod
    def is_any(self, node: Any) -> bool:
        """Return True for an explicit or implicit `any`."""

    @abstractmethod
    def is_literal(self, node: Any) -> bool:
        """True for string and number literals; boolean literals are reported separately."""

    @abstractmethod
    def literal_value(self, node: Any) -> Any: ...

    @abstractmethod
    def is_boolean_literal(self, node: Any) -> bool: ...

    # ------------------------------------------------------------------
    # Structure

    @abstractmethod
    def is_tuple(self, node: Any) -> bool: ...

    @abstractmethod
    def tuple_elements(self, node: Any) -> Sequence[Any]: ...

    @abstractmethod
    def is_array(self, node: Any) -> bool: ...

    @abstractmethod
    def array_element(self, node: Any) -> Any: ...

    @abstractmethod
    def is_union(self, node: Any) -> bool: ...

    @abstractmethod
    def union_members(self, node: Any) -> Sequence[Any]: ...

    @abstractmethod
    def is_object(self, node: Any) -> bool: ...

    @abstractmethod
    def partial_target(self, node: Any) -> Optional[Any]:
        """Return ``T`` when the node is ``Partial<T>`` over a record type."""

    @abstractmethod
    def properties(self, node: Any) -> Sequence[Any]: ...

    @abstractmethod
    def property_name(self, prop: Any) -> str: ...

    @abstractmethod
    def property_type(self, prop: Any, context: Any) -> Optional[Any]:
        """Return the property's type as seen from ``context``, ``None`` when unresolvable."""

    @abstractmethod
    def signature(self, node: Any) -> Optional[SignatureInfo]: ...

    @abstractmethod
    def constraint_of(self, node: Any) -> Optional[Any]:
        """Return the constraint bound of a type parameter node."""

    # ------------------------------------------------------------------
    # Shape dispatch

    def shape_of(self, node: Any) -> TypeShape:
        """Return the node's structural category, computed once per node."""
        key = self.identity(node)
        shape = self._shapes.get(key)
        if shape is None:
            shape = self._compute_shape(node)
            self._shapes[key] = shape
        return shape

    def _compute_shape(self, node: Any) -> TypeShape:
        # Callables and arrays also satisfy is_object, so the object test comes last.
        if self.signature(node) is not None:
            return TypeShape.CALLABLE
        if self.is_void_like(node):
            return TypeShape.VOID
        if self.is_string(node):
            return TypeShape.STRING
        if self.is_number(node):
            return TypeShape.NUMBER
        if self.is_boolean(node):
            return TypeShape.BOOLEAN
        if self.is_any(node):
            return TypeShape.ANY
        if self.is_literal(node):
            return TypeShape.LITERAL
        if self.is_boolean_literal(node):
            return TypeShape.BOOLEAN_LITERAL
        if self.is_tuple(node):
            return TypeShape.TUPLE
        if self.is_array(node):
            return TypeShape.ARRAY
        if self.is_union(node):
            return TypeShape.UNION
        if self.partial_target(node) is not None:
            return TypeShape.PARTIAL
        if self.is_object(node):
            return TypeShape.OBJECT
        return TypeShape.UNKNOWN


__all__ = [
    "ParameterInfo",
    "SignatureInfo",
    "SourceLocation",
    "TypeAccessor",
    "TypeShape",
]
