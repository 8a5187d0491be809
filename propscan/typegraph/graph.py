"""In-memory type graph and the accessor that reads it.

Nodes compare and hash by identity: two structurally identical anonymous
object types are distinct nodes, while every reference to a named
declaration shares one node. Object properties may be filled after the node
is created, which is how self-referential declarations are built.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Union

from .base import ParameterInfo, SignatureInfo, SourceLocation, TypeAccessor


class TypeNode:
    """Base class for graph nodes."""

    location: Optional[SourceLocation] = None

    def render(self) -> str:
        raise NotImplementedError


@dataclass(eq=False)
class PrimitiveType(TypeNode):
    name: str
    location: Optional[SourceLocation] = None

    def render(self) -> str:
        return self.name


ANY_TYPE = PrimitiveType("any")
UNKNOWN_TYPE = PrimitiveType("unknown")
NEVER_TYPE = PrimitiveType("never")
VOID_TYPE = PrimitiveType("void")
UNDEFINED_TYPE = PrimitiveType("undefined")
NULL_TYPE = PrimitiveType("null")
STRING_TYPE = PrimitiveType("string")
NUMBER_TYPE = PrimitiveType("number")
BOOLEAN_TYPE = PrimitiveType("boolean")
BIGINT_TYPE = PrimitiveType("bigint")
SYMBOL_TYPE = PrimitiveType("symbol")

PRIMITIVES: Dict[str, PrimitiveType] = {
    node.name: node
    for node in (
        ANY_TYPE,
        UNKNOWN_TYPE,
        NEVER_TYPE,
        VOID_TYPE,
        UNDEFINED_TYPE,
        NULL_TYPE,
        STRING_TYPE,
        NUMBER_TYPE,
        BOOLEAN_TYPE,
        BIGINT_TYPE,
        SYMBOL_TYPE,
    )
}

_VOID_LIKE = {"void", "undefined", "null"}
_NULLISH = {"undefined", "null"}


@dataclass(eq=False)
class LiteralType(TypeNode):
    value: Union[str, int, float, bool]
    location: Optional[SourceLocation] = None

    def render(self) -> str:
        return json.dumps(self.value)


@dataclass(eq=False)
class UnionType(TypeNode):
    members: List[TypeNode] = field(default_factory=list)
    location: Optional[SourceLocation] = None

    def render(self) -> str:
        return " | ".join(member.render() for member in self.members)


@dataclass(eq=False)
class IntersectionType(TypeNode):
    members: List[TypeNode] = field(default_factory=list)
    location: Optional[SourceLocation] = None

    def render(self) -> str:
        return " & ".join(member.render() for member in self.members)


@dataclass(eq=False)
class ArrayType(TypeNode):
    element: TypeNode
    location: Optional[SourceLocation] = None

    def render(self) -> str:
        inner = self.element.render()
        if isinstance(self.element, (UnionType, IntersectionType, FunctionType)):
            inner = f"({inner})"
        return f"{inner}[]"


@dataclass(eq=False)
class TupleType(TypeNode):
    elements: List[TypeNode] = field(default_factory=list)
    location: Optional[SourceLocation] = None

    def render(self) -> str:
        return "[" + ", ".join(element.render() for element in self.elements) + "]"


@dataclass(eq=False)
class TypeParameter(TypeNode):
    name: str
    constraint: Optional[TypeNode] = None
    location: Optional[SourceLocation] = None

    def render(self) -> str:
        return self.name


@dataclass(eq=False)
class Parameter:
    name: str
    type: TypeNode
    optional: bool = False


@dataclass(eq=False)
class FunctionType(TypeNode):
    parameters: List[Parameter] = field(default_factory=list)
    return_type: TypeNode = VOID_TYPE
    symbol: Optional[str] = None
    location: Optional[SourceLocation] = None

    def render(self) -> str:
        params = ", ".join(
            f"{p.name}{'?' if p.optional else ''}: {p.type.render()}" for p in self.parameters
        )
        return f"({params}) => {self.return_type.render()}"


@dataclass(eq=False)
class Property:
    """A named member of an object type.

    ``type`` is ``None`` when no annotation exists; a property that also lacks
    a ``declaration`` has no type information at all.
    """

    name: str
    type: Optional[TypeNode]
    optional: bool = False
    declaration: Optional[SourceLocation] = None


@dataclass(eq=False)
class ObjectType(TypeNode):
    """A record type: interface, object literal, class instance or opaque library type."""

    name: Optional[str] = None
    properties: List[Property] = field(default_factory=list)
    symbol: Optional[str] = None
    type_arguments: List[TypeNode] = field(default_factory=list)
    base_types: List[TypeNode] = field(default_factory=list)
    location: Optional[SourceLocation] = None

    def render(self) -> str:
        if self.name:
            if self.type_arguments:
                args = ", ".join(arg.render() for arg in self.type_arguments)
                return f"{self.name}<{args}>"
            return self.name
        if not self.properties:
            return "{}"
        return "{ " + "; ".join(prop.name for prop in self.properties) + " }"


@dataclass(eq=False)
class PartialType(TypeNode):
    target: TypeNode
    location: Optional[SourceLocation] = None

    def render(self) -> str:
        return f"Partial<{self.target.render()}>"


@dataclass(eq=False)
class UnresolvedType(TypeNode):
    """A reference the graph builder could not resolve to a structure."""

    text: str
    symbol: Optional[str] = None
    location: Optional[SourceLocation] = None

    def render(self) -> str:
        return self.text


@dataclass(eq=False)
class ClassDeclaration:
    name: str
    base_types: List[TypeNode] = field(default_factory=list)
    location: Optional[SourceLocation] = None


def _union_leaves(members: Sequence[TypeNode]) -> List[TypeNode]:
    leaves: List[TypeNode] = []
    for member in members:
        candidates = _union_leaves(member.members) if isinstance(member, UnionType) else [member]
        for candidate in candidates:
            if not any(candidate is seen for seen in leaves):
                leaves.append(candidate)
    return leaves


def union_of(members: Sequence[TypeNode], location: Optional[SourceLocation] = None) -> TypeNode:
    """Build a flat union: nested unions are spliced in and repeated nodes dropped."""
    leaves = _union_leaves(members)
    if len(leaves) == 1:
        return leaves[0]
    return UnionType(leaves, location=location)


def _is_nullish(node: TypeNode) -> bool:
    return isinstance(node, PrimitiveType) and node.name in _NULLISH


def _is_record(node: TypeNode) -> bool:
    if isinstance(node, (ObjectType, PartialType, FunctionType)):
        return True
    if isinstance(node, IntersectionType):
        return bool(node.members) and all(_is_record(member) for member in node.members)
    return False


class GraphAccessor(TypeAccessor):
    """Accessor over graphs built from ``propscan.typegraph.graph`` nodes."""

    def fully_qualified_name(self, node: Any) -> Optional[str]:
        return getattr(node, "symbol", None)

    def symbol_name(self, node: Any) -> Optional[str]:
        name = getattr(node, "name", None)
        if isinstance(node, PrimitiveType):
            return None
        if name is None:
            symbol = getattr(node, "symbol", None)
            return symbol.rsplit(".", 1)[-1] if symbol else None
        return name

    def declared_name(self, node: Any) -> Optional[str]:
        if isinstance(node, ObjectType):
            return node.name
        return None

    def type_text(self, node: Any) -> str:
        return node.render()

    def location(self, node: Any) -> Optional[SourceLocation]:
        return getattr(node, "location", None)

    def base_types(self, node: Any) -> Sequence[Any]:
        if isinstance(node, (ObjectType, ClassDeclaration)):
            return node.base_types
        return ()

    def type_arguments(self, node: Any) -> Sequence[Any]:
        if isinstance(node, ObjectType):
            return node.type_arguments
        return ()

    def is_class_declaration(self, declaration: Any) -> bool:
        return isinstance(declaration, ClassDeclaration)

    def declaration_name(self, declaration: Any) -> str:
        return declaration.name

    def is_nullable(self, node: Any) -> bool:
        if not isinstance(node, UnionType):
            return False
        leaves = _union_leaves(node.members)
        nullish = [m for m in leaves if _is_nullish(m)]
        return bool(nullish) and len(nullish) < len(leaves)

    def non_nullable(self, node: Any) -> Any:
        if not isinstance(node, UnionType):
            return node
        leaves = _union_leaves(node.members)
        remaining = [m for m in leaves if not _is_nullish(m)]
        if not remaining:
            return node
        if len(remaining) == 1:
            return remaining[0]
        if remaining == node.members:
            return node
        return UnionType(remaining, location=node.location)

    def is_void_like(self, node: Any) -> bool:
        if isinstance(node, PrimitiveType):
            return node.name in _VOID_LIKE
        if isinstance(node, UnionType) and node.members:
            return all(self.is_void_like(member) for member in node.members)
        return False

    def is_string(self, node: Any) -> bool:
        return node is STRING_TYPE

    def is_number(self, node: Any) -> bool:
        return node is NUMBER_TYPE

    def is_boolean(self, node: Any) -> bool:
        return node is BOOLEAN_TYPE

    def is_any(self, node: Any) -> bool:
        return node is ANY_TYPE

    def is_literal(self, node: Any) -> bool:
        return isinstance(node, LiteralType) and not isinstance(node.value, bool)

    def literal_value(self, node: Any) -> Any:
        return node.value

    def is_boolean_literal(self, node: Any) -> bool:
        return isinstance(node, LiteralType) and isinstance(node.value, bool)

    def is_tuple(self, node: Any) -> bool:
        return isinstance(node, TupleType)

    def tuple_elements(self, node: Any) -> Sequence[Any]:
        return node.elements

    def is_array(self, node: Any) -> bool:
        return isinstance(node, ArrayType)

    def array_element(self, node: Any) -> Any:
        return node.element

    def is_union(self, node: Any) -> bool:
        return isinstance(node, UnionType)

    def union_members(self, node: Any) -> Sequence[Any]:
        return _union_leaves(node.members)

    def is_object(self, node: Any) -> bool:
        return _is_record(node)

    def partial_target(self, node: Any) -> Optional[Any]:
        if isinstance(node, PartialType) and _is_record(node.target):
            return node.target
        return None

    def properties(self, node: Any) -> Sequence[Any]:
        if isinstance(node, ObjectType):
            return node.properties
        if isinstance(node, PartialType):
            return [
                Property(p.name, p.type, optional=True, declaration=p.declaration)
                for p in self.properties(node.target)
            ]
        if isinstance(node, IntersectionType):
            merged: Dict[str, Property] = {}
            for member in node.members:
                for prop in self.properties(member):
                    merged.setdefault(prop.name, prop)
            return list(merged.values())
        return ()

    def property_name(self, prop: Any) -> str:
        return prop.name

    def property_type(self, prop: Any, context: Any) -> Optional[Any]:
        prop_type = prop.type
        if prop_type is None:
            # An unannotated declaration is implicitly `any`.
            return ANY_TYPE if prop.declaration is not None else None
        if prop.optional:
            return union_of([prop_type, UNDEFINED_TYPE], location=prop.declaration)
        return prop_type

    def signature(self, node: Any) -> Optional[SignatureInfo]:
        if not isinstance(node, FunctionType):
            return None
        parameters = []
        for param in node.parameters:
            param_type = param.type
            if param.optional:
                param_type = union_of([param_type, UNDEFINED_TYPE])
            parameters.append(ParameterInfo(param.name, param_type))
        return SignatureInfo(parameters=parameters, return_type=node.return_type)

    def constraint_of(self, node: Any) -> Optional[Any]:
        if isinstance(node, TypeParameter):
            return node.constraint
        return None


__all__ = [
    "ANY_TYPE",
    "BIGINT_TYPE",
    "BOOLEAN_TYPE",
    "NEVER_TYPE",
    "NULL_TYPE",
    "NUMBER_TYPE",
    "PRIMITIVES",
    "STRING_TYPE",
    "SYMBOL_TYPE",
    "UNDEFINED_TYPE",
    "UNKNOWN_TYPE",
    "VOID_TYPE",
    "ArrayType",
    "ClassDeclaration",
    "FunctionType",
    "GraphAccessor",
    "IntersectionType",
    "LiteralType",
    "ObjectType",
    "Parameter",
    "PartialType",
    "PrimitiveType",
    "Property",
    "TupleType",
    "TypeNode",
    "TypeParameter",
    "UnionType",
    "UnresolvedType",
    "union_of",
]
