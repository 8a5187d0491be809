"""Tests for the in-memory graph accessor."""

from __future__ import annotations

from propscan.typegraph.base import TypeShape
from propscan.typegraph.graph import (
    ANY_TYPE,
    NULL_TYPE,
    NUMBER_TYPE,
    STRING_TYPE,
    UNDEFINED_TYPE,
    FunctionType,
    GraphAccessor,
    IntersectionType,
    ObjectType,
    PartialType,
    Property,
    UnionType,
    UnresolvedType,
    union_of,
)


def test_non_nullable_returns_single_remaining_member(accessor: GraphAccessor) -> None:
    props = ObjectType(name="Props")
    node = UnionType([props, UNDEFINED_TYPE, NULL_TYPE])

    assert accessor.is_nullable(node)
    assert accessor.non_nullable(node) is props


def test_non_nullable_keeps_union_without_nullish_members(accessor: GraphAccessor) -> None:
    node = UnionType([STRING_TYPE, NUMBER_TYPE])

    assert not accessor.is_nullable(node)
    assert accessor.non_nullable(node) is node


def test_intersection_merges_properties_first_wins(accessor: GraphAccessor) -> None:
    left = ObjectType(properties=[Property("a", STRING_TYPE), Property("b", STRING_TYPE)])
    right = ObjectType(properties=[Property("b", NUMBER_TYPE), Property("c", NUMBER_TYPE)])

    merged = accessor.properties(IntersectionType([left, right]))

    assert [(p.name, p.type) for p in merged] == [
        ("a", STRING_TYPE),
        ("b", STRING_TYPE),
        ("c", NUMBER_TYPE),
    ]


def test_partial_properties_are_optional(accessor: GraphAccessor) -> None:
    target = ObjectType(name="Props", properties=[Property("a", STRING_TYPE)])

    (member,) = accessor.properties(PartialType(target))

    assert member.optional
    assert not target.properties[0].optional


def test_shapes_follow_precedence(accessor: GraphAccessor) -> None:
    assert accessor.shape_of(FunctionType()) is TypeShape.CALLABLE
    assert accessor.shape_of(UnionType([UNDEFINED_TYPE, NULL_TYPE])) is TypeShape.VOID
    assert accessor.shape_of(PartialType(ObjectType())) is TypeShape.PARTIAL
    assert accessor.shape_of(PartialType(UnresolvedType("T"))) is TypeShape.OBJECT
    assert accessor.shape_of(IntersectionType([ObjectType(), UnresolvedType("X")])) is TypeShape.UNKNOWN


def test_shape_is_cached_per_node(accessor: GraphAccessor) -> None:
    node = ObjectType(name="Props")

    assert accessor.shape_of(node) is TypeShape.OBJECT
    node.properties.append(Property("late", STRING_TYPE))
    assert accessor.shape_of(node) is TypeShape.OBJECT
    assert accessor.identity(node) is node


def test_symbol_name_uses_last_segment(accessor: GraphAccessor) -> None:
    assert accessor.symbol_name(UnresolvedType("JSX.Element", symbol="JSX.Element")) == "Element"
    assert accessor.symbol_name(STRING_TYPE) is None
    assert accessor.fully_qualified_name(ObjectType(name="MouseEvent", symbol="React.MouseEvent")) == "React.MouseEvent"


def test_nested_union_nullability_is_seen_through(accessor: GraphAccessor) -> None:
    maybe = UnionType([STRING_TYPE, UNDEFINED_TYPE])
    node = UnionType([maybe, NUMBER_TYPE])

    assert accessor.is_nullable(node)
    stripped = accessor.non_nullable(node)
    assert isinstance(stripped, UnionType)
    assert stripped.members == [STRING_TYPE, NUMBER_TYPE]


def test_union_of_splices_nested_unions(accessor: GraphAccessor) -> None:
    inner = UnionType([STRING_TYPE, NULL_TYPE])

    flat = union_of([inner, UNDEFINED_TYPE, STRING_TYPE])

    assert isinstance(flat, UnionType)
    assert flat.members == [STRING_TYPE, NULL_TYPE, UNDEFINED_TYPE]
    assert union_of([STRING_TYPE]) is STRING_TYPE
    assert accessor.union_members(UnionType([inner, NUMBER_TYPE])) == [
        STRING_TYPE,
        NULL_TYPE,
        NUMBER_TYPE,
    ]


def test_optional_member_over_nullable_union_stays_flat(accessor: GraphAccessor) -> None:
    prop = Property("a", UnionType([STRING_TYPE, NULL_TYPE]), optional=True)

    member_type = accessor.property_type(prop, None)

    assert member_type.members == [STRING_TYPE, NULL_TYPE, UNDEFINED_TYPE]
    assert accessor.non_nullable(member_type) is STRING_TYPE


def test_any_has_its_own_shape(accessor: GraphAccessor) -> None:
    assert accessor.shape_of(ANY_TYPE) is TypeShape.ANY
