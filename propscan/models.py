"""Schema data models produced by a props extraction pass.

Every ``PropType`` variant is an immutable dataclass tagged with a ``kind``;
``to_dict`` renders the camelCase wire format and the ``*_from_dict``
helpers parse it back.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Callable, ClassVar, Dict, Iterator, Optional, Tuple, Union

LiteralValue = Union[str, int, float, bool]
RefIndex = int


@dataclass(frozen=True)
class PropType:
    """Base class for the closed set of prop schema variants."""

    kind: ClassVar[str] = ""

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind}

    def ref_indices(self) -> Iterator[RefIndex]:
        """Yield every reference-table index this variant points at."""
        return iter(())

    def with_ref_offset(self, offset: int) -> "PropType":
        """Return a copy whose reference indices are shifted by ``offset``."""
        return self


@dataclass(frozen=True)
class AnyPropType(PropType):
    kind: ClassVar[str] = "any"


@dataclass(frozen=True)
class VoidPropType(PropType):
    kind: ClassVar[str] = "void"


@dataclass(frozen=True)
class StringPropType(PropType):
    kind: ClassVar[str] = "string"


@dataclass(frozen=True)
class NumberPropType(PropType):
    kind: ClassVar[str] = "number"


@dataclass(frozen=True)
class BooleanPropType(PropType):
    kind: ClassVar[str] = "boolean"


@dataclass(frozen=True)
class EventPropType(PropType):
    kind: ClassVar[str] = "event"


@dataclass(frozen=True)
class ReactElementPropType(PropType):
    kind: ClassVar[str] = "reactElement"


@dataclass(frozen=True)
class ReactNodePropType(PropType):
    kind: ClassVar[str] = "reactNode"


@dataclass(frozen=True)
class LiteralPropType(PropType):
    kind: ClassVar[str] = "literal"

    value: LiteralValue

    # ``True == 1`` in Python, but ``true`` and ``1`` are different literal types.
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LiteralPropType):
            return NotImplemented
        return type(self.value) is type(other.value) and self.value == other.value

    def __hash__(self) -> int:
        return hash((type(self.value), self.value))

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind, "value": self.value}


@dataclass(frozen=True)
class UnionPropType(PropType):
    kind: ClassVar[str] = "union"

    options: Tuple[PropType, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind, "options": [option.to_dict() for option in self.options]}

    def ref_indices(self) -> Iterator[RefIndex]:
        for option in self.options:
            yield from option.ref_indices()

    def with_ref_offset(self, offset: int) -> PropType:
        return UnionPropType(tuple(option.with_ref_offset(offset) for option in self.options))


@dataclass(frozen=True)
class ArrayPropType(PropType):
    kind: ClassVar[str] = "array"

    element: PropType

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind, "elementPropType": self.element.to_dict()}

    def ref_indices(self) -> Iterator[RefIndex]:
        return self.element.ref_indices()

    def with_ref_offset(self, offset: int) -> PropType:
        return ArrayPropType(self.element.with_ref_offset(offset))


@dataclass(frozen=True)
class TuplePropType(PropType):
    kind: ClassVar[str] = "tuple"

    elements: Tuple[PropType, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind,
            "elementPropTypes": [element.to_dict() for element in self.elements],
        }

    def ref_indices(self) -> Iterator[RefIndex]:
        for element in self.elements:
            yield from element.ref_indices()

    def with_ref_offset(self, offset: int) -> PropType:
        return TuplePropType(tuple(element.with_ref_offset(offset) for element in self.elements))


@dataclass(frozen=True)
class RefPropType(PropType):
    kind: ClassVar[str] = "ref"

    ref_index: RefIndex

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind, "refIndex": self.ref_index}

    def ref_indices(self) -> Iterator[RefIndex]:
        yield self.ref_index

    def with_ref_offset(self, offset: int) -> PropType:
        return RefPropType(self.ref_index + offset)


@dataclass(frozen=True)
class PartialPropType(PropType):
    """Reference to a record whose members are all implicitly nullable."""

    kind: ClassVar[str] = "partial"

    ref_index: RefIndex

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind, "refIndex": self.ref_index}

    def ref_indices(self) -> Iterator[RefIndex]:
        yield self.ref_index

    def with_ref_offset(self, offset: int) -> PropType:
        return PartialPropType(self.ref_index + offset)


@dataclass(frozen=True)
class PropSpec:
    """A prop schema variant together with its nullability."""

    prop_type: PropType
    is_nullable: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {"propType": self.prop_type.to_dict(), "isNullable": self.is_nullable}

    def with_ref_offset(self, offset: int) -> "PropSpec":
        return PropSpec(self.prop_type.with_ref_offset(offset), self.is_nullable)


@dataclass(frozen=True)
class FnPropType(PropType):
    kind: ClassVar[str] = "fn"

    arg_types: Tuple[PropSpec, ...]
    return_type: PropSpec

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind,
            "argTypes": [arg.to_dict() for arg in self.arg_types],
            "returnType": self.return_type.to_dict(),
        }

    def ref_indices(self) -> Iterator[RefIndex]:
        for arg in self.arg_types:
            yield from arg.prop_type.ref_indices()
        yield from self.return_type.prop_type.ref_indices()

    def with_ref_offset(self, offset: int) -> PropType:
        return FnPropType(
            tuple(arg.with_ref_offset(offset) for arg in self.arg_types),
            self.return_type.with_ref_offset(offset),
        )


ANY = AnyPropType()
VOID = VoidPropType()
STRING = StringPropType()
NUMBER = NumberPropType()
BOOLEAN = BooleanPropType()
EVENT = EventPropType()
REACT_ELEMENT = ReactElementPropType()
REACT_NODE = ReactNodePropType()


@dataclass(frozen=True)
class ObjectMember:
    """A single named member of a record schema."""

    name: str
    prop_type: PropType
    is_nullable: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "propType": self.prop_type.to_dict(),
            "isNullable": self.is_nullable,
        }


@dataclass(frozen=True)
class ObjectSpec:
    """Reference-table entry describing one record type."""

    name: Optional[str]
    members: Tuple[ObjectMember, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "members": [member.to_dict() for member in self.members]}

    def member(self, name: str) -> Optional[ObjectMember]:
        for member in self.members:
            if member.name == name:
                return member
        return None

    def with_ref_offset(self, offset: int) -> "ObjectSpec":
        return ObjectSpec(
            self.name,
            tuple(
                ObjectMember(m.name, m.prop_type.with_ref_offset(offset), m.is_nullable)
                for m in self.members
            ),
        )


@dataclass(frozen=True)
class ComponentSpec:
    """A located component and the index of its props record."""

    name: str
    props_ref_index: RefIndex

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "propsRefIndex": self.props_ref_index}


@dataclass(frozen=True)
class FinderResult:
    """Complete output of one extraction pass."""

    components: Tuple[ComponentSpec, ...] = ()
    refs: Tuple[ObjectSpec, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "components": [component.to_dict() for component in self.components],
            "refs": [ref.to_dict() for ref in self.refs],
        }

    def to_json(self, *, indent: Optional[int] = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    def ref_indices(self) -> Iterator[RefIndex]:
        for component in self.components:
            yield component.props_ref_index
        for ref in self.refs:
            for member in ref.members:
                yield from member.prop_type.ref_indices()

    def validate(self) -> None:
        """Raise ``ValueError`` when any reference index is out of range."""
        size = len(self.refs)
        for index in self.ref_indices():
            if not 0 <= index < size:
                raise ValueError(f"Reference index {index} out of range for {size} refs")

    def merge(self, other: "FinderResult") -> "FinderResult":
        """Append ``other`` after this result, re-basing its reference indices."""
        offset = len(self.refs)
        components = self.components + tuple(
            ComponentSpec(component.name, component.props_ref_index + offset)
            for component in other.components
        )
        refs = self.refs + tuple(ref.with_ref_offset(offset) for ref in other.refs)
        return FinderResult(components=components, refs=refs)

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "FinderResult":
        if not isinstance(payload, Mapping):
            raise ValueError("FinderResult payload must be a mapping")
        components = tuple(
            ComponentSpec(
                name=_require(item, "name", str),
                props_ref_index=_require(item, "propsRefIndex", int),
            )
            for item in _require(payload, "components", list)
        )
        refs = tuple(_object_spec_from_dict(item) for item in _require(payload, "refs", list))
        result = cls(components=components, refs=refs)
        result.validate()
        return result

    @classmethod
    def from_json(cls, text: str) -> "FinderResult":
        return cls.from_dict(json.loads(text))


# ----------------------------------------------------------------------
# Wire decoding


def _require(payload: Any, key: str, expected: type) -> Any:
    if not isinstance(payload, Mapping) or key not in payload:
        raise ValueError(f"Missing field '{key}'")
    value = payload[key]
    if expected is int and isinstance(value, bool):
        raise ValueError(f"Field '{key}' must be an integer")
    if not isinstance(value, expected):
        raise ValueError(f"Field '{key}' must be of type {expected.__name__}")
    return value


def prop_spec_from_dict(payload: Mapping[str, Any]) -> PropSpec:
    return PropSpec(
        prop_type=prop_type_from_dict(_require(payload, "propType", Mapping)),
        is_nullable=_require(payload, "isNullable", bool),
    )


def _object_spec_from_dict(payload: Mapping[str, Any]) -> ObjectSpec:
    if not isinstance(payload, Mapping):
        raise ValueError("Reference entry must be a mapping")
    name = payload.get("name")
    if name is not None and not isinstance(name, str):
        raise ValueError("Reference name must be a string or null")
    members = tuple(
        ObjectMember(
            name=_require(item, "name", str),
            prop_type=prop_type_from_dict(_require(item, "propType", Mapping)),
            is_nullable=_require(item, "isNullable", bool),
        )
        for item in _require(payload, "members", list)
    )
    return ObjectSpec(name=name, members=members)


def _literal_from_dict(payload: Mapping[str, Any]) -> PropType:
    value = payload.get("value")
    if not isinstance(value, (str, int, float, bool)):
        raise ValueError("Literal value must be a string, number or boolean")
    return LiteralPropType(value)


_SIMPLE_KINDS: Dict[str, PropType] = {
    variant.kind: variant
    for variant in (ANY, VOID, STRING, NUMBER, BOOLEAN, EVENT, REACT_ELEMENT, REACT_NODE)
}

_DECODERS: Dict[str, Callable[[Mapping[str, Any]], PropType]] = {
    "literal": _literal_from_dict,
    "union": lambda p: UnionPropType(
        tuple(prop_type_from_dict(option) for option in _require(p, "options", list))
    ),
    "array": lambda p: ArrayPropType(prop_type_from_dict(_require(p, "elementPropType", Mapping))),
    "tuple": lambda p: TuplePropType(
        tuple(prop_type_from_dict(element) for element in _require(p, "elementPropTypes", list))
    ),
    "ref": lambda p: RefPropType(_require(p, "refIndex", int)),
    "partial": lambda p: PartialPropType(_require(p, "refIndex", int)),
    "fn": lambda p: FnPropType(
        tuple(prop_spec_from_dict(arg) for arg in _require(p, "argTypes", list)),
        prop_spec_from_dict(_require(p, "returnType", Mapping)),
    ),
}


def prop_type_from_dict(payload: Mapping[str, Any]) -> PropType:
    """Parse one wire-format variant, rejecting unknown kinds."""
    kind = _require(payload, "kind", str)
    simple = _SIMPLE_KINDS.get(kind)
    if simple is not None:
        return simple
    decoder = _DECODERS.get(kind)
    if decoder is None:
        raise ValueError(f"Unknown prop type kind '{kind}'")
    return decoder(payload)


SIMPLE_KINDS: Tuple[str, ...] = tuple(_SIMPLE_KINDS)


def simple_prop_type(kind: str) -> PropType:
    """Return the payload-free variant registered under ``kind``."""
    try:
        return _SIMPLE_KINDS[kind]
    except KeyError:
        raise ValueError(f"'{kind}' is not a payload-free prop type kind") from None


__all__ = [
    "ANY",
    "BOOLEAN",
    "EVENT",
    "NUMBER",
    "REACT_ELEMENT",
    "REACT_NODE",
    "SIMPLE_KINDS",
    "STRING",
    "VOID",
    "AnyPropType",
    "ArrayPropType",
    "BooleanPropType",
    "ComponentSpec",
    "EventPropType",
    "FinderResult",
    "FnPropType",
    "LiteralPropType",
    "LiteralValue",
    "NumberPropType",
    "ObjectMember",
    "ObjectSpec",
    "PartialPropType",
    "PropSpec",
    "PropType",
    "ReactElementPropType",
    "ReactNodePropType",
    "RefIndex",
    "RefPropType",
    "StringPropType",
    "TuplePropType",
    "UnionPropType",
    "VoidPropType",
    "prop_spec_from_dict",
    "prop_type_from_dict",
    "simple_prop_type",
]
