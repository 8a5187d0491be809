"""Recursive conversion of type-graph nodes into prop schemas.

``TypeClassifier`` owns no per-pass state. Everything a pass accumulates
(the reference table, its identity memo and the name of the member being
classified) lives on a ``ClassificationContext`` that the caller creates
for the pass and threads through every call.
"""

from __future__ import annotations

from contextlib import contextmanager
from enum import Enum
from typing import Any, Callable, Dict, Hashable, Iterator, List, Mapping, Optional, Sequence

from .errors import (
    ClassificationError,
    MissingTypeInformationError,
    UnclassifiableTypeError,
    UnionCompositionError,
)
from .known_symbols import KNOWN_SYMBOLS, lookup_known_symbol
from .logging import get_logger
from .models import (
    ANY,
    BOOLEAN,
    NUMBER,
    STRING,
    VOID,
    ArrayPropType,
    ComponentSpec,
    FinderResult,
    FnPropType,
    LiteralPropType,
    ObjectMember,
    ObjectSpec,
    PartialPropType,
    PropSpec,
    PropType,
    RefPropType,
    TuplePropType,
    UnionPropType,
    VoidPropType,
)
from .typegraph.base import TypeAccessor, TypeShape


class ErrorPolicy(str, Enum):
    """What to do with a type no rule matches."""

    LENIENT = "lenient"
    STRICT = "strict"


class ClassificationContext:
    """Reference table and identity memo for one extraction pass.

    Slots are reserved before a record's members are classified and patched
    afterwards, so a record reachable from its own members resolves to its
    reserved index.
    """

    def __init__(self) -> None:
        self._refs: List[Optional[ObjectSpec]] = []
        self._memo: Dict[Hashable, int] = {}
        self._owners: List[str] = []

    def __len__(self) -> int:
        return len(self._refs)

    def lookup(self, identity: Hashable) -> Optional[int]:
        return self._memo.get(identity)

    def reserve(self, identity: Hashable) -> int:
        index = len(self._refs)
        self._refs.append(None)
        self._memo[identity] = index
        return index

    def patch(self, index: int, spec: ObjectSpec) -> None:
        if self._refs[index] is not None:
            raise RuntimeError(f"Reference slot {index} was already filled")
        self._refs[index] = spec

    def ref(self, index: int) -> Optional[ObjectSpec]:
        return self._refs[index]

    @property
    def current_owner(self) -> Optional[str]:
        return self._owners[-1] if self._owners else None

    @contextmanager
    def owner(self, name: str) -> Iterator[None]:
        self._owners.append(name)
        try:
            yield
        finally:
            self._owners.pop()

    def result(self, components: Sequence[ComponentSpec]) -> FinderResult:
        """Freeze the table into a ``FinderResult``; every slot must be patched."""
        pending = [index for index, spec in enumerate(self._refs) if spec is None]
        if pending:
            raise RuntimeError(f"Reference slots never completed: {pending}")
        refs = tuple(spec for spec in self._refs if spec is not None)
        result = FinderResult(components=tuple(components), refs=refs)
        result.validate()
        return result


Handler = Callable[[Any, ClassificationContext], PropType]


class TypeClassifier:
    """Classifies type-graph nodes into ``PropSpec`` values."""

    def __init__(
        self,
        accessor: TypeAccessor,
        *,
        known_symbols: Mapping[str, PropType] = KNOWN_SYMBOLS,
        policy: ErrorPolicy = ErrorPolicy.LENIENT,
    ) -> None:
        self.accessor = accessor
        self.known_symbols = known_symbols
        self.policy = ErrorPolicy(policy)
        self.logger = get_logger("classifier")
        self._handlers: Dict[TypeShape, Handler] = {
            TypeShape.CALLABLE: self._classify_callable,
            TypeShape.VOID: lambda node, context: VOID,
            TypeShape.STRING: lambda node, context: STRING,
            TypeShape.NUMBER: lambda node, context: NUMBER,
            TypeShape.BOOLEAN: lambda node, context: BOOLEAN,
            TypeShape.ANY: lambda node, context: ANY,
            TypeShape.LITERAL: self._classify_literal,
            TypeShape.BOOLEAN_LITERAL: self._classify_boolean_literal,
            TypeShape.TUPLE: self._classify_tuple,
            TypeShape.ARRAY: self._classify_array,
            TypeShape.UNION: self._classify_union,
            TypeShape.PARTIAL: self._classify_partial,
            TypeShape.OBJECT: self._classify_object,
            TypeShape.UNKNOWN: self._classify_unknown,
        }

    # ------------------------------------------------------------------
    # Public API

    def classify(self, node: Any, context: ClassificationContext) -> PropSpec:
        """Return the schema of ``node`` with its nullable wrapper stripped first."""
        is_nullable = self.accessor.is_nullable(node)
        if is_nullable:
            node = self.accessor.non_nullable(node)

        known = lookup_known_symbol(self.accessor.fully_qualified_name(node), self.known_symbols)
        if known is not None:
            prop_type = known
        else:
            handler = self._handlers[self.accessor.shape_of(node)]
            prop_type = handler(node, context)

        if isinstance(prop_type, VoidPropType):
            is_nullable = False
        return PropSpec(prop_type=prop_type, is_nullable=is_nullable)

    def store_ref(self, node: Any, context: ClassificationContext) -> int:
        """Return the reference index of a record node, creating the entry on first use."""
        identity = self.accessor.identity(node)
        existing = context.lookup(identity)
        if existing is not None:
            return existing

        index = context.reserve(identity)
        name = self.accessor.declared_name(node)
        self.logger.debug("Reserved ref %d for %s", index, name or self.accessor.type_text(node))

        members = tuple(
            self._classify_member(prop, node, context) for prop in self.accessor.properties(node)
        )
        context.patch(index, ObjectSpec(name=name, members=members))
        return index

    def classify_props(self, node: Any, context: ClassificationContext) -> int:
        """Record a component's props type as a reference entry and return its index."""
        if self.accessor.is_nullable(node):
            node = self.accessor.non_nullable(node)
        return self.store_ref(node, context)

    # ------------------------------------------------------------------
    # Handlers

    def _classify_member(
        self, prop: Any, owner: Any, context: ClassificationContext
    ) -> ObjectMember:
        name = self.accessor.property_name(prop)
        with context.owner(name):
            member_type = self.accessor.property_type(prop, owner)
            if member_type is None:
                raise MissingTypeInformationError(name)
            spec = self.classify(member_type, context)
        return ObjectMember(name=name, prop_type=spec.prop_type, is_nullable=spec.is_nullable)

    def _classify_callable(self, node: Any, context: ClassificationContext) -> PropType:
        signature = self.accessor.signature(node)
        arg_types = []
        for parameter in signature.parameters:
            param_type = parameter.type
            constraint = self.accessor.constraint_of(param_type)
            if constraint is not None:
                param_type = constraint
            arg_types.append(self.classify(param_type, context))
        return_type = self.classify(signature.return_type, context)
        return FnPropType(arg_types=tuple(arg_types), return_type=return_type)

    def _classify_literal(self, node: Any, context: ClassificationContext) -> PropType:
        return LiteralPropType(self.accessor.literal_value(node))

    def _classify_boolean_literal(self, node: Any, context: ClassificationContext) -> PropType:
        return LiteralPropType(self.accessor.type_text(node) == "true")

    def _classify_tuple(self, node: Any, context: ClassificationContext) -> PropType:
        return TuplePropType(
            tuple(
                self.classify(element, context).prop_type
                for element in self.accessor.tuple_elements(node)
            )
        )

    def _classify_array(self, node: Any, context: ClassificationContext) -> PropType:
        element = self.classify(self.accessor.array_element(node), context)
        return ArrayPropType(element.prop_type)

    def _classify_union(self, node: Any, context: ClassificationContext) -> PropType:
        options: List[PropType] = []
        for member in self.accessor.union_members(node):
            try:
                options.append(self.classify(member, context).prop_type)
            except UnionCompositionError:
                raise
            except ClassificationError as exc:
                raise UnionCompositionError(context.current_owner, exc) from exc
        return UnionPropType(tuple(options))

    def _classify_partial(self, node: Any, context: ClassificationContext) -> PropType:
        return PartialPropType(self.store_ref(self.accessor.partial_target(node), context))

    def _classify_object(self, node: Any, context: ClassificationContext) -> PropType:
        return RefPropType(self.store_ref(node, context))

    def _classify_unknown(self, node: Any, context: ClassificationContext) -> PropType:
        if self.policy is ErrorPolicy.STRICT:
            raise UnclassifiableTypeError(
                self.accessor.type_text(node),
                self.accessor.symbol_name(node),
                self.accessor.location(node),
            )
        self.logger.debug("Falling back to any for %s", self.accessor.type_text(node))
        return ANY


__all__ = ["ClassificationContext", "ErrorPolicy", "TypeClassifier"]
