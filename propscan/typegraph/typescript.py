"""Tree-sitter powered TypeScript front end.

Parses one ``.ts``/``.tsx`` file and resolves the types its declarations
mention into ``propscan.typegraph.graph`` nodes. Only names declared in the
file itself, names imported from ``react`` and a few built-in generics are
understood; everything else becomes an ``UnresolvedType``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional, Sequence, Set, Tuple

from ..errors import SourceParseError
from ..logging import get_logger
from .base import SourceLocation
from .graph import (
    ANY_TYPE,
    BOOLEAN_TYPE,
    NULL_TYPE,
    PRIMITIVES,
    UNDEFINED_TYPE,
    VOID_TYPE,
    ArrayType,
    ClassDeclaration,
    FunctionType,
    IntersectionType,
    LiteralType,
    ObjectType,
    Parameter,
    PartialType,
    Property,
    TupleType,
    TypeNode,
    TypeParameter,
    UnresolvedType,
    union_of,
)

try:  # pragma: no cover - optional dependency
    import tree_sitter_typescript
    from tree_sitter import Language, Parser

    TREE_SITTER_AVAILABLE = True
except ModuleNotFoundError:  # pragma: no cover - optional dependency
    tree_sitter_typescript = None  # type: ignore[assignment]
    Language = None  # type: ignore[assignment]
    Parser = None  # type: ignore[assignment]
    TREE_SITTER_AVAILABLE = False


SUPPORTED_SUFFIXES = (".ts", ".tsx", ".mts", ".cts")

_FRAMEWORK_MODULES = {"react": "React"}
_FRAMEWORK_GLOBAL = "React"
_TUPLE_MEMBERS = {
    "required_parameter",
    "optional_parameter",
    "tuple_parameter",
    "optional_tuple_parameter",
}

_CLASS_NODES = {"class_declaration", "abstract_class_declaration", "class"}
_DECLARATION_KINDS = {
    "interface_declaration": "interface",
    "type_alias_declaration": "alias",
    "class_declaration": "class",
    "abstract_class_declaration": "class",
    "enum_declaration": "enum",
}


class TypeScriptParser:
    """Caches one tree-sitter parser per dialect and builds ``TypeScriptModule``s."""

    def __init__(self) -> None:
        self._parsers: Dict[str, Any] = {}
        self.logger = get_logger("typescript")

    def parse(self, source: str, path: str = "<memory>.tsx") -> "TypeScriptModule":
        dialect = "tsx" if path.lower().endswith(".tsx") else "typescript"
        parser = self._get_parser(dialect)
        source_bytes = source.encode("utf-8")
        tree = parser.parse(source_bytes)
        if tree.root_node.has_error:
            self.logger.warning("Syntax errors in %s; continuing with a partial tree", path)
        return TypeScriptModule(path, source_bytes, tree.root_node)

    def _get_parser(self, dialect: str) -> Any:
        parser = self._parsers.get(dialect)
        if parser is not None:
            return parser
        if not TREE_SITTER_AVAILABLE:
            raise SourceParseError(
                "tree-sitter is required to parse TypeScript. "
                "Install it with `pip install tree-sitter tree-sitter-typescript`."
            )
        if dialect == "tsx":
            language = Language(tree_sitter_typescript.language_tsx())
        else:
            language = Language(tree_sitter_typescript.language_typescript())
        parser = Parser(language)
        self._parsers[dialect] = parser
        return parser


@dataclass
class _Declaration:
    kind: str
    name: str
    nodes: List[Any] = field(default_factory=list)


def _named(node: Any) -> List[Any]:
    return [child for child in node.named_children if child.type != "comment"]


def _has_token(node: Any, token: str) -> bool:
    return any(child.type == token for child in node.children)


def _parse_number(text: str) -> Optional[float]:
    cleaned = text.replace("_", "").replace(" ", "")
    try:
        return int(cleaned, 0)
    except ValueError:
        pass
    try:
        return float(cleaned)
    except ValueError:
        return None


class TypeScriptModule:
    """Type graph of a single parsed source file."""

    def __init__(self, path: str, source_bytes: bytes, root: Any) -> None:
        self.path = path
        self.root = root
        self._source = source_bytes
        self.logger = get_logger("typescript")

        self._declarations: Dict[str, _Declaration] = {}
        self._framework_namespaces: Set[str] = set()
        self._framework_names: Dict[str, str] = {}

        self._instances: Dict[Tuple[str, Tuple[int, ...]], Tuple[Sequence[TypeNode], TypeNode]] = {}
        self._framework_types: Dict[Tuple[str, Tuple[int, ...]], Tuple[Sequence[TypeNode], TypeNode]] = {}
        self._partials: Dict[int, Tuple[TypeNode, PartialType]] = {}
        self._class_declarations: Dict[int, ClassDeclaration] = {}
        self._resolving: Set[Tuple[str, Tuple[int, ...]]] = set()

        self._resolvers: Dict[str, Callable[[Any, Dict[str, TypeNode]], TypeNode]] = {
            "type_annotation": self._resolve_first_child,
            "parenthesized_type": self._resolve_first_child,
            "readonly_type": self._resolve_last_child,
            "predefined_type": self._resolve_predefined,
            "literal_type": self._resolve_literal,
            "undefined": lambda node, env: UNDEFINED_TYPE,
            "null": lambda node, env: NULL_TYPE,
            "type_identifier": self._resolve_identifier,
            "identifier": self._resolve_identifier,
            "nested_type_identifier": self._resolve_nested_identifier,
            "generic_type": self._resolve_generic,
            "object_type": self._resolve_object_literal,
            "interface_body": self._resolve_object_literal,
            "array_type": self._resolve_array,
            "tuple_type": self._resolve_tuple,
            "union_type": self._resolve_union,
            "intersection_type": self._resolve_intersection,
            "function_type": self._resolve_function,
            "type_predicate": lambda node, env: BOOLEAN_TYPE,
            "type_predicate_annotation": lambda node, env: BOOLEAN_TYPE,
            "asserts": lambda node, env: VOID_TYPE,
            "asserts_annotation": lambda node, env: VOID_TYPE,
        }
        self._collect(root)

    # ------------------------------------------------------------------
    # Public API

    @property
    def has_errors(self) -> bool:
        return bool(self.root.has_error)

    def exported_declarations(self) -> List[ClassDeclaration]:
        """Return class declarations named by the file's exports, aliases resolved."""
        declarations: List[ClassDeclaration] = []
        for statement in _named(self.root):
            if statement.type != "export_statement":
                continue
            declarations.extend(self._exported_from(statement))
        return declarations

    def lookup_type(self, name: str, arguments: Sequence[TypeNode] = ()) -> TypeNode:
        """Resolve a type name as if it were written at the top level of the file."""
        return self._lookup(name, list(arguments), {}, None)

    # ------------------------------------------------------------------
    # Declaration collection

    def _collect(self, root: Any) -> None:
        for statement in _named(root):
            if statement.type == "import_statement":
                self._collect_import(statement)
                continue
            node = statement
            if statement.type == "export_statement":
                node = statement.child_by_field_name("declaration")
                if node is None:
                    continue
            kind = _DECLARATION_KINDS.get(node.type)
            if kind is None:
                continue
            name_node = node.child_by_field_name("name")
            if name_node is None:
                continue
            name = self._text(name_node)
            declaration = self._declarations.get(name)
            if declaration is None or declaration.kind != kind:
                declaration = _Declaration(kind=kind, name=name)
                self._declarations[name] = declaration
            declaration.nodes.append(node)

    def _collect_import(self, statement: Any) -> None:
        source = statement.child_by_field_name("source")
        if source is None:
            return
        module = self._string_value(source)
        namespace = _FRAMEWORK_MODULES.get(module)
        if namespace is None:
            return
        for clause in _named(statement):
            if clause.type != "import_clause":
                continue
            for child in _named(clause):
                if child.type == "identifier":
                    self._framework_namespaces.add(self._text(child))
                elif child.type == "namespace_import":
                    for ident in _named(child):
                        if ident.type == "identifier":
                            self._framework_namespaces.add(self._text(ident))
                elif child.type == "named_imports":
                    for spec in _named(child):
                        if spec.type != "import_specifier":
                            continue
                        name_node = spec.child_by_field_name("name")
                        alias_node = spec.child_by_field_name("alias")
                        if name_node is None:
                            continue
                        imported = self._text(name_node)
                        local = self._text(alias_node) if alias_node is not None else imported
                        self._framework_names[local] = f"{namespace}.{imported}"

    def _exported_from(self, statement: Any) -> Iterator[ClassDeclaration]:
        declaration = statement.child_by_field_name("declaration")
        if declaration is not None and declaration.type in _CLASS_NODES:
            yield self._class_declaration(declaration)
            return
        value = statement.child_by_field_name("value")
        if value is not None:
            if value.type in _CLASS_NODES:
                yield self._class_declaration(value, default_name="default")
            elif value.type == "identifier":
                yield from self._local_classes(self._text(value))
            return
        for clause in _named(statement):
            if clause.type != "export_clause":
                continue
            for spec in _named(clause):
                name_node = spec.child_by_field_name("name")
                if spec.type == "export_specifier" and name_node is not None:
                    yield from self._local_classes(self._text(name_node))

    def _local_classes(self, name: str) -> Iterator[ClassDeclaration]:
        declaration = self._declarations.get(name)
        if declaration is None or declaration.kind != "class":
            return
        for node in declaration.nodes:
            yield self._class_declaration(node)

    # ------------------------------------------------------------------
    # Classes

    def _class_declaration(self, node: Any, default_name: str = "") -> ClassDeclaration:
        cached = self._class_declarations.get(node.id)
        if cached is not None:
            return cached
        name_node = node.child_by_field_name("name")
        name = self._text(name_node) if name_node is not None else default_name
        declaration = ClassDeclaration(name=name, location=self._location(node))
        self._class_declarations[node.id] = declaration
        env = self._bind_type_parameters(node, [], {})
        declaration.base_types = self._heritage(node, env)
        return declaration

    def _heritage(self, class_node: Any, env: Dict[str, TypeNode]) -> List[TypeNode]:
        bases: List[TypeNode] = []
        for heritage in _named(class_node):
            if heritage.type != "class_heritage":
                continue
            for clause in _named(heritage):
                if clause.type != "extends_clause":
                    continue
                pending: Optional[Any] = None
                for child in _named(clause):
                    if child.type == "type_arguments":
                        if pending is not None:
                            bases.append(self._resolve_base(pending, child, env))
                            pending = None
                        continue
                    if pending is not None:
                        bases.append(self._resolve_base(pending, None, env))
                    pending = child
                if pending is not None:
                    bases.append(self._resolve_base(pending, None, env))
        return bases

    def _resolve_base(
        self, value: Any, type_arguments: Optional[Any], env: Dict[str, TypeNode]
    ) -> TypeNode:
        arguments = self._resolve_arguments(type_arguments, env)
        text = self._text(value)
        if value.type == "identifier":
            return self._lookup(text, arguments, env, value)
        if value.type in {"member_expression", "nested_identifier"}:
            return self._lookup_qualified(text, arguments, value)
        return UnresolvedType(text, location=self._location(value))

    def _class_instance(
        self, declaration: _Declaration, arguments: List[TypeNode], env: Dict[str, TypeNode]
    ) -> TypeNode:
        node = declaration.nodes[0]
        instance = ObjectType(
            name=declaration.name,
            symbol=declaration.name,
            type_arguments=arguments,
            location=self._location(node),
        )
        self._remember(declaration.name, arguments, instance)
        instance.base_types = self._heritage(node, env)
        body = node.child_by_field_name("body")
        for member in _named(body) if body is not None else []:
            if member.type != "public_field_definition":
                continue
            if _has_token(member, "static") or self._is_private(member):
                continue
            prop = self._property(member, env)
            if prop is not None:
                instance.properties.append(prop)
        return instance

    def _is_private(self, member: Any) -> bool:
        for child in _named(member):
            if child.type == "accessibility_modifier" and self._text(child) != "public":
                return True
            if child.type == "private_property_identifier":
                return True
        return False

    # ------------------------------------------------------------------
    # Name lookup

    def _lookup(
        self,
        name: str,
        arguments: List[TypeNode],
        env: Dict[str, TypeNode],
        origin: Optional[Any],
    ) -> TypeNode:
        if name in env:
            return env[name]
        declaration = self._declarations.get(name)
        if declaration is not None:
            return self._instantiate(declaration, arguments)
        if name in self._framework_names:
            return self._framework_type(self._framework_names[name], arguments)
        if name in PRIMITIVES:
            return PRIMITIVES[name]
        builtin = self._builtin(name, arguments, origin)
        if builtin is not None:
            return builtin
        location = self._location(origin) if origin is not None else None
        return UnresolvedType(name, symbol=name, location=location)

    def _lookup_qualified(self, text: str, arguments: List[TypeNode], origin: Any) -> TypeNode:
        qualifier, _, name = text.replace(" ", "").rpartition(".")
        if qualifier in self._framework_namespaces or (
            qualifier == _FRAMEWORK_GLOBAL and qualifier not in self._declarations
        ):
            return self._framework_type(f"{_FRAMEWORK_GLOBAL}.{name}", arguments)
        return UnresolvedType(text, symbol=f"{qualifier}.{name}", location=self._location(origin))

    def _builtin(
        self, name: str, arguments: List[TypeNode], origin: Optional[Any]
    ) -> Optional[TypeNode]:
        location = self._location(origin) if origin is not None else None
        if name in {"Array", "ReadonlyArray"}:
            element = arguments[0] if arguments else ANY_TYPE
            return ArrayType(element, location=location)
        if name == "Partial" and arguments:
            return self._partial(arguments[0], location)
        if name == "Readonly" and arguments:
            return arguments[0]
        return None

    def _partial(self, target: TypeNode, location: Optional[SourceLocation]) -> PartialType:
        cached = self._partials.get(id(target))
        if cached is not None:
            return cached[1]
        node = PartialType(target, location=location)
        self._partials[id(target)] = (target, node)
        return node

    def _remember(self, name: str, arguments: Sequence[TypeNode], node: TypeNode) -> None:
        self._instances[(name, tuple(id(arg) for arg in arguments))] = (arguments, node)

    def _instantiate(self, declaration: _Declaration, arguments: List[TypeNode]) -> TypeNode:
        key = (declaration.name, tuple(id(arg) for arg in arguments))
        cached = self._instances.get(key)
        if cached is not None:
            return cached[1]

        first = declaration.nodes[0]
        env = self._bind_type_parameters(first, arguments, {})

        if declaration.kind == "class":
            return self._class_instance(declaration, arguments, env)
        if declaration.kind == "interface":
            return self._interface(declaration, arguments, env)
        if declaration.kind == "enum":
            node = self._enum(declaration)
            self._remember(declaration.name, arguments, node)
            return node

        value = first.child_by_field_name("value")
        if value is None:
            return UnresolvedType(declaration.name, symbol=declaration.name)
        if value.type == "object_type":
            record = ObjectType(
                name=declaration.name,
                symbol=declaration.name,
                type_arguments=arguments,
                location=self._location(first),
            )
            self._remember(declaration.name, arguments, record)
            record.properties.extend(self._members(value, env))
            return record

        if key in self._resolving:
            self.logger.debug("Recursive alias %s left unresolved", declaration.name)
            return UnresolvedType(declaration.name, symbol=declaration.name)
        self._resolving.add(key)
        try:
            resolved = self._resolve(value, env)
        finally:
            self._resolving.discard(key)
        self._remember(declaration.name, arguments, resolved)
        return resolved

    def _interface(
        self, declaration: _Declaration, arguments: List[TypeNode], env: Dict[str, TypeNode]
    ) -> TypeNode:
        record = ObjectType(
            name=declaration.name,
            symbol=declaration.name,
            type_arguments=arguments,
            location=self._location(declaration.nodes[0]),
        )
        self._remember(declaration.name, arguments, record)

        seen: Set[str] = set()
        for node in declaration.nodes:
            body = node.child_by_field_name("body")
            for prop in self._members(body, env) if body is not None else []:
                if prop.name not in seen:
                    seen.add(prop.name)
                    record.properties.append(prop)

        for node in declaration.nodes:
            for clause in _named(node):
                if clause.type != "extends_type_clause":
                    continue
                for base_node in _named(clause):
                    base = self._resolve(base_node, env)
                    record.base_types.append(base)
                    for prop in getattr(base, "properties", []):
                        if prop.name not in seen:
                            seen.add(prop.name)
                            record.properties.append(prop)
        return record

    def _enum(self, declaration: _Declaration) -> TypeNode:
        members: List[TypeNode] = []
        next_value: Optional[float] = 0
        for node in declaration.nodes:
            body = node.child_by_field_name("body")
            for member in _named(body) if body is not None else []:
                value: Any = next_value
                if member.type == "enum_assignment":
                    initializer = member.child_by_field_name("value")
                    text = self._text(initializer) if initializer is not None else ""
                    if initializer is not None and initializer.type == "string":
                        value = self._string_value(initializer)
                    else:
                        value = _parse_number(text)
                if value is None:
                    members.append(UnresolvedType(self._text(member)))
                    next_value = None
                    continue
                members.append(LiteralType(value, location=self._location(member)))
                next_value = value + 1 if isinstance(value, (int, float)) else None
        return union_of(members, location=self._location(declaration.nodes[0]))

    def _framework_type(self, symbol: str, arguments: List[TypeNode]) -> TypeNode:
        key = (symbol, tuple(id(arg) for arg in arguments))
        cached = self._framework_types.get(key)
        if cached is not None:
            return cached[1]

        name = symbol.rsplit(".", 1)[-1]
        node: TypeNode
        if name.endswith("EventHandler"):
            if name == "EventHandler":
                event = arguments[0] if arguments else self._framework_type(f"{_FRAMEWORK_GLOBAL}.SyntheticEvent", [])
            else:
                event_name = name[: -len("Handler")]
                event = self._framework_type(f"{_FRAMEWORK_GLOBAL}.{event_name}", arguments)
            node = FunctionType(parameters=[Parameter("event", event)], return_type=VOID_TYPE, symbol=symbol)
        else:
            record = ObjectType(name=name, symbol=symbol, type_arguments=arguments)
            if name == "PureComponent":
                record.base_types.append(
                    self._framework_type(f"{_FRAMEWORK_GLOBAL}.Component", arguments)
                )
            node = record
        self._framework_types[key] = (arguments, node)
        return node

    # ------------------------------------------------------------------
    # Type resolution

    def _resolve(self, node: Any, env: Dict[str, TypeNode]) -> TypeNode:
        resolver = self._resolvers.get(node.type)
        if resolver is None:
            return UnresolvedType(self._text(node), location=self._location(node))
        return resolver(node, env)

    def _resolve_first_child(self, node: Any, env: Dict[str, TypeNode]) -> TypeNode:
        children = _named(node)
        return self._resolve(children[0], env) if children else ANY_TYPE

    def _resolve_last_child(self, node: Any, env: Dict[str, TypeNode]) -> TypeNode:
        children = _named(node)
        return self._resolve(children[-1], env) if children else ANY_TYPE

    def _resolve_predefined(self, node: Any, env: Dict[str, TypeNode]) -> TypeNode:
        text = self._text(node)
        if text == "object":
            return ObjectType(location=self._location(node))
        return PRIMITIVES.get(text) or UnresolvedType(text, location=self._location(node))

    def _resolve_literal(self, node: Any, env: Dict[str, TypeNode]) -> TypeNode:
        children = _named(node)
        inner = children[0] if children else node
        location = self._location(node)
        if inner.type == "string":
            return LiteralType(self._string_value(inner), location=location)
        if inner.type == "true":
            return LiteralType(True, location=location)
        if inner.type == "false":
            return LiteralType(False, location=location)
        if inner.type == "null":
            return NULL_TYPE
        if inner.type == "undefined":
            return UNDEFINED_TYPE
        value = _parse_number(self._text(node))
        if value is None:
            return UnresolvedType(self._text(node), location=location)
        return LiteralType(value, location=location)

    def _resolve_identifier(self, node: Any, env: Dict[str, TypeNode]) -> TypeNode:
        return self._lookup(self._text(node), [], env, node)

    def _resolve_nested_identifier(self, node: Any, env: Dict[str, TypeNode]) -> TypeNode:
        return self._lookup_qualified(self._text(node), [], node)

    def _resolve_generic(self, node: Any, env: Dict[str, TypeNode]) -> TypeNode:
        name_node = node.child_by_field_name("name")
        arguments = self._resolve_arguments(node.child_by_field_name("type_arguments"), env)
        if name_node is None:
            return UnresolvedType(self._text(node), location=self._location(node))
        if name_node.type == "nested_type_identifier":
            return self._lookup_qualified(self._text(name_node), arguments, name_node)
        return self._lookup(self._text(name_node), arguments, env, name_node)

    def _resolve_arguments(self, node: Optional[Any], env: Dict[str, TypeNode]) -> List[TypeNode]:
        if node is None:
            return []
        return [self._resolve(child, env) for child in _named(node)]

    def _resolve_object_literal(self, node: Any, env: Dict[str, TypeNode]) -> TypeNode:
        return ObjectType(properties=self._members(node, env), location=self._location(node))

    def _resolve_array(self, node: Any, env: Dict[str, TypeNode]) -> TypeNode:
        return ArrayType(self._resolve_first_child(node, env), location=self._location(node))

    def _resolve_tuple(self, node: Any, env: Dict[str, TypeNode]) -> TypeNode:
        elements: List[TypeNode] = []
        for member in _named(node):
            if member.type in _TUPLE_MEMBERS:
                annotation = member.child_by_field_name("type")
                elements.append(self._resolve(annotation, env) if annotation is not None else ANY_TYPE)
            elif member.type in {"optional_type", "rest_type"}:
                elements.append(self._resolve_first_child(member, env))
            else:
                elements.append(self._resolve(member, env))
        return TupleType(elements, location=self._location(node))

    def _resolve_union(self, node: Any, env: Dict[str, TypeNode]) -> TypeNode:
        members = [self._resolve(child, env) for child in self._flatten(node, "union_type")]
        return union_of(members, location=self._location(node))

    def _resolve_intersection(self, node: Any, env: Dict[str, TypeNode]) -> TypeNode:
        members = [self._resolve(child, env) for child in self._flatten(node, "intersection_type")]
        return IntersectionType(members, location=self._location(node))

    def _flatten(self, node: Any, kind: str) -> Iterable[Any]:
        for child in _named(node):
            if child.type == kind:
                yield from self._flatten(child, kind)
            else:
                yield child

    def _resolve_function(self, node: Any, env: Dict[str, TypeNode]) -> TypeNode:
        local_env = self._bind_type_parameters(node, [], env)
        return_node = node.child_by_field_name("return_type")
        return FunctionType(
            parameters=self._parameters(node.child_by_field_name("parameters"), local_env),
            return_type=self._resolve(return_node, local_env) if return_node is not None else ANY_TYPE,
            location=self._location(node),
        )

    # ------------------------------------------------------------------
    # Members and parameters

    def _members(self, body: Any, env: Dict[str, TypeNode]) -> List[Property]:
        properties: List[Property] = []
        for member in _named(body):
            if member.type == "property_signature":
                prop = self._property(member, env)
            elif member.type == "method_signature":
                prop = self._method(member, env)
            else:
                continue
            if prop is not None:
                properties.append(prop)
        return properties

    def _property(self, member: Any, env: Dict[str, TypeNode]) -> Optional[Property]:
        name_node = member.child_by_field_name("name")
        if name_node is None:
            return None
        annotation = member.child_by_field_name("type")
        return Property(
            name=self._property_name(name_node),
            type=self._resolve(annotation, env) if annotation is not None else None,
            optional=_has_token(member, "?"),
            declaration=self._location(member),
        )

    def _method(self, member: Any, env: Dict[str, TypeNode]) -> Optional[Property]:
        name_node = member.child_by_field_name("name")
        if name_node is None:
            return None
        local_env = self._bind_type_parameters(member, [], env)
        return_node = member.child_by_field_name("return_type")
        function = FunctionType(
            parameters=self._parameters(member.child_by_field_name("parameters"), local_env),
            return_type=self._resolve(return_node, local_env) if return_node is not None else ANY_TYPE,
            location=self._location(member),
        )
        return Property(
            name=self._property_name(name_node),
            type=function,
            optional=_has_token(member, "?"),
            declaration=self._location(member),
        )

    def _parameters(self, node: Optional[Any], env: Dict[str, TypeNode]) -> List[Parameter]:
        parameters: List[Parameter] = []
        for param in _named(node) if node is not None else []:
            if param.type not in {"required_parameter", "optional_parameter"}:
                continue
            pattern = param.child_by_field_name("pattern")
            name = self._text(pattern) if pattern is not None else ""
            if name == "this":
                continue
            annotation = param.child_by_field_name("type")
            parameters.append(
                Parameter(
                    name=name,
                    type=self._resolve(annotation, env) if annotation is not None else ANY_TYPE,
                    optional=param.type == "optional_parameter",
                )
            )
        return parameters

    def _bind_type_parameters(
        self, node: Any, arguments: Sequence[TypeNode], env: Dict[str, TypeNode]
    ) -> Dict[str, TypeNode]:
        type_parameters = node.child_by_field_name("type_parameters")
        if type_parameters is None:
            type_parameters = next(
                (child for child in _named(node) if child.type == "type_parameters"), None
            )
        if type_parameters is None:
            return env
        bound = dict(env)
        index = 0
        for param in _named(type_parameters):
            if param.type != "type_parameter":
                continue
            name_node = param.child_by_field_name("name")
            if name_node is None:
                continue
            name = self._text(name_node)
            if index < len(arguments):
                bound[name] = arguments[index]
            else:
                default = param.child_by_field_name("value")
                constraint = param.child_by_field_name("constraint")
                if default is not None:
                    bound[name] = self._resolve_first_child(default, bound)
                else:
                    placeholder = TypeParameter(name, location=self._location(param))
                    bound[name] = placeholder
                    if constraint is not None:
                        placeholder.constraint = self._resolve_first_child(constraint, bound)
            index += 1
        return bound

    # ------------------------------------------------------------------
    # Text helpers

    def _text(self, node: Any) -> str:
        return self._source[node.start_byte : node.end_byte].decode("utf-8", errors="ignore")

    def _string_value(self, node: Any) -> str:
        text = self._text(node)
        if len(text) >= 2 and text[0] in "'\"`" and text[-1] == text[0]:
            return text[1:-1]
        return text

    def _property_name(self, node: Any) -> str:
        if node.type == "string":
            return self._string_value(node)
        return self._text(node)

    def _location(self, node: Any) -> SourceLocation:
        row, column = node.start_point[0], node.start_point[1]
        return SourceLocation(self.path, row + 1, column + 1)


__all__ = [
    "SUPPORTED_SUFFIXES",
    "TREE_SITTER_AVAILABLE",
    "TypeScriptModule",
    "TypeScriptParser",
]
