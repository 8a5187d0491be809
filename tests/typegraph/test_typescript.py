"""End-to-end extraction tests through the tree-sitter TypeScript front end."""

from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

from propscan.classifier import ErrorPolicy
from propscan.config import PropScanConfig
from propscan.errors import UnclassifiableTypeError
from propscan.models import (
    ANY,
    BOOLEAN,
    EVENT,
    NUMBER,
    REACT_ELEMENT,
    REACT_NODE,
    STRING,
    VOID,
    ArrayPropType,
    ComponentSpec,
    FinderResult,
    FnPropType,
    LiteralPropType,
    ObjectMember,
    PropSpec,
    RefPropType,
    TuplePropType,
    UnionPropType,
)
from propscan.scanner import SourceScanner
from propscan.typegraph.graph import STRING_TYPE, ObjectType
from propscan.typegraph.typescript import TREE_SITTER_AVAILABLE, TypeScriptParser

pytestmark = pytest.mark.skipif(
    not TREE_SITTER_AVAILABLE, reason="tree-sitter-typescript not installed"
)


def _scan(tmp_path: Path, source: str, **overrides: object) -> FinderResult:
    config = PropScanConfig(root=tmp_path, **overrides)  # type: ignore[arg-type]
    scanner = SourceScanner(config, use_cache=False)
    return scanner.scan_source(textwrap.dedent(source), str(tmp_path / "Component.tsx"))


def _props(result: FinderResult, component: str = "") -> dict[str, ObjectMember]:
    spec = next(c for c in result.components if not component or c.name == component)
    return {member.name: member for member in result.refs[spec.props_ref_index].members}


def test_basic_types(tmp_path: Path) -> None:
    result = _scan(
        tmp_path,
        """
        import * as React from "react";

        interface Props {
            foo: string;
            bar: number;
            baz: boolean;
        }

        export class Basic extends React.Component<Props> {}
        """,
    )

    assert result.components == (ComponentSpec("Basic", 0),)
    assert result.refs[0].name == "Props"
    assert result.refs[0].members == (
        ObjectMember("foo", STRING),
        ObjectMember("bar", NUMBER),
        ObjectMember("baz", BOOLEAN),
    )


def test_nullable_members(tmp_path: Path) -> None:
    props = _props(
        _scan(
            tmp_path,
            """
            import * as React from "react";

            interface Props {
                foo: string;
                bar: string | undefined;
                baz?: string;
            }

            export class Nullable extends React.Component<Props> {}
            """,
        )
    )

    assert props["foo"].is_nullable is False
    assert props["bar"] == ObjectMember("bar", STRING, is_nullable=True)
    assert props["baz"] == ObjectMember("baz", STRING, is_nullable=True)


def test_partial_props_are_all_nullable(tmp_path: Path) -> None:
    props = _props(
        _scan(
            tmp_path,
            """
            import * as React from "react";

            interface Props {
                foo: string;
                bar: number;
            }

            export class Loose extends React.Component<Partial<Props>> {}
            """,
        )
    )

    assert props["foo"] == ObjectMember("foo", STRING, is_nullable=True)
    assert props["bar"] == ObjectMember("bar", NUMBER, is_nullable=True)


def test_event_handlers(tmp_path: Path) -> None:
    props = _props(
        _scan(
            tmp_path,
            """
            import * as React from "react";

            interface Props {
                onClick: (event: React.MouseEvent<HTMLElement, MouseEvent>) => void;
                onClick2: React.MouseEventHandler<HTMLElement>;
            }

            export class Clickable extends React.Component<Props> {}
            """,
        )
    )

    handler = FnPropType(arg_types=(PropSpec(EVENT),), return_type=PropSpec(VOID))
    assert props["onClick"].prop_type == handler
    assert props["onClick2"].prop_type == handler


def test_literal_types(tmp_path: Path) -> None:
    props = _scan(
        tmp_path,
        """
        import * as React from "react";

        interface Props {
            one: 1;
            foo: "foo";
            yes: true;
            negative: -2;
        }

        export class Literals extends React.Component<Props> {}
        """,
    )

    members = _props(props)
    assert members["one"].prop_type == LiteralPropType(1)
    assert members["foo"].prop_type == LiteralPropType("foo")
    assert members["yes"].prop_type == LiteralPropType(True)
    assert members["negative"].prop_type == LiteralPropType(-2)


def test_union_order_is_preserved(tmp_path: Path) -> None:
    props = _props(
        _scan(
            tmp_path,
            """
            import * as React from "react";

            interface Props {
                size: "small" | "large" | number;
                maybe?: string | number;
            }

            export class Sized extends React.Component<Props> {}
            """,
        )
    )

    assert props["size"].prop_type == UnionPropType(
        (LiteralPropType("small"), LiteralPropType("large"), NUMBER)
    )
    assert props["maybe"] == ObjectMember("maybe", UnionPropType((STRING, NUMBER)), is_nullable=True)


def test_object_members_become_references(tmp_path: Path) -> None:
    result = _scan(
        tmp_path,
        """
        import * as React from "react";

        interface Props {
            position: { x: number; y: number };
            empty: {};
        }

        export class Positioned extends React.Component<Props> {}
        """,
    )

    props = _props(result)
    position = props["position"].prop_type
    empty = props["empty"].prop_type
    assert isinstance(position, RefPropType)
    assert isinstance(empty, RefPropType)
    assert result.refs[position.ref_index].name is None
    assert [m.name for m in result.refs[position.ref_index].members] == ["x", "y"]
    assert result.refs[empty.ref_index].members == ()


def test_arrays_and_tuples(tmp_path: Path) -> None:
    props = _props(
        _scan(
            tmp_path,
            """
            import * as React from "react";

            interface Props {
                names: string[];
                counts: Array<number>;
                frozen: ReadonlyArray<boolean>;
                pair: [string, number];
            }

            export class Lists extends React.Component<Props> {}
            """,
        )
    )

    assert props["names"].prop_type == ArrayPropType(STRING)
    assert props["counts"].prop_type == ArrayPropType(NUMBER)
    assert props["frozen"].prop_type == ArrayPropType(BOOLEAN)
    assert props["pair"].prop_type == TuplePropType((STRING, NUMBER))


@pytest.mark.parametrize(
    "header, base",
    [
        ('import * as Rrreact from "react";', "Rrreact.Component"),
        ('import React from "react";', "React.Component"),
        ('import { Component } from "react";', "Component"),
        ('import { Component as Base } from "react";', "Base"),
        ("", "React.Component"),
    ],
)
def test_react_import_styles(tmp_path: Path, header: str, base: str) -> None:
    result = _scan(
        tmp_path,
        f"""
{header}

interface Props {{
    label: string;
}}

export class Named extends {base}<Props> {{}}
""",
    )

    assert result.components == (ComponentSpec("Named", 0),)


def test_non_component_and_unexported_classes_are_ignored(tmp_path: Path) -> None:
    result = _scan(
        tmp_path,
        """
        import * as React from "react";

        interface Props {
            label: string;
        }

        class Hidden extends React.Component<Props> {}

        export class Store {
            value: string = "";
        }
        """,
    )

    assert result.components == ()
    assert result.refs == ()


def test_shared_props_type_is_stored_once(tmp_path: Path) -> None:
    result = _scan(
        tmp_path,
        """
        import * as React from "react";

        interface Props {
            label: string;
        }

        export class Primary extends React.Component<Props> {}
        export class Secondary extends React.PureComponent<Props> {}
        """,
    )

    assert result.components == (ComponentSpec("Primary", 0), ComponentSpec("Secondary", 0))
    assert len(result.refs) == 1


def test_two_level_inheritance(tmp_path: Path) -> None:
    result = _scan(
        tmp_path,
        """
        import * as React from "react";

        interface Props {
            label: string;
        }

        class Base<P> extends React.Component<P> {}

        export class Child extends Base<Props> {}
        """,
    )

    assert result.components == (ComponentSpec("Child", 0),)
    assert result.refs[0].name == "Props"


def test_self_referencing_props(tmp_path: Path) -> None:
    result = _scan(
        tmp_path,
        """
        import * as React from "react";

        interface TreeProps {
            label: string;
            children?: TreeProps[];
        }

        export class Tree extends React.Component<TreeProps> {}
        """,
    )

    assert len(result.refs) == 1
    assert result.refs[0].member("children") == ObjectMember(
        "children", ArrayPropType(RefPropType(0)), is_nullable=True
    )


def test_export_forms(tmp_path: Path) -> None:
    result = _scan(
        tmp_path,
        """
        import * as React from "react";

        type Props = { label: string };

        class Later extends React.Component<Props> {}

        export { Later };
        export default class extends React.Component<Props> {}
        """,
    )

    assert {c.name for c in result.components} == {"Later", "default"}
    assert result.refs[0].name == "Props"


def test_framework_types_map_to_opaque_kinds(tmp_path: Path) -> None:
    props = _props(
        _scan(
            tmp_path,
            """
            import * as React from "react";

            interface Props {
                children: React.ReactNode;
                icon: React.ReactElement;
                render: () => JSX.Element;
                onChange(event: React.ChangeEvent<HTMLInputElement>): void;
                onSelect?(id: string): void;
            }

            export class Slots extends React.Component<Props> {}
            """,
        )
    )

    assert props["children"].prop_type == REACT_NODE
    assert props["icon"].prop_type == REACT_ELEMENT
    assert props["render"].prop_type == FnPropType(arg_types=(), return_type=PropSpec(REACT_ELEMENT))
    assert props["onChange"].prop_type == FnPropType(
        arg_types=(PropSpec(EVENT),), return_type=PropSpec(VOID)
    )
    assert props["onSelect"] == ObjectMember(
        "onSelect",
        FnPropType(arg_types=(PropSpec(STRING),), return_type=PropSpec(VOID)),
        is_nullable=True,
    )


def test_interfaces_inherit_members_after_their_own(tmp_path: Path) -> None:
    result = _scan(
        tmp_path,
        """
        import * as React from "react";

        interface BaseProps {
            id: string;
        }

        interface Props extends BaseProps {
            label: string;
        }

        export class Labeled extends React.Component<Props> {}
        """,
    )

    assert [m.name for m in result.refs[0].members] == ["label", "id"]


def test_enums_generics_and_intersections(tmp_path: Path) -> None:
    result = _scan(
        tmp_path,
        """
        import * as React from "react";

        enum Size { Small, Large = 10, Huge }
        enum Tone { Light = "light", Dark = "dark" }

        interface Box<T> {
            value: T;
        }

        type Extra = { extra: number };
        type Props = { size: Size; tone: Tone; box: Box<string> } & Extra;

        export class Mixed extends React.Component<Props> {}
        """,
    )

    props = _props(result)
    assert props["size"].prop_type == UnionPropType(
        (LiteralPropType(0), LiteralPropType(10), LiteralPropType(11))
    )
    assert props["tone"].prop_type == UnionPropType(
        (LiteralPropType("light"), LiteralPropType("dark"))
    )
    box = props["box"].prop_type
    assert isinstance(box, RefPropType)
    assert result.refs[box.ref_index].name == "Box"
    assert result.refs[box.ref_index].members == (ObjectMember("value", STRING),)
    assert props["extra"].prop_type == NUMBER


def test_unknown_types_follow_error_policy(tmp_path: Path) -> None:
    source = """
        import * as React from "react";

        interface Props {
            when: Date;
        }

        export class Dated extends React.Component<Props> {}
        """

    assert _props(_scan(tmp_path, source))["when"].prop_type == ANY
    with pytest.raises(UnclassifiableTypeError, match="Date"):
        _scan(tmp_path, source, error_policy=ErrorPolicy.STRICT)


def test_generic_instantiations_are_shared(tmp_path: Path) -> None:
    module = TypeScriptParser().parse(
        textwrap.dedent(
            """
            interface Box<T> { value: T }
            type Alias = Box<string>;
            """
        ),
        "types.ts",
    )

    first = module.lookup_type("Box", [STRING_TYPE])
    assert isinstance(first, ObjectType)
    assert module.lookup_type("Box", [STRING_TYPE]) is first
    assert module.lookup_type("Alias") is first
    assert module.has_errors is False


def test_nested_and_aliased_unions_are_flattened(tmp_path: Path) -> None:
    props = _props(
        _scan(
            tmp_path,
            """
            import * as React from "react";

            type Maybe = string | undefined;
            type Size = "s" | "m";

            interface Props {
                a?: string | null;
                b?: string | undefined;
                x: Maybe | number;
                size: Size | number;
            }

            export class Flat extends React.Component<Props> {}
            """,
        )
    )

    assert props["a"] == ObjectMember("a", STRING, is_nullable=True)
    assert props["b"] == ObjectMember("b", STRING, is_nullable=True)
    assert props["x"] == ObjectMember("x", UnionPropType((STRING, NUMBER)), is_nullable=True)
    assert props["size"] == ObjectMember(
        "size", UnionPropType((LiteralPropType("s"), LiteralPropType("m"), NUMBER))
    )


def test_optional_parameter_with_nullable_type(tmp_path: Path) -> None:
    props = _props(
        _scan(
            tmp_path,
            """
            import * as React from "react";

            interface Props {
                onPick(value?: string | null): void;
            }

            export class Picker extends React.Component<Props> {}
            """,
        )
    )

    assert props["onPick"].prop_type == FnPropType(
        arg_types=(PropSpec(STRING, is_nullable=True),), return_type=PropSpec(VOID)
    )


def test_shared_partial_props_are_stored_once(tmp_path: Path) -> None:
    result = _scan(
        tmp_path,
        """
        import * as React from "react";

        interface Options {
            dense: boolean;
        }

        interface Props {
            label: string;
            first: Partial<Options>;
            second: Partial<Options>;
        }

        export class A extends React.Component<Partial<Props>> {}
        export class B extends React.Component<Partial<Props>> {}
        """,
    )

    assert result.components == (ComponentSpec("A", 0), ComponentSpec("B", 0))
    props = _props(result, "A")
    assert props["first"].prop_type == props["second"].prop_type
    assert len(result.refs) == 2


def test_explicit_any_is_accepted_under_strict_policy(tmp_path: Path) -> None:
    props = _props(
        _scan(
            tmp_path,
            """
            import * as React from "react";

            interface Props {
                payload: any;
                onDone(): any;
            }

            export class Loose extends React.Component<Props> {}
            """,
            error_policy=ErrorPolicy.STRICT,
        )
    )

    assert props["payload"].prop_type == ANY
    assert props["onDone"].prop_type == FnPropType(arg_types=(), return_type=PropSpec(ANY))
