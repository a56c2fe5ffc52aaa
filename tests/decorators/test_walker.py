"""Tests for the declaration walker."""

from __future__ import annotations

from slsannotations.compiler.syntax import node_text
from slsannotations.decorators import walk_declarations
from tests._fixtures.project_builder import ProjectBuilder


def _names(declarations) -> list[tuple[str, list[str]]]:  # type: ignore[no-untyped-def]
    return [
        (declaration.name, [node_text(decorator) for decorator in declaration.decorators])
        for declaration in declarations
    ]


def test_walker_yields_decorated_classes_in_source_order(project: ProjectBuilder) -> None:
    project.write(
        {
            "src/a.ts": """
            import { Handler, Tagged } from "./decorators";

            class Plain {}

            @Handler({ name: "one" })
            class One {}

            @Tagged
            @Handler({ name: "two" })
            export class Two {}
            """,
            "src/b.ts": """
            import { Handler } from "./decorators";

            @Handler({ name: "three" })
            export default class Three {}
            """,
        }
    )
    program = project.compile(["src/a.ts", "src/b.ts"])

    declarations = list(walk_declarations(program))

    assert _names(declarations) == [
        ("One", ['@Handler({ name: "one" })']),
        ("Two", ["@Tagged", '@Handler({ name: "two" })']),
        ("Three", ['@Handler({ name: "three" })']),
    ]
    assert [d.source_file for d in declarations] == [
        str(project.path("src/a.ts")),
        str(project.path("src/a.ts")),
        str(project.path("src/b.ts")),
    ]


def test_walker_descends_into_namespaces_but_not_classes_or_functions(project: ProjectBuilder) -> None:
    project.write(
        {
            "src/a.ts": """
            import { Handler } from "./decorators";

            namespace Outer {
              export namespace Inner {
                @Handler({ name: "nested" })
                export class Deep {}
              }
            }

            function factory() {
              @Handler({ name: "hidden" })
              class InsideFunction {}
              return InsideFunction;
            }

            class Undecorated {
              @Handler({ name: "member" })
              method() {}
            }
            """
        }
    )
    program = project.compile(["src/a.ts"])

    declarations = list(walk_declarations(program))

    assert [declaration.name for declaration in declarations] == ["Deep"]


def test_walker_includes_abstract_classes(project: ProjectBuilder) -> None:
    project.write(
        {
            "src/a.ts": """
            import { Handler } from "./decorators";

            @Handler({ name: "base" })
            export abstract class Base {}
            """
        }
    )
    program = project.compile(["src/a.ts"])

    assert [declaration.name for declaration in walk_declarations(program)] == ["Base"]
