"""Tests for slsannotations.compiler.program."""

from __future__ import annotations

from pathlib import Path

from slsannotations.compiler import CompilerOptions, ModuleKind, ScriptTarget, compile_program
from slsannotations.compiler.syntax import find_first
from tests._fixtures.project_builder import ProjectBuilder


def test_compile_program_keeps_input_order_and_dedupes(project: ProjectBuilder) -> None:
    project.write(
        {
            "src/b.ts": "export const b = 1;\n",
            "src/a.ts": "export const a = 2;\n",
        }
    )
    b = str(project.path("src/b.ts"))
    a = str(project.path("src/a.ts"))

    program = compile_program([b, a, b])

    assert [source.file_name for source in program.get_source_files()] == [b, a]
    assert program.get_source_file(str(project.path("src") / ".." / "src" / "a.ts")) is not None


def test_compile_program_skips_unreadable_files(tmp_path: Path) -> None:
    missing = tmp_path / "missing.ts"
    program = compile_program([str(missing)])
    assert program.get_source_files() == []


def test_compile_program_records_fixed_options(project: ProjectBuilder) -> None:
    options = CompilerOptions(target=ScriptTarget.ES5, module=ModuleKind.COMMONJS)
    program = compile_program([str(project.path("src/decorators.ts"))], options)
    assert program.options == options


def test_compile_program_parses_tsx_and_keeps_broken_files(project: ProjectBuilder) -> None:
    project.write(
        {
            "src/view.tsx": "export const View = () => <div>hello</div>;\n",
            "src/broken.ts": "class {{\n",
        }
    )
    program = project.compile(["src/view.tsx", "src/broken.ts"])
    view, broken = program.get_source_files()

    assert not view.has_errors
    assert broken.has_errors


def test_source_file_of_maps_nodes_back_to_their_file(project: ProjectBuilder) -> None:
    project.write({"src/a.ts": "function f() { g(); }\n", "src/b.ts": "const x = 1;\n"})
    program = project.compile(["src/a.ts", "src/b.ts"])
    source = program.get_source_files()[0]

    call = find_first(source.root, "call_expression")

    assert call is not None
    assert program.source_file_of(call) is source
