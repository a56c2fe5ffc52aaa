"""Tests for literal parameter extraction."""

from __future__ import annotations

import pytest

from slsannotations.compiler.syntax import find_first, numeric_text, parse_integer
from slsannotations.decorators import extract_parameters, is_retained_value
from tests._fixtures.project_builder import ProjectBuilder


def _parameters(project: ProjectBuilder, arguments: str) -> list[tuple[str, object]]:
    project.write({"src/call.ts": f"configure({arguments});\n"})
    program = project.compile(["src/call.ts"])
    call = find_first(program.get_source_files()[0].root, "call_expression")
    assert call is not None
    return [(record.name, record.value) for record in extract_parameters(call)]


def test_extracts_each_truthy_literal_property(project: ProjectBuilder) -> None:
    assert _parameters(project, '{ name: "foo", memorySize: 128, runtime: \'nodejs18.x\' }') == [
        ("name", "foo"),
        ("memorySize", 128),
        ("runtime", "nodejs18.x"),
    ]


def test_falsy_values_are_dropped(project: ProjectBuilder) -> None:
    assert _parameters(project, '{ name: "foo", timeout: 0, description: "" }') == [("name", "foo")]


def test_non_literal_values_are_dropped(project: ProjectBuilder) -> None:
    parameters = _parameters(
        project, "{ name: `tpl`, enabled: true, size: -5, ref: other, dynamic: `a${b}` }"
    )
    assert parameters == [("name", "tpl")]


def test_quoted_keys_take_their_value_from_the_value_node(project: ProjectBuilder) -> None:
    assert _parameters(project, '{ "timeout": 30, "enabled": true, "size": someConst }') == [
        ("timeout", 30),
    ]


def test_numbers_are_parsed_as_integers(project: ProjectBuilder) -> None:
    assert _parameters(project, "{ a: 1.5, b: 0x10, c: 1e3, d: .5 }") == [
        ("a", 1),
        ("b", 16),
        ("c", 1000),
    ]


def test_numeric_separators_and_radix_prefixes(project: ProjectBuilder) -> None:
    assert _parameters(project, "{ memorySize: 1_024, a: 0o17, b: 0b11, c: 0xF_F }") == [
        ("memorySize", 1024),
        ("a", 15),
        ("b", 3),
        ("c", 255),
    ]


def test_nested_object_properties_are_flattened(project: ProjectBuilder) -> None:
    assert _parameters(project, '{ name: "api", environment: { STAGE: "dev" } }') == [
        ("name", "api"),
        ("STAGE", "dev"),
    ]


def test_escape_sequences_are_cooked(project: ProjectBuilder) -> None:
    assert _parameters(project, r'{ path: "/a\tbA" }') == [("path", "/a\tbA")]


@pytest.mark.parametrize(
    "value, retained",
    [(None, False), (0, False), ("", False), (1, True), (-1, True), ("x", True)],
)
def test_is_retained_value(value, retained) -> None:  # type: ignore[no-untyped-def]
    assert is_retained_value(value) is retained


def test_parse_integer_follows_parse_int() -> None:
    assert parse_integer("42") == 42
    assert parse_integer("0X1f") == 31
    assert parse_integer("7.9") == 7
    assert parse_integer("abc") is None


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("1_024", "1024"),
        ("0B101", "5"),
        ("0o17", "15"),
        ("017", "15"),
        ("089", "89"),
        ("1e3", "1000"),
        ("2.50", "2.5"),
        ("1e21", "1e+21"),
    ],
)
def test_numeric_text_matches_javascript_rendering(raw: str, expected: str) -> None:
    assert numeric_text(raw) == expected
