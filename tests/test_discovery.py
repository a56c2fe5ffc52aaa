"""Tests for slsannotations.discovery."""

from __future__ import annotations

from pathlib import Path

import pytest

from slsannotations.discovery import discover, match_pattern


def _write(path: Path, content: str = "") -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def _relative(root: Path, files: list[str]) -> list[str]:
    return [Path(file).relative_to(root.resolve()).as_posix() for file in files]


def test_discover_matches_pattern_and_sorts(tmp_path: Path) -> None:
    for rel in ["src/b.ts", "src/a/z.ts", "index.ts", "src/a/readme.md", "node_modules/x/index.ts"]:
        _write(tmp_path / rel)

    files = discover(tmp_path, "**/*.ts")

    assert _relative(tmp_path, files) == ["index.ts", "src/a/z.ts", "src/b.ts"]
    assert all(Path(file).is_absolute() for file in files)


def test_discover_prunes_ignored_directories(tmp_path: Path) -> None:
    for rel in ["src/shared/util.ts", "src/handlers/a.ts", "src/handlers/a.spec.ts", "lib/shared/x.ts"]:
        _write(tmp_path / rel)

    files = discover(tmp_path, "**/*.ts", ["src/shared", "*.spec.ts"])

    assert _relative(tmp_path, files) == ["lib/shared/x.ts", "src/handlers/a.ts"]


def test_discover_rejects_missing_root(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        discover(tmp_path / "missing", "**/*.ts")


@pytest.mark.parametrize(
    "path, pattern, expected",
    [
        ("a.ts", "**/*.ts", True),
        ("src/deep/a.ts", "**/*.ts", True),
        ("src/a.ts", "src/**/*.ts", True),
        ("src/a.tsx", "**/*.{ts,tsx}", True),
        ("src/a.js", "**/*.{ts,tsx}", False),
        ("lib/a.ts", "src/**/*.ts", False),
    ],
)
def test_match_pattern(path: str, pattern: str, expected: bool) -> None:
    assert match_pattern(path, pattern) is expected
