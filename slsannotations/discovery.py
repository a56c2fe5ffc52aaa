"""Source file discovery with glob patterns and ignore rules."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Iterator, List, Sequence

from .logging import get_logger

logger = get_logger("discovery")

_EXCLUDED_DIRS = {
    ".git",
    ".hg",
    ".svn",
    ".venv",
    ".serverless",
    ".build",
    ".webpack",
    "node_modules",
    "__pycache__",
    ".pytest_cache",
    ".idea",
}

_BRACES = re.compile(r"\{([^{}]*)\}")


@dataclass
class IgnoreRule:
    """An ignore pattern with gitignore-like matching."""

    pattern: str
    directory_only: bool
    anchored: bool
    has_slash: bool

    def matches(self, rel_path: str, is_dir: bool) -> bool:
        if not self.pattern:
            return False
        if self.directory_only and not is_dir:
            return False

        if self.anchored or self.has_slash:
            return match_pattern(rel_path, self.pattern)

        for part in rel_path.split("/"):
            if fnmatchcase(part, self.pattern):
                return True
        return False


def build_ignore_rule(pattern: str) -> IgnoreRule | None:
    pattern = pattern.strip()
    if not pattern:
        return None

    directory_only = pattern.endswith("/")
    if directory_only:
        pattern = pattern[:-1]

    anchored = pattern.startswith("/")
    if anchored:
        pattern = pattern[1:]

    return IgnoreRule(
        pattern=pattern,
        directory_only=directory_only,
        anchored=anchored,
        has_slash="/" in pattern,
    )


def match_pattern(rel_path: str, pattern: str) -> bool:
    """Match a root-relative posix path against a glob pattern.

    ``*`` may cross directory separators (fnmatch semantics), ``**/`` also
    matches zero directories and one ``{a,b}`` group is expanded.
    """
    for expanded in _expand_braces(pattern):
        for candidate in _collapse_globstars(expanded):
            if fnmatchcase(rel_path, candidate):
                return True
    return False


def discover(root: Path, pattern: str, ignore: Sequence[str] = ()) -> List[str]:
    """Return absolute paths of files under ``root`` matching ``pattern``, sorted by relative path."""
    root_path = Path(root).expanduser().resolve()
    if not root_path.exists():
        raise FileNotFoundError(f"Service path not found: {root}")
    if not root_path.is_dir():
        raise NotADirectoryError(f"Service path is not a directory: {root}")

    rules = [rule for rule in (build_ignore_rule(item) for item in ignore) if rule is not None]
    matched = [
        (rel_path, path)
        for path, rel_path in _iter_files(root_path, rules)
        if match_pattern(rel_path, pattern)
    ]
    files = [str(path) for _, path in sorted(matched)]
    logger.debug("Discovered %d file(s) matching %s under %s", len(files), pattern, root_path)
    return files


def _expand_braces(pattern: str) -> List[str]:
    match = _BRACES.search(pattern)
    if match is None:
        return [pattern]
    head, tail = pattern[: match.start()], pattern[match.end() :]
    return [f"{head}{option}{tail}" for option in match.group(1).split(",")]


def _collapse_globstars(pattern: str) -> List[str]:
    """Return ``pattern`` plus every variant with some ``**/`` segments removed."""
    variants = [pattern]
    index = 0
    while index < len(variants):
        current = variants[index]
        start = current.find("**/")
        while start != -1:
            variant = current[:start] + current[start + 3 :]
            if variant not in variants:
                variants.append(variant)
            start = current.find("**/", start + 3)
        index += 1
    return variants


def _should_ignore(rel_path: str, is_dir: bool, rules: Sequence[IgnoreRule]) -> bool:
    return any(rule.matches(rel_path, is_dir) for rule in rules)


def _iter_files(root: Path, rules: Sequence[IgnoreRule]) -> Iterator[tuple[Path, str]]:
    for dirpath, dirnames, filenames in os.walk(root):
        current_dir = Path(dirpath)
        rel_dir = current_dir.relative_to(root).as_posix() if current_dir != root else ""

        filtered_dirs = []
        for name in sorted(dirnames):
            if name in _EXCLUDED_DIRS:
                continue
            rel_path = f"{rel_dir}/{name}" if rel_dir else name
            if _should_ignore(rel_path, True, rules):
                continue
            filtered_dirs.append(name)
        dirnames[:] = filtered_dirs

        for filename in sorted(filenames):
            rel_path = f"{rel_dir}/{filename}" if rel_dir else filename
            if _should_ignore(rel_path, False, rules):
                continue
            yield current_dir / filename, rel_path


__all__ = ["IgnoreRule", "build_ignore_rule", "discover", "match_pattern"]
