from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator

import pytest

from tests._fixtures.project_builder import ProjectBuilder

DECORATORS_TS = """
export interface HandlerOptions {
  name: string;
  memorySize?: number;
}

/**
 * Marks a class as a lambda entry point.
 * @param options function settings merged into serverless.yml
 */
export function Handler(options: HandlerOptions): ClassDecorator {
  return () => undefined;
}

/** Routes an HTTP event to a method. */
export const Route = (options: { path: string; method?: string }): MethodDecorator => () => undefined;

export function Tagged(target: Function): void {}
"""


@pytest.fixture
def project(tmp_path: Path) -> ProjectBuilder:
    """Provide a service builder preloaded with the shared decorator module."""
    builder = ProjectBuilder(tmp_path)
    builder.write({"src/decorators.ts": DECORATORS_TS})
    return builder


@pytest.fixture(autouse=True)
def _reset_package_logger() -> Iterator[None]:
    """Undo configure_logging() calls made by CLI tests so caplog keeps working."""
    yield
    logger = logging.getLogger("slsannotations")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
