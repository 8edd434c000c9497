"""Shared pytest fixtures for the litprog test suite."""

from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest

from litprog.blocks import DefinitionBlock, SourceLocation
from litprog.config import LitprogConfig
from litprog.registry import ChunkRegistry

FIXTURES_DIR = Path(__file__).parent / "fixtures"


# ── File Fixtures ─────────────────────────────────────────────────


@pytest.fixture
def hello_document_path() -> Path:
    return FIXTURES_DIR / "hello_document.yaml"


@pytest.fixture
def config_path() -> Path:
    return FIXTURES_DIR / "litprog_config.yaml"


@pytest.fixture
def invalid_config_path() -> Path:
    return FIXTURES_DIR / "invalid_config.yaml"


@pytest.fixture
def nonexistent_path(tmp_path: Path) -> Path:
    return tmp_path / "does_not_exist.yaml"


# ── Block Factories ───────────────────────────────────────────────


@pytest.fixture
def source_block() -> Callable[..., DefinitionBlock]:
    """Factory for ``[source]`` blocks: named by ``title`` or rooted by ``output``."""

    def make(
        lines: list[str],
        title: str | None = None,
        output: str | None = None,
        line: int | None = None,
        file: str = "doc.adoc",
        id: str | None = None,
    ) -> DefinitionBlock:
        attributes = {"output": output} if output is not None else {}
        location = SourceLocation(file=file, line=line) if line is not None else None
        return DefinitionBlock(
            lines=list(lines),
            style="source",
            title=title,
            id=id,
            attributes=attributes,
            source_location=location,
        )

    return make


@pytest.fixture
def listing_block() -> Callable[..., DefinitionBlock]:
    """Factory for plain listing blocks, split at ``<<Title>>=`` markers."""

    def make(
        lines: list[str],
        line: int | None = None,
        file: str = "doc.adoc",
        title: str | None = None,
    ) -> DefinitionBlock:
        location = SourceLocation(file=file, line=line) if line is not None else None
        return DefinitionBlock(lines=list(lines), title=title, source_location=location)

    return make


# ── Registry Fixtures ─────────────────────────────────────────────


@pytest.fixture
def no_directives() -> LitprogConfig:
    """Config with line directives switched off."""
    return LitprogConfig(line_template="")


@pytest.fixture
def collect(source_block) -> Callable[..., ChunkRegistry]:
    """Build a registry from ``{title: lines}`` named chunks and ``roots``.

    Roots are collected first, in the order given, then named chunks.
    """

    def make(chunks: dict[str, list[str]], roots: dict[str, list[str]] | None = None) -> ChunkRegistry:
        blocks = [source_block(lines, output=target) for target, lines in (roots or {}).items()]
        blocks += [source_block(lines, title=title) for title, lines in chunks.items()]
        registry = ChunkRegistry()
        registry.collect(blocks)
        return registry

    return make
