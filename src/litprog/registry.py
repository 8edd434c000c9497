"""Chunk collection — accumulates root and named chunks from definition blocks."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Sequence

from .blocks import SOURCE_STYLE, LISTING_CONTEXT, DefinitionBlock, SourceLocation
from .elements import ChunkElement, LocationMarker, ReferenceLine, TextLine
from .errors import DuplicateRootChunk, UndefinedChunkReference
from .references import Reference, classify, match_chunk_definition
from .titles import TitleResolver
from .weave import generate_id

logger = logging.getLogger(__name__)

_WHITESPACE_RX = re.compile(r"\s")


class ChunkRegistry:
    """Per-document session holding everything collected from the block scan.

    Root chunks and named chunks live in separate namespaces. The chunk-name
    set, shared with the resolver, grows as blocks are scanned. For every
    title the registry also keeps the ordered list of contributing blocks.
    """

    def __init__(self) -> None:
        self._roots: dict[str, list[ChunkElement]] = {}
        self._chunks: dict[str, list[ChunkElement]] = {}
        self.chunk_names: set[str] = set()
        self.chunk_blocks: dict[str, list[DefinitionBlock]] = {}
        self._ids: set[str] = set()
        self.resolver = TitleResolver(self.chunk_names)

    # ── Chunk storage ─────────────────────────────────────────────

    def define_root(self, target: str, elements: Iterable[ChunkElement]) -> None:
        if target in self._roots:
            raise DuplicateRootChunk(target)
        self._roots[target] = list(elements)
        self.chunk_names.add(target)

    def append_to_chunk(self, title: str, elements: Iterable[ChunkElement]) -> None:
        self._chunks.setdefault(title, []).extend(elements)
        self.chunk_names.add(title)

    def exists(self, title: str) -> bool:
        """True if ``title`` is a defined named chunk."""
        return title in self._chunks

    def elements_of(self, title: str, root: bool = False) -> tuple[ChunkElement, ...]:
        """Return the elements of a named chunk, or of a root chunk if ``root``.

        Raises:
            UndefinedChunkReference: If no such chunk was defined.
        """
        chunks = self._roots if root else self._chunks
        if title not in chunks:
            raise UndefinedChunkReference(title)
        return tuple(chunks[title])

    def roots(self) -> list[str]:
        """Root targets in definition order."""
        return list(self._roots)

    def chunk_titles(self) -> list[str]:
        """Named chunk titles in order of first contribution."""
        return list(self._chunks)

    # ── Collection ────────────────────────────────────────────────

    def collect(self, blocks: Sequence[DefinitionBlock]) -> None:
        """Scan definition blocks in document order, populating the registry."""
        self._ids.update(b.id for b in blocks if b.id)
        for block in blocks:
            if block.context != LISTING_CONTEXT:
                continue
            if block.style == SOURCE_STYLE:
                self.process_source_block(block)
            else:
                self.process_listing_block(block)
        logger.info(
            "Collected %d root chunks and %d named chunks from %d blocks",
            len(self._roots), len(self._chunks), len(blocks),
        )

    def process_source_block(self, block: DefinitionBlock) -> None:
        """Add a source block as a root (``output`` attribute) or a named chunk."""
        root = block.output is not None
        if root:
            title = block.output
        elif block.title:
            title = self.resolver.resolve(block.title)
            if title != block.title:
                block.title = title
        else:
            logger.debug("Skipping untitled source block at %s", block.source_location)
            return

        location = None
        if block.source_location is not None:
            location = block.source_location.advance(1)
        self._contribute(title, root, block, block.lines, location)

    def process_listing_block(self, block: DefinitionBlock) -> None:
        """Split a listing block at ``<<Title>>=`` markers, one chunk per section.

        A section title without whitespace names an output target; a title
        with whitespace is a named chunk. Blocks that do not open with a
        marker are not chunks.
        """
        if not block.lines or match_chunk_definition(block.lines[0]) is None:
            return

        sections: list[tuple[str, int, list[str]]] = []
        for offset, line in enumerate(block.lines):
            raw_title = match_chunk_definition(line)
            if raw_title is not None:
                sections.append((raw_title, offset, []))
            else:
                sections[-1][2].append(line)

        for raw_title, offset, lines in sections:
            title = self.resolver.resolve(raw_title)
            root = _WHITESPACE_RX.search(title) is None
            location = None
            if block.source_location is not None:
                # Marker sits on line + 1 + offset; content starts one below
                location = block.source_location.advance(offset + 2)
            self._contribute(title, root, block, lines, location)

    def _contribute(
        self,
        title: str,
        root: bool,
        block: DefinitionBlock,
        lines: list[str],
        location: SourceLocation | None,
    ) -> None:
        if root and title in self._roots:
            raise DuplicateRootChunk(title)
        self.chunk_names.add(title)

        elements: list[ChunkElement] = []
        if location is not None:
            elements.append(LocationMarker(file=location.file, line=location.line))
        for line in lines:
            parsed = classify(line, self.resolver)
            if isinstance(parsed, Reference):
                self.chunk_names.add(parsed.title)
                elements.append(ReferenceLine(target=parsed.target, indent=parsed.indent))
            else:
                elements.append(TextLine(parsed.text))

        if root:
            self.define_root(title, elements)
        else:
            self.append_to_chunk(title, elements)
        self._record_block(title, block)
        logger.debug(
            "Added %d lines to %s chunk %r", len(lines), "root" if root else "named", title
        )

    def _record_block(self, title: str, block: DefinitionBlock) -> None:
        contributors = self.chunk_blocks.setdefault(title, [])
        contributors.append(block)
        if block.id is None:
            block.id = self._unique_id(generate_id(title, len(contributors)))

    def _unique_id(self, base: str) -> str:
        candidate = base
        suffix = 2
        while candidate in self._ids:
            candidate = f"{base}_{suffix}"
            suffix += 1
        self._ids.add(candidate)
        return candidate
