"""Document processing — runs collection, tangle and weave as separate phases."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TextIO

from .blocks import Document
from .config import LitprogConfig, validate_config
from .registry import ChunkRegistry
from .tangle import TangleEngine
from .weave import WeaveAnnotator, WeaveLink

logger = logging.getLogger(__name__)


@dataclass
class ProcessResult:
    """Outcome of processing one document."""
    registry: ChunkRegistry
    written: list[str] = field(default_factory=list)
    links: list[WeaveLink] = field(default_factory=list)


def resolve_config(document: Document, base: LitprogConfig | None = None) -> LitprogConfig:
    """Layer the document's attributes over ``base`` (or the defaults)."""
    return (base or LitprogConfig()).with_attributes(document.attributes)


def collect_document(document: Document) -> ChunkRegistry:
    """Run the collection scan over a document into a fresh registry."""
    registry = ChunkRegistry()
    registry.collect(document.blocks)
    return registry


def process_document(
    document: Document,
    config: LitprogConfig | None = None,
    tangle: bool = True,
    weave: bool = True,
    stdout: TextIO | None = None,
) -> ProcessResult:
    """Collect all chunks, then tangle every root, then weave.

    Args:
        document: The segmented document.
        config: Fully layered settings; when omitted, the defaults overridden
            by the document's attributes.
        tangle: Whether to write output artifacts.
        weave: Whether to annotate blocks with navigation links.
        stdout: Stream for the ``*`` root, standard output by default.

    Raises:
        ValueError: If the config is invalid.
        LitprogError: On any collection or tangle failure.
    """
    if config is None:
        config = resolve_config(document)
    errors = validate_config(config)
    if errors:
        raise ValueError("Invalid config: " + "; ".join(errors))

    result = ProcessResult(registry=collect_document(document))

    if tangle:
        engine = TangleEngine(result.registry, config, stdout=stdout)
        result.written = engine.tangle_all()

    if weave:
        result.links = WeaveAnnotator(result.registry).annotate()

    return result
