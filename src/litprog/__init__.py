"""Literate programming tangle/weave engine."""

from __future__ import annotations

from pathlib import Path

from .blocks import Document, load_document
from .config import LitprogConfig
from .processor import ProcessResult, process_document


def tangle_file(path: str | Path, config: LitprogConfig | None = None) -> ProcessResult:
    """Load a block stream from ``path`` and process it.

    Args:
        path: Path to a YAML or JSON block stream.
        config: Base settings, overridden by the document's attributes.

    Returns:
        The ProcessResult with the registry, written outputs and weave links.

    Raises:
        FileNotFoundError: If the file does not exist.
    """
    document: Document = load_document(path)
    base = config or LitprogConfig()
    return process_document(document, base.with_attributes(document.attributes))
