"""Document model — already-segmented definition blocks and their serialization.

Parsing host markup is not this package's job. A host (or the CLI) hands over
a block stream: the document attributes plus, for every block, its context,
style, title, attributes, raw lines and source location.
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, field, replace
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

LISTING_CONTEXT = "listing"
SOURCE_STYLE = "source"


@dataclass(frozen=True)
class SourceLocation:
    """Originating file and line of a block's opening delimiter.

    Content line ``i`` (0-based) of the block sits on ``line + 1 + i``.
    """
    file: str
    line: int

    def advance(self, count: int) -> SourceLocation:
        return replace(self, line=self.line + count)


@dataclass
class DefinitionBlock:
    """One block of the host document."""
    lines: list[str]
    context: str = LISTING_CONTEXT
    style: str | None = None
    title: str | None = None
    id: str | None = None
    attributes: dict[str, Any] = field(default_factory=dict)
    source_location: SourceLocation | None = None

    @property
    def output(self) -> str | None:
        """The ``output`` attribute, naming a root chunk, if present."""
        value = self.attributes.get("output")
        return None if value is None else str(value)


@dataclass
class Document:
    """A segmented host document."""
    attributes: dict[str, Any]
    blocks: list[DefinitionBlock]


def parse_block(data: dict[str, Any]) -> DefinitionBlock:
    """Build a DefinitionBlock from its plain-dict form.

    Raises:
        ValueError: If ``lines`` is missing or not a list.
    """
    lines = data.get("lines")
    if not isinstance(lines, list):
        raise ValueError(f"Block is missing a 'lines' list: {data!r}")

    location = data.get("source_location")
    source_location = None
    if location is not None:
        source_location = SourceLocation(
            file=str(location.get("file", "")),
            line=int(location.get("line", 0)),
        )

    return DefinitionBlock(
        lines=["" if line is None else str(line) for line in lines],
        context=data.get("context", LISTING_CONTEXT),
        style=data.get("style"),
        title=None if data.get("title") is None else str(data["title"]),
        id=data.get("id"),
        attributes=dict(data.get("attributes") or {}),
        source_location=source_location,
    )


def parse_document(data: Any) -> Document:
    """Build a Document from the plain-data form of a block stream.

    Raises:
        ValueError: If the data is not a mapping with a ``blocks`` list.
    """
    if not isinstance(data, dict):
        raise ValueError("Block stream must be a mapping at the top level.")
    blocks = data.get("blocks", [])
    if not isinstance(blocks, list):
        raise ValueError("Block stream 'blocks' must be a list.")
    return Document(
        attributes=dict(data.get("attributes") or {}),
        blocks=[parse_block(b) for b in blocks],
    )


def load_document(path: str | Path) -> Document:
    """Load a block stream from a YAML (or JSON) file.

    The ``docdir`` attribute defaults to the directory holding the file.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the content is not a valid block stream.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Document file not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)

    document = parse_document(data)
    document.attributes.setdefault("docdir", str(path.resolve().parent))
    logger.debug("Loaded %d blocks from %s", len(document.blocks), path)
    return document


def save_document(document: Document, path: Path) -> None:
    """Write a Document, annotations included, as indented JSON."""
    data = asdict(document)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)
    logger.debug("Saved %d blocks to %s", len(document.blocks), path)
