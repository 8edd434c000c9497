"""Chunk elements — the closed set of things a chunk is made of."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class LocationMarker:
    """Source position of the next content line. Emits nothing by itself."""
    file: str
    line: int


@dataclass(frozen=True)
class TextLine:
    """A literal line of content."""
    text: str


@dataclass(frozen=True)
class ReferenceLine:
    """A line holding only ``<<target>>``.

    ``target`` is kept as written (possibly abbreviated) and resolved again
    at expansion time; ``indent`` is the verbatim leading whitespace.
    """
    target: str
    indent: str = ""


ChunkElement = Union[LocationMarker, TextLine, ReferenceLine]
