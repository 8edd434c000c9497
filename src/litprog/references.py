"""Line classification — plain text vs. chunk reference."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Union

from .titles import TitleResolver

CHUNK_REF_RX = re.compile(r"^(\s*)<<(.*)>>\s*$")
CHUNK_DEF_RX = re.compile(r"^<<(.*)>>=\s*$")


@dataclass(frozen=True)
class PlainText:
    """A line that is not a chunk reference."""
    text: str


@dataclass(frozen=True)
class Reference:
    """A line consisting solely of a chunk reference."""
    title: str  # resolved full title
    target: str  # as written, possibly abbreviated
    indent: str


def classify(line: str, resolver: TitleResolver) -> Union[PlainText, Reference]:
    """Classify a single line of chunk content.

    A line is a reference only if, trailing whitespace aside, it is leading
    whitespace followed by ``<<...>>`` and nothing else. The leading
    whitespace is captured verbatim as indentation for the expansion.

    Raises:
        UnknownChunkTitle: If the reference is abbreviated and matches nothing.
        AmbiguousChunkTitle: If the abbreviation matches several titles.
    """
    match = CHUNK_REF_RX.match(line)
    if not match:
        return PlainText(line)
    indent, target = match.group(1), match.group(2)
    return Reference(title=resolver.resolve(target), target=target, indent=indent)


def match_chunk_definition(line: str) -> str | None:
    """Return the raw title of a ``<<Title>>=`` section marker, else None."""
    match = CHUNK_DEF_RX.match(line)
    return match.group(1) if match else None
