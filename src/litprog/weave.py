"""Weave annotation — prev/next navigation between blocks defining the same chunk."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .registry import ChunkRegistry

logger = logging.getLogger(__name__)

PREV_LINK_TEMPLATE = " [.prevlink]#<<{id},prev>>#"
NEXT_LINK_TEMPLATE = " [.nextlink]#<<{id},next>>#"

_INVALID_ID_CHARS_RX = re.compile(r"[^a-z0-9]+")


@dataclass
class WeaveLink:
    """Navigation attached to one contributing block of a chunk."""
    title: str
    index: int  # 1-based position among the title's blocks
    block_id: str
    prev_id: str | None
    next_id: str | None


def generate_id(title: str, index: int) -> str:
    """Derive an anchor id for block ``index`` of chunk ``title``.

    Format: ``_chunk_{title}_block_{index}``, lower-cased, with every run of
    characters outside ``[a-z0-9]`` collapsed into a single ``_``.
    """
    raw = f"_chunk_{title}_block_{index}".lower()
    return "_" + _INVALID_ID_CHARS_RX.sub("_", raw).strip("_")


class WeaveAnnotator:
    """Links the blocks of every multi-block chunk in document order.

    Mutates each block's title in place, appending AsciiDoc link markup for
    the host to render.
    """

    def __init__(self, registry: ChunkRegistry):
        self.registry = registry

    def annotate(self) -> list[WeaveLink]:
        links: list[WeaveLink] = []
        for title, blocks in self.registry.chunk_blocks.items():
            if len(blocks) < 2:
                continue
            ids = [block.id for block in blocks]
            for i, block in enumerate(blocks):
                prev_id = ids[i - 1] if i > 0 else None
                next_id = ids[i + 1] if i < len(blocks) - 1 else None
                markup = ""
                if prev_id is not None:
                    markup += PREV_LINK_TEMPLATE.format(id=prev_id)
                if next_id is not None:
                    markup += NEXT_LINK_TEMPLATE.format(id=next_id)
                block.title = (block.title or "") + markup
                links.append(
                    WeaveLink(
                        title=title,
                        index=i + 1,
                        block_id=ids[i],
                        prev_id=prev_id,
                        next_id=next_id,
                    )
                )
        logger.info("Wove %d navigation links", len(links))
        return links
