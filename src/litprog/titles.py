"""Abbreviated chunk title resolution."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from .errors import AmbiguousChunkTitle, UnknownChunkTitle

logger = logging.getLogger(__name__)

ELLIPSIS = "..."


class TitleResolver:
    """Resolves ``Prefix...`` to the single known title starting with ``Prefix``.

    The resolver holds a live view of the chunk-name set, so an abbreviation
    only resolves against the titles known at the moment of lookup.
    """

    def __init__(self, names: Iterable[str]):
        self._names = names

    def resolve(self, raw: str) -> str:
        """Return the full title for ``raw``.

        Raises:
            UnknownChunkTitle: If no known title starts with the prefix.
            AmbiguousChunkTitle: If several known titles start with the prefix.
        """
        if not raw.endswith(ELLIPSIS):
            return raw
        prefix = raw[: -len(ELLIPSIS)]
        hits = [name for name in self._names if name.startswith(prefix)]
        if not hits:
            raise UnknownChunkTitle(raw)
        if len(hits) > 1:
            raise AmbiguousChunkTitle(raw, hits)
        logger.debug("Resolved %r to %r", raw, hits[0])
        return hits[0]
