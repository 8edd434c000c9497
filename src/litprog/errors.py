"""Error kinds raised while collecting and tangling chunks.

Every error is fatal: nothing in the engine recovers locally, the caller
(host or CLI) decides what to do with it.
"""

from __future__ import annotations


class LitprogError(Exception):
    """Base class for all literate-programming errors."""


class DuplicateRootChunk(LitprogError, ValueError):
    """Two definitions target the same output."""

    def __init__(self, target: str):
        self.target = target
        super().__init__(f"Duplicate root chunk for {target}")


class UnknownChunkTitle(LitprogError, ValueError):
    """An abbreviated title matches no known chunk."""

    def __init__(self, abbreviation: str):
        self.abbreviation = abbreviation
        super().__init__(f"No chunk {abbreviation}")


class AmbiguousChunkTitle(LitprogError, ValueError):
    """An abbreviated title matches more than one known chunk."""

    def __init__(self, abbreviation: str, candidates: list[str]):
        self.abbreviation = abbreviation
        self.candidates = sorted(candidates)
        super().__init__(
            f"Chunk title {abbreviation} is not unique "
            f"(candidates: {', '.join(self.candidates)})"
        )


class UndefinedChunkReference(LitprogError, ValueError):
    """A reachable reference names a chunk that was never defined."""

    def __init__(self, title: str):
        self.title = title
        super().__init__(f"Found reference to undefined chunk {title}")


class RecursiveChunkReference(LitprogError, RuntimeError):
    """A chunk references itself along the active expansion path."""

    def __init__(self, title: str, referrer: str):
        self.title = title
        self.referrer = referrer
        super().__init__(f"Recursive reference to {title} from {referrer}")


class MalformedChunkElement(LitprogError, TypeError):
    """A chunk holds an element of unrecognized kind."""

    def __init__(self, element: object):
        self.element = element
        super().__init__(f"Unknown chunk element {element!r}")
