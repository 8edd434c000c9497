"""Tangle engine — recursive expansion of root chunks into output artifacts."""

from __future__ import annotations

import io
import logging
import sys
from pathlib import Path
from typing import TextIO

from .config import LitprogConfig
from .elements import LocationMarker, ReferenceLine, TextLine
from .errors import MalformedChunkElement, RecursiveChunkReference, UndefinedChunkReference
from .registry import ChunkRegistry

logger = logging.getLogger(__name__)

STDOUT_TARGET = "*"


class TangleEngine:
    """Expands every root chunk of a registry into its destination.

    Roots share one failure domain: the first error aborts the run. A file
    whose expansion fails is removed rather than left half-written.
    """

    def __init__(
        self,
        registry: ChunkRegistry,
        config: LitprogConfig | None = None,
        stdout: TextIO | None = None,
    ):
        self.registry = registry
        self.config = config or LitprogConfig()
        self._stdout = stdout

    def destination(self, target: str) -> Path | None:
        """Path a root is written to, or None for standard output."""
        if target == STDOUT_TARGET:
            return None
        return self.config.output_dir / target

    def tangle_all(self) -> list[str]:
        """Tangle every root in definition order; return the destinations."""
        written = [self.tangle_root(target) for target in self.registry.roots()]
        logger.info("Tangled %d root chunks", len(written))
        return written

    def tangle_root(self, target: str) -> str:
        path = self.destination(target)
        if path is None:
            out = self._stdout if self._stdout is not None else sys.stdout
            try:
                self.expand(target, "", frozenset({target}), out, root=True)
            finally:
                out.flush()
            return STDOUT_TARGET

        path.parent.mkdir(parents=True, exist_ok=True)
        f = open(path, "w", encoding="utf-8")
        try:
            with f:
                self.expand(target, "", frozenset({target}), f, root=True)
        except Exception:
            path.unlink(missing_ok=True)
            logger.debug("Removed partial output %s", path)
            raise
        logger.debug("Wrote %s", path)
        return str(path)

    def render(self, target: str) -> str:
        """Expand a root chunk into a string instead of its destination."""
        buffer = io.StringIO()
        self.expand(target, "", frozenset({target}), buffer, root=True)
        return buffer.getvalue()

    def expand(
        self,
        title: str,
        indent: str,
        visited: frozenset[str],
        out: TextIO,
        root: bool = False,
    ) -> None:
        """Write the expansion of ``title`` to ``out``.

        ``visited`` holds the titles on the active expansion path only, so the
        same chunk may be reached through separate branches.
        """
        fname = ""
        lineno = 0
        located = False
        for element in self.registry.elements_of(title, root=root):
            if isinstance(element, LocationMarker):
                fname = element.file
                lineno = element.line
                located = True
                self._write_directive(out, fname, lineno)
            elif isinstance(element, TextLine):
                lineno += 1
                out.write((indent + element.text if element.text else "") + "\n")
            elif isinstance(element, ReferenceLine):
                lineno += 1
                ref = self.registry.resolver.resolve(element.target)
                if ref in visited:
                    raise RecursiveChunkReference(ref, title)
                if not self.registry.exists(ref):
                    raise UndefinedChunkReference(ref)
                self.expand(ref, indent + element.indent, visited | {ref}, out)
                if located:
                    self._write_directive(out, fname, lineno)
            else:
                raise MalformedChunkElement(element)

    def _write_directive(self, out: TextIO, fname: str, lineno: int) -> None:
        template = self.config.line_template
        if template:
            out.write(template.format(line=lineno, file=fname) + "\n")
