from __future__ import annotations

import asyncio
import logging
import threading

from parsimonious.exceptions import IncompleteParseError
from parsimonious.exceptions import ParseError as GrammarParseError
from parsimonious.grammar import Grammar
from parsimonious.nodes import NodeVisitor

from .errors import AsyncDialectError, ParseError

logger = logging.getLogger(__name__)


class GrammarEngine:
    """A parsimonious grammar compiled once, off the event loop.

    The engine holds only the compiled grammar. Each parse gets its own
    visitor, so no accumulator state outlives a call. Parses against one
    engine are serialized.
    """

    def __init__(self, dialect: str, source: str) -> None:
        self.dialect = dialect
        self._source = source
        self._grammar: Grammar | None = None
        self._compile_lock = threading.Lock()
        self._parse_lock = threading.Lock()

    @property
    def initialized(self) -> bool:
        return self._grammar is not None

    async def initialize(self) -> None:
        if self._grammar is None:
            await asyncio.to_thread(self._compile)

    def _compile(self) -> None:
        with self._compile_lock:
            if self._grammar is None:
                logger.debug("Compiling %s grammar", self.dialect)
                self._grammar = Grammar(self._source)

    def run(self, text: str, visitor: NodeVisitor) -> None:
        """Parse ``text`` and feed the tree to ``visitor``."""
        if self._grammar is None:
            raise AsyncDialectError(self.dialect)
        with self._parse_lock:
            try:
                tree = self._grammar.parse(text)
            except IncompleteParseError as exc:
                raise ParseError(
                    f"Unexpected {_snippet(exc)!r}", exc.line(), exc.column()
                ) from exc
            except GrammarParseError as exc:
                raise ParseError(
                    f"Invalid {self.dialect} statement {_snippet(exc)!r}",
                    exc.line(),
                    exc.column(),
                ) from exc
        visitor.visit(tree)


def _snippet(exc: GrammarParseError) -> str:
    return exc.text[exc.pos :].split("\n", 1)[0][:40]
