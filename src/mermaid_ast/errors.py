from __future__ import annotations

from typing import Any, NoReturn


# ============================================================================
# Recoverable errors
# ============================================================================


class MermaidError(Exception):
    """Base class for every error a caller is expected to handle."""


class UnknownDialectError(MermaidError):
    """The text does not start with any known diagram keyword, or the
    caller named a dialect that does not exist."""

    def __init__(self, text: str, dialect: str | None = None) -> None:
        if dialect is not None:
            message = f"Unknown dialect {dialect!r}"
        else:
            first = text.strip().split("\n", 1)[0][:40]
            message = f"Unable to detect diagram type from {first!r}"
        super().__init__(message)
        self.text = text
        self.dialect = dialect


class ParseError(MermaidError):
    """Malformed input. ``line`` and ``column`` are 1-based."""

    def __init__(self, message: str, line: int = 1, column: int = 1) -> None:
        super().__init__(f"line {line}, column {column}: {message}")
        self.message = message
        self.line = line
        self.column = column


class AsyncDialectError(MermaidError):
    """The dialect's grammar engine needs ``parse_async``."""

    def __init__(self, dialect: str) -> None:
        super().__init__(
            f"'{dialect}' diagrams use an asynchronous grammar engine; call parse_async()"
        )
        self.dialect = dialect


class ValidationError(MermaidError):
    """A built structure references something that was never declared.

    ``identifier`` is the missing name, ``construct`` describes the
    statement that referenced it.
    """

    def __init__(self, message: str, identifier: str, construct: str) -> None:
        super().__init__(message)
        self.identifier = identifier
        self.construct = construct


class FlowchartValidationError(ValidationError):
    pass


class ClassDiagramValidationError(ValidationError):
    pass


class SequenceValidationError(ValidationError):
    pass


class StateDiagramValidationError(ValidationError):
    pass


# ============================================================================
# Programming-contract violations
# ============================================================================


class UnreachableStateError(AssertionError):
    """Raised when exhaustive dispatch falls through. Always a bug."""


def assert_never(value: Any, what: str = "value") -> NoReturn:
    raise UnreachableStateError(f"Unhandled {what}: {value!r}")
