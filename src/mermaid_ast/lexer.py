from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Mapping

from .errors import ParseError

# ============================================================================
# Source lines
# ============================================================================


@dataclass(frozen=True, slots=True)
class SourceLine:
    """One meaningful line of input.

    ``number`` is the 1-based line number in the caller's text and
    ``column`` the 1-based column of the first non-blank character.
    ``indent`` keeps the raw leading whitespace for indentation-based
    dialects.
    """

    number: int
    column: int
    text: str
    indent: str = ""

    def error(self, message: str, offset: int = 0) -> ParseError:
        return ParseError(message, self.number, self.column + offset)


def source_lines(text: str, strip_semicolon: bool = False) -> list[SourceLine]:
    """Split text into stripped lines, dropping blanks and ``%%`` comments."""
    lines: list[SourceLine] = []
    for number, raw in enumerate(text.split("\n"), start=1):
        raw = raw.rstrip("\r")
        stripped = raw.strip()
        if not stripped or stripped.startswith("%%"):
            continue
        if strip_semicolon and stripped.endswith(";"):
            stripped = stripped[:-1].rstrip()
            if not stripped:
                continue
        indent = raw[: len(raw) - len(raw.lstrip())]
        lines.append(SourceLine(number, len(indent) + 1, stripped, indent))
    return lines


def split_header(
    lines: list[SourceLine], pattern: re.Pattern[str]
) -> tuple[re.Match[str] | None, list[SourceLine]]:
    """Separate the dialect header from the body.

    Text without the header keyword is treated as a bare body, as if the
    keyword had been prepended.
    """
    if lines:
        match = pattern.match(lines[0].text)
        if match:
            return match, lines[1:]
    return None, lines


# ============================================================================
# Numbers
# ============================================================================

NUMBER = r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?"

_NUMBER_RE = re.compile(rf"^{NUMBER}$")


def parse_number(token: str, line: SourceLine, offset: int = 0) -> float:
    token = token.strip()
    if not _NUMBER_RE.match(token):
        raise line.error(f"Expected a number, got {token!r}", offset)
    return float(token)


def format_number(value: float) -> str:
    """``100.0`` prints as ``100``; other values keep their full precision."""
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return repr(value)


# ============================================================================
# Quoted text
# ============================================================================

QUOTE_ENTITY = "#quot;"


def quote(text: str) -> str:
    return '"' + text.replace('"', QUOTE_ENTITY) + '"'


def unquote(token: str) -> str:
    """Strip one pair of surrounding double quotes and decode ``#quot;``."""
    if len(token) >= 2 and token[0] == '"' and token[-1] == '"':
        return token[1:-1].replace(QUOTE_ENTITY, '"')
    return token


def is_quoted(token: str) -> bool:
    return len(token) >= 2 and token[0] == '"' and token[-1] == '"'


# ============================================================================
# Delimited records
# ============================================================================


def split_delimited(
    text: str, line: SourceLine, offset: int = 0, delimiter: str = ","
) -> list[str]:
    """Split one delimited record into fields.

    A field wrapped in double quotes may contain the delimiter, and a
    doubled quote inside it stands for one literal quote. Unquoted fields
    are trimmed.
    """
    fields: list[str] = []
    i = 0
    n = len(text)
    while True:
        while i < n and text[i] in " \t":
            i += 1
        if i < n and text[i] == '"':
            i += 1
            chars: list[str] = []
            while True:
                if i >= n:
                    raise line.error("Unterminated quoted field", offset + i)
                ch = text[i]
                if ch == '"':
                    if i + 1 < n and text[i + 1] == '"':
                        chars.append('"')
                        i += 2
                        continue
                    i += 1
                    break
                chars.append(ch)
                i += 1
            fields.append("".join(chars))
            while i < n and text[i] in " \t":
                i += 1
            if i < n and text[i] != delimiter:
                raise line.error(
                    f"Unexpected {text[i]!r} after quoted field", offset + i
                )
        else:
            end = text.find(delimiter, i)
            if end == -1:
                end = n
            fields.append(text[i:end].strip())
            i = end
        if i >= n:
            return fields
        i += 1


def format_delimited_field(value: str, delimiter: str = ",") -> str:
    if (
        delimiter in value
        or value.startswith("%%")
        or '"' in value
        or "\n" in value
        or value != value.strip()
    ):
        return '"' + value.replace('"', '""') + '"'
    return value


# ============================================================================
# Style properties
# ============================================================================


def parse_style_props(props_str: str) -> dict[str, str]:
    """Parse ``fill:#f00,stroke:#333`` into an ordered dict."""
    style: dict[str, str] = {}
    for pair in props_str.split(","):
        colon_idx = pair.find(":")
        if colon_idx > 0:
            key = pair[:colon_idx].strip()
            val = pair[colon_idx + 1 :].strip()
            if key and val:
                style[key] = val
    return style


def format_style_props(style: Mapping[str, str]) -> str:
    return ",".join(f"{key}:{val}" for key, val in style.items())


# ============================================================================
# Accessibility metadata
# ============================================================================

_ACC_TITLE_RE = re.compile(r"^accTitle\s*:\s*(.*)$")
_ACC_DESCR_RE = re.compile(r"^accDescr\s*:\s*(.*)$")


def match_accessibility(text: str) -> tuple[str, str] | None:
    """Return ``("title", value)`` or ``("description", value)`` for acc lines."""
    match = _ACC_TITLE_RE.match(text)
    if match:
        return "title", match.group(1).strip()
    match = _ACC_DESCR_RE.match(text)
    if match:
        return "description", match.group(1).strip()
    return None


def accessibility_lines(
    indent: str, acc_title: str | None, acc_description: str | None
) -> list[str]:
    lines: list[str] = []
    if acc_title:
        lines.append(f"{indent}accTitle: {acc_title}")
    if acc_description:
        lines.append(f"{indent}accDescr: {acc_description}")
    return lines
