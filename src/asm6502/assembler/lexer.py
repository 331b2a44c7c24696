"""
6502 Assembly Tokenizer and Symbol Collector
============================================

This module makes the first pass over the source: it strips comments,
splits every line into whitespace-separated tokens and classifies it.

Line Classification
-------------------
| Line                | Result                                         |
|---------------------|------------------------------------------------|
| ``NAME = $10``      | Define (constant), no token-line               |
| ``* = $0600``       | Origin token-line ``["*"]`` with the address   |
| ``ORG $0600``       | Same as ``* = $0600``                          |
| ``LOOP:``           | Standalone label, bound to the next token-line |
| ``LOOP: DEX``       | Label bound to this token-line                 |
| ``LDA #$01``        | Instruction token-line ``["LDA", "#$01"]``     |
| blank / comment     | Skipped, consumes no index                     |

A lone token is a standalone label only when it ends in ``:``; any other
lone token is an instruction (``CLX`` stays a token-line so the encoder
reports it as an unknown opcode).

Several standalone labels in a row all bind to the same following line.
Labels left pending at the end of the source bind to the end-of-program
index, so they resolve to the address after the last emitted byte.

Mnemonics are not validated here; an unknown mnemonic is reported by the
encoder.

Example
-------
>>> from asm6502.assembler.lexer import tokenize_source
>>> parsed = tokenize_source("START: LDA #$01\\n       JMP START")
>>> [line.tokens for line in parsed.lines]
[['LDA', '#$01'], ['JMP', 'START']]
>>> parsed.labels.get("START").line_index
0
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

from asm6502.errors import AssemblySyntaxError, DuplicateSymbolError, SourceLocation
from asm6502.assembler.literals import ByteValue, classify_width, decode_literal
from asm6502.assembler.opcodes import is_valid_instruction
from asm6502.assembler.symbols import Define, LabelTable

logger = logging.getLogger(__name__)

# Reserved first token of a location-counter token-line
ORIGIN_MARKER = "*"

COMMENT_CHAR = ";"


# =============================================================================
# Token-Line Data Class
# =============================================================================

@dataclass
class TokenLine:
    """
    One statement: a mnemonic plus at most one operand, or an origin marker.

    Attributes:
        tokens: Token text; tokens[0] is the mnemonic or ORIGIN_MARKER
        line_number: Physical source line (1-indexed)
        source: Source text of the line, comment included
        origin: Decoded address for origin lines
    """
    tokens: list[str]
    line_number: int
    source: str = ""
    origin: Optional[ByteValue] = None

    @property
    def is_origin(self) -> bool:
        return bool(self.tokens) and self.tokens[0] == ORIGIN_MARKER

    @property
    def mnemonic(self) -> str:
        return self.tokens[0]

    @property
    def operand(self) -> Optional[str]:
        return self.tokens[1] if len(self.tokens) > 1 else None

    def location(self, filename: str, token: Optional[str] = None) -> SourceLocation:
        """SourceLocation of a token on this line (column 1 if not found)."""
        column = 1
        if token:
            index = self.source.find(token)
            if index >= 0:
                column = index + 1
        return SourceLocation(filename, self.line_number, column)


@dataclass
class ParsedSource:
    """
    Result of the collection pass.

    Attributes:
        lines: Token-lines in source order; a line's index is its position
        labels: Labels bound to token-line indices, addresses unset
        defines: Constants by name, in definition order
        filename: Source name for error reporting
    """
    lines: list[TokenLine] = field(default_factory=list)
    labels: LabelTable = field(default_factory=LabelTable)
    defines: dict[str, Define] = field(default_factory=dict)
    filename: str = "<input>"

    @property
    def end_index(self) -> int:
        """Index one past the last token-line."""
        return len(self.lines)


# =============================================================================
# Lexer Implementation
# =============================================================================

class Lexer:
    """
    Tokenizes 6502 assembly source and collects its symbols.

    Usage:
        lexer = Lexer(source_text, filename)
        parsed = lexer.tokenize()

    The source is expected to be uppercase already; case normalization is
    the caller's job.
    """

    def __init__(self, source: str, filename: str = "<input>"):
        self.source = source
        self.filename = filename
        self._parsed = ParsedSource(filename=filename)
        self._pending_labels: list[tuple[str, SourceLocation, str]] = []

    def tokenize(self) -> ParsedSource:
        """
        Run the collection pass over the whole source.

        Returns:
            ParsedSource with token-lines, labels and defines

        Raises:
            MalformedLiteral: If a define or origin value cannot be decoded
            AssemblySyntaxError: If a statement is malformed
            DuplicateSymbolError: If a label or define is bound twice
        """
        for line_number, raw in enumerate(self.source.splitlines(), start=1):
            self._scan_line(raw, line_number)

        # Trailing labels mark the end of the program
        self._bind_pending_labels(self._parsed.end_index)

        logger.debug(
            f"Collected {len(self._parsed.lines)} lines, "
            f"{len(self._parsed.labels)} labels, "
            f"{len(self._parsed.defines)} defines"
        )
        return self._parsed

    def _scan_line(self, raw: str, line_number: int) -> None:
        code = raw.split(COMMENT_CHAR, 1)[0]
        tokens = code.split()
        if not tokens:
            return

        if any("=" in token for token in tokens):
            self._scan_assignment(code, raw, line_number)
        elif tokens[0] == "ORG":
            if len(tokens) != 2:
                raise AssemblySyntaxError(
                    "ORG expects exactly one address",
                    location=SourceLocation(self.filename, line_number, 1),
                    source_line=raw,
                )
            self._add_origin(tokens[1], raw, line_number)
        elif len(tokens) == 1 and tokens[0].endswith(":"):
            location = self._location(raw, line_number, tokens[0])
            self._pending_labels.append((tokens[0].rstrip(":"), location, raw))
        else:
            self._scan_instruction(tokens, raw, line_number)

    def _scan_assignment(self, code: str, raw: str, line_number: int) -> None:
        """Handle ``NAME = literal`` and ``* = literal`` lines."""
        left, right = (part.strip() for part in code.split("=", 1))

        if "*" in left:
            self._add_origin(right, raw, line_number)
            return

        location = self._location(raw, line_number, left)
        if not left:
            raise AssemblySyntaxError(
                "constant definition without a name",
                location=location,
                source_line=raw,
            )
        if left in self._parsed.defines:
            raise DuplicateSymbolError(
                left,
                location=location,
                original_location=self._parsed.defines[left].location,
                source_line=raw,
            )

        value = decode_literal(
            right,
            location=self._location(raw, line_number, right),
            source_line=raw,
        )
        self._parsed.defines[left] = Define(left, classify_width(right), value, location)

    def _add_origin(self, literal: str, raw: str, line_number: int) -> None:
        value = decode_literal(
            literal,
            location=self._location(raw, line_number, literal),
            source_line=raw,
        )
        # Two-byte form, whatever width the literal was written in
        origin = ByteValue.from_int(value.value)
        self._parsed.lines.append(
            TokenLine([ORIGIN_MARKER], line_number, raw, origin=origin)
        )

    def _scan_instruction(self, tokens: list[str], raw: str, line_number: int) -> None:
        line_index = self._parsed.end_index
        self._bind_pending_labels(line_index)

        first = tokens[0]
        second = tokens[1] if len(tokens) > 1 else ""
        if not is_valid_instruction(first) and (
            first.endswith(":") or is_valid_instruction(second)
        ):
            self._parsed.labels.declare(
                first.rstrip(":"),
                line_index,
                location=self._location(raw, line_number, first),
                source_line=raw,
            )
            tokens = tokens[1:]

        self._parsed.lines.append(TokenLine(list(tokens), line_number, raw))

    def _bind_pending_labels(self, line_index: int) -> None:
        for name, location, raw in self._pending_labels:
            self._parsed.labels.declare(name, line_index, location, source_line=raw)
        self._pending_labels.clear()

    def _location(self, raw: str, line_number: int, token: str) -> SourceLocation:
        index = raw.find(token) if token else -1
        return SourceLocation(self.filename, line_number, index + 1 if index >= 0 else 1)


def tokenize_source(source: str, filename: str = "<input>") -> ParsedSource:
    """
    Convenience function to run the collection pass.

    Args:
        source: Uppercase assembly source
        filename: Name used in error messages

    Returns:
        ParsedSource
    """
    return Lexer(source, filename).tokenize()
