"""
6502 Assembler Error Hierarchy
==============================

This module defines the exception hierarchy for the assembler.
All exceptions inherit from Asm6502Error, allowing callers to catch all
assembler-related errors with a single except clause if desired.

Exception Hierarchy
-------------------
Asm6502Error (base)
├── UnreadableInputFile - source file cannot be read
└── AssemblerError (source-related)
    ├── AssemblySyntaxError - malformed statement
    ├── MalformedLiteral - numeric token matches no literal grammar
    ├── UnknownOpcode - mnemonic is not a 6502 instruction
    ├── UnknownAddressingPattern - operand/addressing mode not encodable
    ├── AmbiguousOperandWidth - operand width cannot be decided
    └── DuplicateSymbolError - label or constant defined twice

Assembly is all-or-nothing: the first error raised by any pass aborts the
whole run and no output is produced.

Error messages follow this format:
    filename:line:column: error: description
        source_line_text
        ^ (pointer to error location)
    hint: suggestion for fixing (when available)
"""

from dataclasses import dataclass
from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class Asm6502Error(Exception):
    """
    Base exception for all assembler errors.

    Callers can catch every failure of a run with a single clause:

        try:
            assembler.assemble_file("program.asm")
        except Asm6502Error as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    Represents a location in source code for error reporting.

    Attributes:
        filename: Name of the source file (or "<input>" for string input)
        line: Line number (1-indexed)
        column: Column number (1-indexed)
    """
    filename: str
    line: int
    column: int

    def __str__(self) -> str:
        """Format as 'filename:line:column' for error messages."""
        return f"{self.filename}:{self.line}:{self.column}"


# =============================================================================
# File Exceptions
# =============================================================================

class UnreadableInputFile(Asm6502Error):
    """
    The assembly source file could not be read.

    Raised before any pass runs, so no output path is ever touched.
    """

    def __init__(self, filename: str, reason: str):
        self.filename = filename
        self.reason = reason
        super().__init__(f"unable to read file '{filename}': {reason}")


# =============================================================================
# Assembler Exceptions
# =============================================================================

class AssemblerError(Asm6502Error):
    """
    Base exception for errors tied to the assembly source.

    Attributes:
        message: The error description
        location: Where in the source the error occurred (optional)
        hint: A suggestion for fixing the error (optional)
        source_line: The actual source text at the error location (optional)
    """

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.message = message
        self.location = location
        self.hint = hint
        self.source_line = source_line
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """
        Format the error message with location, source context, and hint.

        Example output:
            loop.asm:3:5: error: unknown opcode 'LDB'
                LDB #$01
                ^
            hint: did you mean 'LDA', 'LDX', 'LDY'?
        """
        parts = []

        if self.location:
            parts.append(f"{self.location}: error: {self.message}")
        else:
            parts.append(f"error: {self.message}")

        # Source context with caret pointer
        if self.source_line is not None and self.location is not None:
            parts.append(f"    {self.source_line}")
            if self.location.column > 0:
                padding = " " * (4 + self.location.column - 1)
                parts.append(f"{padding}^")

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)


class AssemblySyntaxError(AssemblerError):
    """
    Statement that cannot be split into a mnemonic and a single operand.

    Examples:
        - Constant definition with an empty name ("= $10")
        - More than one operand token ("LDA $10 $20")
        - ORG without an address
    """
    pass


class MalformedLiteral(AssemblerError):
    """
    Numeric token that matches no recognized literal grammar.

    Examples:
        - Non-hex digit after '$' ("$G0")
        - Non-binary digit after '%' ("%00102000")
        - Octal value too large for its width ("0777")
    """

    def __init__(
        self,
        literal: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.literal = literal
        super().__init__(
            f"malformed literal '{literal}'",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class UnknownOpcode(AssemblerError):
    """
    Mnemonic that is not one of the 56 recognized 6502 instructions.

    Similar mnemonics are suggested in the hint when available.
    """

    def __init__(
        self,
        mnemonic: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
        similar_mnemonics: Optional[list[str]] = None,
    ):
        self.mnemonic = mnemonic
        self.similar_mnemonics = similar_mnemonics or []

        hint = None
        if self.similar_mnemonics:
            suggestions = ", ".join(f"'{m}'" for m in self.similar_mnemonics[:3])
            hint = f"did you mean {suggestions}?"

        super().__init__(
            f"unknown opcode '{mnemonic}'",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class UnknownAddressingPattern(AssemblerError):
    """
    Operand that cannot be encoded for this instruction.

    Raised when the resolved (mnemonic, addressing mode) pair is absent
    from the opcode table, or when the operand syntax itself is broken.

    Example:
        STA #$41     ; STA has no immediate form
        LDA ($20     ; unterminated indirect
    """

    def __init__(
        self,
        mnemonic: str,
        reason: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
        valid_modes: Optional[list[str]] = None,
        hint: Optional[str] = None,
    ):
        self.mnemonic = mnemonic
        self.reason = reason
        self.valid_modes = valid_modes or []

        if hint is None and self.valid_modes:
            hint = f"{mnemonic} supports: {', '.join(self.valid_modes)}"

        super().__init__(
            f"'{mnemonic}' {reason}",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class AmbiguousOperandWidth(AssemblerError):
    """
    Operand whose width cannot be classified as one or two bytes.

    Usually an undefined name or a literal with the wrong prefix or length,
    e.g. "$123" (three hex digits) or "COUNT" with no matching definition.
    """

    def __init__(
        self,
        operand: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.operand = operand
        super().__init__(
            f"cannot determine width of operand '{operand}'",
            location=location,
            hint="perhaps you meant to define a value or are using the wrong prefix",
            source_line=source_line,
        )


class DuplicateSymbolError(AssemblerError):
    """
    Label or constant defined more than once in the same source.

    Includes the original definition location when available.
    """

    def __init__(
        self,
        symbol: str,
        location: Optional[SourceLocation] = None,
        original_location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.symbol = symbol
        self.original_location = original_location

        hint = None
        if original_location:
            hint = f"'{symbol}' was first defined at {original_location}"

        super().__init__(
            f"duplicate symbol '{symbol}'",
            location=location,
            hint=hint,
            source_line=source_line,
        )
