"""
6502 Code Generator
===================

This module is the encoding pass. It walks the token-lines in order with a
running program counter and turns each instruction into an opcode byte
followed by its operand bytes.

Label Resolution
----------------
When the program counter reaches a line that owns labels, those labels get
their address. References to labels are not resolved here: the operand is
emitted as a LabelReference token carrying the number of bytes reserved for
it, and the renderer substitutes the final bytes once every label has an
address. Because the reserved size is decided now, the program counter
stays valid for everything that follows.

Operand Width
-------------
The operand width (one or two bytes) picks between zero-page and absolute
forms. It is resolved in this order:

1. A label is two bytes for JMP/JSR and one byte otherwise (branches).
2. A define is one byte with a ``<`` (low) or ``>`` (high) selector,
   otherwise its declared width.
3. A literal has the width of its own form ($xx vs $xxxx, ...).

Addressing Mode Selection
-------------------------
| Operand      | Mode                                               |
|--------------|----------------------------------------------------|
| (none)       | implied                                            |
| A            | accumulator                                        |
| #v           | immediate                                          |
| (v,X)        | indexed indirect                                   |
| (v),Y        | indirect indexed                                   |
| (v)          | indirect                                           |
| v,X / v,Y    | absolute-X/Y (two bytes) or zero-page-X/Y (one)    |
| v (one byte) | relative, else zero page, else absolute + $00 high |
| v (two byte) | absolute                                           |
"""

import difflib
import logging
from dataclasses import dataclass, field
from typing import Optional, Union

from asm6502.errors import (
    AmbiguousOperandWidth,
    AssemblySyntaxError,
    UnknownAddressingPattern,
    UnknownOpcode,
)
from asm6502.assembler.lexer import ParsedSource, TokenLine
from asm6502.assembler.literals import Width, classify_width, decode_literal
from asm6502.assembler.opcodes import (
    ABSOLUTE_TARGET_INSTRUCTIONS,
    MNEMONICS,
    AddressingMode,
    get_opcode,
    get_valid_modes,
    is_branch_instruction,
    is_valid_instruction,
    supports_mode,
)
from asm6502.assembler.symbols import Define, LabelTable

logger = logging.getLogger(__name__)


# =============================================================================
# Byte Tokens
# =============================================================================

@dataclass(frozen=True)
class LiteralByte:
    """A byte whose value is known at encoding time."""
    value: int

    def __str__(self) -> str:
        return f"{self.value:02X}"


@dataclass(frozen=True)
class LabelReference:
    """
    Deferred reference to a label, substituted by the renderer.

    Attributes:
        name: Referenced label
        size: Bytes reserved for it (1 for relative/zero page, 2 for absolute)
    """
    name: str
    size: int = 1

    def __str__(self) -> str:
        return f"<{self.name}>"


ByteToken = Union[LiteralByte, LabelReference]


def token_size(token: ByteToken) -> int:
    return token.size if isinstance(token, LabelReference) else 1


# =============================================================================
# Encoder Output
# =============================================================================

@dataclass
class EmittedLine:
    """
    Encoded form of one token-line.

    Attributes:
        tokens: Opcode and operand bytes (for origin lines: address low, high)
        address: Program counter at the start of the line
        annotation: Debug listing prefix (ADDR LABEL MNEM OPERAND)
        is_origin: True for location-counter lines
        line_number: Physical source line (1-indexed)
    """
    tokens: list[ByteToken]
    address: int
    annotation: str = ""
    is_origin: bool = False
    line_number: int = 0

    @property
    def size(self) -> int:
        if self.is_origin:
            return 0
        return sum(token_size(t) for t in self.tokens)


@dataclass
class Program:
    """
    Everything the renderer needs.

    Attributes:
        lines: Encoded lines in source order
        labels: Label table with every address resolved
        defines: Constants by name, in definition order
        end_address: Program counter after the last line
    """
    lines: list[EmittedLine] = field(default_factory=list)
    labels: LabelTable = field(default_factory=LabelTable)
    defines: dict[str, Define] = field(default_factory=dict)
    end_address: int = 0


# =============================================================================
# Code Generator
# =============================================================================

class CodeGenerator:
    """
    Encodes collected token-lines into a Program.

    Usage:
        parsed = tokenize_source(source)
        program = CodeGenerator(parsed).generate()
    """

    def __init__(self, parsed: ParsedSource):
        self._parsed = parsed
        self._labels = parsed.labels
        self._defines = parsed.defines
        self._filename = parsed.filename
        self._pc = 0

    def generate(self) -> Program:
        """
        Run the encoding pass.

        Returns:
            Program with every label address resolved

        Raises:
            UnknownOpcode: If a mnemonic is not a 6502 instruction
            UnknownAddressingPattern: If an operand cannot be encoded
            AmbiguousOperandWidth: If an operand width cannot be decided
            MalformedLiteral: If an operand literal cannot be decoded
        """
        self._pc = 0
        program = Program(labels=self._labels, defines=self._defines)

        for index, line in enumerate(self._parsed.lines):
            if line.is_origin:
                program.lines.append(self._generate_origin(line))
                continue
            names = self._resolve_labels(index)
            program.lines.append(self._generate_instruction(line, names))

        self._resolve_labels(self._parsed.end_index)
        program.end_address = self._pc

        logger.debug(
            f"Encoded {len(program.lines)} lines, "
            f"{sum(line.size for line in program.lines)} bytes"
        )
        return program

    # =========================================================================
    # Line Handlers
    # =========================================================================

    def _generate_origin(self, line: TokenLine) -> EmittedLine:
        """Reset the program counter from a location-counter line."""
        origin = line.origin
        self._pc = origin.value
        logger.debug(f"Origin set to ${self._pc:04X} at line {line.line_number}")
        return EmittedLine(
            tokens=[LiteralByte(origin.low), LiteralByte(origin.high)],
            address=self._pc,
            is_origin=True,
            line_number=line.line_number,
        )

    def _resolve_labels(self, line_index: int) -> list[str]:
        names = []
        for slot in self._labels.slots_at_line(line_index):
            names.append(self._labels.resolve(slot, self._pc).name)
        return names

    def _generate_instruction(self, line: TokenLine, label_names: list[str]) -> EmittedLine:
        mnemonic = line.mnemonic
        operand = line.operand

        if not is_valid_instruction(mnemonic):
            raise UnknownOpcode(
                mnemonic,
                location=line.location(self._filename, mnemonic),
                source_line=line.source,
                similar_mnemonics=difflib.get_close_matches(mnemonic, MNEMONICS, n=3),
            )
        if len(line.tokens) > 2:
            raise AssemblySyntaxError(
                f"too many operands for '{mnemonic}'",
                location=line.location(self._filename, line.tokens[2]),
                hint="write the operand without spaces, e.g. ($20),Y",
                source_line=line.source,
            )

        address = self._pc
        annotation = (
            f"{address:04X} {','.join(label_names):<6} {mnemonic:<3} {operand or '':<12} "
        )

        if operand is None:
            tokens = [self._opcode(line, AddressingMode.IMPLIED)]
        elif operand == "A":
            tokens = [self._opcode(line, AddressingMode.ACCUMULATOR)]
        else:
            tokens = self._encode_operand(line, operand)

        emitted = EmittedLine(tokens, address, annotation, line_number=line.line_number)
        self._pc = (self._pc + emitted.size) & 0xFFFF
        return emitted

    # =========================================================================
    # Operand Encoding
    # =========================================================================

    def _encode_operand(self, line: TokenLine, operand: str) -> list[ByteToken]:
        mnemonic = line.mnemonic
        bare = strip_operand(operand)
        width = self._operand_width(mnemonic, bare)

        if width is Width.UNKNOWN:
            raise AmbiguousOperandWidth(
                bare,
                location=line.location(self._filename, bare),
                source_line=line.source,
            )

        operand_bytes = self._operand_bytes(line, bare, width, mnemonic)
        mode = self._select_mode(line, operand, width)
        opcode = self._opcode(line, mode)

        reserved = sum(token_size(t) for t in operand_bytes)
        if reserved < mode.operand_size:
            # One-byte value where only a two-byte form exists
            operand_bytes.append(LiteralByte(0x00))
        elif reserved > mode.operand_size:
            raise UnknownAddressingPattern(
                mnemonic,
                f"{mode} operand '{bare}' does not fit in one byte",
                location=line.location(self._filename, bare),
                source_line=line.source,
                hint="use '<' or '>' to select the low or high byte of a constant",
            )

        return [opcode, *operand_bytes]

    def _operand_width(self, mnemonic: str, bare: str) -> Width:
        if bare in self._labels:
            if mnemonic in ABSOLUTE_TARGET_INSTRUCTIONS:
                return Width.TWO_BYTE
            return Width.ONE_BYTE

        name = bare.lstrip("<>")
        if name in self._defines:
            if bare.startswith(("<", ">")):
                return Width.ONE_BYTE
            return self._defines[name].width

        return classify_width(bare)

    def _operand_bytes(
        self, line: TokenLine, bare: str, width: Width, mnemonic: str
    ) -> list[ByteToken]:
        """Decode the bare operand into byte tokens, low byte first."""
        if bare in self._labels:
            return [LabelReference(bare, 2 if width is Width.TWO_BYTE else 1)]

        name = bare.lstrip("<>")
        if name in self._defines:
            value = self._defines[name].value
            if bare.startswith("<"):
                return [LiteralByte(value.low)]
            if bare.startswith(">"):
                return [LiteralByte(value.high)]
        else:
            value = decode_literal(
                bare,
                location=line.location(self._filename, bare),
                source_line=line.source,
            )

        if width is Width.ONE_BYTE:
            return [LiteralByte(value.low)]
        return [LiteralByte(value.low), LiteralByte(value.high)]

    def _select_mode(self, line: TokenLine, operand: str, width: Width) -> AddressingMode:
        mnemonic = line.mnemonic

        if operand.startswith("#"):
            return AddressingMode.IMMEDIATE

        if operand.startswith("("):
            if operand.endswith(",X)"):
                return AddressingMode.INDEXED_INDIRECT
            if operand.endswith("),Y"):
                return AddressingMode.INDIRECT_INDEXED
            if operand.endswith(")"):
                return AddressingMode.INDIRECT
            raise UnknownAddressingPattern(
                mnemonic,
                f"operand '{operand}' starts with '(' but does not end",
                location=line.location(self._filename, operand),
                source_line=line.source,
                hint="indirect operands are written (addr), (addr,X) or (addr),Y",
            )

        if operand.endswith(",X"):
            if width is Width.TWO_BYTE:
                return AddressingMode.ABSOLUTE_X
            return AddressingMode.ZERO_PAGE_X

        if operand.endswith(",Y"):
            if width is Width.TWO_BYTE:
                return AddressingMode.ABSOLUTE_Y
            return AddressingMode.ZERO_PAGE_Y

        if width is Width.TWO_BYTE:
            return AddressingMode.ABSOLUTE

        if is_branch_instruction(mnemonic):
            return AddressingMode.RELATIVE
        if supports_mode(mnemonic, AddressingMode.ZERO_PAGE):
            return AddressingMode.ZERO_PAGE
        return AddressingMode.ABSOLUTE

    def _opcode(self, line: TokenLine, mode: AddressingMode) -> LiteralByte:
        opcode = get_opcode(line.mnemonic, mode)
        if opcode is None:
            raise UnknownAddressingPattern(
                line.mnemonic,
                f"does not support {mode} addressing",
                location=line.location(self._filename, line.operand or line.mnemonic),
                source_line=line.source,
                valid_modes=[str(m) for m in get_valid_modes(line.mnemonic)],
            )
        return LiteralByte(opcode)


def strip_operand(operand: str) -> str:
    """
    Remove indexing and indirection decorations from an operand.

    "($20),Y" -> "$20", "($20,X)" -> "$20", "#<ADDR" -> "<ADDR",
    "TABLE,X" -> "TABLE".
    """
    bare = operand
    for suffix in (",X", ",Y", ")", ",X"):
        bare = bare.removesuffix(suffix)
    for prefix in ("(", "#"):
        bare = bare.removeprefix(prefix)
    return bare


def generate(parsed: ParsedSource) -> Program:
    """Convenience function to run the encoding pass."""
    return CodeGenerator(parsed).generate()
