"""
6502 Output Renderer
====================

This module is the final pass. It substitutes every LabelReference with
bytes computed from the resolved label table and serializes the result.

Label Substitution
------------------
The renderer keeps its own byte counter (``byte_pc``), starting at 0 and
reset to the origin address at each location-counter line.

- On a line whose opcode is JMP absolute ($4C), JMP indirect ($6C) or
  JSR ($20), a reference renders as two bytes, low first, computed as
  ``address mod 255`` and ``address / 255``.
- Anywhere else it renders as a one-byte branch displacement from the
  position of the operand byte; see branch_displacement().

Output Formats
--------------
hex:     ``A9 01 85 00 4C 00 00``; an origin line renders ``* =``
debug:   defines first, then one annotated line per statement:
         ``0000 START  LDA #$01         A9 01``
binary:  10-byte header ``6502ROM...`` followed by the raw bytes
"""

import logging
from dataclasses import dataclass
from typing import Optional

from asm6502.config import ROM_HEADER, OutputFormat
from asm6502.assembler.codegen import EmittedLine, LabelReference, LiteralByte, Program
from asm6502.assembler.opcodes import JUMP_OPCODES

logger = logging.getLogger(__name__)

ORIGIN_TEXT = "* ="


# =============================================================================
# Label Arithmetic
# =============================================================================

def _signed8(value: int) -> int:
    """Reinterpret the low 8 bits of value as a signed byte."""
    return ((value & 0xFF) ^ 0x80) - 0x80


def branch_displacement(target: int, origin: int) -> int:
    """
    Compute the relative branch byte for a label reference.

    Args:
        target: Resolved label address
        origin: Address of the displacement byte itself

    Returns:
        The displacement as an unsigned byte (two's complement)
    """
    if target < origin:
        displacement = _signed8(target) - (_signed8(origin) - 1) - 2
    elif target == origin:
        displacement = 0
    else:
        displacement = _signed8(target) - _signed8(origin) - 1
    return displacement & 0xFF


def split_absolute(address: int) -> tuple[int, int]:
    """
    Split a label address into (low, high) bytes for JMP/JSR.

    Uses mod/div 255 rather than 256; the high byte is masked to 8 bits.
    """
    return address % 0xFF, (address // 0xFF) & 0xFF


# =============================================================================
# Rendered Output
# =============================================================================

@dataclass
class RenderedLine:
    """
    One emitted line with every byte resolved.

    Attributes:
        values: Final byte values (empty for origin lines)
        annotation: Debug prefix copied from the encoder
        is_origin: True for location-counter lines
    """
    values: list[int]
    annotation: str = ""
    is_origin: bool = False

    def text(self) -> str:
        if self.is_origin:
            return ORIGIN_TEXT
        return " ".join(f"{value:02X}" for value in self.values)


class Renderer:
    """
    Resolves label references and serializes a Program.

    Usage:
        renderer = Renderer(program)
        text = renderer.render(OutputFormat.HEX)
    """

    def __init__(self, program: Program, rom_header: bytes = ROM_HEADER):
        self._program = program
        self._rom_header = rom_header
        self._lines: Optional[list[RenderedLine]] = None

    def render(self, output_format: OutputFormat) -> str | bytes:
        if output_format is OutputFormat.BINARY:
            return self.to_binary()
        if output_format is OutputFormat.DEBUG:
            return self.to_debug()
        return self.to_hex()

    def lines(self) -> list[RenderedLine]:
        """Resolve every line once; later calls reuse the result."""
        if self._lines is None:
            self._lines = self._resolve()
        return self._lines

    def to_hex(self) -> str:
        """Space-separated uppercase byte pairs."""
        return " ".join(line.text() for line in self.lines() if line.text())

    def to_debug(self) -> str:
        """Annotated listing: defines, then one line per statement."""
        parts = []
        for name, define in self._program.defines.items():
            parts.append(
                f"     {name:<6} =   ${define.value.high:02X}{define.value.low:02X}\n"
            )
        for line in self.lines():
            parts.append(f"{line.annotation}{line.text()}\n")
        return "".join(parts)

    def to_binary(self) -> bytes:
        """ROM image: header followed by the raw bytes."""
        data = bytearray(self._rom_header)
        for line in self.lines():
            data.extend(line.values)
        return bytes(data)

    def code(self) -> bytes:
        """Raw resolved bytes without header."""
        return bytes(value for line in self.lines() for value in line.values)

    # =========================================================================
    # Resolution
    # =========================================================================

    def _resolve(self) -> list[RenderedLine]:
        labels = self._program.labels
        byte_pc = 0
        rendered = []

        for line in self._program.lines:
            if line.is_origin:
                byte_pc = line.address
                rendered.append(RenderedLine([], is_origin=True))
                continue

            is_jump = self._is_jump(line)
            values = []
            for token in line.tokens:
                if isinstance(token, LabelReference):
                    address = labels.address_of(token.name)
                    if is_jump:
                        values.extend(split_absolute(address))
                        byte_pc += 2
                    else:
                        values.append(self._displacement(token.name, address, byte_pc))
                        byte_pc += 1
                else:
                    values.append(token.value)
                    byte_pc += 1

            rendered.append(RenderedLine(values, line.annotation))

        return rendered

    @staticmethod
    def _is_jump(line: EmittedLine) -> bool:
        first = line.tokens[0] if line.tokens else None
        return isinstance(first, LiteralByte) and first.value in JUMP_OPCODES

    @staticmethod
    def _displacement(name: str, target: int, origin: int) -> int:
        offset = target - (origin + 1)
        if offset < -128 or offset > 127:
            logger.warning(
                f"Branch to '{name}' at ${origin:04X} is out of range "
                f"(offset {offset}); displacement wraps"
            )
        return branch_displacement(target, origin)
