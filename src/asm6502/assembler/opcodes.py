"""
MOS 6502 Instruction Set Definition
===================================

This module defines the 6502 instruction set: the 56 documented mnemonics
and the opcode byte for every valid (mnemonic, addressing mode) pair. The
6502 is little-endian; two-byte operands are stored low byte first.

Addressing Modes
----------------
| #  | Mode             | Syntax     | Operand bytes |
|----|------------------|------------|---------------|
| 0  | Implied          | CLC        | 0             |
| 1  | Accumulator      | ASL A      | 0             |
| 2  | Immediate        | LDA #$41   | 1             |
| 3  | Absolute         | LDA $1234  | 2             |
| 4  | Absolute,X       | LDA $1234,X| 2             |
| 5  | Absolute,Y       | LDA $1234,Y| 2             |
| 6  | Zero page        | LDA $40    | 1             |
| 7  | Zero page,X      | LDA $40,X  | 1             |
| 8  | Zero page,Y      | LDX $40,Y  | 1             |
| 9  | Indirect         | JMP ($1234)| 2             |
| 10 | Indexed indirect | LDA ($40,X)| 1             |
| 11 | Indirect indexed | LDA ($40),Y| 1             |
| 12 | Relative         | BNE label  | 1             |

The table is immutable: it is exposed through a read-only mapping and an
absent entry means the combination is not encodable.

Reference
---------
- MOS MCS6500 Microcomputer Family Programming Manual
- http://www.6502.org/tutorials/6502opcodes.html
"""

from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional


# =============================================================================
# Addressing Mode Enumeration
# =============================================================================

class AddressingMode(Enum):
    """
    6502 addressing modes.

    The value is the mode's column index in the opcode table.
    """
    IMPLIED = 0
    ACCUMULATOR = 1
    IMMEDIATE = 2
    ABSOLUTE = 3
    ABSOLUTE_X = 4
    ABSOLUTE_Y = 5
    ZERO_PAGE = 6
    ZERO_PAGE_X = 7
    ZERO_PAGE_Y = 8
    INDIRECT = 9
    INDEXED_INDIRECT = 10
    INDIRECT_INDEXED = 11
    RELATIVE = 12

    def __str__(self) -> str:
        """Return human-readable name for error messages."""
        return self.name.lower().replace("_", "-")

    @property
    def operand_size(self) -> int:
        """Number of operand bytes following the opcode."""
        return _OPERAND_SIZES[self]


_OPERAND_SIZES = {
    AddressingMode.IMPLIED: 0,
    AddressingMode.ACCUMULATOR: 0,
    AddressingMode.IMMEDIATE: 1,
    AddressingMode.ABSOLUTE: 2,
    AddressingMode.ABSOLUTE_X: 2,
    AddressingMode.ABSOLUTE_Y: 2,
    AddressingMode.ZERO_PAGE: 1,
    AddressingMode.ZERO_PAGE_X: 1,
    AddressingMode.ZERO_PAGE_Y: 1,
    AddressingMode.INDIRECT: 2,
    AddressingMode.INDEXED_INDIRECT: 1,
    AddressingMode.INDIRECT_INDEXED: 1,
    AddressingMode.RELATIVE: 1,
}


# =============================================================================
# Opcode Rows
# =============================================================================
# One row per mnemonic, one column per AddressingMode value.
# None marks a combination the 6502 does not implement.
# =============================================================================

_ = None

_OPCODE_ROWS: dict[str, tuple[Optional[int], ...]] = {
    #         imp   acc   imm   abs   abx   aby   zpg   zpx   zpy   ind   inx   iny   rel
    "ADC": (_,    _,    0x69, 0x6D, 0x7D, 0x79, 0x65, 0x75, _,    _,    0x61, 0x71, _),
    "AND": (_,    _,    0x29, 0x2D, 0x3D, 0x39, 0x25, 0x35, _,    _,    0x21, 0x31, _),
    "ASL": (_,    0x0A, _,    0x0E, 0x1E, _,    0x06, 0x16, _,    _,    _,    _,    _),
    "BCC": (_,    _,    _,    _,    _,    _,    _,    _,    _,    _,    _,    _,    0x90),
    "BCS": (_,    _,    _,    _,    _,    _,    _,    _,    _,    _,    _,    _,    0xB0),
    "BEQ": (_,    _,    _,    _,    _,    _,    _,    _,    _,    _,    _,    _,    0xF0),
    "BIT": (_,    _,    _,    0x2C, _,    _,    0x24, _,    _,    _,    _,    _,    _),
    "BMI": (_,    _,    _,    _,    _,    _,    _,    _,    _,    _,    _,    _,    0x30),
    "BNE": (_,    _,    _,    _,    _,    _,    _,    _,    _,    _,    _,    _,    0xD0),
    "BPL": (_,    _,    _,    _,    _,    _,    _,    _,    _,    _,    _,    _,    0x10),
    "BRK": (0x00, _,    _,    _,    _,    _,    _,    _,    _,    _,    _,    _,    _),
    "BVC": (_,    _,    _,    _,    _,    _,    _,    _,    _,    _,    _,    _,    0x50),
    "BVS": (_,    _,    _,    _,    _,    _,    _,    _,    _,    _,    _,    _,    0x70),
    "CLC": (0x18, _,    _,    _,    _,    _,    _,    _,    _,    _,    _,    _,    _),
    "CLD": (0xD8, _,    _,    _,    _,    _,    _,    _,    _,    _,    _,    _,    _),
    "CLI": (0x58, _,    _,    _,    _,    _,    _,    _,    _,    _,    _,    _,    _),
    "CLV": (0xB8, _,    _,    _,    _,    _,    _,    _,    _,    _,    _,    _,    _),
    "CMP": (_,    _,    0xC9, 0xCD, 0xDD, 0xD9, 0xC5, 0xD5, _,    _,    0xC1, 0xD1, _),
    "CPX": (_,    _,    0xE0, 0xEC, _,    _,    0xE4, _,    _,    _,    _,    _,    _),
    "CPY": (_,    _,    0xC0, 0xCC, _,    _,    0xC4, _,    _,    _,    _,    _,    _),
    "DEC": (_,    _,    _,    0xCE, 0xDE, _,    0xC6, 0xD6, _,    _,    _,    _,    _),
    "DEX": (0xCA, _,    _,    _,    _,    _,    _,    _,    _,    _,    _,    _,    _),
    "DEY": (0x88, _,    _,    _,    _,    _,    _,    _,    _,    _,    _,    _,    _),
    "EOR": (_,    _,    0x49, 0x4D, 0x5D, 0x59, 0x45, 0x55, _,    _,    0x41, 0x51, _),
    "INC": (_,    _,    _,    0xEE, 0xFE, _,    0xE6, 0xF6, _,    _,    _,    _,    _),
    "INX": (0xE8, _,    _,    _,    _,    _,    _,    _,    _,    _,    _,    _,    _),
    "INY": (0xC8, _,    _,    _,    _,    _,    _,    _,    _,    _,    _,    _,    _),
    "JMP": (_,    _,    _,    0x4C, _,    _,    _,    _,    _,    0x6C, _,    _,    _),
    "JSR": (_,    _,    _,    0x20, _,    _,    _,    _,    _,    _,    _,    _,    _),
    "LDA": (_,    _,    0xA9, 0xAD, 0xBD, 0xB9, 0xA5, 0xB5, _,    _,    0xA1, 0xB1, _),
    "LDX": (_,    _,    0xA2, 0xAE, _,    0xBE, 0xA6, _,    0xB6, _,    _,    _,    _),
    "LDY": (_,    _,    0xA0, 0xAC, 0xBC, _,    0xA4, 0xB4, _,    _,    _,    _,    _),
    "LSR": (_,    0x4A, _,    0x4E, 0x5E, _,    0x46, 0x56, _,    _,    _,    _,    _),
    "NOP": (0xEA, _,    _,    _,    _,    _,    _,    _,    _,    _,    _,    _,    _),
    "ORA": (_,    _,    0x09, 0x0D, 0x1D, 0x19, 0x05, 0x15, _,    _,    0x01, 0x11, _),
    "PHA": (0x48, _,    _,    _,    _,    _,    _,    _,    _,    _,    _,    _,    _),
    "PHP": (0x08, _,    _,    _,    _,    _,    _,    _,    _,    _,    _,    _,    _),
    "PLA": (0x68, _,    _,    _,    _,    _,    _,    _,    _,    _,    _,    _,    _),
    "PLP": (0x28, _,    _,    _,    _,    _,    _,    _,    _,    _,    _,    _,    _),
    "ROL": (_,    0x2A, _,    0x2E, 0x3E, _,    0x26, 0x36, _,    _,    _,    _,    _),
    "ROR": (_,    0x6A, _,    0x6E, 0x7E, _,    0x66, 0x76, _,    _,    _,    _,    _),
    "RTI": (0x40, _,    _,    _,    _,    _,    _,    _,    _,    _,    _,    _,    _),
    "RTS": (0x60, _,    _,    _,    _,    _,    _,    _,    _,    _,    _,    _,    _),
    "SBC": (_,    _,    0xE9, 0xED, 0xFD, 0xF9, 0xE5, 0xF5, _,    _,    0xE1, 0xF1, _),
    "SEC": (0x38, _,    _,    _,    _,    _,    _,    _,    _,    _,    _,    _,    _),
    "SED": (0xF8, _,    _,    _,    _,    _,    _,    _,    _,    _,    _,    _,    _),
    "SEI": (0x78, _,    _,    _,    _,    _,    _,    _,    _,    _,    _,    _,    _),
    "STA": (_,    _,    _,    0x8D, 0x9D, 0x99, 0x85, 0x95, _,    _,    0x81, 0x91, _),
    "STX": (_,    _,    _,    0x8E, _,    _,    0x86, _,    0x96, _,    _,    _,    _),
    "STY": (_,    _,    _,    0x8C, _,    _,    0x84, 0x94, _,    _,    _,    _,    _),
    "TAX": (0xAA, _,    _,    _,    _,    _,    _,    _,    _,    _,    _,    _,    _),
    "TAY": (0xA8, _,    _,    _,    _,    _,    _,    _,    _,    _,    _,    _,    _),
    "TSX": (0xBA, _,    _,    _,    _,    _,    _,    _,    _,    _,    _,    _,    _),
    "TXA": (0x8A, _,    _,    _,    _,    _,    _,    _,    _,    _,    _,    _,    _),
    "TXS": (0x9A, _,    _,    _,    _,    _,    _,    _,    _,    _,    _,    _,    _),
    "TYA": (0x98, _,    _,    _,    _,    _,    _,    _,    _,    _,    _,    _,    _),
}

del _


# =============================================================================
# Opcode Table
# =============================================================================
# Key: (mnemonic, addressing_mode)
# Value: opcode byte
# =============================================================================

OPCODE_TABLE: Mapping[tuple[str, AddressingMode], int] = MappingProxyType({
    (mnemonic, mode): opcode
    for mnemonic, row in _OPCODE_ROWS.items()
    for mode, opcode in zip(AddressingMode, row)
    if opcode is not None
})


# =============================================================================
# Instruction Set Reference Lists
# =============================================================================

# All valid mnemonics in alphabetical order
MNEMONICS: tuple[str, ...] = tuple(sorted(_OPCODE_ROWS))

# Instructions that only have relative addressing
BRANCH_INSTRUCTIONS: frozenset[str] = frozenset({
    "BCC", "BCS", "BEQ", "BMI", "BNE", "BPL", "BVC", "BVS",
})

# Instructions whose label operands are full two-byte addresses
ABSOLUTE_TARGET_INSTRUCTIONS: frozenset[str] = frozenset({"JMP", "JSR"})

# Opcodes whose label operand renders as an absolute address:
# JMP absolute, JMP indirect, JSR
JUMP_OPCODES: frozenset[int] = frozenset({0x4C, 0x6C, 0x20})


# =============================================================================
# Lookup Functions
# =============================================================================

def get_opcode(mnemonic: str, mode: AddressingMode) -> Optional[int]:
    """
    Look up the opcode byte for a mnemonic in an addressing mode.

    Mnemonics are matched exactly; case normalization happens before
    assembly, not here.

    Args:
        mnemonic: The uppercase instruction mnemonic (e.g., "LDA")
        mode: The addressing mode

    Returns:
        The opcode byte, or None if the combination is invalid
    """
    return OPCODE_TABLE.get((mnemonic, mode))


def get_valid_modes(mnemonic: str) -> list[AddressingMode]:
    """Get all valid addressing modes for an instruction."""
    return [mode for (m, mode) in OPCODE_TABLE if m == mnemonic]


def supports_mode(mnemonic: str, mode: AddressingMode) -> bool:
    return (mnemonic, mode) in OPCODE_TABLE


def is_valid_instruction(mnemonic: str) -> bool:
    """
    Check if a mnemonic is a valid 6502 instruction.

    Args:
        mnemonic: The instruction mnemonic to check

    Returns:
        True if valid, False otherwise
    """
    return mnemonic in _OPCODE_ROWS


def is_branch_instruction(mnemonic: str) -> bool:
    return mnemonic in BRANCH_INSTRUCTIONS
