"""
asm6502 - 6502 Cross-Assembler
==============================

This package assembles MOS 6502 assembly source into machine code.

Main Components
---------------
- **assembler**: Collection, encoding and rendering passes
- **config**: Run configuration (output format, ROM header)
- **cli**: The ``asm6502`` command-line tool

Quick Start
-----------
Assemble a program:
    >>> from asm6502 import Assembler
    >>> asm = Assembler()
    >>> asm.assemble_file("loop.asm")
    >>> print(asm.get_hex())

Or use the command-line tool:
    $ asm6502 loop.asm
    $ asm6502 -d loop.asm
    $ asm6502 -b loop.asm -o loop.rom

Source Format
-------------
- ``;`` starts a comment
- ``LABEL:`` or a bare leading name declares a label
- ``NAME = literal`` declares a constant (``<NAME``/``>NAME`` select a byte)
- ``* = literal`` or ``ORG literal`` sets the location counter
- Literals: ``$FF``, ``$FFFF``, ``%10101010``, ``0377``, ``255``

Version History
---------------
0.1.0 - Initial release: hex, debug and binary output
"""

__version__ = "0.1.0"

# =============================================================================
# Public API Exports
# =============================================================================

from asm6502.assembler import Assembler, assemble, assemble_file
from asm6502.config import AssemblerConfig, OutputFormat
from asm6502.errors import (
    Asm6502Error,
    AssemblerError,
    AssemblySyntaxError,
    MalformedLiteral,
    UnknownOpcode,
    UnknownAddressingPattern,
    AmbiguousOperandWidth,
    DuplicateSymbolError,
    UnreadableInputFile,
    SourceLocation,
)

__all__ = [
    "__version__",
    # Assembler
    "Assembler",
    "assemble",
    "assemble_file",
    # Configuration
    "AssemblerConfig",
    "OutputFormat",
    # Exception hierarchy
    "Asm6502Error",
    "AssemblerError",
    "AssemblySyntaxError",
    "MalformedLiteral",
    "UnknownOpcode",
    "UnknownAddressingPattern",
    "AmbiguousOperandWidth",
    "DuplicateSymbolError",
    "UnreadableInputFile",
    "SourceLocation",
]
