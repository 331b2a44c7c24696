"""
6502 Assembler
==============

This package translates 6502 assembly source into machine code, emitted as
a hex listing, an annotated debug listing or a binary ROM image.

Main Components
---------------
- **Assembler**: Main class that runs the pipeline
- **Lexer**: Tokenizes source lines and collects labels and defines
- **CodeGenerator**: Encodes instructions, resolves label addresses
- **Renderer**: Substitutes label references and serializes output
- **decode_literal / classify_width**: Numeric literal decoding

Assembly Process
----------------
1. **Collection**: strip comments, classify each line as a define, an
   origin directive, a label or an instruction; record the token-line each
   label belongs to.
2. **Encoding**: pick the addressing mode per operand, emit opcode and
   operand bytes, defer label references, assign label addresses.
3. **Rendering**: replace label references with absolute addresses
   (JMP/JSR) or relative displacements (branches) and serialize.

Example Usage
-------------
>>> from asm6502.assembler import assemble
>>> assemble("LDA #$01\\nSTA $00")
'A9 01 85 00'
"""

from asm6502.assembler.assembler import Assembler, assemble, assemble_file
from asm6502.assembler.lexer import Lexer, ParsedSource, TokenLine, tokenize_source
from asm6502.assembler.codegen import (
    CodeGenerator,
    EmittedLine,
    LabelReference,
    LiteralByte,
    Program,
)
from asm6502.assembler.renderer import (
    Renderer,
    RenderedLine,
    branch_displacement,
    split_absolute,
)
from asm6502.assembler.literals import ByteValue, Width, classify_width, decode_literal
from asm6502.assembler.opcodes import (
    AddressingMode,
    OPCODE_TABLE,
    MNEMONICS,
    BRANCH_INSTRUCTIONS,
)
from asm6502.assembler.symbols import Define, Label, LabelTable

__all__ = [
    # Main class and functions
    "Assembler",
    "assemble",
    "assemble_file",
    # Collection
    "Lexer",
    "ParsedSource",
    "TokenLine",
    "tokenize_source",
    # Encoding
    "CodeGenerator",
    "EmittedLine",
    "LabelReference",
    "LiteralByte",
    "Program",
    # Rendering
    "Renderer",
    "RenderedLine",
    "branch_displacement",
    "split_absolute",
    # Literals
    "ByteValue",
    "Width",
    "classify_width",
    "decode_literal",
    # Opcodes
    "AddressingMode",
    "OPCODE_TABLE",
    "MNEMONICS",
    "BRANCH_INSTRUCTIONS",
    # Symbols
    "Define",
    "Label",
    "LabelTable",
]
