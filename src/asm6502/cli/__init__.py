"""
asm6502 Command-Line Interface
==============================

- **asm**: the ``asm6502`` assembler command

Implemented as a Click-based CLI application with help and error reporting.
"""

__all__ = ["asm"]
