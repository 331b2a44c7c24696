"""
6502 Assembler - Main Interface
===============================

This module provides the Assembler class, the primary interface for
assembling 6502 source code. It runs the three passes in order:

1. **Collection** (Lexer): token-lines, label line indices, defines
2. **Encoding** (CodeGenerator): opcode and operand bytes, label addresses
3. **Rendering** (Renderer): label substitution and serialization

Each pass completes before the next begins. The first error raised by any
pass aborts the run; no partial output is rendered or written.

Example Usage
-------------
>>> from asm6502.assembler import Assembler
>>> asm = Assembler()
>>> asm.assemble_string('''
... START: LDA #$01
...        STA $00
...        JMP START
... ''')
>>> asm.get_hex()
'A9 01 85 00 4C 00 00'
>>> asm.get_symbols()
{'START': 0}
"""

import logging
from pathlib import Path
from typing import Optional

from asm6502.config import AssemblerConfig, OutputFormat
from asm6502.errors import AssemblerError, UnreadableInputFile
from asm6502.assembler.codegen import CodeGenerator, Program
from asm6502.assembler.lexer import tokenize_source
from asm6502.assembler.renderer import Renderer

logger = logging.getLogger(__name__)


class Assembler:
    """
    Main 6502 assembler class.

    Attributes:
        config: Run configuration (output format, ROM header, case handling)
    """

    def __init__(self, config: Optional[AssemblerConfig] = None):
        self.config = config or AssemblerConfig()
        self._program: Optional[Program] = None
        self._renderer: Optional[Renderer] = None

    # =========================================================================
    # Assembly Methods
    # =========================================================================

    def assemble_string(self, source: str, filename: str = "<input>") -> Program:
        """
        Assemble source code from a string.

        Args:
            source: Assembly source code
            filename: Virtual filename for error messages

        Returns:
            The encoded Program

        Raises:
            AssemblerError: If assembly fails
        """
        self._program = None
        self._renderer = None

        if self.config.normalize_case:
            source = source.upper()

        parsed = tokenize_source(source, filename)
        if self.config.verbose:
            logger.info(
                f"{filename}: {len(parsed.lines)} lines, "
                f"{len(parsed.labels)} labels, {len(parsed.defines)} defines"
            )

        program = CodeGenerator(parsed).generate()
        renderer = Renderer(program, rom_header=self.config.rom_header)
        # Resolve label references before any output is requested
        renderer.lines()

        self._program = program
        self._renderer = renderer

        if self.config.verbose:
            logger.info(f"{filename}: assembled {len(renderer.code())} bytes")
        return program

    def assemble_file(self, filepath: str | Path) -> Program:
        """
        Assemble source code from a file.

        Raises:
            UnreadableInputFile: If the file cannot be read
            AssemblerError: If assembly fails
        """
        filepath = Path(filepath)

        try:
            source = filepath.read_text()
        except (OSError, UnicodeDecodeError) as e:
            raise UnreadableInputFile(str(filepath), getattr(e, "strerror", None) or str(e)) from e

        return self.assemble_string(source, str(filepath))

    # =========================================================================
    # Output Methods
    # =========================================================================

    def render(self, output_format: Optional[OutputFormat] = None) -> str | bytes:
        """
        Render the assembled program.

        Args:
            output_format: Overrides the configured output format

        Returns:
            str for hex/debug output, bytes for binary output
        """
        return self._require_renderer().render(output_format or self.config.output_format)

    def get_hex(self) -> str:
        return self._require_renderer().to_hex()

    def get_debug_listing(self) -> str:
        return self._require_renderer().to_debug()

    def get_binary(self) -> bytes:
        return self._require_renderer().to_binary()

    def get_code(self) -> bytes:
        """Resolved machine code without any header."""
        return self._require_renderer().code()

    def get_symbols(self) -> dict[str, int]:
        """Label names mapped to their resolved addresses."""
        return self._require_program().labels.addresses()

    def get_defines(self) -> dict[str, int]:
        """Constant names mapped to their 16-bit values."""
        return {
            name: define.value.value
            for name, define in self._require_program().defines.items()
        }

    def write_output(self, filepath: str | Path,
                     output_format: Optional[OutputFormat] = None) -> None:
        """
        Write the rendered program to a file.

        Binary output is written as bytes, hex and debug output as text.
        """
        output = self.render(output_format)
        filepath = Path(filepath)
        if isinstance(output, bytes):
            filepath.write_bytes(output)
        else:
            filepath.write_text(output)

        if self.config.verbose:
            logger.info(f"Wrote {filepath}")

    def _require_program(self) -> Program:
        if self._program is None:
            raise AssemblerError("nothing has been assembled")
        return self._program

    def _require_renderer(self) -> Renderer:
        if self._renderer is None:
            raise AssemblerError("nothing has been assembled")
        return self._renderer


# =============================================================================
# Convenience Functions
# =============================================================================

def assemble(source: str, output_format: OutputFormat = OutputFormat.HEX,
             filename: str = "<input>") -> str | bytes:
    """
    Convenience function to assemble source code.

    Returns:
        Rendered output in the requested format

    Raises:
        AssemblerError: If assembly fails
    """
    asm = Assembler(AssemblerConfig(output_format=output_format))
    asm.assemble_string(source, filename)
    return asm.render()


def assemble_file(filepath: str | Path,
                  output_format: OutputFormat = OutputFormat.HEX) -> str | bytes:
    """Convenience function to assemble a file."""
    asm = Assembler(AssemblerConfig(output_format=output_format))
    asm.assemble_file(filepath)
    return asm.render()
