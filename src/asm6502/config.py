"""
Assembler Configuration
=======================

Run configuration for the assembler. Configuration can come from:
- Default values (defined here)
- Environment variables (AssemblerConfig.from_env)
- Command-line flags, which the CLI applies on top of the environment
"""

from dataclasses import dataclass
from enum import Enum
import os

ROM_HEADER = b"6502ROM..."
ROM_HEADER_SIZE = 10


class OutputFormat(Enum):
    """Output form produced by the renderer."""
    HEX = "hex"
    DEBUG = "debug"
    BINARY = "binary"

    def __str__(self) -> str:
        return self.value


@dataclass
class AssemblerConfig:
    """
    Configuration for one assembler run.

    Attributes:
        output_format: Output form (default: hex listing)
        rom_header: Header written before binary output (exactly 10 bytes)
        normalize_case: Uppercase the source before assembly (default: True)
        verbose: Log pass statistics
    """

    output_format: OutputFormat = OutputFormat.HEX
    rom_header: bytes = ROM_HEADER
    normalize_case: bool = True
    verbose: bool = False

    def __post_init__(self) -> None:
        if len(self.rom_header) != ROM_HEADER_SIZE:
            raise ValueError(
                f"ROM header must be {ROM_HEADER_SIZE} bytes, got {len(self.rom_header)}"
            )

    @classmethod
    def from_env(cls) -> "AssemblerConfig":
        """
        Create AssemblerConfig from environment variables.

        Environment variables (all optional):
            ASM6502_FORMAT: Output format ("hex", "debug", "binary")
            ASM6502_ROM_HEADER: ASCII ROM header, exactly 10 characters
            ASM6502_NORMALIZE_CASE: "0"/"false"/"no" keeps source case

        Returns:
            AssemblerConfig with values from environment variables
        """
        config = cls()

        if output_format := os.environ.get("ASM6502_FORMAT"):
            try:
                config.output_format = OutputFormat(output_format.lower())
            except ValueError:
                pass  # Ignore invalid values

        if header := os.environ.get("ASM6502_ROM_HEADER"):
            if header.isascii() and len(header) == ROM_HEADER_SIZE:
                config.rom_header = header.encode("ascii")

        if normalize := os.environ.get("ASM6502_NORMALIZE_CASE"):
            config.normalize_case = normalize.lower() not in ("0", "false", "no")

        return config
