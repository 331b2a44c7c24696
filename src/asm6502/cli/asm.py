"""
asm6502 - 6502 Assembler Command-Line Interface
===============================================

This module implements the command-line interface for the assembler.

Usage Examples
--------------
Hex listing to stdout:
    $ asm6502 loop.asm

Annotated debug listing:
    $ asm6502 -d loop.asm

Binary ROM image:
    $ asm6502 -b loop.asm -o loop.rom

Verbose mode:
    $ asm6502 -v loop.asm
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import click

from asm6502 import __version__
from asm6502.assembler import Assembler
from asm6502.config import AssemblerConfig, OutputFormat
from asm6502.cli.errors import ExitCode, handle_cli_exception


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "input_file",
    type=click.Path(dir_okay=False, path_type=Path),
)
@click.option(
    "-d", "--debug",
    is_flag=True,
    help="Output machine code annotated with addresses, labels and source",
)
@click.option(
    "-b", "--binary",
    is_flag=True,
    help="Output a binary ROM image (10-byte header + machine code)",
)
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="File to write the machine code to (default: stdout)",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="asm6502")
def main(
    input_file: Path,
    debug: bool,
    binary: bool,
    output: Optional[Path],
    verbose: bool,
) -> None:
    """
    Assemble 6502 source code into machine code.

    INPUT_FILE is the assembly source file to assemble.

    \b
    Examples:
        asm6502 loop.asm                # Hex listing to stdout
        asm6502 -d loop.asm             # Debug listing
        asm6502 -b loop.asm -o loop.rom # Binary ROM image
    """
    if debug and binary:
        click.echo("Error: -d/--debug and -b/--binary are mutually exclusive", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    setup_logging(verbose)

    config = AssemblerConfig.from_env()
    config.verbose = verbose
    if debug:
        config.output_format = OutputFormat.DEBUG
    elif binary:
        config.output_format = OutputFormat.BINARY

    asm = Assembler(config)

    try:
        asm.assemble_file(input_file)

        if output is not None:
            asm.write_output(output)
        else:
            rendered = asm.render()
            if isinstance(rendered, bytes):
                stdout = sys.stdout.buffer
                stdout.write(rendered)
                stdout.flush()
            else:
                click.echo(rendered)

        if verbose:
            symbols = asm.get_symbols()
            click.echo(
                f"Assembly complete: {len(asm.get_code())} bytes, "
                f"{len(symbols)} labels",
                err=True,
            )

    except Exception as e:
        handle_cli_exception(e, verbose=verbose, error_type="Assembly")


if __name__ == "__main__":
    main()
