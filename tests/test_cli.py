# =============================================================================
# test_cli.py - Command-Line Interface Tests
# =============================================================================
# Tests for the asm6502 command: output modes, output files and exit codes.
# =============================================================================

import warnings

import pytest
from click.testing import CliRunner

from asm6502 import __version__
from asm6502.cli.asm import main
from asm6502.cli.errors import ExitCode
from asm6502.config import ROM_HEADER


START_PROGRAM = """\
START:  LDA #$01
        STA $00
        JMP START
"""

START_CODE = bytes([0xA9, 0x01, 0x85, 0x00, 0x4C, 0x00, 0x00])


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def source_file(tmp_path):
    path = tmp_path / "start.asm"
    path.write_text(START_PROGRAM)
    return path


class TestOutputModes:
    """Test the three output modes."""

    def test_hex_to_stdout(self, runner, source_file):
        result = runner.invoke(main, [str(source_file)])

        assert result.exit_code == ExitCode.SUCCESS
        assert result.output == "A9 01 85 00 4C 00 00\n"

    def test_debug_listing(self, runner, source_file):
        result = runner.invoke(main, ["-d", str(source_file)])

        assert result.exit_code == 0
        assert "0000 START  LDA" in result.output
        assert "4C 00 00" in result.output

    def test_binary_to_stdout(self, runner, source_file):
        result = runner.invoke(main, ["--binary", str(source_file)])

        assert result.exit_code == 0
        assert result.stdout_bytes == ROM_HEADER + START_CODE

    def test_binary_to_stdout_without_deprecation_warning(self, runner, source_file):
        with warnings.catch_warnings():
            warnings.simplefilter("error", DeprecationWarning)
            result = runner.invoke(main, ["-b", str(source_file)])

        assert result.exit_code == 0
        assert result.exception is None
        assert result.stdout_bytes == ROM_HEADER + START_CODE

    def test_binary_to_file(self, runner, source_file, tmp_path):
        output = tmp_path / "start.rom"
        result = runner.invoke(main, ["-b", str(source_file), "-o", str(output)])

        assert result.exit_code == 0
        assert output.read_bytes() == ROM_HEADER + START_CODE

    def test_hex_to_file(self, runner, source_file, tmp_path):
        output = tmp_path / "start.hex"
        result = runner.invoke(main, [str(source_file), "--output", str(output)])

        assert result.exit_code == 0
        assert output.read_text() == "A9 01 85 00 4C 00 00"

    def test_format_from_environment(self, runner, source_file):
        result = runner.invoke(main, [str(source_file)], env={"ASM6502_FORMAT": "debug"})

        assert result.exit_code == 0
        assert "0000 START  LDA" in result.output

    def test_verbose_summary(self, runner, source_file):
        result = runner.invoke(main, ["-v", str(source_file)])

        assert result.exit_code == 0
        assert "Assembly complete: 7 bytes, 1 labels" in result.output


class TestExitCodes:
    """Test error reporting and exit codes."""

    def test_debug_and_binary_exclusive(self, runner, source_file):
        result = runner.invoke(main, ["-d", "-b", str(source_file)])

        assert result.exit_code == ExitCode.INVALID_ARGS
        assert "mutually exclusive" in result.output

    def test_missing_input(self, runner, tmp_path):
        result = runner.invoke(main, [str(tmp_path / "missing.asm")])

        assert result.exit_code == ExitCode.INVALID_ARGS
        assert "unable to read file" in result.output

    def test_no_arguments(self, runner):
        result = runner.invoke(main, [])

        assert result.exit_code == 2

    def test_assembly_error(self, runner, tmp_path):
        source = tmp_path / "bad.asm"
        source.write_text("NOP\nLDB #$01\n")
        output = tmp_path / "bad.hex"

        result = runner.invoke(main, [str(source), "-o", str(output)])

        assert result.exit_code == ExitCode.BUILD_ERROR
        assert "unknown opcode 'LDB'" in result.output
        assert not output.exists()

    def test_version(self, runner):
        result = runner.invoke(main, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.output

    def test_help(self, runner):
        result = runner.invoke(main, ["--help"])

        assert result.exit_code == 0
        assert "Assemble 6502 source code" in result.output
