# =============================================================================
# test_renderer.py - Output Renderer Unit Tests
# =============================================================================
# Tests for label substitution and the three output formats.
# =============================================================================

import logging

import pytest

from asm6502.assembler.codegen import generate
from asm6502.assembler.lexer import tokenize_source
from asm6502.assembler.renderer import (
    ORIGIN_TEXT,
    Renderer,
    branch_displacement,
    split_absolute,
)
from asm6502.config import ROM_HEADER, OutputFormat


def renderer_for(source: str, **kwargs) -> Renderer:
    return Renderer(generate(tokenize_source(source)), **kwargs)


LOOP_PROGRAM = """\
        LDX #$05
LOOP:   DEX
        BEQ DONE
        JMP LOOP
DONE:   RTS
"""


# =============================================================================
# Label Arithmetic Tests
# =============================================================================

class TestBranchDisplacement:
    """Test the relative branch byte computation."""

    def test_backward(self):
        assert branch_displacement(0x00, 0x02) == 0xFD

    def test_backward_after_origin(self):
        assert branch_displacement(0x0600, 0x0602) == 0xFD

    def test_forward(self):
        assert branch_displacement(0x08, 0x04) == 0x03
        assert branch_displacement(0x0610, 0x0602) == 0x0D

    def test_same_address(self):
        assert branch_displacement(0x10, 0x10) == 0x00

    def test_uses_signed_low_bytes(self):
        assert branch_displacement(0x80, 0x82) == 0xFD


class TestSplitAbsolute:
    """Test the JMP/JSR address split."""

    @pytest.mark.parametrize("address,expected", [
        (0x0000, (0x00, 0x00)),
        (0x0002, (0x02, 0x00)),
        (0x00FF, (0x00, 0x01)),
        (0x0600, (0x06, 0x06)),
        (0xFFFF, (0x00, 0x01)),
    ])
    def test_split(self, address, expected):
        assert split_absolute(address) == expected


# =============================================================================
# Hex Output Tests
# =============================================================================

class TestHexOutput:
    """Test the space-separated hex listing."""

    def test_jump_to_start(self):
        renderer = renderer_for("START: LDA #$01\nSTA $00\nJMP START")
        assert renderer.to_hex() == "A9 01 85 00 4C 00 00"

    def test_forward_branch_and_jump(self):
        assert renderer_for(LOOP_PROGRAM).to_hex() == "A2 05 CA F0 03 4C 02 00 60"

    def test_origin_marker(self):
        renderer = renderer_for("* = $0600\nLOOP: DEX\nBNE LOOP")
        assert renderer.to_hex() == f"{ORIGIN_TEXT} CA D0 FD"

    def test_jsr_after_origin(self):
        renderer = renderer_for("* = $0600\nJSR SUB\nRTS\nSUB: RTS")
        assert renderer.to_hex() == "* = 20 0A 06 60 60"

    def test_define_lines_not_rendered(self):
        assert renderer_for("VAL = $10\nLDA #VAL").to_hex() == "A9 10"

    def test_empty_program(self):
        assert renderer_for("; nothing here").to_hex() == ""

    def test_render_dispatch(self):
        renderer = renderer_for("NOP")
        assert renderer.render(OutputFormat.HEX) == "EA"
        assert renderer.render(OutputFormat.BINARY) == ROM_HEADER + b"\xEA"


# =============================================================================
# Debug Output Tests
# =============================================================================

class TestDebugOutput:
    """Test the annotated listing."""

    def test_instruction_line(self):
        listing = renderer_for("START: LDA #$01").to_debug()
        assert listing == "0000 START  LDA " + "#$01".ljust(12) + " A9 01\n"

    def test_defines_first(self):
        listing = renderer_for("NOP\nSCREEN = $0400").to_debug()
        lines = listing.splitlines()
        assert lines[0] == "     SCREEN =   $0400"
        assert lines[1].endswith("EA")

    def test_origin_line(self):
        listing = renderer_for("* = $0600\nRTS").to_debug()
        lines = listing.splitlines()
        assert lines[0] == ORIGIN_TEXT
        assert lines[1].startswith("0600 ")
        assert lines[1].endswith(" 60")

    def test_resolved_labels_in_listing(self):
        listing = renderer_for(LOOP_PROGRAM).to_debug()
        assert "F0 03" in listing
        assert "4C 02 00" in listing


# =============================================================================
# Binary Output Tests
# =============================================================================

class TestBinaryOutput:
    """Test ROM image output."""

    def test_header_then_code(self):
        data = renderer_for("START: LDA #$01\nSTA $00\nJMP START").to_binary()
        assert data[:10] == b"6502ROM..."
        assert data[10:] == bytes([0xA9, 0x01, 0x85, 0x00, 0x4C, 0x00, 0x00])

    def test_origin_lines_skipped(self):
        data = renderer_for("* = $0600\nLOOP: DEX\nBNE LOOP").to_binary()
        assert data == ROM_HEADER + bytes([0xCA, 0xD0, 0xFD])

    def test_custom_header(self):
        data = renderer_for("NOP", rom_header=b"TESTHEADER").to_binary()
        assert data == b"TESTHEADER\xEA"

    def test_code_without_header(self):
        assert renderer_for(LOOP_PROGRAM).code() == bytes.fromhex("A205CAF0034C020060")


# =============================================================================
# Range Warning Tests
# =============================================================================

class TestBranchRange:
    """Test out-of-range branches."""

    def test_out_of_range_warns_and_wraps(self, caplog):
        source = "LOOP: NOP\n" + "NOP\n" * 200 + "BNE LOOP"
        with caplog.at_level(logging.WARNING, logger="asm6502.assembler.renderer"):
            code = renderer_for(source).code()
        assert code[-2:] == bytes([0xD0, 0x35])
        assert "out of range" in caplog.text

    def test_in_range_no_warning(self, caplog):
        with caplog.at_level(logging.WARNING, logger="asm6502.assembler.renderer"):
            renderer_for(LOOP_PROGRAM).code()
        assert caplog.records == []
