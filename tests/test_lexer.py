# =============================================================================
# test_lexer.py - Tokenizer and Symbol Collector Unit Tests
# =============================================================================
# Tests for the collection pass.
#
# Test coverage includes:
#   - Comment and blank line handling
#   - Inline, bare and standalone labels
#   - Constant definitions
#   - Location-counter directives (* = and ORG)
#   - Error reporting
# =============================================================================

import pytest

from asm6502.assembler.lexer import ORIGIN_MARKER, tokenize_source
from asm6502.assembler.literals import Width
from asm6502.errors import AssemblySyntaxError, DuplicateSymbolError, MalformedLiteral


def tokens_of(source: str) -> list[list[str]]:
    """Token lists of every token-line in source."""
    return [line.tokens for line in tokenize_source(source).lines]


# =============================================================================
# Basic Tokenization Tests
# =============================================================================

class TestTokenization:
    """Test splitting lines into tokens."""

    def test_instruction_tokens(self):
        assert tokens_of("LDA #$01") == [["LDA", "#$01"]]

    def test_implied_instruction(self):
        assert tokens_of("RTS") == [["RTS"]]

    def test_comments_stripped(self):
        assert tokens_of("NOP ; do nothing ; really") == [["NOP"]]

    def test_blank_and_comment_lines_skipped(self):
        parsed = tokenize_source("; header\n\n   \nNOP\n")
        assert [line.tokens for line in parsed.lines] == [["NOP"]]
        assert parsed.lines[0].line_number == 4

    def test_empty_source(self):
        parsed = tokenize_source("")
        assert parsed.lines == []
        assert len(parsed.labels) == 0

    def test_unknown_mnemonic_kept_for_encoder(self):
        """Unknown mnemonics are not stripped as labels."""
        parsed = tokenize_source("FOO #$01")
        assert parsed.lines[0].tokens == ["FOO", "#$01"]
        assert "FOO" not in parsed.labels

    def test_source_text_kept(self):
        parsed = tokenize_source("  STA $00 ; store")
        assert parsed.lines[0].source == "  STA $00 ; store"


# =============================================================================
# Label Tests
# =============================================================================

class TestLabels:
    """Test label discovery and binding to line indices."""

    def test_inline_label_with_colon(self):
        parsed = tokenize_source("START: LDA #$01")
        assert parsed.lines[0].tokens == ["LDA", "#$01"]
        assert parsed.labels.get("START").line_index == 0

    def test_bare_label_before_mnemonic(self):
        parsed = tokenize_source("NOP\nLOOP DEX")
        assert parsed.lines[1].tokens == ["DEX"]
        assert parsed.labels.get("LOOP").line_index == 1

    def test_standalone_label_binds_to_next_line(self):
        parsed = tokenize_source("NOP\nLOOP:\n; comment\n\nDEX")
        assert parsed.labels.get("LOOP").line_index == 1

    def test_multiple_standalone_labels_share_line(self):
        parsed = tokenize_source("FIRST:\nSECOND:\nTHIRD: NOP")
        for name in ("FIRST", "SECOND", "THIRD"):
            assert parsed.labels.get(name).line_index == 0
        assert parsed.labels.slots_at_line(0) == [0, 1, 2]

    def test_lone_token_without_colon_is_instruction(self):
        """A misspelled implied instruction is not taken for a label."""
        parsed = tokenize_source("LDA #$01\nCLX\nRTS")
        assert [line.tokens for line in parsed.lines] == [["LDA", "#$01"], ["CLX"], ["RTS"]]
        assert "CLX" not in parsed.labels
        assert len(parsed.labels) == 0

    def test_trailing_label_binds_to_end(self):
        parsed = tokenize_source("NOP\nEND:")
        assert parsed.labels.get("END").line_index == parsed.end_index == 1

    def test_labels_unresolved_after_collection(self):
        parsed = tokenize_source("START: NOP")
        assert not parsed.labels.get("START").is_resolved

    def test_duplicate_label(self):
        with pytest.raises(DuplicateSymbolError) as exc_info:
            tokenize_source("LOOP: NOP\nLOOP: RTS")
        assert exc_info.value.symbol == "LOOP"
        assert "first defined at <input>:1:1" in str(exc_info.value)

    def test_label_location(self):
        parsed = tokenize_source("\n   LOOP: NOP", "prog.asm")
        location = parsed.labels.get("LOOP").location
        assert (location.filename, location.line, location.column) == ("prog.asm", 2, 4)


# =============================================================================
# Define Tests
# =============================================================================

class TestDefines:
    """Test constant definitions."""

    def test_one_byte_define(self):
        parsed = tokenize_source("ZP = $10")
        define = parsed.defines["ZP"]
        assert define.width is Width.ONE_BYTE
        assert define.value.low == 0x10
        assert parsed.lines == []

    def test_two_byte_define(self):
        define = tokenize_source("SCREEN = $0400").defines["SCREEN"]
        assert define.width is Width.TWO_BYTE
        assert define.value.value == 0x0400

    def test_define_without_spaces(self):
        assert tokenize_source("COUNT=%00001111").defines["COUNT"].value.low == 0x0F

    def test_defines_keep_order(self):
        parsed = tokenize_source("B = $02\nA = $01")
        assert list(parsed.defines) == ["B", "A"]

    def test_define_does_not_consume_index(self):
        parsed = tokenize_source("VAL = $10\nSTART: NOP")
        assert parsed.labels.get("START").line_index == 0

    def test_malformed_define_value(self):
        with pytest.raises(MalformedLiteral):
            tokenize_source("BAD = $ZZ")

    def test_unknown_width_define_value(self):
        with pytest.raises(MalformedLiteral):
            tokenize_source("BAD = OTHER")

    def test_duplicate_define(self):
        with pytest.raises(DuplicateSymbolError):
            tokenize_source("VAL = $10\nVAL = $20")

    def test_define_without_name(self):
        with pytest.raises(AssemblySyntaxError):
            tokenize_source("= $10")


# =============================================================================
# Location Counter Tests
# =============================================================================

class TestOrigin:
    """Test location-counter directives."""

    def test_star_equals(self):
        parsed = tokenize_source("* = $0600")
        line = parsed.lines[0]
        assert line.is_origin
        assert line.tokens == [ORIGIN_MARKER]
        assert line.origin.value == 0x0600

    def test_org_keyword(self):
        line = tokenize_source("ORG $C000").lines[0]
        assert line.is_origin
        assert line.origin.value == 0xC000

    def test_one_byte_origin(self):
        line = tokenize_source("*=$10").lines[0]
        assert line.origin.low == 0x10
        assert line.origin.high == 0x00

    def test_origin_does_not_bind_pending_labels(self):
        parsed = tokenize_source("START:\n* = $0600\nNOP")
        assert parsed.labels.get("START").line_index == 1
        assert parsed.lines[1].tokens == ["NOP"]

    def test_org_without_address(self):
        with pytest.raises(AssemblySyntaxError):
            tokenize_source("ORG")

    def test_malformed_origin(self):
        with pytest.raises(MalformedLiteral):
            tokenize_source("* = $06000")
