"""
6502 Numeric Literal Decoder
============================

This module decodes single numeric tokens into two-byte values and
classifies how wide they are. There is no expression evaluation: an operand
is one literal, one constant name, or one label.

Number Formats
--------------
| Format      | Prefix | One byte    | Two bytes           |
|-------------|--------|-------------|---------------------|
| Hexadecimal | $      | $2A         | $0600               |
| Binary      | %      | %00101010   | %0000011000000000   |
| Octal       | 0      | 0052        | 0003000             |
| Decimal     | (none) | 42 (<= 255) | 1536 (> 255)        |

Octal is recognized only at exactly 4 or 7 characters (a leading 0 plus 3
or 6 octal digits); any other all-digit token is decimal. "0" and "007" are
decimal, and so are "0008" and "0999", which contain non-octal digits.

Decimal values above 255 are split as high = value / 16, low = value % 16.
This is not a base-256 split.
"""

import string
from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional

from asm6502.errors import MalformedLiteral, SourceLocation


# =============================================================================
# Width Classification
# =============================================================================

class Width(Enum):
    """Operand width as classified from a literal, define or label."""
    ONE_BYTE = auto()
    TWO_BYTE = auto()
    UNKNOWN = auto()

    def __str__(self) -> str:
        return {
            Width.ONE_BYTE: "one-byte",
            Width.TWO_BYTE: "two-byte",
            Width.UNKNOWN: "unknown",
        }[self]


@dataclass(frozen=True)
class ByteValue:
    """
    An ordered pair of unsigned bytes.

    Attributes:
        low: Least-significant byte
        high: Most-significant byte
    """
    low: int
    high: int = 0

    @property
    def value(self) -> int:
        """The 16-bit value (high * 256 + low)."""
        return (self.high << 8) | self.low

    @classmethod
    def from_int(cls, value: int) -> "ByteValue":
        return cls(low=value & 0xFF, high=(value >> 8) & 0xFF)

    def __repr__(self) -> str:
        return f"ByteValue(${self.high:02X}{self.low:02X})"


HEX_DIGITS = frozenset(string.hexdigits)
BINARY_DIGITS = frozenset("01")
OCTAL_DIGITS = frozenset(string.octdigits)
DECIMAL_DIGITS = frozenset(string.digits)


def _is_decimal(token: str) -> bool:
    return bool(token) and set(token) <= DECIMAL_DIGITS


def _is_octal_form(token: str) -> bool:
    return (
        token.startswith("0")
        and len(token) in (4, 7)
        and set(token) <= OCTAL_DIGITS
    )


# =============================================================================
# Public API
# =============================================================================

def classify_width(token: str) -> Width:
    """
    Classify a literal token as one-byte, two-byte or unknown.

    Classification looks only at prefix and length (and, for decimal, at the
    value). It does not validate digits; decode_literal() does that.

    Args:
        token: Literal text, e.g. "$2A", "%00101010", "0052", "42"

    Returns:
        The Width of the literal
    """
    if token.startswith("$"):
        return {3: Width.ONE_BYTE, 5: Width.TWO_BYTE}.get(len(token), Width.UNKNOWN)

    if token.startswith("%"):
        return {9: Width.ONE_BYTE, 17: Width.TWO_BYTE}.get(len(token), Width.UNKNOWN)

    if _is_octal_form(token):
        return Width.ONE_BYTE if len(token) == 4 else Width.TWO_BYTE

    if _is_decimal(token):
        return Width.ONE_BYTE if int(token) <= 0xFF else Width.TWO_BYTE

    return Width.UNKNOWN


def decode_literal(
    token: str,
    location: Optional[SourceLocation] = None,
    source_line: Optional[str] = None,
) -> ByteValue:
    """
    Decode a literal token into a ByteValue.

    One-byte literals decode into the low byte with a zero high byte.

    Args:
        token: Literal text
        location: Source location for error reporting
        source_line: Source text for error reporting

    Returns:
        The decoded ByteValue

    Raises:
        MalformedLiteral: If the token matches no literal grammar
    """
    def fail(hint: Optional[str] = None) -> MalformedLiteral:
        return MalformedLiteral(token, location=location, hint=hint,
                                source_line=source_line)

    width = classify_width(token)

    if width is Width.UNKNOWN:
        raise fail("expected $xx, $xxxx, %xxxxxxxx, 0ooo or a decimal number")

    if token.startswith("$"):
        digits = token[1:]
        if not set(digits) <= HEX_DIGITS:
            raise fail("'$' must be followed by hexadecimal digits")
        if width is Width.ONE_BYTE:
            return ByteValue(low=int(digits, 16))
        return ByteValue(low=int(digits[2:4], 16), high=int(digits[0:2], 16))

    if token.startswith("%"):
        digits = token[1:]
        if not set(digits) <= BINARY_DIGITS:
            raise fail("'%' must be followed by binary digits")
        if width is Width.ONE_BYTE:
            return ByteValue(low=int(digits, 2))
        return ByteValue(low=int(digits[8:16], 2), high=int(digits[0:8], 2))

    if _is_octal_form(token):
        value = int(token[1:], 8)
        if width is Width.ONE_BYTE:
            if value > 0xFF:
                raise fail("one-byte octal literals must not exceed 0377")
            return ByteValue(low=value)
        if value > 0xFFFF:
            raise fail("two-byte octal literals must not exceed 0177777")
        return ByteValue.from_int(value)

    value = int(token)
    if width is Width.ONE_BYTE:
        return ByteValue(low=value)
    return ByteValue(low=value % 16, high=(value // 16) & 0xFF)
