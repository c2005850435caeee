"""Wire grammar primitives.

This module holds the constants of the wire format, the frame data model and
pure functions that recognize or produce individual wire primitives. Nothing
here touches a reader; the frame decoder and the encoder build on these.

Wire grammar (ASCII, CRLF-terminated lines):

    Bulk string        $<L>\\r\\n<L bytes>\\r\\n
    Null bulk string   $-1\\r\\n
    Array header       *<N>\\r\\n
    Boolean            $4\\r\\ntrue\\r\\n  /  $5\\r\\nfalse\\r\\n
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from ..exceptions import (
    BadLengthHint,
    BadNumContent,
    ExpectedChar,
    UnbalancedTerminator,
)

CR = 0x0D
LF = 0x0A
CRLF = b"\r\n"

BULK_SIGIL = ord("$")
ARRAY_SIGIL = ord("*")

NULL_HINT = b"-1\r\n"
NULL_BULK = b"$-1\r\n"
TRUE_FRAME = b"$4\r\ntrue\r\n"
FALSE_FRAME = b"$5\r\nfalse\r\n"


@dataclass(frozen=True)
class BulkString:
    """A length-prefixed byte string frame."""

    data: bytes


@dataclass(frozen=True)
class NullBulk:
    """The null bulk string ``$-1\\r\\n``, i.e. absence."""


@dataclass(frozen=True)
class ArrayHeader:
    """An array header announcing ``count`` following frames."""

    count: int


Frame = Union[BulkString, NullBulk, ArrayHeader]

NULL = NullBulk()


def check_terminator(line: bytes, *, offset: int | None = None) -> None:
    """Verify that an LF-terminated line ends with CRLF.

    Args:
        line: Bytes up to and including LF
        offset: Byte offset of the line start, for diagnostics

    Raises:
        UnbalancedTerminator: If the line is shorter than 2 bytes or the byte
            before LF is not CR
    """
    if len(line) < 2 or line[-2] != CR:
        raise UnbalancedTerminator(offset=offset)


def parse_length_hint(line: bytes, limit: int, *, offset: int | None = None) -> int | None:
    """Parse the body of a length-hint line (everything after the sigil).

    A line starting with ``-`` must be exactly ``-1\\r\\n`` and means absent.
    Otherwise every byte before CRLF must be an ASCII digit. An empty digit
    run reads as zero.

    Args:
        line: Line bytes including the trailing CRLF
        limit: Largest accepted value
        offset: Byte offset of the line start, for diagnostics

    Returns:
        The decoded length, or None for the null hint

    Raises:
        BadLengthHint: If the line is not a null hint or a decimal within ``limit``
    """
    if line[:1] == b"-":
        if line == NULL_HINT:
            return None
        raise BadLengthHint(offset=offset)

    digits = line[:-2]
    if not digits:
        return 0
    if not digits.isdigit():
        raise BadLengthHint(offset=offset)

    value = int(digits)
    if value > limit:
        raise BadLengthHint(f"length hint {value} exceeds limit {limit}", offset=offset)
    return value


def parse_unsigned(content: bytes, bits: int = 64, *, offset: int | None = None) -> int:
    """Parse bulk-string content as an unsigned decimal integer.

    Raises:
        BadNumContent: If the content is not all ASCII digits or does not fit
            in ``bits`` bits
    """
    content = bytes(content)
    if not content or not content.isdigit():
        raise BadNumContent(offset=offset)

    value = int(content)
    if value >= 1 << bits:
        raise BadNumContent(f"{value} does not fit in u{bits}", offset=offset)
    return value


def parse_signed(content: bytes, bits: int = 64, *, offset: int | None = None) -> int:
    """Parse bulk-string content as a signed decimal integer.

    One leading ``-`` is allowed; the remaining bytes must be ASCII digits.

    Raises:
        BadNumContent: If the content is malformed or does not fit in ``bits``
            bits (two's complement range)
    """
    content = bytes(content)
    negative = content[:1] == b"-"
    digits = content[1:] if negative else content
    if not digits or not digits.isdigit():
        raise BadNumContent(offset=offset)

    value = -int(digits) if negative else int(digits)
    bound = 1 << (bits - 1)
    if not -bound <= value < bound:
        raise BadNumContent(f"{value} does not fit in i{bits}", offset=offset)
    return value


def parse_char(content: bytes, *, offset: int | None = None) -> str:
    """Parse bulk-string content as exactly one Unicode code point.

    Raises:
        ExpectedChar: If the content is not valid UTF-8 or is not a single
            code point
    """
    try:
        text = bytes(content).decode("utf-8")
    except UnicodeDecodeError as e:
        raise ExpectedChar(offset=offset) from e

    if len(text) != 1:
        raise ExpectedChar(offset=offset)
    return text


def format_bulk_string(data: bytes | bytearray | memoryview) -> bytes:
    """Return the bulk-string frame for ``data``.

    A memoryview over wider items or several dimensions is copied to bytes
    first, so the length prefix counts bytes rather than items.
    """
    if isinstance(data, memoryview) and (data.itemsize != 1 or data.ndim != 1 or not data.c_contiguous):
        data = data.tobytes()
    return b"$%d\r\n%b\r\n" % (len(data), data)


def format_array_header(count: int) -> bytes:
    """Return the array-header frame announcing ``count`` elements."""
    return b"*%d\r\n" % count


def format_integer(value: int) -> bytes:
    """Return the bulk-string frame for a decimal integer."""
    return format_bulk_string(b"%d" % value)
