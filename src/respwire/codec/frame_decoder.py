"""Frame-level decoding.

The frame decoder pulls one wire frame at a time from a reader: a bulk
string's raw bytes, an array's declared element count or the null sentinel.
It also decodes the scalar encodings that live inside bulk strings
(booleans, integers and single characters).

The decoder is parameterized over the reader's ownership strategy: with a
:class:`~respwire.codec.reader.SliceReader` bulk-string payloads are borrowed
``memoryview`` slices, with a :class:`~respwire.codec.reader.StreamReader`
they are owned ``bytes``.
"""

from __future__ import annotations

from ..exceptions import (
    BadLengthHint,
    BadNumContent,
    DecodeError,
    EndOfInput,
    ExpectedArray,
    ExpectedBoolean,
    ExpectedChar,
    ExpectedDollarSign,
    ExpectedLF,
    ExpectedNone,
    ExpectedStarSign,
    UnbalancedTerminator,
)
from .grammar import (
    ARRAY_SIGIL,
    BULK_SIGIL,
    CR,
    FALSE_FRAME,
    LF,
    NULL,
    TRUE_FRAME,
    ArrayHeader,
    BulkString,
    Frame,
    parse_char,
    parse_length_hint,
    parse_signed,
    parse_unsigned,
)
from .reader import ByteReader


class FrameDecoder:
    """Reads individual frames from a :class:`ByteReader`.

    Example:
        >>> decoder = FrameDecoder(SliceReader(b"*2\\r\\n$1\\r\\na\\r\\n$-1\\r\\n"))
        >>> decoder.read_array_header()
        2
        >>> bytes(decoder.read_bulk_string())
        b'a'
        >>> decoder.read_bulk_string() is None
        True
    """

    def __init__(self, reader: ByteReader) -> None:
        self.reader = reader
        self.config = reader.config

    @property
    def offset(self) -> int:
        return self.reader.offset

    def _expect_sigil(self, sigil: int, error: type[DecodeError]) -> None:
        if self.reader.peek(1)[0] != sigil:
            raise error(offset=self.reader.offset)
        self.reader.consume(1)

    def read_length_hint(self) -> int | None:
        """Read a length-hint line.

        Returns:
            The length, or None for the ``-1`` null hint

        Raises:
            BadLengthHint: If the line is not ``-1`` or a decimal within
                ``config.max_length_hint``
        """
        start = self.reader.offset
        line = self.reader.read_line()
        return parse_length_hint(line, self.config.max_length_hint, offset=start)

    def read_bulk_string(self) -> bytes | memoryview | None:
        """Read a bulk string.

        Returns:
            The payload bytes, or None for the null bulk string

        Raises:
            ExpectedDollarSign: If the next byte is not ``$``
            ExpectedLF: If the byte after CR is not LF
            UnbalancedTerminator: If the payload is not followed by CR
        """
        self._expect_sigil(BULK_SIGIL, ExpectedDollarSign)
        start = self.reader.offset
        length = self.read_length_hint()
        if length is None:
            return None
        if length > self.config.max_bulk_length:
            raise BadLengthHint(
                f"bulk string of {length} bytes exceeds limit {self.config.max_bulk_length}",
                offset=start,
            )

        start = self.reader.offset
        body = self.reader.read_exact(length + 2)
        if body[length + 1] != LF:
            raise ExpectedLF(offset=start + length + 1)
        if body[length] != CR:
            raise UnbalancedTerminator(offset=start + length)
        return body[:length]

    def read_array_header(self, *, on_null: type[DecodeError] = ExpectedArray) -> int:
        """Read an array header and return its element count.

        There is no null array: a ``*-1`` header raises ``on_null``.

        Raises:
            ExpectedStarSign: If the next byte is not ``*``
        """
        self._expect_sigil(ARRAY_SIGIL, ExpectedStarSign)
        start = self.reader.offset
        count = self.read_length_hint()
        if count is None:
            raise on_null(offset=start)
        return count

    def read_boolean(self) -> bool:
        """Read one of the two literal boolean frames.

        Raises:
            ExpectedBoolean: If the input is neither ``$4\\r\\ntrue\\r\\n`` nor
                ``$5\\r\\nfalse\\r\\n``
        """
        for literal, value in ((TRUE_FRAME, True), (FALSE_FRAME, False)):
            if self.reader.starts_with(literal):
                self.reader.consume(len(literal))
                return value

        # input ending inside a literal is truncation
        for literal in (TRUE_FRAME, FALSE_FRAME):
            if self.reader.starts_with(literal, partial=True):
                raise EndOfInput(offset=self.reader.offset)
        raise ExpectedBoolean(offset=self.reader.offset)

    def read_unsigned(self, bits: int = 64) -> int:
        start = self.reader.offset
        content = self.read_bulk_string()
        if content is None:
            raise BadNumContent(offset=start)
        return parse_unsigned(content, bits, offset=start)

    def read_signed(self, bits: int = 64) -> int:
        start = self.reader.offset
        content = self.read_bulk_string()
        if content is None:
            raise BadNumContent(offset=start)
        return parse_signed(content, bits, offset=start)

    def read_char(self) -> str:
        start = self.reader.offset
        content = self.read_bulk_string()
        if content is None:
            raise ExpectedChar(offset=start)
        return parse_char(content, offset=start)

    def read_null(self) -> None:
        """Read a null bulk string.

        Raises:
            ExpectedNone: If a bulk string with content is found instead
        """
        start = self.reader.offset
        if self.read_bulk_string() is not None:
            raise ExpectedNone(offset=start)

    def next_frame(self) -> Frame:
        """Read whichever frame comes next.

        Raises:
            ExpectedDollarSign: If the next byte starts neither frame kind
        """
        if self.reader.peek(1)[0] == ARRAY_SIGIL:
            return ArrayHeader(self.read_array_header())

        content = self.read_bulk_string()
        if content is None:
            return NULL
        return BulkString(bytes(content))
