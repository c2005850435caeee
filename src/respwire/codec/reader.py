"""Buffering readers.

A reader owns a byte source and exposes the small set of lookahead and
consumption primitives the frame decoder needs, while tracking the cumulative
byte offset. Two ownership strategies share one interface:

- :class:`SliceReader` borrows an in-memory buffer. ``read_exact`` returns
  zero-copy ``memoryview`` slices whose lifetime is tied to that buffer.
- :class:`StreamReader` owns its results. It pulls from a binary file-like
  object and never reads further ahead than the current primitive requires,
  so the stream can be handed to another reader afterwards without losing data.

Blocking behaviour is entirely that of the underlying source.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import BinaryIO

from ..config import DEFAULT_CONFIG, CodecConfig
from ..exceptions import BadLengthHint, EndOfInput, IoError
from .grammar import LF, check_terminator

logger = logging.getLogger(__name__)


class ByteReader(ABC):
    """Lookahead reader with offset tracking.

    The offset counts bytes consumed since the reader was attached to its
    source. It never decreases.
    """

    def __init__(self, config: CodecConfig = DEFAULT_CONFIG) -> None:
        self.config = config
        self._offset = 0

    @property
    def offset(self) -> int:
        """Number of bytes consumed so far."""
        return self._offset

    @abstractmethod
    def peek(self, n: int) -> bytes:
        """Return the next ``n`` unconsumed bytes without advancing.

        Raises:
            EndOfInput: If fewer than ``n`` bytes are available
        """

    @abstractmethod
    def consume(self, n: int) -> None:
        """Advance past ``n`` bytes that were already peeked."""

    @abstractmethod
    def read_exact(self, n: int) -> bytes | memoryview:
        """Read and return exactly ``n`` bytes.

        Raises:
            EndOfInput: If the source ends first
            IoError: If the underlying source fails
        """

    @abstractmethod
    def _line_end(self, limit: int) -> int:
        """Return the index of the next LF within ``limit`` unconsumed bytes, or -1.

        Raises:
            EndOfInput: If the source ends before an LF or ``limit`` bytes
        """

    def next_byte(self) -> int:
        """Consume and return a single byte."""
        value = self.peek(1)[0]
        self.consume(1)
        return value

    def at_end(self) -> bool:
        """Return True if no unconsumed bytes remain."""
        try:
            self.peek(1)
        except EndOfInput:
            return True
        return False

    def starts_with(self, literal: bytes, *, partial: bool = False) -> bool:
        """Return True if the unconsumed input begins with ``literal``.

        Bytes are examined one at a time, so a mismatch never causes more
        lookahead than the mismatching byte. Input ending early is a mismatch
        unless ``partial`` is set, in which case a proper prefix of
        ``literal`` counts as a match.
        """
        for n in range(1, len(literal) + 1):
            try:
                head = self.peek(n)
            except EndOfInput:
                return partial
            if head[n - 1] != literal[n - 1]:
                return False
        return True

    def read_line(self, limit: int | None = None) -> bytes:
        """Read bytes up to and including the next LF.

        Args:
            limit: Maximum line length including CRLF
                (default ``config.max_line_length``)

        Raises:
            EndOfInput: If the source ends before LF
            UnbalancedTerminator: If the line is shorter than 2 bytes or LF is
                not preceded by CR
            BadLengthHint: If no LF appears within ``limit`` bytes
        """
        if limit is None:
            limit = self.config.max_line_length

        start = self._offset
        index = self._line_end(limit)
        if index < 0:
            raise BadLengthHint(f"no line terminator within {limit} bytes", offset=start)

        line = self.peek(index + 1)
        check_terminator(line, offset=start)
        self.consume(index + 1)
        return line


class SliceReader(ByteReader):
    """Borrowing reader over an in-memory buffer.

    Example:
        >>> reader = SliceReader(b"$2\\r\\nhi\\r\\n")
        >>> reader.read_line()
        b'$2\\r\\n'
        >>> bytes(reader.read_exact(2))
        b'hi'
    """

    def __init__(self, data: bytes | bytearray | memoryview, config: CodecConfig = DEFAULT_CONFIG) -> None:
        super().__init__(config)
        self._data = data if isinstance(data, (bytes, bytearray)) else bytes(data)
        self._view = memoryview(self._data)

    def remaining(self) -> int:
        """Return the number of unconsumed bytes."""
        return len(self._data) - self._offset

    def peek(self, n: int) -> bytes:
        if self.remaining() < n:
            raise EndOfInput(offset=self._offset)
        return bytes(self._view[self._offset : self._offset + n])

    def consume(self, n: int) -> None:
        self._offset += n

    def read_exact(self, n: int) -> memoryview:
        if self.remaining() < n:
            raise EndOfInput(offset=self._offset)
        chunk = self._view[self._offset : self._offset + n]
        self._offset += n
        return chunk

    def _line_end(self, limit: int) -> int:
        index = self._data.find(b"\n", self._offset, self._offset + limit)
        if index >= 0:
            return index - self._offset
        if self.remaining() < limit:
            raise EndOfInput(offset=len(self._data))
        return -1


class StreamReader(ByteReader):
    """Owning reader over a binary stream.

    The stream must provide ``read(n)`` and ``readline(n)``, as every
    ``io`` binary stream and ``socket.makefile("rb")`` does. ``read`` returning
    ``None`` (a non-blocking source with no data ready) surfaces as ``IoError``.

    Example:
        >>> import io
        >>> reader = StreamReader(io.BytesIO(b"*0\\r\\n"))
        >>> reader.read_line()
        b'*0\\r\\n'
        >>> reader.offset
        4
    """

    def __init__(self, stream: BinaryIO, config: CodecConfig = DEFAULT_CONFIG) -> None:
        super().__init__(config)
        self._stream = stream
        self._buffer = bytearray()
        logger.debug("Attached stream reader to %r", stream)

    def _pull(self, method: str, n: int) -> bytes:
        try:
            chunk = getattr(self._stream, method)(n)
        except EOFError as e:
            raise EndOfInput(offset=self._offset + len(self._buffer)) from e
        except OSError as e:
            raise IoError(str(e), offset=self._offset + len(self._buffer)) from e

        if chunk is None:
            err = BlockingIOError("source has no data ready")
            raise IoError(str(err), offset=self._offset + len(self._buffer)) from err
        return chunk

    def _fill(self, n: int) -> bool:
        """Buffer at least ``n`` bytes. Returns False if the source ends first."""
        while len(self._buffer) < n:
            chunk = self._pull("read", n - len(self._buffer))
            if not chunk:
                return False
            self._buffer += chunk
        return True

    def peek(self, n: int) -> bytes:
        if not self._fill(n):
            raise EndOfInput(offset=self._offset + len(self._buffer))
        return bytes(self._buffer[:n])

    def consume(self, n: int) -> None:
        del self._buffer[:n]
        self._offset += n

    def read_exact(self, n: int) -> bytes:
        data = self.peek(n)
        self.consume(n)
        return data

    def _line_end(self, limit: int) -> int:
        index = self._buffer.find(b"\n", 0, limit)
        while index < 0 and len(self._buffer) < limit:
            chunk = self._pull("readline", limit - len(self._buffer))
            if not chunk:
                raise EndOfInput(offset=self._offset + len(self._buffer))
            self._buffer += chunk
            if chunk[-1] == LF:
                index = len(self._buffer) - 1
        return index
