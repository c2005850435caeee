"""Lazy decoding of back-to-back top-level values."""

from __future__ import annotations

import logging
from typing import Any, BinaryIO, Iterator, Optional

from ..config import DEFAULT_CONFIG, CodecConfig
from ..exceptions import DecodeError, EndOfInput
from .builder import Builder
from .decoder import DecodeEngine
from .reader import ByteReader, StreamReader
from .shapes import Shape

logger = logging.getLogger(__name__)


class ValueIterator:
    """Iterates over consecutive top-level values of one shape.

    Before each value one byte is peeked. End of input at that point ends the
    iteration cleanly; end of input anywhere inside a value is an error. A
    decode error is raised from ``next()`` once, after which the iterator is
    exhausted. Nothing is read ahead of the value being decoded.

    Example:
        >>> import io
        >>> stream = io.BytesIO(b"*1\\r\\n$4\\r\\nUnit\\r\\n*2\\r\\n$7\\r\\nNewtype\\r\\n$1\\r\\n1\\r\\n")
        >>> shape = VariantShape("Test", {"Unit": unit_case(), "Newtype": newtype_case(U32)})
        >>> [v.tag for v in ValueIterator(StreamReader(stream), shape)]
        ['Unit', 'Newtype']
    """

    def __init__(self, reader: ByteReader, shape: Shape, builder: Optional[Builder] = None) -> None:
        self.engine = DecodeEngine(reader)
        self.shape = shape
        self.builder = builder
        self._done = False

    @property
    def offset(self) -> int:
        return self.engine.offset

    def __iter__(self) -> ValueIterator:
        return self

    def __next__(self) -> Any:
        if self._done:
            raise StopIteration

        try:
            self.engine.reader.peek(1)
        except EndOfInput:
            logger.debug("Value stream exhausted at byte %d", self.offset)
            self._done = True
            raise StopIteration from None
        except DecodeError:
            self._done = True
            raise

        try:
            return self.engine.decode(self.shape, self.builder)
        except DecodeError:
            self._done = True
            raise


def iterate(
    source: ByteReader | BinaryIO,
    shape: Shape,
    builder: Optional[Builder] = None,
    *,
    config: CodecConfig = DEFAULT_CONFIG,
) -> Iterator[Any]:
    """Lazily decode every value remaining in ``source``.

    Args:
        source: A reader, or a binary stream to wrap in a :class:`StreamReader`
        shape: Shape of every value
        builder: Builder to materialize results
        config: Codec limits, used when wrapping a bare stream

    Returns:
        An iterator yielding one decoded value per top-level frame

    Examples:
        ```python
        import io
        from respwire import U32, iterate

        stream = io.BytesIO(b"$1\\r\\n1\\r\\n$1\\r\\n2\\r\\n")
        assert list(iterate(stream, U32)) == [1, 2]
        ```
    """
    reader = source if isinstance(source, ByteReader) else StreamReader(source, config)
    return ValueIterator(reader, shape, builder)
