"""Shape-driven decoder.

This module provides the decode engine and the one-shot / streaming decode
functions. The engine has no compiled-in schema: for every value the caller
declares the expected shape, the engine consumes exactly the matching frames,
validates names and counts, and hands the parts to a builder.

Wire layout of composites:

- sequence: ``*<N>`` followed by N element frames
- record:   ``*<fields+1>`` + bulk-string name + one frame per field
- variant:  ``*<arity+1>`` + bulk-string tag + one frame per payload value
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, BinaryIO, Iterator, Optional

from ..config import DEFAULT_CONFIG, CodecConfig
from ..exceptions import (
    DecodeError,
    ExpectedMoreBulkString,
    MismatchedLengthHint,
    MismatchedName,
    NestingTooDeep,
    TrailingBytes,
    UnsupportedTypeError,
)
from .builder import DEFAULT_BUILDER, Builder, ElementAccess, VariantAccess
from .frame_decoder import FrameDecoder
from .grammar import ARRAY_SIGIL, BULK_SIGIL, NULL_BULK, ArrayHeader
from .reader import ByteReader, SliceReader, StreamReader
from .shapes import (
    IgnoredShape,
    MapShape,
    OptionShape,
    RecordShape,
    Scalar,
    ScalarKind,
    SequenceShape,
    Shape,
    TupleShape,
    VariantShape,
)

logger = logging.getLogger(__name__)


class DecodeEngine:
    """Decodes values of caller-declared shapes from a reader.

    The engine holds no state beyond the reader position and the current
    nesting depth, so one instance can decode any number of consecutive
    values from the same reader. It must not be shared between threads.

    Example:
        >>> engine = DecodeEngine(SliceReader(b"$4\\r\\ntrue\\r\\n$1\\r\\n7\\r\\n"))
        >>> engine.decode(BOOL), engine.decode(U8)
        (True, 7)
        >>> engine.offset
        17
    """

    def __init__(self, reader: ByteReader) -> None:
        self.reader = reader
        self.frames = FrameDecoder(reader)
        self.config = reader.config
        self._depth = 0

    @property
    def offset(self) -> int:
        return self.reader.offset

    def decode(self, shape: Shape, builder: Optional[Builder] = None) -> Any:
        """Decode one top-level value.

        Args:
            shape: Expected shape of the value
            builder: Builder to materialize the result (default plain Python values)

        Raises:
            DecodeError: If the wire data is malformed or does not match ``shape``
        """
        start = self.reader.offset
        try:
            return self.decode_value(shape, builder or DEFAULT_BUILDER)
        except DecodeError as e:
            logger.debug("Decode of %s starting at byte %d failed: %s", type(shape).__name__, start, e)
            raise

    def decode_value(self, shape: Shape, builder: Builder) -> Any:
        """Decode a value nested inside the current one."""
        if isinstance(shape, Scalar):
            return self._decode_scalar(shape, builder)

        if isinstance(shape, IgnoredShape):
            self._skip()
            return None

        if isinstance(shape, MapShape):
            raise UnsupportedTypeError("map is not supported", offset=self.offset)

        with self._nested():
            if isinstance(shape, OptionShape):
                return self._decode_option(shape, builder)
            if isinstance(shape, (SequenceShape, TupleShape)):
                return self._decode_sequence(shape, builder)
            if isinstance(shape, RecordShape):
                return self._decode_record(shape, builder)
            if isinstance(shape, VariantShape):
                return self._decode_variant(shape, builder)

        raise TypeError(f"not a shape: {shape!r}")

    @contextmanager
    def _nested(self) -> Iterator[None]:
        if self._depth >= self.config.max_depth:
            raise NestingTooDeep(offset=self.offset)
        self._depth += 1
        try:
            yield
        finally:
            self._depth -= 1

    def _decode_scalar(self, shape: Scalar, builder: Builder) -> Any:
        kind = shape.kind
        frames = self.frames

        if kind is ScalarKind.BOOL:
            return builder.build_bool(frames.read_boolean())
        if kind is ScalarKind.UINT:
            return builder.build_int(frames.read_unsigned(shape.bits), shape)
        if kind is ScalarKind.INT:
            return builder.build_int(frames.read_signed(shape.bits), shape)
        if kind is ScalarKind.CHAR:
            return builder.build_char(frames.read_char())
        if kind is ScalarKind.UNIT:
            frames.read_null()
            return builder.build_unit()
        if kind is ScalarKind.FLOAT:
            raise UnsupportedTypeError("float is not supported", offset=self.offset)

        start = self.offset
        content = frames.read_bulk_string()
        if content is None:
            raise ExpectedMoreBulkString(offset=start)
        if kind is ScalarKind.BYTES:
            return builder.build_bytes(content)

        try:
            text = bytes(content).decode("utf-8")
        except UnicodeDecodeError as e:
            raise DecodeError(f"invalid UTF-8 in string: {e}", offset=start) from e
        return builder.build_str(text)

    def _decode_option(self, shape: OptionShape, builder: Builder) -> Any:
        if self.reader.starts_with(NULL_BULK):
            self.reader.consume(len(NULL_BULK))
            return builder.build_none()
        return builder.build_some(self.decode_value(shape.inner, builder))

    def _decode_sequence(self, shape: SequenceShape | TupleShape, builder: Builder) -> Any:
        start = self.offset
        count = self.frames.read_array_header()
        if shape.length is not None and count != shape.length:
            raise MismatchedLengthHint(
                f"array of {count} elements, expected {shape.length}", offset=start
            )

        if isinstance(shape, TupleShape):
            access = ElementAccess(self, builder, count, shapes=shape.elements)
        else:
            access = ElementAccess(self, builder, count, element=shape.element)
        return builder.build_sequence(shape, access)

    def _decode_record(self, shape: RecordShape, builder: Builder) -> Any:
        start = self.offset
        count = self.frames.read_array_header(on_null=MismatchedLengthHint)
        if count != shape.field_count + 1:
            raise MismatchedLengthHint(
                f"record {shape.name} has {shape.field_count} fields, wire announces {count - 1}",
                offset=start,
            )

        name_offset = self.offset
        name = self.frames.read_bulk_string()
        if name is None or bytes(name) != shape.name.encode("utf-8"):
            raise MismatchedName(offset=name_offset)

        access = ElementAccess(self, builder, shape.field_count, shapes=[s for _, s in shape.fields])
        return builder.build_record(shape, access)

    def _decode_variant(self, shape: VariantShape, builder: Builder) -> Any:
        start = self.offset
        count = self.frames.read_array_header(on_null=MismatchedLengthHint)
        if count == 0:
            raise MismatchedLengthHint(f"variant {shape.name} without a tag", offset=start)

        tag_offset = self.offset
        raw_tag = self.frames.read_bulk_string()
        if raw_tag is None:
            raise MismatchedName(offset=tag_offset)
        try:
            tag = bytes(raw_tag).decode("utf-8")
        except UnicodeDecodeError as e:
            raise MismatchedName(offset=tag_offset) from e

        remaining = count - 1
        if remaining and self.reader.peek(1)[0] not in (BULK_SIGIL, ARRAY_SIGIL):
            raise ExpectedMoreBulkString(offset=self.offset)

        access = VariantAccess(self, builder, tag, remaining, offset=tag_offset)
        return builder.build_variant(shape, access)

    def _skip(self) -> None:
        pending = 1
        while pending:
            frame = self.frames.next_frame()
            pending -= 1
            if isinstance(frame, ArrayHeader):
                pending += frame.count


def decode_one(
    data: bytes | bytearray | memoryview | BinaryIO,
    shape: Shape,
    builder: Optional[Builder] = None,
    *,
    config: CodecConfig = DEFAULT_CONFIG,
) -> Any:
    """Decode exactly one value from an in-memory buffer or a stream.

    From a buffer, byte strings in the result borrow from ``data``
    (``memoryview`` slices) unless the builder copies them, and the buffer
    must hold nothing after the value. From a binary stream the result owns
    its bytes and whatever follows the value stays in the stream.

    Args:
        data: Complete wire encoding of one value, or a binary stream
        shape: Expected shape of the value
        builder: Builder to materialize the result
        config: Codec limits

    Returns:
        The decoded value

    Raises:
        DecodeError: If the data is malformed or does not match ``shape``
        TrailingBytes: If bytes remain in the buffer after the value

    Examples:
        ```python
        from respwire import RecordShape, U32, decode_one

        value = decode_one(b"*2\\r\\n$4\\r\\nTest\\r\\n$1\\r\\n1\\r\\n", RecordShape("Test", (("a", U32),)))
        assert value.fields == (1,)
        ```
    """
    if not isinstance(data, (bytes, bytearray, memoryview)):
        return decode_stream(data, shape, builder, config=config)

    reader = SliceReader(data, config)
    value = DecodeEngine(reader).decode(shape, builder)
    if reader.remaining():
        raise TrailingBytes(f"{reader.remaining()} trailing bytes", offset=reader.offset)
    return value


def decode_stream(
    source: StreamReader | BinaryIO,
    shape: Shape,
    builder: Optional[Builder] = None,
    *,
    config: CodecConfig = DEFAULT_CONFIG,
) -> Any:
    """Decode the next value from a stream.

    Pass the same :class:`StreamReader` to consecutive calls to keep a
    continuous byte offset; its ``offset`` afterwards points exactly past
    the decoded value. A bare binary stream is wrapped in a new reader. The
    reader never reads beyond the value, so bytes that follow stay in the stream.

    Raises:
        EndOfInput: If the stream ends inside the value
        DecodeError: If the data is malformed or does not match ``shape``
    """
    reader = source if isinstance(source, StreamReader) else StreamReader(source, config)
    return DecodeEngine(reader).decode(shape, builder)
