"""Frame encoder.

This module provides the encode_one() function that converts a value to its
wire encoding. The encoder mirrors the decode engine but needs no shape
declaration: every value already knows its own shape.

Value mapping:

- ``bool``: ``$4\\r\\ntrue\\r\\n`` / ``$5\\r\\nfalse\\r\\n``
- ``int``: decimal bulk string
- ``str``: UTF-8 bulk string (a one-character string is a char)
- ``bytes``, ``bytearray``, ``memoryview``: bulk string, no escaping
- ``None``: null bulk string ``$-1\\r\\n`` (absence and unit alike)
- ``list``, ``tuple`` and other sized iterables: ``*<N>`` + N elements
- :class:`~respwire.values.Record` and pydantic models: ``*<fields+1>`` + name + fields
- :class:`~respwire.values.Variant` and ``enum.Enum`` members: ``*<arity+1>`` + tag + payload
- ``float`` and mappings: ``UnsupportedTypeError``
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Iterable, Mapping, Sized
from typing import Any

from pydantic import BaseModel

from ..config import DEFAULT_CONFIG, CodecConfig
from ..exceptions import EncodeError, NestingTooDeep, UnsupportedTypeError
from ..values import Record, Variant
from .grammar import (
    FALSE_FRAME,
    NULL_BULK,
    TRUE_FRAME,
    format_array_header,
    format_bulk_string,
    format_integer,
)

logger = logging.getLogger(__name__)


class FrameEncoder:
    """Accumulates the frames of one or more values.

    Example:
        >>> encoder = FrameEncoder()
        >>> encoder.encode(True)
        >>> encoder.encode([1, 2])
        >>> encoder.getvalue()
        b'$4\\r\\ntrue\\r\\n*2\\r\\n$1\\r\\n1\\r\\n$1\\r\\n2\\r\\n'
    """

    def __init__(self, config: CodecConfig = DEFAULT_CONFIG) -> None:
        self.config = config
        self._output = bytearray()
        self._depth = 0

    def getvalue(self) -> bytes:
        """Return everything encoded so far."""
        return bytes(self._output)

    def write_bulk_string(self, data: bytes | bytearray | memoryview) -> None:
        self._output += format_bulk_string(data)

    def write_null(self) -> None:
        self._output += NULL_BULK

    def write_array_header(self, count: int) -> None:
        self._output += format_array_header(count)

    def encode(self, value: Any) -> None:
        """Append the frames for ``value``.

        Raises:
            EncodeError: If the value has no wire representation
            UnsupportedTypeError: For floats and mappings
        """
        # bool before int: bool is an int subclass
        if isinstance(value, bool):
            self._output += TRUE_FRAME if value else FALSE_FRAME
        elif value is None:
            self.write_null()
        elif isinstance(value, enum.Enum):
            self._write_composite(value.name, ())
        elif isinstance(value, int):
            self._output += format_integer(value)
        elif isinstance(value, float):
            raise UnsupportedTypeError("float is not supported")
        elif isinstance(value, str):
            self.write_bulk_string(value.encode("utf-8"))
        elif isinstance(value, (bytes, bytearray, memoryview)):
            self.write_bulk_string(value)
        elif isinstance(value, Record):
            self._write_composite(value.name, value.fields)
        elif isinstance(value, Variant):
            self._write_composite(value.tag, value.payload)
        elif isinstance(value, BaseModel):
            name = getattr(type(value), "resp_name", None) or type(value).__name__
            fields = [getattr(value, field_name) for field_name in type(value).model_fields]
            self._write_composite(name, fields)
        elif isinstance(value, Mapping):
            raise UnsupportedTypeError("map is not supported")
        elif isinstance(value, Iterable):
            if not isinstance(value, Sized):
                raise EncodeError("length of sequence can't be determined")
            self._write_sequence(value)
        else:
            raise EncodeError(f"unsupported value type {type(value).__name__}")

    def _enter(self) -> None:
        if self._depth >= self.config.max_depth:
            raise NestingTooDeep()
        self._depth += 1

    def _write_sequence(self, items: Any) -> None:
        self._enter()
        try:
            self.write_array_header(len(items))
            for item in items:
                self.encode(item)
        finally:
            self._depth -= 1

    def _write_composite(self, name: str, fields: Any) -> None:
        self._enter()
        try:
            self.write_array_header(len(fields) + 1)
            self.write_bulk_string(name.encode("utf-8"))
            for item in fields:
                self.encode(item)
        finally:
            self._depth -= 1


def encode_one(value: Any, *, config: CodecConfig = DEFAULT_CONFIG) -> bytes:
    """Encode a single value to its wire representation.

    Args:
        value: Value to encode (see module docstring for the mapping)
        config: Codec limits

    Returns:
        Encoded bytes

    Raises:
        EncodeError: If the value or a nested value cannot be encoded

    Examples:
        ```python
        from respwire import Record, encode_one

        assert encode_one(True) == b"$4\\r\\ntrue\\r\\n"
        assert encode_one(Record("Test", (1,))) == b"*2\\r\\n$4\\r\\nTest\\r\\n$1\\r\\n1\\r\\n"
        ```
    """
    encoder = FrameEncoder(config)
    try:
        encoder.encode(value)
    except EncodeError as e:
        logger.debug("Encoding %s failed: %s", type(value).__name__, e)
        raise
    return encoder.getvalue()
