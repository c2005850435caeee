"""Encode and decode Pydantic models.

This module provides the encode() / decode() pair for model classes. Shapes
are derived from the model's annotations by :func:`~respwire.models.schema.shape_for`.
"""

from __future__ import annotations

from typing import Any, Type, TypeVar

from pydantic import BaseModel, ValidationError

from ..codec.builder import Builder
from ..codec.decoder import decode_one
from ..codec.encoder import encode_one
from ..config import DEFAULT_CONFIG, CodecConfig
from ..exceptions import DecodeError
from .schema import shape_for

T = TypeVar("T")


class ModelBuilder(Builder):
    """Builder that copies byte strings so models never hold borrowed buffers."""

    def build_bytes(self, value: bytes | memoryview) -> Any:
        return bytes(value)


MODEL_BUILDER = ModelBuilder()


def encode(message: BaseModel, *, config: CodecConfig = DEFAULT_CONFIG) -> bytes:
    """Encode a Pydantic model as a record.

    Args:
        message: Model instance to encode
        config: Codec limits

    Returns:
        Wire encoding of the record

    Raises:
        EncodeError: If a field value cannot be encoded
    """
    return encode_one(message, config=config)


def decode(message_class: Type[T], data: bytes, *, config: CodecConfig = DEFAULT_CONFIG) -> T:
    """Decode wire data into an instance of a model class (or enum, or any supported annotation).

    Args:
        message_class: Pydantic model class (or other supported annotation) to decode to
        data: Complete wire encoding of one value
        config: Codec limits

    Returns:
        Decoded instance

    Raises:
        SchemaError: If the class has no wire representation
        DecodeError: If the data is malformed, does not match the class, or
            fails model validation

    Examples:
        ```python
        from respwire import RecordModel, UInt, decode, encode

        class Status(RecordModel):
            vehicle_id: int = UInt(bits=8)
            active: bool

        data = encode(Status(vehicle_id=42, active=True))
        assert decode(Status, data) == Status(vehicle_id=42, active=True)
        ```
    """
    shape = shape_for(message_class)
    try:
        return decode_one(data, shape, MODEL_BUILDER, config=config)
    except ValidationError as e:
        raise DecodeError(f"Failed to construct {getattr(message_class, '__name__', message_class)}: {e}") from e
