"""Length-prefixed wire codec for respwire.

This module provides encoding and decoding between generic values and the
bulk-string / array-header wire format, driven by caller-declared shapes.
"""

from __future__ import annotations

from .builder import NO_MORE, Builder, ElementAccess, VariantAccess
from .decoder import DecodeEngine, decode_one, decode_stream
from .encoder import FrameEncoder, encode_one
from .frame_decoder import FrameDecoder
from .iterator import ValueIterator, iterate
from .reader import ByteReader, SliceReader, StreamReader
from .shapes import (
    BOOL,
    BYTES,
    CHAR,
    F32,
    F64,
    I8,
    I16,
    I32,
    I64,
    IGNORED,
    STR,
    U8,
    U16,
    U32,
    U64,
    UNIT,
    Case,
    CaseKind,
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
    newtype_case,
    struct_case,
    tuple_case,
    unit_case,
)

__all__ = [
    "encode_one",
    "decode_one",
    "decode_stream",
    "iterate",
    "DecodeEngine",
    "FrameDecoder",
    "FrameEncoder",
    "ValueIterator",
    "ByteReader",
    "SliceReader",
    "StreamReader",
    "Builder",
    "ElementAccess",
    "VariantAccess",
    "NO_MORE",
    "Shape",
    "Scalar",
    "ScalarKind",
    "OptionShape",
    "SequenceShape",
    "TupleShape",
    "RecordShape",
    "VariantShape",
    "MapShape",
    "IgnoredShape",
    "Case",
    "CaseKind",
    "unit_case",
    "newtype_case",
    "tuple_case",
    "struct_case",
    "BOOL",
    "U8",
    "U16",
    "U32",
    "U64",
    "I8",
    "I16",
    "I32",
    "I64",
    "CHAR",
    "BYTES",
    "STR",
    "UNIT",
    "F32",
    "F64",
    "IGNORED",
]
