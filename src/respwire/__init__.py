"""respwire: Shape-driven codec for a length-prefixed wire format

A Python library that maps generic values (booleans, integers, characters,
byte strings, absence, sequences, named records and tagged variants) onto a
Redis-style bulk-string / array-header wire format and back. There is no
compiled-in schema: for every value the caller declares the shape it expects
and the decoder validates the wire bytes against it.

Key Features:
- One-shot decode from a buffer with zero-copy byte strings
- Incremental decode from a binary stream with byte-offset tracking
- Lazy iteration over back-to-back top-level values
- Pydantic-based record modeling

Quick Start:
    >>> from respwire import RecordModel, UInt, encode, decode
    >>>
    >>> class Test(RecordModel):
    ...     value: int = UInt(bits=32)
    >>>
    >>> data = encode(Test(value=1))
    >>> data
    b'*2\\r\\n$4\\r\\nTest\\r\\n$1\\r\\n1\\r\\n'
    >>> decode(Test, data)
    Test(value=1)

Shapes can also be declared by hand:
    >>> from respwire import RecordShape, U32, decode_one
    >>> decode_one(data, RecordShape("Test", (("value", U32),)))
    Record(name='Test', fields=(1,), field_names=('value',))
"""

from __future__ import annotations

from .codec import (
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
    NO_MORE,
    STR,
    U8,
    U16,
    U32,
    U64,
    UNIT,
    Builder,
    ByteReader,
    Case,
    CaseKind,
    DecodeEngine,
    ElementAccess,
    FrameDecoder,
    FrameEncoder,
    IgnoredShape,
    MapShape,
    OptionShape,
    RecordShape,
    Scalar,
    ScalarKind,
    SequenceShape,
    Shape,
    SliceReader,
    StreamReader,
    TupleShape,
    ValueIterator,
    VariantAccess,
    VariantShape,
    decode_one,
    decode_stream,
    encode_one,
    iterate,
    newtype_case,
    struct_case,
    tuple_case,
    unit_case,
)
from .config import DEFAULT_CONFIG, CodecConfig
from .exceptions import (
    BadLengthHint,
    BadNumContent,
    DecodeError,
    EncodeError,
    EndOfInput,
    ExpectedArray,
    ExpectedBoolean,
    ExpectedChar,
    ExpectedDollarSign,
    ExpectedLF,
    ExpectedMoreBulkString,
    ExpectedNone,
    ExpectedStarSign,
    FormatError,
    IoError,
    MismatchedLengthHint,
    MismatchedName,
    NestingTooDeep,
    RespwireError,
    SchemaError,
    ShapeMismatch,
    TrailingBytes,
    UnbalancedTerminator,
    UnsupportedTypeError,
)
from .models import Int, RecordModel, UInt, decode, encode, record_shape, shape_for
from .values import Record, Variant

__version__ = "0.1.0"

__all__ = [
    # Core API
    "encode_one",
    "decode_one",
    "decode_stream",
    "iterate",
    # Models
    "RecordModel",
    "UInt",
    "Int",
    "encode",
    "decode",
    "shape_for",
    "record_shape",
    # Values
    "Record",
    "Variant",
    # Engine pieces
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
    # Shapes
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
    # Config
    "CodecConfig",
    "DEFAULT_CONFIG",
    # Exceptions
    "RespwireError",
    "SchemaError",
    "EncodeError",
    "DecodeError",
    "EndOfInput",
    "IoError",
    "TrailingBytes",
    "FormatError",
    "ExpectedDollarSign",
    "ExpectedStarSign",
    "ExpectedLF",
    "UnbalancedTerminator",
    "BadLengthHint",
    "BadNumContent",
    "ExpectedBoolean",
    "ExpectedChar",
    "ShapeMismatch",
    "MismatchedName",
    "MismatchedLengthHint",
    "ExpectedArray",
    "ExpectedNone",
    "ExpectedMoreBulkString",
    "UnsupportedTypeError",
    "NestingTooDeep",
    # Version
    "__version__",
]
