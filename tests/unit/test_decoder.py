"""Unit tests for the shape-driven decoder."""

from __future__ import annotations

import io

import pytest

from respwire import (
    BOOL,
    BYTES,
    CHAR,
    F64,
    I8,
    I64,
    IGNORED,
    NO_MORE,
    STR,
    U8,
    U32,
    U64,
    UNIT,
    Builder,
    CodecConfig,
    DecodeEngine,
    MapShape,
    OptionShape,
    Record,
    RecordShape,
    SequenceShape,
    SliceReader,
    StreamReader,
    TupleShape,
    Variant,
    VariantShape,
    decode_one,
    decode_stream,
    newtype_case,
    unit_case,
)
from respwire.exceptions import (
    BadNumContent,
    DecodeError,
    EndOfInput,
    ExpectedArray,
    ExpectedDollarSign,
    ExpectedMoreBulkString,
    ExpectedNone,
    ExpectedStarSign,
    MismatchedLengthHint,
    MismatchedName,
    NestingTooDeep,
    TrailingBytes,
    UnsupportedTypeError,
)


class TestScalars:
    """Test scalar decoding."""

    def test_bool(self) -> None:
        assert decode_one(b"$4\r\ntrue\r\n", BOOL) is True
        assert decode_one(b"$5\r\nfalse\r\n", BOOL) is False

    def test_unsigned(self) -> None:
        assert decode_one(b"$2\r\n42\r\n", U32) == 42

    def test_unsigned_width(self) -> None:
        with pytest.raises(BadNumContent):
            decode_one(b"$3\r\n256\r\n", U8)

    def test_signed(self) -> None:
        assert decode_one(b"$3\r\n-42\r\n", I8) == -42
        assert decode_one(b"$20\r\n-9223372036854775808\r\n", I64) == -(2**63)

    def test_char(self) -> None:
        assert decode_one("$2\r\né\r\n".encode("utf-8"), CHAR) == "é"

    def test_str(self) -> None:
        assert decode_one(b"$5\r\nhello\r\n", STR) == "hello"

    def test_str_invalid_utf8(self) -> None:
        with pytest.raises(DecodeError, match="invalid UTF-8"):
            decode_one(b"$1\r\n\xff\r\n", STR)

    def test_bytes_borrowed(self) -> None:
        data = b"$3\r\n\x00\x01\x02\r\n"
        value = decode_one(data, BYTES)

        assert isinstance(value, memoryview)
        assert value == b"\x00\x01\x02"

    def test_null_for_non_optional_bytes(self) -> None:
        with pytest.raises(ExpectedMoreBulkString):
            decode_one(b"$-1\r\n", BYTES)

    def test_unit(self) -> None:
        assert decode_one(b"$-1\r\n", UNIT) is None

    def test_unit_with_content(self) -> None:
        with pytest.raises(ExpectedNone):
            decode_one(b"$1\r\n1\r\n", UNIT)

    def test_float_unsupported(self) -> None:
        with pytest.raises(UnsupportedTypeError, match="float"):
            decode_one(b"$3\r\n1.5\r\n", F64)

    def test_map_unsupported(self) -> None:
        with pytest.raises(UnsupportedTypeError, match="map"):
            decode_one(b"*0\r\n", MapShape(STR, U32))


class TestOption:
    """Test optional values."""

    @pytest.mark.parametrize("shape", [U32, I64, BOOL, CHAR, STR, BYTES])
    def test_absent_for_every_scalar(self, shape) -> None:
        assert decode_one(b"$-1\r\n", OptionShape(shape)) is None

    def test_present(self) -> None:
        assert decode_one(b"$1\r\n7\r\n", OptionShape(U32)) == 7

    def test_present_sequence(self) -> None:
        """Test that a short frame after an option is not mistaken for absence."""
        assert decode_one(b"*0\r\n", OptionShape(SequenceShape(U32))) == []

    def test_null_without_option(self) -> None:
        with pytest.raises(BadNumContent):
            decode_one(b"$-1\r\n", U32)


class TestSequence:
    """Test sequence decoding."""

    def test_list(self) -> None:
        data = b"*3\r\n$1\r\n1\r\n$1\r\n2\r\n$1\r\n3\r\n"
        assert decode_one(data, SequenceShape(U32)) == [1, 2, 3]

    def test_strings(self) -> None:
        data = b"*2\r\n$4\r\nTest\r\n$4\r\ntest\r\n"
        assert decode_one(data, SequenceShape(STR)) == ["Test", "test"]
        assert decode_one(data, TupleShape((STR, STR))) == ("Test", "test")

    def test_empty(self) -> None:
        assert decode_one(b"*0\r\n", SequenceShape(U32)) == []

    def test_nested(self) -> None:
        data = b"*2\r\n*1\r\n$1\r\n1\r\n*0\r\n"
        assert decode_one(data, SequenceShape(SequenceShape(U32))) == [[1], []]

    def test_known_length_mismatch(self) -> None:
        with pytest.raises(MismatchedLengthHint):
            decode_one(b"*1\r\n$1\r\n1\r\n", SequenceShape(U32, length=2))
        with pytest.raises(MismatchedLengthHint):
            decode_one(b"*1\r\n$1\r\n1\r\n", TupleShape((U32, U32)))

    def test_factory(self) -> None:
        shape = SequenceShape(U32, factory=frozenset)
        assert decode_one(b"*2\r\n$1\r\n1\r\n$1\r\n1\r\n", shape) == frozenset({1})

    def test_null_array(self) -> None:
        with pytest.raises(ExpectedArray):
            decode_one(b"*-1\r\n", SequenceShape(U32))

    def test_not_an_array(self) -> None:
        with pytest.raises(ExpectedStarSign):
            decode_one(b"$1\r\n1\r\n", SequenceShape(U32))

    def test_truncated(self) -> None:
        with pytest.raises(EndOfInput):
            decode_one(b"*2\r\n$1\r\n1\r\n", SequenceShape(U32))


class TestElementAccess:
    """Test the bounded element cursor through a custom builder."""

    def test_exhaustion_returns_no_more(self) -> None:
        seen = []

        class Greedy(Builder):
            def build_sequence(self, shape, elements):
                for _ in range(5):
                    seen.append(elements.next_element())
                return None

        decode_one(b"*2\r\n$1\r\n1\r\n$1\r\n2\r\n", SequenceShape(U32), Greedy())
        assert seen == [1, 2, NO_MORE, NO_MORE, NO_MORE]

    def test_partial_consumption_is_not_validated(self) -> None:
        """Test that leaving elements unread is the caller's responsibility."""

        class FirstOnly(Builder):
            def build_sequence(self, shape, elements):
                return elements.next_element()

        engine = DecodeEngine(SliceReader(b"*2\r\n$1\r\n1\r\n$1\r\n2\r\n"))
        assert engine.decode(SequenceShape(U32), FirstOnly()) == 1
        assert engine.offset == 11

    def test_per_element_shape(self) -> None:
        class Mixed(Builder):
            def build_sequence(self, shape, elements):
                return (elements.next_element(STR), elements.next_element(BOOL))

        data = b"*2\r\n$1\r\na\r\n$4\r\ntrue\r\n"
        assert decode_one(data, SequenceShape(STR), Mixed()) == ("a", True)


class TestRecord:
    """Test record decoding."""

    def test_record(self) -> None:
        data = b"*2\r\n$4\r\nTest\r\n$1\r\n1\r\n"
        value = decode_one(data, RecordShape("Test", (("value", U64),)))

        assert value == Record("Test", (1,))
        assert value.as_dict() == {"value": 1}

    def test_mismatched_name(self) -> None:
        data = b"*2\r\n$4\r\nTest\r\n$1\r\n1\r\n"
        with pytest.raises(MismatchedName):
            decode_one(data, RecordShape("Tst", (("value", U64),)))

    def test_unit_record(self) -> None:
        assert decode_one(b"*1\r\n$4\r\nTest\r\n", RecordShape("Test")) == Record("Test")
        with pytest.raises(MismatchedName):
            decode_one(b"*1\r\n$3\r\nTst\r\n", RecordShape("Test"))

    def test_newtype_record(self) -> None:
        data = b"*2\r\n$4\r\nTest\r\n$4\r\ntest\r\n"
        assert decode_one(data, RecordShape("Test", (("0", STR),))) == Record("Test", ("test",))

    def test_struct_with_sequence_field(self) -> None:
        data = b"*4\r\n$4\r\nTest\r\n$1\r\na\r\n$2\r\n42\r\n*3\r\n$1\r\n1\r\n$1\r\n2\r\n$1\r\n3\r\n"
        shape = RecordShape("Test", (("key", STR), ("val", U32), ("arr", SequenceShape(U32))))

        assert decode_one(data, shape) == Record("Test", ("a", 42, [1, 2, 3]))

    def test_field_names_not_checked(self) -> None:
        data = b"*2\r\n$4\r\nTest\r\n$1\r\n1\r\n"
        value = decode_one(data, RecordShape("Test", (("anything", U32),)))
        assert value.fields == (1,)

    def test_mismatched_field_count(self) -> None:
        data = b"*3\r\n$4\r\nTest\r\n$1\r\n1\r\n$1\r\n2\r\n"
        with pytest.raises(MismatchedLengthHint):
            decode_one(data, RecordShape("Test", (("value", U32),)))

    def test_null_name(self) -> None:
        with pytest.raises(MismatchedName):
            decode_one(b"*1\r\n$-1\r\n", RecordShape("Test"))

    def test_null_array(self) -> None:
        with pytest.raises(MismatchedLengthHint):
            decode_one(b"*-1\r\n", RecordShape("Test"))

    def test_factory(self) -> None:
        shape = RecordShape("Point", (("x", I64), ("y", I64)), factory=lambda f: (f["x"], f["y"]))
        data = b"*3\r\n$5\r\nPoint\r\n$2\r\n-1\r\n$1\r\n2\r\n"
        assert decode_one(data, shape) == (-1, 2)


class TestVariant:
    """Test tagged variant decoding."""

    def test_unit_case(self, test_enum_shape: VariantShape) -> None:
        assert decode_one(b"*1\r\n$4\r\nUnit\r\n", test_enum_shape) == Variant("Unit")

    def test_newtype_case(self, test_enum_shape: VariantShape) -> None:
        data = b"*2\r\n$7\r\nNewtype\r\n$1\r\n1\r\n"
        assert decode_one(data, test_enum_shape) == Variant("Newtype", (1,))

    def test_tuple_case(self, test_enum_shape: VariantShape) -> None:
        data = b"*3\r\n$5\r\nTuple\r\n$1\r\n1\r\n$1\r\n2\r\n"
        value = decode_one(data, test_enum_shape)

        assert value == Variant("Tuple", (1, 2))
        assert value.payload == (1, 2)

    def test_struct_case(self, test_enum_shape: VariantShape) -> None:
        data = b"*2\r\n$6\r\nStruct\r\n$1\r\n1\r\n"
        value = decode_one(data, test_enum_shape)

        assert value == Variant("Struct", (1,))
        assert value.field_names == ("a",)

    def test_unknown_tag(self, test_enum_shape: VariantShape) -> None:
        with pytest.raises(MismatchedName, match="no case 'Other'") as excinfo:
            decode_one(b"*1\r\n$5\r\nOther\r\n", test_enum_shape)
        assert excinfo.value.offset == 4

    def test_unit_case_with_payload(self, test_enum_shape: VariantShape) -> None:
        with pytest.raises(ExpectedDollarSign):
            decode_one(b"*2\r\n$4\r\nUnit\r\n$1\r\n1\r\n", test_enum_shape)

    def test_payload_not_a_frame(self, test_enum_shape: VariantShape) -> None:
        with pytest.raises(ExpectedMoreBulkString):
            decode_one(b"*2\r\n$7\r\nNewtype\r\n:1\r\n", test_enum_shape)

    def test_tuple_case_short_payload(self, test_enum_shape: VariantShape) -> None:
        with pytest.raises(MismatchedLengthHint):
            decode_one(b"*2\r\n$5\r\nTuple\r\n$1\r\n1\r\n", test_enum_shape)

    def test_missing_tag(self, test_enum_shape: VariantShape) -> None:
        with pytest.raises(MismatchedLengthHint):
            decode_one(b"*0\r\n", test_enum_shape)

    def test_newtype_with_sequence_payload(self) -> None:
        shape = VariantShape("Cmd", {"Many": newtype_case(SequenceShape(U32))})
        data = b"*2\r\n$4\r\nMany\r\n*2\r\n$1\r\n1\r\n$1\r\n2\r\n"
        assert decode_one(data, shape) == Variant("Many", ([1, 2],))

    def test_case_factories(self) -> None:
        shape = VariantShape(
            "Light", {"On": unit_case(lambda: "on"), "Dim": newtype_case(U8, lambda v: f"dim {v}")}
        )
        assert decode_one(b"*1\r\n$2\r\nOn\r\n", shape) == "on"
        assert decode_one(b"*2\r\n$3\r\nDim\r\n$2\r\n50\r\n", shape) == "dim 50"


class TestIgnored:
    """Test skipping values of unknown structure."""

    def test_skip_nested(self) -> None:
        data = b"*3\r\n$1\r\na\r\n*2\r\n$-1\r\n$1\r\nb\r\n*0\r\n$1\r\n9\r\n"
        shape = TupleShape((IGNORED, U32))
        engine = DecodeEngine(SliceReader(b"*2\r\n" + data))

        assert engine.decode(shape) == (None, 9)
        assert engine.reader.at_end()


class TestOneShot:
    """Test one-shot buffer decoding."""

    def test_trailing_bytes(self) -> None:
        with pytest.raises(TrailingBytes) as excinfo:
            decode_one(b"*1\r\n$4\r\nTest\r\nxyz", RecordShape("Test"))
        assert excinfo.value.offset == 14

    def test_accepts_bytearray(self) -> None:
        assert decode_one(bytearray(b"$1\r\n5\r\n"), U8) == 5

    def test_stream_form(self) -> None:
        """Test that a stream is decoded without the trailing-bytes check."""
        stream = io.BytesIO(b"$2\r\nhi\r\nrest")

        assert decode_one(stream, BYTES) == b"hi"
        assert stream.read() == b"rest"

    def test_empty_input(self) -> None:
        with pytest.raises(EndOfInput):
            decode_one(b"", U32)


class TestStreamDecode:
    """Test incremental decoding from a stream."""

    def test_consecutive_values_share_offset(self) -> None:
        reader = StreamReader(io.BytesIO(b"$1\r\n1\r\n*1\r\n$4\r\nTest\r\n"))

        assert decode_stream(reader, U32) == 1
        assert reader.offset == 7
        assert decode_stream(reader, RecordShape("Test")) == Record("Test")
        assert reader.offset == 21

    def test_bare_stream(self) -> None:
        stream = io.BytesIO(b"$1\r\n1\r\n$1\r\n2\r\n")

        assert decode_stream(stream, U32) == 1
        assert decode_stream(stream, U32) == 2

    def test_owned_bytes(self) -> None:
        value = decode_stream(io.BytesIO(b"$2\r\nhi\r\n"), BYTES)
        assert isinstance(value, bytes)

    def test_truncated_stream(self) -> None:
        with pytest.raises(EndOfInput):
            decode_stream(io.BytesIO(b"*2\r\n$1\r\n1\r\n"), SequenceShape(U32))


class TestNestingLimit:
    """Test the recursion bound."""

    def test_too_deep(self) -> None:
        shape = U32
        for _ in range(5):
            shape = SequenceShape(shape)
        data = b"*1\r\n" * 5 + b"$1\r\n1\r\n"

        assert decode_one(data, shape) == [[[[[1]]]]]
        with pytest.raises(NestingTooDeep):
            decode_one(data, shape, config=CodecConfig(max_depth=4))

    def test_error_offset(self) -> None:
        shape = SequenceShape(SequenceShape(SequenceShape(U32)))
        with pytest.raises(NestingTooDeep) as excinfo:
            decode_one(b"*1\r\n*1\r\n*1\r\n$1\r\n1\r\n", shape, config=CodecConfig(max_depth=2))
        assert excinfo.value.offset == 8
