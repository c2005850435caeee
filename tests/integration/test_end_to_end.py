"""End-to-end integration tests."""

from __future__ import annotations

import enum
import io
import socket
from typing import Optional

import pytest
from pydantic import Field

from respwire import (
    RecordModel,
    StreamReader,
    UInt,
    VariantShape,
    decode,
    decode_stream,
    encode,
    encode_one,
    iterate,
    newtype_case,
    record_shape,
    shape_for,
    unit_case,
)
from respwire.exceptions import EndOfInput, FormatError, MismatchedName, ShapeMismatch
from respwire.models import MODEL_BUILDER


class EntryState(enum.Enum):
    """Cache entry state."""

    FRESH = 1
    STALE = 2
    EVICTED = 3


class Entry(RecordModel):
    """Cached key/value entry."""

    key: str = Field(min_length=1, description="Cache key")
    version: int = UInt(bits=32, description="Monotonic write version")
    state: EntryState = Field(description="Freshness of the value")
    value: bytes = Field(description="Opaque payload")
    tags: list[str] = Field(default_factory=list, description="Invalidation tags")
    expires_at: Optional[int] = None


class SetCommand(RecordModel):
    """Write request for a single key."""

    resp_name = "Set"

    key: str
    value: bytes
    ttl_s: int = UInt(bits=16)
    overwrite: bool


ENVELOPE = VariantShape(
    "Envelope",
    {
        "Entry": newtype_case(shape_for(Entry)),
        "Set": newtype_case(shape_for(SetCommand)),
        "Ping": unit_case(),
    },
)


def make_set() -> SetCommand:
    return SetCommand(key="user:1", value=b"alice", ttl_s=300, overwrite=False)


class TestEndToEndWorkflow:
    """Test complete end-to-end workflows."""

    def test_entry_workflow(self) -> None:
        """Test complete cache entry workflow."""
        entry = Entry(key="k", version=1, state=EntryState.FRESH, value=b"v", tags=["a"])

        data = encode(entry)
        assert data.startswith(b"*7\r\n$5\r\nEntry\r\n$1\r\nk\r\n$1\r\n1\r\n*1\r\n$5\r\nFRESH\r\n")
        assert data.endswith(b"*1\r\n$1\r\na\r\n$-1\r\n")

        decoded = decode(Entry, data)
        assert decoded == entry
        assert decoded.state is EntryState.FRESH

    def test_set_command_workflow(self) -> None:
        """Test write command workflow."""
        cmd = make_set()
        data = encode(cmd)

        assert data == (
            b"*5\r\n$3\r\nSet\r\n$6\r\nuser:1\r\n$5\r\nalice\r\n$3\r\n300\r\n$5\r\nfalse\r\n"
        )
        assert decode(SetCommand, data) == cmd

    def test_shape_matches_wire(self) -> None:
        shape = record_shape(Entry)

        assert shape.name == "Entry"
        assert [name for name, _ in shape.fields] == [
            "key",
            "version",
            "state",
            "value",
            "tags",
            "expires_at",
        ]


class TestMessageStream:
    """Test decoding back-to-back messages from a byte stream."""

    def test_mixed_messages_via_variant(self) -> None:
        """Test a stream of tagged envelopes carrying different records."""
        entry = Entry(
            key="session:9",
            version=7,
            state=EntryState.STALE,
            value=b"\x00\r\n\xff",
            tags=["session", "eu"],
            expires_at=1700000000,
        )
        cmd = make_set()

        stream = io.BytesIO(
            b"*2\r\n$5\r\nEntry\r\n"
            + encode(entry)
            + b"*1\r\n$4\r\nPing\r\n"
            + b"*2\r\n$3\r\nSet\r\n"
            + encode(cmd)
        )
        received = list(iterate(stream, ENVELOPE, MODEL_BUILDER))

        assert [v.tag for v in received] == ["Entry", "Ping", "Set"]
        assert received[0].payload == (entry,)
        assert received[2].payload == (cmd,)

    def test_socket_transport(self) -> None:
        """Test reading records straight off a connected socket."""
        left, right = socket.socketpair()
        with left, right:
            entries = [
                Entry(key=f"k{i}", version=i, state=EntryState.FRESH, value=b"x" * i)
                for i in range(3)
            ]
            left.sendall(b"".join(encode(e) for e in entries))
            left.shutdown(socket.SHUT_WR)

            with right.makefile("rb") as stream:
                assert list(iterate(stream, shape_for(Entry))) == entries

    def test_handover_between_readers(self) -> None:
        """Test that a reader leaves the rest of the stream untouched."""
        stream = io.BytesIO(encode_one(7) + encode_one("rest"))
        first = StreamReader(stream)

        assert decode_stream(first, shape_for(int)) == 7
        assert decode_stream(stream, shape_for(str)) == "rest"


class TestErrorRecovery:
    """Test error handling in realistic scenarios."""

    def test_corrupted_frame_detection(self) -> None:
        """Test detection of corrupted frames."""
        data = bytearray(encode(make_set()))
        # Replace the CR closing the record name
        data[data.index(b"Set") + len(b"Set")] = ord("X")

        with pytest.raises(FormatError):
            decode(SetCommand, bytes(data))

    def test_truncated_message_detection(self) -> None:
        """Test detection of truncated messages."""
        data = encode(make_set())

        for cut in (1, 5, len(data) // 2, len(data) - 1):
            with pytest.raises(EndOfInput):
                decode(SetCommand, data[:cut])

    def test_wrong_message_type(self) -> None:
        with pytest.raises(ShapeMismatch):
            decode(Entry, encode(make_set()))

    def test_unknown_entry_state(self) -> None:
        data = encode(
            Entry(key="k", version=0, state=EntryState.STALE, value=b"")
        ).replace(b"$5\r\nSTALE\r\n", b"$5\r\nSTOLE\r\n")

        with pytest.raises(MismatchedName):
            decode(Entry, data)
