"""Exception hierarchy for respwire.

This module defines all custom exceptions used throughout the package.
All exceptions inherit from RespwireError for easy catching of any respwire-specific error.

Decode failures fall into four families:

- input exhaustion (:class:`EndOfInput`) and wrapped source failures (:class:`IoError`)
- grammar violations, all subclasses of :class:`FormatError`
- shape mismatches, all subclasses of :class:`ShapeMismatch`
- :class:`TrailingBytes` for one-shot buffer decodes
"""

from __future__ import annotations


class RespwireError(Exception):
    """Base exception for all respwire errors."""

    pass


class SchemaError(RespwireError):
    """Raised when a model or annotation cannot be mapped to a shape.

    Examples:
        - Unsupported annotation (e.g. ``set[int]``)
        - Complex ``Union`` types other than ``Optional[T]``
        - Missing type annotation on a model field
    """

    pass


class EncodeError(RespwireError):
    """Raised when encoding a value fails.

    Examples:
        - Sequence without a known length
        - Value type with no wire representation
    """

    pass


class DecodeError(RespwireError):
    """Raised when decoding wire data fails.

    Subclasses provide a ``default_message``; a plain ``DecodeError`` carries a
    free-form message. ``offset`` is the reader's byte offset when the failure
    was detected, if known.
    """

    default_message = "decode error"

    def __init__(self, message: str | None = None, *, offset: int | None = None) -> None:
        self.offset = offset
        text = message or self.default_message
        if offset is not None:
            text = f"{text} (at byte {offset})"
        super().__init__(text)


class EndOfInput(DecodeError):
    """Fewer bytes were available than the frame requires."""

    default_message = "unexpected end of input"


class IoError(DecodeError):
    """The underlying byte source failed. The original error is ``__cause__``."""

    default_message = "underlying source failed"


class TrailingBytes(DecodeError):
    """Bytes remain in the buffer after a complete one-shot decode."""

    default_message = "trailing bytes"


class FormatError(DecodeError):
    """Base class for violations of the wire grammar."""

    default_message = "malformed frame"


class ExpectedDollarSign(FormatError):
    default_message = "expected $ sign"


class ExpectedStarSign(FormatError):
    default_message = "expected * sign"


class ExpectedLF(FormatError):
    default_message = "expected LF"


class UnbalancedTerminator(FormatError):
    default_message = "unbalanced CRLF"


class BadLengthHint(FormatError):
    default_message = "bad length hint"


class BadNumContent(FormatError):
    default_message = "bad number content"


class ExpectedBoolean(FormatError):
    default_message = "expected boolean"


class ExpectedChar(FormatError):
    default_message = "expected single character"


class ShapeMismatch(DecodeError):
    """Base class for wire data that does not match the declared shape."""

    default_message = "shape mismatch"


class MismatchedName(ShapeMismatch):
    default_message = "mismatched name"


class MismatchedLengthHint(ShapeMismatch):
    default_message = "mismatched length hint"


class ExpectedArray(ShapeMismatch):
    default_message = "expected array"


class ExpectedNone(ShapeMismatch):
    default_message = "expected none"


class ExpectedMoreBulkString(ShapeMismatch):
    default_message = "expected more bulk string"


class UnsupportedTypeError(EncodeError, DecodeError):
    """Raised for floating point and map values, which have no wire encoding."""

    default_message = "type is not supported"

    def __init__(self, message: str | None = None, *, offset: int | None = None) -> None:
        DecodeError.__init__(self, message, offset=offset)


class NestingTooDeep(EncodeError, DecodeError):
    """Raised when composite values nest deeper than ``CodecConfig.max_depth``."""

    default_message = "maximum nesting depth exceeded"

    def __init__(self, message: str | None = None, *, offset: int | None = None) -> None:
        DecodeError.__init__(self, message, offset=offset)
