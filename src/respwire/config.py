"""Codec limits.

This module provides the configuration dataclass shared by the decoder,
the encoder and the readers. The defaults accept anything a 64-bit
implementation of the wire format would produce while bounding recursion
and buffering on adversarial input.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class CodecConfig:
    """Limits applied while encoding and decoding.

    Attributes:
        max_depth: Maximum nesting of composite values (sequences, records,
            variants, options). Deeper input raises ``NestingTooDeep``.
        max_length_hint: Largest decimal length or element count accepted in
            a length-hint line. Larger values raise ``BadLengthHint``.
            The default is the signed 64-bit maximum.
        max_bulk_length: Largest bulk string accepted, in bytes (default 512 MiB).
        max_line_length: Longest length-hint line accepted after the sigil,
            including CRLF. Bounds how much is buffered while looking for LF.

    Examples:
        ```python
        from respwire import CodecConfig, decode_one

        # Small embedded peer: reject anything unusual early
        config = CodecConfig(max_depth=8, max_bulk_length=4096)
        value = decode_one(data, shape, config=config)
        ```
    """

    max_depth: int = 128
    max_length_hint: int = 2**63 - 1
    max_bulk_length: int = 512 * 1024 * 1024
    max_line_length: int = 64

    def __post_init__(self) -> None:
        """Validate configuration parameters."""
        if self.max_depth < 1:
            raise ValueError(f"max_depth must be >= 1, got {self.max_depth}")

        if self.max_length_hint < 0:
            raise ValueError(f"max_length_hint must be >= 0, got {self.max_length_hint}")

        if self.max_bulk_length < 0:
            raise ValueError(f"max_bulk_length must be >= 0, got {self.max_bulk_length}")

        if self.max_line_length < 5:
            raise ValueError(f"max_line_length must be >= 5, got {self.max_line_length}")


DEFAULT_CONFIG = CodecConfig()
