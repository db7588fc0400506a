"""
PSS Header Extraction Module

This module handles parsing and validation of Paintstorm Studio (PSS)
document headers. The PSS header is always 40 bytes at the start of the file.

Only the signature and the raster dimensions are meaningful to the decoder,
the remaining header bytes are application specific and left untouched.
"""

import logging
from dataclasses import dataclass
from typing import Self

log = logging.getLogger(__name__)

PSS_HEADER_SIZE = 40
PSS_SIGNATURE = b"\x6a\x87\x01\x00"

# Bomb protection: reject dimensions above this before allocating anything
MAX_RESOLUTION = 10000

CHANNEL_COUNT = 3


class PSSError(Exception):
    """Base exception for PSS-related errors"""

    pass


class PSSReadError(PSSError):
    """Raised when the document cannot be opened or read"""

    pass


class TruncatedPSSError(PSSReadError):
    """Raised when the document ends before a structure is complete"""

    pass


class InvalidPSSError(PSSError):
    """Raised when PSS file is invalid or corrupted"""

    pass


class SignatureMismatchError(InvalidPSSError):
    """Raised when the first four bytes are not the PSS signature"""

    def __init__(self, expected: bytes, actual: bytes):
        self.expected = expected
        self.actual = actual
        self.position = next(
            (i for i, (e, a) in enumerate(zip(expected, actual)) if e != a),
            min(len(expected), len(actual)),
        )
        super().__init__(
            f"File signature mismatch: expected {expected.hex(' ')}, "
            f"but got {actual.hex(' ')} (first difference at byte "
            f"{self.position})"
        )


class ResolutionTooLargeError(InvalidPSSError):
    """Raised when the declared dimensions exceed MAX_RESOLUTION"""

    def __init__(self, width: int, height: int):
        self.width = width
        self.height = height
        super().__init__(
            f"File is too large: {width}x{height} exceeds the "
            f"{MAX_RESOLUTION}x{MAX_RESOLUTION} limit"
        )


class PSSDecodeError(PSSError):
    """Raised when the RLE payload cannot be decoded"""

    pass


class InvalidControlByteError(PSSDecodeError):
    """Raised for an RLE control byte outside the literal/repeat ranges"""

    def __init__(self, control: int, offset: int):
        self.control = control
        self.offset = offset
        super().__init__(
            f"RLE unpacking: control value {control} at offset {offset} "
            "should not be used"
        )


class ChannelLengthMismatchError(PSSDecodeError):
    """Raised when the decoded channels differ in pixel count"""

    def __init__(self, lengths: tuple[int, ...]):
        self.lengths = lengths
        super().__init__(
            "Decoded channel lengths diverge: "
            + ", ".join(str(n) for n in lengths)
        )


def read_be16(data: bytes, offset: int) -> int:
    """
    Read an unsigned 16-bit big-endian integer at `offset`.

    The value is composed byte by byte, so the result does not depend on the
    byte order of the host.

    Raises:
        TruncatedPSSError: If fewer than two bytes are available
    """
    if offset < 0 or offset + 2 > len(data):
        raise TruncatedPSSError(
            f"Unexpected end of data: need 2 bytes at offset {offset}, "
            f"have {max(len(data) - offset, 0)}"
        )
    return (data[offset] << 8) | data[offset + 1]


@dataclass(frozen=True)
class PSSHeader:
    """
    PSS file header structure (40 bytes total)

    Multi-byte integers are stored in big-endian format.

    Should be constructed using `PSSHeader.parse_pss_header(file_name)` or
    `PSSHeader.from_bytes(data)`.
    """

    signature: bytes  # Offset 0-3: Should be 6A 87 01 00
    width: int  # Offset 8-9
    height: int  # Offset 12-13

    @property
    def pixel_count(self) -> int:
        return self.width * self.height

    @property
    def length_table_size(self) -> int:
        """Byte size of the per-channel, per-row RLE length table"""
        return CHANNEL_COUNT * self.height * 2

    @property
    def payload_offset(self) -> int:
        """Offset of the first compressed byte in the document"""
        return PSS_HEADER_SIZE + self.length_table_size

    def __str__(self) -> str:
        """String representation of header information"""
        lines = [
            "PSS Header Information",
            "=" * 50,
            f"Signature:        {self.signature.hex(' ')}",
            f"Dimensions:       {self.width} x {self.height} pixels",
            "Color Mode:       24-bit True Color (RGB)",
            f"Length Table:     {self.length_table_size} bytes",
            f"Payload Offset:   {self.payload_offset}",
        ]
        return "\n".join(lines)

    @classmethod
    def from_bytes(cls, data: bytes) -> Self:
        """
        Parse a PSS header from the start of `data`.

        The signature is checked first, then the dimensions, so no length
        table parsing or pixel allocation happens for a rejected header.

        Raises:
            TruncatedPSSError: If data is shorter than the header
            SignatureMismatchError: If the signature bytes differ
            ResolutionTooLargeError: If width or height is above the limit
        """
        cls._validate_header_length(data)

        signature = bytes(data[: len(PSS_SIGNATURE)])
        if signature != PSS_SIGNATURE:
            raise SignatureMismatchError(PSS_SIGNATURE, signature)

        width = read_be16(data, 8)
        height = read_be16(data, 12)
        log.debug("PSS resolution: %dx%d", width, height)

        if width > MAX_RESOLUTION or height > MAX_RESOLUTION:
            raise ResolutionTooLargeError(width, height)

        return cls(signature=signature, width=width, height=height)

    @classmethod
    def parse_pss_header(cls, file_path: str) -> Self:
        """
        Parse PSS header from a file, should be used as the main constructor.

        Args:
            file_path: Path to the PSS file

        Returns:
            PSSHeader object containing parsed header information

        Raises:
            InvalidPSSError: If file is not a valid PSS file
            PSSReadError: If file cannot be read
        """
        header_bytes = cls.read_pss_header_raw(file_path)
        return cls.from_bytes(header_bytes)

    @classmethod
    def read_pss_header_raw(cls, file_path: str) -> bytes:
        """
        Read raw 40-byte header from PSS file

        Args:
            file_path: Path to the PSS file

        Returns:
            40 bytes of raw header data
        """
        try:
            with open(file_path, "rb") as f:
                header_bytes = f.read(PSS_HEADER_SIZE)
        except OSError as e:
            raise PSSReadError(f"Cannot open file {file_path!r}: {e}") from e

        cls._validate_header_length(header_bytes)
        return header_bytes

    @staticmethod
    def _validate_header_length(header_bytes):
        if len(header_bytes) < PSS_HEADER_SIZE:
            raise TruncatedPSSError(
                f"File is too small: only {len(header_bytes)} bytes "
                f"(need {PSS_HEADER_SIZE} for header)"
            )
