"""
PSS RLE Decompression Module

This module handles Run-Length Encoding (RLE) decompression for the
composite image stored in Paintstorm Studio documents.

The payload holds the red, green and blue channels one after another. Each
channel is a sequence of (control, value) byte pairs where the control byte
is a signed 8-bit integer:
- 0 means the value is a single literal pixel
- -1 to -127 means the value repeats (-control + 1) times (2 to 128)
- anything else never appears in a well-formed document
"""

import logging

from channel_buffer import ChannelBuffer
from pss_header import (
    PSS_HEADER_SIZE,
    ChannelLengthMismatchError,
    InvalidControlByteError,
    PSSDecodeError,
    PSSHeader,
    PSSReadError,
    TruncatedPSSError,
)
from pss_length_table import LengthTable
from pss_raster import DecodedImage

log = logging.getLogger(__name__)


def to_int8(byte: int) -> int:
    """Sign-extend an unsigned byte to a signed 8-bit value"""
    return byte - 0x100 if byte & 0x80 else byte


def decode_channel(
    stream: bytes, limit: int | None = None
) -> tuple[ChannelBuffer, int]:
    """
    Decompress one channel's RLE stream.

    Args:
        stream: The channel's compressed bytes, consumed entirely
        limit: Maximum number of pixels the channel may hold, unbounded
            when omitted

    Returns:
        Tuple of (decoded channel buffer, number of pixels produced)

    Raises:
        InvalidControlByteError: If a control byte is not 0 or in [-127, -1]
        TruncatedPSSError: If the stream ends between a control and its value
        PSSDecodeError: If the channel would grow past `limit`
    """
    if len(stream) % 2 != 0:
        raise TruncatedPSSError(
            f"Unexpected end of RLE data: {len(stream)} bytes leaves a "
            "control byte without its value byte"
        )

    channel = ChannelBuffer()
    produced = 0

    for offset in range(0, len(stream), 2):
        control = to_int8(stream[offset])
        value = stream[offset + 1]

        if control == 0:
            count = 1
        elif -127 <= control <= -1:
            count = -control + 1
        else:
            raise InvalidControlByteError(control, offset)

        # A channel never holds more than `limit` pixels
        if limit is not None and produced + count > limit:
            raise PSSDecodeError(
                f"RLE data at offset {offset} exceeds the image size of "
                f"{limit} pixels per channel"
            )

        channel.append_run(value, count)
        produced += count

    return channel, produced


def decompress_pss_rle(
    compressed_data: bytes, table: LengthTable, limit: int | None = None
) -> tuple[ChannelBuffer, ...]:
    """
    Decompress the three channels of a PSS payload

    Args:
        compressed_data: The compressed payload (after the length table)
        table: Parsed RLE length table locating each channel
        limit: Maximum number of pixels per channel, usually the header's
            pixel count

    Returns:
        Decoded channel buffers in R, G, B order

    Raises:
        TruncatedPSSError: If the payload is shorter than the table declares
        InvalidControlByteError: If any channel holds a bad control byte
        ChannelLengthMismatchError: If the channels decode to different sizes
        PSSDecodeError: If a channel decodes to more than `limit` pixels
    """
    if len(compressed_data) < table.total_encoded_size:
        raise TruncatedPSSError(
            f"Incomplete RLE data: got {len(compressed_data)} bytes, "
            f"expected {table.total_encoded_size}"
        )

    channels = []
    lengths = []
    for ch, (start, end) in enumerate(table.channel_slices()):
        channel, produced = decode_channel(
            compressed_data[start:end], limit
        )
        log.debug(
            "Channel %d: %d encoded bytes -> %d pixels",
            ch,
            end - start,
            produced,
        )
        channels.append(channel)
        lengths.append(produced)

    if len(set(lengths)) != 1:
        raise ChannelLengthMismatchError(tuple(lengths))

    return tuple(channels)


def decode_pss_bytes(
    data: bytes, header: PSSHeader | None = None
) -> DecodedImage:
    """
    Decode a complete PSS document held in memory

    Args:
        data: The whole document
        header: Already parsed header, parsed from `data` when omitted

    Returns:
        DecodedImage with the composite raster

    Raises:
        PSSError: Any format, truncation or decode failure
    """
    if header is None:
        header = PSSHeader.from_bytes(data)

    table = LengthTable.parse(
        data[PSS_HEADER_SIZE : header.payload_offset], header.height
    )
    log.debug("RLE data starts at %d bytes", header.payload_offset)

    start = header.payload_offset
    channels = decompress_pss_rle(
        data[start : start + table.total_encoded_size],
        table,
        limit=header.pixel_count,
    )

    return DecodedImage(
        width=header.width, height=header.height, channels=channels
    )


def read_and_decompress_pss_data(
    file_path: str, header: PSSHeader | None = None
) -> DecodedImage:
    """
    Read a PSS file and decompress its composite image

    Args:
        file_path: Path to the PSS file
        header: PSSHeader object with parsed header information, parsed from
            the file when omitted

    Returns:
        DecodedImage with the composite raster

    Raises:
        PSSReadError: If file cannot be read
        PSSError: If decompression fails
    """
    try:
        with open(file_path, "rb") as f:
            data = f.read()
    except OSError as e:
        raise PSSReadError(f"Failed to read PSS image data: {e}") from e

    log.debug("Opened %s (%d bytes)", file_path, len(data))
    return decode_pss_bytes(data, header)
