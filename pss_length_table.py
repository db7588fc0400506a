"""
PSS RLE length table

Directly after the 40-byte header a PSS document stores, for each of the
three channels in turn, one unsigned 16-bit big-endian entry per image row.
Each entry is the number of RLE-encoded bytes that row occupies in the
compressed payload.
"""

import logging
from dataclasses import dataclass
from typing import Self

from pss_header import CHANNEL_COUNT, TruncatedPSSError, read_be16

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class LengthTable:
    """Per-channel, per-row encoded byte counts"""

    entries: tuple[tuple[int, ...], ...]

    @property
    def channel_sizes(self) -> tuple[int, ...]:
        """Encoded byte count of each channel sub-stream"""
        return tuple(sum(channel) for channel in self.entries)

    @property
    def total_encoded_size(self) -> int:
        """Size of the whole compressed payload following the table"""
        return sum(self.channel_sizes)

    def channel_slices(self) -> list[tuple[int, int]]:
        """(start, end) offsets of each channel inside the payload"""
        slices = []
        start = 0
        for size in self.channel_sizes:
            slices.append((start, start + size))
            start += size
        return slices

    @classmethod
    def parse(cls, data: bytes, height: int) -> Self:
        """
        Parse the length table for an image of `height` rows.

        Args:
            data: Bytes directly following the header
            height: Image height from the header

        Raises:
            TruncatedPSSError: If data holds fewer than 3 * height * 2 bytes
        """
        channel_length = height * 2
        table_size = channel_length * CHANNEL_COUNT
        if len(data) < table_size:
            raise TruncatedPSSError(
                f"Unexpected end of RLE length table: got {len(data)} "
                f"bytes, expected {table_size}"
            )

        entries = []
        for ch in range(CHANNEL_COUNT):
            offset = ch * channel_length
            entries.append(
                tuple(
                    read_be16(data, offset + i)
                    for i in range(0, channel_length, 2)
                )
            )

        table = cls(entries=tuple(entries))
        log.debug(
            "RLE length table: %d bytes, channel sizes %s, total %d",
            table_size,
            table.channel_sizes,
            table.total_encoded_size,
        )
        return table
