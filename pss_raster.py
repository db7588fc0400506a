"""
Raster assembly and PPM output

Combines the three decoded channel buffers into RGB pixels and serializes
them as a plain-text (P3) portable pixmap. Pixels are emitted in the order
the channels were decoded, which is row-major raster order.
"""

import io
from dataclasses import dataclass
from typing import TextIO

import numpy as np

from channel_buffer import ChannelBuffer
from pss_header import CHANNEL_COUNT, PSSDecodeError

MAX_CHANNEL_VALUE = 255

# 16x16 grey glyph of a struck-out document, shown when decoding fails
PLACEHOLDER_WIDTH = 16
PLACEHOLDER_HEIGHT = 16
_PLACEHOLDER_ROWS = (
    "................",
    "..##########....",
    "..#........##...",
    "..#.+......#.#..",
    "..#..+.....####.",
    "..#...+.......#.",
    "..#....+......#.",
    "..#.....+.....#.",
    "..#......+....#.",
    "..#.......+...#.",
    "..#........+..#.",
    "..#.........+.#.",
    "..#..........+#.",
    "..#...........#.",
    "..#############.",
    "................",
)
_PLACEHOLDER_SHADES = {".": 224, "#": 64, "+": 160}


@dataclass
class DecodedImage:
    """
    The decoded composite raster: three equal-length channels in R, G, B
    order plus the dimensions from the header.
    """

    width: int
    height: int
    channels: tuple[ChannelBuffer, ...]

    def __post_init__(self):
        if len(self.channels) != CHANNEL_COUNT:
            raise PSSDecodeError(
                f"Expected {CHANNEL_COUNT} channels, got {len(self.channels)}"
            )
        expected = self.width * self.height
        lengths = [len(channel) for channel in self.channels]
        if any(length != expected for length in lengths):
            raise PSSDecodeError(
                f"Decoded channel lengths {lengths} do not match "
                f"{self.width}x{self.height} ({expected} pixels)"
            )

    @property
    def pixel_count(self) -> int:
        return self.width * self.height

    def pixel(self, index: int) -> tuple[int, int, int]:
        r, g, b = (channel[index] for channel in self.channels)
        return (r, g, b)

    def to_ndarray(self) -> np.ndarray:
        """Interleave the channels into a (height, width, 3) uint8 array"""
        planes = [channel.to_ndarray() for channel in self.channels]
        return np.stack(planes, axis=-1).reshape(self.height, self.width, 3)


def write_ppm(image: DecodedImage, stream: TextIO):
    """
    Write `image` to `stream` as a P3 pixmap.

    One line per pixel, each holding the three channel values separated by
    spaces.
    """
    stream.write("P3\n")
    stream.write(f"{image.width} {image.height}\n")
    stream.write(f"{MAX_CHANNEL_VALUE}\n")

    pixels = image.to_ndarray().reshape(-1, 3)
    for r, g, b in pixels.tolist():
        stream.write(f"{r} {g} {b}\n")


def format_ppm(image: DecodedImage) -> str:
    """Return the P3 serialization of `image` as a string"""
    buffer = io.StringIO()
    write_ppm(image, buffer)
    return buffer.getvalue()


def placeholder_image() -> DecodedImage:
    """Fallback image emitted in place of a document that failed to decode"""
    channels = []
    for _ in range(CHANNEL_COUNT):
        channel = ChannelBuffer()
        for row in _PLACEHOLDER_ROWS:
            for cell in row:
                channel.append(_PLACEHOLDER_SHADES[cell])
        channels.append(channel)

    return DecodedImage(
        width=PLACEHOLDER_WIDTH,
        height=PLACEHOLDER_HEIGHT,
        channels=tuple(channels),
    )


def write_placeholder(stream: TextIO):
    write_ppm(placeholder_image(), stream)
