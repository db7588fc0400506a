"""
Growable storage for one decoded 8-bit channel.
"""

import numpy as np

INITIAL_CAPACITY = 256


class ChannelBuffer:
    """
    Append-only byte sequence with geometric growth.

    Storage starts at INITIAL_CAPACITY bytes and doubles whenever an append
    would not fit. Reads are bounds-checked against the number of values
    appended so far, not against the allocated capacity.
    """

    def __init__(self, capacity: int = INITIAL_CAPACITY):
        if capacity < 1:
            raise ValueError(f"Capacity must be positive: {capacity}")
        self._data = bytearray(capacity)
        self._size = 0

    @property
    def capacity(self) -> int:
        return len(self._data)

    def _reserve(self, needed: int):
        capacity = len(self._data)
        if needed <= capacity:
            return
        while capacity < needed:
            capacity <<= 1
        self._data.extend(bytes(capacity - len(self._data)))

    def append(self, value: int):
        """Append a single channel value (0-255)"""
        if not 0 <= value <= 255:
            raise ValueError(f"Channel value out of range: {value}")
        self._reserve(self._size + 1)
        self._data[self._size] = value
        self._size += 1

    def append_run(self, value: int, count: int):
        """Append `value` `count` times"""
        if not 0 <= value <= 255:
            raise ValueError(f"Channel value out of range: {value}")
        if count < 0:
            raise ValueError(f"Run length must not be negative: {count}")
        end = self._size + count
        self._reserve(end)
        self._data[self._size : end] = bytes((value,)) * count
        self._size = end

    def __len__(self) -> int:
        return self._size

    def __getitem__(self, index: int) -> int:
        if not 0 <= index < self._size:
            raise IndexError(
                f"Index {index} is out of bounds (size {self._size})"
            )
        return self._data[index]

    def __iter__(self):
        return iter(self._data[: self._size])

    def tobytes(self) -> bytes:
        return bytes(self._data[: self._size])

    def to_ndarray(self) -> np.ndarray:
        """Copy of the filled part as a uint8 array"""
        arr = np.frombuffer(self._data, dtype=np.uint8, count=self._size)
        return arr.copy()

    def __repr__(self) -> str:
        return f"ChannelBuffer(size={self._size}, capacity={self.capacity})"
