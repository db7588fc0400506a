import numpy as np
from PyQt6.QtGui import QImage


def ndarray_to_qimage(arr: np.ndarray) -> QImage:
    """Convert NumPy ndarray (RGB or grayscale) to QImage."""
    arr = np.ascontiguousarray(arr, dtype=np.uint8)

    if arr.ndim == 2:  # grayscale
        h, w = arr.shape
        qimg = QImage(
            arr.data,  # pyright: ignore
            w,
            h,
            w,
            QImage.Format.Format_Grayscale8,
        )
    elif arr.ndim == 3 and arr.shape[2] == 3:  # RGB
        h, w, _ = arr.shape
        qimg = QImage(
            arr.data,  # pyright: ignore
            w,
            h,
            w * 3,
            QImage.Format.Format_RGB888,
        )
    else:
        raise ValueError(f"Unsupported array shape: {arr.shape}")

    return qimg.copy()  # return deep copy to avoid referencing numpy buffer


def get_histogram(channel: np.ndarray):
    """
    Get a histogram from a single channel matrix.

    Args:
        channel: 2-d array of values for the histogram

    Returns:
        (counts, bin_edges) tuple from np.histogram

    Raises:
        ValueError: if shape is invalid (not 2d)
    """

    if channel.ndim != 2:
        raise ValueError("Input must be a 2d array.")

    return np.histogram(channel, bins=256, range=(0, 256))


def get_rgb_histograms(rgb: np.ndarray) -> list[np.ndarray]:
    """Per-channel counts of a (height, width, 3) image, in R, G, B order."""
    if rgb.ndim != 3 or rgb.shape[2] != 3:
        raise ValueError("Input must be an array with 3 channels (RGB).")

    return [get_histogram(rgb[..., i])[0] for i in range(3)]
