"""
PSS Utilities for PyQt6 GUI

This module provides functions to convert decoded PSS documents to QImage
objects.
"""

from PyQt6.QtGui import QImage

from pss_header import PSSHeader
from pss_raster import DecodedImage, placeholder_image
from pss_rle import read_and_decompress_pss_data
from vectorized_operations import ndarray_to_qimage


def decoded_image_to_qimage(image: DecodedImage) -> QImage:
    """
    Convert a decoded raster to an RGB888 QImage.

    Args:
        image: Decoded PSS composite image

    Returns:
        QImage object
    """
    return ndarray_to_qimage(image.to_ndarray())


def pss_to_qimage(file_path: str, header: PSSHeader | None = None) -> QImage:
    """
    Convert PSS composite image data to QImage.

    Args:
        file_path: Path to the PSS file
        header: Parsed PSS header, read from the file when omitted

    Returns:
        QImage object

    Raises:
        PSSError: If the document cannot be decoded
    """
    image = read_and_decompress_pss_data(file_path, header)
    return decoded_image_to_qimage(image)


def placeholder_qimage() -> QImage:
    """QImage of the fallback glyph shown for undecodable documents"""
    return decoded_image_to_qimage(placeholder_image())
