"""
Pytest tests for the PyQt6 conversion helpers
"""

import numpy as np
import pytest

QtGui = pytest.importorskip("PyQt6.QtGui")

from pss_header import PSSError  # noqa: E402
from pss_raster import PLACEHOLDER_WIDTH  # noqa: E402
from test_pss_header import create_test_pss_document  # noqa: E402
from utils.pss import placeholder_qimage, pss_to_qimage  # noqa: E402
from vectorized_operations import (  # noqa: E402
    get_histogram,
    get_rgb_histograms,
    ndarray_to_qimage,
)


class TestPSSToQImage:
    def test_pixels(self, tmp_path):
        pss_file = tmp_path / "image.pss"
        r = bytes([0x00, 255, 0x00, 0])
        g = bytes([0x00, 0, 0x00, 128])
        b = bytes([0x00, 0, 0x00, 64])
        pss_file.write_bytes(create_test_pss_document(2, 1, [r, g, b]))

        qimage = pss_to_qimage(str(pss_file))

        assert (qimage.width(), qimage.height()) == (2, 1)
        first = qimage.pixelColor(0, 0)
        second = qimage.pixelColor(1, 0)
        assert (first.red(), first.green(), first.blue()) == (255, 0, 0)
        assert (second.red(), second.green(), second.blue()) == (0, 128, 64)

    def test_decode_failure(self, tmp_path):
        pss_file = tmp_path / "bad.pss"
        pss_file.write_bytes(b"\x00" * 40)

        with pytest.raises(PSSError):
            pss_to_qimage(str(pss_file))

    def test_placeholder(self):
        qimage = placeholder_qimage()

        assert qimage.width() == PLACEHOLDER_WIDTH
        assert qimage.format() == QtGui.QImage.Format.Format_RGB888


class TestVectorizedOperations:
    def test_ndarray_to_qimage_grayscale(self):
        arr = np.array([[0, 100], [200, 255]], dtype=np.uint8)

        qimage = ndarray_to_qimage(arr)

        assert qimage.format() == QtGui.QImage.Format.Format_Grayscale8
        assert qimage.pixelColor(1, 1).red() == 255

    def test_ndarray_to_qimage_bad_shape(self):
        with pytest.raises(ValueError, match="Unsupported array shape"):
            ndarray_to_qimage(np.zeros((2, 2, 4), dtype=np.uint8))

    def test_histograms(self):
        rgb = np.zeros((2, 2, 3), dtype=np.uint8)
        rgb[..., 0] = 255
        rgb[0, 0, 2] = 7

        hist_r, hist_g, hist_b = get_rgb_histograms(rgb)

        assert hist_r[255] == 4
        assert hist_g[0] == 4
        assert hist_b[7] == 1 and hist_b[0] == 3

    def test_histogram_needs_2d(self):
        with pytest.raises(ValueError, match="2d array"):
            get_histogram(np.zeros(4))
