import logging
import os
import sys

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.backends.backend_qtagg import FigureCanvasQTAgg
from PyQt6.QtCore import Qt, pyqtSignal
from PyQt6.QtGui import QAction, QPixmap
from PyQt6.QtWidgets import (
    QApplication,
    QFileDialog,
    QLabel,
    QMainWindow,
    QMessageBox,
    QSplitter,
    QStatusBar,
    QTextEdit,
    QVBoxLayout,
    QWidget,
)

from pss_header import PSSError, PSSHeader
from pss_rle import read_and_decompress_pss_data
from utils.pss import decoded_image_to_qimage, placeholder_qimage
from vectorized_operations import get_rgb_histograms

log = logging.getLogger(__name__)


class ImageLabel(QLabel):
    # Custom signal: emit coordinates + color
    pixelHovered = pyqtSignal(int, int, int, int, int)

    def __init__(self):
        super().__init__()
        self.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.setStyleSheet("background-color: gray;")
        self.setMouseTracking(True)
        self.image = None  # QImage backing for pixel lookup

    def setImage(self, pixmap):
        self.setPixmap(pixmap)
        self.image = pixmap.toImage()

    def mouseMoveEvent(self, ev):
        assert ev is not None

        if self.image is not None and self.pixmap() is not None:
            scaled_pixmap = self.pixmap().scaled(
                self.size(),
                Qt.AspectRatioMode.KeepAspectRatio,
                Qt.TransformationMode.FastTransformation,
            )

            x_ratio = self.image.width() / scaled_pixmap.width()
            y_ratio = self.image.height() / scaled_pixmap.height()

            # Center offset
            x_offset = (self.width() - scaled_pixmap.width()) // 2
            y_offset = (self.height() - scaled_pixmap.height()) // 2

            x = int((ev.pos().x() - x_offset) * x_ratio)
            y = int((ev.pos().y() - y_offset) * y_ratio)

            if 0 <= x < self.image.width() and 0 <= y < self.image.height():
                color = self.image.pixelColor(x, y)
                self.pixelHovered.emit(
                    x,
                    y,
                    color.red(),
                    color.green(),
                    color.blue(),
                )
        super().mouseMoveEvent(ev)


class PSSInfoPanel(QWidget):
    """Widget to display PSS header information"""

    def __init__(self):
        super().__init__()
        self.setup_ui()

    def setup_ui(self):
        layout = QVBoxLayout(self)

        title = QLabel("<b>PSS Information</b>")
        layout.addWidget(title)

        self.header_text = QTextEdit()
        self.header_text.setReadOnly(True)
        layout.addWidget(QLabel("Header Information:"))
        layout.addWidget(self.header_text)

    def set_pss_info(self, header: PSSHeader | None, message: str = ""):
        """Update panel with PSS header information"""
        text = str(header) if header is not None else "No valid header"
        if message:
            text += f"\n\n{message}"
        self.header_text.setPlainText(text)


class ImageViewer(QMainWindow):
    def __init__(self):
        super().__init__()
        self.setWindowTitle("PSS Viewer")
        self.setGeometry(100, 100, 800, 600)
        self.rgb = None  # decoded raster as (height, width, 3) ndarray
        self.hist_canvas = None

        self.create_menu()
        self.create_central_widget()
        self.create_info_bar()

    def create_menu(self):
        menubar = self.menuBar()
        assert menubar is not None

        file_menu = menubar.addMenu("File")
        assert file_menu is not None

        open_action = QAction("Open PSS Document", self)
        open_action.triggered.connect(self.open_image)
        file_menu.addAction(open_action)

        enhancement_menu = menubar.addMenu("Enhancement")
        assert enhancement_menu is not None

        histogram_action = QAction("Histogram", self)
        histogram_action.triggered.connect(self.create_histogram)
        enhancement_menu.addAction(histogram_action)

    def create_central_widget(self):
        central_widget = QWidget()
        layout = QVBoxLayout(central_widget)

        self.splitter = QSplitter(Qt.Orientation.Horizontal)

        self.image_label = ImageLabel()
        self.image_label.pixelHovered.connect(self.update_info_bar)
        self.splitter.addWidget(self.image_label)

        self.pss_info_panel = PSSInfoPanel()
        self.pss_info_panel.hide()
        self.splitter.addWidget(self.pss_info_panel)

        # Set initial sizes (70% image, 30% info)
        self.splitter.setSizes([700, 300])

        layout.addWidget(self.splitter)
        self.setCentralWidget(central_widget)

    def create_info_bar(self):
        self.info_bar = QStatusBar()
        self.info_bar.showMessage("Ready")
        self.setStatusBar(self.info_bar)

    def open_image(self):
        file_path, _ = QFileDialog.getOpenFileName(
            self,
            "Open PSS Document",
            "",
            "Paintstorm Studio documents (*.pss *.PSS);;All files (*)",
        )

        if not file_path:
            return

        self.cleanup()
        self.open_pss_file(file_path)

    def open_pss_file(self, file_path: str):
        """Load and display a PSS file with info panel"""
        header = None
        try:
            header = PSSHeader.parse_pss_header(file_path)
            image = read_and_decompress_pss_data(file_path, header)
        except PSSError as e:
            log.error("Failed to load %s: %s", file_path, e)
            self.rgb = None
            self._show(placeholder_qimage())
            self.pss_info_panel.set_pss_info(header, f"Decode failed: {e}")
            self.pss_info_panel.show()
            QMessageBox.critical(
                self,
                "Error",
                f"Failed to open PSS document: {e}",
            )
            return

        self.rgb = image.to_ndarray()
        self._show(decoded_image_to_qimage(image))

        self.pss_info_panel.set_pss_info(header)
        self.pss_info_panel.show()

        self.setWindowTitle(f"PSS Viewer - {os.path.basename(file_path)}")

    def _show(self, qimage):
        pixmap = QPixmap.fromImage(qimage)
        scaled_pixmap = pixmap.scaled(
            self.image_label.size(),
            Qt.AspectRatioMode.KeepAspectRatio,
            Qt.TransformationMode.FastTransformation,
        )
        self.image_label.setImage(scaled_pixmap)

    def update_info_bar(self, x, y, r, g, b):
        self.info_bar.showMessage(f"X:{x}, Y:{y}  RGB:({r}, {g}, {b})")

    def create_histogram(self):
        if self.rgb is None:
            return

        self._remove_histogram()

        fig = plt.figure()
        ax = fig.add_subplot(111)

        hist_r, hist_g, hist_b = get_rgb_histograms(self.rgb)
        bins = np.arange(256)
        ax.step(bins, hist_r, where="mid", color="red", label="Red")
        ax.step(bins, hist_g, where="mid", color="green", label="Green")
        ax.step(bins, hist_b, where="mid", color="blue", label="Blue")

        ax.set_xlim(0, 255)
        ax.set_xlabel("Intensity")
        ax.set_ylabel("Frequency")
        ax.legend()

        self.hist_canvas = FigureCanvasQTAgg(fig)
        self.splitter.addWidget(self.hist_canvas)

    def _remove_histogram(self):
        if self.hist_canvas is not None:
            self.hist_canvas.setParent(None)
            self.hist_canvas.deleteLater()
            self.hist_canvas = None

    def cleanup(self):
        """
        Cleanup previous operations before loading an image.
        """
        self._remove_histogram()


def main():
    logging.basicConfig(format="%(levelname)s: %(message)s")
    app = QApplication(sys.argv)
    viewer = ImageViewer()
    viewer.show()
    if len(sys.argv) > 1:
        viewer.open_pss_file(sys.argv[1])
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
