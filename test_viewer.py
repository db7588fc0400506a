"""
Pytest tests for the PSS viewer window
"""

import os

import pytest

pytest.importorskip("matplotlib.backends.backend_qtagg")
QtWidgets = pytest.importorskip("PyQt6.QtWidgets")

import viewer  # noqa: E402
from test_pss_header import create_test_pss_document  # noqa: E402


@pytest.fixture(scope="module")
def app():
    os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
    instance = QtWidgets.QApplication.instance()
    if instance is None:
        instance = QtWidgets.QApplication([])
    return instance


@pytest.fixture
def window(app, monkeypatch):
    errors = []
    monkeypatch.setattr(
        viewer.QMessageBox,
        "critical",
        lambda parent, title, text: errors.append(text),
    )
    image_viewer = viewer.ImageViewer()
    image_viewer.errors = errors
    yield image_viewer
    image_viewer.close()


class TestImageViewer:
    """Smoke tests for loading documents into the viewer"""

    def test_open_valid_document(self, tmp_path, window):
        pss_file = tmp_path / "valid.pss"
        pss_file.write_bytes(
            create_test_pss_document(
                2, 1, [bytes([0x00, 0x10, 0x00, 0x20])] * 3
            )
        )

        window.open_pss_file(str(pss_file))

        assert window.errors == []
        assert window.rgb.shape == (1, 2, 3)
        assert window.rgb[0, 1].tolist() == [32, 32, 32]
        assert "valid.pss" in window.windowTitle()
        text = window.pss_info_panel.header_text.toPlainText()
        assert "2 x 1 pixels" in text

        window.create_histogram()
        assert window.hist_canvas is not None

    def test_open_broken_document(self, tmp_path, window):
        pss_file = tmp_path / "broken.pss"
        pss_file.write_bytes(
            create_test_pss_document(1, 1, [bytes([0x05, 0x10])] * 3)
        )

        window.open_pss_file(str(pss_file))

        assert window.rgb is None
        assert len(window.errors) == 1
        assert "control value 5" in window.errors[0]
        assert window.image_label.image is not None
        text = window.pss_info_panel.header_text.toPlainText()
        assert "Decode failed" in text

    def test_placeholder_shown_for_unreadable_file(self, tmp_path, window):
        window.open_pss_file(str(tmp_path / "missing.pss"))

        assert window.rgb is None
        text = window.pss_info_panel.header_text.toPlainText()
        assert "No valid header" in text
        assert "Cannot open file" in window.errors[0]
