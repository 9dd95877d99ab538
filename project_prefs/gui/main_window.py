"""
MainWindow — top-level window hosting the preference editor.

Closing the window writes any unsaved edits back to the store file.
"""

import logging
import sys

from PyQt6.QtGui import QCloseEvent
from PyQt6.QtWidgets import QApplication, QMainWindow, QWidget

from project_prefs.gui.editor_page import PrefsEditorPage
from project_prefs.store.prefs_store import PrefsStore

__all__ = ["MainWindow", "run_editor"]

logger = logging.getLogger(__name__)


class MainWindow(QMainWindow):
    """Root window: one PrefsEditorPage bound to *store*."""

    def __init__(self, store: PrefsStore, parent: QWidget = None) -> None:
        super().__init__(parent)
        self.setWindowTitle(f"Project Prefs: {store.path}")
        self.resize(640, 480)
        self._page = PrefsEditorPage(store)
        self.setCentralWidget(self._page)

    @property
    def page(self) -> PrefsEditorPage:
        return self._page

    def closeEvent(self, event: QCloseEvent) -> None:
        if self._page.view_model.dirty:
            logger.info("Saving unsaved preference edits on close")
            if not self._page.view_model.save():
                # Keep the window open so the edits are not lost
                self._page.refresh()
                event.ignore()
                return
        super().closeEvent(event)


def run_editor(store: PrefsStore) -> int:
    """Show the editor for *store* and block until it is closed."""
    app = QApplication.instance() or QApplication(sys.argv)
    window = MainWindow(store)
    window.show()
    return app.exec()
