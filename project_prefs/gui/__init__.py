"""
gui — PyQt6 editor for inspecting and maintaining a preference store.

Public API
──────────
viewmodels    — Qt-free editor state (PrefsEditorViewModel)
editor_page   — PrefsEditorPage property-grid widget
main_window   — MainWindow and run_editor()

Only viewmodels is imported eagerly so that the package stays usable
without PyQt6 installed (it ships in the "gui" extra).
"""

from project_prefs.gui import viewmodels

__all__ = ["viewmodels"]
