"""
main.py

BlockCanvas - interactive block diagram editor

PyQt6 application for sketching block diagrams:
- Right-click to create blocks and frames
- Drag blocks to move them, drag their borders to resize
- Right-click a block border to start a connection, click another block to finish it

Usage:
    python main.py

Dependencies:
    pip install PyQt6 platformdirs tomli-w

Environment:
    BLOCKCANVAS_TRACE=1 (optional gesture tracing to stderr)
"""

from __future__ import annotations

import sys

from PyQt6.QtWidgets import QApplication, QMainWindow

from canvas.diagram import Diagram
from canvas.gesture import (
    ConnectionCancelled,
    EmptySpaceClicked,
    LinkCreated,
    PrimitiveClicked,
)
from canvas.view import BlockCanvasView
from settings import SettingsManager, get_settings
from debug_trace import trace, trace_exception, close_log


def describe_event(event) -> str:
    """Status-bar text for a gesture event."""
    if isinstance(event, EmptySpaceClicked):
        return f"Empty space clicked at ({event.x}, {event.y})"
    if isinstance(event, PrimitiveClicked):
        return "Clicked " + " / ".join(str(k) for k in event.keys)
    if isinstance(event, LinkCreated):
        return "Connection created"
    if isinstance(event, ConnectionCancelled):
        return "Connection cancelled"
    return ""


class MainWindow(QMainWindow):
    """Main window holding a single canvas."""

    def __init__(self, settings_manager: SettingsManager):
        super().__init__()
        self.settings_manager = settings_manager
        self.setWindowTitle("BlockCanvas")

        s = settings_manager.settings
        self.diagram = Diagram(s.window.width, s.window.height)
        self.view = BlockCanvasView(self.diagram, s.canvas, self)
        self.setCentralWidget(self.view)
        self.view.gesture_event.connect(self._on_gesture_event)
        self.statusBar().showMessage("Right-click to create a block")

    def _on_gesture_event(self, event):
        trace(f"gesture event: {event!r}", "MAIN")
        self.statusBar().showMessage(describe_event(event), 4000)


def main():
    """Application entry point."""
    trace("Application starting", "MAIN")
    app = QApplication(sys.argv)
    if app.primaryScreen() is None:
        raise RuntimeError("no screen available to host the canvas")

    trace("Loading settings", "MAIN")
    settings_manager = get_settings()

    # Ensure settings file has all sections
    settings_manager.ensure_file_complete()

    def save_on_quit():
        trace("Saving settings on quit", "MAIN")
        settings_manager.save()
        close_log()

    app.aboutToQuit.connect(save_on_quit)

    trace("Creating MainWindow", "MAIN")
    w = MainWindow(settings_manager)
    if w.centralWidget() is not w.view:
        raise RuntimeError("canvas widget is not installed in the main window")
    w.resize(settings_manager.settings.window.width, settings_manager.settings.window.height)
    trace("Showing MainWindow", "MAIN")
    w.show()
    trace("Entering event loop", "MAIN")
    sys.exit(app.exec())


if __name__ == "__main__":
    # Set up global exception handler to catch crashes
    def excepthook(exc_type, exc_value, exc_tb):
        import traceback
        trace("UNCAUGHT EXCEPTION:", "CRASH")
        trace("".join(traceback.format_exception(exc_type, exc_value, exc_tb)), "CRASH")
        close_log()
        sys.__excepthook__(exc_type, exc_value, exc_tb)

    sys.excepthook = excepthook

    try:
        main()
    except Exception as e:
        trace(f"FATAL: {type(e).__name__}: {e}", "CRASH")
        trace_exception("Fatal exception")
        close_log()
        raise
