"""
canvas/view.py

QWidget hosting the gesture controller: forwards mouse input, shows the
context menu, sets hover cursors and paints the visual snapshot.
"""

from __future__ import annotations

from typing import Optional

from PyQt6.QtCore import Qt, QPointF, QRectF, QTimer, pyqtSignal
from PyQt6.QtGui import QAction, QBrush, QColor, QPainter, QPen
from PyQt6.QtWidgets import QMenu, QWidget

from canvas.diagram import Diagram
from canvas.gesture import GestureController
from canvas.render_state import RedrawScheduler, VisualSnapshot
from settings import CanvasSettings, get_settings
from debug_trace import trace

# DOM-style button numbering used by the controller
_BUTTONS = {
    Qt.MouseButton.LeftButton: 0,
    Qt.MouseButton.MiddleButton: 1,
    Qt.MouseButton.RightButton: 2,
}

_CURSORS = {
    "ew-resize": Qt.CursorShape.SizeHorCursor,
    "ns-resize": Qt.CursorShape.SizeVerCursor,
    "nwse-resize": Qt.CursorShape.SizeFDiagCursor,
    "nesw-resize": Qt.CursorShape.SizeBDiagCursor,
    "move": Qt.CursorShape.SizeAllCursor,
    "crosshair": Qt.CursorShape.CrossCursor,
}


def _canvas_point(pos: QPointF):
    return round(pos.x()), round(pos.y())


def paint_snapshot(painter: QPainter, snapshot: VisualSnapshot, area: QRectF,
                   canvas: CanvasSettings) -> None:
    """Draw a snapshot with the configured palette."""
    colors = canvas.colors
    painter.fillRect(area, QColor(colors.background))

    painter.save()
    # Half-pixel offset keeps 1px strokes crisp
    painter.translate(0.5, 0.5)

    stroke = QColor(colors.stroke)
    painter.setPen(QPen(stroke, 1))
    painter.setBrush(Qt.BrushStyle.NoBrush)
    for x, y, w, h in snapshot.rectangles:
        painter.drawRect(QRectF(x, y, w, h))

    for (x1, y1), (x2, y2) in snapshot.links:
        painter.drawLine(QPointF(x1, y1), QPointF(x2, y2))

    if snapshot.preview is not None:
        (x1, y1), (x2, y2) = snapshot.preview
        painter.setPen(QPen(QColor(colors.preview), 1, Qt.PenStyle.DashLine))
        painter.drawLine(QPointF(x1, y1), QPointF(x2, y2))

    radius = canvas.points.radius
    painter.setPen(QPen(stroke, 1))
    painter.setBrush(QBrush(stroke))
    for x, y in snapshot.points:
        painter.drawEllipse(QPointF(x, y), radius, radius)

    if snapshot.selection is not None:
        x, y, w, h = snapshot.selection
        painter.setPen(QPen(QColor(colors.selection), 1, Qt.PenStyle.DashLine))
        painter.setBrush(Qt.BrushStyle.NoBrush)
        painter.drawRect(QRectF(x, y, w, h))

    painter.restore()


class BlockCanvasView(QWidget):
    """
    Canvas widget for editing a ``Diagram``.

    Left button drags and resizes; the right button opens the context menu
    offered by the controller.  Redraws are coalesced into one deferred
    ``update()`` per event-loop turn.
    """

    gesture_event = pyqtSignal(object)

    def __init__(self, diagram: Diagram, canvas_settings: Optional[CanvasSettings] = None,
                 parent=None):
        super().__init__(parent)
        self.canvas_settings = canvas_settings or get_settings().settings.canvas
        s = self.canvas_settings
        self.diagram = diagram
        self.scheduler = RedrawScheduler(lambda cb: QTimer.singleShot(0, cb), self.update)
        self.controller = GestureController(
            diagram,
            request_redraw=self.scheduler.request,
            on_event=self.gesture_event.emit,
            tolerance=s.handles.tolerance,
            dirty_requires_displacement=s.interaction.dirty_requires_displacement,
            block_size=(s.blocks.default_width, s.blocks.default_height),
        )
        self.setMouseTracking(True)
        self.setFocusPolicy(Qt.FocusPolicy.StrongFocus)

    def resizeEvent(self, event):
        super().resizeEvent(event)
        self.diagram.tree.set_canvas_size(self.width(), self.height())
        self.scheduler.request()

    def mousePressEvent(self, event):
        button = _BUTTONS.get(event.button())
        if button is None:
            super().mousePressEvent(event)
            return
        x, y = _canvas_point(event.position())
        self.controller.pointer_down(x, y, button)
        self._update_cursor(x, y)
        event.accept()

    def mouseMoveEvent(self, event):
        x, y = _canvas_point(event.position())
        self.controller.pointer_move(x, y)
        self._update_cursor(x, y)
        event.accept()

    def mouseReleaseEvent(self, event):
        if event.button() != Qt.MouseButton.LeftButton:
            super().mouseReleaseEvent(event)
            return
        x, y = _canvas_point(event.position())
        self.controller.pointer_up(x, y)
        self._update_cursor(x, y)
        event.accept()

    def contextMenuEvent(self, event):
        """Show the controller's context actions at the click position."""
        x, y = event.pos().x(), event.pos().y()
        menu = QMenu(self)
        for item in self.controller.context_action(x, y):
            act = QAction(item.label, menu)
            act.triggered.connect(lambda checked=False, it=item: it.action())
            menu.addAction(act)
        trace(f"context menu at ({x}, {y}) with {len(menu.actions())} action(s)", "VIEW")
        menu.exec(event.globalPos())
        event.accept()

    def _update_cursor(self, x: int, y: int):
        hint = self.controller.cursor_hint(x, y)
        if hint is None:
            self.unsetCursor()
        else:
            self.setCursor(_CURSORS[hint])

    def paintEvent(self, event):
        painter = QPainter(self)
        try:
            painter.setRenderHint(QPainter.RenderHint.Antialiasing, True)
            paint_snapshot(painter, self.controller.snapshot(), QRectF(self.rect()), self.canvas_settings)
        finally:
            painter.end()
