"""
canvas/render_state.py

Renderer-facing state: an immutable snapshot of what to draw, and a
scheduler that coalesces redraw requests into a single deferred render.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional, Tuple

Point = Tuple[int, int]
Line = Tuple[Point, Point]
Bounds = Tuple[int, int, int, int]


@dataclass(frozen=True)
class VisualSnapshot:
    """Everything a renderer needs, in canvas coordinates.

    Attributes:
        rectangles: ``(x, y, w, h)`` of every leaf rectangle, bottom to top.
        points: Positions of all connection points.
        links: Endpoint pairs of all links.
        preview: In-progress connection line, if a connection is being drawn.
        selection: Bounds of the primitive being dragged or resized.
    """
    rectangles: Tuple[Bounds, ...] = ()
    points: Tuple[Point, ...] = ()
    links: Tuple[Line, ...] = ()
    preview: Optional[Line] = None
    selection: Optional[Bounds] = None


class RedrawScheduler:
    """Coalesce redraw requests until the scheduled render runs.

    ``schedule`` receives a zero-argument callable to run later (in Qt,
    ``QTimer.singleShot(0, cb)``).  Requests made while one is pending are
    dropped; ``render`` reads whatever state is current when it runs.
    """

    def __init__(self, schedule: Callable[[Callable[[], None]], None],
                 render: Callable[[], None]):
        self._schedule = schedule
        self._render = render
        self._pending = False

    @property
    def pending(self) -> bool:
        return self._pending

    def request(self) -> bool:
        """Ask for a redraw. Returns True if a new render was scheduled."""
        if self._pending:
            return False
        self._pending = True
        self._schedule(self._run)
        return True

    def _run(self) -> None:
        self._pending = False
        self._render()
