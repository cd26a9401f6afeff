"""
canvas/gesture.py

Pointer gesture state machine.

Consumes pointer-down / move / up events and runs at most one interaction
at a time: dragging a top-level primitive, resizing a block through one of
its border handles, or drawing a connection from a block border to another
block.  A press that starts none of these is reported as a click on
release.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Hashable, List, Optional, Tuple, Union

from models import Block, ConnectionPoint, Handle, Link, RESIZE_HANDLE_HALF_WIDTH
from canvas.diagram import Diagram, FRAME_TEMPLATE
from canvas.handles import (
    CONNECT_CURSOR,
    MOVE_CURSOR,
    cursor_for_handle,
    find_block_border,
)
from canvas.primitives import (
    Primitive,
    absolute_bounds,
    find_at,
    keys_for_path,
    move_primitive,
)
from canvas.render_state import VisualSnapshot
from debug_trace import trace

PRIMARY_BUTTON = 0

CREATE_BLOCK_LABEL = "Create new block"
CREATE_FRAME_LABEL = "Create new frame"
ADD_CONNECTION_LABEL = "Add connection point starting here"
DELETE_BLOCK_LABEL = "Delete block"


# ----------------------------
# Gesture states
# ----------------------------

@dataclass
class Idle:
    pass


@dataclass
class Dragging:
    target: Primitive
    offset_x: int
    offset_y: int
    dirty: bool = False


@dataclass
class Resizing:
    block: Block
    handle: Handle


@dataclass
class Connecting:
    source_block: Block
    source_point: ConnectionPoint
    pointer_x: int
    pointer_y: int


GestureState = Union[Idle, Dragging, Resizing, Connecting]


# ----------------------------
# Gesture events
# ----------------------------

@dataclass(frozen=True)
class EmptySpaceClicked:
    x: int
    y: int


@dataclass(frozen=True)
class PrimitiveClicked:
    keys: Tuple[Hashable, ...]


@dataclass(frozen=True)
class LinkCreated:
    link: Link


@dataclass(frozen=True)
class ConnectionCancelled:
    pass


GestureEvent = Union[EmptySpaceClicked, PrimitiveClicked, LinkCreated, ConnectionCancelled]


@dataclass
class ContextMenuItem:
    """One entry offered by ``GestureController.context_action``."""
    label: str
    action: Callable[[], None]


class GestureController:
    """Turns pointer input into edits on a ``Diagram``.

    Args:
        diagram: Document being edited.
        request_redraw: Called after every visible change; expected to
            coalesce (see ``RedrawScheduler``).
        on_event: Receives clicks and connection outcomes.
        tolerance: Handle tolerance in pixels.
        dirty_requires_displacement: When True, a drag only suppresses the
            click if the target actually moved.
        block_size: ``(width, height)`` of blocks created from the context menu.
    """

    def __init__(
        self,
        diagram: Diagram,
        request_redraw: Optional[Callable[[], None]] = None,
        on_event: Optional[Callable[[GestureEvent], None]] = None,
        tolerance: float = RESIZE_HANDLE_HALF_WIDTH,
        dirty_requires_displacement: bool = False,
        block_size: Optional[Tuple[int, int]] = None,
    ):
        self.diagram = diagram
        self.state: GestureState = Idle()
        self.tolerance = tolerance
        self.dirty_requires_displacement = dirty_requires_displacement
        self.block_size = block_size
        self._request_redraw = request_redraw
        self._on_event = on_event
        self._press: Optional[Tuple[int, int]] = None

    def _redraw(self):
        if self._request_redraw:
            self._request_redraw()

    def _emit(self, event: Optional[GestureEvent]) -> Optional[GestureEvent]:
        if event is not None and self._on_event:
            self._on_event(event)
        return event

    def _find_drag_target(self, x: int, y: int) -> Optional[Primitive]:
        # Top-level primitive on the hit path; children drag their stack.
        path = find_at(self.diagram.tree, x, y)
        return path[1] if len(path) > 1 else None

    def _click_at(self, x: int, y: int) -> GestureEvent:
        path = find_at(self.diagram.tree, x, y)
        if len(path) > 1:
            return PrimitiveClicked(tuple(keys_for_path(self.diagram.tree, path)))
        return EmptySpaceClicked(x, y)

    # ---- pointer input ----

    def pointer_down(self, x: int, y: int, button: int = PRIMARY_BUTTON) -> bool:
        """Start a gesture. Returns True if a drag or resize began."""
        if button != PRIMARY_BUTTON:
            return False
        if not isinstance(self.state, Idle):
            trace(f"pointer down at ({x}, {y}) ignored during {type(self.state).__name__}", "GESTURE")
            return False

        border = find_block_border(self.diagram.blocks, x, y, self.tolerance)
        if border is not None:
            self.state = Resizing(border.block, border.handle)
            trace(f"resize block {border.block.block_id} by {border.handle.value}", "GESTURE")
            self._redraw()
            return True

        target = self._find_drag_target(x, y)
        if target is not None:
            self.state = Dragging(target, x - target.x, y - target.y)
            trace(f"drag {target!r}", "GESTURE")
            self._redraw()
            return True

        trace(f"nothing to drag or resize at ({x}, {y})", "GESTURE")
        self._press = (x, y)
        return False

    def pointer_move(self, x: int, y: int) -> None:
        state = self.state
        if isinstance(state, Dragging):
            before = (state.target.x, state.target.y)
            move_primitive(state.target, x - state.offset_x, y - state.offset_y)
            if not self.dirty_requires_displacement or (state.target.x, state.target.y) != before:
                state.dirty = True
            trace(f"drag to ({x}, {y})", "MOVE")
            self._redraw()
        elif isinstance(state, Resizing):
            self.diagram.resize_block(state.block, state.handle, x, y)
            trace(f"resize to ({x}, {y})", "MOVE")
            self._redraw()
        elif isinstance(state, Connecting):
            state.pointer_x = x
            state.pointer_y = y
            self._redraw()

    def pointer_up(self, x: int, y: int) -> Optional[GestureEvent]:
        """Finish the active gesture; return the resulting event, if any."""
        state = self.state
        pressed = self._press
        self.state = Idle()
        self._press = None

        event: Optional[GestureEvent] = None
        if isinstance(state, Dragging):
            trace(f"release {state.target!r} dirty={state.dirty}", "GESTURE")
            if not state.dirty:
                event = self._click_at(x, y)
        elif isinstance(state, Resizing):
            trace(f"release block {state.block.block_id}", "GESTURE")
        elif isinstance(state, Connecting):
            event = self._finish_connection(state, x, y)
        elif pressed is not None:
            event = self._click_at(x, y)
        else:
            return None

        self._redraw()
        return self._emit(event)

    def _finish_connection(self, state: Connecting, x: int, y: int) -> GestureEvent:
        target = self.diagram.block_for_path(find_at(self.diagram.tree, x, y))
        if target is None or target is state.source_block:
            trace(f"connection from {state.source_block.block_id} cancelled", "GESTURE")
            return ConnectionCancelled()

        source_point = self.diagram.add_connection_point(state.source_block, state.source_point)
        target_point = self.diagram.add_connection_point(
            target, ConnectionPoint.on_border(target.rectangle, x, y))
        link = self.diagram.connect(source_point, target_point)
        return LinkCreated(link)

    # ---- context actions ----

    def context_action(self, x: int, y: int) -> List[ContextMenuItem]:
        """Return the actions available at (x, y)."""
        items = [
            ContextMenuItem(CREATE_BLOCK_LABEL, lambda: self.create_block_at(x, y)),
            ContextMenuItem(CREATE_FRAME_LABEL, lambda: self.create_frame_at(x, y)),
        ]
        border = find_block_border(self.diagram.blocks, x, y, self.tolerance)
        if border is not None:
            items.append(ContextMenuItem(
                ADD_CONNECTION_LABEL, lambda: self.start_connection(border.block, x, y)))

        block = border.block if border is not None else self.diagram.block_for_path(
            find_at(self.diagram.tree, x, y))
        if block is not None:
            items.append(ContextMenuItem(DELETE_BLOCK_LABEL, lambda: self.delete_block(block)))
        return items

    def create_block_at(self, x: int, y: int) -> Block:
        if self.block_size is not None:
            block = self.diagram.create_block(x, y, *self.block_size)
        else:
            block = self.diagram.create_block(x, y)
        self._redraw()
        return block

    def create_frame_at(self, x: int, y: int):
        stack = self.diagram.create_stack(x, y, FRAME_TEMPLATE)
        self._redraw()
        return stack

    def start_connection(self, block: Block, x: int, y: int) -> bool:
        """Begin drawing a link from the border of ``block`` near (x, y)."""
        if not isinstance(self.state, Idle):
            return False
        point = ConnectionPoint.on_border(block.rectangle, x, y)
        self.state = Connecting(block, point, x, y)
        trace(f"connect from {block.block_id} {point.side.value}@{point.fraction:.2f}", "GESTURE")
        self._redraw()
        return True

    def delete_block(self, block: Block) -> None:
        state = self.state
        if ((isinstance(state, Resizing) and state.block is block)
                or (isinstance(state, Connecting) and state.source_block is block)
                or (isinstance(state, Dragging) and self.diagram.block_for_primitive(state.target) is block)):
            self.state = Idle()
        self.diagram.remove_block(block)
        self._redraw()

    # ---- renderer / hover support ----

    def cursor_hint(self, x: int, y: int) -> Optional[str]:
        """Cursor name to show at (x, y), or None for the default cursor."""
        state = self.state
        if isinstance(state, Resizing):
            return cursor_for_handle(state.handle)
        if isinstance(state, Dragging):
            return MOVE_CURSOR
        if isinstance(state, Connecting):
            return CONNECT_CURSOR
        border = find_block_border(self.diagram.blocks, x, y, self.tolerance)
        if border is not None:
            return cursor_for_handle(border.handle)
        if self._find_drag_target(x, y) is not None:
            return MOVE_CURSOR
        return None

    def snapshot(self) -> VisualSnapshot:
        """Current visual state including gesture previews."""
        state = self.state
        preview = None
        selection = None
        if isinstance(state, Connecting):
            start = state.source_point.position(state.source_block.rectangle)
            preview = (start, (state.pointer_x, state.pointer_y))
        elif isinstance(state, Dragging):
            selection = absolute_bounds(state.target)
        elif isinstance(state, Resizing):
            selection = state.block.rectangle.as_tuple()
        return self.diagram.snapshot(preview=preview, selection=selection)
