"""
canvas/handles.py

Resize-handle resolution: which of the eight border handles (if any) a
pointer is over, with a pixel tolerance around each edge.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

from models import Block, Handle, Rectangle, RESIZE_HANDLE_HALF_WIDTH


def find_handle(rect: Rectangle, px: float, py: float,
                tolerance: float = RESIZE_HANDLE_HALF_WIDTH) -> Optional[Handle]:
    """Return the handle of ``rect`` under (px, py), or None.

    An edge is "near" when the pointer is within ``tolerance`` of it and
    inside the edge's span widened by ``tolerance`` at both ends.  Two
    adjacent near edges make a corner.
    """
    within_x = rect.left - tolerance < px < rect.right + tolerance
    within_y = rect.top - tolerance < py < rect.bottom + tolerance
    near_top = abs(rect.top - py) <= tolerance and within_x
    near_bottom = abs(rect.bottom - py) <= tolerance and within_x
    near_left = abs(rect.left - px) <= tolerance and within_y
    near_right = abs(rect.right - px) <= tolerance and within_y

    if near_top and near_left:
        return Handle.TOP_LEFT
    if near_top and near_right:
        return Handle.TOP_RIGHT
    if near_bottom and near_left:
        return Handle.BOTTOM_LEFT
    if near_bottom and near_right:
        return Handle.BOTTOM_RIGHT
    if near_top and not near_left and not near_right:
        return Handle.TOP
    if near_right and not near_top and not near_bottom:
        return Handle.RIGHT
    if near_bottom and not near_left and not near_right:
        return Handle.BOTTOM
    if near_left and not near_top and not near_bottom:
        return Handle.LEFT
    return None


@dataclass
class BlockBorder:
    """A block together with the handle the pointer is over."""
    block: Block
    handle: Handle


def find_block_border(blocks: Iterable[Block], px: float, py: float,
                      tolerance: float = RESIZE_HANDLE_HALF_WIDTH) -> Optional[BlockBorder]:
    """First block, in insertion order, with a handle under the pointer."""
    for block in blocks:
        handle = find_handle(block.rectangle, px, py, tolerance)
        if handle is not None:
            return BlockBorder(block, handle)
    return None


# ----------------------------
# Cursor hints
# ----------------------------

MOVE_CURSOR = "move"
CONNECT_CURSOR = "crosshair"

_CURSOR_FOR_HANDLE = {
    Handle.LEFT: "ew-resize",
    Handle.TOP_LEFT: "nwse-resize",
    Handle.TOP: "ns-resize",
    Handle.TOP_RIGHT: "nesw-resize",
    Handle.RIGHT: "ew-resize",
    Handle.BOTTOM_RIGHT: "nwse-resize",
    Handle.BOTTOM: "ns-resize",
    Handle.BOTTOM_LEFT: "nesw-resize",
}


def cursor_for_handle(handle: Handle) -> str:
    return _CURSOR_FOR_HANDLE[handle]
