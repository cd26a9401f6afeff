"""
canvas package

Headless interaction engine (primitive tree, handle resolution, gesture
state machine) plus the PyQt6 widget that hosts it.

The Qt view is not imported here so the engine can be used without a GUI;
import it from ``canvas.view``.
"""

from canvas.primitives import (
    PrimitiveTree,
    RectPrimitive,
    StackPrimitive,
    find_at,
    keys_for_path,
)
from canvas.handles import BlockBorder, find_block_border, find_handle
from canvas.diagram import Diagram
from canvas.gesture import (
    ConnectionCancelled,
    ContextMenuItem,
    EmptySpaceClicked,
    GestureController,
    LinkCreated,
    PrimitiveClicked,
)
from canvas.render_state import RedrawScheduler, VisualSnapshot

__all__ = [
    "PrimitiveTree",
    "RectPrimitive",
    "StackPrimitive",
    "find_at",
    "keys_for_path",
    "BlockBorder",
    "find_block_border",
    "find_handle",
    "Diagram",
    "ConnectionCancelled",
    "ContextMenuItem",
    "EmptySpaceClicked",
    "GestureController",
    "LinkCreated",
    "PrimitiveClicked",
    "RedrawScheduler",
    "VisualSnapshot",
]
