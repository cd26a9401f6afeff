"""
canvas/diagram.py

The diagram document: blocks, links, and the primitive tree they are
hit-tested through.
"""

from __future__ import annotations

import logging
from typing import Dict, Hashable, List, Optional, Sequence, Tuple, Union

from models import (
    Block,
    ConnectionPoint,
    Handle,
    Link,
    Rectangle,
    DEFAULT_BLOCK_HEIGHT,
    DEFAULT_BLOCK_WIDTH,
)
from canvas.primitives import (
    Primitive,
    PrimitiveTree,
    RectPrimitive,
    StackPrimitive,
    absolute_bounds,
    leaves,
    move_primitive,
    refresh_bounds,
)
from canvas.render_state import Bounds, Line, VisualSnapshot
from debug_trace import trace, trace_call

log = logging.getLogger(__name__)

# Title bar over three columns; used by the "Create new frame" action.
FRAME_TEMPLATE: Tuple[Bounds, ...] = (
    (0, 0, 200, 30),
    (0, 30, 30, 100),
    (170, 30, 30, 100),
    (30, 30, 140, 100),
)

RectLike = Union[Bounds, RectPrimitive]


class Diagram:
    """Blocks and links on a canvas of the given size.

    Every block's rectangle is registered in ``tree`` as a top-level leaf
    keyed by the block id, so pointer hits resolve back to blocks.
    """

    def __init__(self, width: int = 800, height: int = 600):
        self.tree = PrimitiveTree(width, height)
        self.blocks: List[Block] = []
        self.links: List[Link] = []
        self._id_counter = 1
        self._block_by_id: Dict[str, Block] = {}

    def _new_block_id(self) -> str:
        """Generate a new unique block ID, skipping keys already in the tree."""
        while True:
            s = f"b{self._id_counter:06d}"
            self._id_counter += 1
            if self.tree.primitive_for(s) is None:
                return s

    # ---- creation / removal ----

    @trace_call("DIAGRAM")
    def create_block(self, x: int, y: int, width: int = DEFAULT_BLOCK_WIDTH,
                     height: int = DEFAULT_BLOCK_HEIGHT) -> Block:
        """Create a block with its top-left corner at (x, y)."""
        block = Block(self._new_block_id(), Rectangle(x, y, width, height))
        # Register in the tree first; it rejects duplicate keys
        self.tree.add(RectPrimitive.sharing(block.rectangle), key=block.block_id)
        self.blocks.append(block)
        self._block_by_id[block.block_id] = block
        trace(f"created {block!r}", "DIAGRAM")
        return block

    @trace_call("DIAGRAM")
    def create_stack(self, x: int, y: int, rectangles: Sequence[RectLike],
                     key: Optional[Hashable] = None) -> StackPrimitive:
        """Create a stack at (x, y) from rectangles in stack-local space.

        Args:
            x: Stack origin x on the canvas.
            y: Stack origin y on the canvas.
            rectangles: ``(x, y, w, h)`` tuples or ready-made leaf primitives.
            key: Optional application key for click resolution.

        Raises:
            ValueError: ``rectangles`` is empty or ``key`` is taken.
        """
        if not rectangles:
            raise ValueError("a stack needs at least one rectangle")
        children = [r if isinstance(r, RectPrimitive) else RectPrimitive(*r) for r in rectangles]
        stack = StackPrimitive(x, y, children)
        self.tree.add(stack, key=key)
        trace(f"created {stack!r} key={key!r}", "DIAGRAM")
        return stack

    @trace_call("DIAGRAM")
    def remove_block(self, block: Block) -> List[Link]:
        """Remove ``block`` and every link touching one of its points.

        Returns:
            The links that were removed along with the block.

        Raises:
            KeyError: ``block`` is not part of this diagram.
        """
        if self._block_by_id.get(block.block_id) is not block:
            raise KeyError(block.block_id)
        dropped = [link for link in self.links
                   if any(block.owns(p) for p in link.endpoints())]
        self.links = [link for link in self.links if link not in dropped]
        self.blocks.remove(block)
        del self._block_by_id[block.block_id]
        self.tree.remove(self.tree.primitive_for(block.block_id))
        trace(f"removed {block!r} with {len(dropped)} link(s)", "DIAGRAM")
        return dropped

    # ---- geometry edits ----

    def move_block(self, block: Block, x: int, y: int) -> None:
        """Move ``block`` and refresh the bounds of the stacks above it."""
        move_primitive(self._primitive_of(block), x, y)

    def resize_block(self, block: Block, handle: Handle, x: int, y: int) -> None:
        """Resize ``block`` by ``handle`` and refresh the enclosing bounds."""
        primitive = self._primitive_of(block)
        block.resize_to(handle, x, y)
        refresh_bounds(primitive.parent)

    def _primitive_of(self, block: Block) -> RectPrimitive:
        primitive = self.tree.primitive_for(block.block_id)
        if primitive is None or self._block_by_id.get(block.block_id) is not block:
            raise KeyError(block.block_id)
        return primitive

    # ---- lookup ----

    def block_for_key(self, key: Hashable) -> Optional[Block]:
        return self._block_by_id.get(key)

    def block_for_primitive(self, primitive: Primitive) -> Optional[Block]:
        key = self.tree.key_of(primitive)
        return self._block_by_id.get(key) if key is not None else None

    def block_for_path(self, path: Sequence[Primitive]) -> Optional[Block]:
        """Innermost block on a hit path, if any."""
        for primitive in reversed(path):
            block = self.block_for_primitive(primitive)
            if block is not None:
                return block
        return None

    def owner_of(self, point: ConnectionPoint) -> Optional[Block]:
        for block in self.blocks:
            if block.owns(point):
                return block
        return None

    # ---- connections ----

    def add_connection_point(self, block: Block, point: ConnectionPoint) -> ConnectionPoint:
        if self._block_by_id.get(block.block_id) is not block:
            raise KeyError(block.block_id)
        return block.add_point(point)

    def connect(self, a: ConnectionPoint, b: ConnectionPoint) -> Optional[Link]:
        """Link two attached points on different blocks.

        Returns None when either point is unattached or both sit on the same
        block.  Linking an already linked pair returns the existing link.
        """
        owner_a, owner_b = self.owner_of(a), self.owner_of(b)
        if owner_a is None or owner_b is None:
            log.warning("connect() called with an unattached connection point")
            return None
        if owner_a is owner_b:
            return None
        link = Link(a, b)
        for existing in self.links:
            if existing == link:
                return existing
        self.links.append(link)
        trace(f"linked {owner_a.block_id} <-> {owner_b.block_id}", "DIAGRAM")
        return link

    def point_position(self, point: ConnectionPoint) -> Optional[Tuple[int, int]]:
        owner = self.owner_of(point)
        return owner.point_position(point) if owner is not None else None

    # ---- rendering ----

    def snapshot(self, preview: Optional[Line] = None,
                 selection: Optional[Bounds] = None) -> VisualSnapshot:
        """Build the render snapshot from current geometry."""
        rectangles = tuple(absolute_bounds(leaf) for leaf in leaves(self.tree))
        points = tuple(block.point_position(p) for block in self.blocks for p in block.points)
        links = []
        for link in self.links:
            ends = [self.point_position(p) for p in link.endpoints()]
            if None not in ends:
                links.append((ends[0], ends[1]))
        return VisualSnapshot(
            rectangles=rectangles,
            points=points,
            links=tuple(links),
            preview=preview,
            selection=selection,
        )
