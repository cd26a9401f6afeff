"""
canvas/primitives.py

Primitive tree for the canvas: leaf rectangles and stacks, bounding-box
maintenance, and pointer hit-testing.

Primitives form a closed set tagged by ``kind`` ("rect" or "stack").  The
tree-walking functions here switch on that tag rather than relying on
per-class overrides.
"""

from __future__ import annotations

import itertools
from typing import Dict, Hashable, Iterator, List, Optional, Sequence, Tuple, Union

from models import Rectangle

RECT = "rect"
STACK = "stack"

_primitive_ids = itertools.count(1)


class RectPrimitive:
    """Leaf primitive backed by a ``Rectangle``.

    The rectangle may be shared with a ``Block``, in which case the tree
    always sees the block's live geometry.
    """

    kind = RECT

    def __init__(self, x: int = 0, y: int = 0, width: int = 100, height: int = 100,
                 rect: Optional[Rectangle] = None):
        self.primitive_id = next(_primitive_ids)
        self.parent: Optional["StackPrimitive"] = None
        self.rect = rect if rect is not None else Rectangle(x, y, width, height)

    @classmethod
    def sharing(cls, rect: Rectangle) -> "RectPrimitive":
        return cls(rect=rect)

    @property
    def x(self) -> int:
        return self.rect.x

    @property
    def y(self) -> int:
        return self.rect.y

    @property
    def width(self) -> int:
        return self.rect.width

    @property
    def height(self) -> int:
        return self.rect.height

    def __repr__(self) -> str:
        return f"RectPrimitive(#{self.primitive_id}, {self.x}, {self.y}, {self.width}x{self.height})"


class StackPrimitive:
    """Composite primitive whose size is the bounding box of its children.

    ``x``/``y`` is the stack origin in its parent's space; children are laid
    out in the stack's local space.  ``min_x``/``min_y`` record where the
    bounding box starts locally, so a stack whose children do not begin at
    (0, 0) is still hit-tested over its real extent.  A child stack counts
    with its own extent (``x + min_x``), and empty child stacks are ignored.
    """

    kind = STACK

    def __init__(self, x: int = 0, y: int = 0, children: Sequence["Primitive"] = ()):
        self.primitive_id = next(_primitive_ids)
        self.parent: Optional["StackPrimitive"] = None
        self.x = x
        self.y = y
        self.children: List[Primitive] = []
        self.min_x = 0
        self.min_y = 0
        self.width = 0
        self.height = 0
        # Validate everything before attaching anything
        children = list(children)
        for child in children:
            _check_unparented(child)
        if len({id(c) for c in children}) != len(children):
            raise ValueError("a primitive can appear only once in a stack")
        for child in children:
            self._attach(child)
        self.recompute_bounds()

    def _attach(self, child: "Primitive") -> None:
        _check_unparented(child)
        child.parent = self
        self.children.append(child)

    def add(self, child: "Primitive") -> "Primitive":
        """Append ``child`` on top of the existing children."""
        self._attach(child)
        refresh_bounds(self)
        return child

    def remove(self, child: "Primitive") -> None:
        self.children.remove(child)
        child.parent = None
        refresh_bounds(self)

    def recompute_bounds(self) -> None:
        """Recompute size from the direct children's local extents."""
        extents = [local_extent(c) for c in self.children if not _is_empty_stack(c)]
        if not extents:
            self.min_x = self.min_y = 0
            self.width = self.height = 0
            return
        self.min_x = min(e[0] for e in extents)
        self.min_y = min(e[1] for e in extents)
        self.width = max(e[2] for e in extents) - self.min_x
        self.height = max(e[3] for e in extents) - self.min_y

    def __repr__(self) -> str:
        return (f"StackPrimitive(#{self.primitive_id}, {self.x}, {self.y}, "
                f"{self.width}x{self.height}, children={len(self.children)})")


Primitive = Union[RectPrimitive, StackPrimitive]


def _check_unparented(child: Primitive) -> None:
    if child.parent is not None:
        raise ValueError(f"{child!r} already belongs to {child.parent!r}")


def _is_empty_stack(primitive: Primitive) -> bool:
    return primitive.kind == STACK and not primitive.children


def local_extent(primitive: Primitive) -> Tuple[int, int, int, int]:
    """(left, top, right, bottom) of the primitive in its parent's space."""
    if primitive.kind == RECT:
        left, top = primitive.x, primitive.y
    elif primitive.kind == STACK:
        left, top = primitive.x + primitive.min_x, primitive.y + primitive.min_y
    else:
        raise ValueError(f"unknown primitive kind: {primitive.kind!r}")
    return left, top, left + primitive.width, top + primitive.height


def refresh_bounds(stack: Optional[StackPrimitive]) -> None:
    """Recompute ``stack`` and every enclosing stack, innermost first."""
    while stack is not None:
        stack.recompute_bounds()
        stack = stack.parent


def move_primitive(primitive: Primitive, x: int, y: int) -> None:
    """Move a primitive's origin within its parent's space."""
    if primitive.kind == RECT:
        primitive.rect.move_to(x, y)
    elif primitive.kind == STACK:
        primitive.x = x
        primitive.y = y
    else:
        raise ValueError(f"unknown primitive kind: {primitive.kind!r}")
    refresh_bounds(primitive.parent)


def contains_local(primitive: Primitive, lx: float, ly: float) -> bool:
    """Inclusive bounds test in the primitive's parent space."""
    if _is_empty_stack(primitive):
        return False
    left, top, right, bottom = local_extent(primitive)
    return left <= lx <= right and top <= ly <= bottom


def walk(primitive: Primitive) -> Iterator[Primitive]:
    """Yield ``primitive`` and all its descendants, depth first."""
    yield primitive
    if primitive.kind == STACK:
        for child in primitive.children:
            yield from walk(child)


class PrimitiveTree:
    """Root stack covering the canvas plus the primitive ↔ key index."""

    def __init__(self, width: int, height: int):
        self.width = width
        self.height = height
        self.root = StackPrimitive(0, 0)
        self._key_by_id: Dict[int, Hashable] = {}
        self._primitive_by_key: Dict[Hashable, Primitive] = {}

    def set_canvas_size(self, width: int, height: int) -> None:
        self.width = width
        self.height = height

    def add(self, primitive: Primitive, key: Optional[Hashable] = None,
            parent: Optional[StackPrimitive] = None) -> Primitive:
        """Attach ``primitive`` under ``parent`` (the root by default).

        Raises:
            ValueError: ``key`` is already used by another primitive.
        """
        if key is not None and key in self._primitive_by_key:
            raise ValueError(f"duplicate primitive key: {key!r}")
        (parent or self.root).add(primitive)
        if key is not None:
            self._key_by_id[primitive.primitive_id] = key
            self._primitive_by_key[key] = primitive
        return primitive

    def remove(self, primitive: Primitive) -> None:
        """Detach ``primitive`` and forget the keys of its whole subtree.

        Raises:
            KeyError: ``primitive`` is not part of this tree.
        """
        if primitive is self.root or not self.owns(primitive):
            raise KeyError(primitive)
        primitive.parent.remove(primitive)
        for p in walk(primitive):
            key = self._key_by_id.pop(p.primitive_id, None)
            if key is not None:
                del self._primitive_by_key[key]

    def owns(self, primitive: Primitive) -> bool:
        node = primitive
        while node.parent is not None:
            node = node.parent
        return node is self.root

    def key_of(self, primitive: Primitive) -> Optional[Hashable]:
        return self._key_by_id.get(primitive.primitive_id)

    def primitive_for(self, key: Hashable) -> Optional[Primitive]:
        return self._primitive_by_key.get(key)

    def top_level(self) -> List[Primitive]:
        return list(self.root.children)


def find_at(tree: PrimitiveTree, px: float, py: float) -> List[Primitive]:
    """Return the root-to-leaf path of primitives containing (px, py).

    The root is included whenever the point lies on the canvas.  At each
    level the topmost (last added) child containing the point is followed,
    with the point translated into each stack's local space on the way down.
    """
    if not (0 <= px <= tree.width and 0 <= py <= tree.height):
        return []

    node = tree.root
    path: List[Primitive] = [node]
    lx, ly = px - node.x, py - node.y
    while node.kind == STACK:
        hit = None
        for child in reversed(node.children):
            if contains_local(child, lx, ly):
                hit = child
                break
        if hit is None:
            break
        path.append(hit)
        if hit.kind == STACK:
            lx -= hit.x
            ly -= hit.y
        node = hit
    return path


def keys_for_path(tree: PrimitiveTree, path: Sequence[Primitive]) -> List[Hashable]:
    """Map a hit path to the keys of its keyed primitives, root first."""
    return [k for k in (tree.key_of(p) for p in path) if k is not None]


def absolute_position(primitive: Primitive) -> Tuple[int, int]:
    """Origin of ``primitive`` in canvas space."""
    x, y = primitive.x, primitive.y
    parent = primitive.parent
    while parent is not None:
        x += parent.x
        y += parent.y
        parent = parent.parent
    return x, y


def absolute_bounds(primitive: Primitive) -> Tuple[int, int, int, int]:
    """Canvas-space ``(x, y, width, height)`` of the primitive's extent."""
    x, y = absolute_position(primitive)
    if primitive.kind == STACK:
        x += primitive.min_x
        y += primitive.min_y
    return x, y, primitive.width, primitive.height


def leaves(tree: PrimitiveTree) -> Iterator[RectPrimitive]:
    """Yield every leaf rectangle in drawing order."""
    for p in walk(tree.root):
        if p.kind == RECT:
            yield p
