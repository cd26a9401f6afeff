"""Tests for the primitive tree: stack bounding boxes, key registration,
and the root-to-leaf hit path returned by find_at().
"""
from __future__ import annotations

import pytest

from canvas.primitives import (
    PrimitiveTree,
    RectPrimitive,
    StackPrimitive,
    absolute_bounds,
    absolute_position,
    find_at,
    keys_for_path,
    leaves,
    move_primitive,
)


def _tree(width=800, height=600):
    return PrimitiveTree(width, height)


# ─────────────────────────────────────────────────────────
# Stack bounds
# ─────────────────────────────────────────────────────────


class TestStackBounds:
    def test_bounding_box_of_children(self):
        stack = StackPrimitive(0, 0, [RectPrimitive(0, 0, 200, 30), RectPrimitive(0, 30, 30, 100)])
        assert (stack.width, stack.height) == (200, 130)

    def test_empty_stack_has_no_size(self):
        stack = StackPrimitive(10, 10)
        assert (stack.width, stack.height) == (0, 0)

    def test_add_and_remove_update_bounds(self):
        stack = StackPrimitive(0, 0, [RectPrimitive(0, 0, 20, 20)])
        extra = stack.add(RectPrimitive(50, 40, 10, 10))
        assert (stack.width, stack.height) == (60, 50)
        stack.remove(extra)
        assert (stack.width, stack.height) == (20, 20)
        assert extra.parent is None

    def test_offset_children_record_min(self):
        stack = StackPrimitive(0, 0, [RectPrimitive(10, 20, 30, 30)])
        assert (stack.min_x, stack.min_y) == (10, 20)
        assert (stack.width, stack.height) == (30, 30)

    def test_nested_bounds_refresh_upwards(self):
        inner = StackPrimitive(0, 0, [RectPrimitive(0, 0, 10, 10)])
        outer = StackPrimitive(0, 0, [inner])
        inner.add(RectPrimitive(0, 0, 40, 70))
        assert (outer.width, outer.height) == (40, 70)

    def test_move_refreshes_parent(self):
        rect = RectPrimitive(0, 0, 10, 10)
        stack = StackPrimitive(0, 0, [RectPrimitive(0, 0, 10, 10), rect])
        move_primitive(rect, 90, 0)
        assert stack.width == 100

    def test_child_cannot_have_two_parents(self):
        rect = RectPrimitive(0, 0, 10, 10)
        StackPrimitive(0, 0, [rect])
        with pytest.raises(ValueError):
            StackPrimitive(0, 0, [rect])

    def test_rejected_stack_attaches_nothing(self):
        free = RectPrimitive(0, 0, 10, 10)
        owned = RectPrimitive(0, 0, 10, 10)
        StackPrimitive(0, 0, [owned])
        with pytest.raises(ValueError):
            StackPrimitive(0, 0, [free, owned])
        assert free.parent is None

    def test_repeated_child_rejected(self):
        rect = RectPrimitive(0, 0, 10, 10)
        with pytest.raises(ValueError):
            StackPrimitive(0, 0, [rect, rect])
        assert rect.parent is None

    def test_child_stack_counts_with_its_extent(self):
        inner = StackPrimitive(-30, -20, [RectPrimitive(-10, -10, 20, 20)])
        outer = StackPrimitive(0, 0, [inner])
        assert (inner.min_x, inner.min_y) == (-10, -10)
        assert (outer.min_x, outer.min_y, outer.width, outer.height) == (-40, -30, 20, 20)

    def test_empty_child_stack_ignored(self):
        outer = StackPrimitive(0, 0, [RectPrimitive(10, 10, 20, 20), StackPrimitive(500, 500)])
        assert (outer.min_x, outer.width) == (10, 20)


# ─────────────────────────────────────────────────────────
# Tree registration
# ─────────────────────────────────────────────────────────


class TestTreeKeys:
    def test_duplicate_key_rejected(self):
        tree = _tree()
        tree.add(RectPrimitive(0, 0, 10, 10), key="a")
        with pytest.raises(ValueError):
            tree.add(RectPrimitive(20, 0, 10, 10), key="a")

    def test_lookup_both_ways(self):
        tree = _tree()
        rect = tree.add(RectPrimitive(0, 0, 10, 10), key="a")
        assert tree.key_of(rect) == "a"
        assert tree.primitive_for("a") is rect

    def test_remove_unregisters_subtree(self):
        tree = _tree()
        child = RectPrimitive(0, 0, 10, 10)
        stack = StackPrimitive(0, 0, [child])
        tree.add(stack, key="frame")
        tree._key_by_id[child.primitive_id] = "leaf"
        tree._primitive_by_key["leaf"] = child

        tree.remove(stack)
        assert tree.primitive_for("frame") is None
        assert tree.primitive_for("leaf") is None
        assert tree.top_level() == []
        assert not tree.owns(child)

    def test_remove_unknown_raises(self):
        tree = _tree()
        with pytest.raises(KeyError):
            tree.remove(RectPrimitive(0, 0, 10, 10))
        with pytest.raises(KeyError):
            tree.remove(tree.root)

    def test_leaves_in_drawing_order(self):
        tree = _tree()
        a = tree.add(RectPrimitive(0, 0, 10, 10))
        b = RectPrimitive(0, 0, 10, 10)
        tree.add(StackPrimitive(50, 50, [b]))
        c = tree.add(RectPrimitive(0, 0, 10, 10))
        assert list(leaves(tree)) == [a, b, c]


# ─────────────────────────────────────────────────────────
# find_at()
# ─────────────────────────────────────────────────────────


class TestFindAt:
    def test_outside_canvas_is_empty(self):
        tree = _tree(100, 100)
        tree.add(RectPrimitive(0, 0, 50, 50))
        assert find_at(tree, -1, 10) == []
        assert find_at(tree, 10, 101) == []

    def test_empty_space_returns_root_only(self):
        tree = _tree()
        tree.add(RectPrimitive(0, 0, 50, 50))
        assert find_at(tree, 300, 300) == [tree.root]

    def test_path_into_rect(self):
        tree = _tree()
        rect = tree.add(RectPrimitive(10, 10, 50, 50))
        assert find_at(tree, 20, 20) == [tree.root, rect]

    def test_boundary_is_inclusive(self):
        tree = _tree()
        rect = tree.add(RectPrimitive(10, 10, 50, 50))
        assert find_at(tree, 10, 10)[-1] is rect
        assert find_at(tree, 60, 60)[-1] is rect
        assert find_at(tree, 61, 60) == [tree.root]

    def test_topmost_child_wins(self):
        tree = _tree()
        tree.add(RectPrimitive(0, 0, 50, 50))
        top = tree.add(RectPrimitive(20, 20, 50, 50))
        assert find_at(tree, 30, 30)[-1] is top

    def test_nested_stack_translation(self):
        tree = _tree()
        inner_rect = RectPrimitive(0, 30, 30, 100)
        stack = tree.add(StackPrimitive(100, 100, [RectPrimitive(0, 0, 200, 30), inner_rect]))
        path = find_at(tree, 110, 200)
        assert path == [tree.root, stack, inner_rect]

    def test_stack_gap_stops_at_stack(self):
        tree = _tree()
        stack = tree.add(StackPrimitive(0, 0, [RectPrimitive(0, 0, 10, 10), RectPrimitive(90, 90, 10, 10)]))
        assert find_at(tree, 50, 50) == [tree.root, stack]

    def test_nested_stack_with_negative_offsets(self):
        tree = _tree()
        leaf = RectPrimitive(-10, -10, 20, 20)
        inner = StackPrimitive(-30, -20, [leaf])
        outer = tree.add(StackPrimitive(100, 100, [inner]))

        # Leaf sits at (60, 70)-(80, 90) on the canvas
        assert find_at(tree, 65, 75) == [tree.root, outer, inner, leaf]
        assert find_at(tree, 60, 70)[-1] is leaf
        assert find_at(tree, 85, 75) == [tree.root]
        assert absolute_bounds(outer) == (60, 70, 20, 20)
        assert absolute_bounds(inner) == (60, 70, 20, 20)
        assert absolute_bounds(leaf) == (60, 70, 20, 20)

    def test_empty_stack_is_not_hit(self):
        tree = _tree()
        tree.add(StackPrimitive(0, 0))
        assert find_at(tree, 0, 0) == [tree.root]

    def test_keys_for_path(self):
        tree = _tree()
        inner = RectPrimitive(0, 0, 40, 40)
        tree.add(StackPrimitive(10, 10, [inner]), key="frame")
        tree._key_by_id[inner.primitive_id] = "leaf"
        tree._primitive_by_key["leaf"] = inner
        assert keys_for_path(tree, find_at(tree, 20, 20)) == ["frame", "leaf"]


class TestAbsoluteGeometry:
    def test_absolute_position_sums_parents(self):
        rect = RectPrimitive(5, 6, 10, 10)
        inner = StackPrimitive(10, 20, [rect])
        StackPrimitive(100, 200, [inner])
        assert absolute_position(rect) == (115, 226)

    def test_absolute_bounds_of_offset_stack(self):
        tree = _tree()
        stack = tree.add(StackPrimitive(100, 100, [RectPrimitive(10, 20, 30, 40)]))
        assert absolute_bounds(stack) == (110, 120, 30, 40)
