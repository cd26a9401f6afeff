"""Tests for Rectangle geometry: containment, moving, and handle resizing
with the minimum-size clamp.
"""
from __future__ import annotations

import pytest

from models import Handle, Rectangle, MIN_SIZE


# Edges each handle is allowed to move; the rest must stay put.
MOVING_EDGES = {
    Handle.LEFT: {"left"},
    Handle.TOP: {"top"},
    Handle.RIGHT: {"right"},
    Handle.BOTTOM: {"bottom"},
    Handle.TOP_LEFT: {"top", "left"},
    Handle.TOP_RIGHT: {"top", "right"},
    Handle.BOTTOM_RIGHT: {"bottom", "right"},
    Handle.BOTTOM_LEFT: {"bottom", "left"},
}

POINTERS = [(-40, -40), (0, 0), (10, 10), (48, 2), (53, 53), (100, 120), (120, -5)]


def _edges(r: Rectangle):
    return {"left": r.left, "top": r.top, "right": r.right, "bottom": r.bottom}


# ─────────────────────────────────────────────────────────
# Construction and derived edges
# ─────────────────────────────────────────────────────────


class TestConstruction:
    def test_derived_edges(self):
        r = Rectangle(10, 20, 30, 40)
        assert (r.left, r.top, r.right, r.bottom) == (10, 20, 40, 60)

    def test_small_size_clamped(self):
        r = Rectangle(0, 0, 1, -3)
        assert r.width == MIN_SIZE
        assert r.height == MIN_SIZE
        assert r.right - r.left == r.width

    def test_copy_is_independent(self):
        r = Rectangle(1, 2, 30, 40)
        c = r.copy()
        c.move_to(100, 100)
        assert r.as_tuple() == (1, 2, 30, 40)


# ─────────────────────────────────────────────────────────
# contains()
# ─────────────────────────────────────────────────────────


class TestContains:
    @pytest.mark.parametrize("pt", [(0, 25), (50, 25), (25, 0), (25, 50), (0, 0), (50, 50)])
    def test_border_points_excluded(self, pt):
        assert not Rectangle(0, 0, 50, 50).contains(*pt)

    @pytest.mark.parametrize("pt", [(1, 1), (25, 25), (49, 49), (0.5, 49.5)])
    def test_interior_points_included(self, pt):
        assert Rectangle(0, 0, 50, 50).contains(*pt)

    def test_outside(self):
        assert not Rectangle(0, 0, 50, 50).contains(60, 10)


# ─────────────────────────────────────────────────────────
# move_to()
# ─────────────────────────────────────────────────────────


class TestMoveTo:
    def test_keeps_size(self):
        r = Rectangle(0, 0, 50, 30)
        r.move_to(100, 200)
        assert r.as_tuple() == (100, 200, 50, 30)
        assert (r.right, r.bottom) == (150, 230)

    def test_idempotent(self):
        once = Rectangle(5, 5, 20, 20)
        once.move_to(40, 60)
        twice = Rectangle(5, 5, 20, 20)
        twice.move_to(40, 60)
        twice.move_to(40, 60)
        assert once.as_tuple() == twice.as_tuple()


# ─────────────────────────────────────────────────────────
# resize_to()
# ─────────────────────────────────────────────────────────


class TestResizeTo:
    def test_left_clamped_scenario(self):
        r = Rectangle(0, 0, 50, 50)
        r.resize_to(Handle.LEFT, 48, 0)
        assert r.width == 5
        assert r.left == r.right - 5 == 45
        assert r.x == 45

    def test_left_grows(self):
        r = Rectangle(10, 10, 50, 50)
        r.resize_to(Handle.LEFT, 0, 999)
        assert r.as_tuple() == (0, 10, 60, 50)

    def test_top_clamped(self):
        r = Rectangle(0, 0, 50, 50)
        r.resize_to(Handle.TOP, 0, 80)
        assert (r.top, r.bottom, r.height) == (45, 50, 5)

    def test_right_and_bottom(self):
        r = Rectangle(10, 10, 50, 50)
        r.resize_to(Handle.RIGHT, 100, 0)
        r.resize_to(Handle.BOTTOM, 0, 30)
        assert r.as_tuple() == (10, 10, 90, 20)

    def test_right_clamped_keeps_left(self):
        r = Rectangle(10, 10, 50, 50)
        r.resize_to(Handle.RIGHT, -100, 0)
        assert (r.left, r.right) == (10, 15)

    def test_corner_is_composition_of_edges(self):
        corner = Rectangle(20, 20, 40, 40)
        corner.resize_to(Handle.TOP_LEFT, 5, 70)
        edges = Rectangle(20, 20, 40, 40)
        edges.resize_to(Handle.TOP, 5, 70)
        edges.resize_to(Handle.LEFT, 5, 70)
        assert corner.as_tuple() == edges.as_tuple() == (5, 55, 55, 5)

    def test_bottom_right(self):
        r = Rectangle(0, 0, 10, 10)
        r.resize_to(Handle.BOTTOM_RIGHT, 30, 40)
        assert r.as_tuple() == (0, 0, 30, 40)

    @pytest.mark.parametrize("handle", list(Handle))
    @pytest.mark.parametrize("pointer", POINTERS)
    def test_min_size_and_fixed_edges(self, handle, pointer):
        r = Rectangle(10, 10, 40, 40)
        before = _edges(r)
        r.resize_to(handle, *pointer)
        after = _edges(r)

        assert r.width >= MIN_SIZE and r.height >= MIN_SIZE
        assert r.right - r.left == r.width
        assert r.bottom - r.top == r.height
        for edge in set(before) - MOVING_EDGES[handle]:
            assert after[edge] == before[edge], f"{handle} moved {edge}"
