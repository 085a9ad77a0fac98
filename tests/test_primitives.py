#!/usr/bin/env python3
# -*- coding: utf-8 -*-

import os, sys, math
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from planners.state import Key, State, key_precedes, key_fingerprint
from planners.grid_utils import (SQRT2, close, euclidean_distance, neighbors,
                                 octile_distance, step_scale, border_cells)
from planners.cell_store import CellStore
from planners.open_list import OpenList


def test_state_identity_ignores_key():
    a = State(1, 2, Key(0.0, 0.0))
    b = State(1, 2, Key(9.0, 4.0))
    assert a == b
    assert hash(a) == hash(b)
    assert len({a, b}) == 1
    assert State(1, 2) != State(2, 1)

def test_state_order_ignores_coordinates():
    a = State(5, 5, Key(1.0, 1.0))
    b = State(0, 0, Key(2.0, 0.0))
    assert a < b
    assert not b < a
    assert a.precedes(b)

def test_key_order_uses_epsilon_on_k1_then_exact_k2():
    # k1 values within 1e-6 are treated as equal, so k2 decides
    assert key_precedes(Key(1.0 + 5e-7, 2.0), Key(1.0, 3.0))
    assert not key_precedes(Key(1.0, 3.0), Key(1.0 + 5e-7, 2.0))
    assert key_precedes(Key(1.0, 9.0), Key(1.1, 0.0))
    assert not key_precedes(Key(1.0, 1.0), Key(1.0, 1.0))

def test_key_fingerprint():
    assert key_fingerprint(Key(2.0, 3.0)) == 2.0 + 1193.0 * 3.0

def test_distances():
    assert math.isclose(octile_distance((0, 0), (3, 1)), 3 + (SQRT2 - 1))
    assert octile_distance((2, 2), (2, 2)) == 0.0
    assert octile_distance((0, 0), (-4, 0)) == 4.0
    assert math.isclose(euclidean_distance((0, 0), (3, 4)), 5.0)
    assert step_scale((0, 0), (1, 1)) == SQRT2
    assert step_scale((0, 0), (0, -1)) == 1.0

def test_neighbors_fixed_order():
    n = neighbors((0, 0))
    assert n[0] == (1, 0)
    assert n[1] == (1, 1)
    assert n[2] == (0, 1)
    assert len(n) == 8
    assert set(n) == {(dx, dy) for dx in (-1, 0, 1) for dy in (-1, 0, 1)} - {(0, 0)}

def test_close_handles_infinity():
    assert close(math.inf, math.inf)
    assert not close(1.0, math.inf)
    assert close(1.0, 1.0 + 1e-6)
    assert not close(1.0, 1.001)

def test_border_cells_ring():
    ring = border_cells(3, 2)
    assert len(ring) == len(set(ring)) == 2 * (3 + 2) + 4
    assert (-1, -1) in ring and (3, 2) in ring and (1, -1) in ring
    assert all(not (0 <= x < 3 and 0 <= y < 2) for x, y in ring)

def test_cell_store_reads_do_not_create_entries():
    store = CellStore(1.0, lambda u: float(abs(u[0]) + abs(u[1])))
    assert store.g((3, 4)) == 7.0
    assert store.rhs((3, 4)) == 7.0
    assert store.cost((3, 4)) == 1.0
    assert not store.occupied((3, 4))
    assert len(store) == 0

    store.set_cost((3, 4), -1)
    cell = store.get((3, 4))
    assert (cell.g, cell.rhs, cell.cost) == (7.0, 7.0, -1.0)
    assert store.occupied((3, 4))
    assert len(store) == 1

def test_open_list_discards_stale_entries():
    ol = OpenList()
    ol.push(State(0, 0, Key(1.0, 1.0)))
    ol.push(State(1, 0, Key(0.5, 0.0)))
    ol.push(State(0, 0, Key(2.0, 2.0)))   # supersedes the first push

    first = ol.pop()
    assert first.coord == (1, 0)
    second = ol.pop()
    assert second.coord == (0, 0)
    assert second.key == Key(2.0, 2.0)
    assert ol.pop() is None
    assert ol.discarded == 1
    assert ol.is_empty()

def test_open_list_remove_invalidates():
    ol = OpenList()
    ol.push(State(3, 3, Key(1.0, 1.0)))
    assert (3, 3) in ol
    ol.remove((3, 3))
    assert (3, 3) not in ol
    assert ol.peek() is not None   # still physically queued
    assert ol.pop() is None

def test_open_list_ties_pop_in_insertion_order():
    ol = OpenList()
    ol.push(State(0, 0, Key(1.0, 1.0)))
    ol.push(State(5, 5, Key(1.0, 1.0)))
    ol.push(State(2, 2, Key(1.0, 1.0)))
    assert [ol.pop().coord for _ in range(3)] == [(0, 0), (5, 5), (2, 2)]
