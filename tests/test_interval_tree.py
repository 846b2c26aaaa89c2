"""Tests for the AVL interval tree."""

import random

import pytest

from engine.interval_tree import IntervalTree


def brute_force(intervals, low, high):
    return [payload for (a, b, payload) in intervals if a <= high and b >= low]


def test_empty_tree():
    tree = IntervalTree()
    assert len(tree) == 0
    assert tree.stab(5) == []
    assert list(tree) == []
    tree.verify_integrity()


def test_stab_returns_insertion_order():
    tree = IntervalTree()
    tree.insert(10, 20, "late-start")
    tree.insert(1, 30, "wide")
    tree.insert(15, 15, "point")
    assert tree.stab(15) == ["late-start", "wide", "point"]
    assert tree.stab(25) == ["wide"]
    assert tree.stab(31) == []


def test_inverted_interval_is_rejected():
    with pytest.raises(ValueError):
        IntervalTree().insert(5, 4, "bad")


def test_random_inserts_and_removals_stay_consistent():
    rng = random.Random(42)
    tree = IntervalTree()
    live = []
    for i in range(300):
        low = rng.randrange(100)
        high = low + rng.randrange(15)
        handle = tree.insert(low, high, i)
        live.append((low, high, i, handle))
    tree.verify_integrity()

    rng.shuffle(live)
    removed, live = live[:120], live[120:]
    for low, _, _, handle in removed:
        assert tree.remove(low, handle)
    tree.verify_integrity()
    assert len(tree) == len(live)

    live.sort(key=lambda entry: entry[3])
    intervals = [(low, high, payload) for low, high, payload, _ in live]
    for low, high in [(0, 0), (10, 20), (50, 50), (95, 130), (-5, -1)]:
        assert tree.overlapping(low, high) == brute_force(intervals, low, high)


def test_remove_unknown_handle():
    tree = IntervalTree()
    handle = tree.insert(1, 2, "x")
    assert not tree.remove(1, handle + 1)
    assert not tree.remove(2, handle)
    assert tree.remove(1, handle)
    assert len(tree) == 0


def test_iteration_is_sorted_by_start():
    tree = IntervalTree()
    for low in [5, 1, 3, 1]:
        tree.insert(low, low + 1, low)
    assert [low for low, _, _ in tree] == [1, 1, 3, 5]
