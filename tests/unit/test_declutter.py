"""
Unit tests for the greedy marker declutter
"""
from helpers import restroom
from poimap.services.declutter import declutter


def test_keeps_first_of_colliding_pair():
    """A later point within the delta on both axes is dropped"""
    a = restroom(40.75800, -73.98550, "A")
    b = restroom(40.75820, -73.98530, "B")

    assert declutter([a, b], min_delta=0.0005, cap=100) == [a]


def test_one_axis_far_enough_keeps_both():
    """Points collide only when close on both axes"""
    a = restroom(40.75800, -73.98550, "A")
    b = restroom(40.75810, -73.98400, "B")

    assert declutter([a, b], min_delta=0.0005, cap=100) == [a, b]


def test_exact_delta_is_not_a_collision():
    a = restroom(40.0, -74.0, "A")
    b = restroom(40.5, -74.0, "B")

    assert declutter([a, b], min_delta=0.5, cap=100) == [a, b]


def test_preserves_received_order():
    points = [restroom(40.70 + i * 0.01, -73.99, f"R{i}") for i in range(5)]
    reversed_points = list(reversed(points))

    assert declutter(reversed_points, min_delta=0.0005, cap=100) == reversed_points


def test_cap_limits_output():
    points = [restroom(40.70 + i * 0.01, -73.99, f"R{i}") for i in range(10)]

    result = declutter(points, min_delta=0.0005, cap=3)

    assert result == points[:3]


def test_zero_cap_and_empty_input():
    points = [restroom(40.70, -73.99)]

    assert declutter(points, min_delta=0.0005, cap=0) == []
    assert declutter([], min_delta=0.0005, cap=100) == []


def test_no_surviving_pair_is_too_close():
    """Every kept pair is separated on at least one axis"""
    points = [
        restroom(40.7580 + (i % 7) * 0.0002, -73.9855 + (i // 7) * 0.0003, f"R{i}")
        for i in range(49)
    ]
    d = 0.0005

    kept = declutter(points, min_delta=d, cap=100)

    assert kept
    for i, p in enumerate(kept):
        for q in kept[i + 1:]:
            assert not (abs(p.lat - q.lat) < d and abs(p.lng - q.lng) < d)
