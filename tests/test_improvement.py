import logging
import random

import numpy as np
import pytest

from distance import build_distance_matrix, tour_distance
from improvement import two_opt, two_opt_swap
from models import WarehouseCfg
from routing import nearest_neighbor_tour
from storage import gen_bin_locations


def _square_matrix():
    # Unit square: 0=(0,0) 1=(0,1) 2=(1,1) 3=(1,0)
    points = np.array([[0, 0], [0, 1], [1, 1], [1, 0]], dtype=float)
    diff = points[:, None, :] - points[None, :, :]
    return np.sqrt((diff ** 2).sum(axis=2))


def test_two_opt_swap_reverses_inclusive_segment():
    tour = [0, 1, 2, 3, 4, 0]
    assert two_opt_swap(tour, 1, 3) == [0, 3, 2, 1, 4, 0]
    assert tour == [0, 1, 2, 3, 4, 0]


def test_two_opt_removes_crossing():
    matrix = _square_matrix()
    crossing = [0, 2, 1, 3, 0]
    result = two_opt(crossing, matrix)
    assert result.tour == [0, 1, 2, 3, 0]
    assert result.distance == pytest.approx(4.0)
    assert result.improvements == 1
    assert result.iterations == 2
    assert not result.limit_reached


def test_two_opt_cap_returns_best_so_far(caplog):
    matrix = _square_matrix()
    with caplog.at_level(logging.WARNING, logger="improvement"):
        result = two_opt([0, 2, 1, 3, 0], matrix, max_iterations=1)
    assert result.limit_reached
    assert result.iterations == 1
    assert result.distance == pytest.approx(4.0)
    assert "iteration cap" in caplog.text


def test_two_opt_rejects_non_positive_cap():
    with pytest.raises(ValueError):
        two_opt([0, 1, 0], np.zeros((2, 2)), max_iterations=0)


def test_two_opt_never_worse_than_nearest_neighbor():
    wh = WarehouseCfg()
    rng = random.Random(11)
    pool = gen_bin_locations("ABC", 12, 6)
    for _ in range(5):
        nodes = ["DEPOT"] + rng.sample(pool, 9)
        matrix = build_distance_matrix(nodes, wh)
        initial = nearest_neighbor_tour(matrix)
        result = two_opt(initial, matrix)
        assert result.distance <= tour_distance(initial, matrix)
        assert result.distance == tour_distance(result.tour, matrix)
        assert result.tour[0] == 0 and result.tour[-1] == 0
        assert sorted(result.tour[1:-1]) == list(range(1, len(nodes)))


def test_two_opt_is_deterministic():
    wh = WarehouseCfg()
    nodes = ["DEPOT", "C-5-2", "A-1-4", "B-7-1", "A-9-3", "C-2-2", "B-3-5"]
    matrix = build_distance_matrix(nodes, wh)
    initial = nearest_neighbor_tour(matrix)
    assert two_opt(initial, matrix) == two_opt(initial, matrix)


def test_two_opt_trivial_tours():
    result = two_opt([0, 0], np.zeros((1, 1)))
    assert result.tour == [0, 0]
    assert result.distance == 0.0
    assert result.iterations == 1
