"""Tests of the distances module"""

import pytest  # noqa: F401
import numpy as np

from sklearn.metrics.pairwise import euclidean_distances

from mizhodan.distances import cross_distances, distance_matrix


def test_distance_matrix():
    positions = np.array([[0.0, 0.0], [3.0, 4.0], [-6.0, 8.0]])

    dist = distance_matrix(positions)

    assert dist.shape == (3, 3)
    assert dist[0, 0] == dist[1, 1] == dist[2, 2] == 0.0
    assert dist[0, 1] == pytest.approx(5.0)
    assert dist[0, 2] == pytest.approx(10.0)
    assert np.allclose(dist, dist.T)


def test_distance_matrix_sklearn():
    positions = 1000 * np.random.rand(40, 2)

    dist = distance_matrix(positions)
    expected = euclidean_distances(positions)

    assert np.allclose(dist, expected)


def test_distance_matrix_single():
    assert np.array_equal(distance_matrix(np.array([[1.0, 2.0]])), [[0.0]])


def test_cross_distances():
    positions = 1000 * np.random.rand(25, 2)
    targets = 1000 * np.random.rand(7, 2)

    dist = cross_distances(targets, positions)

    assert dist.shape == (7, 25)
    assert np.allclose(dist, euclidean_distances(targets, positions))

    single = cross_distances((3.0, 4.0), np.array([[0.0, 0.0], [3.0, 4.0]]))
    assert single.shape == (1, 2)
    assert np.allclose(single, [[5.0, 0.0]])


def test_bad_positions():
    with pytest.raises(ValueError):
        distance_matrix(np.random.rand(5, 3))
