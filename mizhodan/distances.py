"""
Functions for calculating Euclidean distances between 2-d locations.

Locations are passed as arrays of shape (n, 2) holding x and y coordinates.
"""

import numpy as np
from scipy.spatial.distance import cdist, pdist, squareform


def _as_positions(positions: np.ndarray) -> np.ndarray:
    pos = np.asarray(positions, dtype=float)
    if pos.ndim == 1:
        pos = pos.reshape(1, -1)
    if pos.ndim != 2 or pos.shape[1] != 2:
        raise ValueError("Positions must have shape (n, 2)")
    return pos


def distance_matrix(positions: np.ndarray) -> np.ndarray:
    """
    Pairwise Euclidean distances between all input positions.

    Parameters
    ----------
    positions : numpy.ndarray
        Array of shape (n, 2) of x, y coordinates.

    Returns
    -------
    dist : numpy.ndarray
        Symmetric (n, n) matrix of distances, with a zero diagonal.
    """
    pos = _as_positions(positions)
    if pos.shape[0] < 2:
        return np.zeros((pos.shape[0], pos.shape[0]))
    return squareform(pdist(pos, metric="euclidean"))


def cross_distances(
    targets: np.ndarray,
    positions: np.ndarray,
) -> np.ndarray:
    """
    Euclidean distances between each target and each position.

    Parameters
    ----------
    targets : numpy.ndarray
        Array of shape (m, 2), or a single (x, y) pair.
    positions : numpy.ndarray
        Array of shape (n, 2).

    Returns
    -------
    dist : numpy.ndarray
        (m, n) matrix of distances.
    """
    return cdist(
        _as_positions(targets), _as_positions(positions), metric="euclidean"
    )
