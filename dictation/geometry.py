"""
Geometry helper utilities for orbital positions and distances.

This module provides small, focused functions with no simulation
state. All helpers operate on float64 numpy arrays in the orbital
plane (distances in gigameters, angles in radians).
"""
from __future__ import annotations

from typing import Sequence

import numpy as np
from scipy.spatial.distance import cdist

TWO_PI = 2.0 * np.pi


def orbital_position(distance: float, theta: float) -> np.ndarray:
    """
    Return the (x, y) position of a body on a circular orbit.

    Parameters
    - distance: orbital radius
    - theta: orbital angle (rad)

    Returns
    - (2,) position
    """
    return np.array([distance * np.cos(theta), distance * np.sin(theta)], dtype=np.float64)


def distance_2d(a: np.ndarray, b: np.ndarray) -> float:
    """Euclidean distance between two (2,) points."""
    a = np.asarray(a, dtype=np.float64)
    b = np.asarray(b, dtype=np.float64)
    return float(np.linalg.norm(a - b))


def wrap_angle(theta: float) -> float:
    """
    Wrap an angle into [0, 2*pi).

    Negative angles wrap from the top of the range.
    """
    wrapped = float(np.mod(theta, TWO_PI))
    # np.mod can return TWO_PI itself for tiny negative inputs
    return 0.0 if wrapped >= TWO_PI else wrapped


def pairwise_distances(positions: Sequence[np.ndarray]) -> np.ndarray:
    """
    Distance matrix between all positions.

    Parameters
    - positions: sequence of (2,) points

    Returns
    - (N, N) symmetric matrix with a zero diagonal
    """
    if len(positions) == 0:
        return np.empty((0, 0), dtype=np.float64)
    points = np.asarray(positions, dtype=np.float64).reshape(-1, 2)
    return cdist(points, points)
