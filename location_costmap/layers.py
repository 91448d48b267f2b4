"""
Cost Function Factories - common spatial preferences.

Each factory returns a plain (x, y) -> float callable with values in [0, 1],
ready for CostMap.register_cost_function.

- Constant: uniform preference
- Gaussian: attraction towards a point
- Range: inside / outside a disc
- Axis boundary: one side of a line
- Occupancy: keep out of occupied cells, with padding
"""

from typing import Callable, Sequence, Tuple
import math

import numpy as np
from scipy.ndimage import distance_transform_edt

from .grid import GridMetadata

CostFn = Callable[[float, float], float]


def constant_cost_function(value: float = 1.0) -> CostFn:
    """Same value everywhere."""
    def evaluate(x: float, y: float) -> float:
        return value
    return evaluate


def gaussian_cost_function(mean: Tuple[float, float], covariance: Sequence[Sequence[float]]) -> CostFn:
    """
    2D Gaussian around `mean`, scaled so the peak is 1.0.

    Args:
        mean: (x, y) center in world coordinates
        covariance: 2x2 covariance matrix
    """
    mu = np.asarray(mean, dtype=np.float64)
    precision = np.linalg.inv(np.asarray(covariance, dtype=np.float64))

    def evaluate(x: float, y: float) -> float:
        delta = np.array([x, y]) - mu
        return float(np.exp(-0.5 * delta @ precision @ delta))
    return evaluate


def range_cost_function(point: Tuple[float, float], distance: float, invert: bool = False) -> CostFn:
    """
    1.0 within `distance` of `point`, 0.0 beyond.

    invert=True keeps everything except the disc (e.g. minimum clearance).
    """
    px, py = point

    def evaluate(x: float, y: float) -> float:
        inside = math.hypot(x - px, y - py) <= distance
        return 0.0 if inside == invert else 1.0
    return evaluate


def axis_boundary_cost_function(axis: str, boundary: float, side: str) -> CostFn:
    """
    1.0 on one side of an axis-aligned line, 0.0 on the other.

    Args:
        axis: 'x' or 'y'
        boundary: line position along that axis
        side: '>' keeps coordinates above the boundary, '<' below (boundary included)
    """
    if axis not in ('x', 'y'):
        raise ValueError(f"Invalid axis: {axis}, expected 'x' or 'y'")
    if side not in ('<', '>'):
        raise ValueError(f"Invalid side: {side}, expected '<' or '>'")

    def evaluate(x: float, y: float) -> float:
        value = x if axis == 'x' else y
        if side == '>':
            return 1.0 if value >= boundary else 0.0
        return 1.0 if value <= boundary else 0.0
    return evaluate


def inflate_occupancy(occupancy: np.ndarray, padding: float, resolution: float) -> np.ndarray:
    """
    Occupied cells plus every cell within `padding` world units of one.

    Distance is Euclidean between cells, so diagonal neighbours sit
    sqrt(2) * resolution away.
    """
    blocked = np.asarray(occupancy) > 0
    if padding <= 0 or not blocked.any():
        return blocked
    clearance = distance_transform_edt(~blocked) * resolution
    return clearance <= padding + 1e-9


def occupancy_cost_function(occupancy: np.ndarray, metadata: GridMetadata, padding: float = 0.0) -> CostFn:
    """
    0.0 on occupied cells (plus `padding` world units around them), 1.0 elsewhere.

    Args:
        occupancy: (rows, cols) array over `metadata`, non-zero = occupied
        metadata: lattice the occupancy array is laid over
        padding: clearance to keep from occupied cells

    Points outside the occupancy array count as free.
    """
    occupancy = np.asarray(occupancy)
    if occupancy.shape != metadata.shape:
        raise ValueError(f"Occupancy shape {occupancy.shape} does not match grid shape {metadata.shape}")

    blocked = inflate_occupancy(occupancy, padding, metadata.resolution)

    def evaluate(x: float, y: float) -> float:
        # Cell corners come back from cell_to_world with rounding error; snap them
        row = math.floor((y - metadata.origin_y) / metadata.resolution + 1e-9)
        col = math.floor((x - metadata.origin_x) / metadata.resolution + 1e-9)
        if not metadata.contains_cell(row, col):
            return 1.0
        return 0.0 if blocked[row, col] else 1.0
    return evaluate
