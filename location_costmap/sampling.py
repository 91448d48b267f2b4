"""
Sampling engine - weighted random draws of points and poses from a costmap.

Cells are drawn by inverse-CDF over the flattened normalized grid. The pose
stream is a plain generator: nothing happens until the consumer pulls.
"""

from typing import Iterator, List, Tuple

import numpy as np

from .geometry import Pose, Quaternion
from .grid import GridMap


class CumulativeTable:
    """
    Flattened cumulative distribution of a normalized GridMap.

    Built once per cached grid so repeated draws cost O(log n).
    """

    def __init__(self, grid: GridMap):
        flat = grid.data.ravel()
        self._shape = grid.data.shape
        self._cdf = np.cumsum(flat)
        nonzero = np.flatnonzero(flat > 0)
        # Rounding can leave u just above cdf[-1]; clamp to the last cell with mass
        self._last = int(nonzero[-1]) if nonzero.size else flat.size - 1

    @property
    def total(self) -> float:
        return float(self._cdf[-1])

    def index_for(self, u: float) -> Tuple[int, int]:
        """Cell whose cumulative sum is the first to exceed u."""
        idx = int(np.searchsorted(self._cdf, u, side='right'))
        idx = min(idx, self._last)
        row, col = np.unravel_index(idx, self._shape)
        return int(row), int(col)

    def draw(self, rng: np.random.Generator) -> Tuple[int, int]:
        return self.index_for(rng.random() * self._cdf[-1])


def sample_height(costmap, x: float, y: float) -> float:
    """Pick one admissible z at (x, y), or the costmap's default."""
    generator = costmap.height_generator
    if generator is None:
        return costmap.default_z
    heights = list(generator(x, y))
    if not heights:
        return costmap.default_z
    return float(heights[int(costmap.rng.integers(len(heights)))])


def generate_orientations(costmap, x: float, y: float) -> List[Quaternion]:
    """
    Run the orientation-generator chain at (x, y).

    The first generator sees an empty sequence, every following one sees
    the output of its predecessor.
    """
    orientations: List[Quaternion] = []
    for generator in costmap.orientation_generators:
        orientations = list(generator(x, y, orientations))
    if not orientations:
        return [Quaternion.identity()]
    return orientations


def sample_point(costmap) -> Tuple[float, float, float]:
    """
    Draw one (x, y, z) from the costmap's normalized distribution.

    Raises:
        NoCostFunctionsRegistered, InvalidProbabilityDistribution: from the grid build
    """
    row, col = costmap.cumulative_table().draw(costmap.rng)
    x, y = costmap.metadata.cell_to_world(row, col)
    return (x, y, sample_height(costmap, x, y))


def pose_samples(costmap) -> Iterator[Pose]:
    """
    Infinite stream of poses drawn from the costmap.

    Every drawn point yields one Pose per generated orientation. Termination
    is up to the consumer.
    """
    while True:
        x, y, z = sample_point(costmap)
        for orientation in generate_orientations(costmap, x, y):
            yield Pose(position=(x, y, z), orientation=orientation)
