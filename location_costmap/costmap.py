"""
CostMap - registry of cost functions and generators plus the distribution builder.

Algorithm (on first read of the grid):
1. Deduplicate cost functions by name (last registration wins)
2. Sort descending by priority (stable on registration order)
3. Multiply every function into a grid of ones, cell by cell
4. Normalize by the total mass and cache the result

The cache is sticky: cost functions registered after the first read only
take effect after invalidate(). Height and orientation generators are read
on every draw, so replacing them applies to the next sample right away.
"""

from dataclasses import dataclass
from typing import Any, Callable, Hashable, Iterable, Iterator, List, Optional, Sequence, Tuple
import math
import threading

import numpy as np
from loguru import logger

from .errors import (
    CellOutOfBounds,
    IncompatibleGridError,
    InvalidProbabilityDistribution,
    NoCostFunctionsRegistered,
)
from .geometry import Pose, Quaternion
from .grid import GridMap, GridMetadata
from . import sampling

HeightGenerator = Callable[[float, float], Sequence[float]]
OrientationGenerator = Callable[[float, float, Sequence[Quaternion]], Sequence[Quaternion]]


@dataclass(frozen=True)
class CostFunction:
    """A named spatial preference. evaluate(x, y) must stay within [0, 1]."""
    name: Hashable
    priority: Any
    evaluate: Callable[[float, float], float]


def order_cost_functions(functions: Iterable[CostFunction]) -> List[CostFunction]:
    """
    Resolve duplicates and evaluation order.

    A repeated name keeps only its last registration, positioned where that
    last registration happened. Higher priority comes first, ties keep
    registration order.
    """
    latest = {}
    for index, function in enumerate(functions):
        latest[function.name] = (index, function)
    unique = [function for _, function in sorted(latest.values(), key=lambda entry: entry[0])]
    return sorted(unique, key=lambda function: function.priority, reverse=True)


def build_distribution(metadata: GridMetadata, functions: Sequence[CostFunction]) -> GridMap:
    """
    Combine cost functions into a normalized probability grid.

    Raises:
        NoCostFunctionsRegistered: functions is empty
        InvalidProbabilityDistribution: the product has no mass left
    """
    if not functions:
        raise NoCostFunctionsRegistered("Cannot build a costmap without cost functions")

    grid = GridMap.ones(metadata)
    xs, ys = metadata.cell_origins()

    for function in order_cost_functions(functions):
        values = np.vectorize(function.evaluate, otypes=[np.float64])(xs, ys)
        if values.size and (values.min() < 0.0 or values.max() > 1.0):
            logger.warning(
                f"Cost function {function.name!r} returned values in "
                f"[{values.min():.3g}, {values.max():.3g}], expected [0, 1]"
            )
        grid.data *= values
        logger.debug(f"Applied cost function {function.name!r} (priority {function.priority!r})")

    total = grid.total()
    if total == 0.0 or not math.isfinite(total):
        raise InvalidProbabilityDistribution(
            f"Combined costmap sums to {total}, no valid location left"
        )

    grid.data /= total
    grid.data.setflags(write=False)
    logger.debug(f"Built {grid.rows}x{grid.cols} costmap from {len(functions)} registered functions")
    return grid


class CostMap:
    """
    Weighted sampling distribution over a rectangular grid.

    Cost functions, a height generator and a chain of orientation generators
    are registered incrementally; the normalized grid is built on first read
    and shared read-only afterwards.
    """

    def __init__(
        self,
        metadata: GridMetadata,
        cost_functions: Iterable[CostFunction] = (),
        height_generator: Optional[HeightGenerator] = None,
        orientation_generators: Iterable[OrientationGenerator] = (),
        rng: Optional[np.random.Generator] = None,
        default_z: float = 0.0,
    ):
        self.metadata = metadata
        self.rng = rng if rng is not None else np.random.default_rng()
        self.default_z = default_z

        self._cost_functions: List[CostFunction] = list(cost_functions)
        self._height_generator = height_generator
        self._orientation_generators: List[OrientationGenerator] = []
        for generator in orientation_generators:
            self._add_orientation_generator(generator)

        self._lock = threading.Lock()
        self._grid: Optional[GridMap] = None
        self._table: Optional[sampling.CumulativeTable] = None

    @classmethod
    def from_config(cls, config) -> 'CostMap':
        """Empty costmap from a CostmapConfig."""
        return cls(
            metadata=config.grid,
            rng=np.random.default_rng(config.seed),
            default_z=config.default_z,
        )

    # Registry

    def register_cost_function(
        self,
        evaluate: Callable[[float, float], float],
        name: Hashable,
        priority: Any = 0,
    ) -> 'CostMap':
        """Add or replace the cost function registered under `name`. Returns self for chaining."""
        if self._grid is not None:
            logger.warning(f"Registered cost function {name!r} after the costmap was built; call invalidate() to apply it")
        self._cost_functions.append(CostFunction(name=name, priority=priority, evaluate=evaluate))
        return self

    def register_height_generator(self, generator: HeightGenerator) -> 'CostMap':
        """Replace the height generator. Applies to the next sample, built or not."""
        self._height_generator = generator
        return self

    def register_orientation_generator(self, generator: OrientationGenerator) -> 'CostMap':
        """Append to the orientation chain unless this exact generator is already in it."""
        self._add_orientation_generator(generator)
        return self

    def _add_orientation_generator(self, generator: OrientationGenerator) -> None:
        if not any(existing is generator for existing in self._orientation_generators):
            self._orientation_generators.append(generator)

    @property
    def registered_cost_functions(self) -> Tuple[CostFunction, ...]:
        """Every registration in order, duplicates included."""
        return tuple(self._cost_functions)

    @property
    def cost_functions(self) -> List[CostFunction]:
        """Deduplicated functions in the order the builder applies them."""
        return order_cost_functions(self._cost_functions)

    @property
    def height_generator(self) -> Optional[HeightGenerator]:
        return self._height_generator

    @property
    def orientation_generators(self) -> Tuple[OrientationGenerator, ...]:
        return tuple(self._orientation_generators)

    # Distribution

    @property
    def is_built(self) -> bool:
        return self._grid is not None

    def invalidate(self) -> None:
        """Drop the cached grid so the next read rebuilds it."""
        with self._lock:
            if self._grid is not None:
                logger.debug("Invalidated cached costmap")
            self._grid = None
            self._table = None

    def _ensure_built(self) -> Tuple[GridMap, sampling.CumulativeTable]:
        # Snapshot both; invalidate() may clear them between reads
        grid, table = self._grid, self._table
        if grid is not None and table is not None:
            return grid, table
        with self._lock:
            if self._grid is None or self._table is None:
                grid = build_distribution(self.metadata, self._cost_functions)
                self._table = sampling.CumulativeTable(grid)
                self._grid = grid
            return self._grid, self._table

    def get_cost_grid(self) -> GridMap:
        """Normalized probability grid (read-only), built on first call."""
        grid, _ = self._ensure_built()
        return grid

    def cumulative_table(self) -> sampling.CumulativeTable:
        _, table = self._ensure_built()
        return table

    def get_map_value(self, x: float, y: float) -> float:
        """
        Probability of the cell containing world point (x, y).

        Raises:
            CellOutOfBounds: point lies outside the grid
        """
        grid = self.get_cost_grid()
        row, col = self.metadata.world_to_cell(x, y)
        if not self.metadata.contains_cell(row, col):
            raise CellOutOfBounds(f"World point ({x}, {y}) maps to cell ({row}, {col}) outside {grid.data.shape} grid")
        return float(grid.data[row, col])

    # Sampling

    def sample_point(self) -> Tuple[float, float, float]:
        return sampling.sample_point(self)

    def sample_points(self, count: int) -> List[Tuple[float, float, float]]:
        return [sampling.sample_point(self) for _ in range(count)]

    def pose_samples(self) -> Iterator[Pose]:
        """Lazy infinite stream of poses, see sampling.pose_samples."""
        return sampling.pose_samples(self)

    def __repr__(self) -> str:
        return (
            f"CostMap({self.metadata.rows}x{self.metadata.cols}, "
            f"functions={len(self._cost_functions)}, built={self.is_built})"
        )


def merge_costmaps(costmaps: Sequence[CostMap]) -> CostMap:
    """
    Combine the configuration of costmaps over the same lattice.

    Cost functions are concatenated (name conflicts resolve at build time),
    the first height generator wins, orientation chains are concatenated.
    The result is unbuilt.

    Raises:
        ValueError: costmaps is empty
        IncompatibleGridError: lattices differ
    """
    costmaps = list(costmaps)
    if not costmaps:
        raise ValueError("Nothing to merge")

    first = costmaps[0]
    for other in costmaps[1:]:
        if other.metadata != first.metadata:
            raise IncompatibleGridError(
                f"Cannot merge costmaps over different grids: {first.metadata!r} vs {other.metadata!r}"
            )

    cost_functions: List[CostFunction] = []
    orientation_generators: List[OrientationGenerator] = []
    height_generator = None
    for costmap in costmaps:
        cost_functions.extend(costmap.registered_cost_functions)
        orientation_generators.extend(costmap.orientation_generators)
        if height_generator is None:
            height_generator = costmap.height_generator

    logger.debug(f"Merged {len(costmaps)} costmaps into {len(cost_functions)} cost functions")
    return CostMap(
        metadata=first.metadata,
        cost_functions=cost_functions,
        height_generator=height_generator,
        orientation_generators=orientation_generators,
        rng=first.rng,
        default_z=first.default_z,
    )
