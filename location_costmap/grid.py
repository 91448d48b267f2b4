"""
GridMap - 2D numeric grid laid over a rectangular world region.

Row index follows world Y, column index follows world X.
Cell (row, col) sits at world (col * resolution + origin_x, row * resolution + origin_y).
"""

from dataclasses import dataclass
from typing import Tuple
import math

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, model_validator


class GridMetadata(BaseModel):
    """
    Immutable description of the cell lattice.

    width/height are in world units, resolution is the cell edge length.
    """
    model_config = ConfigDict(frozen=True)

    width: float = Field(gt=0)
    height: float = Field(gt=0)
    resolution: float = Field(gt=0)
    origin_x: float = 0.0
    origin_y: float = 0.0

    @model_validator(mode='after')
    def _check_lattice(self) -> 'GridMetadata':
        if self.cols < 1 or self.rows < 1:
            raise ValueError(
                f"Grid {self.width}x{self.height} at resolution {self.resolution} has no cells"
            )
        return self

    @property
    def cols(self) -> int:
        return int(round(self.width / self.resolution))

    @property
    def rows(self) -> int:
        return int(round(self.height / self.resolution))

    @property
    def shape(self) -> Tuple[int, int]:
        """(rows, cols) - numpy shape of grids over this lattice."""
        return (self.rows, self.cols)

    def cell_to_world(self, row: int, col: int) -> Tuple[float, float]:
        return (
            col * self.resolution + self.origin_x,
            row * self.resolution + self.origin_y,
        )

    def world_to_cell(self, x: float, y: float) -> Tuple[int, int]:
        """Cell containing world point (x, y). No bounds check."""
        return (
            math.floor((y - self.origin_y) / self.resolution),
            math.floor((x - self.origin_x) / self.resolution),
        )

    def contains_cell(self, row: int, col: int) -> bool:
        return 0 <= row < self.rows and 0 <= col < self.cols

    def cell_origins(self) -> Tuple[np.ndarray, np.ndarray]:
        """
        World coordinates of every cell origin (its lower-left corner, as in cell_to_world).

        Returns:
            (xs, ys) arrays of shape (rows, cols)
        """
        cols = np.arange(self.cols) * self.resolution + self.origin_x
        rows = np.arange(self.rows) * self.resolution + self.origin_y
        xs, ys = np.meshgrid(cols, rows)
        return xs, ys


@dataclass
class GridMap:
    """
    2D grid of float values over a GridMetadata lattice.

    Used both for intermediate products of cost functions and for the
    final normalized probability distribution.
    """
    data: np.ndarray
    metadata: GridMetadata

    @classmethod
    def create(cls, metadata: GridMetadata, initial_value: float = 0.0) -> 'GridMap':
        """Create a new GridMap over the lattice with given initial value."""
        return cls(
            data=np.full(metadata.shape, initial_value, dtype=np.float64),
            metadata=metadata
        )

    @classmethod
    def ones(cls, metadata: GridMetadata, value: float = 1.0) -> 'GridMap':
        return cls.create(metadata, value)

    def copy(self) -> 'GridMap':
        """Deep copy of the data, metadata is shared (immutable)."""
        return GridMap(data=self.data.copy(), metadata=self.metadata)

    @property
    def rows(self) -> int:
        return self.data.shape[0]

    @property
    def cols(self) -> int:
        return self.data.shape[1]

    def total(self) -> float:
        return float(np.sum(self.data))

