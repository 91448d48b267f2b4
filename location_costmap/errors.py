"""
Errors raised while building or querying a costmap.

All of them surface lazily, at the first read that needs the grid.
"""


class CostmapError(Exception):
    """Base class for costmap failures."""


class NoCostFunctionsRegistered(CostmapError):
    """Grid construction was attempted with an empty registry."""


class InvalidProbabilityDistribution(CostmapError):
    """The combined grid has no probability mass left to normalize."""


class IncompatibleGridError(CostmapError, ValueError):
    """Costmaps over different lattices cannot be merged."""


class CellOutOfBounds(CostmapError, IndexError):
    """A world coordinate maps to a cell outside the grid."""
