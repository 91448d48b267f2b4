"""
Location costmaps for pose sampling.

Multiplies registered cost functions into a normalized 2D distribution and
draws weighted-random poses from it.
"""

from .grid import GridMap, GridMetadata
from .geometry import Pose, Quaternion
from .errors import (
    CostmapError,
    NoCostFunctionsRegistered,
    InvalidProbabilityDistribution,
    IncompatibleGridError,
    CellOutOfBounds,
)
from .costmap import CostFunction, CostMap, merge_costmaps
from .sampling import CumulativeTable
from .config import CostmapConfig, load_config_from_yaml
from .layers import (
    constant_cost_function,
    gaussian_cost_function,
    range_cost_function,
    axis_boundary_cost_function,
    occupancy_cost_function,
)
from .generators import (
    constant_height_generator,
    fixed_orientation_generator,
    angle_to_point_orientation_generator,
    random_yaw_orientation_generator,
    rotate_orientations_generator,
)

__all__ = [
    'GridMap',
    'GridMetadata',
    'Pose',
    'Quaternion',
    'CostmapError',
    'NoCostFunctionsRegistered',
    'InvalidProbabilityDistribution',
    'IncompatibleGridError',
    'CellOutOfBounds',
    'CostFunction',
    'CostMap',
    'merge_costmaps',
    'CumulativeTable',
    'CostmapConfig',
    'load_config_from_yaml',
    'constant_cost_function',
    'gaussian_cost_function',
    'range_cost_function',
    'axis_boundary_cost_function',
    'occupancy_cost_function',
    'constant_height_generator',
    'fixed_orientation_generator',
    'angle_to_point_orientation_generator',
    'random_yaw_orientation_generator',
    'rotate_orientations_generator',
]
