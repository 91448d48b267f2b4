"""
Height and orientation generator factories.

Height generators: (x, y) -> admissible z values.
Orientation generators: (x, y, prior_orientations) -> orientations, chained
in registration order on a CostMap.
"""

from typing import Callable, List, Optional, Sequence, Tuple
import math

import numpy as np

from .geometry import Quaternion

HeightFn = Callable[[float, float], List[float]]
OrientationFn = Callable[[float, float, Sequence[Quaternion]], List[Quaternion]]


def constant_height_generator(*heights: float) -> HeightFn:
    """Same candidate heights everywhere."""
    values = [float(h) for h in heights]

    def generate(x: float, y: float) -> List[float]:
        return list(values)
    return generate


def fixed_orientation_generator(orientations: Sequence[Quaternion]) -> OrientationFn:
    """Ignores position and prior orientations."""
    values = list(orientations)

    def generate(x: float, y: float, prior: Sequence[Quaternion]) -> List[Quaternion]:
        return list(values)
    return generate


def angle_to_point_orientation_generator(
    point: Tuple[float, float],
    samples: int = 1,
    sample_step: float = math.pi / 18,
) -> OrientationFn:
    """
    Face `point` from the sampled position.

    With samples > 1 the exact heading is followed by symmetric offsets of
    sample_step, closest first: 0, +step, -step, +2*step, ...
    """
    if samples < 1:
        raise ValueError(f"samples must be >= 1, got {samples}")
    px, py = point

    def generate(x: float, y: float, prior: Sequence[Quaternion]) -> List[Quaternion]:
        yaw = math.atan2(py - y, px - x)
        offsets = [0.0]
        k = 1
        while len(offsets) < samples:
            offsets.append(k * sample_step)
            if len(offsets) < samples:
                offsets.append(-k * sample_step)
            k += 1
        return [Quaternion.from_yaw(yaw + offset) for offset in offsets]
    return generate


def random_yaw_orientation_generator(count: int = 1, rng: Optional[np.random.Generator] = None) -> OrientationFn:
    """Uniformly random headings in [-pi, pi)."""
    rng = rng if rng is not None else np.random.default_rng()

    def generate(x: float, y: float, prior: Sequence[Quaternion]) -> List[Quaternion]:
        return [Quaternion.from_yaw(float(yaw)) for yaw in rng.uniform(-math.pi, math.pi, size=count)]
    return generate


def rotate_orientations_generator(yaw: float) -> OrientationFn:
    """Chain stage: rotate every prior orientation by `yaw` about +Z."""
    rotation = Quaternion.from_yaw(yaw)

    def generate(x: float, y: float, prior: Sequence[Quaternion]) -> List[Quaternion]:
        return [rotation * orientation for orientation in prior]
    return generate
