from dataclasses import dataclass
from typing import Tuple
import math


@dataclass(frozen=True)
class Quaternion:
    x: float
    y: float
    z: float
    w: float

    @classmethod
    def identity(cls) -> 'Quaternion':
        return cls(0.0, 0.0, 0.0, 1.0)

    @classmethod
    def from_yaw(cls, yaw: float) -> 'Quaternion':
        """Rotation of `yaw` radians about +Z."""
        return cls(0.0, 0.0, math.sin(yaw / 2.0), math.cos(yaw / 2.0))

    def yaw(self) -> float:
        """Heading about +Z (radians, in [-pi, pi])."""
        siny_cosp = 2.0 * (self.w * self.z + self.x * self.y)
        cosy_cosp = 1.0 - 2.0 * (self.y * self.y + self.z * self.z)
        return math.atan2(siny_cosp, cosy_cosp)

    def __mul__(self, other: 'Quaternion') -> 'Quaternion':
        """Hamilton product: self applied after other."""
        return Quaternion(
            x=self.w * other.x + self.x * other.w + self.y * other.z - self.z * other.y,
            y=self.w * other.y - self.x * other.z + self.y * other.w + self.z * other.x,
            z=self.w * other.z + self.x * other.y - self.y * other.x + self.z * other.w,
            w=self.w * other.w - self.x * other.x - self.y * other.y - self.z * other.z,
        )


@dataclass(frozen=True)
class Pose:
    """Position in the grid's world frame plus orientation."""
    position: Tuple[float, float, float]
    orientation: Quaternion

    @property
    def x(self) -> float:
        return self.position[0]

    @property
    def y(self) -> float:
        return self.position[1]

    @property
    def z(self) -> float:
        return self.position[2]
