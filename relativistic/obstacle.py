#obstacle.py
import math
from dataclasses import dataclass
from typing import Union

import numpy as np

from .blackbody import blackbody_color, noisy_luminosity
from .utils import to_cartesian

# ---
# Scene obstacles form a closed set of variants.  `collide` and `shade` below
# dispatch over every variant and reject anything else.
# ---

ESCAPE_COLOR = (0.0, 20.0, 50.0)


@dataclass(frozen=True)
class Horizon:
    """Event horizon: rays cannot enter r <= r."""
    r: float


@dataclass(frozen=True)
class HorizonPredictor:
    """Heuristic early exit for rays already aimed into the horizon's silhouette."""
    r: float


@dataclass(frozen=True)
class DistanceCutoff:
    """Rays reaching r >= r are considered escaped to infinity."""
    r: float


@dataclass(frozen=True)
class Ring:
    """Flat ring in the equatorial plane (θ = π/2)."""
    r_min: float
    r_max: float
    temperature: float = 3000.0
    brightness: float = 255.0


@dataclass(frozen=True)
class AccretionVolume:
    """Semi-transparent equatorial slab of finite thickness."""
    r_min: float
    r_max: float
    thickness: float
    temperature: float = 2500.0
    brightness: float = 255.0
    opacity: float = 0.5


Obstacle = Union[Horizon, HorizonPredictor, DistanceCutoff, Ring, AccretionVolume]


@dataclass(frozen=True, eq=False)
class Collision:
    """
    Terminal result of a trace.
    position: 4-position of the hit
    color: linear RGB radiance
    obstacle: the obstacle that reported the hit
    index: position of that obstacle in the scene's obstacle list
    value: collision measure reported by the obstacle (interpolation
        fraction for rings, path length for volumes, 0 otherwise)
    """
    position: np.ndarray
    color: np.ndarray
    obstacle: Obstacle
    index: int
    value: float


def equator_crossing(previous, new):
    """
    Linear interpolation of the segment previous -> new onto θ = π/2.

    Returns (a, r_cross) with p = a * new + (1 - a) * previous, or None when
    the polar angle does not change along the segment.
    """
    th1 = abs(math.fmod(previous[2], math.pi))
    th2 = abs(math.fmod(new[2], math.pi))
    if th2 == th1:
        return None
    a = (math.pi / 2 - th1) / (th2 - th1)
    r_cross = previous[1] * (1.0 - a) + new[1] * a
    return a, r_cross


def altitude(position):
    """Signed height above the equatorial plane."""
    return math.sin(position[2] - math.pi / 2) * position[1]


def _predict_horizon(r, previous, new):
    r1 = previous[1]
    r2 = new[1]
    # Only worth checking inside the photon sphere (r * 3/2)
    if r2 >= r * 1.5 or r1 <= r or r2 <= r:
        return None
    xyz_1 = to_cartesian(previous)
    xyz_2 = to_cartesian(new)
    cos_angle = np.dot(xyz_1, xyz_2) / (np.linalg.norm(xyz_1) * np.linalg.norm(xyz_2))
    angle3d = math.acos(min(1.0, max(-1.0, cos_angle)))

    # Apparent angular radius of the horizon seen from each endpoint
    half_1 = math.acos(r / r1)
    half_2 = math.acos(r / r2)
    t11, t12 = -half_1, half_1
    t21, t22 = angle3d - half_2, angle3d + half_2
    if t11 < t21 and t12 > t22:
        return 0.0
    return None


def _slab_path_length(disk, previous, new, step_size):
    """Length of the step spent inside the slab |altitude| <= thickness / 2."""
    half = disk.thickness / 2.0
    altitude_1 = altitude(previous)
    altitude_2 = altitude(new)
    inside_1 = abs(altitude_1) <= half
    inside_2 = abs(altitude_2) <= half

    crossing = equator_crossing(previous, new)
    if crossing is None:
        if inside_1 and inside_2 and disk.r_min <= new[1] <= disk.r_max:
            return step_size
        return None
    a, r_cross = crossing
    # If the ray's too far, no collision
    if abs(a) > 2.0 or r_cross < disk.r_min or r_cross > disk.r_max:
        return None

    da = altitude_2 - altitude_1
    sign = 1.0 if altitude_2 > altitude_1 else -1.0
    if inside_1 and inside_2:
        return step_size
    if inside_2:
        return step_size * (sign * half + altitude_2) / da
    if inside_1:
        return step_size * (sign * half - altitude_1) / da
    if 0.0 <= a <= 1.0:
        return step_size * sign * disk.thickness / da
    return 0.0


def _traverse_volume(disk, previous, new, step_size, rng):
    length = _slab_path_length(disk, previous, new, step_size)
    if length is None or length <= 0.0:
        return None
    if rng is None:
        raise ValueError("AccretionVolume collisions need an explicit random generator")
    density = 0.5 + noisy_luminosity(new[1], new[2], disk.r_min)
    probability = 1.0 - math.exp(-disk.opacity * length * density)
    if probability >= rng.random():
        return length
    return None


def collide(obstacle, previous, new, step_size, rng=None):
    """
    Test the path segment previous -> new against one obstacle.

    Returns the collision measure (>= 0) on a hit and None otherwise.
    `rng` is a numpy Generator, required by AccretionVolume.
    """
    if isinstance(obstacle, Horizon):
        return 0.0 if new[1] <= obstacle.r else None
    if isinstance(obstacle, HorizonPredictor):
        return _predict_horizon(obstacle.r, previous, new)
    if isinstance(obstacle, DistanceCutoff):
        return 0.0 if new[1] >= obstacle.r else None
    if isinstance(obstacle, Ring):
        crossing = equator_crossing(previous, new)
        if crossing is None:
            return None
        a, r_cross = crossing
        if 0.0 <= a <= 1.0 and obstacle.r_min <= r_cross <= obstacle.r_max:
            return a
        return None
    if isinstance(obstacle, AccretionVolume):
        return _traverse_volume(obstacle, previous, new, step_size, rng)
    raise TypeError(f"Unknown obstacle kind: {obstacle!r}")


def shade(obstacle, position):
    """Surface colour (linear RGB) of an obstacle at a 4-position."""
    if isinstance(obstacle, (Horizon, HorizonPredictor)):
        return np.zeros(3)
    if isinstance(obstacle, DistanceCutoff):
        return np.array(ESCAPE_COLOR)
    if isinstance(obstacle, (Ring, AccretionVolume)):
        return blackbody_color(position[1], position[2], obstacle.r_min,
                               obstacle.temperature, obstacle.brightness)
    raise TypeError(f"Unknown obstacle kind: {obstacle!r}")


def collision_point(obstacle, previous, new, value):
    """4-position reported for a hit: the equator crossing for rings, else the new sample."""
    if isinstance(obstacle, Ring):
        return previous + value * (new - previous)
    return new.copy()
