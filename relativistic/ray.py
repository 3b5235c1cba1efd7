#ray.py
import math
from enum import Enum
import numpy as np
from .geodesic import rk4_step
from .obstacle import Collision, collide, collision_point, shade
from .utils import build_null_velocity, to_cartesian

# Smallest fraction of the nominal step used next to the horizon
ADAPTIVE_FLOOR = 1.0 / 200.0
# Largest step displacement allowed, relative to the distance from the polar axis
POLAR_SAFETY = 0.1


class RayState(Enum):
    INITIALIZED = 'initialized'
    STEPPING = 'stepping'
    COLLIDED = 'collided'
    ESCAPED = 'escaped'
    DIVERGED = 'diverged'


class Ray:
    """
    Light ray following a null geodesic.
    position: 4-vector (t, r, θ, φ)
    velocity: 4-vector (dt, dr, dθ, dφ) with respect to the affine parameter
    direction: local emission angles (alpha, beta) at *position*, see
        utils.local_direction_to_unit
    """
    def __init__(self, position, direction, space):
        self.space = space
        self.position = np.array(position, dtype=np.float64)
        self.velocity = build_null_velocity(direction, space.metric(self.position))
        self.state = RayState.INITIALIZED
        self.history = []

    def step(self, step_size):
        """Advance the ray by one RK4 step of the geodesic equation."""
        self.position, self.velocity = rk4_step(
            self.position, self.velocity, float(step_size), self.space.rs, self.space.c
        )

    def adaptive_step(self, previous, step_size):
        """
        Step size for the next step: shrunk near the horizon in proportion to
        |1 - rs/r| (never below ADAPTIVE_FLOOR of the nominal step) and
        shrunk again when the last displacement is large compared to the
        distance from the polar axis.
        """
        r = self.position[1]
        th = self.position[2]
        h = step_size * max(abs(1.0 - self.space.rs / r), ADAPTIVE_FLOOR)
        axis_distance = abs(r * math.sin(th))
        if axis_distance > 0.0:
            displacement = np.linalg.norm(to_cartesian(self.position) - to_cartesian(previous))
            ratio = displacement / axis_distance
            if ratio > POLAR_SAFETY:
                h *= POLAR_SAFETY / ratio
        return h

    def trace(self, max_steps, step_size, adaptive=False, rng=None, record=False):
        """
        Integrate until an obstacle is hit or *max_steps* steps are taken.

        After every step the segment (previous, new) is checked against the
        obstacles in declaration order and the first hit wins.  Returns the
        Collision, or None if the ray escaped (step budget exhausted) or
        diverged (non-finite position or velocity).  The outcome is kept in
        `self.state`.  *rng* is the numpy Generator handed to the obstacles;
        scenes holding an AccretionVolume need one.
        """
        obstacles = self.space.obstacles
        if record:
            self.history = [(self.position.copy(), self.velocity.copy())]

        h = step_size
        for _ in range(max_steps):
            self.state = RayState.STEPPING
            previous = self.position
            self.step(h)
            if record:
                self.history.append((self.position.copy(), self.velocity.copy()))
            if not (np.all(np.isfinite(self.position)) and np.all(np.isfinite(self.velocity))):
                self.state = RayState.DIVERGED
                return None
            for index, obstacle in enumerate(obstacles):
                value = collide(obstacle, previous, self.position, h, rng)
                if value is not None:
                    self.state = RayState.COLLIDED
                    point = collision_point(obstacle, previous, self.position, value)
                    return Collision(
                        position=point,
                        color=shade(obstacle, point),
                        obstacle=obstacle,
                        index=index,
                        value=value,
                    )
            if adaptive:
                h = self.adaptive_step(previous, step_size)

        self.state = RayState.ESCAPED
        return None

    def positions(self):
        """Recorded 4-positions as an (N, 4) array."""
        return np.array([q for q, _ in self.history])

    def velocities(self):
        """Recorded 4-velocities as an (N, 4) array."""
        return np.array([p for _, p in self.history])
