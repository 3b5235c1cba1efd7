#space.py
import numpy as np
from .geodesic import schw_christoffel

class Space:
    """
    Exterior Schwarzschild spacetime in spherical coordinates (t, r, θ, φ).
    rs: horizon (Schwarzschild) radius
    c: propagation speed of light, 1 in geometrized units
    obstacles: ordered scene obstacles, checked in this order by every ray
    """
    def __init__(self, rs=1.0, c=1.0, obstacles=()):
        self.rs = float(rs)
        self.c = float(c)
        self.obstacles = tuple(obstacles)

    def __repr__(self):
        return f"Space(rs={self.rs}, c={self.c}, obstacles={self.obstacles!r})"

    def christoffel(self, position):
        """Christoffel symbols Γ^a_{bc} at a 4-position, recomputed on every call."""
        return schw_christoffel(float(position[1]), float(position[2]), self.rs, self.c)

    def metric(self, position):
        """Diagonal covariant metric (g_tt, g_rr, g_θθ, g_φφ) at a 4-position."""
        r = np.float64(position[1])
        th = np.float64(position[2])
        with np.errstate(divide='ignore', invalid='ignore'):
            f = 1.0 - self.rs / r
            return np.array([
                -f * self.c ** 2,
                1.0 / f,
                r * r,
                (r * np.sin(th)) ** 2,
            ], dtype=np.float64)

    def null_norm(self, position, velocity):
        """g_{ab} v^a v^b; zero for a light-like tangent vector."""
        g = self.metric(position)
        v = np.asarray(velocity, dtype=np.float64)
        return float(np.sum(g * v * v))
