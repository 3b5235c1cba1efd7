#utils.py
import math
import numpy as np
from einsteinpy.coordinates.utils import spherical_to_cartesian_fast


def to_cartesian(position):
    """Cartesian (x, y, z) of a 4-position (t, r, θ, φ)."""
    _, x, y, z = spherical_to_cartesian_fast(position[0], position[1], position[2], position[3])
    return np.array([x, y, z])


def trajectory_to_cartesian(positions):
    """Convert an (N, 4) array of 4-positions to an (N, 3) Cartesian poly-line."""
    positions = np.asarray(positions, dtype=np.float64)
    t, r, th, ph = positions.T
    _, x, y, z = spherical_to_cartesian_fast(t, r, th, ph)
    return np.column_stack((x, y, z))


def local_direction_to_unit(alpha, beta):
    """Orthonormal components (n_r, n_θ, n_φ) of a local emission direction.

    alpha : angle from the outward radial axis e_r (0 = outward, π = inward)
    beta  : azimuth about e_r, measured from e_θ towards e_φ
    """
    return np.array([
        math.cos(alpha),
        math.sin(alpha) * math.cos(beta),
        math.sin(alpha) * math.sin(beta),
    ])


def unit_to_local_direction(n_r, n_th, n_ph):
    """Inverse of `local_direction_to_unit`."""
    alpha = math.acos(min(1.0, max(-1.0, n_r)))
    beta = math.atan2(n_ph, n_th)
    return alpha, beta


# ------------------------- Helper: null 4-velocity ---------------------------
def build_null_velocity(direction, metric):
    """Return contravariant null 4-velocity v^μ = (v^t, v^r, v^θ, v^φ).

    Parameters
    ----------
    direction : (alpha, beta)
        Local emission direction, see `local_direction_to_unit`.
    metric : array_like, shape (4,)
        Diagonal covariant metric (g_tt, g_rr, g_θθ, g_φφ) at the emission
        point.

    The spatial components are the orthonormal direction divided by the
    local scale factors √|g_ii|.  v^t is the future-directed root of
    g_tt (v^t)² + C = 0.  A negative discriminant (e.g. inside the horizon)
    gives v^t = 0 instead of NaN.
    """
    g_tt, g_rr, g_thth, g_phph = (float(g) for g in metric)
    n = local_direction_to_unit(*direction)
    with np.errstate(divide='ignore', invalid='ignore'):
        spatial = n / np.sqrt(np.abs(np.array([g_rr, g_thth, g_phph])))
        C = g_rr * spatial[0] ** 2 + g_thth * spatial[1] ** 2 + g_phph * spatial[2] ** 2
        disc = -4.0 * g_tt * C  # B = 0 in Schwarzschild so Δ = -4AC
    if not disc > 0.0 or g_tt == 0.0:
        v_t = 0.0
    else:
        v_t = math.sqrt(disc) / (2.0 * abs(g_tt))

    return np.array([v_t, spatial[0], spatial[1], spatial[2]], dtype=np.float64)
