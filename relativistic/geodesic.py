# geodesic.py
import math
import logging
import numpy as np
from numba import njit
logging.getLogger('numba').setLevel(logging.ERROR)

# ----------------------------------------------------------------------------
# Schwarzschild null-geodesic kernels (CPU, numba)
# ----------------------------------------------------------------------------
# Coordinates are (t, r, θ, φ).  All kernels use numpy's error model so that
# the coordinate singularities (r = rs, θ = 0 or π) produce inf / NaN instead
# of raising; the ray tracer classifies such rays as diverged.
# ----------------------------------------------------------------------------

# ------------------------- Christoffel symbols -------------------------------
@njit(error_model='numpy')
def schw_christoffel(r, th, rs, c):
    """Return Γ^a_{bc} for the Schwarzschild metric in spherical coordinates.

    Only r and θ enter.  A fresh (4, 4, 4) array is returned on every call, no
    tensor is ever cached between positions.
    """
    Gamma = np.zeros((4, 4, 4))
    sin_th = math.sin(th)
    cos_th = math.cos(th)
    # t components
    Gamma[0, 0, 1] = rs / (2.0 * r * (r - rs))
    Gamma[0, 1, 0] = Gamma[0, 0, 1]
    # r components
    Gamma[1, 0, 0] = c * c * rs * (r - rs) / (2.0 * r ** 3)
    Gamma[1, 1, 1] = -rs / (2.0 * r * (r - rs))
    Gamma[1, 2, 2] = -(r - rs)
    Gamma[1, 3, 3] = -(r - rs) * sin_th ** 2
    # θ components
    Gamma[2, 1, 2] = 1.0 / r
    Gamma[2, 2, 1] = Gamma[2, 1, 2]
    Gamma[2, 3, 3] = -sin_th * cos_th
    # φ components
    Gamma[3, 1, 3] = 1.0 / r
    Gamma[3, 3, 1] = Gamma[3, 1, 3]
    Gamma[3, 2, 3] = cos_th / sin_th
    Gamma[3, 3, 2] = Gamma[3, 2, 3]
    return Gamma


# ------------------------- Geodesic RHS --------------------------------------
@njit(error_model='numpy')
def geodesic_rhs(q, p, rs, c):
    """dp^a/dλ = -Γ^a_{bc} p^b p^c, with Γ evaluated at *q*."""
    Gamma = schw_christoffel(q[1], q[2], rs, c)
    dpdt = np.zeros(4)
    for a in range(4):
        for b in range(4):
            for d in range(4):
                g = Gamma[a, b, d]
                if g != 0.0:
                    dpdt[a] -= g * p[b] * p[d]
    return dpdt


# ------------------------- RK4 step ------------------------------------------
@njit(error_model='numpy')
def rk4_step(q, p, delta, rs, c):
    """One classical Runge-Kutta step of the geodesic equation.

    The second-order system is integrated as (q, p) with dq/dλ = p.  Every
    stage re-evaluates the connection coefficients at its own position.
    """
    k1q = p
    k1p = geodesic_rhs(q, p, rs, c)

    q2 = q + 0.5 * delta * k1q
    p2 = p + 0.5 * delta * k1p
    k2q = p2
    k2p = geodesic_rhs(q2, p2, rs, c)

    q3 = q + 0.5 * delta * k2q
    p3 = p + 0.5 * delta * k2p
    k3q = p3
    k3p = geodesic_rhs(q3, p3, rs, c)

    q4 = q + delta * k3q
    p4 = p + delta * k3p
    k4q = p4
    k4p = geodesic_rhs(q4, p4, rs, c)

    q_next = q + (delta / 6.0) * (k1q + 2.0 * k2q + 2.0 * k3q + k4q)
    p_next = p + (delta / 6.0) * (k1p + 2.0 * k2p + 2.0 * k3p + k4p)
    return q_next, p_next
