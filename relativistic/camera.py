# camera.py
import math
import logging
from concurrent.futures import ProcessPoolExecutor, as_completed
import numpy as np
from .ray import Ray, RayState
from .utils import trajectory_to_cartesian, unit_to_local_direction

# Outcome codes stored per sub-sample; collisions store the obstacle index
ESCAPED_CODE = -1
DIVERGED_CODE = -2

# Diagnostic radiance for rays that hit nothing
DIVERGED_COLOR = np.array([255.0, 0.0, 0.0])
ESCAPED_COLOR = np.array([0.0, 0.0, 255.0])


class RenderResult:
    """
    image: (height, width, 3) uint8 tone-mapped pixels, row 0 at the top
    radiance: (height, width, 3) float64 linear radiance
    outcomes: (height, width, n_rays) outcome code of every sub-sample
    """
    def __init__(self, image, radiance, outcomes):
        self.image = image
        self.radiance = radiance
        self.outcomes = outcomes


class Camera:
    """
    Spherical pinhole camera.
    position: (r, θ, φ) of the observer
    orientation: (θ, φ, ψ) pitch and yaw offsets of the optical axis away from
        the black hole, and roll of the image plane, in radians
    fov: (x, y) angular field of view in radians
    image_size: (width, height) in pixels
    """
    def __init__(self, position, orientation=(0.0, 0.0, 0.0), fov=(np.pi / 2.5, np.pi / 5), image_size=(200, 200)):
        self.position = np.array(position, dtype=np.float64)
        self.orientation = np.array(orientation, dtype=np.float64)
        self.fov = tuple(float(f) for f in fov)
        self.image_size = tuple(int(s) for s in image_size)
        if min(self.image_size) <= 0:
            raise ValueError(f"Image size must be positive, got {self.image_size}")
        if min(self.fov) <= 0.0:
            raise ValueError(f"Field of view must be positive, got {self.fov}")

    def ray_origin(self):
        """Observer 4-position (t = 0, r, θ, φ)."""
        return np.array([0.0, *self.position])

    def local_direction(self, u, v):
        """
        Local emission direction (alpha, beta) for a screen offset (u, v) in
        [-0.5, 0.5], u to the right and v upwards.  The optical axis points
        radially inward when the orientation is zero.
        """
        pitch0, yaw0, roll = self.orientation
        du = u * self.fov[0]
        dv = v * self.fov[1]
        # roll bends the horizontal reference direction of the image plane
        c, s = math.cos(roll), math.sin(roll)
        du, dv = c * du - s * dv, s * du + c * dv
        yaw = yaw0 + du
        pitch = pitch0 + dv
        # forward = -e_r, right = +e_φ, up = -e_θ
        n_r = -math.cos(pitch) * math.cos(yaw)
        n_th = -math.sin(pitch)
        n_ph = math.cos(pitch) * math.sin(yaw)
        return unit_to_local_direction(n_r, n_th, n_ph)

    def directions(self, i, j, n_rays):
        """Directions of the √n_rays x √n_rays sub-samples of pixel (row i, column j)."""
        m = math.isqrt(n_rays)
        if n_rays <= 0 or m * m != n_rays:
            raise ValueError(f"n_rays must be a positive perfect square, got {n_rays}")
        width, height = self.image_size
        dirs = []
        for l in range(m):
            for k in range(m):
                u = (j + (k + 0.5) / m) / width - 0.5
                v = 0.5 - (i + (l + 0.5) / m) / height
                dirs.append(self.local_direction(u, v))
        return dirs

    def trace_sample(self, space, direction, max_steps, step_size, adaptive, rng):
        """Trace one sub-sample; returns (radiance, outcome code)."""
        ray = Ray(self.ray_origin(), direction, space)
        collision = ray.trace(max_steps, step_size, adaptive=adaptive, rng=rng)
        if collision is not None:
            return collision.color, collision.index
        if ray.state is RayState.DIVERGED:
            return DIVERGED_COLOR, DIVERGED_CODE
        return ESCAPED_COLOR, ESCAPED_CODE

    def render_radiance(self, space, n_rays=4, max_steps=1000, step_size=0.4, adaptive=True,
                        seed=0, workers=None, progress=None):
        """
        Trace every pixel and return (radiance, outcomes).

        Rows are independent tasks run in a ProcessPoolExecutor (in-process
        when workers == 1).  Each row draws from its own generator seeded with
        (seed, row), so results do not depend on scheduling.  *progress*, if
        given, is called with the percentage of finished rows.
        """
        width, height = self.image_size
        self.directions(0, 0, n_rays)  # validates n_rays
        radiance = np.zeros((height, width, 3), dtype=np.float64)
        outcomes = np.zeros((height, width, n_rays), dtype=np.int16)
        tasks = [(self, space, i, n_rays, max_steps, step_size, adaptive, seed) for i in range(height)]

        finished = 0

        def collect(result):
            nonlocal finished
            i, row, codes = result
            radiance[i] = row
            outcomes[i] = codes
            finished += 1
            if progress is not None:
                progress(100.0 * finished / height)

        logging.info(f"Rendering {width}x{height} pixels, {n_rays} rays per pixel...")
        if workers == 1:
            for task in tasks:
                collect(_render_row(task))
        else:
            with ProcessPoolExecutor(max_workers=workers) as executor:
                futures = [executor.submit(_render_row, task) for task in tasks]
                for future in as_completed(futures):
                    collect(future.result())
        logging.info("Render pass complete")
        return radiance, outcomes

    def render(self, space, n_rays=4, max_steps=1000, step_size=0.4, exposure=2.5, gamma=0.75,
               adaptive=True, seed=0, workers=None, progress=None):
        """Full render: parallel radiance pass, then global tone mapping."""
        radiance, outcomes = self.render_radiance(
            space, n_rays=n_rays, max_steps=max_steps, step_size=step_size,
            adaptive=adaptive, seed=seed, workers=workers, progress=progress
        )
        image = tone_map(radiance, exposure=exposure, gamma=gamma)
        return RenderResult(image, radiance, outcomes)

    def sample_trajectories(self, space, n_samples, max_steps=1000, step_size=0.4, adaptive=True, seed=0):
        """
        Trace the centre ray of *n_samples* random pixels with recording on.
        Returns a list of dicts with the pixel, final state and the Cartesian
        trajectory (N, 3).
        """
        rng = np.random.default_rng(seed)
        width, height = self.image_size
        samples = []
        for _ in range(n_samples):
            i = int(rng.integers(height))
            j = int(rng.integers(width))
            ray = Ray(self.ray_origin(), self.directions(i, j, 1)[0], space)
            ray.trace(max_steps, step_size, adaptive=adaptive, rng=rng, record=True)
            positions = ray.positions()
            finite = np.all(np.isfinite(positions), axis=1)
            samples.append({
                'i': i,
                'j': j,
                'state': ray.state.value,
                'trajectory': trajectory_to_cartesian(positions[finite]),
            })
        return samples


def _render_row(task):
    """Worker: trace all sub-samples of one image row."""
    camera, space, i, n_rays, max_steps, step_size, adaptive, seed = task
    rng = np.random.default_rng([seed, i])
    width = camera.image_size[0]
    row = np.zeros((width, 3), dtype=np.float64)
    codes = np.zeros((width, n_rays), dtype=np.int16)
    for j in range(width):
        for k, direction in enumerate(camera.directions(i, j, n_rays)):
            color, code = camera.trace_sample(space, direction, max_steps, step_size, adaptive, rng)
            row[j] += color
            codes[j, k] = code
        row[j] /= n_rays
    return i, row, codes


def tone_map(radiance, exposure=1.0, gamma=1.0):
    """
    Map linear radiance to 8-bit pixels.  Every channel is divided by the
    global maximum of the whole buffer, scaled by *exposure*, raised to
    *gamma*, scaled to 255 and clamped.
    """
    radiance = np.asarray(radiance, dtype=np.float64)
    peak = float(np.max(radiance)) if radiance.size else 0.0
    if not np.isfinite(peak) or peak <= 0.0:
        return np.zeros(radiance.shape, dtype=np.uint8)
    scaled = np.clip(exposure * radiance / peak, 0.0, None) ** gamma * 255.0
    return np.clip(scaled, 0, 255).astype(np.uint8)
