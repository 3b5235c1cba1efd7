#blackbody.py
import math
import numpy as np
from noise import pnoise2

# ---
# Blackbody colour table: row k is the normalised sRGB colour of a blackbody
# at k * 1000 K, from 0 K (black) to 20000 K.
# ---
TEMPERATURE_STEP = 1000.0
BLACKBODY_RGB = np.array([
    (0, 0, 0),
    (255, 56, 0),
    (255, 137, 18),
    (255, 180, 107),
    (255, 209, 163),
    (255, 228, 206),
    (255, 243, 239),
    (245, 243, 255),
    (227, 233, 255),
    (214, 225, 255),
    (204, 219, 255),
    (196, 215, 255),
    (191, 211, 255),
    (186, 208, 255),
    (182, 206, 255),
    (179, 204, 255),
    (176, 202, 255),
    (174, 200, 255),
    (172, 199, 255),
    (170, 198, 255),
    (168, 197, 255),
], dtype=np.float64) / 255.0
BLACKBODY_TEMPERATURES = np.arange(len(BLACKBODY_RGB)) * TEMPERATURE_STEP

# (1 - sqrt(x)) x^3 peaks at sqrt(x) = 6/7
LUMINOSITY_PEAK = (1.0 - 6.0 / 7.0) * (36.0 / 49.0) ** 3

# Fractal noise parameters for the disk texture
NOISE_FREQUENCY = 0.05
NOISE_OCTAVES = 6
NOISE_PERSISTENCE = 0.8
NOISE_LACUNARITY = 2.0
NOISE_AMPLITUDE = 0.5


def temperature_to_rgb(temperature):
    """Linearly interpolate the blackbody table; out-of-range temperatures are clamped."""
    return np.array([
        np.interp(temperature, BLACKBODY_TEMPERATURES, BLACKBODY_RGB[:, k])
        for k in range(3)
    ])


def luminosity(r, r_min):
    """Thin-disk luminosity (1 - √(r_min/r))·(r_min/r)³, normalised to a peak of 1."""
    if r <= r_min:
        return 0.0
    x = r_min / r
    return (1.0 - math.sqrt(x)) * x ** 3 / LUMINOSITY_PEAK


def disk_noise(r, theta, seed=0):
    """Multi-octave Perlin noise at (r, θ), roughly in [-1, 1]."""
    return pnoise2(
        r * NOISE_FREQUENCY, theta / math.pi,
        octaves=NOISE_OCTAVES,
        persistence=NOISE_PERSISTENCE,
        lacunarity=NOISE_LACUNARITY,
        base=seed,
    )


def noisy_luminosity(r, theta, r_min):
    """Luminosity perturbed by the fractal noise field, never negative."""
    lum = luminosity(r, r_min) * (1.0 + NOISE_AMPLITUDE * disk_noise(r, theta))
    return max(0.0, lum)


def blackbody_color(r, theta, r_min, temperature, brightness):
    """
    Disk colour at (r, θ): effective temperature T = temperature · L^(1/4),
    looked up in the blackbody table and scaled by L and the peak brightness.
    """
    lum = noisy_luminosity(r, theta, r_min)
    t_eff = temperature * lum ** 0.25
    return temperature_to_rgb(t_eff) * lum * brightness
