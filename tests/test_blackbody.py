import numpy as np
import pytest
from relativistic.blackbody import (
    BLACKBODY_RGB,
    blackbody_color,
    luminosity,
    noisy_luminosity,
    temperature_to_rgb,
)


def test_table_lookup_is_clamped():
    assert np.allclose(temperature_to_rgb(-500.0), BLACKBODY_RGB[0])
    assert np.allclose(temperature_to_rgb(0.0), np.zeros(3))
    assert np.allclose(temperature_to_rgb(20000.0), BLACKBODY_RGB[-1])
    assert np.allclose(temperature_to_rgb(1e6), BLACKBODY_RGB[-1])


def test_table_lookup_interpolates_linearly():
    expected = (BLACKBODY_RGB[2] + BLACKBODY_RGB[3]) / 2
    assert np.allclose(temperature_to_rgb(2500.0), expected)
    assert np.allclose(temperature_to_rgb(6000.0), BLACKBODY_RGB[6])


def test_luminosity_profile():
    r_min = 3.0
    assert luminosity(r_min, r_min) == 0.0
    assert luminosity(1.0, r_min) == 0.0
    r_peak = r_min * 49.0 / 36.0
    assert luminosity(r_peak, r_min) == pytest.approx(1.0)
    assert luminosity(r_peak * 1.2, r_min) < 1.0
    assert luminosity(r_peak * 0.9, r_min) < 1.0
    assert luminosity(1000.0, r_min) < 1e-3


def test_noisy_luminosity_is_non_negative_and_bounded():
    r_min = 3.0
    for r in np.linspace(3.5, 30.0, 25):
        for theta in (0.3, np.pi / 2, 2.0):
            lum = noisy_luminosity(r, theta, r_min)
            assert lum >= 0.0
            assert lum <= 2.0 * luminosity(r, r_min) + 1e-12


def test_disk_is_dark_inside_inner_radius():
    assert np.allclose(blackbody_color(2.0, np.pi / 2, 3.0, 5000.0, 255.0), 0.0)


def test_brightness_scales_colour():
    dim = blackbody_color(6.0, np.pi / 2, 3.0, 5000.0, 100.0)
    bright = blackbody_color(6.0, np.pi / 2, 3.0, 5000.0, 200.0)
    assert np.allclose(bright, 2.0 * dim)
    assert dim.max() > 0.0
