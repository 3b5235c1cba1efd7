import numpy as np
import pytest
from relativistic.space import Space
from relativistic.utils import build_null_velocity


def test_christoffel_known_components():
    space = Space(rs=2.0, c=1.0)
    r, th = 10.0, np.pi / 3
    G = space.christoffel([0.0, r, th, 0.5])
    assert G.shape == (4, 4, 4)
    assert G[0, 0, 1] == pytest.approx(2.0 / (2 * r * (r - 2.0)))
    assert G[1, 0, 0] == pytest.approx(2.0 * (r - 2.0) / (2 * r ** 3))
    assert G[1, 1, 1] == pytest.approx(-2.0 / (2 * r * (r - 2.0)))
    assert G[1, 2, 2] == pytest.approx(-(r - 2.0))
    assert G[1, 3, 3] == pytest.approx(-(r - 2.0) * np.sin(th) ** 2)
    assert G[2, 1, 2] == pytest.approx(1.0 / r)
    assert G[2, 3, 3] == pytest.approx(-np.sin(th) * np.cos(th))
    assert G[3, 1, 3] == pytest.approx(1.0 / r)
    assert G[3, 2, 3] == pytest.approx(np.cos(th) / np.sin(th))


def test_christoffel_symmetric_in_lower_indices():
    space = Space(rs=1.0)
    G = space.christoffel([0.0, 7.3, 1.1, 2.0])
    assert np.allclose(G, np.transpose(G, (0, 2, 1)))


def test_christoffel_scales_with_light_speed():
    G1 = Space(rs=1.0, c=1.0).christoffel([0.0, 5.0, 1.0, 0.0])
    G2 = Space(rs=1.0, c=2.0).christoffel([0.0, 5.0, 1.0, 0.0])
    assert G2[1, 0, 0] == pytest.approx(4.0 * G1[1, 0, 0])
    assert G2[1, 1, 1] == pytest.approx(G1[1, 1, 1])


def test_christoffel_diverges_at_singularities():
    space = Space(rs=1.0)
    at_horizon = space.christoffel([0.0, 1.0, np.pi / 2, 0.0])
    assert not np.all(np.isfinite(at_horizon))
    on_axis = space.christoffel([0.0, 5.0, 0.0, 0.0])
    assert not np.isfinite(on_axis[3, 2, 3])


def test_christoffel_is_recomputed_per_position():
    space = Space(rs=1.0)
    a = space.christoffel([0.0, 3.0, 1.0, 0.0])
    b = space.christoffel([0.0, 9.0, 1.0, 0.0])
    assert a is not b
    assert a[2, 1, 2] == pytest.approx(1.0 / 3.0)
    assert b[2, 1, 2] == pytest.approx(1.0 / 9.0)


def test_metric_diagonal():
    space = Space(rs=1.0, c=1.0)
    g = space.metric([0.0, 4.0, np.pi / 2, 0.0])
    assert g == pytest.approx([-0.75, 1.0 / 0.75, 16.0, 16.0])


def test_null_norm_of_initial_velocity():
    space = Space(rs=1.0)
    position = np.array([0.0, 12.0, 1.2, 0.3])
    for direction in [(0.0, 0.0), (np.pi, 0.0), (1.0, 2.0), (2.5, -1.0)]:
        v = build_null_velocity(direction, space.metric(position))
        assert v[0] > 0
        assert abs(space.null_norm(position, v)) < 1e-12


def test_negative_discriminant_gives_zero_time_component():
    space = Space(rs=1.0)
    inside = np.array([0.0, 0.5, np.pi / 2, 0.0])
    v = build_null_velocity((np.pi / 2, np.pi / 2), space.metric(inside))
    assert v[0] == 0.0
    assert np.all(np.isfinite(v))
