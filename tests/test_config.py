import numpy as np
import pandas as pd
import pytest
from config import parse_args
from main import build_camera, build_space, outcome_label, photon_table
from relativistic.camera import DIVERGED_CODE, ESCAPED_CODE
from relativistic.obstacle import AccretionVolume, DistanceCutoff, Horizon, HorizonPredictor, Ring


def test_defaults():
    args = parse_args([])
    assert args.bh_radius == 1.0
    assert (args.width, args.height) == (200, 200)
    assert args.rays == 4
    assert args.steps == 1000
    assert args.delta == pytest.approx(0.4)
    assert args.exposure == pytest.approx(2.5)
    assert args.gamma == pytest.approx(0.75)
    assert not args.ring and not args.predict and not args.no_adaptive


@pytest.mark.parametrize('argv', [
    ['--bh-radius', '0'],
    ['--width', '0'],
    ['--fov-y', '-5'],
    ['--camera-distance', '0.5'],
    ['--rays', '3'],
    ['--disk-inner', '30', '--disk-outer', '20'],
    ['--thickness', '0'],
    ['--workers', '0'],
])
def test_invalid_options_exit(argv):
    with pytest.raises(SystemExit):
        parse_args(argv)


def test_default_scene_order():
    space = build_space(parse_args(['--bh-radius', '2']))
    kinds = [type(o) for o in space.obstacles]
    assert kinds == [Horizon, DistanceCutoff, AccretionVolume]
    assert space.rs == 2.0
    assert space.obstacles[0].r == 2.0
    assert space.obstacles[1].r == pytest.approx(1.1 * 30.0 * 2.0)
    disk = space.obstacles[2]
    assert (disk.r_min, disk.r_max) == (6.0, 40.0)
    assert disk.thickness == pytest.approx(0.1)
    assert disk.opacity == pytest.approx(10.0)


def test_ring_and_predictor_scene():
    space = build_space(parse_args(['--ring', '--predict', '--temperature', '4000']))
    kinds = [type(o) for o in space.obstacles]
    assert kinds == [Horizon, HorizonPredictor, DistanceCutoff, Ring]
    assert space.obstacles[3].temperature == 4000.0


def test_camera_from_options():
    camera = build_camera(parse_args(['--width', '40', '--height', '20', '--camera-theta', '90']))
    assert camera.image_size == (40, 20)
    assert camera.position[0] == 30.0
    assert camera.position[1] == pytest.approx(np.pi / 2)
    assert camera.fov == pytest.approx((np.deg2rad(72.0), np.deg2rad(36.0)))


def test_photon_table():
    space = build_space(parse_args([]))
    outcomes = np.array([[[0, ESCAPED_CODE]], [[DIVERGED_CODE, 2]]], dtype=np.int16)
    df = photon_table(outcomes, space)
    assert isinstance(df, pd.DataFrame)
    assert list(df.columns) == ['i', 'j', 'sample', 'outcome']
    assert len(df) == 4
    assert df['outcome'].tolist() == ['captured', 'escaped', 'diverged', 'disk']
    assert df[['i', 'j', 'sample']].values.tolist() == [[0, 0, 0], [0, 0, 1], [1, 0, 0], [1, 0, 1]]
    assert outcome_label(1, space) == 'escaped'


def test_outcome_labels_for_ring_and_predictor():
    space = build_space(parse_args(['--ring', '--predict']))
    labels = [outcome_label(code, space) for code in range(len(space.obstacles))]
    assert labels == ['captured', 'captured', 'escaped', 'disk']
