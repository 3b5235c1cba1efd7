#main.py
import logging
import os
import numpy as np
import pandas as pd
from PIL import Image
from tqdm import tqdm
from config import parse_args
from relativistic.camera import Camera, DIVERGED_CODE, ESCAPED_CODE
from relativistic.obstacle import AccretionVolume, DistanceCutoff, Horizon, HorizonPredictor, Ring
from relativistic.space import Space

# ---
# GEOMETRIZED UNITS: G = c = 1
# Lengths are given in units of the horizon radius rs on the command line.
# ---

logging.basicConfig(level=logging.INFO, format='%(asctime)s %(levelname)s: %(message)s')


def build_space(args):
    """Scene obstacles in priority order: horizon, (predictor), cutoff, disk."""
    rs = args.bh_radius
    camera_distance = args.camera_distance * rs
    obstacles = [Horizon(r=rs)]
    if args.predict:
        obstacles.append(HorizonPredictor(r=rs))
    obstacles.append(DistanceCutoff(r=camera_distance * 1.1))
    if args.ring:
        obstacles.append(Ring(
            r_min=args.disk_inner * rs, r_max=args.disk_outer * rs,
            temperature=args.temperature, brightness=args.brightness,
        ))
    else:
        obstacles.append(AccretionVolume(
            r_min=args.disk_inner * rs, r_max=args.disk_outer * rs,
            thickness=args.thickness * rs, temperature=args.temperature,
            brightness=args.brightness, opacity=args.opacity / rs,
        ))
    return Space(rs=rs, c=1.0, obstacles=obstacles)


def build_camera(args):
    return Camera(
        position=(args.camera_distance * args.bh_radius, np.deg2rad(args.camera_theta), np.deg2rad(args.camera_phi)),
        orientation=(np.deg2rad(args.pitch), np.deg2rad(args.yaw), np.deg2rad(args.roll)),
        fov=(np.deg2rad(args.fov_x), np.deg2rad(args.fov_y)),
        image_size=(args.width, args.height),
    )


def outcome_label(code, space):
    """Summary label of an outcome code: captured, escaped, diverged or disk."""
    if code == ESCAPED_CODE:
        return 'escaped'
    if code == DIVERGED_CODE:
        return 'diverged'
    obstacle = space.obstacles[code]
    if isinstance(obstacle, (Horizon, HorizonPredictor)):
        return 'captured'
    if isinstance(obstacle, DistanceCutoff):
        return 'escaped'
    return 'disk'


def photon_table(outcomes, space):
    """One row per traced sub-sample: pixel, sample index and outcome label."""
    h, w, n = outcomes.shape
    ii, jj, kk = np.meshgrid(np.arange(h), np.arange(w), np.arange(n), indexing='ij')
    labels = [outcome_label(int(code), space) for code in outcomes.ravel()]
    return pd.DataFrame({'i': ii.ravel(), 'j': jj.ravel(), 'sample': kk.ravel(), 'outcome': labels})


def main(argv=None):
    args = parse_args(argv)
    space = build_space(args)
    camera = build_camera(args)
    logging.info(f"Black hole radius {space.rs}")
    logging.info(f"Image size {args.width}x{args.height}")
    logging.info(f"Obstacles: {', '.join(type(o).__name__ for o in space.obstacles)}")

    with tqdm(total=100.0, desc="Tracing rays", unit="%") as bar:
        def report(percent):
            bar.update(percent - bar.n)

        result = camera.render(
            space,
            n_rays=args.rays,
            max_steps=args.steps,
            step_size=args.delta * args.bh_radius,
            exposure=args.exposure,
            gamma=args.gamma,
            adaptive=not args.no_adaptive,
            seed=args.seed,
            workers=args.workers,
            progress=report,
        )

    os.makedirs(os.path.dirname(args.output) or '.', exist_ok=True)
    Image.fromarray(result.image).save(args.output)
    logging.info(f"Saved {args.output}")

    df = photon_table(result.outcomes, space)
    if args.photon_data:
        df.to_csv(args.photon_data, index=False)
        logging.info(f"Saved ray outcome data to {args.photon_data}")
    counts = df['outcome'].value_counts()
    print("\nPhoton summary:")
    for label, count in counts.items():
        print(f"  {label}: {count}")

    if args.sample_rays > 0:
        samples = camera.sample_trajectories(
            space, args.sample_rays, max_steps=args.steps,
            step_size=args.delta * args.bh_radius,
            adaptive=not args.no_adaptive, seed=args.seed,
        )
        rows = []
        for ridx, sample in enumerate(samples):
            for pidx, (px, py, pz) in enumerate(sample['trajectory']):
                rows.append({'ray_id': ridx, 'i': sample['i'], 'j': sample['j'], 'state': sample['state'],
                             'point_idx': pidx, 'x': px, 'y': py, 'z': pz})
        pd.DataFrame(rows).to_csv(args.sampled_rays_csv, index=False)
        logging.info(f"Saved {len(samples)} sampled rays to {args.sampled_rays_csv}")
        if args.plot:
            from visualization.plot import plot_scene_3d, plot_scene_topdown
            out_dir = os.path.dirname(args.output) or '.'
            plot_scene_topdown(space, camera, samples, out_path=os.path.join(out_dir, 'scene_topdown.png'))
            plot_scene_3d(space, camera, samples, out_path=os.path.join(out_dir, 'scene_3d.png'))


if __name__ == "__main__":
    main()
