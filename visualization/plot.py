import os
import matplotlib.pyplot as plt
import numpy as np
from matplotlib.lines import Line2D
from mpl_toolkits.mplot3d import Axes3D  # noqa: F401
from relativistic.obstacle import AccretionVolume, DistanceCutoff, Horizon, Ring
from relativistic.utils import to_cartesian

STATE_COLOURS = {
    'collided': 'orange',
    'escaped': 'deepskyblue',
    'diverged': 'red',
}


def _scene_extent(space, camera):
    """Boundary radius (distance cutoff if any) and disk annulus (r_min, r_max) or None."""
    boundary = None
    disk = None
    for obstacle in space.obstacles:
        if isinstance(obstacle, DistanceCutoff):
            boundary = obstacle.r
        elif isinstance(obstacle, (Ring, AccretionVolume)) and disk is None:
            disk = (obstacle.r_min, obstacle.r_max)
    if boundary is None:
        boundary = 1.1 * camera.position[0]
    return boundary, disk


def _horizon_radius(space):
    for obstacle in space.obstacles:
        if isinstance(obstacle, Horizon):
            return obstacle.r
    return space.rs


def plot_scene_topdown(space, camera, samples, out_path='images/scene_topdown.png'):
    """
    Top-down (x-y) view of the scene:
    - Event horizon and photon sphere
    - Disk annulus and distance cutoff
    - Camera position
    - Sampled trajectories, coloured by their final state
    """
    boundary, disk = _scene_extent(space, camera)
    rs = _horizon_radius(space)
    fig, ax = plt.subplots(figsize=(8, 8))
    ax.add_patch(plt.Circle((0, 0), rs, color='black', label='Event Horizon'))
    ax.add_patch(plt.Circle((0, 0), 1.5 * space.rs, color='gray', fill=False, linestyle=':', label='Photon Sphere'))
    ax.add_patch(plt.Circle((0, 0), boundary, color='gray', fill=False, linestyle='--', label='Distance Cutoff'))
    if disk is not None:
        for radius in disk:
            ax.add_patch(plt.Circle((0, 0), radius, color='goldenrod', fill=False, lw=1.5))
    cam_xyz = to_cartesian(camera.ray_origin())
    ax.plot(cam_xyz[0], cam_xyz[1], 'ro', label='Camera', markersize=10)
    for sample in samples:
        traj = sample['trajectory']
        if len(traj) == 0:
            continue
        ax.plot(traj[:, 0], traj[:, 1], color=STATE_COLOURS.get(sample['state'], 'orange'), lw=0.8)
    ax.set_aspect('equal')
    ax.set_xlabel('x')
    ax.set_ylabel('y')
    ax.set_title('Top-Down Scene View (Sampled Rays)')
    handles, labels = ax.get_legend_handles_labels()
    handles += [Line2D([0], [0], color=c, lw=2) for c in STATE_COLOURS.values()]
    labels += [f'Ray {state}' for state in STATE_COLOURS]
    ax.legend(handles, labels)
    lim = max(boundary, camera.position[0]) * 1.1
    ax.set_xlim(-lim, lim)
    ax.set_ylim(-lim, lim)
    os.makedirs(os.path.dirname(out_path) or '.', exist_ok=True)
    plt.savefig(out_path, bbox_inches='tight')
    plt.close(fig)
    print(f"Saved top-down scene image to {out_path}")


def plot_scene_3d(space, camera, samples, out_path='images/scene_3d.png', azimuths=(0, 90, 180)):
    """
    3-D view of the horizon, the disk annulus, the camera and the sampled
    trajectories.  One image is written per azimuth, suffixed `_azim<deg>`.
    """
    boundary, disk = _scene_extent(space, camera)
    rs = _horizon_radius(space)
    u_sphere, v_sphere = np.mgrid[0:2*np.pi:40j, 0:np.pi:20j]
    x_s = rs * np.cos(u_sphere) * np.sin(v_sphere)
    y_s = rs * np.sin(u_sphere) * np.sin(v_sphere)
    z_s = rs * np.cos(v_sphere)

    fig = plt.figure(figsize=(8, 8))
    ax = fig.add_subplot(111, projection='3d')
    ax.plot_surface(x_s, y_s, z_s, color='black', alpha=1.0, zorder=20)
    ax.plot_wireframe(x_s, y_s, z_s, color='yellow', linewidth=0.1, zorder=21)

    if disk is not None:
        radii = np.linspace(disk[0], disk[1], 10)
        phis = np.linspace(0, 2*np.pi, 80)
        rr, pp = np.meshgrid(radii, phis)
        ax.plot_surface(rr*np.cos(pp), rr*np.sin(pp), np.zeros_like(rr), color='goldenrod', alpha=0.3, linewidth=0)

    cam_xyz = to_cartesian(camera.ray_origin())
    ax.scatter([cam_xyz[0]], [cam_xyz[1]], [cam_xyz[2]], color='red', s=100)

    for sample in samples:
        traj = sample['trajectory']
        if len(traj) == 0:
            continue
        colour = STATE_COLOURS.get(sample['state'], 'orange')
        ax.plot(traj[:, 0], traj[:, 1], traj[:, 2], color=colour, lw=1)
        ax.scatter(traj[-1, 0], traj[-1, 1], traj[-1, 2], color=colour, s=10)

    ax.set_xlabel('x')
    ax.set_ylabel('y')
    ax.set_zlabel('z')
    ax.set_title('3D Scene: Horizon, Disk and Sampled Rays')
    max_range = max(boundary, camera.position[0]) * 1.1
    for axis in 'xyz':
        getattr(ax, f'set_{axis}lim')([-max_range, max_range])
    legend_elements = [
        Line2D([0], [0], marker='o', color='w', label='Camera', markerfacecolor='red', markersize=10),
        Line2D([0], [0], color='black', lw=4, label='Event Horizon'),
        Line2D([0], [0], color='goldenrod', lw=4, label='Disk'),
    ]
    legend_elements += [Line2D([0], [0], color=c, lw=2, label=f'Ray {s}') for s, c in STATE_COLOURS.items()]
    ax.legend(handles=legend_elements)
    os.makedirs(os.path.dirname(out_path) or '.', exist_ok=True)
    plt.tight_layout()

    base, ext = os.path.splitext(out_path)
    written = []
    for azim in azimuths:
        ax.view_init(elev=30, azim=azim)
        out_path_rot = f"{base}_azim{azim}{ext}"
        fig.savefig(out_path_rot)
        written.append(out_path_rot)
        print(f"Saved 3D scene image to {out_path_rot}")
    plt.close(fig)
    return written
