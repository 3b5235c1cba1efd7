import argparse
import math
import os

def build_parser():
    parser = argparse.ArgumentParser(description="Relativistic Ray Tracing around a Schwarzschild Black Hole")
    parser.add_argument('--bh-radius', type=float, default=1.0, help='Black hole (Schwarzschild) radius rs (default: 1)')
    parser.add_argument('--width', type=int, default=200, help='Image width in pixels (default: 200)')
    parser.add_argument('--height', type=int, default=200, help='Image height in pixels (default: 200)')
    parser.add_argument('--fov-x', type=float, default=72.0, help='Horizontal field of view in degrees (default: 72)')
    parser.add_argument('--fov-y', type=float, default=36.0, help='Vertical field of view in degrees (default: 36)')
    parser.add_argument('--camera-distance', type=float, default=30.0, help='Camera distance from the BH, in units of rs (default: 30)')
    parser.add_argument('--camera-theta', type=float, default=81.9, help='Camera polar angle in degrees (default: 81.9)')
    parser.add_argument('--camera-phi', type=float, default=0.0, help='Camera azimuth in degrees (default: 0)')
    parser.add_argument('--pitch', type=float, default=0.0, help='Optical axis pitch away from the BH, degrees (default: 0)')
    parser.add_argument('--yaw', type=float, default=0.0, help='Optical axis yaw away from the BH, degrees (default: 0)')
    parser.add_argument('--roll', type=float, default=0.0, help='Image plane roll in degrees (default: 0)')
    parser.add_argument('--steps', type=int, default=1000, help='Maximum integration steps per ray (default: 1000)')
    parser.add_argument('--delta', type=float, default=0.4, help='Integration step size, in units of rs (default: 0.4)')
    parser.add_argument('--rays', type=int, default=4, help='Rays per pixel, a perfect square (default: 4)')
    parser.add_argument('--exposure', type=float, default=2.5, help='Tone mapping exposure (default: 2.5)')
    parser.add_argument('--gamma', type=float, default=0.75, help='Tone mapping gamma (default: 0.75)')
    # Scene obstacles
    parser.add_argument('--disk-inner', type=float, default=3.0, help='Disk inner radius, in units of rs (default: 3)')
    parser.add_argument('--disk-outer', type=float, default=20.0, help='Disk outer radius, in units of rs (default: 20)')
    parser.add_argument('--thickness', type=float, default=0.05, help='Disk thickness, in units of rs (default: 0.05)')
    parser.add_argument('--temperature', type=float, default=2500.0, help='Disk peak temperature in K (default: 2500)')
    parser.add_argument('--brightness', type=float, default=255.0, help='Disk peak brightness (default: 255)')
    parser.add_argument('--opacity', type=float, default=20.0, help='Disk optical depth per unit length, in units of 1/rs (default: 20)')
    parser.add_argument('--ring', action='store_true', help='Use a flat opaque ring instead of the volumetric disk')
    parser.add_argument('--predict', action='store_true', help='Add the horizon predictor early exit')
    parser.add_argument('--no-adaptive', action='store_true', help='Disable adaptive step size')
    # Run configurables
    parser.add_argument('--seed', type=int, default=0, help='Random seed for the disk transmission test (default: 0)')
    parser.add_argument('--workers', type=int, default=os.cpu_count(), help='Worker processes (default: CPU count)')
    parser.add_argument('--output', type=str, default='images/render.png', help='Output image path')
    parser.add_argument('--photon-data', type=str, default=None, help='Write per-sample outcomes to this CSV')
    parser.add_argument('--sample-rays', type=int, default=0, help='Number of sampled trajectories to export (default: 0)')
    parser.add_argument('--sampled-rays-csv', type=str, default='sampled_rays.csv', help='CSV path for sampled trajectories')
    parser.add_argument('--plot', action='store_true', help='Plot sampled trajectories (top-down and 3D)')
    return parser


def parse_args(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.bh_radius <= 0:
        parser.error('--bh-radius must be positive')
    if args.width <= 0 or args.height <= 0:
        parser.error('--width and --height must be positive')
    if args.fov_x <= 0 or args.fov_y <= 0:
        parser.error('--fov-x and --fov-y must be positive')
    if args.camera_distance <= 1.0:
        parser.error('--camera-distance must lie outside the horizon (> 1 rs)')
    if args.steps <= 0 or args.delta <= 0:
        parser.error('--steps and --delta must be positive')
    if args.rays <= 0 or math.isqrt(args.rays) ** 2 != args.rays:
        parser.error('--rays must be a positive perfect square')
    if args.disk_inner <= 0 or args.disk_inner >= args.disk_outer:
        parser.error('--disk-inner must be positive and below --disk-outer')
    if args.thickness <= 0:
        parser.error('--thickness must be positive')
    if args.workers is not None and args.workers <= 0:
        parser.error('--workers must be positive')
    return args
