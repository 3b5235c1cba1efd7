"""Relativistic ray tracing around a Schwarzschild black hole."""
from .camera import Camera, RenderResult, tone_map
from .obstacle import AccretionVolume, Collision, DistanceCutoff, Horizon, HorizonPredictor, Ring
from .ray import Ray, RayState
from .space import Space
