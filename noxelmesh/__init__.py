"""Mesh generation and collision shapes for noxel panels and voxel cubes."""

__version__ = "0.1.0"