"""
Depth frame -> camera-space points, via the SDK's point cloud block.

Depth samples with no valid measurement (z <= 0 or non-finite) are dropped;
every other sample yields one point in raster order of the depth grid.
"""

import enum
import logging
from typing import NamedTuple

import numpy as np

from realsense.frames import ColorImage, FramePair, PointCloudFrame
from pointcloud.texture import sample_colors

logger = logging.getLogger(__name__)


class OutputMode(enum.Enum):
    POINTS = "points"
    COLORED = "colored"


class ProjectedPoints(NamedTuple):
    points: np.ndarray     # (N, 3) float32
    texcoords: np.ndarray  # (N, 2) float32


def bits_to_float32(bits):
    """
    Reinterpret the bit pattern of 32-bit integers as IEEE-754 float32.

    This is a bit cast, not a numeric conversion: 0x3F800000 becomes 1.0.
    Accepts a Python int or an integer array; returns a float or a float32
    array of the same shape.
    """
    arr = np.asarray(bits)
    if arr.dtype.kind not in "iu":
        raise TypeError(f"expected integer bit patterns, got dtype {arr.dtype}")
    if arr.dtype.itemsize == 4:
        words = arr.view(np.uint32)
    else:
        words = arr.astype(np.uint32)
    result = words.view(np.float32)
    if result.ndim == 0:
        return float(result)
    return result


def as_float32_rows(buffer, columns: int) -> np.ndarray:
    """View an SDK vertex/texcoord buffer as an (N, columns) float32 array."""
    arr = np.asanyarray(buffer)
    if arr.dtype.names:
        arr = arr.view(np.float32)
    elif arr.dtype.kind in "iu":
        arr = bits_to_float32(arr)
    else:
        arr = arr.astype(np.float32, copy=False)
    return arr.reshape(-1, columns)


class Projector:
    """
    Wraps a point cloud processing block (``rs.pointcloud`` in production).

    The block must provide ``map_to(color_frame)`` and ``calculate(depth_frame)``;
    the latter returns an object with ``get_vertices()`` and
    ``get_texture_coordinates()``.
    """

    def __init__(self, block):
        self.block = block

    def project(self, depth_frame, color_frame=None) -> ProjectedPoints:
        """
        Args:
            depth_frame: depth frame to project
            color_frame: if given, texture coordinates refer to this frame

        Returns:
            ProjectedPoints with invalid-depth samples removed
        """
        if color_frame is not None:
            self.block.map_to(color_frame)
        cloud = self.block.calculate(depth_frame)

        vertices = as_float32_rows(cloud.get_vertices(), 3)
        texcoords = as_float32_rows(cloud.get_texture_coordinates(), 2)
        if len(vertices) != len(texcoords):
            raise ValueError(
                f"vertex/texcoord count mismatch: {len(vertices)} != {len(texcoords)}"
            )

        valid = np.isfinite(vertices).all(axis=1) & (vertices[:, 2] > 0)
        return ProjectedPoints(points=vertices[valid], texcoords=texcoords[valid])


def reconstruct(projector: Projector, frames: FramePair,
                mode: OutputMode = OutputMode.COLORED) -> PointCloudFrame:
    """Build one PointCloudFrame from a synchronized frame pair."""
    if mode is OutputMode.POINTS:
        projected = projector.project(frames.depth)
        return PointCloudFrame(points=projected.points, colors=None,
                               sequence=frames.sequence)

    projected = projector.project(frames.depth, frames.color)
    image = ColorImage.from_frame(frames.color)
    colors = sample_colors(image, projected.texcoords)
    logger.debug("frame %d: %d points", frames.sequence, len(projected.points))
    return PointCloudFrame(points=projected.points, colors=colors,
                           sequence=frames.sequence)
