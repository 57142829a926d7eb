"""
Texture lookup: map normalized texture coordinates into the color frame.

The depth sensor sees a wider field of view than the color sensor, so points
near the border of the depth image land outside [0, 1) in texture space.
Those points are kept and colored black.
"""

import math
from typing import Tuple

import numpy as np

from realsense.frames import ColorImage

BLACK = (0.0, 0.0, 0.0)


def pixel_index(coord: float, size: int) -> int:
    """floor(coord * size) clamped into [0, size - 1]."""
    return min(max(math.floor(coord * size), 0), size - 1)


def in_view(u: float, v: float) -> bool:
    # NaN compares False and falls out here as well
    return 0.0 <= u < 1.0 and 0.0 <= v < 1.0


def sample(image: ColorImage, u: float, v: float) -> Tuple[float, float, float]:
    """
    Color of a single texture coordinate.

    Args:
        image: packed color buffer (RGB order)
        u, v: normalized texture coordinate

    Returns:
        (r, g, b) in [0, 1], or BLACK when (u, v) is outside [0, 1)
    """
    if not in_view(u, v):
        return BLACK

    x = pixel_index(u, image.width)
    y = pixel_index(v, image.height)
    offset = x * image.bytes_per_pixel + y * image.stride
    r, g, b = image.data[offset:offset + 3]
    return float(r) / 255.0, float(g) / 255.0, float(b) / 255.0


def sample_colors(image: ColorImage, texcoords: np.ndarray) -> np.ndarray:
    """
    Vectorized ``sample`` over an (N, 2) array of texture coordinates.

    Returns:
        (N, 3) float32 colors in [0, 1]; rows without coverage are black
    """
    texcoords = np.asarray(texcoords, dtype=np.float32).reshape(-1, 2)
    colors = np.zeros((len(texcoords), 3), dtype=np.float32)
    if len(texcoords) == 0:
        return colors

    u = texcoords[:, 0]
    v = texcoords[:, 1]
    visible = (u >= 0.0) & (u < 1.0) & (v >= 0.0) & (v < 1.0)
    if not visible.any():
        return colors

    # float64 so that u * W does not round up past the last column early
    x = np.floor(u[visible].astype(np.float64) * image.width).astype(np.int64)
    y = np.floor(v[visible].astype(np.float64) * image.height).astype(np.int64)
    np.clip(x, 0, image.width - 1, out=x)
    np.clip(y, 0, image.height - 1, out=y)

    offsets = x * image.bytes_per_pixel + y * image.stride
    rgb = image.data[offsets[:, None] + np.arange(3)]
    colors[visible] = rgb.astype(np.float32) / 255.0
    return colors
