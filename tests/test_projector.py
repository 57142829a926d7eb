import math

import numpy as np
import pytest

from conftest import (
    FakeDepthFrame, FakePointcloudBlock, FakeVideoFrame, TEXCOORD_DTYPE, structured,
)
from pointcloud.projector import (
    OutputMode, Projector, as_float32_rows, bits_to_float32, reconstruct,
)
from realsense.frames import FramePair


@pytest.mark.parametrize("bits, expected", [
    (0x3F800000, 1.0),
    (0x3F000000, 0.5),
    (0xBF800000, -1.0),
    (0x40490FDB, 3.1415927410125732),
    (0x00000000, 0.0),
    (0x80000000, -0.0),
])
def test_bits_to_float32_known_patterns(bits, expected):
    value = bits_to_float32(bits)
    assert isinstance(value, float)
    assert value == expected
    assert math.copysign(1.0, value) == math.copysign(1.0, expected)


def test_bits_to_float32_special_values():
    assert bits_to_float32(0x7F800000) == math.inf
    assert bits_to_float32(0xFF800000) == -math.inf
    assert math.isnan(bits_to_float32(0x7FC00000))


def test_bits_to_float32_array_is_bitcast_not_conversion():
    words = np.array([0x3F800000, 0x3F000000, 1], dtype=np.uint32)
    floats = bits_to_float32(words)
    assert floats.dtype == np.float32
    assert floats[0] == 1.0
    assert floats[1] == 0.5
    # smallest subnormal, not 1.0
    assert floats[2] == np.float32(1.401298464324817e-45)


def test_bits_to_float32_signed_words():
    words = np.array([0x3F800000, 0xBF800000], dtype=np.uint32).view(np.int32)
    np.testing.assert_array_equal(bits_to_float32(words), [1.0, -1.0])


def test_bits_to_float32_rejects_floats():
    with pytest.raises(TypeError):
        bits_to_float32(np.array([1.0], dtype=np.float32))


def test_as_float32_rows_handles_all_buffer_kinds():
    rows = np.array([[0.25, 0.75], [1.5, -0.5]], dtype=np.float32)
    from_struct = as_float32_rows(structured(rows, TEXCOORD_DTYPE), 2)
    from_words = as_float32_rows(rows.view(np.uint32).reshape(-1), 2)
    from_float64 = as_float32_rows(rows.astype(np.float64), 2)
    for converted in (from_struct, from_words, from_float64):
        assert converted.dtype == np.float32
        np.testing.assert_array_equal(converted, rows)


def make_grid():
    """3x2 depth grid, raster order; samples 1 and 4 have no depth."""
    vertices = np.array([
        [-0.1, -0.1, 1.0],
        [0.0, 0.0, 0.0],
        [0.1, -0.1, 1.1],
        [-0.1, 0.1, 0.9],
        [0.0, 0.0, 0.0],
        [0.1, 0.1, np.nan],
    ], dtype=np.float32)
    texcoords = np.array([
        [0.1, 0.1], [0.5, 0.1], [0.9, 0.1],
        [0.1, 0.9], [0.5, 0.9], [1.2, 0.9],
    ], dtype=np.float32)
    return vertices, texcoords


def test_project_drops_invalid_depth_and_keeps_raster_order():
    vertices, texcoords = make_grid()
    projector = Projector(FakePointcloudBlock(vertices, texcoords))

    projected = projector.project(depth_frame=None)

    np.testing.assert_array_equal(projected.points, vertices[[0, 2, 3]])
    np.testing.assert_array_equal(projected.texcoords, texcoords[[0, 2, 3]])
    assert projected.points.dtype == np.float32


def test_project_is_reproducible():
    vertices, texcoords = make_grid()
    projector = Projector(FakePointcloudBlock(vertices, texcoords))

    first = projector.project(depth_frame=None)
    second = projector.project(depth_frame=None)

    np.testing.assert_array_equal(first.points, second.points)
    np.testing.assert_array_equal(first.texcoords, second.texcoords)


def test_project_maps_texture_only_with_color():
    vertices, texcoords = make_grid()
    block = FakePointcloudBlock(vertices, texcoords)
    projector = Projector(block)
    color = object()

    projector.project(depth_frame=None)
    assert block.mapped_to == []

    projector.project(depth_frame=None, color_frame=color)
    assert block.mapped_to == [color]


def test_project_rejects_mismatched_buffers():
    vertices, texcoords = make_grid()
    projector = Projector(FakePointcloudBlock(vertices, texcoords[:3]))
    with pytest.raises(ValueError):
        projector.project(depth_frame=None)


def test_reconstruct_center_pixel(center_pixel_scene):
    block, frames = center_pixel_scene

    cloud = reconstruct(Projector(block), frames, OutputMode.COLORED)

    assert len(cloud.points) == 1
    assert cloud.sequence == 7
    np.testing.assert_allclose(cloud.points[0], [0.0, 0.0, 1.25])
    np.testing.assert_allclose(cloud.colors[0], [0.784, 0.392, 0.196], atol=1e-3)
    assert block.mapped_to == [frames.color]


def test_reconstruct_points_only(center_pixel_scene):
    block, frames = center_pixel_scene

    cloud = reconstruct(Projector(block), frames, OutputMode.POINTS)

    assert cloud.colors is None
    assert len(cloud.points) == 1
    assert block.mapped_to == []


def test_reconstruct_keeps_uncovered_points_black():
    vertices, texcoords = make_grid()
    texcoords[0] = [1.5, 0.2]
    color = np.full((2, 3, 3), 255, dtype=np.uint8)
    frames = FramePair(color=FakeVideoFrame(color),
                       depth=FakeDepthFrame(np.ones((2, 3))), sequence=1)

    cloud = reconstruct(Projector(FakePointcloudBlock(vertices, texcoords)), frames)

    assert len(cloud.points) == 3
    np.testing.assert_array_equal(cloud.colors[0], [0.0, 0.0, 0.0])
    np.testing.assert_array_equal(cloud.colors[1:], np.ones((2, 3), dtype=np.float32))
