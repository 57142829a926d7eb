import numpy as np
import pytest

from realsense.frames import FramePair

VERTEX_DTYPE = np.dtype([("f0", "<f4"), ("f1", "<f4"), ("f2", "<f4")])
TEXCOORD_DTYPE = np.dtype([("f0", "<f4"), ("f1", "<f4")])


def structured(rows, dtype):
    """Pack an (N, k) float array the way the SDK exposes vertex buffers."""
    rows = np.ascontiguousarray(rows, dtype=np.float32)
    return rows.view(dtype).reshape(-1)


class FakeVideoFrame:
    def __init__(self, array):
        self.array = np.ascontiguousarray(array)

    def get_data(self):
        return self.array

    def get_width(self):
        return self.array.shape[1]

    def get_height(self):
        return self.array.shape[0]

    def get_bytes_per_pixel(self):
        return self.array.shape[2] if self.array.ndim == 3 else self.array.itemsize

    def get_stride_in_bytes(self):
        return self.array.strides[0]


class FakeDepthFrame(FakeVideoFrame):
    def __init__(self, array, depth_scale=0.001):
        super().__init__(np.asarray(array, dtype=np.uint16))
        self.depth_scale = depth_scale

    def get_distance(self, x, y):
        return float(self.array[y, x]) * self.depth_scale


class FakeCloud:
    def __init__(self, vertices, texcoords):
        self.vertices = vertices
        self.texcoords = texcoords

    def get_vertices(self):
        return self.vertices

    def get_texture_coordinates(self):
        return self.texcoords


class FakePointcloudBlock:
    """Stands in for rs.pointcloud: returns fixed vertices and texcoords."""

    def __init__(self, vertices, texcoords):
        self.vertices = structured(vertices, VERTEX_DTYPE)
        self.texcoords = structured(texcoords, TEXCOORD_DTYPE)
        self.mapped_to = []
        self.calculated = 0

    def map_to(self, frame):
        self.mapped_to.append(frame)

    def calculate(self, depth_frame):
        self.calculated += 1
        return FakeCloud(self.vertices, self.texcoords)


class RecordingWindow:
    """Window double that records every draw call and closes after ``ticks`` polls."""

    def __init__(self, ticks=None):
        self.ticks = ticks
        self.polls = 0
        self.axes_drawn = 0
        self.drawn = []
        self.closed = False

    def draw_axes(self):
        self.axes_drawn += 1

    def draw_points(self, frame):
        self.drawn.append(frame)

    def poll(self):
        self.polls += 1
        return self.ticks is None or self.polls < self.ticks

    def close(self):
        self.closed = True


@pytest.fixture
def center_pixel_scene():
    """640x480 depth grid with a single valid sample at (320, 240)."""
    width, height = 640, 480
    count = width * height
    vertices = np.zeros((count, 3), dtype=np.float32)
    texcoords = np.zeros((count, 2), dtype=np.float32)
    index = 240 * width + 320
    vertices[index] = [0.0, 0.0, 1.25]
    texcoords[index] = [0.5, 0.5]

    color = np.zeros((height, width, 3), dtype=np.uint8)
    color[240, 320] = [200, 100, 50]

    depth = np.zeros((height, width), dtype=np.uint16)
    depth[240, 320] = 1250

    frames = FramePair(color=FakeVideoFrame(color), depth=FakeDepthFrame(depth), sequence=7)
    return FakePointcloudBlock(vertices, texcoords), frames
