# 帧与点云数据结构
from typing import NamedTuple, Optional, Any

import numpy as np


class Resolution(NamedTuple):
    width: int
    height: int


class FramePair(NamedTuple):
    """一次采集得到的同步彩色/深度帧"""
    color: Any
    depth: Any
    sequence: int


class PointCloudFrame(NamedTuple):
    """
    单帧重建结果

    points: (N, 3) float32, 相机坐标系, 单位米
    colors: (N, 3) float32, RGB 归一化到 [0, 1]; 仅点云模式时为 None
    sequence: 来源帧号
    """
    points: np.ndarray
    colors: Optional[np.ndarray]
    sequence: int


class ColorImage(NamedTuple):
    """
    Packed view of a color frame's pixel buffer.

    Pixel (x, y) starts at byte offset ``x * bytes_per_pixel + y * stride``.
    """
    data: np.ndarray
    width: int
    height: int
    bytes_per_pixel: int
    stride: int

    @classmethod
    def from_frame(cls, frame) -> "ColorImage":
        """Wrap an SDK video frame without copying its buffer."""
        data = np.frombuffer(frame.get_data(), dtype=np.uint8)
        return cls(
            data=data,
            width=frame.get_width(),
            height=frame.get_height(),
            bytes_per_pixel=frame.get_bytes_per_pixel(),
            stride=frame.get_stride_in_bytes(),
        )

    @classmethod
    def from_array(cls, array: np.ndarray) -> "ColorImage":
        """Wrap an (H, W, C) uint8 image."""
        array = np.ascontiguousarray(array, dtype=np.uint8)
        if array.ndim != 3 or array.shape[2] < 3:
            raise ValueError(f"expected an (H, W, C>=3) image, got shape {array.shape}")
        height, width, channels = array.shape
        return cls(
            data=array.reshape(-1),
            width=width,
            height=height,
            bytes_per_pixel=channels,
            stride=width * channels,
        )
