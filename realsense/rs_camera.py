# 相机控制
import enum
import logging
from typing import List

import pyrealsense2 as rs

from realsense.errors import (
    AcquisitionError, AcquisitionTimeout, MissingFrameError, PipelineStateError,
)
from realsense.frames import FramePair, Resolution

logger = logging.getLogger(__name__)


class PipelineState(enum.Enum):
    CREATED = "created"
    STARTED = "started"
    STOPPED = "stopped"


class RealSenseCamera:
    """
    RealSense 相机管理类：
    - 配置深度 (z16) 与彩色 (rgb8) 流
    - 获取同步的彩色/深度帧对
    - 输出流信息与中心距离等诊断数据

    The pipeline moves CREATED -> STARTED -> STOPPED. Acquisition is only
    valid while STARTED; calling it in any other state raises
    PipelineStateError.
    """

    def __init__(self, width=640, height=480, fps=30, pipeline=None):
        self.width = width
        self.height = height
        self.fps = fps

        self.pipeline = pipeline if pipeline is not None else rs.pipeline()
        self.config = rs.config()
        self.config.enable_stream(rs.stream.depth, width, height, rs.format.z16, fps)
        self.config.enable_stream(rs.stream.color, width, height, rs.format.rgb8, fps)

        self.profile = None
        self.depth_scale = None
        self.state = PipelineState.CREATED

    def _require(self, state: PipelineState, action: str):
        if self.state is not state:
            raise PipelineStateError(
                f"cannot {action}: pipeline is {self.state.value}, expected {state.value}"
            )

    # -----------------------------------------------------------------------
    # 启动 / 停止
    # -----------------------------------------------------------------------
    def start(self):
        """Start streaming with the configuration fixed at construction."""
        self._require(PipelineState.CREATED, "start")
        try:
            self.profile = self.pipeline.start(self.config)
        except RuntimeError as e:
            raise AcquisitionError(f"failed to start pipeline: {e}") from e

        self.state = PipelineState.STARTED
        self.depth_scale = self.profile.get_device().first_depth_sensor().get_depth_scale()
        logger.info("Streaming %dx%d @ %dfps, depth scale %.6f",
                    self.width, self.height, self.fps, self.depth_scale)
        return self

    def stop(self):
        """停止相机"""
        if self.state is not PipelineState.STARTED:
            self.state = PipelineState.STOPPED
            return
        self.state = PipelineState.STOPPED
        try:
            self.pipeline.stop()
            logger.info("Camera stopped")
        except RuntimeError as e:
            logger.warning("Error while stopping camera: %s", e)

    # -----------------------------------------------------------------------
    # 获取帧
    # -----------------------------------------------------------------------
    def acquire(self, timeout_ms: int = 1000) -> FramePair:
        """
        Wait for the next synchronized frame pair.

        Args:
            timeout_ms: how long to wait before giving up on this cycle

        Returns:
            FramePair

        Raises:
            AcquisitionTimeout: nothing arrived in time, retry
            MissingFrameError: color or depth absent from the frameset
            AcquisitionError: any other pipeline fault
        """
        self._require(PipelineState.STARTED, "acquire frames")
        try:
            ok, frames = self.pipeline.try_wait_for_frames(timeout_ms)
        except RuntimeError as e:
            raise AcquisitionError(f"pipeline fault: {e}") from e

        if not ok:
            raise AcquisitionTimeout(f"no frames within {timeout_ms} ms")

        color_frame = frames.get_color_frame()
        depth_frame = frames.get_depth_frame()
        if not color_frame:
            raise MissingFrameError("frameset has no color frame")
        if not depth_frame:
            raise MissingFrameError("frameset has no depth frame")

        return FramePair(color=color_frame, depth=depth_frame,
                         sequence=frames.get_frame_number())

    # -----------------------------------------------------------------------
    # 诊断信息
    # -----------------------------------------------------------------------
    def stream_profiles(self) -> List[str]:
        """Describe every active stream, one line per stream."""
        self._require(PipelineState.STARTED, "list streams")
        lines = []
        for index, stream in enumerate(self.profile.get_streams()):
            video = stream.as_video_stream_profile()
            lines.append(
                f"stream {index}: {stream.stream_name()} "
                f"{video.width()}x{video.height()} {stream.format()} @ {stream.fps()}fps"
            )
        return lines

    @staticmethod
    def resolution(frame) -> Resolution:
        return Resolution(frame.get_width(), frame.get_height())

    @classmethod
    def center_distance(cls, depth_frame) -> float:
        """Distance in meters at the center pixel of a depth frame."""
        width, height = cls.resolution(depth_frame)
        return depth_frame.get_distance(width // 2, height // 2)

    @staticmethod
    def create_pointcloud_block():
        """Projection block keyed by the calibration of the active device."""
        return rs.pointcloud()

    # -----------------------------------------------------------------------
    # 资源管理
    # -----------------------------------------------------------------------
    def __enter__(self):
        """上下文管理器支持"""
        return self.start()

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.stop()
