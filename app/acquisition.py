"""
Acquisition loop: frame pair -> point cloud -> delivery channel.

Runs on the caller's thread. Timeouts are retried, a closed channel ends the
loop, anything else propagates to the caller.
"""

import logging

from pointcloud.channel import ChannelClosed
from pointcloud.projector import OutputMode, reconstruct
from realsense.errors import AcquisitionTimeout

logger = logging.getLogger(__name__)


def stream_point_clouds(camera, projector, sender, max_frames=1000, timeout_ms=1000,
                        mode=OutputMode.COLORED, preview=None) -> int:
    """
    Args:
        camera: started frame source with ``acquire(timeout_ms)`` and
            ``center_distance(depth_frame)``
        projector: Projector for the camera's depth stream
        sender: producer end of the delivery channel; closed on return
        max_frames: number of acquisition cycles, timeouts included
        timeout_ms: wait per cycle
        mode: OutputMode.COLORED or OutputMode.POINTS
        preview: optional FramePreview; returning False from show() stops the loop

    Returns:
        number of point clouds handed to the channel
    """
    delivered = 0
    try:
        for _ in range(max_frames):
            if sender.closed:
                logger.info("Viewer gone, stopping acquisition")
                break

            try:
                frames = camera.acquire(timeout_ms)
            except AcquisitionTimeout:
                logger.warning("Timeout waiting for frames, retrying")
                continue

            distance = camera.center_distance(frames.depth)
            logger.info("frame number = %d, center distance = %.3f m", frames.sequence, distance)

            cloud = reconstruct(projector, frames, mode)
            try:
                sender.send(cloud)
            except ChannelClosed:
                logger.info("Viewer gone, stopping acquisition")
                break
            delivered += 1

            if preview is not None and not preview.show(frames, distance):
                logger.info("Preview closed, stopping acquisition")
                break
    finally:
        sender.close()

    return delivered
