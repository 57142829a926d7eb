import argparse
import functools
import logging
import sys

from app.acquisition import stream_point_clouds
from app.config import ConfigManager
from pointcloud.channel import open_channel
from pointcloud.projector import OutputMode, Projector
from realsense.errors import CameraError
from realsense.rs_camera import RealSenseCamera
from visualization.o3d_window import Open3DWindow
from visualization.pcd_viewer import PointCloudViewer
from visualization.preview import FramePreview

logger = logging.getLogger(__name__)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="Live colored point cloud from a RealSense depth+color stream")
    parser.add_argument("--config", help="JSON config file overriding the defaults")
    parser.add_argument("--frames", type=int, dest="max_frames",
                        help="acquisition cycles before stopping (timeouts included)")
    parser.add_argument("--timeout-ms", type=int, help="wait per acquisition cycle")
    parser.add_argument("--width", type=int)
    parser.add_argument("--height", type=int)
    parser.add_argument("--fps", type=int)
    parser.add_argument("--no-color", dest="with_color", action="store_false", default=None,
                        help="deliver plain points without texture lookup")
    parser.add_argument("--preview", action="store_true", default=None,
                        help="also show the color and depth frames in an OpenCV window")
    parser.add_argument("--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return parser.parse_args(argv)


def load_config(args) -> ConfigManager:
    config = ConfigManager(args.config)
    config.update_config("camera", {
        "width": args.width, "height": args.height,
        "fps": args.fps, "timeout_ms": args.timeout_ms,
    })
    config.update_config("stream", {
        "max_frames": args.max_frames, "with_color": args.with_color,
        "preview": args.preview,
    })
    config.update_config("logging", {"level": args.log_level})
    return config


def setup_logging(level: str):
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )


def run(config: ConfigManager) -> int:
    """Run capture + display. Returns the process exit status."""
    camera_cfg = config.get_camera_config()
    stream_cfg = config.get_stream_config()
    viewer_cfg = config.get_viewer_config()

    sender, receiver = open_channel()
    window_factory = functools.partial(
        Open3DWindow,
        title=viewer_cfg["title"],
        width=viewer_cfg["width"],
        height=viewer_cfg["height"],
        point_size=viewer_cfg["point_size"],
        background=viewer_cfg["background"],
    )
    viewer = PointCloudViewer(receiver, window_factory).spawn()

    camera = RealSenseCamera(camera_cfg["width"], camera_cfg["height"], camera_cfg["fps"])
    preview = FramePreview() if stream_cfg["preview"] else None
    mode = OutputMode.COLORED if stream_cfg["with_color"] else OutputMode.POINTS

    try:
        camera.start()
        for line in camera.stream_profiles():
            logger.info(line)

        projector = Projector(camera.create_pointcloud_block())
        delivered = stream_point_clouds(
            camera, projector, sender,
            max_frames=stream_cfg["max_frames"],
            timeout_ms=camera_cfg["timeout_ms"],
            mode=mode,
            preview=preview,
        )
    except (CameraError, RuntimeError) as e:
        logger.error("Fatal error, aborting: %s", e)
        return 1
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        viewer.stop()
        return 0
    finally:
        sender.close()
        camera.stop()
        if preview is not None:
            preview.close()

    logger.info("Acquisition finished with %d point clouds delivered; close the window to exit",
                delivered)
    try:
        viewer.join()
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        viewer.stop()
        viewer.join(timeout=1.0)
    return 0


def main(argv=None) -> int:
    args = parse_args(argv)
    config = load_config(args)
    setup_logging(config.get_logging_config()["level"])
    return run(config)


if __name__ == "__main__":
    sys.exit(main())
