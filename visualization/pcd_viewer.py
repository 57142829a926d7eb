"""
Render-thread side of the point cloud display.

The render thread owns the window, the retained point cloud and the channel
receiver. Nothing here is touched by the acquisition loop.
"""

import enum
import logging
import threading
import time

logger = logging.getLogger(__name__)


class ViewerState(enum.Enum):
    INITIALIZING = "initializing"
    RUNNING = "running"
    TERMINATED = "terminated"


class PointCloudScene:
    """Per-tick state: the latest point cloud received so far."""

    def __init__(self, receiver):
        self.receiver = receiver
        self.points = None
        self.ticks = 0

    def step(self, window):
        # try to receive the most recent points
        frame = self.receiver.try_receive()
        if frame is not None:
            self.points = frame

        window.draw_axes()
        window.draw_points(self.points)
        self.ticks += 1


class PointCloudViewer:
    """
    Runs the render loop on its own thread.

    Args:
        receiver: consumer end of the delivery channel
        window_factory: callable returning a window with ``draw_axes()``,
            ``draw_points(frame)``, ``poll() -> bool`` and ``close()``
        tick_interval: pause between ticks in seconds
    """

    def __init__(self, receiver, window_factory, tick_interval=0.01):
        self.receiver = receiver
        self.window_factory = window_factory
        self.tick_interval = tick_interval

        self.state = ViewerState.INITIALIZING
        self.scene = PointCloudScene(receiver)
        self._stop = threading.Event()
        self.vis_thread = None

    def spawn(self):
        self.vis_thread = threading.Thread(target=self._visualizer_thread,
                                           name="pcd-viewer", daemon=True)
        self.vis_thread.start()
        return self

    def _visualizer_thread(self):
        window = None
        try:
            window = self.window_factory()
            self.state = ViewerState.RUNNING
            logger.info("Point cloud visualization started")

            while not self._stop.is_set():
                self.scene.step(window)
                if not window.poll():
                    logger.info("Window closed")
                    break
                time.sleep(self.tick_interval)
        except Exception:
            logger.exception("Visualization error")
        finally:
            self.state = ViewerState.TERMINATED
            # producer notices on its next send
            self.receiver.close()
            if window is not None:
                window.close()
            logger.info("Visualization thread stopped after %d ticks", self.scene.ticks)

    def stop(self):
        """Ask the render loop to finish after the current tick."""
        self._stop.set()

    def join(self, timeout=None):
        if self.vis_thread is not None:
            self.vis_thread.join(timeout)

    def is_alive(self) -> bool:
        return self.vis_thread is not None and self.vis_thread.is_alive()
