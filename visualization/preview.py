# 彩色 + 深度 2D 预览
import cv2
import numpy as np

ESC = 27


def colorize_depth(depth: np.ndarray) -> np.ndarray:
    """Z16 depth image -> BGR colormap (JET) for display."""
    return cv2.applyColorMap(cv2.convertScaleAbs(depth, alpha=0.03), cv2.COLORMAP_JET)


def compose_preview(color_rgb: np.ndarray, depth: np.ndarray, label: str = None) -> np.ndarray:
    """Color image and colorized depth side by side, in BGR for cv2."""
    color_bgr = cv2.cvtColor(color_rgb, cv2.COLOR_RGB2BGR)
    depth_colormap = colorize_depth(depth)

    height, width = color_bgr.shape[:2]
    if depth_colormap.shape[:2] != (height, width):
        depth_colormap = cv2.resize(depth_colormap, (width, height),
                                    interpolation=cv2.INTER_NEAREST)

    combined = np.hstack((color_bgr, depth_colormap))
    if label:
        cv2.putText(combined, label, (10, 30),
                    cv2.FONT_HERSHEY_SIMPLEX, 0.6, (0, 255, 255), 2)
    return combined


class FramePreview:
    """Shows each acquired frame pair in an OpenCV window. ESC requests a stop."""

    def __init__(self, window_name="RGB + Depth"):
        self.window_name = window_name

    def show(self, frames, distance=None) -> bool:
        color = np.asanyarray(frames.color.get_data())
        depth = np.asanyarray(frames.depth.get_data())

        label = f"frame {frames.sequence}"
        if distance is not None:
            label += f"  center {distance:.3f} m"

        cv2.imshow(self.window_name, compose_preview(color, depth, label))
        key = cv2.waitKey(1) & 0xFF
        return key != ESC

    def close(self):
        cv2.destroyWindow(self.window_name)
