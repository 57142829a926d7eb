import numpy as np
import open3d as o3d


def create_axes(length=1.0) -> o3d.geometry.LineSet:
    """World axes from the origin: X red, Y green, Z blue."""
    axes = o3d.geometry.LineSet()
    axes.points = o3d.utility.Vector3dVector(np.array([
        [0.0, 0.0, 0.0],
        [length, 0.0, 0.0],
        [0.0, length, 0.0],
        [0.0, 0.0, length],
    ]))
    axes.lines = o3d.utility.Vector2iVector(np.array([[0, 1], [0, 2], [0, 3]]))
    axes.colors = o3d.utility.Vector3dVector(np.array([
        [1.0, 0.0, 0.0],
        [0.0, 1.0, 0.0],
        [0.0, 0.0, 1.0],
    ]))
    return axes


class Open3DWindow:
    """Open3D 可视化窗口"""

    def __init__(self, title="point cloud", width=800, height=600,
                 point_size=1.5, background=(0.0, 0.0, 0.0)):
        self.vis = o3d.visualization.Visualizer()
        self.vis.create_window(title, width=width, height=height)

        # 设置渲染参数
        opt = self.vis.get_render_option()
        opt.background_color = np.array(background)
        opt.point_size = point_size

        # 添加坐标轴
        self.axes = create_axes()
        self.vis.add_geometry(self.axes)

        self.pcd = o3d.geometry.PointCloud()
        self.vis.add_geometry(self.pcd)

        # 设置视角
        ctr = self.vis.get_view_control()
        ctr.set_zoom(0.5)
        ctr.set_front([0, 0, -1])
        ctr.set_lookat([0, 0, 0])
        ctr.set_up([0, -1, 0])

        self._shown = None
        self._to_reset = True

    def draw_axes(self):
        # 坐标轴在初始化时已添加, 不再重复上传
        pass

    def draw_points(self, frame):
        if frame is None or frame is self._shown:
            return

        self.pcd.points = o3d.utility.Vector3dVector(frame.points.astype(np.float64))
        if frame.colors is not None:
            self.pcd.colors = o3d.utility.Vector3dVector(frame.colors.astype(np.float64))
        else:
            self.pcd.paint_uniform_color([1.0, 1.0, 1.0])
        self.vis.update_geometry(self.pcd)
        self._shown = frame

        if self._to_reset and len(frame.points) > 0:
            self.vis.reset_view_point(True)
            self._to_reset = False

    def poll(self) -> bool:
        """Process window events and redraw. False once the window is closed."""
        alive = self.vis.poll_events()
        self.vis.update_renderer()
        return alive

    def close(self):
        self.vis.destroy_window()
