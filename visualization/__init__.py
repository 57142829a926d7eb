"""
Point cloud display: Open3D render thread and OpenCV preview
"""
