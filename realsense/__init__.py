"""
RealSense frame source and frame data types
"""
