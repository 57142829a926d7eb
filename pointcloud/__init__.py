"""
Depth projection, texture lookup and frame delivery
"""
