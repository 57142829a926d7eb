"""
Acquisition loop, configuration and command line entry
"""
