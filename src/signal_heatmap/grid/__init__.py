"""
Grid Module
===========

Position quantization for the sparse heatmap grid.
"""

from signal_heatmap.grid.index import GridIndex, distance

__all__ = ["GridIndex", "distance"]
