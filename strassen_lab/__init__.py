"""
Dense float64 matrix engine with Strassen multiplication,
plus a toy random-weight inference pipeline and benchmarks.
"""

__version__ = "0.1.0"
