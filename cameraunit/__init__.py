"""
Image data, FITS output and exposure control for scientific cameras.
"""
from .version import __version__
