"""
Camera modules.
"""
__title__ = "Cameras"

from .dummycamera import DummyCamera
