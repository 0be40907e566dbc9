"""
Implementations of the camera interfaces in :mod:`cameraunit.interfaces`.
"""
__title__ = "Modules"
