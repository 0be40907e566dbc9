"""
Camera drivers implement :class:`~cameraunit.interfaces.ICamera` to control an exposure, and
:class:`~cameraunit.interfaces.ICameraInfo` to report on the state of the device. Capabilities a camera does not
have default to raising :class:`~cameraunit.utils.exceptions.NotImplementedByCameraError` or to returning a neutral
value.
"""
__title__ = 'Interfaces'

from .interface import Interface
from .ICameraInfo import ICameraInfo
from .ICamera import ICamera
