from abc import ABCMeta, abstractmethod
from typing import Any, Optional, Tuple

from .interface import Interface
from cameraunit.utils.exceptions import NotImplementedByCameraError


class ICameraInfo(Interface, metaclass=ABCMeta):
    """The module reports the state of a camera and controls its cooling.

    Methods without implementation either raise :class:`~cameraunit.utils.exceptions.NotImplementedByCameraError`
    or return None, if the camera does not provide the requested capability.
    """

    __module__ = "cameraunit.interfaces"

    @abstractmethod
    async def camera_ready(self, **kwargs: Any) -> bool:
        """Whether the camera is ready for an exposure."""
        ...

    @abstractmethod
    async def camera_name(self, **kwargs: Any) -> str:
        """Returns the name of the camera."""
        ...

    @abstractmethod
    async def cancel_capture(self, **kwargs: Any) -> None:
        """Aborts a running exposure.

        Raises:
            CameraError: If exposure could not be aborted.
        """
        ...

    @abstractmethod
    async def is_capturing(self, **kwargs: Any) -> bool:
        """Whether the camera is currently exposing."""
        ...

    async def get_uuid(self, **kwargs: Any) -> Optional[str]:
        """Returns a unique identifier of the camera, or None."""
        return None

    async def set_temperature(self, temperature: float, **kwargs: Any) -> float:
        """Sets the target detector temperature.

        Args:
            temperature: Target temperature in celsius.

        Returns:
            Temperature that has actually been set.

        Raises:
            NotImplementedByCameraError: If camera has no cooling.
            InvalidValueError: If temperature is out of range.
        """
        raise NotImplementedByCameraError()

    async def get_temperature(self, **kwargs: Any) -> Optional[float]:
        """Returns the current detector temperature in celsius, or None."""
        return None

    async def set_cooler(self, on: bool, **kwargs: Any) -> None:
        """Switches the cooler on or off.

        Raises:
            NotImplementedByCameraError: If camera has no cooler.
        """
        raise NotImplementedByCameraError()

    async def get_cooler(self, **kwargs: Any) -> Optional[bool]:
        """Whether the cooler is switched on, or None."""
        return None

    async def get_cooler_power(self, **kwargs: Any) -> Optional[float]:
        """Returns the cooler power in percent, or None."""
        return None

    async def set_cooler_power(self, power: float, **kwargs: Any) -> float:
        """Sets the cooler power.

        Args:
            power: Power in percent.

        Returns:
            Power that has actually been set.

        Raises:
            NotImplementedByCameraError: If cooler power cannot be set.
        """
        raise NotImplementedByCameraError()

    @abstractmethod
    async def get_ccd_width(self, **kwargs: Any) -> int:
        """Returns the width of the detector in unbinned pixels."""
        ...

    @abstractmethod
    async def get_ccd_height(self, **kwargs: Any) -> int:
        """Returns the height of the detector in unbinned pixels."""
        ...

    async def get_pixel_size(self, **kwargs: Any) -> Optional[Tuple[float, float]]:
        """Returns the size of a pixel in microns in x and y, or None."""
        return None


__all__ = ["ICameraInfo"]
