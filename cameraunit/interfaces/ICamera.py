from abc import ABCMeta, abstractmethod
from datetime import timedelta
from typing import Any, Tuple

from .ICameraInfo import ICameraInfo
from cameraunit.images.image import ImageData
from cameraunit.utils.enums import PixelBpp
from cameraunit.utils.exceptions import NotImplementedByCameraError
from cameraunit.utils.roi import ROI


class ICamera(ICameraInfo, metaclass=ABCMeta):
    """The module controls a camera."""

    __module__ = "cameraunit.interfaces"

    @abstractmethod
    async def get_vendor(self, **kwargs: Any) -> str:
        """Returns the vendor of the camera."""
        ...

    @abstractmethod
    async def capture_image(self, **kwargs: Any) -> ImageData:
        """Starts an exposure, waits for it and returns the image.

        Returns:
            Image with metadata.

        Raises:
            ExposureInProgressError: If an exposure is already running.
            ExposureFailedError: If exposure was aborted or failed.
        """
        ...

    @abstractmethod
    async def start_exposure(self, **kwargs: Any) -> None:
        """Starts an exposure and returns immediately.

        Raises:
            ExposureInProgressError: If an exposure is already running.
        """
        ...

    @abstractmethod
    async def download_image(self, **kwargs: Any) -> ImageData:
        """Waits for the running exposure to finish and returns the image.

        Raises:
            CameraError: If no exposure has been started.
            ExposureFailedError: If exposure was aborted or failed.
        """
        ...

    @abstractmethod
    async def image_ready(self, **kwargs: Any) -> bool:
        """Whether the image of the last exposure is ready for download."""
        ...

    @abstractmethod
    async def set_exposure(self, exposure: timedelta, **kwargs: Any) -> timedelta:
        """Sets the exposure time.

        Args:
            exposure: New exposure time.

        Returns:
            Exposure time that has actually been set.

        Raises:
            InvalidValueError: If exposure time is out of range.
        """
        ...

    @abstractmethod
    async def get_exposure(self, **kwargs: Any) -> timedelta:
        """Returns the exposure time."""
        ...

    async def get_gain(self, **kwargs: Any) -> float:
        """Returns the gain in percent of the gain range."""
        return 0.0

    async def get_gain_raw(self, **kwargs: Any) -> int:
        """Returns the gain in raw units of the camera."""
        return 0

    async def set_gain(self, gain: float, **kwargs: Any) -> float:
        """Sets the gain in percent of the gain range.

        Returns:
            Gain that has actually been set.

        Raises:
            NotImplementedByCameraError: If gain cannot be set.
        """
        raise NotImplementedByCameraError()

    async def set_gain_raw(self, gain: int, **kwargs: Any) -> int:
        """Sets the gain in raw units of the camera.

        Returns:
            Gain that has actually been set.

        Raises:
            NotImplementedByCameraError: If gain cannot be set.
        """
        raise NotImplementedByCameraError()

    async def get_offset(self, **kwargs: Any) -> int:
        """Returns the pixel offset."""
        return 0

    async def set_offset(self, offset: int, **kwargs: Any) -> int:
        """Sets the pixel offset.

        Returns:
            Offset that has actually been set.

        Raises:
            NotImplementedByCameraError: If offset cannot be set.
        """
        raise NotImplementedByCameraError()

    async def get_min_exposure(self, **kwargs: Any) -> timedelta:
        """Returns the shortest exposure time supported by the camera."""
        raise NotImplementedByCameraError()

    async def get_max_exposure(self, **kwargs: Any) -> timedelta:
        """Returns the longest exposure time supported by the camera."""
        raise NotImplementedByCameraError()

    async def get_min_gain(self, **kwargs: Any) -> int:
        """Returns the minimum gain in raw units."""
        raise NotImplementedByCameraError()

    async def get_max_gain(self, **kwargs: Any) -> int:
        """Returns the maximum gain in raw units."""
        raise NotImplementedByCameraError()

    async def set_shutter_open(self, open: bool, **kwargs: Any) -> bool:
        """Opens or closes the shutter for the next exposure.

        Returns:
            New state of the shutter.

        Raises:
            NotImplementedByCameraError: If camera has no shutter.
        """
        raise NotImplementedByCameraError()

    async def get_shutter_open(self, **kwargs: Any) -> bool:
        """Whether the shutter will be open during the next exposure."""
        raise NotImplementedByCameraError()

    @abstractmethod
    async def set_roi(self, roi: ROI, **kwargs: Any) -> ROI:
        """Sets the region of interest.

        Args:
            roi: New region of interest, all zeros for the full frame.

        Returns:
            Region of interest that has actually been set.

        Raises:
            InvalidValueError: If region of interest does not fit the detector.
        """
        ...

    @abstractmethod
    async def get_roi(self, **kwargs: Any) -> ROI:
        """Returns the region of interest."""
        ...

    @abstractmethod
    async def set_bpp(self, bpp: PixelBpp, **kwargs: Any) -> PixelBpp:
        """Sets the bit depth of pixels.

        Returns:
            Bit depth that has actually been set.

        Raises:
            InvalidValueError: If bit depth is not supported.
        """
        ...

    @abstractmethod
    async def get_bpp(self, **kwargs: Any) -> PixelBpp:
        """Returns the bit depth of pixels."""
        ...

    async def set_flip(self, x: bool, y: bool, **kwargs: Any) -> None:
        """Flips the image along the given axes.

        Raises:
            NotImplementedByCameraError: If image cannot be flipped.
        """
        raise NotImplementedByCameraError()

    async def get_flip(self, **kwargs: Any) -> Tuple[bool, bool]:
        """Returns whether the image is flipped in x and y."""
        return False, False

    async def get_bin_x(self, **kwargs: Any) -> int:
        """Returns the binning in x."""
        return 1

    async def get_bin_y(self, **kwargs: Any) -> int:
        """Returns the binning in y."""
        return 1

    async def get_status(self, **kwargs: Any) -> str:
        """Returns a status message of the camera."""
        return "Not implemented"


__all__ = ["ICamera"]
