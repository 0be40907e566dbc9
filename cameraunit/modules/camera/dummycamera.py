import asyncio
import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, NamedTuple, Optional, Tuple, Union

import numpy as np

from cameraunit.images import DynamicImage, ImageData, ImageMetaData, PixelLayout
from cameraunit.interfaces import ICamera
from cameraunit.utils.enums import ExposureStatus, PixelBpp
from cameraunit.utils.roi import ROI
from cameraunit.utils import exceptions as exc

log = logging.getLogger(__name__)


class CoolingStatus(NamedTuple):
    enabled: bool = False
    set_point: float = -10.0
    temperature: float = 20.0


# temperature of an uncooled detector and lowest set point
AMBIENT_TEMPERATURE = 20.0
MIN_TEMPERATURE = -80.0

# signal in ADU per second and unbinned pixel with open shutter and zero gain
FLUX = 1000.0


class DummyCamera(ICamera):
    """A dummy camera for testing, producing noise images."""

    __module__ = "cameraunit.modules.camera"

    MIN_EXPOSURE = timedelta(microseconds=1)
    MAX_EXPOSURE = timedelta(seconds=200)
    MIN_GAIN = 0
    MAX_GAIN = 100

    def __init__(
        self,
        name: str = "DummyCamera",
        ccd_width: int = 640,
        ccd_height: int = 480,
        pixel_size: Tuple[float, float] = (3.75, 3.75),
        exposure: Union[float, timedelta] = 1.0,
        readout_time: float = 0.0,
        bpp: int = 8,
        color: bool = False,
        offset: int = 10,
        seed: Optional[int] = None,
    ):
        """Creates a new dummy camera.

        Args:
            name: Name of camera.
            ccd_width: Width of detector in pixels.
            ccd_height: Height of detector in pixels.
            pixel_size: Size of pixels in microns.
            exposure: Initial exposure time, in seconds if given as number.
            readout_time: Readout time in seconds.
            bpp: Bit depth of pixels, either 8, 10, 12 or 16.
            color: Whether to produce RGB images.
            offset: Pixel offset in ADU.
            seed: Seed for the random noise.
        """

        # store
        self._name = name
        self._uuid = str(uuid.uuid4())
        self._ccd_width = ccd_width
        self._ccd_height = ccd_height
        self._pixel_size = pixel_size
        self._readout_time = readout_time
        self._color = color
        self._rng = np.random.default_rng(seed)

        # init camera
        if not isinstance(exposure, timedelta):
            exposure = timedelta(seconds=exposure)
        self._exposure = self._check_exposure(exposure)
        self._bpp = self._check_bpp(PixelBpp.from_bits(bpp))
        self._offset = offset
        self._gain = self.MIN_GAIN
        self._roi = ROI()
        self._flip = (False, False)
        self._shutter_open = True
        self._cooling = CoolingStatus()
        self._status = ExposureStatus.IDLE

        # exposure
        self._exposure_task: Optional["asyncio.Task[ImageData]"] = None
        self._abort_event = asyncio.Event()

    async def camera_ready(self, **kwargs: Any) -> bool:
        return True

    async def camera_name(self, **kwargs: Any) -> str:
        return self._name

    async def get_vendor(self, **kwargs: Any) -> str:
        return "cameraunit"

    async def get_uuid(self, **kwargs: Any) -> Optional[str]:
        return self._uuid

    async def get_status(self, **kwargs: Any) -> str:
        return self._status.value

    async def get_ccd_width(self, **kwargs: Any) -> int:
        return self._ccd_width

    async def get_ccd_height(self, **kwargs: Any) -> int:
        return self._ccd_height

    async def get_pixel_size(self, **kwargs: Any) -> Optional[Tuple[float, float]]:
        return self._pixel_size

    def _get_image(self, exposure: timedelta, roi: ROI, open_shutter: bool) -> DynamicImage:
        """Actually get (i.e. simulate) the image."""

        # size
        width = self._ccd_width // roi.bin_x if roi.is_full_frame else roi.width
        height = self._ccd_height // roi.bin_y if roi.is_full_frame else roi.height
        shape = (height, width, 3) if self._color else (height, width)

        # noise around a mean that scales with exposure time, binned area and gain
        signal = FLUX * exposure.total_seconds() * roi.bin_x * roi.bin_y * (1.0 + self._gain / self.MAX_GAIN)
        mean = self._offset + (signal if open_shutter else 0.0)
        data = self._rng.normal(mean, np.sqrt(mean) + 2.0, shape)

        # to bit depth
        if self._bpp == PixelBpp.BPP8:
            data = np.clip(np.rint(data), 0, 255).astype(np.uint8)
        else:
            data = np.clip(np.rint(data), 0, 2**self._bpp.value - 1).astype(np.uint16)

        # flip
        if self._flip[0]:
            data = np.flip(data, axis=1)
        if self._flip[1]:
            data = np.flip(data, axis=0)

        channels = 3 if self._color else 1
        return DynamicImage(data, PixelLayout.from_dtype(data.dtype, channels))

    async def _expose(self, exposure: timedelta, roi: ROI, open_shutter: bool) -> ImageData:
        """Actually do the exposure.

        Args:
            exposure: The requested exposure time.
            roi: Region of interest.
            open_shutter: Whether or not to open the shutter.

        Returns:
            The image.

        Raises:
            ExposureFailedError: If exposure was aborted.
        """

        # start exposure
        log.info("Starting exposure with %s shutter...", "open" if open_shutter else "closed")
        timestamp = datetime.now(timezone.utc)
        self._status = ExposureStatus.EXPOSING

        # wait a little
        steps = 10
        for i in range(steps):
            if self._abort_event.is_set():
                self._status = ExposureStatus.IDLE
                raise exc.ExposureFailedError("Exposure was aborted.")
            await asyncio.sleep(exposure.total_seconds() / steps)

        # readout
        self._status = ExposureStatus.READOUT
        await asyncio.sleep(self._readout_time)
        image = self._get_image(exposure, roi, open_shutter)

        # metadata
        meta = ImageMetaData(
            bin_x=roi.bin_x,
            bin_y=roi.bin_y,
            img_top=roi.y_min,
            img_left=roi.x_min,
            temperature=self._cooling.temperature,
            exposure=exposure,
            timestamp=timestamp,
            camera_name=self._name,
            gain=self._gain,
            offset=self._offset,
            min_gain=self.MIN_GAIN,
            max_gain=self.MAX_GAIN,
        )
        meta.add_extended_attrib("SHUTTER", "open" if open_shutter else "closed")

        # finished
        self._status = ExposureStatus.IDLE
        log.info("Exposure finished.")
        return ImageData(image, meta)

    async def start_exposure(self, **kwargs: Any) -> None:
        if await self.is_capturing():
            raise exc.ExposureInProgressError("Exposure already in progress.")
        self._abort_event.clear()
        self._exposure_task = asyncio.create_task(self._expose(self._exposure, self._roi, self._shutter_open))

    async def download_image(self, **kwargs: Any) -> ImageData:
        if self._exposure_task is None:
            raise exc.CameraError("No exposure has been started.")
        task, self._exposure_task = self._exposure_task, None
        return await task

    async def capture_image(self, **kwargs: Any) -> ImageData:
        await self.start_exposure()
        return await self.download_image()

    async def image_ready(self, **kwargs: Any) -> bool:
        task = self._exposure_task
        return task is not None and task.done() and not task.cancelled() and task.exception() is None

    async def is_capturing(self, **kwargs: Any) -> bool:
        return self._exposure_task is not None and not self._exposure_task.done()

    async def cancel_capture(self, **kwargs: Any) -> None:
        if await self.is_capturing():
            log.info("Aborting exposure...")
            self._abort_event.set()

    def _check_exposure(self, exposure: timedelta) -> timedelta:
        if not self.MIN_EXPOSURE <= exposure <= self.MAX_EXPOSURE:
            raise exc.InvalidValueError(
                f"Exposure time must be between {self.MIN_EXPOSURE} and {self.MAX_EXPOSURE}, got {exposure}."
            )
        return exposure

    async def set_exposure(self, exposure: timedelta, **kwargs: Any) -> timedelta:
        log.info("Setting exposure time to %.6f s...", exposure.total_seconds())
        self._exposure = self._check_exposure(exposure)
        return self._exposure

    async def get_exposure(self, **kwargs: Any) -> timedelta:
        return self._exposure

    async def get_min_exposure(self, **kwargs: Any) -> timedelta:
        return self.MIN_EXPOSURE

    async def get_max_exposure(self, **kwargs: Any) -> timedelta:
        return self.MAX_EXPOSURE

    async def get_gain(self, **kwargs: Any) -> float:
        return (self._gain - self.MIN_GAIN) / (self.MAX_GAIN - self.MIN_GAIN) * 100.0

    async def set_gain(self, gain: float, **kwargs: Any) -> float:
        if not 0.0 <= gain <= 100.0:
            raise exc.InvalidValueError(f"Gain must be between 0 and 100 percent, got {gain}.")
        await self.set_gain_raw(round(self.MIN_GAIN + gain / 100.0 * (self.MAX_GAIN - self.MIN_GAIN)))
        return await self.get_gain()

    async def get_gain_raw(self, **kwargs: Any) -> int:
        return self._gain

    async def set_gain_raw(self, gain: int, **kwargs: Any) -> int:
        if not self.MIN_GAIN <= gain <= self.MAX_GAIN:
            raise exc.InvalidValueError(f"Gain must be between {self.MIN_GAIN} and {self.MAX_GAIN}, got {gain}.")
        log.info("Setting gain to %d...", gain)
        self._gain = gain
        return self._gain

    async def get_min_gain(self, **kwargs: Any) -> int:
        return self.MIN_GAIN

    async def get_max_gain(self, **kwargs: Any) -> int:
        return self.MAX_GAIN

    async def get_offset(self, **kwargs: Any) -> int:
        return self._offset

    async def set_offset(self, offset: int, **kwargs: Any) -> int:
        if offset < 0:
            raise exc.InvalidValueError(f"Offset must not be negative, got {offset}.")
        self._offset = offset
        return self._offset

    async def set_shutter_open(self, open: bool, **kwargs: Any) -> bool:
        self._shutter_open = open
        return self._shutter_open

    async def get_shutter_open(self, **kwargs: Any) -> bool:
        return self._shutter_open

    async def set_roi(self, roi: ROI, **kwargs: Any) -> ROI:
        # check
        if roi.bin_x < 1 or roi.bin_y < 1:
            raise exc.InvalidValueError(f"Invalid binning {roi.bin_x}x{roi.bin_y}.")
        if min(roi.x_min, roi.y_min, roi.width, roi.height) < 0:
            raise exc.InvalidValueError(f"Invalid region of interest: {roi}")
        if roi.bin_x > self._ccd_width or roi.bin_y > self._ccd_height:
            raise exc.InvalidValueError(f"Binning {roi.bin_x}x{roi.bin_y} exceeds detector size.")
        if not roi.is_full_frame:
            if roi.width == 0 or roi.height == 0:
                raise exc.InvalidValueError(f"Empty region of interest: {roi}")
            if (roi.x_min + roi.width) * roi.bin_x > self._ccd_width or (
                roi.y_min + roi.height
            ) * roi.bin_y > self._ccd_height:
                raise exc.InvalidValueError(f"Region of interest exceeds detector: {roi}")

        # set it
        log.info("Set %s.", roi)
        self._roi = roi
        return self._roi

    async def get_roi(self, **kwargs: Any) -> ROI:
        return self._roi

    async def get_bin_x(self, **kwargs: Any) -> int:
        return self._roi.bin_x

    async def get_bin_y(self, **kwargs: Any) -> int:
        return self._roi.bin_y

    @staticmethod
    def _check_bpp(bpp: PixelBpp) -> PixelBpp:
        if bpp in (PixelBpp.BPP24, PixelBpp.BPP32):
            raise exc.InvalidValueError(f"Unsupported bit depth {bpp.value}.")
        return bpp

    async def set_bpp(self, bpp: PixelBpp, **kwargs: Any) -> PixelBpp:
        self._bpp = self._check_bpp(bpp)
        return self._bpp

    async def get_bpp(self, **kwargs: Any) -> PixelBpp:
        return self._bpp

    async def set_flip(self, x: bool, y: bool, **kwargs: Any) -> None:
        self._flip = (x, y)

    async def get_flip(self, **kwargs: Any) -> Tuple[bool, bool]:
        return self._flip

    async def set_temperature(self, temperature: float, **kwargs: Any) -> float:
        if not MIN_TEMPERATURE <= temperature <= AMBIENT_TEMPERATURE:
            raise exc.InvalidValueError(
                f"Temperature must be between {MIN_TEMPERATURE} and {AMBIENT_TEMPERATURE}, got {temperature}."
            )
        log.info("Setting detector temperature to %.1f C...", temperature)
        self._cooling = self._cooling._replace(set_point=temperature)
        if self._cooling.enabled:
            self._cooling = self._cooling._replace(temperature=temperature)
        return temperature

    async def get_temperature(self, **kwargs: Any) -> Optional[float]:
        return self._cooling.temperature

    async def set_cooler(self, on: bool, **kwargs: Any) -> None:
        log.info("Switching cooler %s...", "on" if on else "off")
        temperature = self._cooling.set_point if on else AMBIENT_TEMPERATURE
        self._cooling = self._cooling._replace(enabled=on, temperature=temperature)

    async def get_cooler(self, **kwargs: Any) -> Optional[bool]:
        return self._cooling.enabled

    async def get_cooler_power(self, **kwargs: Any) -> Optional[float]:
        if not self._cooling.enabled:
            return 0.0
        return (AMBIENT_TEMPERATURE - self._cooling.temperature) / (AMBIENT_TEMPERATURE - MIN_TEMPERATURE) * 100.0


__all__ = ["DummyCamera", "CoolingStatus"]
