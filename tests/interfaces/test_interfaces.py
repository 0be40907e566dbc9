from datetime import timedelta
from typing import Any

import pytest

from cameraunit.images import ImageData
from cameraunit.interfaces import ICamera, ICameraInfo
from cameraunit.utils.enums import PixelBpp
from cameraunit.utils.exceptions import NotImplementedByCameraError
from cameraunit.utils.roi import ROI


class MinimalCamera(ICamera):
    async def camera_ready(self, **kwargs: Any) -> bool:
        return True

    async def camera_name(self, **kwargs: Any) -> str:
        return "minimal"

    async def cancel_capture(self, **kwargs: Any) -> None:
        pass

    async def is_capturing(self, **kwargs: Any) -> bool:
        return False

    async def get_ccd_width(self, **kwargs: Any) -> int:
        return 10

    async def get_ccd_height(self, **kwargs: Any) -> int:
        return 10

    async def get_vendor(self, **kwargs: Any) -> str:
        return "test"

    async def capture_image(self, **kwargs: Any) -> ImageData:
        raise NotImplementedError

    async def start_exposure(self, **kwargs: Any) -> None:
        pass

    async def download_image(self, **kwargs: Any) -> ImageData:
        raise NotImplementedError

    async def image_ready(self, **kwargs: Any) -> bool:
        return False

    async def set_exposure(self, exposure: timedelta, **kwargs: Any) -> timedelta:
        return exposure

    async def get_exposure(self, **kwargs: Any) -> timedelta:
        return timedelta(seconds=1)

    async def set_roi(self, roi: ROI, **kwargs: Any) -> ROI:
        return roi

    async def get_roi(self, **kwargs: Any) -> ROI:
        return ROI()

    async def set_bpp(self, bpp: PixelBpp, **kwargs: Any) -> PixelBpp:
        return bpp

    async def get_bpp(self, **kwargs: Any) -> PixelBpp:
        return PixelBpp.BPP8


def test_abstract() -> None:
    with pytest.raises(TypeError):
        ICamera()
    with pytest.raises(TypeError):
        ICameraInfo()


@pytest.mark.asyncio
async def test_defaults() -> None:
    camera = MinimalCamera()
    assert isinstance(camera, ICameraInfo)

    assert await camera.get_uuid() is None
    assert await camera.get_temperature() is None
    assert await camera.get_cooler() is None
    assert await camera.get_cooler_power() is None
    assert await camera.get_pixel_size() is None
    assert await camera.get_gain() == 0.0
    assert await camera.get_gain_raw() == 0
    assert await camera.get_offset() == 0
    assert await camera.get_flip() == (False, False)
    assert await camera.get_bin_x() == 1
    assert await camera.get_bin_y() == 1
    assert await camera.get_status() == "Not implemented"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "method,args",
    [
        ("set_temperature", (-10.0,)),
        ("set_cooler", (True,)),
        ("set_cooler_power", (50.0,)),
        ("set_gain", (10.0,)),
        ("set_gain_raw", (10,)),
        ("set_offset", (5,)),
        ("get_min_exposure", ()),
        ("get_max_exposure", ()),
        ("get_min_gain", ()),
        ("get_max_gain", ()),
        ("set_shutter_open", (True,)),
        ("get_shutter_open", ()),
        ("set_flip", (True, False)),
    ],
)
async def test_not_implemented(method, args) -> None:
    camera = MinimalCamera()
    with pytest.raises(NotImplementedByCameraError):
        await getattr(camera, method)(*args)
