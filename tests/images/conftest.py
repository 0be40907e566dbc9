from datetime import datetime, timedelta, timezone
from typing import Any, Callable

import numpy as np
import pytest

from cameraunit.images import DynamicImage, ImageMetaData, PixelLayout


def _random_pixels(layout: PixelLayout, width: int, height: int, seed: int) -> Any:
    rng = np.random.default_rng(seed)
    shape = (height, width) if layout.channels == 1 else (height, width, layout.channels)
    if layout.dtype == np.float32:
        return rng.random(shape, dtype=np.float32)
    info = np.iinfo(layout.dtype)
    return rng.integers(info.min, info.max, size=shape, endpoint=True, dtype=layout.dtype)


@pytest.fixture()
def make_image() -> Callable[..., DynamicImage]:
    def factory(layout: PixelLayout, width: int = 5, height: int = 3, seed: int = 42) -> DynamicImage:
        return DynamicImage(_random_pixels(layout, width, height, seed), layout)

    return factory


@pytest.fixture()
def meta() -> ImageMetaData:
    meta = ImageMetaData(
        bin_x=2,
        bin_y=2,
        img_top=10,
        img_left=20,
        temperature=-12.5,
        exposure=timedelta(milliseconds=1500),
        timestamp=datetime(2024, 3, 1, 12, 30, 0, 123000, tzinfo=timezone.utc),
        camera_name="TestCam",
        gain=30,
        offset=5,
        min_gain=0,
        max_gain=100,
    )
    meta.add_extended_attrib("FILTER", "R")
    meta.add_extended_attrib("OBSERVER", "Jane")
    meta.add_extended_attrib("FILTER", "G")
    return meta
