from datetime import datetime, timedelta, timezone

import pytest

from cameraunit.images import ImageMetaData
from cameraunit.images.metadata import EPOCH
from cameraunit.utils.exceptions import InvalidValueError


def test_defaults() -> None:
    meta = ImageMetaData()
    assert meta.bin_x == meta.bin_y == 1
    assert meta.img_top == meta.img_left == 0
    assert meta.exposure == timedelta(0)
    assert meta.timestamp == EPOCH
    assert meta.camera_name == ""
    assert meta.extended_metadata == []


def test_naive_timestamp_is_utc() -> None:
    meta = ImageMetaData(timestamp=datetime(2024, 1, 2, 3, 4, 5))
    assert meta.timestamp == datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)


@pytest.mark.parametrize(
    "kwargs", [{"bin_x": 0}, {"bin_y": -1}, {"img_top": -1}, {"exposure": timedelta(seconds=-1)}, {"gain": "high"}]
)
def test_invalid(kwargs) -> None:
    with pytest.raises(InvalidValueError):
        ImageMetaData(**kwargs)


def test_invalid_assignment() -> None:
    meta = ImageMetaData()
    with pytest.raises(InvalidValueError):
        meta.bin_x = 0
    assert meta.bin_x == 1


def test_extended_attribs_keep_order_and_duplicates() -> None:
    meta = ImageMetaData()
    meta.add_extended_attrib("FILTER", "R")
    meta.add_extended_attrib("OBSERVER", "me")
    meta.add_extended_attrib("FILTER", "G")
    assert meta.extended_metadata == [("FILTER", "R"), ("OBSERVER", "me"), ("FILTER", "G")]


def test_copy_is_deep() -> None:
    meta = ImageMetaData(camera_name="cam")
    meta.add_extended_attrib("A", "1")
    copy = meta.copy()
    assert copy == meta

    copy.add_extended_attrib("B", "2")
    copy.camera_name = "other"
    assert meta.extended_metadata == [("A", "1")]
    assert meta.camera_name == "cam"


def test_str() -> None:
    meta = ImageMetaData(camera_name="cam", exposure=timedelta(milliseconds=1500), bin_x=2, bin_y=2)
    meta.add_extended_attrib("SHUTTER", "open")
    text = str(meta)
    assert "Camera name: cam" in text
    assert "Image Bin: 2 x 2" in text
    assert "Exposure: 1.5 s" in text
    assert "SHUTTER: open" in text
