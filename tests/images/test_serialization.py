import json

import numpy as np
import pytest

from cameraunit.images import (
    FloatPixelBuffer,
    ImageData,
    ImageMetaData,
    PixelLayout,
    SerialImageRecord,
    ShortPixelBuffer,
    deserialize,
    from_json,
    from_typed_buffer,
    serialize,
    to_json,
    to_pixel_buffer,
)
from cameraunit.utils.exceptions import InvalidValueError, ShapeMismatchError, UnsupportedLayoutError


@pytest.mark.parametrize("layout", list(PixelLayout))
def test_roundtrip(layout: PixelLayout, make_image, meta: ImageMetaData) -> None:
    buffer = to_pixel_buffer(make_image(layout), meta)
    record = serialize(buffer)
    assert record.layout == layout.code
    assert deserialize(record) == buffer


@pytest.mark.parametrize("layout", list(PixelLayout))
def test_json_roundtrip(layout: PixelLayout, make_image, meta: ImageMetaData) -> None:
    data = ImageData(make_image(layout), meta)
    assert from_typed_buffer(from_json(to_json(data))) == data


def test_extended_metadata_kept(make_image) -> None:
    meta = ImageMetaData()
    image = make_image(PixelLayout.MONO8)
    assert deserialize(serialize(ImageData(image, meta))).meta.extended_metadata == []

    meta.add_extended_attrib("KEY", "1")
    meta.add_extended_attrib("OTHER", "x")
    meta.add_extended_attrib("KEY", "2")
    result = from_json(to_json(ImageData(image, meta)))
    assert result.meta.extended_metadata == [("KEY", "1"), ("OTHER", "x"), ("KEY", "2")]


def test_nan_and_inf() -> None:
    buffer = FloatPixelBuffer(1, 1, PixelLayout.RGB32F, [np.nan, np.inf, -np.inf])
    assert from_json(to_json(buffer)) == buffer


def test_record_is_copy(meta: ImageMetaData) -> None:
    buffer = ShortPixelBuffer(1, 1, PixelLayout.MONO16, [5], meta)
    record = serialize(buffer)
    record.meta.add_extended_attrib("NEW", "value")
    assert buffer.meta == meta


def test_unknown_layout() -> None:
    record = SerialImageRecord(layout=10, width=1, height=1, data=[0], meta=ImageMetaData())
    with pytest.raises(UnsupportedLayoutError):
        deserialize(record)


def test_length_mismatch() -> None:
    record = SerialImageRecord(
        layout=PixelLayout.RGB16.code, width=2, height=1, data=[1, 2, 3, 4, 5], meta=ImageMetaData()
    )
    with pytest.raises(ShapeMismatchError):
        deserialize(record)


@pytest.mark.parametrize(
    "layout,data", [(PixelLayout.MONO8, [256]), (PixelLayout.MONO16, [-1]), (PixelLayout.MONO8, [0.5])]
)
def test_out_of_range(layout: PixelLayout, data) -> None:
    record = SerialImageRecord(layout=layout.code, width=1, height=1, data=data, meta=ImageMetaData())
    with pytest.raises(InvalidValueError):
        deserialize(record)


def test_from_dict() -> None:
    buffer = deserialize({"layout": 4, "width": 2, "height": 1, "data": [1, 65535], "meta": {"camera_name": "cam"}})
    assert isinstance(buffer, ShortPixelBuffer)
    assert buffer.meta.camera_name == "cam"
    np.testing.assert_array_equal(buffer.data, [1, 65535])

    with pytest.raises(InvalidValueError):
        deserialize({"layout": 4, "width": -1, "height": 1, "data": [], "meta": {}})


def test_malformed_json() -> None:
    with pytest.raises(InvalidValueError):
        from_json("{not json")

    text = json.dumps({"layout": 0, "width": 1, "height": 1, "data": [0]})
    with pytest.raises(InvalidValueError):
        from_json(text)
