import numpy as np
import pytest

from cameraunit.images import (
    BytePixelBuffer,
    FloatPixelBuffer,
    ImageMetaData,
    PixelBuffer,
    PixelLayout,
    ShortPixelBuffer,
)
from cameraunit.utils.exceptions import InvalidValueError, ShapeMismatchError, UnsupportedLayoutError


def test_init() -> None:
    meta = ImageMetaData(camera_name="cam")
    buffer = ShortPixelBuffer(2, 2, PixelLayout.MONO16, [1, 2, 3, 65535], meta)
    assert buffer.data.dtype == np.uint16
    assert len(buffer) == 4
    assert buffer.channels == 1

    # metadata is copied
    meta.camera_name = "other"
    assert buffer.meta.camera_name == "cam"


@pytest.mark.parametrize("length", [11, 13, 0])
def test_length_mismatch(length) -> None:
    with pytest.raises(ShapeMismatchError):
        BytePixelBuffer(2, 2, PixelLayout.RGB8, np.zeros(length, dtype=np.uint8))


def test_not_flat() -> None:
    with pytest.raises(ShapeMismatchError):
        BytePixelBuffer(2, 2, PixelLayout.MONO8, np.zeros((2, 2), dtype=np.uint8))


@pytest.mark.parametrize(
    "buffer_class,layout",
    [
        (BytePixelBuffer, PixelLayout.MONO16),
        (ShortPixelBuffer, PixelLayout.RGB8),
        (FloatPixelBuffer, PixelLayout.RGBA16),
        (ShortPixelBuffer, PixelLayout.RGB32F),
    ],
)
def test_wrong_family(buffer_class, layout: PixelLayout) -> None:
    with pytest.raises(UnsupportedLayoutError):
        buffer_class(1, 1, layout, np.zeros(layout.channels))


@pytest.mark.parametrize(
    "buffer_class,layout,data",
    [
        (BytePixelBuffer, PixelLayout.MONO8, [256]),
        (BytePixelBuffer, PixelLayout.MONO8, [-1]),
        (ShortPixelBuffer, PixelLayout.MONO16, [65536]),
        (ShortPixelBuffer, PixelLayout.MONO16, [1.5]),
        (FloatPixelBuffer, PixelLayout.RGB32F, ["a", "b", "c"]),
    ],
)
def test_invalid_values(buffer_class, layout: PixelLayout, data) -> None:
    with pytest.raises(InvalidValueError):
        buffer_class(1, 1, layout, data)


@pytest.mark.parametrize(
    "data",
    [
        np.array([0.1, 0.2, 0.3], dtype=np.float64),
        np.array([1e300, 0.0, 0.0]),
        np.array([2**24 + 1, 0, 0], dtype=np.int64),
    ],
)
def test_lossy_float(data) -> None:
    with pytest.raises(InvalidValueError):
        FloatPixelBuffer(1, 1, PixelLayout.RGB32F, data)


def test_exact_float() -> None:
    data = np.array([0.5, -np.inf, np.nan], dtype=np.float64)
    buffer = FloatPixelBuffer(1, 1, PixelLayout.RGB32F, data)
    assert buffer.data.dtype == np.float32
    np.testing.assert_array_equal(buffer.data, data)

    buffer = FloatPixelBuffer(1, 1, PixelLayout.RGB32F, np.array([2**24, 7, 0], dtype=np.int64))
    np.testing.assert_array_equal(buffer.data, [2**24, 7, 0])


def test_for_layout() -> None:
    assert PixelBuffer.for_layout(PixelLayout.LUMA_ALPHA8) is BytePixelBuffer
    assert PixelBuffer.for_layout(PixelLayout.RGBA16) is ShortPixelBuffer
    assert PixelBuffer.for_layout(PixelLayout.RGB32F) is FloatPixelBuffer


def test_equality() -> None:
    a = FloatPixelBuffer(1, 1, PixelLayout.RGB32F, [0.5, np.nan, np.inf])
    b = FloatPixelBuffer(1, 1, PixelLayout.RGB32F, [0.5, np.nan, np.inf])
    assert a == b

    b.meta.add_extended_attrib("KEY", "value")
    assert a != b

    c = BytePixelBuffer(2, 1, PixelLayout.MONO8, [1, 2])
    d = BytePixelBuffer(1, 2, PixelLayout.MONO8, [1, 2])
    assert c != d
