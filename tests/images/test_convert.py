import numpy as np
import pytest

from cameraunit.images import (
    BytePixelBuffer,
    DynamicImage,
    FloatPixelBuffer,
    ImageData,
    ImageMetaData,
    PixelLayout,
    ShortPixelBuffer,
    from_typed_buffer,
    to_pixel_buffer,
    to_typed_buffer,
)
from cameraunit.utils.exceptions import InvalidValueError, ShapeMismatchError, UnsupportedLayoutError


@pytest.mark.parametrize("layout", list(PixelLayout))
def test_roundtrip(layout: PixelLayout, make_image, meta: ImageMetaData) -> None:
    image = make_image(layout)
    buffer = to_pixel_buffer(image, meta)
    assert buffer.layout == layout
    assert len(buffer.data) == image.width * image.height * layout.channels

    data = from_typed_buffer(buffer)
    assert data.image == image
    assert data.metadata == meta


def test_interleaved_order() -> None:
    data = np.array([[[1, 2, 3], [4, 5, 6]], [[7, 8, 9], [10, 11, 12]]], dtype=np.uint8)
    buffer = to_typed_buffer(DynamicImage(data, PixelLayout.RGB8), None, BytePixelBuffer)
    np.testing.assert_array_equal(buffer.data, np.arange(1, 13))
    assert (buffer.width, buffer.height) == (2, 2)
    assert buffer.meta == ImageMetaData()


def test_wrong_buffer_class(make_image) -> None:
    with pytest.raises(UnsupportedLayoutError):
        to_typed_buffer(make_image(PixelLayout.RGB16), None, BytePixelBuffer)
    with pytest.raises(UnsupportedLayoutError):
        to_typed_buffer(make_image(PixelLayout.MONO8), None, FloatPixelBuffer)


def test_replaced_data_is_checked() -> None:
    buffer = ShortPixelBuffer(2, 2, PixelLayout.MONO16, [1, 2, 3, 4])
    buffer.data = np.array([1, 2, 3], dtype=np.uint16)
    with pytest.raises(ShapeMismatchError):
        from_typed_buffer(buffer)

    buffer.data = np.array([1, 2, 3, 70000])
    with pytest.raises(InvalidValueError):
        from_typed_buffer(buffer)


def test_replaced_layout_is_checked() -> None:
    buffer = ShortPixelBuffer(2, 2, PixelLayout.MONO16, [1, 2, 3, 4])
    buffer.layout = PixelLayout.MONO8
    with pytest.raises(UnsupportedLayoutError):
        from_typed_buffer(buffer)

    buffer.layout = 42
    with pytest.raises(UnsupportedLayoutError):
        from_typed_buffer(buffer)


def test_image_data_helpers(make_image, meta: ImageMetaData) -> None:
    data = ImageData(make_image(PixelLayout.RGBA32F), meta)
    buffer = data.to_buffer()
    assert isinstance(buffer, FloatPixelBuffer)
    assert ImageData.from_buffer(buffer) == data
