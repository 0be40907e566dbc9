import numpy as np
import pytest

from cameraunit.images import DynamicImage, ImageData, ImageMetaData, PixelLayout
from cameraunit.utils.exceptions import UnsupportedLayoutError


@pytest.fixture()
def mock_image() -> DynamicImage:
    return DynamicImage(np.ones((4, 6), dtype=np.uint16), PixelLayout.MONO16)


def test_init_default(mock_image) -> None:
    data = ImageData(mock_image)
    assert data.metadata == ImageMetaData()
    assert data.width == 6
    assert data.height == 4


def test_init_copies_metadata(mock_image, meta: ImageMetaData) -> None:
    data = ImageData(mock_image, meta)
    meta.add_extended_attrib("LATE", "1")
    assert ("LATE", "1") not in data.metadata.extended_metadata


def test_metadata_is_copied(mock_image, meta: ImageMetaData) -> None:
    data = ImageData(mock_image)
    data.metadata = meta
    assert data.metadata == meta

    # changing the returned copy does not change the image
    data.metadata.add_extended_attrib("KEY", "value")
    assert data.metadata == meta


def test_add_extended_attrib(mock_image) -> None:
    data = ImageData(mock_image)
    data.add_extended_attrib("SHUTTER", "open")
    data.add_extended_attrib("SHUTTER", "closed")
    assert data.metadata.extended_metadata == [("SHUTTER", "open"), ("SHUTTER", "closed")]


def test_invalid_image() -> None:
    with pytest.raises(UnsupportedLayoutError):
        ImageData(np.ones((4, 6), dtype=np.uint16))


def test_copy(mock_image, meta: ImageMetaData) -> None:
    data = ImageData(mock_image, meta)
    copy = data.copy()
    assert copy == data
    assert copy.image.data is not data.image.data

    copy.add_extended_attrib("KEY", "value")
    assert copy != data


def test_str(mock_image, meta: ImageMetaData) -> None:
    text = str(ImageData(mock_image, meta))
    assert "Camera name: TestCam" in text
    assert "Image Size: 6 x 4 (MONO16)" in text
