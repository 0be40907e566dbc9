"""
Conversion between images and flat pixel buffers.
"""
from __future__ import annotations
__title__ = "Buffer conversion"

import logging
from typing import Optional, Type, TYPE_CHECKING

import numpy as np

from cameraunit.images.buffer import PixelBuffer
from cameraunit.images.dynamic import DynamicImage
from cameraunit.images.layout import PixelLayout
from cameraunit.images.metadata import ImageMetaData
from cameraunit.utils.exceptions import ShapeMismatchError, UnsupportedLayoutError

if TYPE_CHECKING:
    from cameraunit.images.image import ImageData

log = logging.getLogger(__name__)


def to_typed_buffer(
    image: DynamicImage, meta: Optional[ImageMetaData], buffer_class: Type[PixelBuffer]
) -> PixelBuffer:
    """Converts an image into a buffer of the given type.

    Args:
        image: Image to convert.
        meta: Metadata to attach, will be copied.
        buffer_class: One of the concrete buffer classes.

    Returns:
        New buffer with pixels in row-major order and interleaved channels.

    Raises:
        UnsupportedLayoutError: If the layout of the image cannot be stored in the given buffer class.
    """
    if image.layout.element_type != buffer_class.ELEMENT_TYPE:
        raise UnsupportedLayoutError(f"Layout {image.layout.name} cannot be stored in {buffer_class.__name__}.")
    return buffer_class(image.width, image.height, image.layout, image.data.reshape(-1), meta)


def to_pixel_buffer(image: DynamicImage, meta: Optional[ImageMetaData] = None) -> PixelBuffer:
    """Converts an image into a buffer, picking the buffer class from the layout of the image.

    Args:
        image: Image to convert.
        meta: Metadata to attach, will be copied.

    Returns:
        New buffer.
    """
    return to_typed_buffer(image, meta, PixelBuffer.for_layout(image.layout))


def from_typed_buffer(buffer: PixelBuffer) -> ImageData:
    """Converts a buffer back into an image with metadata.

    Args:
        buffer: Buffer to convert.

    Returns:
        New image data.

    Raises:
        UnsupportedLayoutError: If the layout of the buffer is unknown or not in its element type family.
        ShapeMismatchError: If the length of the data does not match the size of the buffer.
    """
    from cameraunit.images.image import ImageData

    # check layout, data and layout may have been replaced after construction
    layout = buffer.layout
    if not isinstance(layout, PixelLayout):
        layout = PixelLayout.from_code(layout)
    if layout.element_type != buffer.ELEMENT_TYPE:
        raise UnsupportedLayoutError(f"Layout {layout.name} does not fit {buffer.__class__.__name__}.")

    # check size
    data = np.asarray(buffer.data)
    channels = layout.channels
    if data.ndim != 1 or len(data) != buffer.width * buffer.height * channels:
        raise ShapeMismatchError(
            f"Buffer of length {data.size} does not match {buffer.width}x{buffer.height} pixels "
            f"with {channels} channels."
        )
    data = buffer.cast_data(data)

    # reshape, mono images have no channel axis
    shape = (buffer.height, buffer.width) if channels == 1 else (buffer.height, buffer.width, channels)
    image = DynamicImage(data.reshape(shape), layout)
    log.debug("Converted %s into %r.", buffer, image)
    return ImageData(image, buffer.meta)


__all__ = ["to_typed_buffer", "to_pixel_buffer", "from_typed_buffer"]
