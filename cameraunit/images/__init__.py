"""
Images coming from a camera are stored as :class:`cameraunit.images.ImageData`, which pairs a
:class:`cameraunit.images.DynamicImage` with its :class:`cameraunit.images.ImageMetaData`. For transport, images
can be converted into flat pixel buffers (see :class:`cameraunit.images.PixelBuffer`) and their structural form.
"""
__title__ = 'Images'

from .layout import ElementType, PixelLayout
from .metadata import ImageMetaData
from .dynamic import DynamicImage
from .buffer import PixelBuffer, BytePixelBuffer, ShortPixelBuffer, FloatPixelBuffer
from .image import ImageData
from .exposure import OptimumExposure, find_optimum_exposure
from .convert import to_typed_buffer, to_pixel_buffer, from_typed_buffer
from .serialization import SerialImageRecord, serialize, deserialize, to_json, from_json
from .fits import write_fits, read_fits
