from __future__ import annotations
import logging
from typing import Any, Dict, List, Union, TYPE_CHECKING

import numpy as np
from pydantic import BaseModel, ConfigDict, NonNegativeInt, StrictInt, ValidationError

from cameraunit.images.buffer import PixelBuffer
from cameraunit.images.convert import to_pixel_buffer
from cameraunit.images.layout import PixelLayout
from cameraunit.images.metadata import ImageMetaData
from cameraunit.utils.exceptions import InvalidValueError, ShapeMismatchError

if TYPE_CHECKING:
    from cameraunit.images.image import ImageData

log = logging.getLogger(__name__)


class SerialImageRecord(BaseModel):
    """Structural form of an image, with a flat list of pixel values and the numeric code of its layout."""

    model_config = ConfigDict(ser_json_inf_nan="constants")

    layout: int
    width: NonNegativeInt
    height: NonNegativeInt
    data: List[Union[StrictInt, float]]
    meta: ImageMetaData


def serialize(image: Union[ImageData, PixelBuffer]) -> SerialImageRecord:
    """Converts an image or pixel buffer into its structural form.

    Args:
        image: Image with metadata or pixel buffer.

    Returns:
        Serializable record.
    """
    buffer = image if isinstance(image, PixelBuffer) else to_pixel_buffer(image.image, image.metadata)
    return SerialImageRecord(
        layout=buffer.layout.code,
        width=buffer.width,
        height=buffer.height,
        data=buffer.data.tolist(),
        meta=buffer.meta.copy(),
    )


def deserialize(record: Union[SerialImageRecord, Dict[str, Any]]) -> PixelBuffer:
    """Creates a pixel buffer from its structural form.

    Args:
        record: Record as returned by :func:`serialize` or a dictionary with the same fields.

    Returns:
        Pixel buffer of the type matching the layout in the record.

    Raises:
        UnsupportedLayoutError: If layout code is unknown.
        ShapeMismatchError: If number of values does not match size and layout.
        InvalidValueError: If record is malformed or values do not fit the element type of the layout.
    """

    # validate dict
    if not isinstance(record, SerialImageRecord):
        try:
            record = SerialImageRecord.model_validate(record)
        except ValidationError as e:
            raise InvalidValueError(str(e)) from e

    # check layout and size
    layout = PixelLayout.from_code(record.layout)
    if len(record.data) != record.width * record.height * layout.channels:
        raise ShapeMismatchError(
            f"Got {len(record.data)} values for {record.width}x{record.height} pixels with {layout.channels} channels."
        )

    # create buffer
    buffer_class = PixelBuffer.for_layout(layout)
    log.debug("Deserializing %dx%d image into %s.", record.width, record.height, buffer_class.__name__)
    return buffer_class(record.width, record.height, layout, np.asarray(record.data), record.meta)


def to_json(image: Union[ImageData, PixelBuffer]) -> str:
    """Returns the structural form of an image as JSON."""
    return serialize(image).model_dump_json()


def from_json(text: Union[str, bytes]) -> PixelBuffer:
    """Creates a pixel buffer from JSON as returned by :func:`to_json`.

    Raises:
        InvalidValueError: If text is not a valid record.
    """
    try:
        record = SerialImageRecord.model_validate_json(text)
    except ValidationError as e:
        raise InvalidValueError(str(e)) from e
    return deserialize(record)


__all__ = ["SerialImageRecord", "serialize", "deserialize", "to_json", "from_json"]
