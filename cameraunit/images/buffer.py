from __future__ import annotations
from abc import ABCMeta
from typing import Any, ClassVar, Dict, Optional, Sequence, Type, Union

import numpy as np
from numpy.typing import NDArray

from cameraunit.images.layout import ElementType, PixelLayout
from cameraunit.images.metadata import ImageMetaData
from cameraunit.utils.exceptions import InvalidValueError, ShapeMismatchError, UnsupportedLayoutError


class PixelBuffer(metaclass=ABCMeta):
    """Flat pixel buffer with metadata.

    Pixels are stored row-major with interleaved channels, e.g. R,G,B,R,G,B,... for RGB layouts. Only the three
    concrete subclasses exist, one per element type.
    """

    __module__ = "cameraunit.images"

    ELEMENT_TYPE: ClassVar[ElementType]

    def __init__(
        self,
        width: int,
        height: int,
        layout: PixelLayout,
        data: Union[NDArray[Any], Sequence[Any]],
        meta: Optional[ImageMetaData] = None,
    ):
        """Creates a new buffer.

        Args:
            width: Width of image in pixels.
            height: Height of image in pixels.
            layout: Pixel layout, must have this buffer's element type.
            data: Flat pixel data, will be copied.
            meta: Metadata, will be copied.

        Raises:
            UnsupportedLayoutError: If layout does not fit buffer type.
            ShapeMismatchError: If length of data is not width * height * channels.
            InvalidValueError: If data contains values that cannot be stored in this buffer type.
        """

        # check layout
        if not isinstance(layout, PixelLayout) or layout.element_type != self.ELEMENT_TYPE:
            raise UnsupportedLayoutError(f"Layout {layout!r} cannot be stored in {self.__class__.__name__}.")
        if width < 0 or height < 0:
            raise InvalidValueError(f"Invalid image size {width}x{height}.")

        # check shape
        array = np.asarray(data)
        expected = width * height * layout.channels
        if array.ndim != 1 or len(array) != expected:
            raise ShapeMismatchError(
                f"Buffer of shape {array.shape} does not match {width}x{height} pixels with {layout.channels} channels."
            )

        # store
        self.width = width
        self.height = height
        self.layout = layout
        self.data: NDArray[Any] = self.cast_data(array)
        self.meta = ImageMetaData() if meta is None else meta.copy()

    @classmethod
    def cast_data(cls, array: NDArray[Any]) -> NDArray[Any]:
        """Returns a copy of the given array with this buffer's dtype, refusing lossy conversions."""
        dtype = cls.ELEMENT_TYPE.dtype
        if array.size == 0:
            return np.zeros(0, dtype=dtype)

        if cls.ELEMENT_TYPE == ElementType.FLOAT32:
            if array.dtype.kind not in "iuf":
                raise InvalidValueError(f"Cannot store values of type {array.dtype} as float.")
            with np.errstate(over="ignore"):
                cast = np.array(array, dtype=dtype, copy=True)
            if not np.array_equal(cast, array, equal_nan=array.dtype.kind == "f"):
                raise InvalidValueError(f"Values of type {array.dtype} cannot be stored exactly as {dtype}.")
            return cast
        else:
            if array.dtype.kind not in "iu":
                raise InvalidValueError(f"Cannot store values of type {array.dtype} as {dtype}.")
            info = np.iinfo(dtype)
            if array.min() < info.min or array.max() > info.max:
                raise InvalidValueError(f"Values out of range for {dtype}.")

        return np.array(array, dtype=dtype, copy=True)

    @staticmethod
    def for_layout(layout: PixelLayout) -> Type[PixelBuffer]:
        """Returns the buffer class that stores the given layout."""
        return _BUFFERS[layout.element_type]

    @property
    def channels(self) -> int:
        return self.layout.channels

    def __len__(self) -> int:
        return len(self.data)

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, PixelBuffer):
            return NotImplemented
        equal_nan = self.ELEMENT_TYPE == ElementType.FLOAT32
        return (
            type(self) is type(other)
            and self.layout == other.layout
            and self.width == other.width
            and self.height == other.height
            and self.meta == other.meta
            and np.array_equal(self.data, other.data, equal_nan=equal_nan)
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.width}x{self.height}, {self.layout.name})"


class BytePixelBuffer(PixelBuffer):
    """Pixel buffer with 8 bit unsigned integer elements."""

    __module__ = "cameraunit.images"
    ELEMENT_TYPE = ElementType.UINT8


class ShortPixelBuffer(PixelBuffer):
    """Pixel buffer with 16 bit unsigned integer elements."""

    __module__ = "cameraunit.images"
    ELEMENT_TYPE = ElementType.UINT16


class FloatPixelBuffer(PixelBuffer):
    """Pixel buffer with 32 bit float elements."""

    __module__ = "cameraunit.images"
    ELEMENT_TYPE = ElementType.FLOAT32


_BUFFERS: Dict[ElementType, Type[PixelBuffer]] = {
    ElementType.UINT8: BytePixelBuffer,
    ElementType.UINT16: ShortPixelBuffer,
    ElementType.FLOAT32: FloatPixelBuffer,
}


__all__ = ["PixelBuffer", "BytePixelBuffer", "ShortPixelBuffer", "FloatPixelBuffer"]
