"""
Registry of the pixel layouts an image or pixel buffer can have.
"""
__title__ = "Pixel layouts"

from enum import Enum
from typing import Any, Dict, NamedTuple, Tuple

import numpy as np

from cameraunit.utils.exceptions import UnsupportedLayoutError


class ElementType(Enum):
    """Enumerator for the storage type of a single channel value.

    Attributes:
        UINT8: 8 bit unsigned integer (i.e. byte).
        UINT16: 16 bit unsigned integer (i.e. unsigned short).
        FLOAT32: 32 bit float.
    """

    UINT8 = "uint8"
    UINT16 = "uint16"
    FLOAT32 = "float32"

    @property
    def dtype(self) -> np.dtype:
        """Numpy dtype for this element type."""
        return np.dtype(self.value)

    @property
    def bitpix(self) -> int:
        """FITS BITPIX for this element type."""
        return {ElementType.UINT8: 8, ElementType.UINT16: 16, ElementType.FLOAT32: -32}[self]

    @classmethod
    def from_dtype(cls, dtype: Any) -> "ElementType":
        """Returns element type for a numpy dtype, ignoring byte order.

        Raises:
            UnsupportedLayoutError: If dtype does not match any element type.
        """
        try:
            dt = np.dtype(dtype)
        except TypeError:
            raise UnsupportedLayoutError(f"Invalid data type {dtype!r}.")
        for et in cls:
            if (dt.kind, dt.itemsize) == (et.dtype.kind, et.dtype.itemsize):
                return et
        raise UnsupportedLayoutError(f"Unsupported data type {dt}.")


class LayoutInfo(NamedTuple):
    """Properties fixed by a pixel layout."""

    code: int
    element_type: ElementType
    channel_names: Tuple[str, ...]


_MONO = ("IMAGE",)
_LUMA_ALPHA = ("LUMA", "ALPHA")
_RGB = ("RED", "GREEN", "BLUE")
_RGBA = ("RED", "GREEN", "BLUE", "ALPHA")


class PixelLayout(Enum):
    """Enumerator for the supported pixel layouts.

    Attributes:
        MONO8: Luminance, 8 bit.
        MONO16: Luminance, 16 bit.
        LUMA_ALPHA8: Luminance with alpha, 8 bit.
        LUMA_ALPHA16: Luminance with alpha, 16 bit.
        RGB8: RGB, 8 bit per channel.
        RGB16: RGB, 16 bit per channel.
        RGB32F: RGB, 32 bit float per channel.
        RGBA8: RGB with alpha, 8 bit per channel.
        RGBA16: RGB with alpha, 16 bit per channel.
        RGBA32F: RGB with alpha, 32 bit float per channel.
    """

    MONO8 = "mono8"
    MONO16 = "mono16"
    LUMA_ALPHA8 = "luma_alpha8"
    LUMA_ALPHA16 = "luma_alpha16"
    RGB8 = "rgb8"
    RGB16 = "rgb16"
    RGB32F = "rgb32f"
    RGBA8 = "rgba8"
    RGBA16 = "rgba16"
    RGBA32F = "rgba32f"

    @property
    def info(self) -> LayoutInfo:
        return _LAYOUTS[self]

    @property
    def code(self) -> int:
        """Numeric code used in serialized images."""
        return _LAYOUTS[self].code

    @property
    def element_type(self) -> ElementType:
        return _LAYOUTS[self].element_type

    @property
    def dtype(self) -> np.dtype:
        return _LAYOUTS[self].element_type.dtype

    @property
    def channels(self) -> int:
        return len(_LAYOUTS[self].channel_names)

    @property
    def channel_names(self) -> Tuple[str, ...]:
        """Names of channels in storage order, which are also used as FITS extension names."""
        return _LAYOUTS[self].channel_names

    @classmethod
    def from_code(cls, code: int) -> "PixelLayout":
        """Returns layout for a numeric code.

        Args:
            code: Code as returned by :attr:`PixelLayout.code`.

        Returns:
            Pixel layout.

        Raises:
            UnsupportedLayoutError: If code is unknown.
        """
        if isinstance(code, bool) or not isinstance(code, (int, np.integer)) or int(code) not in _BY_CODE:
            raise UnsupportedLayoutError(f"Unknown pixel layout code {code!r}.")
        return _BY_CODE[int(code)]

    @classmethod
    def from_dtype(cls, dtype: Any, channels: int) -> "PixelLayout":
        """Returns the layout for the given element dtype and number of channels.

        Args:
            dtype: Numpy dtype of elements, byte order is ignored.
            channels: Number of channels.

        Returns:
            Pixel layout.

        Raises:
            UnsupportedLayoutError: If there is no such layout.
        """
        element_type = ElementType.from_dtype(dtype)
        try:
            return _BY_TYPE[element_type, channels]
        except KeyError:
            raise UnsupportedLayoutError(f"No pixel layout with {channels} channel(s) of type {element_type.value}.")


# codes are persisted in serialized images, never change them
_LAYOUTS: Dict[PixelLayout, LayoutInfo] = {
    PixelLayout.MONO8: LayoutInfo(0, ElementType.UINT8, _MONO),
    PixelLayout.LUMA_ALPHA8: LayoutInfo(1, ElementType.UINT8, _LUMA_ALPHA),
    PixelLayout.RGB8: LayoutInfo(2, ElementType.UINT8, _RGB),
    PixelLayout.RGBA8: LayoutInfo(3, ElementType.UINT8, _RGBA),
    PixelLayout.MONO16: LayoutInfo(4, ElementType.UINT16, _MONO),
    PixelLayout.LUMA_ALPHA16: LayoutInfo(5, ElementType.UINT16, _LUMA_ALPHA),
    PixelLayout.RGB16: LayoutInfo(6, ElementType.UINT16, _RGB),
    PixelLayout.RGBA16: LayoutInfo(7, ElementType.UINT16, _RGBA),
    PixelLayout.RGB32F: LayoutInfo(8, ElementType.FLOAT32, _RGB),
    PixelLayout.RGBA32F: LayoutInfo(9, ElementType.FLOAT32, _RGBA),
}
_BY_CODE: Dict[int, PixelLayout] = {info.code: layout for layout, info in _LAYOUTS.items()}
_BY_TYPE: Dict[Tuple[ElementType, int], PixelLayout] = {
    (info.element_type, len(info.channel_names)): layout for layout, info in _LAYOUTS.items()
}


__all__ = ["ElementType", "PixelLayout", "LayoutInfo"]
