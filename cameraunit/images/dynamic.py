from __future__ import annotations
from typing import Any, Dict

import numpy as np
from numpy.typing import NDArray

from cameraunit.images.layout import PixelLayout, ElementType
from cameraunit.utils.exceptions import ShapeMismatchError, UnsupportedLayoutError

# Pillow modes that map onto a pixel layout
_PIL_MODES: Dict[str, PixelLayout] = {
    "L": PixelLayout.MONO8,
    "LA": PixelLayout.LUMA_ALPHA8,
    "RGB": PixelLayout.RGB8,
    "RGBA": PixelLayout.RGBA8,
    "I;16": PixelLayout.MONO16,
}

# Rec. 709 luma weights
_LUMA_WEIGHTS = np.array([0.2126, 0.7152, 0.0722])


class DynamicImage:
    """Image whose pixel layout is only known at runtime.

    Pixels are stored in a C-contiguous numpy array of shape (height, width) for mono layouts, and
    (height, width, channels) for all others, with channels interleaved in the order given by the layout.
    """

    __module__ = "cameraunit.images"

    def __init__(self, data: NDArray[Any], layout: PixelLayout):
        """Creates a new image.

        Args:
            data: Pixel data, will be copied.
            layout: Pixel layout of data.

        Raises:
            UnsupportedLayoutError: If layout is unknown or dtype of data does not match it.
            ShapeMismatchError: If the shape of data does not match the layout.
        """
        if not isinstance(layout, PixelLayout):
            raise UnsupportedLayoutError(f"Unknown pixel layout {layout!r}.")
        data = np.asarray(data)

        # check shape, mono images may come with a channel axis of length one
        if layout.channels == 1 and data.ndim == 3 and data.shape[2] == 1:
            data = data[:, :, 0]
        expected_ndim = 2 if layout.channels == 1 else 3
        if data.ndim != expected_ndim or (expected_ndim == 3 and data.shape[2] != layout.channels):
            raise ShapeMismatchError(f"Array of shape {data.shape} does not fit layout {layout.name}.")

        # check type
        if ElementType.from_dtype(data.dtype) != layout.element_type:
            raise UnsupportedLayoutError(f"Data of type {data.dtype} does not fit layout {layout.name}.")

        # store native, contiguous copy
        self._layout = layout
        self._data: NDArray[Any] = np.array(data, dtype=layout.dtype, order="C", copy=True)

    @classmethod
    def from_array(cls, data: NDArray[Any]) -> DynamicImage:
        """Creates an image from an array, deriving the layout from its dtype and shape.

        Args:
            data: 2D array for mono images or 3D array with channels along last axis.

        Returns:
            New image.

        Raises:
            UnsupportedLayoutError: If no layout matches the array.
        """
        data = np.asarray(data)
        if data.ndim == 2:
            channels = 1
        elif data.ndim == 3:
            channels = data.shape[2]
        else:
            raise UnsupportedLayoutError(f"Cannot derive pixel layout for array with {data.ndim} dimensions.")
        return cls(data, PixelLayout.from_dtype(data.dtype, channels))

    @classmethod
    def from_pil(cls, image: Any) -> DynamicImage:
        """Creates an image from a Pillow image.

        Args:
            image: Pillow image in mode L, LA, RGB, RGBA or I;16.

        Returns:
            New image.

        Raises:
            UnsupportedLayoutError: For any other mode, e.g. palette images.
        """
        if image.mode not in _PIL_MODES:
            raise UnsupportedLayoutError(f"Unsupported image mode {image.mode}.")
        return cls(np.asarray(image), _PIL_MODES[image.mode])

    def to_pil(self) -> Any:
        """Returns a Pillow image with the same pixels.

        Raises:
            UnsupportedLayoutError: If Pillow has no mode for this layout.
        """

        # import PIL Image
        import PIL.Image

        if self._layout not in _PIL_MODES.values():
            raise UnsupportedLayoutError(f"Layout {self._layout.name} cannot be converted to a Pillow image.")
        return PIL.Image.fromarray(self._data)

    @property
    def layout(self) -> PixelLayout:
        return self._layout

    @property
    def data(self) -> NDArray[Any]:
        """Pixel data, not to be modified."""
        return self._data

    @property
    def width(self) -> int:
        return int(self._data.shape[1])

    @property
    def height(self) -> int:
        return int(self._data.shape[0])

    @property
    def channels(self) -> int:
        return self._layout.channels

    def channel(self, index: int) -> NDArray[Any]:
        """Returns a 2D view on a single channel.

        Args:
            index: Index of channel in layout order.

        Returns:
            Array of shape (height, width).
        """
        if not 0 <= index < self.channels:
            raise IndexError(f"Layout {self._layout.name} has no channel {index}.")
        return self._data if self.channels == 1 else self._data[:, :, index]

    def to_luma16(self) -> NDArray[np.uint16]:
        """Returns the intensity of each pixel in the 16 bit domain.

        8 bit values are scaled by 257, float values in [0, 1] by 65535. Colour images are reduced using Rec. 709
        luma weights, alpha channels are ignored.

        Returns:
            Array of shape (height, width).
        """

        # scale to 16 bit domain
        et = self._layout.element_type
        if et == ElementType.UINT8:
            values = self._data.astype(np.float64) * 257.0
        elif et == ElementType.UINT16:
            values = self._data.astype(np.float64)
        else:
            values = np.clip(np.nan_to_num(self._data.astype(np.float64)), 0.0, 1.0) * 65535.0

        # reduce channels
        if self.channels == 1:
            luma = values
        elif self.channels == 2:
            luma = values[:, :, 0]
        else:
            luma = values[:, :, :3] @ _LUMA_WEIGHTS

        # round and convert
        return np.clip(np.rint(luma), 0, 65535).astype(np.uint16)

    def copy(self) -> DynamicImage:
        return DynamicImage(self._data, self._layout)

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, DynamicImage):
            return NotImplemented
        equal_nan = self._layout.element_type == ElementType.FLOAT32
        return self._layout == other._layout and np.array_equal(self._data, other._data, equal_nan=equal_nan)

    def __repr__(self) -> str:
        return f"DynamicImage({self.width}x{self.height}, {self._layout.name})"


__all__ = ["DynamicImage"]
