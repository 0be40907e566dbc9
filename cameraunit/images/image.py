from __future__ import annotations
import logging
from datetime import timedelta
from pathlib import Path
from typing import Any, Optional, Tuple, Union

import numpy as np

from cameraunit.images.dynamic import DynamicImage
from cameraunit.images.exposure import find_optimum_exposure
from cameraunit.images.metadata import ImageMetaData
from cameraunit.utils.exceptions import UnsupportedLayoutError

log = logging.getLogger(__name__)


class ImageData:
    """Image with metadata, as returned by a camera."""

    __module__ = "cameraunit.images"

    def __init__(self, image: DynamicImage, meta: Optional[ImageMetaData] = None):
        """Init new image data.

        Args:
            image: The image.
            meta: Metadata for the image, will be copied.
        """
        if not isinstance(image, DynamicImage):
            raise UnsupportedLayoutError(f"Expected a DynamicImage, got {type(image).__name__}.")

        # store
        self._image = image
        self._meta = ImageMetaData() if meta is None else meta.copy()

    @classmethod
    def from_buffer(cls, buffer: Any) -> ImageData:
        """Create image data from a pixel buffer.

        Args:
            buffer: Pixel buffer to convert.

        Returns:
            New image data.
        """
        from cameraunit.images.convert import from_typed_buffer

        return from_typed_buffer(buffer)

    @classmethod
    def from_file(cls, filename: Union[str, Path]) -> ImageData:
        """Create image data from a FITS file written by :meth:`save_fits`."""
        from cameraunit.images.fits import read_fits

        return read_fits(filename)

    @property
    def image(self) -> DynamicImage:
        return self._image

    @image.setter
    def image(self, image: DynamicImage) -> None:
        if not isinstance(image, DynamicImage):
            raise UnsupportedLayoutError(f"Expected a DynamicImage, got {type(image).__name__}.")
        self._image = image

    @property
    def metadata(self) -> ImageMetaData:
        """Returns a copy of the metadata."""
        return self._meta.copy()

    @metadata.setter
    def metadata(self, meta: ImageMetaData) -> None:
        self._meta = meta.copy()

    @property
    def width(self) -> int:
        return self._image.width

    @property
    def height(self) -> int:
        return self._image.height

    def add_extended_attrib(self, key: str, value: str) -> None:
        """Add an extended attribute to the metadata.

        Args:
            key: Name of attribute.
            value: Value of attribute.
        """
        self._meta.add_extended_attrib(key, value)

    def find_optimum_exposure(
        self,
        percentile_pix: float,
        pixel_tgt: float,
        pixel_uncertainty: float,
        min_allowed_exp: timedelta,
        max_allowed_exp: timedelta,
        max_allowed_bin: int,
        pixel_exclusion: int,
    ) -> Tuple[timedelta, int]:
        """Find the exposure time and binning that bring the given percentile of pixels to the target value.

        Args:
            percentile_pix: Percentile of the pixel to use, in [0, 100].
            pixel_tgt: Target value for that pixel as fraction of full scale.
            pixel_uncertainty: Accepted deviation from target as fraction of full scale.
            min_allowed_exp: Minimum exposure time.
            max_allowed_exp: Maximum exposure time.
            max_allowed_bin: Maximum binning, values below 2 disable changing the binning.
            pixel_exclusion: Number of brightest pixels to ignore.

        Returns:
            Tuple of new exposure time and binning.

        Raises:
            InvalidValueError: If any parameter is invalid.
        """
        pixels = np.sort(self._image.to_luma16(), axis=None)
        return find_optimum_exposure(
            self._meta,
            pixels,
            percentile_pix,
            pixel_tgt,
            pixel_uncertainty,
            min_allowed_exp,
            max_allowed_exp,
            max_allowed_bin,
            pixel_exclusion,
        )

    def save_fits(
        self,
        directory: Union[str, Path],
        file_prefix: str,
        progname: str,
        compress: bool = False,
        overwrite: bool = False,
    ) -> str:
        """Save image to a FITS file named {prefix}_{timestamp in ms}.fits.

        Args:
            directory: Existing directory to write file to.
            file_prefix: Prefix for file name, camera name is used if empty.
            progname: Name of program writing the file.
            compress: Whether to write a gzip-compressed file.
            overwrite: Whether to replace an existing file.

        Returns:
            Path of written file.
        """
        from cameraunit.images.fits import write_fits

        return write_fits(directory, file_prefix, progname, compress, overwrite, self._image, self._meta)

    def to_buffer(self) -> Any:
        """Returns a pixel buffer with the pixels and metadata of this image."""
        from cameraunit.images.convert import to_pixel_buffer

        return to_pixel_buffer(self._image, self._meta)

    def copy(self) -> ImageData:
        """Returns a copy of this image."""
        return ImageData(self._image.copy(), self._meta)

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, ImageData):
            return NotImplemented
        return self._image == other._image and self._meta == other._meta

    def __str__(self) -> str:
        return f"{self._meta}\n\tImage Size: {self.width} x {self.height} ({self._image.layout.name})"


__all__ = ["ImageData"]
