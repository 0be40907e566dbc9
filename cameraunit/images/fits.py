"""
Writing images with metadata to multi-extension FITS files and reading them back.
"""
from __future__ import annotations
__title__ = "FITS files"

import gzip
import io
import logging
import os
import re
from datetime import timedelta
from pathlib import Path
from typing import Any, List, Tuple, Union, TYPE_CHECKING

import numpy as np
from astropy.io import fits

from cameraunit.images.dynamic import DynamicImage
from cameraunit.images.layout import PixelLayout
from cameraunit.images.metadata import ImageMetaData, EPOCH
from cameraunit.utils.exceptions import (
    AlreadyExistsError,
    InvalidPathError,
    InvalidValueError,
    IoFailureError,
    UnsupportedLayoutError,
)

if TYPE_CHECKING:
    from cameraunit.images.image import ImageData

log = logging.getLogger(__name__)

# keywords written by write_fits, which are not returned as extended metadata
_KNOWN_KEYS = {
    "PROGRAM",
    "CAMERA",
    "TIMESTAMP",
    "CCDTEMP",
    "EXPOSURE_US",
    "ORIGIN_X",
    "ORIGIN_Y",
    "BINX",
    "BINY",
    "GAIN",
    "OFFSET",
    "GAIN_MIN",
    "GAIN_MAX",
    "CHANNELS",
    "EXTNAME",
}

# keywords written by astropy itself and commentary cards
_STRUCTURAL_KEYS = {
    "SIMPLE",
    "BITPIX",
    "NAXIS",
    "NAXIS1",
    "NAXIS2",
    "EXTEND",
    "BZERO",
    "BSCALE",
    "COMMENT",
    "HISTORY",
    "",
}

# keywords reserved by the FITS standard for the structure of an extension
_RESERVED_KEYS = _STRUCTURAL_KEYS | {"XTENSION", "PCOUNT", "GCOUNT", "GROUPS", "BLANK", "EXTVER", "END", "CONTINUE"}


def _keyword(key: str) -> str:
    """Returns the keyword for a card, using HIERARCH for long ones."""
    return key if len(key) <= 8 else f"HIERARCH {key}"


def _check_extended_key(key: str) -> None:
    """Raises InvalidValueError for extended keys that clash with structural or standard cards."""
    name = key.strip().upper()
    if name in _RESERVED_KEYS or name in _KNOWN_KEYS or re.fullmatch(r"NAXIS\d*", name):
        raise InvalidValueError(f"Extended attribute {key!r} clashes with a reserved FITS keyword.")


def _fill_header(header: fits.Header, progname: str, meta: ImageMetaData, channels: int, extname: str) -> None:
    """Appends name and metadata to the header of the primary extension.

    Raises:
        InvalidValueError: If a card cannot be written, e.g. for non-ASCII values or reserved keywords.
    """

    # times as integers
    timestamp = (meta.timestamp - EPOCH) // timedelta(milliseconds=1)
    exposure = meta.exposure // timedelta(microseconds=1)

    # standard cards first, extended ones in their original order
    cards: List[Tuple[str, Any]] = [
        ("EXTNAME", extname),
        ("PROGRAM", progname),
        ("CAMERA", meta.camera_name),
        ("TIMESTAMP", timestamp),
        ("CCDTEMP", meta.temperature),
        ("EXPOSURE_US", exposure),
        ("ORIGIN_X", meta.img_left),
        ("ORIGIN_Y", meta.img_top),
        ("BINX", meta.bin_x),
        ("BINY", meta.bin_y),
        ("GAIN", meta.gain),
        ("OFFSET", meta.offset),
        ("GAIN_MIN", meta.min_gain),
        ("GAIN_MAX", meta.max_gain),
        ("CHANNELS", channels),
    ]
    for key, _ in meta.extended_metadata:
        _check_extended_key(key)
    cards.extend(meta.extended_metadata)

    # append, so that duplicate keys are kept
    for key, value in cards:
        try:
            card = fits.Card(_keyword(key), value)
            card.verify("exception")
            _ = card.image
        except (ValueError, fits.VerifyError) as e:
            raise InvalidValueError(f"Cannot write header card {key}={value!r}: {e}") from e
        header.append(card, end=True)


def _hdu_list(progname: str, image: DynamicImage, meta: ImageMetaData) -> fits.HDUList:
    """Splits the image into one extension per channel, named after the channel."""
    names = image.layout.channel_names

    # first channel goes into primary HDU together with all metadata
    primary = fits.PrimaryHDU(image.channel(0))
    _fill_header(primary.header, progname, meta, len(names), names[0])
    hdu_list = fits.HDUList([primary])

    # all others in separate extensions
    for i, name in enumerate(names[1:], 1):
        hdu_list.append(fits.ImageHDU(image.channel(i), name=name))
    return hdu_list


def fits_filename(file_prefix: str, meta: ImageMetaData, compress: bool = False) -> str:
    """Returns the file name for an image.

    Args:
        file_prefix: Prefix for file name, if empty, the camera name is used, and "image" if that is empty as well.
        meta: Metadata of image.
        compress: Whether to return the name of a compressed file.

    Returns:
        File name of form {prefix}_{timestamp in ms}.fits
    """
    prefix = file_prefix.strip() if file_prefix else ""
    if prefix == "":
        prefix = meta.camera_name.strip() or "image"
    timestamp = (meta.timestamp - EPOCH) // timedelta(milliseconds=1)
    return f"{prefix}_{timestamp}.fits" + (".gz" if compress else "")


def write_fits(
    directory: Union[str, Path],
    file_prefix: str,
    progname: str,
    compress: bool,
    overwrite: bool,
    image: DynamicImage,
    meta: ImageMetaData,
) -> str:
    """Writes an image with its metadata to a FITS file.

    Each channel of the image is written to its own extension, named after the channel (see
    :attr:`PixelLayout.channel_names`), with the metadata in the header of the primary extension.

    Args:
        directory: Existing directory to write file to.
        file_prefix: Prefix for file name, see :func:`fits_filename`.
        progname: Name of program writing the file.
        compress: Whether to write a gzip-compressed file.
        overwrite: Whether to replace an existing file.
        image: Image to write.
        meta: Metadata for image.

    Returns:
        Path of written file.

    Raises:
        InvalidPathError: If directory does not exist.
        InvalidValueError: If timestamp is before the epoch or metadata cannot be written to the header.
        UnsupportedLayoutError: If image cannot be written.
        AlreadyExistsError: If file exists and overwrite is not set.
        IoFailureError: If the existing file cannot be removed or writing fails.
    """

    # check
    if not os.path.isdir(directory):
        raise InvalidPathError(f"Directory {directory} does not exist.")
    if meta.timestamp < EPOCH:
        raise InvalidValueError(f"Timestamp {meta.timestamp} is before the epoch.")
    if not isinstance(image, DynamicImage) or not isinstance(image.layout, PixelLayout):
        raise UnsupportedLayoutError(f"Cannot write {image!r} to FITS file.")

    # create file in memory
    try:
        with io.BytesIO() as bio:
            _hdu_list(progname, image, meta).writeto(bio)
            content = bio.getvalue()
    except fits.VerifyError as e:
        raise InvalidValueError(f"Invalid FITS header: {e}") from e
    if compress:
        content = gzip.compress(content)

    # existing file?
    path = os.path.join(directory, fits_filename(file_prefix, meta, compress))
    if os.path.exists(path):
        log.warning("File %s already exists.", path)
        if not overwrite:
            raise AlreadyExistsError(f"File {path} already exists.")
        log.info("Overwriting file %s...", path)
        try:
            os.remove(path)
        except OSError as e:
            raise IoFailureError(f"Could not remove file {path}: {e}") from e

    # write it
    try:
        with open(path, "xb") as f:
            f.write(content)
    except FileExistsError as e:
        raise AlreadyExistsError(f"File {path} already exists.") from e
    except OSError as e:
        if os.path.exists(path):
            os.remove(path)
        raise IoFailureError(f"Could not write file {path}: {e}") from e

    log.info("Wrote image to %s.", path)
    return path


def read_fits(filename: Union[str, Path]) -> ImageData:
    """Reads an image with metadata from a FITS file written by :func:`write_fits`.

    Args:
        filename: Name of file, may be gzip-compressed.

    Returns:
        Image data.

    Raises:
        IoFailureError: If file cannot be read.
        UnsupportedLayoutError: If file does not contain the expected extensions or its header is invalid.
    """
    from cameraunit.images.image import ImageData

    try:
        with fits.open(filename, memmap=False) as hdu_list:
            header = hdu_list[0].header.copy()
            channels = header.get("CHANNELS", 1)
            if isinstance(channels, bool) or not isinstance(channels, int) or not 1 <= channels <= 4:
                raise UnsupportedLayoutError(f"Invalid number of channels {channels!r} in file {filename}.")

            # collect channels
            planes = []
            for i in range(channels):
                if i >= len(hdu_list) or hdu_list[i].data is None:
                    raise UnsupportedLayoutError(f"File {filename} has no data for channel {i}.")
                planes.append(np.array(hdu_list[i].data))
            names = [hdu.name for hdu in hdu_list[:channels]]
    except OSError as e:
        raise IoFailureError(f"Could not read file {filename}: {e}") from e
    except (TypeError, ValueError) as e:
        raise UnsupportedLayoutError(f"Could not read data from file {filename}: {e}") from e

    # all planes must be 2D and of same shape
    if any(p.ndim != 2 or p.shape != planes[0].shape for p in planes):
        raise UnsupportedLayoutError(f"Channels in file {filename} have shapes {[p.shape for p in planes]}.")

    # get layout and check channel names
    layout = PixelLayout.from_dtype(planes[0].dtype, channels)
    if tuple(names) != layout.channel_names:
        raise UnsupportedLayoutError(f"Unexpected extensions {names} for layout {layout.name}.")
    data = planes[0] if channels == 1 else np.stack(planes, axis=-1)
    image = DynamicImage(data.astype(layout.dtype), layout)

    # metadata
    try:
        meta = ImageMetaData(
            camera_name=str(header.get("CAMERA", "")),
            timestamp=EPOCH + timedelta(milliseconds=int(header.get("TIMESTAMP", 0))),
            temperature=float(header.get("CCDTEMP", 0.0)),
            exposure=timedelta(microseconds=int(header.get("EXPOSURE_US", 0))),
            img_left=int(header.get("ORIGIN_X", 0)),
            img_top=int(header.get("ORIGIN_Y", 0)),
            bin_x=int(header.get("BINX", 1)),
            bin_y=int(header.get("BINY", 1)),
            gain=int(header.get("GAIN", 0)),
            offset=int(header.get("OFFSET", 0)),
            min_gain=int(header.get("GAIN_MIN", 0)),
            max_gain=int(header.get("GAIN_MAX", 0)),
        )
    except (TypeError, ValueError, OverflowError, InvalidValueError) as e:
        raise UnsupportedLayoutError(f"Invalid metadata in file {filename}: {e}") from e
    for card in header.cards:
        if card.keyword not in _KNOWN_KEYS and card.keyword not in _STRUCTURAL_KEYS:
            meta.add_extended_attrib(card.keyword, str(card.value))
    return ImageData(image, meta)


__all__ = ["write_fits", "read_fits", "fits_filename"]
