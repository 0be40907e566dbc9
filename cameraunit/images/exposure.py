from __future__ import annotations
import logging
import math
from datetime import timedelta
from typing import Any, Dict, Sequence, Tuple, Union, TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray
from pydantic import BaseModel, ConfigDict, ValidationError, model_validator

from cameraunit.images.metadata import ImageMetaData
from cameraunit.utils.exceptions import InvalidValueError

if TYPE_CHECKING:
    from cameraunit.images.image import ImageData

log = logging.getLogger(__name__)

# smallest fraction of full scale that is still distinguishable from zero in 16 bit
MIN_PIXEL_FRACTION = 1.6e-5

# stand-in for a pixel value that could not be sampled
SENTINEL_VALUE = 1e-5


def check_exposure_parameters(
    percentile_pix: float,
    pixel_tgt: float,
    pixel_uncertainty: float,
    min_allowed_exp: timedelta,
    max_allowed_exp: timedelta,
    pixel_exclusion: int,
) -> None:
    """Validates the parameters of the exposure optimizer.

    Raises:
        InvalidValueError: If any parameter is outside its allowed range.
    """
    if not MIN_PIXEL_FRACTION <= pixel_tgt <= 1.0:
        raise InvalidValueError(f"Target pixel value must be between {MIN_PIXEL_FRACTION} and 1, got {pixel_tgt}.")
    if not MIN_PIXEL_FRACTION <= pixel_uncertainty <= 1.0:
        raise InvalidValueError(
            f"Pixel uncertainty must be between {MIN_PIXEL_FRACTION} and 1, got {pixel_uncertainty}."
        )
    if not 0.0 <= percentile_pix <= 100.0:
        raise InvalidValueError(f"Percentile must be between 0 and 100, got {percentile_pix}.")
    if min_allowed_exp >= max_allowed_exp:
        raise InvalidValueError("Minimum allowed exposure must be less than maximum allowed exposure.")
    if pixel_exclusion < 0:
        raise InvalidValueError(f"Number of excluded pixels must not be negative, got {pixel_exclusion}.")


def _sample(pixels: Union[NDArray[Any], Sequence[float]], percentile_pix: float, pixel_exclusion: int) -> float:
    """Returns the pixel value at the given percentile of a sorted sample."""
    count = len(pixels)
    if count == 0:
        log.info("Could not get pixel value at %.1f percentile from empty sample.", percentile_pix)
        return SENTINEL_VALUE

    # index at percentile, keeping clear of the brightest pixels
    index = count - 1 if percentile_pix > 99.9 else math.floor(percentile_pix * (count - 1) * 0.01)
    if index > count - 1 - pixel_exclusion:
        index = count - 1 - pixel_exclusion
    log.info("Pixel index: %d out of %d", index, count)

    if index < 0:
        log.info("Could not get pixel value at %.1f percentile.", percentile_pix)
        return SENTINEL_VALUE
    return float(pixels[index])


def find_optimum_exposure(
    meta: ImageMetaData,
    pixels: Union[NDArray[Any], Sequence[float]],
    percentile_pix: float,
    pixel_tgt: float,
    pixel_uncertainty: float,
    min_allowed_exp: timedelta,
    max_allowed_exp: timedelta,
    max_allowed_bin: int,
    pixel_exclusion: int,
) -> Tuple[timedelta, int]:
    """Finds the exposure time and binning that bring a pixel percentile to the target value.

    The new exposure is scaled linearly from the current one. If binning is allowed and the image is binned
    symmetrically, the binning is traded against exposure time assuming that each binning step changes the
    signal by a factor of four.

    Args:
        meta: Metadata of the image the sample was taken from.
        pixels: Pixel intensities in the 16 bit domain, sorted ascending.
        percentile_pix: Percentile of the pixel to use, in [0, 100].
        pixel_tgt: Target value for that pixel as fraction of full scale, in [1.6e-5, 1].
        pixel_uncertainty: Accepted deviation from target as fraction of full scale, in [1.6e-5, 1].
        min_allowed_exp: Minimum exposure time.
        max_allowed_exp: Maximum exposure time, must be larger than minimum.
        max_allowed_bin: Maximum binning, values below 2 disable changing the binning.
        pixel_exclusion: Number of brightest pixels to ignore, e.g. for hot pixels.

    Returns:
        Tuple of new exposure time and binning.

    Raises:
        InvalidValueError: If any parameter is invalid.
    """
    check_exposure_parameters(
        percentile_pix, pixel_tgt, pixel_uncertainty, min_allowed_exp, max_allowed_exp, pixel_exclusion
    )

    # binning
    max_bin = max_allowed_bin if max_allowed_bin >= 2 else 1
    change_bin = meta.bin_x == meta.bin_y and max_bin >= 2
    binning = meta.bin_x

    # into 16 bit domain
    target = pixel_tgt * 65535.0
    uncertainty = pixel_uncertainty * 65535.0

    exposure = meta.exposure
    log.info("Input: exposure = %.3f s, bin = %d", exposure.total_seconds(), binning)

    # sample and check
    value = _sample(pixels, percentile_pix, pixel_exclusion)
    if abs(target - value) < uncertainty:
        log.info(
            "Target pixel value %.1f reached at exposure = %.3f s, bin = %d, unchanged.",
            target,
            exposure.total_seconds(),
            binning,
        )
        return exposure, binning

    # scale exposure
    value = max(value, SENTINEL_VALUE)
    new_exp = abs(target * exposure.total_seconds() / value)

    # trade binning against exposure
    max_exp = max_allowed_exp.total_seconds()
    if change_bin:
        if new_exp < max_exp:
            while new_exp < max_exp and binning > 2:
                binning //= 2
                new_exp *= 4.0
        else:
            while new_exp > max_exp and binning * 2 <= max_bin:
                binning *= 2
                new_exp /= 4.0

    # clamp
    binning = min(max(binning, 1), max_bin)
    if new_exp > max_exp:
        result = max_allowed_exp
    elif new_exp < min_allowed_exp.total_seconds():
        result = min_allowed_exp
    else:
        result = timedelta(seconds=new_exp)
    log.info("Target exposure = %.3f s, bin = %d", result.total_seconds(), binning)
    return result, binning


class OptimumExposure(BaseModel):
    """
    Settings for finding the optimum exposure time and binning of a camera.

    Holds the parameters of :func:`find_optimum_exposure` with sensible defaults, so a camera application can keep
    one instance around and apply it to every new image.

    :param float percentile_pix: Percentile of the pixel used for the estimate. Default: ``95.0``.
    :param float pixel_tgt: Target value for that pixel as fraction of full scale. Default: ``40000/65535``.
    :param float pixel_uncertainty: Accepted deviation from target as fraction of full scale.
                                    Default: ``5000/65535``.
    :param timedelta min_allowed_exp: Minimum exposure time. Default: 1 µs.
    :param timedelta max_allowed_exp: Maximum exposure time. Default: 10 s.
    :param int max_allowed_bin: Maximum binning, below 2 the binning is never changed. Default: ``1``.
    :param int pixel_exclusion: Number of brightest pixels to ignore. Default: ``100``.

    Configuration (YAML)
    --------------------
    Exposure times are given in seconds:

    .. code-block:: yaml

       percentile_pix: 99
       pixel_tgt: 0.5
       max_allowed_exp: 30
       max_allowed_bin: 4
    """

    model_config = ConfigDict(validate_assignment=True)

    percentile_pix: float = 95.0
    pixel_tgt: float = 40000.0 / 65535.0
    pixel_uncertainty: float = 5000.0 / 65535.0
    min_allowed_exp: timedelta = timedelta(microseconds=1)
    max_allowed_exp: timedelta = timedelta(seconds=10)
    max_allowed_bin: int = 1
    pixel_exclusion: int = 100

    @model_validator(mode="after")
    def _check(self) -> "OptimumExposure":
        check_exposure_parameters(
            self.percentile_pix,
            self.pixel_tgt,
            self.pixel_uncertainty,
            self.min_allowed_exp,
            self.max_allowed_exp,
            self.pixel_exclusion,
        )
        return self

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "OptimumExposure":
        """Creates settings from a configuration dictionary, e.g. loaded via :func:`load_config`.

        Raises:
            InvalidValueError: If the configuration is invalid.
        """
        try:
            return cls(**config)
        except ValidationError as e:
            raise InvalidValueError(str(e)) from e

    def calculate(self, image: "ImageData") -> Tuple[timedelta, int]:
        """Finds optimum exposure time and binning for the given image.

        Args:
            image: Image to analyse.

        Returns:
            Tuple of new exposure time and binning.
        """
        return find_optimum_exposure(
            image.metadata,
            np.sort(image.image.to_luma16(), axis=None),
            self.percentile_pix,
            self.pixel_tgt,
            self.pixel_uncertainty,
            self.min_allowed_exp,
            self.max_allowed_exp,
            self.max_allowed_bin,
            self.pixel_exclusion,
        )


__all__ = ["find_optimum_exposure", "check_exposure_parameters", "OptimumExposure"]
