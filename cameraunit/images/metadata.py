from datetime import datetime, timedelta, timezone
from typing import Any, List, Tuple

from pydantic import BaseModel, ConfigDict, Field, NonNegativeInt, PositiveInt, ValidationError, field_validator

from cameraunit.utils.exceptions import InvalidValueError

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class ImageMetaData(BaseModel):
    """Acquisition parameters of an image.

    Metadata is a value: images and buffers always store their own copy.
    """

    model_config = ConfigDict(validate_assignment=True)

    bin_x: PositiveInt = 1
    bin_y: PositiveInt = 1
    img_top: NonNegativeInt = 0
    img_left: NonNegativeInt = 0
    temperature: float = 0.0
    exposure: timedelta = timedelta(0)
    timestamp: datetime = EPOCH
    camera_name: str = ""
    gain: int = 0
    offset: int = 0
    min_gain: int = 0
    max_gain: int = 0
    extended_metadata: List[Tuple[str, str]] = Field(default_factory=list)

    def __init__(self, **data: Any):
        """Creates new metadata.

        Args:
            bin_x: Binning in X direction.
            bin_y: Binning in Y direction.
            img_top: Top of image in binned pixels.
            img_left: Left of image in binned pixels.
            temperature: Detector temperature in celsius.
            exposure: Exposure time.
            timestamp: Time of acquisition, naive times are taken as UTC.
            camera_name: Name of the camera.
            gain: Gain in raw units.
            offset: Offset in raw units.
            min_gain: Minimum gain in raw units.
            max_gain: Maximum gain in raw units.
            extended_metadata: List of additional (key, value) pairs.

        Raises:
            InvalidValueError: If any value is invalid.
        """
        try:
            BaseModel.__init__(self, **data)
        except ValidationError as e:
            raise InvalidValueError(str(e)) from e

    def __setattr__(self, name: str, value: Any) -> None:
        try:
            BaseModel.__setattr__(self, name, value)
        except ValidationError as e:
            raise InvalidValueError(str(e)) from e

    @field_validator("exposure")
    @classmethod
    def _check_exposure(cls, value: timedelta) -> timedelta:
        if value < timedelta(0):
            raise ValueError("Exposure must not be negative.")
        return value

    @field_validator("timestamp")
    @classmethod
    def _utc_timestamp(cls, value: datetime) -> datetime:
        return value.replace(tzinfo=timezone.utc) if value.tzinfo is None else value

    def add_extended_attrib(self, key: str, value: str) -> None:
        """Add an extended attribute, which is appended after all existing ones.

        Keys need not be unique.

        Args:
            key: Name of attribute.
            value: Value of attribute.
        """
        self.extended_metadata.append((str(key), str(value)))

    def copy(self) -> "ImageMetaData":  # type: ignore[override]
        """Returns a deep copy of this metadata."""
        return self.model_copy(deep=True)

    def __str__(self) -> str:
        lines = [
            f"ImageMetaData [{self.timestamp.isoformat()}]:",
            f"\tCamera name: {self.camera_name}",
            f"\tImage Bin: {self.bin_x} x {self.bin_y}",
            f"\tImage Origin: {self.img_left} x {self.img_top}",
            f"\tExposure: {self.exposure.total_seconds()} s",
            f"\tGain: {self.gain}, Offset: {self.offset}",
            f"\tTemperature: {self.temperature} C",
        ]
        if len(self.extended_metadata) > 0:
            lines.append("\tExtended Metadata:")
            lines.extend(f"\t\t{key}: {value}" for key, value in self.extended_metadata)
        return "\n".join(lines)


__all__ = ["ImageMetaData", "EPOCH"]
