"""
Enumerations shared between camera drivers and the image model.
"""
__title__ = "Enumerations"

from enum import Enum


class ExposureStatus(Enum):
    """Enumerator for camera status.

    Attributes:
        IDLE: Camera is idle, i.e. ready for work.
        EXPOSING: Camera is currently exposing.
        READOUT: Camera is currently reading out.
        ERROR: Camera is in error state.
    """

    IDLE = "idle"
    EXPOSING = "exposing"
    READOUT = "readout"
    ERROR = "error"


class PixelBpp(Enum):
    """Enumerator for the pixel bit depth delivered by a camera.

    Attributes:
        BPP8: 8 bits per pixel. This is the default.
        BPP10: 10 bits per pixel.
        BPP12: 12 bits per pixel.
        BPP16: 16 bits per pixel.
        BPP24: 24 bits per pixel.
        BPP32: 32 bits per pixel.
    """

    BPP8 = 8
    BPP10 = 10
    BPP12 = 12
    BPP16 = 16
    BPP24 = 24
    BPP32 = 32

    @classmethod
    def from_bits(cls, bits: int) -> "PixelBpp":
        """Returns the bit depth for the given number of bits, falling back to BPP8 for unknown values."""
        try:
            return cls(bits)
        except ValueError:
            return cls.BPP8


__all__ = ["ExposureStatus", "PixelBpp"]
