from typing import Optional


class CameraUnitError(Exception):
    """Base class for all exceptions"""

    def __init__(self, message: Optional[str] = None):
        Exception.__init__(self, message)
        self.message = message

    def __str__(self) -> str:
        msg = f"<{self.__class__.__name__}>"
        if self.message is not None:
            msg += f" {self.message}"
        return msg


#######################################


class InvalidValueError(CameraUnitError):
    """A parameter is outside its allowed range."""

    pass


class UnsupportedLayoutError(CameraUnitError):
    """A pixel layout is outside the supported set for the requested operation."""

    pass


class ShapeMismatchError(CameraUnitError):
    """Buffer length does not match width x height x channels."""

    pass


class InvalidPathError(CameraUnitError):
    pass


class AlreadyExistsError(CameraUnitError):
    pass


class IoFailureError(CameraUnitError):
    """Reading, writing or deleting a file failed."""

    pass


#######################################


class CameraError(CameraUnitError):
    """Exception for anything raised by a camera driver."""

    pass


class NotImplementedByCameraError(CameraError):
    def __init__(self, message: Optional[str] = "Not implemented"):
        CameraError.__init__(self, message)


class ExposureInProgressError(CameraError):
    pass


class ExposureFailedError(CameraError):
    pass


__all__ = [
    "CameraUnitError",
    "InvalidValueError",
    "UnsupportedLayoutError",
    "ShapeMismatchError",
    "InvalidPathError",
    "AlreadyExistsError",
    "IoFailureError",
    "CameraError",
    "NotImplementedByCameraError",
    "ExposureInProgressError",
    "ExposureFailedError",
]
