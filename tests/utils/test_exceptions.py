import pytest

from cameraunit.utils import exceptions as exc


def test_str() -> None:
    assert str(exc.InvalidValueError("Out of range.")) == "<InvalidValueError> Out of range."
    assert str(exc.CameraUnitError()) == "<CameraUnitError>"


def test_message() -> None:
    e = exc.IoFailureError("Disk full.")
    assert e.message == "Disk full."
    assert e.args == ("Disk full.",)


def test_not_implemented() -> None:
    e = exc.NotImplementedByCameraError()
    assert e.message == "Not implemented"
    assert isinstance(e, exc.CameraError)


@pytest.mark.parametrize(
    "error",
    [
        exc.InvalidValueError,
        exc.UnsupportedLayoutError,
        exc.ShapeMismatchError,
        exc.InvalidPathError,
        exc.AlreadyExistsError,
        exc.IoFailureError,
        exc.CameraError,
        exc.ExposureInProgressError,
        exc.ExposureFailedError,
    ],
)
def test_hierarchy(error) -> None:
    with pytest.raises(exc.CameraUnitError):
        raise error("test")
