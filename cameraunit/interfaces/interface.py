from abc import ABCMeta


class Interface(object, metaclass=ABCMeta):
    """Base class for all camera interfaces in cameraunit."""

    __module__ = "cameraunit.interfaces"
    pass


__all__ = ["Interface"]
