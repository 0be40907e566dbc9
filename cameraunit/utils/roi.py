from typing import NamedTuple


class ROI(NamedTuple):
    """Region of interest on a detector, in binned pixel space.

    Setting all values to zero requests the full detector.
    """

    x_min: int = 0
    y_min: int = 0
    width: int = 0
    height: int = 0
    bin_x: int = 1
    bin_y: int = 1

    @property
    def is_full_frame(self) -> bool:
        return self.x_min == 0 and self.y_min == 0 and self.width == 0 and self.height == 0

    def __str__(self) -> str:
        return (
            f"ROI: Origin = ({self.x_min}, {self.y_min}), Image Size = ({self.width} x {self.height}), "
            f"Bin = ({self.bin_x}, {self.bin_y})"
        )


__all__ = ["ROI"]
