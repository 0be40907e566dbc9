from cameraunit.utils.enums import ExposureStatus, PixelBpp
from cameraunit.utils.roi import ROI


def test_bpp_from_bits() -> None:
    assert PixelBpp.from_bits(12) == PixelBpp.BPP12
    assert PixelBpp.from_bits(32) == PixelBpp.BPP32
    assert PixelBpp.from_bits(14) == PixelBpp.BPP8
    assert PixelBpp.from_bits(0) == PixelBpp.BPP8


def test_exposure_status() -> None:
    assert ExposureStatus("readout") == ExposureStatus.READOUT


def test_roi() -> None:
    assert ROI().is_full_frame
    roi = ROI(x_min=10, y_min=20, width=100, height=50, bin_x=2, bin_y=2)
    assert not roi.is_full_frame
    assert str(roi) == "ROI: Origin = (10, 20), Image Size = (100 x 50), Bin = (2, 2)"
    assert roi._replace(bin_x=1).bin_x == 1
