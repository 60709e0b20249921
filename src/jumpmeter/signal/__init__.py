"""Signal conditioning: vector math, smoothing, and gravity calibration."""

from jumpmeter.signal.calibration import Calibrator, calibrate, calibration_from_gravity
from jumpmeter.signal.filters import ExponentialSmoother, NoiseFloorFilter, SignalFilter

__all__ = [
    "Calibrator",
    "calibrate",
    "calibration_from_gravity",
    "ExponentialSmoother",
    "NoiseFloorFilter",
    "SignalFilter",
]
