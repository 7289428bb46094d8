"""Level scaling for nanopore events"""

from dataclasses import dataclass

import numpy as np

from .constants import MAD_TO_STD


@dataclass(frozen=True)
class ScalingParameters:
    """Shift/scale pair mapping pA levels onto a canonical scale"""

    shift: float
    scale: float

    def apply(self, level: float) -> float:
        """Fully scale a single level: (level - shift) / scale"""
        return (level - self.shift) / self.scale


def estimate_scaling(signal: np.ndarray) -> ScalingParameters:
    """Median absolute deviation (MAD) scaling estimate

    Robust against outliers; the shift is the signal median and the scale
    is the MAD made consistent with the standard deviation.

    Args:
        signal: Calibrated signal array (pA)

    Returns:
        ScalingParameters for the read. A flat or empty signal gets scale 1.
    """
    if len(signal) == 0:
        return ScalingParameters(shift=0.0, scale=1.0)

    median = float(np.median(signal))
    mad = float(np.median(np.abs(signal - median)))
    if mad == 0:
        return ScalingParameters(shift=median, scale=1.0)
    return ScalingParameters(shift=median, scale=MAD_TO_STD * mad)
