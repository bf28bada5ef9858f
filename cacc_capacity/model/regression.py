"""
CACC regression function derived from (Figure 8, Simulation):

Liu, Hao, et al. "Modeling impacts of Cooperative Adaptive Cruise Control on mixed traffic flow
in multi-lane freeway facilities." Transportation Research Part C: Emerging Technologies 95 (2018): 261-279.
"""

from typing import Union

import numpy as np

# cubic coefficients, highest power first (np.polyval order)
HAO2018_COEFFICIENTS = np.array([2152.777778, -764.8809524, 456.1507937, 1949.047619])
# P(0), capacity [veh/h/lane] with no CACC vehicles
HAO2018_BASE_CAPACITY = 1949.047619

SECONDS_PER_HOUR = 3600.0


def capacity_multiplier(fraction_cacc: Union[float, np.ndarray]) -> Union[float, np.ndarray]:
    """
    Ratio P(x) / P(0) for a CACC fraction x (scalar or array).
    Exactly 1.0 at x == 0. Only validated on [0, 1].
    """
    multiplier = np.polyval(HAO2018_COEFFICIENTS, fraction_cacc) / HAO2018_BASE_CAPACITY
    if np.ndim(multiplier) == 0:
        return float(multiplier)
    return multiplier
