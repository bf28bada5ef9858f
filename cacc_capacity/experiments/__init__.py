from cacc_capacity.config import CaccCapacityConfig
from cacc_capacity.adjustment import get_adjustment_function, ADJUSTMENT_FUNCTIONS


__all__ = ["CaccCapacityConfig", "get_adjustment_function", "ADJUSTMENT_FUNCTIONS"]
