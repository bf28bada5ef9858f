from typing import Dict, Type

from cacc_capacity.adjustment.base_adjustment import RoadCapacityAdjustmentFunction
from cacc_capacity.adjustment.hao2018 import Hao2018CaccRoadCapacityAdjustment


ADJUSTMENT_FUNCTIONS: Dict[str, Type[RoadCapacityAdjustmentFunction]] = {
    Hao2018CaccRoadCapacityAdjustment.name: Hao2018CaccRoadCapacityAdjustment,
}


def get_adjustment_function(name: str) -> Type[RoadCapacityAdjustmentFunction]:
    try:
        return ADJUSTMENT_FUNCTIONS[name]
    except KeyError:
        raise ValueError(
            f"Unknown adjustment function '{name}'. Available: {', '.join(ADJUSTMENT_FUNCTIONS.keys())}"
        )
