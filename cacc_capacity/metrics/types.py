from dataclasses import dataclass, field
from typing import Dict, Any, Optional


@dataclass
class CapacityStatsSummary:
    iteration_number: int

    # [veh/h], NaN without mixed encounters
    avg_capacity_increase: float
    # [%], NaN without mixed encounters
    avg_capacity_increase_percent: float

    mixed_vehicle_type_encounters: int
    only_cacc_travelling: int
    only_non_cacc_travelling: int

    cacc_category_roads_travelled: int
    non_cacc_category_roads_travelled: int
    # NaN without non-CACC category traversals
    cacc_to_non_cacc_ratio: float

    # set only when the capacity stats file was written
    stats_file: Optional[str] = None

    # anything else (wall time, thread count, ...)
    extra_stats: Dict[str, Any] = field(default_factory=dict)
