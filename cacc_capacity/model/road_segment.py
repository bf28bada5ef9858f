from dataclasses import dataclass
from typing import Union


LinkId = Union[str, int]


@dataclass(frozen=True)
class RoadSegment:
    link_id: LinkId
    capacity: float      # base capacity [veh/h]
    free_speed: float    # free-flow speed [m/s]


@dataclass(frozen=True)
class EligibilityThresholds:
    min_road_capacity: float          # [veh/h]
    min_speed_meters_per_sec: float   # [m/s]


def is_cacc_category_road(segment: RoadSegment, thresholds: EligibilityThresholds) -> bool:
    """A road qualifies for CACC adjustment when both capacity and speed reach their minimums."""
    return (
        segment.capacity >= thresholds.min_road_capacity
        and segment.free_speed >= thresholds.min_speed_meters_per_sec
    )
