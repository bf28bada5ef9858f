import math
from dataclasses import dataclass, field, replace
from typing import List, Tuple

from .road_segment import LinkId


@dataclass(frozen=True)
class CapacityObservation:
    link_id: LinkId
    fraction_cacc_on_road: float
    initial_capacity: float      # [veh/h]
    updated_capacity: float      # [veh/h]

    def as_tuple(self) -> Tuple[LinkId, float, float, float]:
        return (self.link_id, self.fraction_cacc_on_road, self.initial_capacity, self.updated_capacity)


@dataclass
class CapacityStatsRaw:
    mixed_vehicle_type_encounters: int = 0
    only_cacc_travelling: int = 0
    only_non_cacc_travelling: int = 0

    capacity_increase_sum: float = 0.0
    # sum of (updated / initial - 1), not multiplied by 100
    percentage_capacity_increase_sum: float = 0.0

    cacc_category_roads_travelled: int = 0
    non_cacc_category_roads_travelled: int = 0

    observations: List[CapacityObservation] = field(default_factory=list)

    def record_non_cacc_road(self) -> None:
        self.non_cacc_category_roads_travelled += 1

    def record_cacc_road(self, observation: CapacityObservation) -> None:
        """
        Update counters for one traversal of a CACC category road.

        A fraction of exactly 1 counts as "only CACC" and also as a mixed
        encounter, since (0, 1] includes 1.
        """
        fraction = observation.fraction_cacc_on_road
        initial = observation.initial_capacity
        updated = observation.updated_capacity

        self.cacc_category_roads_travelled += 1

        if fraction == 1:
            self.only_cacc_travelling += 1

        if fraction == 0:
            self.only_non_cacc_travelling += 1

        if 0 < fraction <= 1.0:
            self.mixed_vehicle_type_encounters += 1
            self.capacity_increase_sum += updated - initial
            # zero-capacity roads only qualify under a zero capacity threshold
            self.percentage_capacity_increase_sum += (updated / initial - 1.0) if initial else math.nan

        self.observations.append(observation)

    @property
    def total_roads_travelled(self) -> int:
        return self.cacc_category_roads_travelled + self.non_cacc_category_roads_travelled

    def copy(self) -> "CapacityStatsRaw":
        return replace(self, observations=list(self.observations))
