from cacc_capacity.adjustment.base_adjustment import RoadCapacityAdjustmentFunction
from cacc_capacity.io.logging_utils import CAPACITY_BELOW_INITIAL, DiagnosticEvent
from cacc_capacity.model.capacity_stats import CapacityObservation
from cacc_capacity.model.regression import SECONDS_PER_HOUR, capacity_multiplier
from cacc_capacity.model.road_segment import RoadSegment


class Hao2018CaccRoadCapacityAdjustment(RoadCapacityAdjustmentFunction):
    """
    Capacity adjustment using the cubic regression of Liu, Hao et al. (2018).
    See cacc_capacity.model.regression for the coefficients.
    """

    name = "Hao2018"

    def get_capacity_with_cacc_per_second(self, segment: RoadSegment, fraction_cacc_on_road: float) -> float:
        initial_capacity = float(segment.capacity)

        if not self.is_cacc_category_road(segment):
            with self._lock:
                self._stats.record_non_cacc_road()
            return initial_capacity / SECONDS_PER_HOUR

        updated_capacity = initial_capacity * capacity_multiplier(fraction_cacc_on_road)

        observation = CapacityObservation(
            link_id=segment.link_id,
            fraction_cacc_on_road=float(fraction_cacc_on_road),
            initial_capacity=initial_capacity,
            updated_capacity=updated_capacity,
        )
        with self._lock:
            self._stats.record_cacc_road(observation)

        if updated_capacity < initial_capacity:
            self.emit(DiagnosticEvent(
                kind=CAPACITY_BELOW_INITIAL,
                fields={
                    "link_id": segment.link_id,
                    "fraction_cacc_on_road": fraction_cacc_on_road,
                    "initial_capacity": initial_capacity,
                    "updated_capacity": updated_capacity,
                },
            ))

        return updated_capacity / SECONDS_PER_HOUR
