import logging
from concurrent.futures import ThreadPoolExecutor

import numpy as np
import pytest

from cacc_capacity.adjustment import get_adjustment_function
from cacc_capacity.adjustment.hao2018 import Hao2018CaccRoadCapacityAdjustment
from cacc_capacity.config import CaccCapacityConfig
from cacc_capacity.io.logging_utils import CAPACITY_BELOW_INITIAL
from cacc_capacity.model.road_segment import RoadSegment


FREEWAY = RoadSegment(link_id="fw", capacity=2000.0, free_speed=20.0)
ARTERIAL = RoadSegment(link_id="art", capacity=600.0, free_speed=8.0)


def make_adjustment(events=None):
    cfg = CaccCapacityConfig(min_road_capacity=1000.0, min_speed_meters_per_sec=10.0)
    if events is None:
        return Hao2018CaccRoadCapacityAdjustment(cfg)
    return Hao2018CaccRoadCapacityAdjustment(cfg, emit=events.append)


def cubic(x):
    return 2152.777778 * x ** 3 - 764.8809524 * x ** 2 + 456.1507937 * x + 1949.047619


def test_registry_returns_hao2018():
    assert get_adjustment_function("Hao2018") is Hao2018CaccRoadCapacityAdjustment


def test_registry_rejects_unknown_name():
    with pytest.raises(ValueError, match="Unknown adjustment function"):
        get_adjustment_function("Greenshields")


def test_zero_fraction_returns_base_rate():
    adjustment = make_adjustment()
    assert adjustment.get_capacity_with_cacc_per_second(FREEWAY, 0.0) == 2000.0 / 3600

    stats = adjustment.stats
    assert stats.only_non_cacc_travelling == 1
    assert stats.mixed_vehicle_type_encounters == 0
    assert stats.capacity_increase_sum == 0.0


def test_full_cacc_counts_as_only_cacc_and_mixed():
    adjustment = make_adjustment()
    rate = adjustment.get_capacity_with_cacc_per_second(FREEWAY, 1.0)

    expected = 2000.0 * (2152.777778 - 764.8809524 + 456.1507937 + 1949.047619) / 1949.047619
    assert rate * 3600 == pytest.approx(expected)

    stats = adjustment.stats
    assert stats.only_cacc_travelling == 1
    assert stats.mixed_vehicle_type_encounters == 1
    assert stats.capacity_increase_sum == pytest.approx(expected - 2000.0)


def test_mixed_fraction_accumulates_increase():
    adjustment = make_adjustment()
    adjustment.get_capacity_with_cacc_per_second(FREEWAY, 0.5)
    adjustment.get_capacity_with_cacc_per_second(FREEWAY, 0.25)

    stats = adjustment.stats
    assert stats.mixed_vehicle_type_encounters == 2
    assert stats.only_cacc_travelling == 0
    assert stats.only_non_cacc_travelling == 0

    ratio_half = cubic(0.5) / cubic(0.0)
    ratio_quarter = cubic(0.25) / cubic(0.0)
    assert stats.capacity_increase_sum == pytest.approx(2000.0 * (ratio_half - 1) + 2000.0 * (ratio_quarter - 1))
    assert stats.percentage_capacity_increase_sum == pytest.approx(ratio_half - 1 + ratio_quarter - 1)


def test_ineligible_road_is_never_adjusted():
    adjustment = make_adjustment()
    for fraction in (0.0, 0.5, 1.0):
        assert adjustment.get_capacity_with_cacc_per_second(ARTERIAL, fraction) == 600.0 / 3600

    stats = adjustment.stats
    assert stats.non_cacc_category_roads_travelled == 3
    assert stats.cacc_category_roads_travelled == 0
    assert stats.mixed_vehicle_type_encounters == 0
    assert stats.only_cacc_travelling == 0
    assert stats.only_non_cacc_travelling == 0
    assert stats.observations == []


def test_traversal_counts_add_up_to_calls():
    adjustment = make_adjustment()
    rng = np.random.default_rng(3)
    calls = 0
    for fraction in rng.uniform(0.0, 1.0, size=50):
        adjustment.get_capacity_with_cacc_per_second(FREEWAY, float(fraction))
        adjustment.get_capacity_with_cacc_per_second(ARTERIAL, float(fraction))
        calls += 2

    stats = adjustment.stats
    assert stats.total_roads_travelled == calls
    assert stats.cacc_category_roads_travelled == 50
    assert len(stats.observations) == 50


def test_observations_keep_call_order():
    adjustment = make_adjustment()
    other = RoadSegment(link_id="fw2", capacity=2400.0, free_speed=30.0)
    adjustment.get_capacity_with_cacc_per_second(FREEWAY, 0.1)
    adjustment.get_capacity_with_cacc_per_second(other, 0.2)

    obs = adjustment.stats.observations
    assert [(o.link_id, o.fraction_cacc_on_road, o.initial_capacity) for o in obs] == [
        ("fw", 0.1, 2000.0),
        ("fw2", 0.2, 2400.0),
    ]


def test_fine_grid_never_drops_below_base():
    events = []
    adjustment = make_adjustment(events)
    for fraction in np.linspace(0.0, 1.0, 501):
        adjustment.get_capacity_with_cacc_per_second(FREEWAY, float(fraction))

    assert all(o.updated_capacity >= o.initial_capacity for o in adjustment.stats.observations)
    assert events == []


def test_capacity_below_base_emits_diagnostic():
    events = []
    adjustment = make_adjustment(events)
    rate = adjustment.get_capacity_with_cacc_per_second(FREEWAY, -0.5)

    assert rate * 3600 < FREEWAY.capacity
    assert len(events) == 1
    assert events[0].kind == CAPACITY_BELOW_INITIAL
    assert events[0].fields["link_id"] == "fw"
    # value is still recorded and returned
    assert adjustment.stats.cacc_category_roads_travelled == 1


def test_default_emitter_logs_error(caplog):
    caplog.set_level(logging.INFO, logger="cacc_capacity")
    adjustment = make_adjustment()
    adjustment.get_capacity_with_cacc_per_second(FREEWAY, -0.5)

    errors = [r for r in caplog.records if r.levelno == logging.ERROR]
    assert len(errors) == 1
    assert CAPACITY_BELOW_INITIAL in errors[0].getMessage()


def test_concurrent_calls_keep_counts_consistent():
    adjustment = make_adjustment()
    traversals = [(FREEWAY, 0.5), (ARTERIAL, 0.5), (FREEWAY, 1.0), (FREEWAY, 0.0)] * 500

    with ThreadPoolExecutor(max_workers=8) as pool:
        list(pool.map(lambda tr: adjustment.get_capacity_with_cacc_per_second(*tr), traversals))

    stats = adjustment.stats
    assert stats.total_roads_travelled == len(traversals)
    assert stats.non_cacc_category_roads_travelled == 500
    assert stats.mixed_vehicle_type_encounters == 1000
    assert stats.only_cacc_travelling == 500
    assert stats.only_non_cacc_travelling == 500
    assert len(stats.observations) == 1500


def test_stats_snapshot_is_a_copy():
    adjustment = make_adjustment()
    adjustment.get_capacity_with_cacc_per_second(FREEWAY, 0.5)
    snapshot = adjustment.stats
    adjustment.get_capacity_with_cacc_per_second(FREEWAY, 0.5)

    assert len(snapshot.observations) == 1
    assert len(adjustment.stats.observations) == 2
