import math
from typing import Callable

from cacc_capacity.io.logging_utils import logger
from cacc_capacity.io.results_writer import OutputSink
from cacc_capacity.metrics.types import CapacityStatsSummary
from cacc_capacity.model.capacity_stats import CapacityStatsRaw


CAPACITY_STATS_COLUMNS = ["linkId", "fractionCACCOnRoad", "initialCapacity", "updatedCapacity"]


def _safe_div(numerator: float, denominator: float) -> float:
    if denominator == 0:
        return math.nan
    return numerator / denominator


def _fmt(value: float) -> str:
    return "undefined" if math.isnan(value) else f"{value}"


def is_write_enabled(iteration_number: int, write_interval: int) -> bool:
    return write_interval > 0 and iteration_number % write_interval == 0


class DiagnosticsExporter:
    """
    Summarizes accumulated capacity stats to the log and, every
    `write_interval` iterations, hands the per-traversal rows to a sink.

    The stats provider is called once per export and must return a
    consistent snapshot; all traversals of the iteration have to be
    finished before `summarize_and_export` runs.
    """

    def __init__(self, stats_provider: Callable[[], CapacityStatsRaw]) -> None:
        self.stats_provider = stats_provider

    def summarize(self, iteration_number: int, stats: CapacityStatsRaw) -> CapacityStatsSummary:
        mixed = stats.mixed_vehicle_type_encounters
        summary = CapacityStatsSummary(
            iteration_number=iteration_number,
            avg_capacity_increase=_safe_div(stats.capacity_increase_sum, mixed),
            avg_capacity_increase_percent=_safe_div(stats.percentage_capacity_increase_sum, mixed) * 100.0,
            mixed_vehicle_type_encounters=mixed,
            only_cacc_travelling=stats.only_cacc_travelling,
            only_non_cacc_travelling=stats.only_non_cacc_travelling,
            cacc_category_roads_travelled=stats.cacc_category_roads_travelled,
            non_cacc_category_roads_travelled=stats.non_cacc_category_roads_travelled,
            cacc_to_non_cacc_ratio=_safe_div(
                stats.cacc_category_roads_travelled, stats.non_cacc_category_roads_travelled
            ),
        )

        logger.info(f"average road capacity increase: {_fmt(summary.avg_capacity_increase)}")
        logger.info(f"average road capacity increase (%): {_fmt(summary.avg_capacity_increase_percent)}")
        logger.info(
            "number of mixed vehicle type encounters (non-CACC/CACC) on CACC category roads: "
            f"{summary.mixed_vehicle_type_encounters}"
        )
        logger.info(f"number of times only CACC travelling on CACC enabled roads: {summary.only_cacc_travelling}")
        logger.info(
            f"number of times only non-CACC travelling on CACC enabled roads: {summary.only_non_cacc_travelling}"
        )
        logger.info(
            "CACC category roads travelled / non-CACC category roads travelled ratio: "
            f"{_fmt(summary.cacc_to_non_cacc_ratio)}"
        )
        return summary

    def summarize_and_export(
        self,
        iteration_number: int,
        write_interval: int,
        sink: OutputSink,
    ) -> CapacityStatsSummary:
        stats = self.stats_provider()
        summary = self.summarize(iteration_number, stats)

        if is_write_enabled(iteration_number, write_interval):
            rows = [obs.as_tuple() for obs in stats.observations]
            summary.stats_file = sink.write(iteration_number, CAPACITY_STATS_COLUMNS, rows)
            logger.info(f"Capacity stats ({len(rows)} rows) written to {summary.stats_file}")

        return summary
