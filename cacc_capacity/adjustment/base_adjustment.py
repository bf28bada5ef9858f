import threading
from abc import ABC, abstractmethod
from typing import Optional

from cacc_capacity.config import CaccCapacityConfig
from cacc_capacity.diagnostics.exporter import DiagnosticsExporter
from cacc_capacity.io.logging_utils import DiagnosticEmitter, log_diagnostic, logger
from cacc_capacity.io.results_writer import GzipCsvSink, IterationOutputDirectory, OutputSink
from cacc_capacity.metrics.types import CapacityStatsSummary
from cacc_capacity.model.capacity_stats import CapacityStatsRaw
from cacc_capacity.model.road_segment import EligibilityThresholds, RoadSegment, is_cacc_category_road


def default_sink(config: CaccCapacityConfig) -> OutputSink:
    return GzipCsvSink(IterationOutputDirectory(config.output_dir))


class RoadCapacityAdjustmentFunction(ABC):
    """
    Abstract base for CACC road capacity adjustment functions.

    One instance lives for a single iteration. It is safe to call
    `get_capacity_with_cacc_per_second` from several threads; `print_stats`
    must only run once those calls are done.
    """

    name: str = "base"

    def __init__(
        self,
        config: CaccCapacityConfig,
        sink: Optional[OutputSink] = None,
        emit: DiagnosticEmitter = log_diagnostic,
    ):
        self.config = config
        self.thresholds = EligibilityThresholds(
            min_road_capacity=config.min_road_capacity,
            min_speed_meters_per_sec=config.min_speed_meters_per_sec,
        )
        self.sink = sink if sink is not None else default_sink(config)
        self.emit = emit

        self._lock = threading.Lock()
        self._stats = CapacityStatsRaw()
        self.exporter = DiagnosticsExporter(lambda: self.stats)

        logger.info(
            f"caccMinRoadCapacity: {self.thresholds.min_road_capacity}, "
            f"caccMinSpeedMetersPerSec: {self.thresholds.min_speed_meters_per_sec}"
        )

    def is_cacc_category_road(self, segment: RoadSegment) -> bool:
        return is_cacc_category_road(segment, self.thresholds)

    @property
    def stats(self) -> CapacityStatsRaw:
        """Consistent copy of the counters and observations."""
        with self._lock:
            return self._stats.copy()

    @abstractmethod
    def get_capacity_with_cacc_per_second(self, segment: RoadSegment, fraction_cacc_on_road: float) -> float:
        """
        Flow capacity of the segment [veh/s] given the CACC share of its traffic.
        """
        raise NotImplementedError

    def print_stats(self) -> CapacityStatsSummary:
        return self.exporter.summarize_and_export(
            self.config.iteration_number,
            self.config.write_interval,
            self.sink,
        )
