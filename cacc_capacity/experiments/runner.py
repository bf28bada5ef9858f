from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, List, Optional, Tuple

import numpy as np

from cacc_capacity.adjustment import get_adjustment_function
from cacc_capacity.config import CaccCapacityConfig
from cacc_capacity.io.logging_utils import logger
from cacc_capacity.io.results_writer import OutputSink
from cacc_capacity.metrics.timers import Timer
from cacc_capacity.metrics.types import CapacityStatsSummary
from cacc_capacity.model.regression import capacity_multiplier
from cacc_capacity.model.road_segment import RoadSegment


Traversal = Tuple[RoadSegment, float]


def run_iteration(
    config: CaccCapacityConfig,
    traversals: Iterable[Traversal],
    sink: Optional[OutputSink] = None,
) -> CapacityStatsSummary:
    """
    Runs all traversals of one iteration through a fresh adjustment function,
    then summarizes and (on cadence) exports the capacity stats.

    :param config: iteration settings; num_threads > 1 spreads traversals over a thread pool
    :param traversals: (segment, CACC fraction) pairs
    :param sink: output sink, defaults to a gzip CSV under config.output_dir
    """

    AdjustmentCls = get_adjustment_function(config.adjustment_function)
    adjustment = AdjustmentCls(config, sink=sink)

    with Timer() as t:
        if config.num_threads > 1:
            with ThreadPoolExecutor(max_workers=config.num_threads) as pool:
                # leaving the block joins all workers before the export below
                list(pool.map(lambda tr: adjustment.get_capacity_with_cacc_per_second(*tr), traversals))
        else:
            for segment, fraction in traversals:
                adjustment.get_capacity_with_cacc_per_second(segment, fraction)

    summary = adjustment.print_stats()
    summary.extra_stats.update({
        "wall_time_seconds": t.elapsed,
        "num_threads": config.num_threads,
        "adjustment_function": adjustment.name,
    })
    return summary


def run_fraction_sweep(segment: RoadSegment, num_points: int = 101) -> List[Tuple[float, float]]:
    """
    Helper: samples the CACC fraction on [0, 1] and returns
    (fraction, updated capacity [veh/h]) pairs for the segment.
    Grid points where the capacity drops below the base are logged.
    """

    fractions = np.linspace(0.0, 1.0, num_points)
    updated = segment.capacity * capacity_multiplier(fractions)

    below = fractions[updated < segment.capacity]
    if below.size > 0:
        logger.error(f"updated capacity below initial capacity for fractions: {below.tolist()}")

    return list(zip(fractions.tolist(), updated.tolist()))
