import argparse
from dataclasses import replace
from pathlib import Path
from typing import List

import numpy as np

from cacc_capacity.config import CaccCapacityConfig
from cacc_capacity.experiments.runner import Traversal, run_iteration
from cacc_capacity.io.logging_utils import setup_logging, logger
from cacc_capacity.io.results_writer import save_summary_as_json
from cacc_capacity.model.road_segment import RoadSegment


def build_network(rng: np.random.Generator, num_links: int) -> List[RoadSegment]:
    """Synthetic network: a mix of arterials and freeway links."""
    capacities = rng.choice([600.0, 1200.0, 2000.0, 2400.0], size=num_links)
    speeds = rng.choice([8.33, 13.89, 22.22, 33.33], size=num_links)
    return [
        RoadSegment(link_id=i, capacity=float(c), free_speed=float(s))
        for i, (c, s) in enumerate(zip(capacities, speeds))
    ]


def build_traversals(
    rng: np.random.Generator,
    network: List[RoadSegment],
    num_traversals: int,
) -> List[Traversal]:
    links = rng.integers(0, len(network), size=num_traversals)
    # some traversals carry no CACC vehicles at all, some only CACC vehicles
    fractions = np.clip(rng.uniform(-0.2, 1.2, size=num_traversals), 0.0, 1.0)
    return [(network[i], float(f)) for i, f in zip(links, fractions)]


def main():
    parser = argparse.ArgumentParser(description="CACC road capacity adjustment run")
    parser.add_argument("--config", type=Path, default=None, help="JSON config file")
    parser.add_argument("--iterations", type=int, default=3)
    parser.add_argument("--links", type=int, default=200)
    parser.add_argument("--traversals", type=int, default=10000)
    args = parser.parse_args()

    setup_logging()

    cfg = CaccCapacityConfig.from_json(args.config) if args.config else CaccCapacityConfig()
    rng = np.random.default_rng(cfg.random_seed)
    network = build_network(rng, args.links)

    logger.info("=== CACC road capacity adjustment ===")
    logger.info(f"Config: {cfg.to_dict()}")

    for it in range(cfg.iteration_number, cfg.iteration_number + args.iterations):
        it_cfg = replace(cfg, iteration_number=it)
        traversals = build_traversals(rng, network, args.traversals)

        logger.info(f"Running iteration {it} with {len(traversals)} traversals")
        summary = run_iteration(it_cfg, traversals)

        logger.info(f"Wall time: {summary.extra_stats['wall_time_seconds']:.4f} s")
        path = save_summary_as_json(summary, cfg.output_dir)
        logger.info(f"Summary saved to {path}")


if __name__ == "__main__":
    main()
