import json
import math
import os
from dataclasses import asdict
from typing import Any, Protocol, Sequence

import pandas as pd

from cacc_capacity.metrics.types import CapacityStatsSummary


CAPACITY_STATS_FILENAME = "caccCapacityStats.csv.gz"


def _ensure_dir(path: str):
    os.makedirs(path, exist_ok=True)


class OutputSink(Protocol):
    def write(self, iteration_number: int, columns: Sequence[str], rows: Sequence[Sequence[Any]]) -> str:
        """Persist the rows of an iteration under the given columns, return the written path."""
        ...


class IterationOutputDirectory:
    """
    Resolves per-iteration output paths:
    <output_dir>/ITERS/it.<n>/<n>.<filename>
    """

    def __init__(self, output_dir: str) -> None:
        self.output_dir = output_dir

    def get_iteration_path(self, iteration_number: int) -> str:
        return os.path.join(self.output_dir, "ITERS", f"it.{iteration_number}")

    def get_iteration_filename(self, iteration_number: int, filename: str) -> str:
        return os.path.join(self.get_iteration_path(iteration_number), f"{iteration_number}.{filename}")


class GzipCsvSink:
    """Writes rows as a gzip CSV placed by an IterationOutputDirectory."""

    def __init__(self, resolver: IterationOutputDirectory, filename: str = CAPACITY_STATS_FILENAME) -> None:
        self.resolver = resolver
        self.filename = filename

    def write(self, iteration_number: int, columns: Sequence[str], rows: Sequence[Sequence[Any]]) -> str:
        path = self.resolver.get_iteration_filename(iteration_number, self.filename)
        _ensure_dir(os.path.dirname(path))

        df = pd.DataFrame(list(rows), columns=list(columns))
        df.to_csv(path, index=False, compression="gzip")

        return path


def _json_safe(value):
    # NaN is not valid JSON
    if isinstance(value, float) and math.isnan(value):
        return None
    return value


def save_summary_as_json(summary: CapacityStatsSummary, output_dir: str) -> str:
    _ensure_dir(output_dir)
    filename = f"caccCapacitySummary_it{summary.iteration_number}.json"
    path = os.path.join(output_dir, filename)

    data = {k: _json_safe(v) for k, v in asdict(summary).items()}
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)

    return path
