import json
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Literal, Optional


AdjustmentFunctionName = Literal["Hao2018"]


@dataclass
class CaccCapacityConfig:
    # minimum road capacity for CACC adjustment (vehicles/hour)
    min_road_capacity: float = 2000.0
    # minimum free-flow speed for CACC adjustment (m/s)
    min_speed_meters_per_sec: float = 20.0

    iteration_number: int = 0
    # iterations between capacity stats exports, <= 0 disables export
    write_interval: int = 1

    adjustment_function: AdjustmentFunctionName = "Hao2018"

    # worker threads used by run_iteration
    num_threads: int = 1
    random_seed: int = 42

    output_dir: str = "output"
    # scenario desc
    label: Optional[str] = None

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_json(cls, path: Path) -> "CaccCapacityConfig":
        """Load a configuration from a JSON object file."""

        data = json.loads(Path(path).read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            msg = f"CACC capacity configuration must be a JSON object, got {type(data)!r}"
            raise TypeError(msg)
        return cls(**data)
