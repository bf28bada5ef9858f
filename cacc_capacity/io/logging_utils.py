import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict


def setup_logging(level: int = logging.INFO):
    logging.basicConfig(
        level=level,
        format="[%(asctime)s] [%(levelname)s] %(threadName)s %(message)s",
        datefmt="%H:%M:%S",
    )


logger = logging.getLogger("cacc_capacity")


@dataclass(frozen=True)
class DiagnosticEvent:
    kind: str
    fields: Dict[str, Any] = field(default_factory=dict)


DiagnosticEmitter = Callable[[DiagnosticEvent], None]

CAPACITY_BELOW_INITIAL = "capacity_below_initial"

# event kinds that indicate a modeling inconsistency
_ERROR_KINDS = {CAPACITY_BELOW_INITIAL}


def log_diagnostic(event: DiagnosticEvent) -> None:
    """Default emitter: write the event to the package logger."""
    details = ", ".join(f"{k}={v}" for k, v in event.fields.items())
    level = logging.ERROR if event.kind in _ERROR_KINDS else logging.WARNING
    logger.log(level, f"{event.kind}: {details}")
