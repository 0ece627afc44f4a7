"""
Kohonen Self-Organizing Map trainer

Trains a rectangular grid of weight vectors on a fixed set of plain-text
input vectors by online competitive learning.
"""

from .core import SOM, TrainerState
from .config import SOMConfig, DecaySchedule, DecayTiming
from .callbacks import Callback, CheckpointCallback, EarlyStoppingCallback
from .exceptions import SOMError, InvalidInputError, DimensionMismatchError
from .vectors import read_vectors, parse_vectors, write_vectors, format_vector
from .observability import (
    setup_logging,
    trace_operation,
    get_metrics,
    log_training_metrics,
)

__version__ = "0.1.0"

__all__ = [
    "SOM",
    "TrainerState",
    "SOMConfig",
    "DecaySchedule",
    "DecayTiming",
    "Callback",
    "CheckpointCallback",
    "EarlyStoppingCallback",
    "SOMError",
    "InvalidInputError",
    "DimensionMismatchError",
    "read_vectors",
    "parse_vectors",
    "write_vectors",
    "format_vector",
    "setup_logging",
    "trace_operation",
    "get_metrics",
    "log_training_metrics",
]
