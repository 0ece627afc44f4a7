"""
Epoch-boundary hooks for monitoring and stopping SOM training
"""

import os
import structlog
from typing import Dict, TYPE_CHECKING

if TYPE_CHECKING:
    from .core import SOM

logger = structlog.get_logger(__name__)


class Callback:
    """Base class for training hooks; override only the ones you need"""

    def on_training_begin(self, som: "SOM") -> None:
        pass

    def on_epoch_begin(self, epoch: int, som: "SOM") -> None:
        pass

    def on_epoch_end(self, epoch: int, som: "SOM", metrics: Dict) -> None:
        pass

    def on_training_end(self, som: "SOM") -> None:
        pass


class CheckpointCallback(Callback):
    """Write the grid as plain-text vectors every ``interval`` epochs"""

    def __init__(self, checkpoint_dir: str, interval: int = 100):
        if interval < 1:
            raise ValueError(f"interval must be at least 1, got {interval}")
        self.checkpoint_dir = checkpoint_dir
        self.interval = interval
        os.makedirs(checkpoint_dir, exist_ok=True)

    def on_epoch_end(self, epoch: int, som: "SOM", metrics: Dict) -> None:
        completed = epoch + 1
        if completed % self.interval == 0:
            self._write(som, f"checkpoint_epoch_{completed}.txt")

    def on_training_end(self, som: "SOM") -> None:
        self._write(som, "final_grid.txt")

    def _write(self, som: "SOM", filename: str) -> None:
        path = os.path.join(self.checkpoint_dir, filename)
        try:
            with open(path, "w") as f:
                som.print(f)
        except (IOError, OSError) as e:
            logger.warning("Checkpoint not written", path=path, error=str(e))
        else:
            logger.debug("Checkpoint written", path=path)


class EarlyStoppingCallback(Callback):
    """
    Request a stop once ``metrics[monitor]`` has not improved by ``min_delta``
    for ``patience`` consecutive epochs

    The trainer honours the request at the next epoch boundary.
    """

    def __init__(
        self, monitor: str = "qe", patience: int = 10, min_delta: float = 1e-4
    ):
        self.monitor = monitor
        self.patience = patience
        self.min_delta = min_delta
        self.best_value = float("inf")
        self.wait = 0

    def on_training_begin(self, som: "SOM") -> None:
        self.best_value = float("inf")
        self.wait = 0

    def on_epoch_end(self, epoch: int, som: "SOM", metrics: Dict) -> None:
        value = metrics.get(self.monitor, float("inf"))
        if value < self.best_value - self.min_delta:
            self.best_value = value
            self.wait = 0
            return

        self.wait += 1
        if self.wait >= self.patience:
            som.stop_training = True
            logger.info(
                "Early stopping requested",
                epoch=epoch,
                monitor=self.monitor,
                best=self.best_value,
            )
