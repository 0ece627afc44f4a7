"""
Core SOM trainer
"""

import sys
import time
import numpy as np
import structlog
from datetime import datetime
from enum import Enum
from typing import Optional, List, Dict, Iterator, Tuple, TextIO
from tqdm import tqdm

from .config import SOMConfig, DecaySchedule, DecayTiming
from .callbacks import Callback
from .distance import DistanceCalculator
from .exceptions import DimensionMismatchError
from .observability import log_trainer_created, log_training_metrics
from .vectors import VectorSource, read_vectors, iter_lines, write_vectors

logger = structlog.get_logger(__name__)


class TrainerState(Enum):
    CONSTRUCTED = "constructed"
    TRAINING = "training"
    TRAINED = "trained"


class SOM:
    """
    Kohonen self-organizing map trained online over a fixed input set

    The input set is loaded and validated once at construction. The output
    grid is a ``width x height`` array of weight vectors, indexed row-major
    with X outer and Y inner, and is mutated in place while training.
    """

    def __init__(
        self, source: VectorSource, config: SOMConfig, verbose: bool = False
    ):
        """
        Load the input set and randomly initialize the grid

        Args:
            source: path, text stream, or in-memory sequence of vectors
            config: SOMConfig with dimensions and training constants
            verbose: Whether to show a progress bar while training

        Raises:
            InvalidInputError: the source is empty or holds a non-numeric token
            DimensionMismatchError: a record has the wrong number of components
        """
        self.config = config
        self.verbose = verbose

        # Validated before any other state exists
        self.inputs = read_vectors(source, config.input_size)

        if config.seed is not None:
            self.rng = np.random.RandomState(config.seed)
        else:
            self.rng = np.random.RandomState()

        self.n_neurons = config.n_neurons
        self.neuron_coords = DistanceCalculator.grid_coordinates(
            config.width, config.height
        )
        self.weights_flat = self._initialize_weights()

        self.lr = float(config.initial_lr)
        self.nbd_width = float(config.initial_nbd_width)
        self.state = TrainerState.CONSTRUCTED

        self.metadata = {
            "creation_time": datetime.now().isoformat(),
            "training_history": [],
            "total_epochs": 0,
            "total_samples_seen": 0,
            "config": config.to_dict(),
        }

        self.callbacks: List[Callback] = []
        self.stop_training = False
        self._epochs_completed = 0

        log_trainer_created()
        logger.debug(
            "Trainer constructed",
            n_samples=len(self.inputs),
            input_size=config.input_size,
            width=config.width,
            height=config.height,
        )

    def _initialize_weights(self) -> np.ndarray:
        low, high = self.config.init_range
        return self.rng.uniform(low, high, (self.n_neurons, self.config.input_size))

    # The three phases of the map

    def compete(self, x: np.ndarray) -> np.ndarray:
        """Squared distance from ``x`` to every weight vector, row-major"""
        x = np.asarray(x, dtype=np.float64)
        if x.shape != (self.config.input_size,):
            raise DimensionMismatchError(self.config.input_size, x.size)
        return DistanceCalculator.squared_euclidean(self.weights_flat, x)

    def cooperate(self, distances: np.ndarray) -> Tuple[int, int]:
        """Grid coordinate of the winning neuron (first minimum on ties)"""
        flat_index = int(np.argmin(distances))
        return divmod(flat_index, self.config.height)

    def neighborhood(self, winner: Tuple[int, int]) -> np.ndarray:
        """Gaussian kernel of grid distance to ``winner`` for every cell"""
        distances = DistanceCalculator.grid_distance(self.neuron_coords, winner)
        return DistanceCalculator.gaussian(distances, self.nbd_width)

    def adapt(self, x: np.ndarray, winner: Tuple[int, int]) -> None:
        """Pull every weight vector toward ``x``, scaled by lr and the kernel"""
        theta = self.neighborhood(winner)
        self.weights_flat += self.lr * theta[:, np.newaxis] * (x - self.weights_flat)

    def decay(self) -> None:
        """Shrink the learning rate and neighborhood width by one step"""
        self.lr = self._decayed(self.lr, self.config.lr_decay, self.config.min_lr)
        self.nbd_width = self._decayed(
            self.nbd_width, self.config.nbd_width_decay, self.config.min_nbd_width
        )

    def _decayed(self, value: float, rate: float, floor: float) -> float:
        schedule = self.config.decay_schedule
        if schedule == DecaySchedule.LINEAR:
            # Never raise a value that already sits below the floor
            return min(value, max(value - rate, floor))
        elif schedule == DecaySchedule.EXPONENTIAL:
            decayed = value * float(np.exp(-rate))
        else:  # INVERSE
            decayed = value * (1.0 / (1.0 + rate))
        # Multiplicative decay can underflow after an enormous number of steps
        return decayed if decayed > 0 else value

    def winner(self, x: np.ndarray) -> Tuple[int, int]:
        return self.cooperate(self.compete(x))

    def train(
        self, epochs: int, callbacks: Optional[List[Callback]] = None
    ) -> "SOM":
        """
        Run ``epochs`` full passes over the input set

        Resumes from the current grid, learning rate and neighborhood width.

        Args:
            epochs: Number of passes over every input vector
            callbacks: List of callback objects

        Returns:
            self for method chaining
        """
        if epochs < 0:
            raise ValueError(f"epochs must be non-negative, got {epochs}")
        if epochs == 0:
            return self

        self.callbacks = list(callbacks or [])
        self.stop_training = False
        self.state = TrainerState.TRAINING

        logger.info(
            "Training started",
            epochs=epochs,
            lr=self.lr,
            nbd_width=self.nbd_width,
            width=self.config.width,
            height=self.config.height,
        )
        start_time = time.time()

        self._epochs_completed = 0
        try:
            for callback in self.callbacks:
                callback.on_training_begin(self)

            self._train_loop(epochs)

            for callback in self.callbacks:
                callback.on_training_end(self)
        finally:
            self._finish_training(start_time)
        return self

    def _finish_training(self, start_time: float) -> None:
        """Settle state, metadata and metrics, even if a callback raised"""
        epochs_completed = self._epochs_completed
        self.state = TrainerState.TRAINED
        duration = time.time() - start_time
        samples = len(self.inputs) * epochs_completed

        self.metadata["total_epochs"] += epochs_completed
        self.metadata["total_samples_seen"] += samples
        self.metadata["last_training"] = datetime.now().isoformat()

        log_training_metrics(
            self.config.width, self.config.height, duration, epochs_completed, samples
        )
        logger.info(
            "Training finished",
            epochs_completed=epochs_completed,
            lr=self.lr,
            nbd_width=self.nbd_width,
            duration_seconds=duration,
        )

    def _train_loop(self, epochs: int) -> None:
        start = self.metadata["total_epochs"]
        iterator = range(start, start + epochs)
        if self.verbose:
            iterator = tqdm(iterator, desc="Training SOM")

        for t in iterator:
            for callback in self.callbacks:
                callback.on_epoch_begin(t, self)

            if self.stop_training:
                logger.info("Training stopped", epoch=t)
                break

            if self.config.shuffle:
                order = self.rng.permutation(len(self.inputs))
            else:
                order = range(len(self.inputs))

            epoch_metrics = self._process_epoch(order)

            if self.config.decay_timing == DecayTiming.EPOCH:
                self.decay()

            if self.verbose:
                iterator.set_postfix(
                    {
                        "QE": f"{epoch_metrics['qe']:.4f}",
                        "lr": f"{self.lr:.4f}",
                        "width": f"{self.nbd_width:.3f}",
                    }
                )

            self.metadata["training_history"].append(
                {
                    "epoch": t,
                    "qe": epoch_metrics["qe"],
                    "lr": self.lr,
                    "nbd_width": self.nbd_width,
                }
            )
            logger.debug(
                "Epoch finished",
                epoch=t,
                qe=epoch_metrics["qe"],
                lr=self.lr,
                nbd_width=self.nbd_width,
            )

            # Counted before the hooks so history and totals agree if one raises
            self._epochs_completed += 1

            for callback in self.callbacks:
                callback.on_epoch_end(t, self, epoch_metrics)

    def _process_epoch(self, order) -> Dict:
        """Compete, cooperate and adapt for every input vector"""
        total_error = 0.0
        per_sample = self.config.decay_timing == DecayTiming.SAMPLE

        for index in order:
            x = self.inputs[index]
            distances = self.compete(x)
            winner = self.cooperate(distances)
            total_error += float(distances[self._flat_index(winner)])
            self.adapt(x, winner)
            if per_sample:
                self.decay()

        return {"qe": total_error / len(self.inputs)}

    def _flat_index(self, cell: Tuple[int, int]) -> int:
        return cell[0] * self.config.height + cell[1]

    def quantization_error(self, data: Optional[VectorSource] = None) -> float:
        """Mean squared distance from each vector to its winning neuron"""
        if data is None:
            data = self.inputs
        else:
            data = read_vectors(data, self.config.input_size)
        errors = [float(np.min(self.compete(x))) for x in data]
        return float(np.mean(errors))

    def get_weights(self) -> np.ndarray:
        """Copy of the weights in grid format"""
        return self.weights_flat.reshape(
            self.config.width, self.config.height, self.config.input_size
        ).copy()

    def export(self, precision: Optional[int] = None) -> Iterator[str]:
        """Lazily yield one formatted weight vector per cell, row-major"""
        return iter_lines(self.weights_flat, precision)

    def print(self, stream: Optional[TextIO] = None, precision: Optional[int] = None):
        """Write the grid to ``stream`` (stdout by default)"""
        if stream is None:
            stream = sys.stdout
        write_vectors(self.weights_flat, stream, precision)

    def get_info(self) -> Dict:
        """Get comprehensive information about the trainer"""
        return {
            "config": self.config.to_dict(),
            "state": self.state.value,
            "shape": (self.config.width, self.config.height),
            "n_neurons": self.n_neurons,
            "n_samples": len(self.inputs),
            "lr": self.lr,
            "nbd_width": self.nbd_width,
            "total_epochs": self.metadata["total_epochs"],
            "total_samples": self.metadata["total_samples_seen"],
        }
