"""
Command Line Interface for the Kohonen SOM trainer
"""

import argparse
import os
import sys
import structlog
from pathlib import Path
from typing import List, Tuple

import numpy as np

from kohonen import (
    SOM,
    SOMConfig,
    SOMError,
    DecaySchedule,
    DecayTiming,
    CheckpointCallback,
    read_vectors,
    setup_logging,
    trace_operation,
    __version__,
)

# Initialize observability
setup_logging(
    log_level=os.getenv("LOG_LEVEL", "INFO"),
    json_format=False,  # Use console format for CLI
)

logger = structlog.get_logger()

DEFAULT_GRIDS = [(4, 2), (4, 4), (2, 3), (1, 1)]


def load_data(file_path: str, input_size: int) -> np.ndarray:
    """Load whitespace-separated vectors from a file, or stdin for '-'"""
    if file_path == "-":
        return read_vectors(sys.stdin, input_size)

    path = Path(file_path)
    if not path.exists():
        raise FileNotFoundError(f"Data file not found: {file_path}")
    return read_vectors(path, input_size)


def parse_grid(value: str) -> Tuple[int, int]:
    """argparse type for WxH grid sizes"""
    try:
        width, height = (int(part) for part in value.lower().split("x"))
    except ValueError:
        raise argparse.ArgumentTypeError(
            f"Grid must look like WxH, got {value!r}"
        ) from None
    if width < 1 or height < 1:
        raise argparse.ArgumentTypeError(f"Grid sides must be positive, got {value!r}")
    return width, height


def build_config(args, width: int, height: int) -> SOMConfig:
    return SOMConfig(
        input_size=args.input_size,
        width=width,
        height=height,
        initial_lr=args.learning_rate,
        initial_nbd_width=args.nbd_width,
        lr_decay=args.lr_decay,
        nbd_width_decay=args.nbd_width_decay,
        decay_schedule=DecaySchedule(args.decay_schedule),
        decay_timing=DecayTiming(args.decay_timing),
        shuffle=args.shuffle,
        seed=args.seed,
    )


def run_grids(data: np.ndarray, args, stream) -> List[SOM]:
    """Train one map per requested grid and print each, blank-line separated"""
    grids = args.grid or DEFAULT_GRIDS
    trained = []

    for run, (width, height) in enumerate(grids):
        config = build_config(args, width, height)

        callbacks = []
        if args.checkpoint_dir:
            callbacks.append(
                CheckpointCallback(
                    os.path.join(args.checkpoint_dir, f"run{run + 1}_{width}x{height}"),
                    args.checkpoint_interval,
                )
            )

        with trace_operation("train", width=width, height=height, epochs=args.epochs):
            som = SOM(data, config, verbose=args.verbose)
            som.train(args.epochs, callbacks=callbacks)

        if run > 0:
            stream.write("\n")
        som.print(stream, precision=args.precision)
        trained.append(som)

    return trained


def train_command(args) -> None:
    """Train one or more SOMs on the same input and print their grids"""
    try:
        data = load_data(args.input, args.input_size)
        logger.info("Loaded input vectors", path=args.input, n_samples=len(data))

        if args.output:
            with open(args.output, "w") as f:
                run_grids(data, args, f)
            logger.info("Grids written", output=args.output)
        else:
            run_grids(data, args, sys.stdout)

    except (SOMError, OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


def main(argv=None):
    """Main CLI entry point"""
    parser = argparse.ArgumentParser(
        description="Kohonen Self-Organizing Map trainer",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    train_parser = subparsers.add_parser("train", help="Train SOM grids")
    train_parser.add_argument("input", help="Input vectors file ('-' for stdin)")
    train_parser.add_argument(
        "--input-size", type=int, default=2, help="Components per input vector"
    )
    train_parser.add_argument(
        "--grid",
        type=parse_grid,
        action="append",
        help="Grid size as WxH; repeat to train several maps on the same input "
        "(default: 4x2, 4x4, 2x3, 1x1)",
    )
    train_parser.add_argument(
        "--epochs", type=int, default=100, help="Number of training epochs"
    )
    train_parser.add_argument(
        "--learning-rate", type=float, default=0.1, help="Initial learning rate"
    )
    train_parser.add_argument(
        "--lr-decay", type=float, default=0.001, help="Learning rate decay"
    )
    train_parser.add_argument(
        "--nbd-width", type=float, default=2.0, help="Initial neighborhood width"
    )
    train_parser.add_argument(
        "--nbd-width-decay",
        type=float,
        default=0.001,
        help="Neighborhood width decay",
    )
    train_parser.add_argument(
        "--decay-schedule",
        choices=[s.value for s in DecaySchedule],
        default=DecaySchedule.INVERSE.value,
        help="Decay schedule",
    )
    train_parser.add_argument(
        "--decay-timing",
        choices=[t.value for t in DecayTiming],
        default=DecayTiming.EPOCH.value,
        help="Apply decay after every epoch or every sample",
    )
    train_parser.add_argument(
        "--shuffle", action="store_true", help="Reshuffle inputs every epoch"
    )
    train_parser.add_argument(
        "--seed", type=int, help="Random seed for reproducibility"
    )
    train_parser.add_argument(
        "--precision", type=int, help="Significant digits in printed weights"
    )
    train_parser.add_argument("--output", "-o", help="Output file (default: stdout)")
    train_parser.add_argument(
        "--checkpoint-dir", help="Directory for plain-text grid checkpoints"
    )
    train_parser.add_argument(
        "--checkpoint-interval", type=int, default=10, help="Epochs between checkpoints"
    )
    train_parser.add_argument("--verbose", action="store_true", help="Progress bar")

    subparsers.add_parser("version", help="Show version information")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    if args.command == "train":
        train_command(args)
    elif args.command == "version":
        print(f"Kohonen SOM trainer v{__version__}")
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
