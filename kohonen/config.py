"""
Configuration classes and enums for the SOM trainer
"""

import numbers
from enum import Enum
from dataclasses import dataclass, asdict
from typing import Tuple, Dict, Optional


class DecaySchedule(Enum):
    """How the learning rate and neighborhood width shrink at each decay step"""

    INVERSE = "inverse"
    EXPONENTIAL = "exponential"
    LINEAR = "linear"


class DecayTiming(Enum):
    """When a decay step is applied"""

    EPOCH = "epoch"
    SAMPLE = "sample"


@dataclass
class SOMConfig:
    """Centralized configuration management for SOM parameters"""

    # Dimensions
    input_size: int
    width: int
    height: int

    # Training parameters
    initial_lr: float = 0.1
    initial_nbd_width: float = 2.0
    lr_decay: float = 0.001
    nbd_width_decay: float = 0.001

    # Decay behaviour
    decay_schedule: DecaySchedule = DecaySchedule.INVERSE
    decay_timing: DecayTiming = DecayTiming.EPOCH
    min_lr: float = 1e-6  # Floor for LINEAR decay
    min_nbd_width: float = 1e-3  # Floor for LINEAR decay

    # Initialization
    init_range: Tuple[float, float] = (-0.1, 0.1)

    # Input ordering
    shuffle: bool = False

    # Reproducibility
    seed: Optional[int] = None

    def __post_init__(self):
        """Validate dimensions and training constants"""
        for name in ("input_size", "width", "height"):
            value = getattr(self, name)
            if (
                not isinstance(value, numbers.Integral)
                or isinstance(value, bool)
                or value < 1
            ):
                raise ValueError(f"{name} must be a positive integer, got {value!r}")

        if self.initial_lr <= 0:
            raise ValueError(f"initial_lr must be positive, got {self.initial_lr}")
        if self.initial_nbd_width <= 0:
            raise ValueError(
                f"initial_nbd_width must be positive, got {self.initial_nbd_width}"
            )
        if self.lr_decay < 0 or self.nbd_width_decay < 0:
            raise ValueError("Decay rates must be non-negative")
        if self.min_lr <= 0 or self.min_nbd_width <= 0:
            raise ValueError("Decay floors must be positive")

        self.init_range = tuple(self.init_range)
        if len(self.init_range) != 2 or self.init_range[0] >= self.init_range[1]:
            raise ValueError(
                f"init_range must be an increasing (low, high) pair, got {self.init_range}"
            )

        # Accept plain strings for the enum fields
        self.decay_schedule = DecaySchedule(self.decay_schedule)
        self.decay_timing = DecayTiming(self.decay_timing)

    @property
    def n_neurons(self) -> int:
        return self.width * self.height

    def to_dict(self) -> Dict:
        """Convert config to dictionary for serialization"""
        config_dict = asdict(self)
        # Convert enums to strings
        for key, value in config_dict.items():
            if isinstance(value, Enum):
                config_dict[key] = value.value
        config_dict["init_range"] = list(self.init_range)
        return config_dict

    @classmethod
    def from_dict(cls, config_dict: Dict) -> "SOMConfig":
        """Create config from dictionary"""
        config_dict = dict(config_dict)
        enum_fields = {
            "decay_schedule": DecaySchedule,
            "decay_timing": DecayTiming,
        }
        for field_name, enum_class in enum_fields.items():
            if field_name in config_dict and isinstance(config_dict[field_name], str):
                config_dict[field_name] = enum_class(config_dict[field_name])
        if "init_range" in config_dict:
            config_dict["init_range"] = tuple(config_dict["init_range"])
        return cls(**config_dict)
