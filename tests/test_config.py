"""
Tests for configuration classes and enums
"""

import pytest
from kohonen.config import SOMConfig, DecaySchedule, DecayTiming


@pytest.mark.unit
class TestEnums:
    """Test enum classes"""

    @pytest.mark.unit
    def test_decay_schedule_values(self):
        assert DecaySchedule.INVERSE.value == "inverse"
        assert DecaySchedule.EXPONENTIAL.value == "exponential"
        assert DecaySchedule.LINEAR.value == "linear"

    @pytest.mark.unit
    def test_decay_timing_values(self):
        assert DecayTiming.EPOCH.value == "epoch"
        assert DecayTiming.SAMPLE.value == "sample"


@pytest.mark.unit
class TestSOMConfig:
    """Test SOMConfig class"""

    @pytest.mark.unit
    def test_defaults(self):
        config = SOMConfig(input_size=2, width=4, height=2)
        assert config.initial_lr == 0.1
        assert config.initial_nbd_width == 2.0
        assert config.lr_decay == 0.001
        assert config.nbd_width_decay == 0.001
        assert config.decay_schedule == DecaySchedule.INVERSE
        assert config.decay_timing == DecayTiming.EPOCH
        assert config.init_range == (-0.1, 0.1)
        assert config.shuffle is False
        assert config.n_neurons == 8

    @pytest.mark.unit
    def test_string_enums_are_coerced(self):
        config = SOMConfig(
            input_size=2,
            width=2,
            height=2,
            decay_schedule="linear",
            decay_timing="sample",
        )
        assert config.decay_schedule == DecaySchedule.LINEAR
        assert config.decay_timing == DecayTiming.SAMPLE

    @pytest.mark.unit
    def test_dict_conversion(self):
        config = SOMConfig(
            input_size=3,
            width=5,
            height=4,
            decay_schedule=DecaySchedule.EXPONENTIAL,
            seed=7,
        )
        config_dict = config.to_dict()
        assert config_dict["decay_schedule"] == "exponential"
        assert config_dict["decay_timing"] == "epoch"
        assert config_dict["init_range"] == [-0.1, 0.1]

        restored = SOMConfig.from_dict(config_dict)
        assert restored == config

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "overrides",
        [
            {"input_size": 0},
            {"width": 0},
            {"height": -1},
            {"width": 2.5},
            {"initial_lr": 0.0},
            {"initial_nbd_width": -1.0},
            {"lr_decay": -0.1},
            {"nbd_width_decay": -0.1},
            {"min_lr": 0.0},
            {"init_range": (0.1, -0.1)},
        ],
    )
    def test_invalid_values(self, overrides):
        params = {"input_size": 2, "width": 2, "height": 2}
        params.update(overrides)
        with pytest.raises(ValueError):
            SOMConfig(**params)

    @pytest.mark.unit
    def test_unknown_schedule(self):
        with pytest.raises(ValueError):
            SOMConfig(input_size=2, width=2, height=2, decay_schedule="cosine")
