"""
Tests for callback functionality
"""

import os

import pytest
import numpy as np

from kohonen import SOM, parse_vectors
from kohonen.callbacks import Callback, CheckpointCallback, EarlyStoppingCallback


@pytest.mark.integration
class TestCheckpointCallback:
    """Test checkpoint callback functionality"""

    @pytest.mark.unit
    def test_checkpoint_creation(self, tmp_path):
        checkpoint_dir = tmp_path / "checkpoints"
        callback = CheckpointCallback(str(checkpoint_dir), interval=2)
        assert callback.checkpoint_dir == str(checkpoint_dir)
        assert callback.interval == 2
        assert checkpoint_dir.is_dir()

    @pytest.mark.unit
    def test_invalid_interval(self, tmp_path):
        with pytest.raises(ValueError):
            CheckpointCallback(str(tmp_path), interval=0)

    @pytest.mark.integration
    def test_checkpoint_saving(self, tmp_path, minimal_config, small_data):
        callback = CheckpointCallback(str(tmp_path), interval=2)

        som = SOM(small_data, minimal_config)
        som.train(5, callbacks=[callback])

        files = sorted(os.listdir(tmp_path))
        assert files == [
            "checkpoint_epoch_2.txt",
            "checkpoint_epoch_4.txt",
            "final_grid.txt",
        ]

        final = parse_vectors((tmp_path / "final_grid.txt").read_text(), 2)
        np.testing.assert_array_equal(final, som.weights_flat)


@pytest.mark.integration
class TestEarlyStoppingCallback:
    """Test early stopping callback functionality"""

    @pytest.mark.unit
    def test_early_stopping_creation(self):
        callback = EarlyStoppingCallback(monitor="qe", patience=5, min_delta=1e-3)
        assert callback.monitor == "qe"
        assert callback.patience == 5
        assert callback.min_delta == 1e-3
        assert callback.best_value == float("inf")
        assert callback.wait == 0

    @pytest.mark.integration
    def test_early_stopping_halts_at_epoch_boundary(self, minimal_config, small_data):
        # An unreachable min_delta means no epoch after the first counts as progress
        callback = EarlyStoppingCallback(monitor="qe", patience=2, min_delta=1e9)

        som = SOM(small_data, minimal_config)
        som.train(10, callbacks=[callback])

        assert som.metadata["total_epochs"] == 3
        assert len(som.metadata["training_history"]) == 3

    @pytest.mark.integration
    def test_training_can_resume_after_stop(self, minimal_config, small_data):
        callback = EarlyStoppingCallback(monitor="qe", patience=1, min_delta=1e9)

        som = SOM(small_data, minimal_config)
        som.train(10, callbacks=[callback])
        stopped_at = som.metadata["total_epochs"]

        som.train(3)
        assert som.metadata["total_epochs"] == stopped_at + 3


@pytest.mark.unit
class TestCallbackBase:
    """Test the no-op hook defaults"""

    @pytest.mark.unit
    def test_unoverridden_hooks_are_noops(self, minimal_config, small_data):
        class Silent(Callback):
            pass

        som = SOM(small_data, minimal_config)
        som.train(2, callbacks=[Silent()])
        assert som.metadata["total_epochs"] == 2
        assert len(som.metadata["training_history"]) == 2
