"""
Pytest configuration and fixtures for SOM tests
"""

import pytest
import numpy as np
from kohonen import SOM, SOMConfig, setup_logging

# Route structlog through stdlib logging so tests see grid output only on stdout
setup_logging(log_level="WARNING", json_format=False)


@pytest.fixture
def sample_data():
    """Generate sample 3D data for testing"""
    np.random.seed(42)
    return np.random.random((50, 3))


@pytest.fixture
def small_data():
    """Generate small dataset for quick tests"""
    np.random.seed(42)
    return np.random.random((10, 2))


@pytest.fixture
def basic_config():
    """Basic SOM configuration for testing"""
    return SOMConfig(input_size=3, width=5, height=5, initial_nbd_width=2.0, seed=42)


@pytest.fixture
def minimal_config():
    """Minimal SOM configuration for quick tests"""
    return SOMConfig(input_size=2, width=3, height=3, seed=42)


@pytest.fixture
def som(basic_config, sample_data):
    """Freshly constructed, untrained SOM"""
    return SOM(sample_data, basic_config)


@pytest.fixture
def trained_som(basic_config, sample_data):
    """Pre-trained SOM for testing"""
    som = SOM(sample_data, basic_config)
    som.train(10)
    return som


@pytest.fixture
def vectors_file(tmp_path):
    """Plain-text vectors, records spanning and sharing lines"""
    path = tmp_path / "vectors.txt"
    path.write_text("0.0 0.0\n1.0 1.0 0.5\n0.5\n0.25 0.75\n")
    return path
