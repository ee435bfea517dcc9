"""
pytest configuration for the NDVI heatmap test suite

This file configures pytest settings and provides shared fixtures.
"""

import pytest
import sys
from pathlib import Path

import numpy as np
from loguru import logger

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from ndvi_heatmap.config import HeatmapConfig
from ndvi_heatmap.engine import HeatmapEngine
from ndvi_heatmap.viewport import ViewportTransform


# Test configuration
def pytest_configure(config):
    """Configure pytest with custom markers"""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test"
    )


# Shared fixtures
@pytest.fixture
def config():
    """Default engine configuration (800x800 canvas, scale 1..8)"""
    return HeatmapConfig()


@pytest.fixture
def transform(config):
    return ViewportTransform.from_config(config)


@pytest.fixture
def engine(config):
    """Engine with no grid loaded yet"""
    return HeatmapEngine(config)


@pytest.fixture
def grid_2x2():
    """Small grid spanning the full colour ramp"""
    return [[0.0, 0.5], [0.75, 1.0]]


@pytest.fixture
def grid_4x4():
    """4x4 grid with distinct values 0/15 .. 15/15 in row-major order"""
    return np.arange(16, dtype=np.float64).reshape(4, 4) / 15.0


@pytest.fixture
def loaded_engine(engine, grid_2x2):
    engine.set_grid(grid_2x2)
    return engine


@pytest.fixture
def quiet_logger():
    """Drop loguru sinks added during a test (e.g. bound to captured streams)"""
    yield logger
    logger.remove()
