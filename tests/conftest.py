"""Pytest configuration and shared fixtures for the heat diffusion tests."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import pytest


# Add project root to path so imports work
PROJECT_ROOT = Path(__file__).parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

# Reference scenario: copper bar/plate, L=1 m, tmax=16 s, u0=13 °C, f=80.
SCENARIO = dict(length=1.0, max_time=16.0, initial_temp_celsius=13.0, source_amplitude=80.0)
U0_KELVIN = 13.0 + 273.15


def pytest_configure(config: pytest.Config) -> None:
    """Configure logging for tests."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(name)s [%(levelname)s] %(message)s",
    )


@pytest.fixture
def config_path() -> Path:
    """Path to the shipped default configuration."""
    return PROJECT_ROOT / "config" / "default_config.yaml"
