"""
Pytest configuration and shared fixtures for fxsim tests.
"""

import sys
from pathlib import Path

# Add parent directory to path so we can import fxsim and blocks
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

import pytest

from fxsim.engine.controller import IterationController
from fxsim.engine.simulation_engine import SimulationEngine
from fxsim.models.session import SessionConfig


@pytest.fixture
def session_config():
    """Default session: rates (0.125, 0.25, 0.5, 1.0), window +/- 1/256, cap 50."""
    return SessionConfig.from_floats([0.125, 0.25, 0.5, 1.0], -1.0 / 256, 1.0 / 256, 50)


@pytest.fixture
def controller(session_config):
    return IterationController(session_config)


@pytest.fixture
def engine(controller):
    return SimulationEngine(controller)


@pytest.fixture
def never_converging_config():
    """Window no objective change can fall into, so sessions hit the cap."""
    def _make(max_iterations):
        return SessionConfig.from_floats([0.125, 0.25, 0.5, 1.0], 1.0e6, 1.0e6, max_iterations)
    return _make
