"""
Engine package - Business logic for fxsim.
Contains the evaluator and controller state machines and the clock driver.
"""

from fxsim.engine.evaluator import BaseEvaluator, QuadraticEvaluator, EVALUATOR_LATENCY
from fxsim.engine.controller import ControllerState, IterationController
from fxsim.engine.simulation_engine import SessionResult, SimulationEngine

__all__ = [
    'BaseEvaluator',
    'QuadraticEvaluator',
    'EVALUATOR_LATENCY',
    'ControllerState',
    'IterationController',
    'SessionResult',
    'SimulationEngine',
]
