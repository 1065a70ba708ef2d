"""
Models package - Data layer for fxsim.
Contains the session configuration and mutable session state.
"""

from fxsim.models.session import (
    IterationRecord,
    OptimizationSession,
    SessionConfig,
    validate_initial_params,
)

__all__ = ['IterationRecord', 'OptimizationSession', 'SessionConfig', 'validate_initial_params']
