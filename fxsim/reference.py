"""
Floating-point reference model.

Same objective, gradients, minimum tracking and convergence policy as the
fixed-point pipeline, computed in float64. Only used to cross-check the
numeric output of the fixed-point model, never by the pipeline itself.
"""

import logging
from dataclasses import dataclass
from typing import Sequence, Tuple

import numpy as np
from scipy import optimize

logger = logging.getLogger(__name__)

MINIMIZER = np.array([2.0, 0.0, -2.0, 0.0])
MINIMUM = -5.0


@dataclass
class ReferenceResult:
    """Outcome of a float64 reference run."""
    min_value: float
    optimal_params: Tuple[int, int, int, int]
    final_params: np.ndarray
    iterations: int
    converged: bool
    objectives: np.ndarray


def objective(x: Sequence[float]) -> float:
    """z = (a-2)^2 + b^2 + (c+2)^2 + (2d)^2 - 5"""
    a, b, c, d = np.asarray(x, dtype=np.float64)
    return float((a - 2.0) ** 2 + b ** 2 + (c + 2.0) ** 2 + (2.0 * d) ** 2 - 5.0)


def gradient(x: Sequence[float]) -> np.ndarray:
    a, b, c, d = np.asarray(x, dtype=np.float64)
    return np.array([2.0 * (a - 2.0), 2.0 * b, 2.0 * (c + 2.0), 8.0 * d])


def round_half_away(x: np.ndarray) -> np.ndarray:
    """Round to nearest, ties away from zero (np.round rounds ties to even)."""
    x = np.asarray(x, dtype=np.float64)
    return np.sign(x) * np.floor(np.abs(x) + 0.5)


def reference_descent(initial: Sequence[int], learning_rates: Sequence[float],
                      lower: float, upper: float, max_iterations: int) -> ReferenceResult:
    """
    Run gradient descent with the controller's policy in float64.

    Args:
        initial: Four starting values
        learning_rates: One learning rate per parameter
        lower: Lower bound of the accepted change in objective value
        upper: Upper bound of the accepted change in objective value
        max_iterations: Iteration cap

    Returns:
        ReferenceResult with the best value and its rounded parameters
    """
    x = np.asarray(initial, dtype=np.float64)
    rates = np.asarray(learning_rates, dtype=np.float64)
    best_value = np.inf
    best_params = tuple(int(p) for p in initial)
    previous = None
    converged = False
    objectives = []

    iterations = 0
    while iterations < max_iterations:
        z = objective(x)
        objectives.append(z)
        converged = previous is not None and lower <= z - previous <= upper
        if z < best_value:
            best_value = z
            best_params = tuple(int(p) for p in np.clip(round_half_away(x), -128, 127))
        x = x - rates * gradient(x)
        previous = z
        iterations += 1
        if converged:
            break

    logger.debug(f"Reference run: {iterations} iterations, min={best_value:.6f}")
    return ReferenceResult(
        min_value=float(best_value),
        optimal_params=best_params,
        final_params=x,
        iterations=iterations,
        converged=converged,
        objectives=np.array(objectives),
    )


def analytic_minimum(x0: Sequence[float] = (0.0, 0.0, 0.0, 0.0)) -> Tuple[np.ndarray, float]:
    """Locate the minimum with scipy as an independent check of MINIMIZER."""
    result = optimize.minimize(objective, np.asarray(x0, dtype=np.float64),
                               jac=gradient, method='BFGS')
    if not result.success:
        logger.warning(f"Reference minimisation did not converge: {result.message}")
    return result.x, float(result.fun)
