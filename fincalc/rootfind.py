"""
Newton-Raphson root finder for fincalc.

Purpose
-------
Generic scalar solver used by IRR and implied-rate problems. The iterate is
clamped from below so that ``(1 + r)`` stays positive, which keeps
fractional powers of the discount base defined.

Non-convergence is an outcome, not an exception: the solver returns the last
iterate with ``converged=False`` so callers can report it as an estimate.

Example
-------
>>> result = newton_raphson(lambda r: r * r - 0.04, lambda r: 2 * r, 0.5)
>>> result.converged, round(result.root, 4)
(True, 0.2)
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Callable

from .constants import NEWTON_LOWER_BOUND, NEWTON_MAX_ITERATIONS, NEWTON_TOLERANCE
from .exceptions import ConvergenceError

__all__ = ["RootResult", "newton_raphson"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RootResult:
    """
    Outcome of a root search.

    Attributes
    ----------
    root : float
        Last iterate. Exact within tolerance only when ``converged``.
    converged : bool
        Whether ``|f(root)| < tolerance`` was reached.
    iterations : int
        Newton steps taken.
    residual : float
        ``f(root)`` at the returned iterate.
    """

    root: float
    converged: bool
    iterations: int
    residual: float

    def raise_if_not_converged(self) -> float:
        """Return ``root`` or raise ConvergenceError."""
        if not self.converged:
            raise ConvergenceError(
                f"Newton-Raphson did not converge after {self.iterations} iterations "
                f"(last iterate {self.root:.6g}, residual {self.residual:.3e})."
            )
        return self.root


def newton_raphson(
    f: Callable[[float], float],
    f_prime: Callable[[float], float],
    initial_guess: float,
    *,
    max_iterations: int = NEWTON_MAX_ITERATIONS,
    tolerance: float = NEWTON_TOLERANCE,
    lower_bound: float = NEWTON_LOWER_BOUND,
) -> RootResult:
    """
    Solve ``f(r) = 0`` with ``r ← r − f(r) / f'(r)``.

    Parameters
    ----------
    f, f_prime : callable
        Function and its analytic derivative.
    initial_guess : float
        Starting iterate.
    max_iterations : int, default 100
        Newton step budget.
    tolerance : float, default 1e-4
        Absolute tolerance on ``|f(r)|``.
    lower_bound : float, default -0.99
        Iterates below this value are clamped to it.

    Returns
    -------
    RootResult
        ``converged`` is False when the budget is exhausted, the derivative
        vanishes, or a non-finite value appears.
    """
    r = initial_guess
    fr = f(r)
    for iteration in range(max_iterations):
        if abs(fr) < tolerance:
            return RootResult(root=r, converged=True, iterations=iteration, residual=fr)
        dfr = f_prime(r)
        if dfr == 0 or not math.isfinite(dfr) or not math.isfinite(fr):
            logger.warning(
                "Newton-Raphson stopped at iteration %d: f=%r, f'=%r", iteration, fr, dfr
            )
            return RootResult(root=r, converged=False, iterations=iteration, residual=fr)
        r = r - fr / dfr
        if r < lower_bound:
            r = lower_bound
        fr = f(r)

    converged = abs(fr) < tolerance
    if not converged:
        logger.warning(
            "Newton-Raphson did not converge in %d iterations (r=%.6g, f=%.3e)",
            max_iterations, r, fr,
        )
    return RootResult(root=r, converged=converged, iterations=max_iterations, residual=fr)
