"""
Custom exceptions for fincalc.

Purpose
-------
Provides a unified exception hierarchy for consistent error handling
across all calculator modules. All exceptions inherit from FinCalcError,
enabling catch-all handling when needed.

Exception Hierarchy
-------------------
FinCalcError (base)
├── ConfigurationError - Invalid settings or configuration files
├── ValidationError - Input data validation failures (also a ValueError)
│   └── DomainError - Mathematically invalid inputs
└── ConvergenceError - Iterative solver did not converge

Anticipated boundaries (DDM and DCF growth checks) are NOT raised; they are
reported through the ``error`` field of the result record. Non-convergence
of the root finder is reported through ``RootResult.converged``; callers
that prefer an exception use ``RootResult.raise_if_not_converged()``.

Usage
-----
>>> from fincalc.exceptions import DomainError
>>>
>>> raise DomainError("volatility must be positive, got 0.0")
>>>
>>> # Catch all fincalc exceptions
>>> try:
...     result = black_scholes(contract)
... except FinCalcError as e:
...     print(f"fincalc error: {e}")
"""

__all__ = [
    "FinCalcError",
    "ConfigurationError",
    "ValidationError",
    "DomainError",
    "ConvergenceError",
]


class FinCalcError(Exception):
    """
    Base exception for all fincalc errors.

    Examples
    --------
    >>> try:
    ...     price_bond(1000, 5, 0, 5, 2)
    ... except FinCalcError as e:
    ...     logger.error(f"Bond pricing failed: {e}")
    """
    pass


class ConfigurationError(FinCalcError):
    """
    Invalid configuration or settings.

    Raised when a configuration file cannot be parsed or validated, such as:
    - Malformed JSON asset lists
    - Unknown keys in a CLI input file
    - Invalid environment settings

    Examples
    --------
    >>> raise ConfigurationError(
    ...     "assets file must contain a JSON list, got dict. "
    ...     "Wrap asset objects in [...]."
    ... )
    """
    pass


class ValidationError(FinCalcError, ValueError):
    """
    Input validation failures.

    Subclasses ValueError so callers that only know about built-in
    exceptions still catch it.

    Raised when input data fails validation checks, such as:
    - Negative amounts where only non-negative values make sense
    - Unknown categorical keys (health tier, filing status, method)
    - Empty cash-flow series

    Examples
    --------
    >>> raise ValidationError(
    ...     f"health must be one of ['average', 'excellent', 'good', 'poor'], "
    ...     f"got 'fair'."
    ... )
    """
    pass


class DomainError(ValidationError):
    """
    Mathematically invalid inputs.

    Raised when a formula is undefined for the supplied values:
    - Non-positive spot, strike, volatility or maturity (Black-Scholes)
    - Non-positive period counts (amortization, bond pricing)
    - Zero population size or margin of error (audit sampling)
    - Rates at or below -100%

    Examples
    --------
    >>> raise DomainError(
    ...     f"num_periods must be positive, got {n}. "
    ...     f"A level payment is undefined over zero periods."
    ... )
    """
    pass


class ConvergenceError(FinCalcError):
    """
    Iterative solver did not converge.

    Never raised by the engine itself; the root finder returns the last
    iterate with ``converged=False``. Raised by
    ``RootResult.raise_if_not_converged()`` for callers that want a hard
    failure.

    Examples
    --------
    >>> raise ConvergenceError(
    ...     f"Newton-Raphson did not converge after 100 iterations "
    ...     f"(last iterate 0.4312, residual 3.2e-02)."
    ... )
    """
    pass
