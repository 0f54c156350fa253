"""Fit configuration shared by the inner distribution models."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class FitConfig:
    """
    Numerical settings used when fitting distribution parameters.

    Args:
        max_iter: Iteration cap for iterative (optimizer based) fits.
        tol: Gradient tolerance passed to the optimizer.
        reg_covar: Ridge added to the diagonal of every estimated covariance
            so that it stays positive definite.
    """

    max_iter: int = 1000
    tol: float = 1e-8
    reg_covar: float = 1e-6

    def __post_init__(self) -> None:
        """Validate FitConfig invariants."""
        if self.max_iter < 1:
            raise ValueError(f"max_iter must be >= 1, got {self.max_iter}.")

        if self.tol <= 0:
            raise ValueError(f"tol must be positive, got {self.tol}.")

        if self.reg_covar < 0:
            raise ValueError(f"reg_covar must be non-negative, got {self.reg_covar}.")


DEFAULT_FIT_CONFIG = FitConfig()

__all__ = ["FitConfig", "DEFAULT_FIT_CONFIG"]
