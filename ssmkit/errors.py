"""Exception types raised by ssmkit models and emissions.

All errors derive from :class:`SSMKitError` and from the builtin exception a
caller would naturally catch (``ValueError`` for bad parameters or data,
``TypeError`` for unsupported model types).
"""

from __future__ import annotations


class SSMKitError(Exception):
    """Base class for all ssmkit errors."""


class InvalidParameterError(SSMKitError, ValueError):
    """Model parameters are missing or malformed."""


class InvalidDataError(SSMKitError, ValueError):
    """Data passed to a model has the wrong shape, length, or content."""


class UnsupportedVariantError(SSMKitError, TypeError):
    """A model type is not supported as an emission model."""


__all__ = [
    "SSMKitError",
    "InvalidParameterError",
    "InvalidDataError",
    "UnsupportedVariantError",
]
