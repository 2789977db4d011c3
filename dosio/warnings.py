"""Structured warning classes for the :mod:`dosio` package."""
from __future__ import annotations


class DOSIOWarning(UserWarning):
    """Base warning class for dosio."""


class SignalArithmeticWarning(DOSIOWarning):
    """Elementwise signal arithmetic was skipped."""


class CatalogWarning(DOSIOWarning):
    """Catalog loading or fallback warnings."""


__all__ = [
    "DOSIOWarning",
    "SignalArithmeticWarning",
    "CatalogWarning",
]
