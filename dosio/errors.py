"""Custom exceptions for the :mod:`dosio` package."""
from __future__ import annotations

from typing import Any, Optional, Union


class DOSIOError(Exception):
    """Base exception for DOS inputs/outputs errors."""


class ConfigurationError(DOSIOError, ValueError):
    """Invalid configuration file or parameter."""


class CatalogError(DOSIOError, ValueError):
    """Unknown signal kind or unreadable catalog source."""


class MissingSignalError(DOSIOError, LookupError):
    """A signal of a known kind carries no payload."""

    def __init__(self, kind: Any) -> None:
        self.kind = kind
        super().__init__(f"{kind} is missing")


class SignalLookupError(DOSIOError, LookupError):
    """A signal collection has no entry of the requested kind.

    Raised by kind lookups on signal collections.  Every declared signal is
    expected to be present, so this is a programming error and should not be
    caught by drivers.
    """

    def __init__(self, kind: Any) -> None:
        self.kind = kind
        super().__init__(f"No {kind} entry in signal collection")


class DosError(DOSIOError, RuntimeError):
    """Failure of one of the ``inputs``/``outputs``/``step`` methods.

    The underlying cause is either an exception, chained as ``__cause__``,
    or a plain message.
    """

    phase = "DOS"

    def __init__(self, cause: Union[str, BaseException, None] = None) -> None:
        super().__init__(cause)
        self.cause: Optional[Union[str, BaseException]] = cause
        if isinstance(cause, BaseException):
            self.__cause__ = cause

    def __str__(self) -> str:
        text = f"An error occurred with the {self.phase} method"
        if self.cause is not None:
            text += f"\nCaused by: {self.cause}"
        return text


class InputsError(DosError):
    """A component rejected its input signals."""

    phase = "inputs"


class OutputsError(DosError):
    """A component could not build its output signals."""

    phase = "outputs"


class StepError(DosError):
    """The state advance of a component reported termination."""

    phase = "step"


__all__ = [
    "DOSIOError",
    "ConfigurationError",
    "CatalogError",
    "MissingSignalError",
    "SignalLookupError",
    "DosError",
    "InputsError",
    "OutputsError",
    "StepError",
]
