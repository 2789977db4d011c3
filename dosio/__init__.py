"""Inputs/outputs interface of the dynamic optics simulation.

Every simulation component implements :class:`~dosio.dos.Dos`; every signal
it consumes or produces is a tagged :class:`~dosio.signals.IO` of one of the
kinds of :data:`~dosio.catalog.CATALOG`.
"""
from . import catalog, collection, signals
from .catalog import CATALOG, SignalKind, kind_of
from .collection import SignalVec, lookup, pop_these, pop_this, swap_these, swap_this
from .dos import Dos, handles
from .errors import (
    CatalogError,
    DOSIOError,
    DosError,
    InputsError,
    MissingSignalError,
    OutputsError,
    SignalLookupError,
    StepError,
)
from .signals import IO, SignalStream, extract_payload, into_result, ios, ios_with, jar, kind_equal, pull_next, retag

__all__ = [
    "catalog",
    "collection",
    "signals",
    "CATALOG",
    "SignalKind",
    "kind_of",
    "IO",
    "SignalStream",
    "SignalVec",
    "jar",
    "ios",
    "ios_with",
    "kind_equal",
    "retag",
    "pull_next",
    "extract_payload",
    "into_result",
    "lookup",
    "pop_these",
    "pop_this",
    "swap_these",
    "swap_this",
    "Dos",
    "handles",
    "DOSIOError",
    "CatalogError",
    "MissingSignalError",
    "SignalLookupError",
    "DosError",
    "InputsError",
    "OutputsError",
    "StepError",
]
