"""Kind-based lookup, removal and replacement on signal collections."""

from __future__ import annotations

import pytest

from dosio.collection import SignalVec, lookup, pop_these, pop_this, swap_these, swap_this
from dosio.errors import SignalLookupError
from dosio.signals import IO


def _signals():
    return [IO("M1HPCmd", [1.0]), IO("OSSM1Lcl6F", [2.0]), IO("Pssn", [3.0])]


def test_lookup_returns_live_entry() -> None:
    signals = _signals()
    entry = lookup(signals, IO("OSSM1Lcl6F"))
    assert entry is signals[1]
    entry.data = [20.0]
    assert lookup(signals, "OSSM1Lcl6F").data == [20.0]


def test_lookup_of_missing_kind_is_fatal() -> None:
    with pytest.raises(SignalLookupError, match="No SrcWfeRms entry"):
        lookup(_signals(), "SrcWfeRms")
    assert issubclass(SignalLookupError, LookupError)


def test_pop_these_is_all_or_nothing() -> None:
    signals = _signals()
    before = list(signals)
    assert pop_these(signals, [IO("M1HPCmd"), IO("SrcWfeRms")]) is None
    assert signals == before
    assert len(signals) == 3


def test_pop_these_follows_requested_order() -> None:
    signals = _signals()
    popped = pop_these(signals, ["Pssn", "M1HPCmd"])
    assert [io.name for io in popped] == ["Pssn", "M1HPCmd"]
    assert [io.data for io in popped] == [[3.0], [1.0]]
    assert [io.name for io in signals] == ["OSSM1Lcl6F"]


def test_pop_these_removes_distinct_entries_for_repeated_kinds() -> None:
    signals = [IO("Pssn", [1.0]), IO("Pssn", [2.0]), IO("M1HPCmd")]
    popped = pop_these(signals, ["Pssn", "Pssn"])
    assert [io.data for io in popped] == [[1.0], [2.0]]
    assert [io.name for io in signals] == ["M1HPCmd"]
    assert pop_these(signals, ["M1HPCmd", "M1HPCmd"]) is None
    assert len(signals) == 1


def test_pop_this() -> None:
    signals = _signals()
    assert pop_this(signals, "Pssn").data == [3.0]
    assert pop_this(signals, "Pssn") is None
    assert len(signals) == 2


def test_swap_these_skips_absent_kinds() -> None:
    signals = _signals()
    swap_these(signals, [IO("Pssn", [30.0]), IO("SrcWfeRms", [9.0])])
    assert len(signals) == 3
    assert [io.name for io in signals] == ["M1HPCmd", "OSSM1Lcl6F", "Pssn"]
    assert signals[2].data == [30.0]
    swap_this(signals, IO("M1HPCmd", [10.0]))
    assert signals[0].data == [10.0]


def test_signal_vec_indexing() -> None:
    vec = SignalVec(_signals())
    assert vec[0].name == "M1HPCmd"
    assert vec["Pssn"].data == [3.0]
    assert vec[IO("OSSM1Lcl6F")] is vec[1]
    assert [io.name for io in vec[1:]] == ["OSSM1Lcl6F", "Pssn"]
    vec["Pssn"] = [4.0]
    assert vec[2].name == "Pssn" and vec[2].data == [4.0]
    vec[IO("M1HPCmd")] = IO("M1HPCmd", [0.0])
    assert vec[0].data == [0.0]
    with pytest.raises(SignalLookupError):
        vec["SrcWfeRms"]
    with pytest.raises(SignalLookupError):
        vec["SrcWfeRms"] = [1.0]
    assert [kind.name for kind in vec.kinds()] == ["M1HPCmd", "OSSM1Lcl6F", "Pssn"]


def test_signal_vec_methods() -> None:
    vec = SignalVec(_signals())
    vec.swap_this(IO("Pssn", [5.0]))
    assert vec["Pssn"].data == [5.0]
    assert vec.pop_these(["Pssn", "SrcWfeRms"]) is None
    assert len(vec) == 3
    assert vec.pop_this("Pssn").data == [5.0]
    assert len(vec) == 2
