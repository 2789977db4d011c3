from __future__ import annotations

import math

import numpy as np
import pandas as pd
import pytest

from dosio.components import SignalRecorder, SignalReplay
from dosio.errors import InputsError, OutputsError, StepError
from dosio.runtime.history import STEP_COLUMN
from dosio.signals import IO


def test_replay_stops_with_shortest_series() -> None:
    replay = SignalReplay({"Pssn": [1.0, 2.0], "SrcWfeRms": [1.0, 2.0, 3.0]})
    assert replay.outputs() is None
    assert [io.name for io in replay.outputs_tags()] == ["Pssn", "SrcWfeRms"]
    first = replay.in_step_out(None)
    assert [(io.name, io.data) for io in first] == [("Pssn", 1.0), ("SrcWfeRms", 1.0)]
    replay.step()
    with pytest.raises(StepError):
        replay.step()
    assert replay.step_count == 2


def test_replay_from_frame_sorts_by_step() -> None:
    frame = pd.DataFrame({STEP_COLUMN: [1, 0], "Pssn": [[2.0], float("nan")]})
    replay = SignalReplay.from_frame(frame)
    first = replay.in_step_out(None)
    assert first[0].data is None
    second = replay.in_step_out(None)
    np.testing.assert_allclose(second[0].data, [2.0])


def test_recorder_accepts_configured_kinds_only() -> None:
    recorder = SignalRecorder(["Pssn"])
    recorder.in_step_out([IO("Pssn", [1.0])])
    assert recorder.history.column("Pssn") == [[1.0]]
    with pytest.raises(InputsError):
        recorder.inputs([IO("TTcmd", [1.0])])


def test_recorder_without_kinds_accepts_everything() -> None:
    recorder = SignalRecorder()
    recorder.inputs([IO("TTcmd", [1.0]), IO("Pssn", None)]).step()
    assert recorder.inputs_tags() == []
    assert recorder.history.kinds() == ["TTcmd"]


def test_recorder_statistics() -> None:
    recorder = SignalRecorder(["Pssn"], statistics=True, outputs=["Pssn"])
    (rms,) = recorder.in_step_out([IO("Pssn", [3.0, 4.0])])
    assert rms.name == "Pssn"
    assert rms.data[0] == pytest.approx(math.sqrt(12.5))


def test_recorder_outputs_require_statistics() -> None:
    recorder = SignalRecorder(["Pssn"], outputs=["Pssn"])
    recorder.inputs([IO("Pssn", [1.0])]).step()
    with pytest.raises(OutputsError, match="never configured"):
        recorder.outputs()
