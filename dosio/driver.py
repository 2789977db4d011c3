"""Sequential driver of simulation components.

Components are called in pipeline order once per tick.  The signals emitted
during a tick are collected on a per-tick bus and each component receives
the bus entries matching its declared input kinds.  A later emitter of a
kind replaces the earlier entry.  Components without declared inputs
receive ``None``.

The run stops cleanly when a component reports exhaustion
(:class:`~dosio.errors.StepError`).  Input and output errors are logged and
re-raised after the recording is written.  A finished run writes its
:class:`RunSummary` as JSON when ``summary_path`` is configured.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

from .collection import SignalVec, swap_this
from .components.recorder import SignalRecorder
from .dos import Dos
from .errors import DosError, StepError
from .io import writer
from .schema import DriverConfig
from .signals import IO

logger = logging.getLogger(__name__)


@dataclass
class RunSummary:
    """Outcome of :meth:`Pipeline.run`.

    Attributes
    ----------
    steps : int
        Number of completed ticks.
    stop_reason : str
        ``"n_steps"`` when the tick limit was reached, ``"exhausted"`` when
        a component stopped.
    error : StepError or None
        The terminal step error, if any.
    """

    steps: int
    stop_reason: str
    error: Optional[StepError] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "steps": self.steps,
            "stop_reason": self.stop_reason,
            "error": None if self.error is None else str(self.error),
        }


class Pipeline:
    """Drive ``components`` in order, routing signals by kind."""

    def __init__(self, components: Sequence[Dos], config: Optional[DriverConfig] = None) -> None:
        if not components:
            raise ValueError("Pipeline needs at least one component")
        self.config = config or DriverConfig()
        self.components: List[Dos] = list(components)
        self.recorder: Optional[SignalRecorder] = None
        if self.config.record.enabled:
            kinds = {io.name for component in self.components for io in component.outputs_tags()}
            self.recorder = SignalRecorder(sorted(kinds))
            self.components.append(self.recorder)
        self.step_count = 0

    @staticmethod
    def route(component: Dos, bus: Sequence[IO[Any]]) -> Optional[List[IO[Any]]]:
        """Select the bus entries matching the input kinds of ``component``."""

        tags = component.inputs_tags()
        if not tags:
            return None
        wanted = {io.name for io in tags}
        return [io for io in bus if io.name in wanted]

    def tick(self) -> SignalVec:
        """Run one ``in_step_out`` per component and return the tick's bus."""

        bus = SignalVec()
        for component in self.components:
            produced = component.in_step_out(self.route(component, bus))
            for io in produced or ():
                if any(entry.same_kind(io) for entry in bus):
                    swap_this(bus, io)
                else:
                    bus.append(io)
        self.step_count += 1
        return bus

    def run(self, n_steps: Optional[int] = None) -> RunSummary:
        """Tick until ``n_steps`` (or the configured limit) or until a component stops.

        The recording, if enabled, is written even when an input or output
        error halts the run.
        """

        limit = n_steps if n_steps is not None else self.config.n_steps
        log_every = self.config.log_every
        done = 0
        summary: Optional[RunSummary] = None
        try:
            while limit is None or done < limit:
                try:
                    self.tick()
                except StepError as exc:
                    logger.info("Pipeline stopped after %d steps: %s", done, exc)
                    summary = RunSummary(done, "exhausted", exc)
                    break
                except DosError:
                    logger.exception("Pipeline halted at step %d", done)
                    raise
                done += 1
                if log_every and done % log_every == 0:
                    logger.info("step=%d", done)
        finally:
            self._write_recording()
        if summary is None:
            summary = RunSummary(done, "n_steps")
        if self.config.summary_path is not None:
            writer.write_summary(summary.to_dict(), self.config.summary_path)
        return summary

    def _write_recording(self) -> None:
        record = self.config.record
        if self.recorder is not None and record.path is not None:
            self.recorder.write(record.path, compression=record.compression)


__all__ = ["Pipeline", "RunSummary"]
