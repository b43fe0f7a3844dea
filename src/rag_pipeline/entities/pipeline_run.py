"""Per-request pipeline state machine."""

import time
from dataclasses import dataclass, field
from enum import Enum

from rag_pipeline.errors import InternalError


class PipelineState(str, Enum):
    """Stages a request moves through, in order."""

    RECEIVED = "received"
    EXTRACTING = "extracting"
    RETRIEVING = "retrieving"
    GENERATING = "generating"
    CLEANING = "cleaning"
    RESTORING = "restoring"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (PipelineState.COMPLETED, PipelineState.FAILED)


_ORDER = [
    PipelineState.RECEIVED,
    PipelineState.EXTRACTING,
    PipelineState.RETRIEVING,
    PipelineState.GENERATING,
    PipelineState.CLEANING,
    PipelineState.RESTORING,
    PipelineState.COMPLETED,
]


@dataclass
class PipelineRun:
    """Tracks one pipeline invocation.

    Transitions only move forward through ``_ORDER`` (stages a task does
    not need are skipped). ``FAILED`` is reachable from any non-terminal
    state. Terminal states are final.

    Attributes:
        task: Task name (title, content, job_match, ...)
        state: Current state
        history: Every state visited, starting with RECEIVED
        error_kind: Kind of the error that moved the run to FAILED
        started_at: ``time.perf_counter()`` reading at creation
    """

    task: str
    state: PipelineState = PipelineState.RECEIVED
    history: list[PipelineState] = field(default_factory=lambda: [PipelineState.RECEIVED])
    error_kind: str | None = None
    started_at: float = field(default_factory=time.perf_counter)

    def advance(self, new_state: PipelineState) -> None:
        """Move to ``new_state``.

        Raises:
            InternalError: If the transition is not allowed
        """
        if self.state.is_terminal:
            raise InternalError(f"Run for '{self.task}' already {self.state.value}")

        if new_state is not PipelineState.FAILED:
            if _ORDER.index(new_state) <= _ORDER.index(self.state):
                raise InternalError(
                    f"Illegal transition {self.state.value} -> {new_state.value} for '{self.task}'"
                )

        self.state = new_state
        self.history.append(new_state)

    def fail(self, error_kind: str) -> None:
        self.error_kind = error_kind
        self.advance(PipelineState.FAILED)

    @property
    def elapsed_ms(self) -> float:
        return (time.perf_counter() - self.started_at) * 1000
