"""Per-candidate outcome and run summary models."""

from dataclasses import dataclass
from enum import Enum

from homereap.models.ladder import SignalSeverity, StepAttempt
from homereap.models.volume import Candidate, Rejection


class MountState(str, Enum):
    """Final mount state of a candidate's mountpoint."""

    MOUNTED = "still-mounted"
    UNMOUNTED = "unmounted"


@dataclass(frozen=True, slots=True)
class EscalationReport:
    """Result of driving one candidate through the ladder.

    Attributes:
        mount_state: Mount state after the final check.
        attempts: Every step that ran, in order.
    """

    mount_state: MountState
    attempts: tuple[StepAttempt, ...] = ()


@dataclass(frozen=True, slots=True)
class Outcome:
    """User-visible result for one candidate.

    Attributes:
        candidate: The candidate that was processed.
        mount_state: Final mount state.
        key_unload_attempted: Whether key unload was tried.
        key_unloaded: Whether key unload succeeded.
        attempts: Ladder steps that ran.
        error: Unexpected error that cut processing short, if any.
    """

    candidate: Candidate
    mount_state: MountState
    key_unload_attempted: bool = False
    key_unloaded: bool = False
    attempts: tuple[StepAttempt, ...] = ()
    error: str | None = None

    @property
    def reclaimed(self) -> bool:
        """Check if the mountpoint was unmounted."""
        return self.mount_state == MountState.UNMOUNTED

    def signals(self, severity: SignalSeverity | None = None) -> list[StepAttempt]:
        """Return the signal steps sent for this candidate."""
        return [
            attempt
            for attempt in self.attempts
            if attempt.step.is_signal and (severity is None or attempt.step.severity == severity)
        ]


@dataclass(frozen=True, slots=True)
class RunSummary:
    """Everything one pass produced.

    Attributes:
        outcomes: One outcome per candidate, in processing order.
        rejections: Volumes excluded during selection.
        environment_error: Why the pass ended early, if it did.
    """

    outcomes: tuple[Outcome, ...] = ()
    rejections: tuple[Rejection, ...] = ()
    environment_error: str | None = None

    @property
    def failed(self) -> list[Outcome]:
        """Return outcomes whose mountpoint is still mounted."""
        return [o for o in self.outcomes if not o.reclaimed]

    @property
    def nothing_to_do(self) -> bool:
        """Check if the pass found no candidates."""
        return not self.outcomes
