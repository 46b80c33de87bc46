"""Escalation ladder vocabulary.

Defines the severity tiers, the individual ladder steps and the record
kept for every attempted step.
"""

from dataclasses import dataclass
from enum import Enum, IntEnum


class Tier(IntEnum):
    """Severity tier of a ladder step, lowest first."""

    PLAIN = 0
    FORCED = 1
    FALLBACK = 2
    TERMINATE = 3
    KILL = 4
    LAZY = 5


class SignalSeverity(str, Enum):
    """Signal sent to processes holding a mountpoint.

    Values are the signal names understood by ``fuser``.
    """

    TERMINATE = "TERM"
    KILL = "KILL"


class HolderScope(str, Enum):
    """Which holders of a path are matched when signalling.

    Attributes:
        WRITE: Only processes with write access.
        ANY: Every process with any access.
    """

    WRITE = "write"
    ANY = "any"


class UnmountTarget(str, Enum):
    """What an unmount step operates on."""

    VOLUME = "volume"
    MOUNTPOINT = "mountpoint"


@dataclass(frozen=True, slots=True)
class LadderStep:
    """One reclamation action on the ladder.

    A step is either an unmount (``target`` is set) or a process signal
    (``severity`` is set), never both.

    Attributes:
        name: Short identifier used in logs.
        tier: Severity tier.
        target: Unmount target, for unmount steps.
        recursive: Unmount submounts too.
        all_targets: Unmount every mountpoint of the filesystem.
        force: Force the unmount.
        lazy: Detach now, clean up once references are dropped.
        severity: Signal to send, for signal steps.
        scope: Holders to signal, for signal steps.
    """

    name: str
    tier: Tier
    target: UnmountTarget | None = None
    recursive: bool = False
    all_targets: bool = False
    force: bool = False
    lazy: bool = False
    severity: SignalSeverity | None = None
    scope: HolderScope = HolderScope.ANY

    def __post_init__(self) -> None:
        """Validate that the step is exactly one kind of action."""
        if (self.target is None) == (self.severity is None):
            msg = f"Ladder step {self.name!r} must be an unmount or a signal"
            raise ValueError(msg)

    @property
    def is_signal(self) -> bool:
        """Check if this step signals processes."""
        return self.severity is not None


@dataclass(frozen=True, slots=True)
class StepAttempt:
    """Record of one executed ladder step.

    Attributes:
        step: The step that ran.
        returncode: Exit status of the underlying command.
        mounted_after: Mount state observed right after the step.
        error: Error output, if the command failed.
    """

    step: LadderStep
    returncode: int
    mounted_after: bool
    error: str | None = None

    @property
    def command_succeeded(self) -> bool:
        """Check if the underlying command exited cleanly."""
        return self.returncode == 0
