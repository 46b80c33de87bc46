"""Escalation ladder for reclaiming one candidate's mountpoint.

The ladder tries the least disruptive action first and checks the mount
state after every single step:

1. TryAllTheWays: plain unmounts, then forced unmounts, then a plain
   filesystem unmount with and without force (8 attempts).
2. Settle, SIGTERM the write-access holders, settle, TryAllTheWays again.
3. Settle, SIGKILL every holder, settle, TryAllTheWays again.
4. Lazy forced recursive unmount; lazy forced unmount if that fails.

Unmount failures are results, not exceptions: the engine always returns
an EscalationReport after a bounded number of steps.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import TYPE_CHECKING

from homereap.models.ladder import (
    HolderScope,
    LadderStep,
    SignalSeverity,
    StepAttempt,
    Tier,
    UnmountTarget,
)
from homereap.models.outcome import EscalationReport, MountState

if TYPE_CHECKING:
    from homereap.inspectors.base import MountInspector
    from homereap.models.volume import Candidate
    from homereap.operators.reaper import ProcessReaper
    from homereap.operators.unmount import Unmounter
    from homereap.utils.shell import CommandResult

logger = logging.getLogger(__name__)

TRY_ALL_THE_WAYS: tuple[LadderStep, ...] = (
    LadderStep("zfs-unmount", Tier.PLAIN, UnmountTarget.VOLUME),
    LadderStep("umount-recursive", Tier.PLAIN, UnmountTarget.MOUNTPOINT, recursive=True),
    LadderStep(
        "umount-recursive-all-targets",
        Tier.PLAIN,
        UnmountTarget.MOUNTPOINT,
        recursive=True,
        all_targets=True,
    ),
    LadderStep("zfs-unmount-force", Tier.FORCED, UnmountTarget.VOLUME, force=True),
    LadderStep(
        "umount-recursive-force",
        Tier.FORCED,
        UnmountTarget.MOUNTPOINT,
        recursive=True,
        force=True,
    ),
    LadderStep(
        "umount-recursive-all-targets-force",
        Tier.FORCED,
        UnmountTarget.MOUNTPOINT,
        recursive=True,
        all_targets=True,
        force=True,
    ),
    LadderStep("umount", Tier.FALLBACK, UnmountTarget.MOUNTPOINT),
    LadderStep("umount-force", Tier.FALLBACK, UnmountTarget.MOUNTPOINT, force=True),
)

SIGNAL_TIERS: tuple[LadderStep, ...] = (
    LadderStep(
        "term-write-holders",
        Tier.TERMINATE,
        severity=SignalSeverity.TERMINATE,
        scope=HolderScope.WRITE,
    ),
    LadderStep(
        "kill-all-holders",
        Tier.KILL,
        severity=SignalSeverity.KILL,
        scope=HolderScope.ANY,
    ),
)

LAZY_RECURSIVE = LadderStep(
    "umount-lazy-force-recursive",
    Tier.LAZY,
    UnmountTarget.MOUNTPOINT,
    recursive=True,
    force=True,
    lazy=True,
)
LAZY = LadderStep("umount-lazy-force", Tier.LAZY, UnmountTarget.MOUNTPOINT, force=True, lazy=True)


class EscalationEngine:
    """Drives one candidate's mountpoint from mounted to unmounted.

    Args:
        inspector: Mount state lookups.
        unmounter: Unmount operator.
        reaper: Process signalling operator.
        settle_seconds: Wait before and after each signal.
        operators: Account names that must never be acted on.
        sleep: Blocking sleep function.
    """

    def __init__(
        self,
        inspector: MountInspector,
        unmounter: Unmounter,
        reaper: ProcessReaper,
        *,
        settle_seconds: float = 5.0,
        operators: frozenset[str] = frozenset(),
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._inspector = inspector
        self._unmounter = unmounter
        self._reaper = reaper
        self._settle_seconds = settle_seconds
        self._operators = operators
        self._sleep = sleep

    def reclaim(self, candidate: Candidate) -> EscalationReport:
        """Run the ladder for one candidate until its mountpoint is gone.

        Args:
            candidate: Candidate to reclaim.

        Returns:
            EscalationReport with the final mount state and every attempt.

        Raises:
            ValueError: If the candidate is owned by an operator identity.
            InspectionError: If the mount state cannot be determined.
        """
        if candidate.owner in self._operators or candidate.account.is_operator:
            msg = f"Refusing to act on operator-owned volume {candidate.volume_id}"
            raise ValueError(msg)

        attempts: list[StepAttempt] = []

        if not self._is_mounted(candidate):
            logger.info("%s is not mounted, nothing to do", candidate.mountpoint)
            return EscalationReport(mount_state=MountState.UNMOUNTED)

        if self._try_all_the_ways(candidate, attempts):
            return self._report(candidate, attempts)

        for signal_step in SIGNAL_TIERS:
            self._settle()
            if self._attempt(candidate, signal_step, attempts):
                return self._report(candidate, attempts)
            self._settle()
            if self._try_all_the_ways(candidate, attempts):
                return self._report(candidate, attempts)

        logger.warning("Falling back to lazy unmount of %s", candidate.mountpoint)
        if self._attempt(candidate, LAZY_RECURSIVE, attempts):
            return self._report(candidate, attempts)
        if not attempts[-1].command_succeeded:
            self._attempt(candidate, LAZY, attempts)

        return self._report(candidate, attempts)

    def _try_all_the_ways(self, candidate: Candidate, attempts: list[StepAttempt]) -> bool:
        """Run the eight unmount attempts, stopping at the first that works."""
        for step in TRY_ALL_THE_WAYS:
            if self._attempt(candidate, step, attempts):
                return True
        return False

    def _attempt(
        self,
        candidate: Candidate,
        step: LadderStep,
        attempts: list[StepAttempt],
    ) -> bool:
        """Run one step, record it, and report whether the mountpoint is gone."""
        logger.debug(
            "Ladder step %s (tier %s) for %s",
            step.name,
            step.tier.name,
            candidate.volume_id,
        )
        result = self._run_step(candidate, step)
        mounted = self._is_mounted(candidate)
        error = None if result.success else (result.stderr.strip() or None)
        attempts.append(
            StepAttempt(
                step=step,
                returncode=result.returncode,
                mounted_after=mounted,
                error=error,
            )
        )
        if not mounted:
            logger.info("%s unmounted by %s", candidate.mountpoint, step.name)
        return not mounted

    def _run_step(self, candidate: Candidate, step: LadderStep) -> CommandResult:
        if step.severity is not None:
            return self._reaper.signal(candidate.mountpoint, step.severity, step.scope)

        if step.target == UnmountTarget.VOLUME:
            return self._unmounter.unmount(candidate.volume_id, native=True, force=step.force)

        return self._unmounter.unmount(
            candidate.mountpoint,
            recursive=step.recursive,
            all_targets=step.all_targets,
            force=step.force,
            lazy=step.lazy,
        )

    def _is_mounted(self, candidate: Candidate) -> bool:
        return self._inspector.is_mounted(candidate.mountpoint)

    def _settle(self) -> None:
        if self._settle_seconds > 0:
            logger.info("Waiting %.1fs for processes to release handles", self._settle_seconds)
            self._sleep(self._settle_seconds)

    def _report(self, candidate: Candidate, attempts: list[StepAttempt]) -> EscalationReport:
        """Do the final mount check and build the report."""
        state = MountState.MOUNTED if self._is_mounted(candidate) else MountState.UNMOUNTED
        if state == MountState.MOUNTED:
            logger.error(
                "%s is still mounted after %d attempt(s)",
                candidate.mountpoint,
                len(attempts),
            )
        else:
            logger.info(
                "%s reclaimed after %d attempt(s)",
                candidate.mountpoint,
                len(attempts),
            )
        return EscalationReport(mount_state=state, attempts=tuple(attempts))
