"""One reclaim pass over all mounted home volumes.

Builds the candidate list, runs the escalation ladder for each candidate
in order, unloads every candidate's encryption key whatever the unmount
result, and logs what the account still has running afterwards. Each
candidate is isolated: an unexpected error while processing one is
recorded in its outcome and the pass moves on to the next.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

from homereap.core.config import ReaperConfig
from homereap.core.escalation import EscalationEngine
from homereap.core.selector import CandidateSelector
from homereap.inspectors.base import InspectionError, MountInspector, OwnerResolver, SessionRegistry
from homereap.inspectors.owners import PasswdOwnerResolver
from homereap.inspectors.sessions import WhoSessionRegistry, operator_identities
from homereap.inspectors.zfs import ZfsMountInspector
from homereap.models.outcome import MountState, Outcome, RunSummary
from homereap.models.volume import Candidate
from homereap.operators.reaper import ProcessReaper
from homereap.operators.unmount import Unmounter

logger = logging.getLogger(__name__)


class RunCoordinator:
    """Orchestrates a single reclaim pass.

    Collaborators default to the real system implementations built from
    the configuration; tests pass fakes.

    Args:
        config: Run configuration.
        inspector: Mount table lookups.
        sessions: Logged-in account lookup.
        owners: Mountpoint owner lookup.
        unmounter: Unmount and key-unload operator.
        reaper: Process operator.
        operators: Operator identities (defaults to the current identities).
        sleep: Blocking sleep used between ladder tiers.
    """

    def __init__(
        self,
        config: ReaperConfig,
        *,
        inspector: MountInspector | None = None,
        sessions: SessionRegistry | None = None,
        owners: OwnerResolver | None = None,
        unmounter: Unmounter | None = None,
        reaper: ProcessReaper | None = None,
        operators: frozenset[str] | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        timeout = config.command_timeout
        self._config = config
        self._inspector = inspector or ZfsMountInspector(timeout=timeout)
        self._sessions = sessions or WhoSessionRegistry(timeout=timeout)
        self._owners = owners or PasswdOwnerResolver()
        self._unmounter = unmounter or Unmounter(dry_run=config.dry_run, timeout=timeout)
        self._reaper = reaper or ProcessReaper(dry_run=config.dry_run, timeout=timeout)
        self._operators = (
            operators if operators is not None else operator_identities(config.extra_operators)
        )
        self._selector = CandidateSelector(
            self._inspector,
            self._sessions,
            self._owners,
            self._operators,
        )
        self._engine = EscalationEngine(
            self._inspector,
            self._unmounter,
            self._reaper,
            settle_seconds=config.settle_seconds,
            operators=self._operators,
            sleep=sleep,
        )

    def run(self) -> RunSummary:
        """Run one pass.

        Returns:
            RunSummary with one outcome per candidate and every rejection.
            If the volume listing or the session lookup fails, the summary
            carries the error and no candidate is processed.
        """
        logger.info(
            "Starting reclaim pass under %s (operator: %s, dry_run=%s)",
            self._config.home_root,
            ", ".join(sorted(self._operators)) or "unknown",
            self._config.dry_run,
        )

        try:
            entries = self._inspector.list_mounted(self._config.home_root)
        except InspectionError as e:
            logger.error("Cannot list mounted volumes: %s", e)
            return RunSummary(environment_error=str(e))

        if not entries:
            logger.info("No mounted volumes under %s, nothing to do", self._config.home_root)
            return RunSummary()

        try:
            selection = self._selector.select(entries)
        except InspectionError as e:
            logger.error("Candidate selection failed: %s", e)
            return RunSummary(environment_error=str(e))

        if not selection.candidates:
            logger.info("No candidate volumes, nothing to do")
            return RunSummary(rejections=tuple(selection.rejections))

        self._check_tools()
        outcomes = [self._process(candidate) for candidate in selection.candidates]

        failed = sum(1 for o in outcomes if not o.reclaimed)
        logger.info(
            "Pass complete: %d candidate(s), %d reclaimed, %d still mounted",
            len(outcomes),
            len(outcomes) - failed,
            failed,
        )
        return RunSummary(outcomes=tuple(outcomes), rejections=tuple(selection.rejections))

    def _check_tools(self) -> None:
        """Warn about missing tools before any candidate is processed."""
        if not self._unmounter.is_available():
            logger.warning("umount or zfs not found on PATH, unmount steps will fail")
        if not self._reaper.is_available():
            logger.warning("fuser not found on PATH, signal steps will have no effect")

    def _process(self, candidate: Candidate) -> Outcome:
        """Reclaim one candidate and unload its key."""
        logger.info(
            "Processing %s mounted at %s (owner %s)",
            candidate.volume_id,
            candidate.mountpoint,
            candidate.owner,
        )

        try:
            self._reaper.report_holders(candidate.mountpoint)
        except (OSError, RuntimeError) as e:
            logger.warning("Holder report failed for %s: %s", candidate.mountpoint, e)

        mount_state = MountState.MOUNTED
        attempts = ()
        error: str | None = None
        try:
            report = self._engine.reclaim(candidate)
            mount_state = report.mount_state
            attempts = report.attempts
        except (OSError, RuntimeError) as e:
            logger.exception("Escalation failed for %s", candidate.volume_id)
            error = str(e)

        key_unloaded = False
        try:
            key_unloaded = self._unmounter.unload_key(candidate.volume_id).success
        except (OSError, RuntimeError) as e:
            logger.exception("Key unload failed for %s", candidate.volume_id)
            error = error or str(e)

        try:
            self._reaper.report_account_processes(candidate.owner)
        except (OSError, RuntimeError) as e:
            logger.warning("Process report failed for %s: %s", candidate.owner, e)

        return Outcome(
            candidate=candidate,
            mount_state=mount_state,
            key_unload_attempted=True,
            key_unloaded=key_unloaded,
            attempts=attempts,
            error=error,
        )
