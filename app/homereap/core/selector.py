"""Candidate selection.

Turns the list of mounted home volumes into the worklist of candidates
the escalation ladder may act on. Every exclusion is logged with its
reason so an operator can tell from the run log why a volume was left
alone.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from homereap.models.volume import Account, Candidate, MountEntry, Rejection, SkipCondition

if TYPE_CHECKING:
    from homereap.inspectors.base import MountInspector, OwnerResolver, SessionRegistry

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class SelectionResult:
    """Candidates and rejections from one selection, in mount table order."""

    candidates: list[Candidate] = field(default_factory=list)
    rejections: list[Rejection] = field(default_factory=list)


class CandidateSelector:
    """Selects the mounted volumes that are safe to reclaim.

    A volume becomes a candidate only if its mountpoint resolves, its owner
    resolves, the owner is not the operator, the owner is not logged in and
    the volume is encrypted. The checks run in that order and the first
    failing one decides the rejection reason.

    Args:
        inspector: Mount table and volume property lookups.
        sessions: Logged-in account lookup.
        owners: Mountpoint to account lookup.
        operators: Account names of the identity running this pass.
    """

    def __init__(
        self,
        inspector: MountInspector,
        sessions: SessionRegistry,
        owners: OwnerResolver,
        operators: frozenset[str],
    ) -> None:
        self._inspector = inspector
        self._sessions = sessions
        self._owners = owners
        self._operators = operators

    def select(self, entries: Iterable[MountEntry]) -> SelectionResult:
        """Build the worklist from mounted volume entries.

        The logged-in set is read once, before any volume is examined, so
        every volume is judged against the same snapshot.

        Args:
            entries: Mounted volumes under the home namespace.

        Returns:
            SelectionResult preserving the order of ``entries``.

        Raises:
            InspectionError: If logged-in accounts cannot be listed.
        """
        logged_in = self._sessions.logged_in_accounts()
        result = SelectionResult()

        for entry in entries:
            outcome = self._examine(entry, logged_in)
            if isinstance(outcome, Candidate):
                logger.info(
                    "Candidate: %s at %s (owner %s, logged out, encrypted)",
                    outcome.volume_id,
                    outcome.mountpoint,
                    outcome.owner,
                )
                result.candidates.append(outcome)
            else:
                logger.info(
                    "Skipping %s: %s (mountpoint=%s, owner=%s)",
                    outcome.volume_id,
                    outcome.reason.value,
                    outcome.mountpoint or "-",
                    outcome.owner or "-",
                )
                result.rejections.append(outcome)

        logger.info(
            "Selected %d candidate(s), skipped %d volume(s)",
            len(result.candidates),
            len(result.rejections),
        )
        return result

    def _examine(self, entry: MountEntry, logged_in: set[str]) -> Candidate | Rejection:
        """Run the eligibility checks for one volume."""
        volume_id = entry.volume_id

        mountpoint = self._inspector.mountpoint_of(volume_id)
        if mountpoint is None:
            return Rejection(volume_id=volume_id, reason=SkipCondition.MOUNTPOINT_UNRESOLVED)

        owner = self._owners.resolve_owner(mountpoint)
        if owner is None:
            return Rejection(
                volume_id=volume_id,
                reason=SkipCondition.OWNER_UNRESOLVED,
                mountpoint=mountpoint,
            )

        account = Account(
            name=owner,
            logged_in=owner in logged_in,
            is_operator=owner in self._operators,
        )

        if account.is_operator:
            return Rejection(
                volume_id=volume_id,
                reason=SkipCondition.OWNER_IS_OPERATOR,
                mountpoint=mountpoint,
                owner=owner,
            )

        if account.logged_in:
            return Rejection(
                volume_id=volume_id,
                reason=SkipCondition.OWNER_LOGGED_IN,
                mountpoint=mountpoint,
                owner=owner,
            )

        if not self._inspector.is_encrypted(volume_id):
            return Rejection(
                volume_id=volume_id,
                reason=SkipCondition.NOT_ENCRYPTED,
                mountpoint=mountpoint,
                owner=owner,
            )

        return Candidate(
            volume_id=volume_id,
            mountpoint=mountpoint,
            account=account,
            encrypted=True,
        )
