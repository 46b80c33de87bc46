"""Volume, account and candidate models.

This module defines the data structures the selection step works with:
mount table entries, the resolved owning account, and the candidates that
are allowed to reach the escalation ladder.
"""

from dataclasses import dataclass
from enum import Enum


class SkipCondition(str, Enum):
    """Reason a mounted volume was excluded from the worklist.

    Attributes:
        MOUNTPOINT_UNRESOLVED: Volume has no mountpoint or was unmounted
            between listing and processing.
        OWNER_UNRESOLVED: No account has the mountpoint as its home directory.
        OWNER_IS_OPERATOR: Owner is the identity running this pass.
        OWNER_LOGGED_IN: Owner still has a login session.
        NOT_ENCRYPTED: Volume encryption is off or unknown.
    """

    MOUNTPOINT_UNRESOLVED = "mountpoint_unresolved"
    OWNER_UNRESOLVED = "owner_unresolved"
    OWNER_IS_OPERATOR = "owner_is_operator"
    OWNER_LOGGED_IN = "owner_logged_in"
    NOT_ENCRYPTED = "not_encrypted"


@dataclass(frozen=True, slots=True)
class MountEntry:
    """A mounted volume as reported by the mount table.

    Attributes:
        volume_id: Opaque volume identifier (e.g. ``pool/USERDATA/alice``).
        mountpoint: Path the volume was mounted at when listed.
    """

    volume_id: str
    mountpoint: str

    def __post_init__(self) -> None:
        """Validate mount entry data after initialization."""
        if not self.volume_id:
            msg = "Volume identifier cannot be empty"
            raise ValueError(msg)


@dataclass(frozen=True, slots=True)
class Account:
    """An account name together with its derived session state.

    Attributes:
        name: Username.
        logged_in: Whether the account currently has a login session.
        is_operator: Whether the account is the identity running this pass.
    """

    name: str
    logged_in: bool
    is_operator: bool


@dataclass(frozen=True, slots=True)
class Candidate:
    """A volume that is eligible for reclamation in this pass.

    Construction fails for anything that violates the safety contract, so an
    unencrypted volume or an operator-owned volume cannot exist as a
    Candidate at all.

    Attributes:
        volume_id: Volume identifier.
        mountpoint: Path the volume is mounted at.
        account: Resolved owning account.
        encrypted: Volume encryption flag (always True for a valid candidate).
    """

    volume_id: str
    mountpoint: str
    account: Account
    encrypted: bool

    def __post_init__(self) -> None:
        """Enforce the candidate safety contract."""
        if not self.volume_id or not self.mountpoint:
            msg = "Candidate requires a volume identifier and a mountpoint"
            raise ValueError(msg)
        if not self.encrypted:
            msg = f"Refusing unencrypted volume as candidate: {self.volume_id}"
            raise ValueError(msg)
        if self.account.is_operator:
            msg = f"Refusing operator-owned volume as candidate: {self.volume_id}"
            raise ValueError(msg)
        if self.account.logged_in:
            msg = f"Refusing volume of logged-in account as candidate: {self.volume_id}"
            raise ValueError(msg)

    @property
    def owner(self) -> str:
        """Return the owning account name."""
        return self.account.name


@dataclass(frozen=True, slots=True)
class Rejection:
    """A mounted volume that was excluded, and why.

    Attributes:
        volume_id: Volume identifier.
        reason: Skip condition that excluded the volume.
        mountpoint: Resolved mountpoint, if it got that far.
        owner: Resolved owner, if it got that far.
    """

    volume_id: str
    reason: SkipCondition
    mountpoint: str | None = None
    owner: str | None = None
