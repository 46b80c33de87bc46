"""Abstract base classes for the read-only lookups.

This module defines the interfaces the selection and escalation steps
consume: the mount table, the login session registry and the
home-directory owner lookup.
"""

from abc import ABC, abstractmethod

from homereap.models.volume import MountEntry

# Property values that mean "no usable value"
_UNSET_VALUES = frozenset({"", "-"})
_NO_MOUNTPOINT_VALUES = frozenset({"none", "legacy"})
_UNENCRYPTED_VALUES = frozenset({"off"})


class InspectionError(RuntimeError):
    """Raised when a required system lookup cannot be performed."""


class MountInspector(ABC):
    """Abstract base class for mount table inspectors.

    Inspectors answer three questions: which volumes are mounted under a
    path, what a volume property is set to, and whether a volume or path
    is currently mounted.

    Example:
        >>> inspector = ZfsMountInspector()
        >>> for entry in inspector.list_mounted("/home"):
        ...     print(entry.volume_id, inspector.is_encrypted(entry.volume_id))
    """

    @abstractmethod
    def is_available(self) -> bool:
        """Check if the volume tooling is available on the system.

        Returns:
            True if the inspector can be used, False otherwise.
        """

    @abstractmethod
    def list_mounted(self, under: str) -> list[MountEntry]:
        """List mounted volumes whose mountpoint lies below a path.

        Args:
            under: Mountpoint prefix (the home-directory namespace).

        Returns:
            Mount entries in mount table order.

        Raises:
            InspectionError: If the mount table cannot be read.
        """

    @abstractmethod
    def get_property(self, volume_id: str, name: str) -> str | None:
        """Read a single volume property.

        Args:
            volume_id: Volume identifier.
            name: Property name ("mountpoint" or "encryption").

        Returns:
            The property value, or None if it could not be read.
        """

    @abstractmethod
    def is_mounted(self, target: str) -> bool:
        """Check if a volume or a path is currently mounted.

        Args:
            target: Volume identifier, or an absolute mountpoint path.

        Returns:
            True if mounted, False otherwise.

        Raises:
            InspectionError: If the mount state cannot be determined.
        """

    def mountpoint_of(self, volume_id: str) -> str | None:
        """Resolve the live mountpoint of a volume.

        Returns None if the volume has no mountpoint property, or if it is
        no longer mounted there (it may have been unmounted since listing).

        Args:
            volume_id: Volume identifier.

        Returns:
            Mountpoint path, or None.
        """
        value = self.get_property(volume_id, "mountpoint")
        if value is None or value in _UNSET_VALUES or value in _NO_MOUNTPOINT_VALUES:
            return None
        if not self.is_mounted(value):
            return None
        return value

    def is_encrypted(self, volume_id: str) -> bool:
        """Check if a volume is encrypted.

        An unreadable property counts as unencrypted.

        Args:
            volume_id: Volume identifier.

        Returns:
            True only if encryption is positively reported as enabled.
        """
        value = self.get_property(volume_id, "encryption")
        if value is None:
            return False
        value = value.strip().lower()
        return value not in _UNSET_VALUES and value not in _UNENCRYPTED_VALUES


class SessionRegistry(ABC):
    """Abstract base class for login session lookups."""

    @abstractmethod
    def logged_in_accounts(self) -> set[str]:
        """Return the names of all accounts with a login session.

        Returns:
            Set of usernames (exact, case-sensitive).

        Raises:
            InspectionError: If sessions cannot be listed.
        """


class OwnerResolver(ABC):
    """Abstract base class for mountpoint owner lookups."""

    @abstractmethod
    def resolve_owner(self, mountpoint: str) -> str | None:
        """Map a home-directory mountpoint to its account.

        Args:
            mountpoint: Absolute mountpoint path.

        Returns:
            Account name, or None if no account maps to the path.
        """
