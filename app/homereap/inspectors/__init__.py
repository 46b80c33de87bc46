"""Read-only system lookups.

This module exports the mount, session and owner inspectors.
"""

from homereap.inspectors.base import InspectionError, MountInspector, OwnerResolver, SessionRegistry
from homereap.inspectors.owners import PasswdOwnerResolver
from homereap.inspectors.sessions import WhoSessionRegistry, operator_identities
from homereap.inspectors.zfs import ZfsMountInspector

__all__ = [
    "InspectionError",
    "MountInspector",
    "OwnerResolver",
    "PasswdOwnerResolver",
    "SessionRegistry",
    "WhoSessionRegistry",
    "ZfsMountInspector",
    "operator_identities",
]
