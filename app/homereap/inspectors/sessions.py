"""Login session registry and operator identity lookup."""

import getpass
import logging
import os
import pwd
import subprocess
from collections.abc import Iterable

from homereap.inspectors.base import InspectionError, SessionRegistry
from homereap.utils.shell import run_command

logger = logging.getLogger(__name__)


class WhoSessionRegistry(SessionRegistry):
    """Lists logged-in accounts from ``who`` (utmp).

    Args:
        timeout: Timeout in seconds for the ``who`` invocation.
    """

    def __init__(self, *, timeout: float = 30.0) -> None:
        self._timeout = timeout

    def logged_in_accounts(self) -> set[str]:
        """Return the set of accounts with at least one login session.

        Raises:
            InspectionError: If ``who`` cannot be executed or fails.
        """
        try:
            result = run_command(["who"], timeout=self._timeout)
        except (OSError, subprocess.TimeoutExpired) as e:
            msg = f"who could not be executed: {e}"
            raise InspectionError(msg) from e

        if not result.success:
            msg = f"who failed: {result.stderr.strip() or 'unknown error'}"
            raise InspectionError(msg)

        accounts = {line.split()[0] for line in result.stdout.splitlines() if line.strip()}
        logger.debug("Logged-in accounts: %s", ", ".join(sorted(accounts)) or "(none)")
        return accounts


def operator_identities(extra: Iterable[str] = ()) -> frozenset[str]:
    """Collect every identity that counts as the operator of this pass.

    This is the invoking login name, the account of the effective uid, the
    account that elevated privileges (``SUDO_USER``) and any configured
    extra names. All are compared as exact strings.

    Args:
        extra: Additional account names to treat as the operator.

    Returns:
        Frozen set of account names.
    """
    identities: set[str] = {name for name in extra if name}

    try:
        identities.add(getpass.getuser())
    except (KeyError, OSError):
        logger.debug("Could not determine invoking login name")

    try:
        identities.add(pwd.getpwuid(os.geteuid()).pw_name)
    except KeyError:
        logger.debug("Effective uid %d has no passwd entry", os.geteuid())

    sudo_user = os.environ.get("SUDO_USER")
    if sudo_user:
        identities.add(sudo_user)

    return frozenset(identities)
