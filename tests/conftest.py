"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

import pytest


@pytest.fixture
def mock_zfs_list_output() -> str:
    """Sample ``zfs list -H -o name,mountpoint,mounted`` output for testing."""
    return (
        "rpool\t/\tno\n"
        "rpool/ROOT/ubuntu\t/\tyes\n"
        "rpool/USERDATA/root\t/root\tyes\n"
        "pool/USERDATA\t/home\tyes\n"
        "pool/USERDATA/alice\t/home/alice\tyes\n"
        "pool/USERDATA/bob\t/home/bob\tyes\n"
        "pool/USERDATA/erin\t/home/erin\tno\n"
        "pool/USERDATA/legacy\tlegacy\tyes\n"
        "pool/shared\t/srv/shared\tyes\n"
        "pool/homes-archive\t/homes-archive/frank\tyes\n"
    )


@pytest.fixture
def mock_who_output() -> str:
    """Sample ``who`` output for testing."""
    return """bob      pts/0        2026-10-16 08:12 (10.0.0.12)
root     tty1         2026-10-16 07:55
bob      pts/3        2026-10-16 09:40 (10.0.0.12)"""


@pytest.fixture
def mock_proc_mounts() -> str:
    """Sample /proc/self/mounts content for testing."""
    return """rpool/ROOT/ubuntu / zfs rw,relatime,xattr,posixacl 0 0
proc /proc proc rw,nosuid,nodev,noexec,relatime 0 0
pool/USERDATA/alice /home/alice zfs rw,relatime,xattr,posixacl 0 0
pool/USERDATA/dave /home/dave\\040jones zfs rw,relatime,xattr,posixacl 0 0"""


@pytest.fixture
def mock_empty_output() -> str:
    """Empty output for testing edge cases."""
    return ""
