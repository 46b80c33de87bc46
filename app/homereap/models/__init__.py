"""Data models for homereap.

This module exports the volume, ladder and outcome models.
"""

from homereap.models.ladder import (
    HolderScope,
    LadderStep,
    SignalSeverity,
    StepAttempt,
    Tier,
    UnmountTarget,
)
from homereap.models.outcome import EscalationReport, MountState, Outcome, RunSummary
from homereap.models.volume import Account, Candidate, MountEntry, Rejection, SkipCondition

__all__ = [
    "Account",
    "Candidate",
    "EscalationReport",
    "HolderScope",
    "LadderStep",
    "MountEntry",
    "MountState",
    "Outcome",
    "Rejection",
    "RunSummary",
    "SignalSeverity",
    "SkipCondition",
    "StepAttempt",
    "Tier",
    "UnmountTarget",
]
