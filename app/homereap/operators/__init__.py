"""Operators for the destructive steps of a pass.

This module exports the unmount and process operators.
"""

from homereap.operators.base import CommandOperator
from homereap.operators.reaper import HolderReport, ProcessReaper
from homereap.operators.unmount import Unmounter

__all__ = ["CommandOperator", "HolderReport", "ProcessReaper", "Unmounter"]
