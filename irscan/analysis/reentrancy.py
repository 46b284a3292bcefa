"""Reentrancy analysis: storage writes reachable after an external call."""

from enum import IntEnum
from typing import Sequence, TYPE_CHECKING

from irscan.analysis.dataflow import Analysis
from irscan.core.call_classifier import CallCategory, CallClassifier
from irscan.config import load_storage_suffixes
from irscan.core.models import Statement
from irscan.core.registry import ProgramRegistry

if TYPE_CHECKING:
    from irscan.core.function import Function


class ReentrancyState(IntEnum):
    """Taint status of a program point, ordered from bottom to top."""
    UNVISITED = 0
    CLEAN = 1             # No external call on any path reaching here
    CALL_MADE = 2         # External or library call on some path
    WRITE_AFTER_CALL = 3  # Storage written after such a call on some path


class ReentrancyAnalysis(Analysis[ReentrancyState]):
    """Flags a function if any path writes storage after an external or library call."""

    def __init__(self, storage_suffixes=None):
        self.storage_suffixes = storage_suffixes or load_storage_suffixes()

    def bottom(self) -> ReentrancyState:
        return ReentrancyState.UNVISITED

    def join(self, a: ReentrancyState, b: ReentrancyState) -> ReentrancyState:
        return max(a, b)

    def initial_state(self) -> ReentrancyState:
        return ReentrancyState.CLEAN

    def transfer(self, state: ReentrancyState, statement: Statement,
                 functions: Sequence["Function"], registry: ProgramRegistry) -> ReentrancyState:
        category = CallClassifier(functions, registry, self.storage_suffixes).categorize(statement)
        if category in (CallCategory.EXTERNAL, CallCategory.LIBRARY):
            return self.join(state, ReentrancyState.CALL_MADE)
        if category is CallCategory.STORAGE_WRITE and state >= ReentrancyState.CALL_MADE:
            return ReentrancyState.WRITE_AFTER_CALL
        return state
