"""Generic forward dataflow engine over basic-block CFGs.

An :class:`Analysis` describes a join-semilattice and a per-statement transfer
function; the :class:`Engine` computes the least fixpoint of that description
over a :class:`~irscan.ir.control_flow_graph.CFG` with a worklist algorithm.

Termination relies on the lattice satisfying the ascending chain condition and
on the transfer function being monotone. Neither is checked at runtime.
"""

from abc import ABC, abstractmethod
from collections import deque
from types import MappingProxyType
from typing import Deque, Dict, Generic, Mapping, Sequence, Set, TypeVar, TYPE_CHECKING

from irscan.core.models import Statement
from irscan.core.registry import ProgramRegistry
from irscan.ir.control_flow_graph import CFG
from irscan.logger import LogLevel

if TYPE_CHECKING:
    from irscan.core.function import Function

S = TypeVar("S")


class Analysis(ABC, Generic[S]):
    """Abstract description of a forward dataflow analysis."""

    @abstractmethod
    def bottom(self) -> S:
        """Least element of the lattice."""
        pass

    @abstractmethod
    def join(self, a: S, b: S) -> S:
        """Least upper bound of two states."""
        pass

    @abstractmethod
    def initial_state(self) -> S:
        """State holding on entry of the function."""
        pass

    @abstractmethod
    def transfer(self, state: S, statement: Statement,
                 functions: Sequence["Function"], registry: ProgramRegistry) -> S:
        """State after executing ``statement`` in ``state``."""
        pass

    def leq(self, a: S, b: S) -> bool:
        """Partial order induced by ``join``."""
        return self.join(a, b) == b

    def is_bottom(self, state: S) -> bool:
        return state == self.bottom()


class Engine(Generic[S]):
    """Worklist fixpoint solver running one :class:`Analysis` over one CFG."""

    def __init__(self, cfg: CFG, analysis: Analysis[S], logger=None):
        self.cfg = cfg
        self.analysis = analysis
        self.logger = logger
        self.iterations = 0
        self._in: Dict[int, S] = {}
        self._out: Dict[int, S] = {}

    def _base_state(self, block_id: int) -> S:
        if block_id == self.cfg.entry:
            return self.analysis.initial_state()
        return self.analysis.bottom()

    def _incoming(self, block_id: int) -> S:
        state = self._base_state(block_id)
        for pred in self.cfg.predecessors(block_id):
            state = self.analysis.join(state, self._out[pred])
        return state

    def _apply_block(self, block_id: int, state: S,
                     functions: Sequence["Function"], registry: ProgramRegistry) -> S:
        # Unreached blocks stay at bottom
        if self.analysis.is_bottom(state):
            return state
        for statement in self.cfg.get_block(block_id).statements:
            state = self.analysis.transfer(state, statement, functions, registry)
        return state

    def run_analysis(self, functions: Sequence["Function"], registry: ProgramRegistry) -> Mapping[int, S]:
        """Compute the fixpoint and return the out-state of every block.

        Args:
            functions: Every function of the program, handed to the transfer function
            registry: Operation registry of the program, handed to the transfer function

        Returns:
            Read-only mapping from block id to its final out-state
        """
        block_ids = [b.block_id for b in self.cfg.get_basic_blocks()]
        bottom = self.analysis.bottom()
        self._in = {b: self._base_state(b) for b in block_ids}
        self._out = {b: bottom for b in block_ids}
        self.iterations = 0

        worklist: Deque[int] = deque(block_ids)
        queued: Set[int] = set(block_ids)
        while worklist:
            block_id = worklist.popleft()
            queued.discard(block_id)
            self.iterations += 1

            in_state = self._incoming(block_id)
            self._in[block_id] = in_state
            out_state = self._apply_block(block_id, in_state, functions, registry)
            if out_state != self._out[block_id]:
                self._out[block_id] = out_state
                for succ in self.cfg.successors(block_id):
                    if succ not in queued:
                        worklist.append(succ)
                        queued.add(succ)

        if self.logger:
            self.logger.log(f"{type(self.analysis).__name__} on {self.cfg.function_name} "
                            f"converged after {self.iterations} iterations", LogLevel.DEBUG)
        return self.result()

    def result(self) -> Mapping[int, S]:
        return MappingProxyType(self._out)

    def in_states(self) -> Mapping[int, S]:
        return MappingProxyType(self._in)

    def is_fixpoint(self, functions: Sequence["Function"], registry: ProgramRegistry) -> bool:
        """True if one more round of join and transfer leaves every out-state unchanged."""
        for block in self.cfg.get_basic_blocks():
            in_state = self._incoming(block.block_id)
            if self._apply_block(block.block_id, in_state, functions, registry) != self._out[block.block_id]:
                return False
        return True
