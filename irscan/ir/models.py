"""IR graph data models for control flow graphs."""

from dataclasses import dataclass, field
from typing import List, Dict, Any
from enum import Enum

from irscan.core.models import Statement


class ControlFlowType(Enum):
    """Types of control flow edges."""
    SEQUENTIAL = "sequential"    # Block runs into the start of another block
    FALLTHROUGH = "fallthrough"  # Fallthrough branch of a terminating invocation
    BRANCH = "branch"            # Single explicit jump
    CONDITIONAL = "conditional"  # One of several branch targets


@dataclass
class BasicBlock:
    """Represents a basic block in the control flow graph.

    ``block_id`` is the program-wide index of the block's first statement,
    ``start`` and ``end`` delimit the half-open slice of the function's
    statement list the block covers.
    """
    block_id: int
    function_id: str
    start: int
    end: int
    statements: List[Statement] = field(default_factory=list)
    successors: List[int] = field(default_factory=list)
    function_calls: List[str] = field(default_factory=list)
    is_entry: bool = False
    is_exit: bool = False

    def get_id(self) -> int:
        return self.block_id

    def get_instructions(self) -> List[Statement]:
        return self.statements

    def get_outgoing_basic_blocks(self) -> List[int]:
        return self.successors

    def __len__(self) -> int:
        return len(self.statements)


@dataclass
class CFGEdge:
    """Edge in control flow graph."""
    source: int
    target: int
    edge_type: ControlFlowType


@dataclass
class CFGMetrics:
    """Metrics for control flow graph."""
    num_blocks: int
    num_edges: int
    cyclomatic_complexity: int
    entry_block: int
    exit_blocks: List[int]
    unreachable_blocks: List[int]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            'num_blocks': self.num_blocks,
            'num_edges': self.num_edges,
            'cyclomatic_complexity': self.cyclomatic_complexity,
            'entry_block': self.entry_block,
            'exit_blocks': self.exit_blocks,
            'unreachable_blocks': self.unreachable_blocks
        }
