"""Control Flow Graph construction and analysis for intraprocedural analysis."""

import networkx as nx
from typing import Dict, List, Optional, Sequence, Set, Tuple, TYPE_CHECKING

from irscan.core.models import Invocation, Return, Statement
from irscan.core.registry import ProgramRegistry
from irscan.ir.models import BasicBlock, CFGEdge, ControlFlowType, CFGMetrics
from irscan.logger import LogLevel
from irscan.utils import InvalidBranchTargetError

if TYPE_CHECKING:
    from irscan.core.function import Function


class CFG:
    """Basic blocks of one function and the successor relation between them.

    Built once by :class:`CFGBuilder` and never modified afterwards.
    """

    def __init__(self, function_name: str, entry: int, blocks: List[BasicBlock], edges: List[CFGEdge]):
        self.function_name = function_name
        self.entry = entry
        self._blocks: Dict[int, BasicBlock] = {b.block_id: b for b in blocks}
        self._edges: Tuple[CFGEdge, ...] = tuple(edges)
        self.graph = nx.DiGraph()
        for block in blocks:
            self.graph.add_node(block.block_id, block=block)
        for edge in edges:
            self.graph.add_edge(edge.source, edge.target, edge=edge)

    def __len__(self) -> int:
        return len(self._blocks)

    def __contains__(self, block_id: int) -> bool:
        return block_id in self._blocks

    def get_basic_blocks(self) -> List[BasicBlock]:
        """Blocks in ascending id order."""
        return list(self._blocks.values())

    def get_block(self, block_id: int) -> BasicBlock:
        return self._blocks[block_id]

    def get_entry_block(self) -> Optional[BasicBlock]:
        return self._blocks.get(self.entry)

    def get_edges(self) -> Tuple[CFGEdge, ...]:
        return self._edges

    def successors(self, block_id: int) -> List[int]:
        return list(self._blocks[block_id].successors)

    def predecessors(self, block_id: int) -> List[int]:
        return sorted(self.graph.predecessors(block_id))

    def reachable_blocks(self) -> Set[int]:
        """Blocks reachable from the entry block, the entry included."""
        if self.entry not in self.graph:
            return set()
        return set(nx.descendants(self.graph, self.entry)) | {self.entry}

    def is_reachable(self, source: int, target: int) -> bool:
        """Check if target is reachable from source."""
        return nx.has_path(self.graph, source, target)

    def compute_dominators(self) -> Dict[int, int]:
        """Immediate dominator of every reachable block (the entry maps to itself)."""
        if self.entry not in self.graph:
            return {}
        idom = nx.immediate_dominators(self.graph, self.entry)
        idom.setdefault(self.entry, self.entry)
        return idom

    def compute_metrics(self) -> CFGMetrics:
        """Compute CFG metrics."""
        num_blocks = len(self._blocks)
        num_edges = self.graph.number_of_edges()
        num_components = nx.number_weakly_connected_components(self.graph) if num_blocks else 0
        reachable = self.reachable_blocks()

        return CFGMetrics(
            num_blocks=num_blocks,
            num_edges=num_edges,
            cyclomatic_complexity=num_edges - num_blocks + 2 * num_components,
            entry_block=self.entry,
            exit_blocks=[b.block_id for b in self._blocks.values() if b.is_exit],
            unreachable_blocks=[b for b in self._blocks if b not in reachable]
        )


class CFGBuilder:
    """Partitions a function's statements into basic blocks."""
    
    def __init__(self, logger=None):
        """Initialize CFG builder.
        
        Args:
            logger: Logger instance
        """
        self.logger = logger

    def build_cfg(self, function_name: str, statements: Sequence[Statement], entry_point: int,
                  functions: Sequence["Function"], registry: ProgramRegistry) -> CFG:
        """Build the control flow graph of a function.
        
        Args:
            function_name: Name of the function, used for labels and errors
            statements: The function's statements, starting at ``entry_point``
            entry_point: Program-wide index of the first statement
            functions: Every function of the program
            registry: Operation registry of the program
            
        Returns:
            The function's CFG

        Raises:
            InvalidBranchTargetError: If a jump leaves the function's statements
        """
        leaders = self._find_leaders(function_name, statements, entry_point)
        known_functions = {f.name for f in functions}

        blocks: List[BasicBlock] = []
        edges: List[CFGEdge] = []
        bounds = sorted(leaders) + [len(statements)]
        for start, end in zip(bounds, bounds[1:]):
            block_id = entry_point + start
            block = BasicBlock(
                block_id=block_id,
                function_id=function_name,
                start=start,
                end=end,
                statements=list(statements[start:end]),
                is_entry=start == 0
            )
            for target, edge_type in self._successors(statements, entry_point, end):
                target_id = entry_point + target
                block.successors.append(target_id)
                edges.append(CFGEdge(source=block_id, target=target_id, edge_type=edge_type))
            block.is_exit = not block.successors
            for statement in block.statements:
                callee = registry.resolve_function_call(statement)
                if callee is not None and callee in known_functions:
                    block.function_calls.append(callee)
            blocks.append(block)

        cfg = CFG(function_name, entry_point, blocks, edges)
        if self.logger:
            self.logger.log(f"Built CFG for {function_name} with {len(blocks)} blocks and {len(edges)} edges",
                            LogLevel.DEBUG)
        return cfg

    def _find_leaders(self, function_name: str, statements: Sequence[Statement], entry_point: int) -> Set[int]:
        """Local offsets at which a basic block starts."""
        size = len(statements)
        leaders = {0} if size else set()
        for offset, statement in enumerate(statements):
            if isinstance(statement, Invocation) and not statement.is_straight_line:
                for branch in statement.branches:
                    if branch.is_fallthrough:
                        continue
                    target = branch.target - entry_point
                    if not 0 <= target < size:
                        raise InvalidBranchTargetError(function_name, entry_point + offset, branch.target)
                    leaders.add(target)
            elif not isinstance(statement, Return):
                continue
            if offset + 1 < size:
                leaders.add(offset + 1)
        return leaders

    def _successors(self, statements: Sequence[Statement], entry_point: int, end: int) -> List[Tuple[int, ControlFlowType]]:
        """Local successor offsets, in order, of the block ending before ``end``."""
        last = statements[end - 1]
        size = len(statements)
        if isinstance(last, Return):
            return []
        if last.is_straight_line:
            return [(end, ControlFlowType.SEQUENTIAL)] if end < size else []

        explicit = [b for b in last.branches if not b.is_fallthrough]
        edge_type = ControlFlowType.CONDITIONAL if len(last.branches) > 1 else ControlFlowType.BRANCH
        result: List[Tuple[int, ControlFlowType]] = []
        seen: Set[int] = set()
        for branch in explicit:
            target = branch.target - entry_point
            if target not in seen:
                seen.add(target)
                result.append((target, edge_type))
        # Fallthrough goes last
        if len(explicit) < len(last.branches) and end < size and end not in seen:
            result.append((end, ControlFlowType.FALLTHROUGH))
        return result
