"""IR (Intermediate Representation) graphs built over function statements.

This module provides:
- Basic blocks and control flow graphs for intraprocedural analysis
"""

from .models import (
    BasicBlock,
    CFGEdge,
    ControlFlowType,
    CFGMetrics,
)

from .control_flow_graph import CFG, CFGBuilder

__all__ = [
    # Models
    'BasicBlock',
    'CFGEdge',
    'ControlFlowType',
    'CFGMetrics',
    # Builders
    'CFG',
    'CFGBuilder'
]
