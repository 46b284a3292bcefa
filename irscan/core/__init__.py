"""Core program model: functions, roles, statements and call classification."""

from .models import (
    Type,
    ConcreteTypeId,
    Param,
    Signature,
    FunctionData,
    BranchTarget,
    BranchInfo,
    Invocation,
    Return,
    Statement,
    LibfuncKind,
    ConcreteLibfunc,
)
from .registry import ProgramRegistry
from .call_classifier import CallBuckets, CallCategory, CallClassifier
from .function import Analyses, Function
from .program import Program

__all__ = [
    # Models
    'Type',
    'ConcreteTypeId',
    'Param',
    'Signature',
    'FunctionData',
    'BranchTarget',
    'BranchInfo',
    'Invocation',
    'Return',
    'Statement',
    'LibfuncKind',
    'ConcreteLibfunc',
    # Program
    'ProgramRegistry',
    'CallBuckets',
    'CallCategory',
    'CallClassifier',
    'Analyses',
    'Function',
    'Program',
]
