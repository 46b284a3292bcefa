"""irscan: static analysis core for stack-based smart-contract IR."""

__version__ = "1.0.0"
__author__ = "irscan Team"

from irscan.core.models import Type
from irscan.core.function import Function
from irscan.core.program import Program

__all__ = ['Type', 'Function', 'Program']
