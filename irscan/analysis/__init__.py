"""Dataflow analyses over control flow graphs."""

from .dataflow import Analysis, Engine
from .reentrancy import ReentrancyAnalysis, ReentrancyState

__all__ = ['Analysis', 'Engine', 'ReentrancyAnalysis', 'ReentrancyState']
