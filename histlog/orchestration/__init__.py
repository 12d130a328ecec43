"""
Orchestration layer for the aggregation pass.

State machine-based orchestration with explicit state transitions.
"""

from .states import ProcessorState
from .context import PipelineContext
from .state_machine import StateMachine

__all__ = [
    "ProcessorState",
    "PipelineContext",
    "StateMachine",
]
