"""
Processor states.

Explicit state enumeration for the aggregation state machine.
"""

from enum import Enum, auto


class ProcessorState(Enum):
    """
    All possible states of one aggregation pass.

    States represent discrete phases of the pass with clear entry/exit
    conditions and transitions.
    """

    # Open input, sinks and accumulator
    INIT = auto()

    # Pulling intervals until the log's start time is known
    AWAITING_FIRST_INTERVAL = auto()

    # Pulling intervals until end of input
    STREAMING = auto()

    # Writing the overall percentile distribution
    FINALIZING = auto()

    # Terminal states
    DONE = auto()
    FAILED = auto()

    def is_terminal(self) -> bool:
        """Check if this is a terminal state."""
        return self in (ProcessorState.DONE, ProcessorState.FAILED)

    def __str__(self) -> str:
        """String representation of state."""
        return self.name


# Valid state transitions
VALID_TRANSITIONS = {
    ProcessorState.INIT: {
        ProcessorState.AWAITING_FIRST_INTERVAL,
        ProcessorState.FAILED,
    },
    ProcessorState.AWAITING_FIRST_INTERVAL: {
        ProcessorState.STREAMING,
        ProcessorState.FINALIZING,
        ProcessorState.FAILED,
    },
    ProcessorState.STREAMING: {
        ProcessorState.FINALIZING,
        ProcessorState.FAILED,
    },
    ProcessorState.FINALIZING: {
        ProcessorState.DONE,
        ProcessorState.FAILED,
    },
    ProcessorState.DONE: set(),    # Terminal
    ProcessorState.FAILED: set(),  # Terminal
}


def is_valid_transition(from_state: ProcessorState, to_state: ProcessorState) -> bool:
    """
    Check if a state transition is valid.

    Args:
        from_state: Current state
        to_state: Target state

    Returns:
        True if transition is valid
    """
    return to_state in VALID_TRANSITIONS.get(from_state, set())
