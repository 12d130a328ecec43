"""
State handlers for the aggregation pass.

Each handler implements logic for a specific processor state.
"""

from .base import StateHandler, IntervalStateHandler
from .init_handler import InitHandler
from .awaiting_first_interval_handler import AwaitingFirstIntervalHandler
from .streaming_handler import StreamingHandler
from .finalizing_handler import FinalizingHandler

__all__ = [
    "StateHandler",
    "IntervalStateHandler",
    "InitHandler",
    "AwaitingFirstIntervalHandler",
    "StreamingHandler",
    "FinalizingHandler",
]
