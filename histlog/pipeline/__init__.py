"""
Pipeline execution layer.

High-level executor that wires together all components.
"""

from .executor import LogProcessorExecutor

__all__ = ["LogProcessorExecutor"]
