"""
Processor error types.
"""


class ProcessorError(Exception):
    """Base class for errors that abort a processing run."""


class InputOpenError(ProcessorError):
    """The configured input log could not be opened."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"failed to open input file {path}: {reason}")
