"""
LogProcessorExecutor - High-level processing orchestrator.

Wires together all services and executes the state machine.
"""

import logging
import sys
from typing import Callable, Optional, TextIO

from histlog.domain.config import HistogramConfig, ProcessorConfig
from histlog.orchestration import ProcessorState, PipelineContext, StateMachine
from histlog.orchestration.handlers import (
    InitHandler,
    AwaitingFirstIntervalHandler,
    StreamingHandler,
    FinalizingHandler,
)
from histlog.services.histogram import Histogram, HdrHistogramAdapter
from histlog.services.log_reader import IntervalSource, IntervalLogReader


class LogProcessorExecutor:
    """
    High-level log processor executor.

    Responsible for:
    1. Creating all handlers with dependency injection
    2. Building the state machine
    3. Running the aggregation pass
    4. Releasing the streams the pass opened
    """

    def __init__(
        self,
        config: ProcessorConfig,
        stdin: Optional[TextIO] = None,
        stdout: Optional[TextIO] = None,
        reader_factory: Callable[[TextIO], IntervalSource] = IntervalLogReader,
        histogram_factory: Callable[[HistogramConfig], Histogram] = HdrHistogramAdapter.create,
        progress_stream: Optional[TextIO] = None
    ):
        """
        Args:
            config: Validated processor configuration
            stdin: Input stream when no input file is configured (default sys.stdin)
            stdout: Report stream when no output file is configured (default sys.stdout)
            reader_factory: Builds the interval source over the input stream
            histogram_factory: Builds the empty accumulated histogram
            progress_stream: Destination of the progress counter (default sys.stderr)
        """
        self.config = config
        self.stdin = stdin if stdin is not None else sys.stdin
        self.stdout = stdout if stdout is not None else sys.stdout
        self.reader_factory = reader_factory
        self.histogram_factory = histogram_factory
        self.progress_stream = progress_stream
        self.logger = logging.getLogger(self.__class__.__name__)
        self.state_machine = self._build_state_machine()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def run(self) -> PipelineContext:
        """Execute the aggregation pass and return final context."""
        self.logger.info("Initializing histogram log processing")
        initial_context = PipelineContext(config=self.config, current_state=ProcessorState.INIT)

        final_context = self.state_machine.run(initial_context)
        try:
            self._log_results(final_context)
        finally:
            self._release(final_context)
        return final_context

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _build_state_machine(self) -> StateMachine:
        """Build state machine with all handlers."""
        handlers = {
            ProcessorState.INIT: InitHandler(
                stdin=self.stdin,
                stdout=self.stdout,
                reader_factory=self.reader_factory,
                histogram_factory=self.histogram_factory,
                progress_stream=self.progress_stream,
            ),
            ProcessorState.AWAITING_FIRST_INTERVAL: AwaitingFirstIntervalHandler(),
            ProcessorState.STREAMING: StreamingHandler(),
            ProcessorState.FINALIZING: FinalizingHandler(),
        }
        return StateMachine(handlers)

    def _release(self, context: PipelineContext):
        """Close the sinks and the input file opened during INIT."""
        if context.progress is not None:
            context.progress.close()
        if context.sinks is not None:
            context.sinks.close()
        if context.input_stream is not None and not context.input_stream.closed:
            context.input_stream.close()

    def _log_results(self, context: PipelineContext):
        """Log final results."""
        stats = context.stats
        if context.is_successful:
            self.logger.info(
                f"Processed {stats.intervals_read} interval(s), "
                f"{stats.rows_written} row(s) written, total count {stats.total_count}"
            )
        else:
            self.logger.error(f"Processing failed: {context.error_message}")
