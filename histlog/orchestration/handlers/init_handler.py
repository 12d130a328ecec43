"""
InitHandler - Handles the INIT state.

Opens the input log, the output sinks and the accumulator.
"""

import sys
from typing import Callable, Optional, TextIO

from tqdm import tqdm

from histlog.domain.config import HistogramConfig
from histlog.domain.errors import InputOpenError
from histlog.orchestration.context import PipelineContext
from histlog.orchestration.states import ProcessorState
from histlog.services.formatting import build_output_format
from histlog.services.histogram import Histogram, HdrHistogramAdapter, HistogramAccumulator
from histlog.services.log_reader import IntervalSource, IntervalLogReader
from histlog.services.sinks import OutputSinks
from .base import StateHandler


class InitHandler(StateHandler):
    """
    Handler for INIT state.

    Only a failure to open the input is fatal; output sinks that cannot
    be opened are reported and dropped.
    """

    def __init__(
        self,
        stdin: TextIO,
        stdout: TextIO,
        reader_factory: Callable[[TextIO], IntervalSource] = IntervalLogReader,
        histogram_factory: Callable[[HistogramConfig], Histogram] = HdrHistogramAdapter.create,
        progress_stream: Optional[TextIO] = None
    ):
        """
        Initialize handler.

        Args:
            stdin: Stream read when no input file is configured
            stdout: Stream receiving the report when no output file is configured
            reader_factory: Builds an interval source over an input stream
            histogram_factory: Builds the empty accumulated histogram
            progress_stream: Destination of the progress counter (default stderr)
        """
        super().__init__()
        self.stdin = stdin
        self.stdout = stdout
        self.reader_factory = reader_factory
        self.histogram_factory = histogram_factory
        self.progress_stream = progress_stream

    def handle(self, context: PipelineContext) -> tuple[PipelineContext, ProcessorState]:
        self._log_state_entry(context)
        config = context.config

        input_stream = self._open_input(config.input_file)
        context = context.with_resources(
            input_stream=input_stream if config.input_file is not None else None,
            reader=self.reader_factory(input_stream),
        )

        sinks = OutputSinks.open(config, self.stdout)
        if config.output_file is not None:
            self.logger.info(
                f"Writing interval log to {config.output_file if sinks.has_interval_log else '(none)'}, "
                f"percentile report to {config.percentile_report_file}"
            )

        context = context.with_resources(
            sinks=sinks,
            accumulator=HistogramAccumulator(self.histogram_factory(config.histogram)),
            output_format=build_output_format(config.csv, config.histogram.significant_digits),
            progress=tqdm(
                desc="Reading intervals",
                unit="interval",
                file=self.progress_stream or sys.stderr,
                disable=not config.show_progress,
                mininterval=1,
            ),
        )

        next_state = ProcessorState.AWAITING_FIRST_INTERVAL
        self._log_state_exit(context, next_state)
        return context, next_state

    def _open_input(self, input_file: Optional[str]) -> TextIO:
        """Open the input log, or fall back to stdin."""
        if input_file is None:
            self.logger.info("Reading histogram log from standard input")
            return self.stdin

        try:
            stream = open(input_file, "r", encoding="utf-8")
        except OSError as e:
            self.logger.error(f"Failed to open input file {input_file}: {e}")
            raise InputOpenError(input_file, str(e)) from e

        self.logger.info(f"Reading histogram log from {input_file}")
        return stream
