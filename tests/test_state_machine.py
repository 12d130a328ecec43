"""
Tests for the processor state machine.

Uses stub handlers so transitions can be checked without any I/O.
"""

from dataclasses import replace

import pytest

from histlog.domain.config import ProcessorConfig
from histlog.orchestration import PipelineContext, ProcessorState, StateMachine
from histlog.orchestration.handlers.base import StateHandler
from histlog.orchestration.states import VALID_TRANSITIONS, is_valid_transition
from histlog.services.histogram import HistogramAccumulator
from conftest import InMemoryHistogram, make_interval


class StubHandler(StateHandler):
    """Handler that applies an optional context update and moves to a fixed next state."""

    def __init__(self, next_state: ProcessorState, update=None):
        super().__init__()
        self.next_state = next_state
        self.update = update
        self.calls = 0

    def handle(self, context):
        self.calls += 1
        if self.update is not None:
            context = self.update(context)
        return context, self.next_state


class RaisingHandler(StateHandler):
    """Handler that always raises."""

    def handle(self, context):
        raise RuntimeError("boom")


@pytest.fixture
def context() -> PipelineContext:
    return PipelineContext(config=ProcessorConfig(), current_state=ProcessorState.INIT)


def happy_path_handlers() -> dict:
    return {
        ProcessorState.INIT: StubHandler(ProcessorState.AWAITING_FIRST_INTERVAL),
        ProcessorState.AWAITING_FIRST_INTERVAL: StubHandler(
            ProcessorState.STREAMING,
            update=lambda c: c.with_reference_start_time(1000.0),
        ),
        ProcessorState.STREAMING: StubHandler(ProcessorState.FINALIZING),
        ProcessorState.FINALIZING: StubHandler(ProcessorState.DONE),
    }


class TestTransitions:
    """Tests for the transition table."""

    def test_terminal_states(self):
        """Test that only DONE and FAILED are terminal."""
        terminal = {s for s in ProcessorState if s.is_terminal()}
        assert terminal == {ProcessorState.DONE, ProcessorState.FAILED}

    def test_terminal_states_have_no_exits(self):
        """Test that terminal states allow no transitions."""
        assert VALID_TRANSITIONS[ProcessorState.DONE] == set()
        assert VALID_TRANSITIONS[ProcessorState.FAILED] == set()

    def test_every_live_state_can_fail(self):
        """Test that each non-terminal state may move to FAILED."""
        for state in ProcessorState:
            if not state.is_terminal():
                assert is_valid_transition(state, ProcessorState.FAILED)

    def test_awaiting_may_finish_without_streaming(self):
        """Test that an empty log can skip STREAMING."""
        assert is_valid_transition(ProcessorState.AWAITING_FIRST_INTERVAL, ProcessorState.FINALIZING)

    def test_streaming_never_goes_back(self):
        """Test that the start time latch cannot be re-entered."""
        assert not is_valid_transition(ProcessorState.STREAMING, ProcessorState.AWAITING_FIRST_INTERVAL)
        assert not is_valid_transition(ProcessorState.INIT, ProcessorState.DONE)

    def test_state_str(self):
        """Test state string representation."""
        assert str(ProcessorState.STREAMING) == "STREAMING"


class TestStateMachine:
    """Tests for StateMachine.run."""

    def test_happy_path_reaches_done(self, context):
        """Test running every state once to DONE."""
        handlers = happy_path_handlers()

        final = StateMachine(handlers).run(context)

        assert final.current_state == ProcessorState.DONE
        assert final.is_successful
        assert all(h.calls == 1 for h in handlers.values())

    def test_invalid_transition_fails(self, context):
        """Test that a handler returning a forbidden state fails the pass."""
        handlers = happy_path_handlers()
        handlers[ProcessorState.INIT] = StubHandler(ProcessorState.DONE)

        final = StateMachine(handlers).run(context)

        assert final.has_error
        assert "Invalid state transition" in final.error_message
        assert handlers[ProcessorState.AWAITING_FIRST_INTERVAL].calls == 0

    def test_handler_exception_fails(self, context):
        """Test that an exception is captured with its type."""
        handlers = happy_path_handlers()
        handlers[ProcessorState.STREAMING] = RaisingHandler()

        final = StateMachine(handlers).run(context)

        assert final.has_error
        assert "boom" in final.error_message
        assert final.error_details["error_type"] == "RuntimeError"
        assert final.error_details["state"] == "STREAMING"

    def test_missing_handler_fails(self, context):
        """Test that a state without a handler fails the pass."""
        handlers = happy_path_handlers()
        del handlers[ProcessorState.FINALIZING]

        final = StateMachine(handlers).run(context)

        assert final.has_error
        assert "No handler registered" in final.error_message

    def test_iteration_limit(self, context):
        """Test that the iteration limit stops a pass that never finishes."""
        handlers = happy_path_handlers()

        final = StateMachine(handlers, max_iterations=2).run(context)

        assert final.has_error
        assert final.error_message == "Processing exceeded maximum iterations"


class TestExitInvariants:
    """Tests for the invariants checked when a state is left."""

    def test_streaming_requires_latched_start_time(self, context):
        """Test that STREAMING cannot be entered before the start time is known."""
        handlers = happy_path_handlers()
        handlers[ProcessorState.AWAITING_FIRST_INTERVAL] = StubHandler(ProcessorState.STREAMING)

        final = StateMachine(handlers).run(context)

        assert final.has_error
        assert "before the start time was latched" in final.error_message
        assert handlers[ProcessorState.STREAMING].calls == 0

    def test_latched_start_time_cannot_change(self, context):
        """Test that replacing a latched start time fails the pass."""
        handlers = happy_path_handlers()
        handlers[ProcessorState.STREAMING] = StubHandler(
            ProcessorState.FINALIZING,
            update=lambda c: replace(c, reference_start_time=2000.0),
        )

        final = StateMachine(handlers).run(context)

        assert final.has_error
        assert "reference start time changed" in final.error_message
        assert final.error_details["state"] == "STREAMING"

    def test_legend_flag_cannot_be_reset(self, context):
        """Test that the legend is never scheduled for a second write."""
        handlers = happy_path_handlers()
        handlers[ProcessorState.INIT] = StubHandler(
            ProcessorState.AWAITING_FIRST_INTERVAL,
            update=lambda c: c.with_legend_written(),
        )
        handlers[ProcessorState.STREAMING] = StubHandler(
            ProcessorState.FINALIZING,
            update=lambda c: replace(c, legend_written=False),
        )

        final = StateMachine(handlers).run(context)

        assert final.has_error
        assert "legend" in final.error_message

    def test_statistics_must_match_accumulator(self, context):
        """Test that a merge without a counted interval fails the pass."""
        accumulator = HistogramAccumulator(InMemoryHistogram())

        def merge_without_counting(c):
            accumulator.merge(make_interval([1, 2, 3], start_sec=0.0))
            return c

        handlers = happy_path_handlers()
        handlers[ProcessorState.INIT] = StubHandler(
            ProcessorState.AWAITING_FIRST_INTERVAL,
            update=lambda c: c.with_resources(accumulator=accumulator),
        )
        handlers[ProcessorState.STREAMING] = StubHandler(
            ProcessorState.FINALIZING, update=merge_without_counting,
        )

        final = StateMachine(handlers).run(context)

        assert final.has_error
        assert "does not match accumulated count 3" in final.error_message

    def test_counted_merges_pass(self, context):
        """Test that merges recorded in the statistics satisfy the invariants."""
        accumulator = HistogramAccumulator(InMemoryHistogram())

        def merge_and_count(c):
            accumulator.merge(make_interval([1, 2, 3], start_sec=0.0))
            return c.with_interval_recorded(row_written=False)

        handlers = happy_path_handlers()
        handlers[ProcessorState.INIT] = StubHandler(
            ProcessorState.AWAITING_FIRST_INTERVAL,
            update=lambda c: c.with_resources(accumulator=accumulator),
        )
        handlers[ProcessorState.STREAMING] = StubHandler(ProcessorState.FINALIZING, update=merge_and_count)

        final = StateMachine(handlers).run(context)

        assert final.is_successful
        assert final.stats.intervals_read == 1
        assert final.stats.total_count == 3


class TestPipelineContext:
    """Tests for PipelineContext."""

    def test_reference_start_time_latches_once(self, context):
        """Test that the first latched start time wins."""
        latched = context.with_reference_start_time(100.0).with_reference_start_time(200.0)
        assert latched.reference_start_time == 100.0
        assert context.reference_start_time is None

    def test_elapsed_since_start(self, context):
        """Test elapsed time before and after the start time latches."""
        assert context.elapsed_since_start(1001.0) == 1001.0
        assert context.with_reference_start_time(1000.0).elapsed_since_start(1001.0) == 1.0

    def test_window_from_config(self):
        """Test that the window mirrors the configured range."""
        config = ProcessorConfig(range_start_sec=2.0, range_end_sec=5.0)
        ctx = PipelineContext(config=config, current_state=ProcessorState.INIT)
        assert ctx.window.contains(5.0)
        assert ctx.window.is_past(5.5)

    def test_summary(self, context):
        """Test the run summary."""
        summary = context.fail("bad").get_summary()
        assert summary["state"] == "FAILED"
        assert summary["error_message"] == "bad"
        assert summary["intervals_read"] == 0


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
