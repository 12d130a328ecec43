"""
Tests for IntervalLogReader service.

Uses real HdrHistogram payloads embedded in in-memory log text.
"""

import io
import logging

import pytest

from histlog.domain.intervals import TimeWindow
from histlog.services.log_reader import IntervalLogReader
from conftest import InMemoryHistogram, build_log_text, encode_values, uniform_ms_values


def read_all(reader: IntervalLogReader, window: TimeWindow = TimeWindow()) -> list:
    """Pull intervals until end of input."""
    intervals = []
    interval = reader.next_interval(window)
    while interval is not None:
        intervals.append(interval)
        interval = reader.next_interval(window)
    return intervals


class TestIntervalLogReader:
    """Tests for IntervalLogReader service."""

    def test_reads_all_intervals(self, two_interval_log):
        """Test reading every interval of a log."""
        reader = IntervalLogReader(io.StringIO(two_interval_log))

        intervals = read_all(reader)

        assert len(intervals) == 2
        assert [i.histogram.total_count for i in intervals] == [10, 10]
        assert reader.start_time_sec == 1000000000.0

    def test_relative_timestamps_use_start_time_as_base(self, two_interval_log):
        """Test that relative timestamps are shifted onto the start time."""
        reader = IntervalLogReader(io.StringIO(two_interval_log))

        first, second = read_all(reader)

        assert first.start_timestamp_ms == pytest.approx(1000000000.0 * 1000)
        assert first.end_timestamp_sec == pytest.approx(1000000001.0)
        assert second.end_timestamp_sec == pytest.approx(1000000002.0)

    def test_start_time_unknown_before_first_read(self, two_interval_log):
        """Test that the start time is 0.0 until the header is read."""
        reader = IntervalLogReader(io.StringIO(two_interval_log))
        assert reader.start_time_sec == 0.0

    def test_first_timestamp_is_start_time_without_header(self):
        """Test that the first timestamp becomes the start time."""
        values = [1_000_000]
        text = build_log_text(
            [(1500.0, 1.0, values), (1501.0, 1.0, values)],
            start_time_sec=None,
        )
        reader = IntervalLogReader(io.StringIO(text))

        intervals = read_all(reader, TimeWindow(1.0, 10.0))

        assert reader.start_time_sec == 1500.0
        assert len(intervals) == 1
        assert intervals[0].start_timestamp_ms == pytest.approx(1501.0 * 1000)

    def test_window_selects_inclusive_range(self):
        """Test selecting intervals at {1.0, 3.0, 4.9, 5.0, 5.1} with [2, 5]."""
        offsets = [1.0, 3.0, 4.9, 5.0, 5.1]
        text = build_log_text([(t, 0.1, [1_000_000 * (i + 1)]) for i, t in enumerate(offsets)])
        reader = IntervalLogReader(io.StringIO(text))

        intervals = read_all(reader, TimeWindow(2.0, 5.0))

        selected = [i.start_timestamp_ms / 1000.0 - reader.start_time_sec for i in intervals]
        assert selected == pytest.approx([3.0, 4.9, 5.0])

    def test_degenerate_window_yields_nothing(self):
        """Test that start=5, end=2 admits no intervals."""
        values = uniform_ms_values(10)
        text = build_log_text([(float(t), 1.0, values) for t in range(10)])
        reader = IntervalLogReader(io.StringIO(text))

        assert read_all(reader, TimeWindow(5.0, 2.0)) == []

    def test_start_past_log_duration_yields_nothing(self, two_interval_log):
        """Test that a window beyond the log is empty, not an error."""
        reader = IntervalLogReader(io.StringIO(two_interval_log))
        assert read_all(reader, TimeWindow(100.0)) == []

    def test_explicit_base_time(self):
        """Test that a BaseTime header is added to timestamps."""
        payload = encode_values([1_000_000])
        text = (
            "#[StartTime: 2000.000 (seconds since epoch)]\n"
            "#[BaseTime: 1990.000 (seconds since epoch)]\n"
            f"15.000,1.000,1.000,{payload}\n"
        )
        reader = IntervalLogReader(io.StringIO(text))

        (interval,) = read_all(reader)

        assert interval.start_timestamp_ms == pytest.approx(2005.0 * 1000)

    def test_tagged_lines(self):
        """Test that Tag= prefixes are parsed off."""
        values = [1_000_000]
        text = build_log_text([(0.0, 1.0, values, "read"), (1.0, 1.0, values)])
        reader = IntervalLogReader(io.StringIO(text))

        first, second = read_all(reader)

        assert first.histogram.total_count == 1
        assert first.end_timestamp_sec == pytest.approx(1000000001.0)
        assert second.end_timestamp_sec == pytest.approx(1000000002.0)

    def test_comments_and_blank_lines_skipped(self):
        """Test that comments, blank lines and the legend are ignored."""
        payload = encode_values([1_000_000, 2_000_000])
        text = (
            "#[Histogram log format version 1.3]\n"
            "\n"
            '"StartTimestamp","Interval_Length","Interval_Max","Interval_Compressed_Histogram"\n'
            "# free-form comment\n"
            f"0.000,1.000,2.000,{payload}\n"
        )
        reader = IntervalLogReader(io.StringIO(text))

        (interval,) = read_all(reader)

        assert interval.histogram.total_count == 2

    def test_wrong_field_count_ends_input(self, caplog):
        """Test that a malformed line is treated as end of input."""
        caplog.set_level(logging.WARNING)
        payload = encode_values([1_000_000])
        text = (
            f"0.000,1.000,1.000,{payload}\n"
            "1.000,1.000\n"
            f"2.000,1.000,1.000,{payload}\n"
        )
        reader = IntervalLogReader(io.StringIO(text))

        intervals = read_all(reader)

        assert len(intervals) == 1
        assert "expected 4 fields" in caplog.text

    def test_bad_timestamp_ends_input(self):
        """Test that an unparseable timestamp is treated as end of input."""
        payload = encode_values([1_000_000])
        reader = IntervalLogReader(io.StringIO(f"abc,1.000,1.000,{payload}\n"))

        assert reader.next_interval(TimeWindow()) is None

    def test_negative_length_ends_input(self):
        """Test that an interval ending before it starts is treated as end of input."""
        payload = encode_values([1_000_000])
        reader = IntervalLogReader(io.StringIO(f"0.000,-1.000,1.000,{payload}\n"))

        assert reader.next_interval(TimeWindow()) is None

    def test_undecodable_payload_ends_input(self, caplog):
        """Test that a corrupt histogram payload is treated as end of input."""
        caplog.set_level(logging.WARNING)
        payload = encode_values([1_000_000])
        text = (
            f"0.000,1.000,1.000,{payload}\n"
            "1.000,1.000,1.000,not-a-histogram\n"
        )
        reader = IntervalLogReader(io.StringIO(text))

        intervals = read_all(reader)

        assert len(intervals) == 1
        assert "failed to decode histogram" in caplog.text

    def test_injected_decoder(self):
        """Test that the payload decoder can be replaced."""
        seen = []

        def decoder(payload):
            seen.append(payload)
            return InMemoryHistogram([len(payload)])

        reader = IntervalLogReader(["0.000,1.000,1.000,abcd\n"], decoder=decoder)

        (interval,) = read_all(reader)

        assert seen == ["abcd"]
        assert interval.histogram.max_value == 4


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
