"""
Configuration domain models.

Validated configuration objects for the log processor.
"""

import math
from dataclasses import dataclass, field, replace
from typing import Optional


HGRM_SUFFIX = ".hgrm"


@dataclass(frozen=True)
class HistogramConfig:
    """Construction parameters for the accumulated histogram."""

    lowest_trackable_value: int = 1000 * 20  # ~20usec best-case resolution
    highest_trackable_value: int = 3600 * 1000 * 1000 * 1000
    significant_digits: int = 2

    def __post_init__(self):
        """Validate histogram configuration."""
        if self.lowest_trackable_value < 1:
            raise ValueError(
                f"lowest_trackable_value must be >= 1, got {self.lowest_trackable_value}"
            )
        if self.highest_trackable_value < 2 * self.lowest_trackable_value:
            raise ValueError(
                f"highest_trackable_value ({self.highest_trackable_value}) must be at least "
                f"twice lowest_trackable_value ({self.lowest_trackable_value})"
            )
        if not 1 <= self.significant_digits <= 5:
            raise ValueError(
                f"significant_digits must be between 1 and 5, got {self.significant_digits}"
            )


@dataclass(frozen=True)
class ProcessorConfig:
    """
    Complete log processor configuration.

    Immutable configuration object validated at creation. The time range
    bounds are kept exactly as given: an end bound lower than the start
    bound is a valid (empty) selection.
    """

    # Input / output
    input_file: Optional[str] = None
    output_file: Optional[str] = None
    csv: bool = False

    # Time range, seconds relative to the log's start time
    range_start_sec: float = 0.0
    range_end_sec: float = math.inf

    # Histogram and report parameters
    histogram: HistogramConfig = field(default_factory=HistogramConfig)
    ticks_per_half_distance: int = 5
    output_value_unit_ratio: float = 1_000_000.0

    # Behavior
    show_progress: bool = False

    def __post_init__(self):
        """Validate processor configuration."""
        if math.isnan(self.range_start_sec) or self.range_start_sec < 0.0:
            raise ValueError(f"range_start_sec must be non-negative, got {self.range_start_sec}")
        if math.isnan(self.range_end_sec):
            raise ValueError("range_end_sec cannot be NaN")
        if self.ticks_per_half_distance <= 0:
            raise ValueError(
                f"ticks_per_half_distance must be positive, got {self.ticks_per_half_distance}"
            )
        if self.output_value_unit_ratio <= 0:
            raise ValueError(
                f"output_value_unit_ratio must be positive, got {self.output_value_unit_ratio}"
            )
        if self.output_file == "":
            raise ValueError("output_file cannot be empty")

    @property
    def percentile_report_file(self) -> Optional[str]:
        """File name of the overall percentile distribution, if writing to files."""
        if self.output_file is None:
            return None
        return self.output_file + HGRM_SUFFIX

    @property
    def has_bounded_end(self) -> bool:
        """Check if an explicit end of the time range was configured."""
        return not math.isinf(self.range_end_sec)

    def with_overrides(self, **overrides) -> 'ProcessorConfig':
        """
        Return new config with the given fields replaced.

        ``None`` values are ignored so that unset command line options
        leave the existing value in place. ``significant_digits`` is
        routed into the nested histogram configuration.

        Args:
            **overrides: Field values to replace

        Returns:
            New validated ProcessorConfig
        """
        overrides = {k: v for k, v in overrides.items() if v is not None}

        digits = overrides.pop("significant_digits", None)
        if digits is not None:
            overrides["histogram"] = replace(self.histogram, significant_digits=digits)

        return replace(self, **overrides)

    @classmethod
    def from_dict(cls, config_dict: Optional[dict]) -> 'ProcessorConfig':
        """
        Create ProcessorConfig from a dictionary (e.g., loaded from YAML).

        Args:
            config_dict: Dictionary with configuration values

        Returns:
            Validated ProcessorConfig instance
        """
        config_dict = config_dict or {}

        input_dict = config_dict.get("input", {}) or {}
        output_dict = config_dict.get("output", {}) or {}
        histogram_dict = config_dict.get("histogram", {}) or {}
        report_dict = config_dict.get("report", {}) or {}

        defaults = HistogramConfig()
        histogram = HistogramConfig(
            lowest_trackable_value=int(histogram_dict.get(
                "lowest_trackable_value", defaults.lowest_trackable_value)),
            highest_trackable_value=int(histogram_dict.get(
                "highest_trackable_value", defaults.highest_trackable_value)),
            significant_digits=int(histogram_dict.get(
                "significant_digits", defaults.significant_digits)),
        )

        range_end = input_dict.get("range_end_sec")

        return cls(
            input_file=input_dict.get("file"),
            output_file=output_dict.get("file"),
            csv=bool(output_dict.get("csv", False)),
            range_start_sec=float(input_dict.get("range_start_sec", 0.0)),
            range_end_sec=math.inf if range_end is None else float(range_end),
            histogram=histogram,
            ticks_per_half_distance=int(report_dict.get("ticks_per_half_distance", 5)),
            output_value_unit_ratio=float(report_dict.get("output_value_unit_ratio", 1_000_000.0)),
            show_progress=bool(output_dict.get("show_progress", False)),
        )
