#!/usr/bin/env python3
"""
Main entry point for the histogram log processor.

Reads an interval histogram log and produces:
  - an interval percentile log (one row per interval, with running totals)
    when an output file is given
  - an overall percentile distribution (``.hgrm``) of the selected range

Architecture:
  The command line (optionally layered over a YAML config) builds an
  immutable ProcessorConfig. LogProcessorExecutor runs one sequential pass
  through the state machine INIT → AWAITING_FIRST_INTERVAL → STREAMING →
  FINALIZING → DONE.
"""

import sys
import logging
import argparse
from typing import Optional, TextIO

import yaml

from histlog import __version__
from histlog.domain.config import ProcessorConfig
from histlog.pipeline.executor import LogProcessorExecutor
from histlog.utils.paths import expand_output_file_name


VERSION_STRING = f"Histogram Log Processor version {__version__}"


def setup_logging(level: str = "WARNING"):
    """Setup logging configuration. Logs go to stderr; stdout carries report data."""
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
        force=True,
    )


def load_config(config_path: str) -> dict:
    """Load configuration from YAML file."""
    with open(config_path, 'r') as f:
        return yaml.safe_load(f) or {}


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="histlog-processor",
        description=VERSION_STRING,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        allow_abbrev=False,
        epilog="""
Examples:
  # Overall percentile distribution of a log, on standard output
  histlog-processor -i hiccup.hlog

  # Interval log to run.log and distribution to run.log.hgrm, CSV format
  histlog-processor -i hiccup.hlog -o run.log -csv

  # Only the part between 60s and 300s after the log's start time
  histlog-processor -i hiccup.hlog -o steady.log -start 60 -end 300

  # Read from standard input, tuning the histogram from a YAML file
  cat hiccup.hlog | histlog-processor --config processor.yaml
        """
    )

    parser.add_argument(
        "-csv", dest="csv", action="store_true",
        help="Use CSV format for output log files"
    )
    parser.add_argument(
        "-i", dest="input_file", metavar="logFileName", default=None,
        help="File name of Histogram Log to process (default is standard input)"
    )
    parser.add_argument(
        "-o", dest="output_file", metavar="outputFileName", default=None,
        help="File name to output to (default is standard output); "
             "occurrences of %%pid and %%date are replaced"
    )
    parser.add_argument(
        "-start", dest="range_start_sec", metavar="rangeStartTimeSec", type=float, default=None,
        help="The start time for the range in the file, in seconds (default 0.0)"
    )
    parser.add_argument(
        "-end", dest="range_end_sec", metavar="rangeEndTimeSec", type=float, default=None,
        help="The end time for the range in the file, in seconds (default is infinite)"
    )
    parser.add_argument(
        "-s", dest="significant_digits", metavar="numberOfSignificantValueDigits", type=int, default=None,
        help="Number of significant value digits of the histogram (default 2)"
    )

    extra_group = parser.add_argument_group("Additional Options")
    extra_group.add_argument(
        "--config", type=str, default=None,
        help="Path to YAML configuration file (command line options take precedence)"
    )
    extra_group.add_argument(
        "--log-level", type=str, default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: WARNING)"
    )
    extra_group.add_argument(
        "--progress", action="store_true",
        help="Show a progress counter of processed intervals on stderr"
    )
    extra_group.add_argument(
        "--version", action="version", version=VERSION_STRING
    )

    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> ProcessorConfig:
    """
    Build the processor configuration from YAML (if any) and command line.

    Raises:
        OSError, yaml.YAMLError: If the config file cannot be read
        ValueError: If the resulting configuration is invalid
    """
    config_dict = load_config(args.config) if args.config else {}
    config = ProcessorConfig.from_dict(config_dict)

    config = config.with_overrides(
        input_file=args.input_file,
        output_file=args.output_file,
        csv=True if args.csv else None,
        range_start_sec=args.range_start_sec,
        range_end_sec=args.range_end_sec,
        significant_digits=args.significant_digits,
        show_progress=True if args.progress else None,
    )

    if config.output_file is not None:
        config = config.with_overrides(output_file=expand_output_file_name(config.output_file))

    return config


def main(
    argv: Optional[list[str]] = None,
    stdin: Optional[TextIO] = None,
    stdout: Optional[TextIO] = None
) -> int:
    """Main entry point."""
    args = parse_args(argv)
    setup_logging(args.log_level)
    logger = logging.getLogger(__name__)

    try:
        config = build_config(args)
    except (OSError, yaml.YAMLError) as e:
        logger.error(f"Failed to load configuration from {args.config}: {e}")
        return 1
    except ValueError as e:
        logger.error(f"Invalid configuration: {e}")
        return 1

    logger.info(VERSION_STRING)
    logger.info(f"Configuration: {config}")

    executor = LogProcessorExecutor(config, stdin=stdin, stdout=stdout)
    final_context = executor.run()

    if final_context.is_successful:
        return 0

    if (final_context.error_details or {}).get("error_type") == "InputOpenError":
        print("failed to open input file.", file=sys.stderr)
    return 1


if __name__ == "__main__":
    sys.exit(main())
