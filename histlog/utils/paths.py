"""
Path utilities for the log processor.

Handles output file name templating.
"""

import os
from datetime import datetime
from typing import Optional


def expand_output_file_name(file_name: str, now: Optional[datetime] = None, pid: Optional[int] = None) -> str:
    """
    Replace ``%pid`` and ``%date`` placeholders in an output file name.

    Args:
        file_name: File name possibly containing placeholders
        now: Timestamp used for ``%date`` (default: current time)
        pid: Process id used for ``%pid`` (default: this process)

    Returns:
        File name with placeholders substituted

    Example:
        expand_output_file_name("run_%date_%pid.log")
        -> "run_261019.1432_4711.log"
    """
    if "%pid" in file_name:
        file_name = file_name.replace("%pid", str(os.getpid() if pid is None else pid))
    if "%date" in file_name:
        timestamp = (now or datetime.now()).strftime("%y%m%d.%H%M")
        file_name = file_name.replace("%date", timestamp)
    return file_name
