"""
Utility modules for the log processor.
"""

from .paths import expand_output_file_name

__all__ = [
    "expand_output_file_name",
]
