"""
Services for the histogram log processor.

Histogram containers, log reading, report formatting and output sinks.
"""
