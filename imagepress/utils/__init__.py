"""
Utility functions for the image compression application.
"""
from imagepress.utils.metrics import (
    get_cpu_mem,
    PerformanceTimer
)

from imagepress.utils.parsing import (
    parse_int_field,
    parse_bool_field,
    parse_settings,
    decode_buffer
)

__all__ = [
    # Metrics utilities
    'get_cpu_mem',
    'PerformanceTimer',

    # Transport parsing utilities
    'parse_int_field',
    'parse_bool_field',
    'parse_settings',
    'decode_buffer'
]
