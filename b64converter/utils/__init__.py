"""
Utility functions for the Base64 converter.
"""
from b64converter.utils.metrics import (
    get_cpu_mem,
    calculate_image_metrics,
    PerformanceTimer
)

from b64converter.utils.file_handling import (
    ensure_directory,
    get_temp_filepath,
    timestamped_filename,
    available_filename,
    safe_join,
    temp_file_context
)

__all__ = [
    # Metrics utilities
    'get_cpu_mem',
    'calculate_image_metrics',
    'PerformanceTimer',

    # File handling utilities
    'ensure_directory',
    'get_temp_filepath',
    'timestamped_filename',
    'available_filename',
    'safe_join',
    'temp_file_context'
]
