"""
Utilities package
"""
from src.utils.log_buffer import LogBuffer, get_log_buffer, setup_log_buffer, split_component

__all__ = [
    'LogBuffer',
    'get_log_buffer',
    'setup_log_buffer',
    'split_component',
]
