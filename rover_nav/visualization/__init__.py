"""
Visualization Module
====================

Live monitoring and static comparison figures.
"""

from .monitor import (
    FREE,
    STATIC,
    DETECTED,
    UNDETECTED,
    cell_state_array,
    MapVisualizer,
    LiveMonitor,
    create_tick_callback,
)

__all__ = [
    'FREE',
    'STATIC',
    'DETECTED',
    'UNDETECTED',
    'cell_state_array',
    'MapVisualizer',
    'LiveMonitor',
    'create_tick_callback',
]
