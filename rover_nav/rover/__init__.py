"""
Rover Module
============

Re-planning controller and the session boundary around it.
"""

from .controller import RoverController, RoverState, RoverStatus, TickReport
from .session import NavigationSession, TickListener

__all__ = [
    'RoverController',
    'RoverState',
    'RoverStatus',
    'TickReport',
    'NavigationSession',
    'TickListener',
]
