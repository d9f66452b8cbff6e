"""
Models package - Data models for the GPIO resource-action engine
"""

from .enums import ResourceKind, ActionVerb, Gesture, TimerSlot, LogLevel, LogCategory

__all__ = [
    'ResourceKind',
    'ActionVerb',
    'Gesture',
    'TimerSlot',
    'LogLevel',
    'LogCategory',
]
