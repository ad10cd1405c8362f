"""Core package"""
from reqtrack.core.config import Settings, settings

__all__ = [
    "Settings",
    "settings",
]
