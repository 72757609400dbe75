"""
gui - PySide6 Interface for Project Fork
"""

from .gui_entry import main

__all__ = ["main"]
