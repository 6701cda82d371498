"""
UI package for the terminal editor interface.

This package implements the user interface components: the WindowManager
that draws the document and the status lines, and the InputHandler that
turns key presses into document edits.
"""

from .window import WindowManager
from .input_handler import InputHandler

__all__ = ['WindowManager', 'InputHandler']
