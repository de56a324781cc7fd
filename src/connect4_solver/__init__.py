"""
Exact Connect Four solver and computer opponent.
"""

__version__ = "0.1"
