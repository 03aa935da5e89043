"""Terminus narrative core"""

__version__ = "0.1.0"
