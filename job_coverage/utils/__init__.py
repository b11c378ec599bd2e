"""
Utility modules for the job coverage application.
"""

from .config import Config

__all__ = [
    "Config",
]
