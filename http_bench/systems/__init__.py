"""
HTTP request execution.
"""

from .base import HttpSystem

__all__ = ['HttpSystem']
