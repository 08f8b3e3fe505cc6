"""
Database module for Registrar backend
"""

from .connection import Database

__all__ = ["Database"]
