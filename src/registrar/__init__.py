"""
Registrar backend
GraphQL API for student and department records
"""

__version__ = "0.1.0"

from .config import settings

__all__ = ["settings", "__version__"]
