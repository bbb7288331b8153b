"""
Models package for Conduit.

Exports all SQLAlchemy models for database operations.
"""

from .request import SavedRequest
from .history import History

__all__ = [
    "SavedRequest",
    "History",
]
