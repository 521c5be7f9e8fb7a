"""
Models package for API Studio.

Exports all SQLAlchemy models for database operations.
"""

from .environment import Environment, Variable
from .history import History

__all__ = [
    "Environment",
    "Variable",
    "History",
]
