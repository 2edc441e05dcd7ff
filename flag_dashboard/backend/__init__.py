"""
In-memory development backend implementing the flags REST contract.
"""

from .store import FlagStore, FlagExistsError, FlagNotFoundError
from .app import create_backend_app

__all__ = [
    'FlagStore',
    'FlagExistsError',
    'FlagNotFoundError',
    'create_backend_app',
]
