"""
Server-rendered dashboard UI.
"""

from .app import create_app

__all__ = ['create_app']
