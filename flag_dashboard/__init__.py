"""
Feature Flag Dashboard.

Web UI for listing, creating, toggling and deleting boolean feature flags
held by a REST backend.
"""

__version__ = "1.0.0"
