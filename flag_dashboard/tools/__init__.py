"""
CLI admin tools.

Provides:
- flagctl: list, inspect, create, toggle and delete flags from a terminal
"""
