"""
Data model shared by the client, the dashboard and the CLI.
"""

from dataclasses import dataclass
from typing import Any, Dict


@dataclass
class FeatureFlag:
    """
    A named boolean feature flag.

    Attributes:
        name: Flag name, unique per backend
        is_enabled: Whether the flag is switched on
    """
    name: str
    is_enabled: bool = False

    def to_payload(self) -> Dict[str, Any]:
        """Request body for creating this flag on the backend."""
        return {"name": self.name, "isEnabled": self.is_enabled}

    @classmethod
    def from_entry(cls, name: str, value: Any) -> 'FeatureFlag':
        """Build a flag from one ``name: enabled`` entry of the list response."""
        return cls(name=name, is_enabled=bool(value))
