"""
In-memory flag store backing the development server.
"""

from threading import Lock
from typing import Dict, Optional

from ..observability import get_logger

logger = get_logger(__name__)

DEFAULT_FLAGS = [
    ('new_checkout', False),
    ('dark_mode', True),
    ('beta_reports', False),
]


class FlagExistsError(KeyError):
    """Flag with this name is already stored."""


class FlagNotFoundError(KeyError):
    """No flag with this name is stored."""


class FlagStore:
    """
    Thread-safe name -> enabled mapping that keeps insertion order.

    Example:
        store = FlagStore()
        store.create('dark_mode', True)
        store.set('dark_mode', False)
        store.all()  # {'dark_mode': False}
    """

    def __init__(self, flags: Optional[Dict[str, bool]] = None):
        self._flags: Dict[str, bool] = dict(flags or {})
        self._lock = Lock()

    def all(self) -> Dict[str, bool]:
        """Snapshot of every flag."""
        with self._lock:
            return dict(self._flags)

    def get(self, flag_name: str) -> Optional[bool]:
        with self._lock:
            return self._flags.get(flag_name)

    def create(self, flag_name: str, enabled: bool = False) -> bool:
        """
        Raises:
            FlagExistsError: A flag with this name already exists
        """
        with self._lock:
            if flag_name in self._flags:
                raise FlagExistsError(flag_name)
            self._flags[flag_name] = enabled

        logger.info(f"Created flag '{flag_name}'", extra={'flag_name': flag_name})
        return enabled

    def set(self, flag_name: str, enabled: bool) -> bool:
        """
        Raises:
            FlagNotFoundError: No flag with this name
        """
        with self._lock:
            if flag_name not in self._flags:
                raise FlagNotFoundError(flag_name)
            self._flags[flag_name] = enabled

        logger.info(f"Flag '{flag_name}' set to {enabled}", extra={'flag_name': flag_name})
        return enabled

    def delete(self, flag_name: str) -> None:
        """
        Raises:
            FlagNotFoundError: No flag with this name
        """
        with self._lock:
            if flag_name not in self._flags:
                raise FlagNotFoundError(flag_name)
            del self._flags[flag_name]

        logger.info(f"Deleted flag '{flag_name}'", extra={'flag_name': flag_name})

    def seed_defaults(self) -> int:
        """
        Create the sample flags that don't exist yet.

        Returns:
            Number of flags created
        """
        created = 0
        with self._lock:
            for flag_name, enabled in DEFAULT_FLAGS:
                if flag_name not in self._flags:
                    self._flags[flag_name] = enabled
                    created += 1

        logger.info(f"Seeded {created} default flags")
        return created
