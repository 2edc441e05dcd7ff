"""
Dashboard state and the handlers that act on it.

The dashboard mirrors the backend: the flag list is replaced wholesale on
every fetch, and every successful mutation is followed by a refetch.
There is no optimistic update; a failed call is logged and leaves the
state as it was.
"""

from dataclasses import replace
from typing import List, Optional

from .base_service import BaseService
from .flags_client import FlagsApiClient, FlagsApiError
from .models import FeatureFlag


class DashboardService(BaseService):
    """
    State holder for one dashboard view.

    The dialog is either closed, open in create mode (``edit_flag`` is None,
    the form is bound to ``new_flag``) or open in edit mode (the form is
    bound to ``edit_flag``).

    Example:
        dashboard = DashboardService(client)
        dashboard.fetch_flags()

        dashboard.open_dialog()
        dashboard.set_dialog_name('new_checkout')
        dashboard.set_dialog_enabled(True)
        dashboard.submit_dialog()
    """

    def __init__(self, client: FlagsApiClient, auto_refresh: bool = True):
        """
        Args:
            client: Backend client
            auto_refresh: Refetch the list after each successful mutation
        """
        super().__init__("DashboardService")
        self.client = client
        self.auto_refresh = auto_refresh

        self.flags: List[FeatureFlag] = []
        self.new_flag = FeatureFlag(name='', is_enabled=False)
        self.edit_flag: Optional[FeatureFlag] = None
        self.dialog_open = False

    # Backend operations

    def fetch_flags(self) -> bool:
        try:
            self.flags = self.client.list_flags()
        except FlagsApiError as e:
            self.log_error("Error fetching flags", exc=e, operation='list')
            return False

        self.set_gauge('flags_total', len(self.flags))
        self.set_gauge('flags_enabled', sum(1 for flag in self.flags if flag.is_enabled))
        return True

    def create_flag(self) -> bool:
        """Create ``new_flag``; on success close the dialog and reset the form."""
        try:
            self.client.create_flag(self.new_flag)
        except FlagsApiError as e:
            self.log_error("Error creating flag", exc=e, flag_name=self.new_flag.name, operation='create')
            return False

        self._refresh()
        self.dialog_open = False
        self.new_flag = FeatureFlag(name='', is_enabled=False)
        return True

    def update_flag(self, flag_name: str, is_enabled: bool) -> bool:
        """
        Set the enabled state of a flag.

        Closes the dialog when it was editing this flag.
        """
        try:
            self.client.update_flag(flag_name, is_enabled)
        except FlagsApiError as e:
            self.log_error("Error updating flag", exc=e, flag_name=flag_name, operation='update')
            return False

        self._refresh()
        if self.dialog_open and self.edit_flag is not None and self.edit_flag.name == flag_name:
            self.close_dialog()
        return True

    def delete_flag(self, flag_name: str) -> bool:
        try:
            self.client.delete_flag(flag_name)
        except FlagsApiError as e:
            self.log_error("Error deleting flag", exc=e, flag_name=flag_name, operation='delete')
            return False

        self._refresh()
        return True

    # Dialog state

    def open_dialog(self, flag: Optional[FeatureFlag] = None):
        """Open in edit mode for ``flag``, or in create mode with a blank form."""
        if flag is not None:
            self.edit_flag = replace(flag)
        else:
            self.edit_flag = None
            self.new_flag = FeatureFlag(name='', is_enabled=False)
        self.dialog_open = True

    def close_dialog(self):
        self.dialog_open = False
        self.edit_flag = None

    def set_dialog_name(self, flag_name: str):
        self.dialog_flag.name = flag_name

    def set_dialog_enabled(self, is_enabled: bool):
        self.dialog_flag.is_enabled = is_enabled

    def submit_dialog(self) -> bool:
        if self.edit_flag is not None:
            return self.update_flag(self.edit_flag.name, self.edit_flag.is_enabled)
        return self.create_flag()

    @property
    def is_editing(self) -> bool:
        return self.edit_flag is not None

    @property
    def dialog_flag(self) -> FeatureFlag:
        """The flag the dialog form is bound to."""
        return self.edit_flag if self.edit_flag is not None else self.new_flag

    @property
    def dialog_title(self) -> str:
        return 'Edit Flag' if self.is_editing else 'Create New Flag'

    @property
    def submit_label(self) -> str:
        return 'Save Changes' if self.is_editing else 'Create'

    def find_flag(self, flag_name: str) -> Optional[FeatureFlag]:
        """Look up a flag in the last fetched list."""
        for flag in self.flags:
            if flag.name == flag_name:
                return flag
        return None

    def _refresh(self):
        if self.auto_refresh:
            self.fetch_flags()
