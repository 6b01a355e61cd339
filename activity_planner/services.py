from __future__ import annotations

# -----------------------------------------------------------------------------
# Service layer (use-cases + progress figures)
# -----------------------------------------------------------------------------
# This layer is the stable API for front ends (here: the command line).
#
# Architecture rule:
# - Front ends talk to PlannerService only.
# - PlannerService orchestrates managers, analytics and the store.
# - The store wraps the text codec and the file system (UserStoreProtocol).
#
# `PlannerService.bootstrap()` is the composition root: it builds the store from
# the settings and loads the current data file.
# -----------------------------------------------------------------------------


"""Service layer of the activity planner.

Purpose:
    Holds the current `User` and exposes the file operations of the application
    (new, open, save, save as) together with the managers and the progress
    figures for one child.

Notes:
    Every successful manager mutation marks the data as changed
    (`has_unsaved_changes`); new/open/save/save-as clear the flag.
"""

import logging
import os
from datetime import date
from pathlib import Path
from typing import Callable, Optional

from activity_planner.analytics import (
    ComparisonData,
    DailyActivitySummary,
    ProgressAnalyzer,
    SuggestionGenerator,
)
from activity_planner.file_store import FileUserStore
from activity_planner.managers import ActivityManager, ChildManager
from activity_planner.models import Activity, Child, User
from activity_planner.settings import Settings, get_settings
from activity_planner.store_protocol import UserStoreProtocol

_LOGGER = logging.getLogger(__name__)


class PlannerService:
    """
    Facade for all use-cases of the application.

    Purpose:
        Front ends only know this class. It owns the in-memory data, wires the
        managers to it and tracks unsaved changes.

    Notes:
        - `bootstrap()` creates store + data (composition root).
        - Managers are rebuilt whenever the user object is replaced (new/open).
    """

    def __init__(
        self,
        store: UserStoreProtocol,
        *,
        user: Optional[User] = None,
        settings: Optional[Settings] = None,
        clock: Callable[[], date] = date.today,
    ) -> None:
        """
        Initializes the service.

        Parameters:
            store (UserStoreProtocol): Persistence adapter.
            user (User | None): Initial data; an empty user if None.
            settings (Settings | None): Application settings; defaults if None.
            clock (callable): Returns "today" (age checks, suggestions).
        """

        self._store = store
        self._settings = settings or get_settings(store.path)
        self._clock = clock
        self._dirty = False
        # set by bootstrap() when an existing data file could not be read
        self.load_failed = False

        self.analyzer = ProgressAnalyzer(self._settings.recommendations)
        self.suggestions = SuggestionGenerator(self._settings.recommendations, clock=clock)

        self._set_user(user if user is not None else User())

    # -----------------------------
    # Factory helpers
    # -----------------------------
    @classmethod
    def bootstrap(
        cls,
        settings: Optional[Settings] = None,
        *,
        clock: Callable[[], date] = date.today,
    ) -> "PlannerService":
        """
        Bootstraps the application (open the data file or start empty).

        Parameters:
            settings (Settings | None): Settings; `get_settings()` if None.
            clock (callable): Returns "today".

        Returns:
            PlannerService: Ready-to-use service.

        Notes:
            A missing or unreadable data file is not an error here: the service
            starts with an empty user and the first save creates the file.
        """

        settings = settings or get_settings()
        store = FileUserStore(settings.data_file, strict=settings.strict_parsing)
        user = store.load()
        if user is None:
            _LOGGER.info("Starting with empty planner data (%s)", settings.data_file)
        svc = cls(store, user=user, settings=settings, clock=clock)
        svc.load_failed = user is None and settings.data_file.exists()
        return svc

    # -----------------------------
    # State
    # -----------------------------
    def _set_user(self, user: User) -> None:
        self._user = user
        self.children = ChildManager(user, clock=self._clock, on_change=self._mark_dirty)
        self.activities = ActivityManager(user, on_change=self._mark_dirty)

    def _mark_dirty(self, description: str) -> None:
        self._dirty = True

    @property
    def user(self) -> User:
        return self._user

    @property
    def current_path(self) -> Path:
        return self._store.path

    @property
    def has_unsaved_changes(self) -> bool:
        return self._dirty

    # -----------------------------
    # File operations
    # -----------------------------
    def new(self) -> bool:
        """
        Replaces the data with an empty user and writes it to the current file.

        Returns:
            bool: Result of the save.
        """

        self._set_user(User())
        ok = self._store.save(self._user)
        self._dirty = not ok
        return ok

    def open(self, path: str | os.PathLike[str]) -> bool:
        """
        Loads another data file.

        Returns:
            bool: True if loaded; on failure the current data stays untouched.
        """

        user = self._store.load(path)
        if user is None:
            return False
        self._store.path = Path(path)
        self._set_user(user)
        self._dirty = False
        return True

    def save(self) -> bool:
        ok = self._store.save(self._user)
        if ok:
            self._dirty = False
        return ok

    def save_as(self, path: str | os.PathLike[str]) -> bool:
        """
        Saves to a new file and makes it the current file.

        Returns:
            bool: True on success; the current file is unchanged on failure.
        """

        ok = self._store.save(self._user, path)
        if ok:
            self._store.path = Path(path)
            self._dirty = False
        return ok

    # -----------------------------
    # Progress figures
    # -----------------------------
    def _activities_of(self, child_name: str) -> list[Activity]:
        return self.activities.list_activities(child_name)

    def find_child(self, child_name: str) -> Optional[Child]:
        return self.children.find_child(child_name)

    def progress_for(self, child_name: str) -> list[DailyActivitySummary]:
        return self.analyzer.analyze_progress(self._activities_of(child_name))

    def comparison_for(self, child_name: str) -> list[ComparisonData]:
        return self.analyzer.get_comparison_data(self._activities_of(child_name))

    def completed_titles_for(self, child_name: str) -> list[str]:
        return self.analyzer.get_completed_activity_titles(self._activities_of(child_name))

    def suggestions_for(self, child_name: str) -> list[str]:
        return self.suggestions.get_suggestions(self._activities_of(child_name))
