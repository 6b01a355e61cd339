"""
Storage interface (Protocol) for the service layer.

Purpose:
    Decouples `PlannerService` from the concrete storage (here: a text file),
    so the service only types against a small, stable interface.

Contents:
    - UserStoreProtocol: load/save of the whole `User` graph plus the location
      currently used.

Notes:
    The concrete implementation lives in `file_store.py` (FileUserStore).
    Implementations never raise for I/O problems: `load()` returns None and
    `save()` returns False.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional, Protocol

from activity_planner.models import User


class UserStoreProtocol(Protocol):
    """
    Minimal persistence interface used by `PlannerService`.

    Notes:
        `path` is the location that `load()`/`save()` use when called without an
        explicit path ("Save" vs. "Save as").
    """

    path: Path

    def load(self, path: Optional[str | os.PathLike[str]] = None) -> Optional[User]: ...
    def save(self, user: User, path: Optional[str | os.PathLike[str]] = None) -> bool: ...
