from __future__ import annotations

# -----------------------------------------------------------------------------
# Infrastructure: planner data file
# -----------------------------------------------------------------------------
# Contains:
# - FileUserStore: thin adapter between the text codec and the file system
#   (implements UserStoreProtocol)
# - default_data_path(): default file location (working directory)
#
# All I/O problems are turned into a plain failure result (None / False); the
# cause is only logged.
# -----------------------------------------------------------------------------


import logging
import os
from pathlib import Path
from typing import Optional

from activity_planner.codec import FormatError, WarningHandler, deserialize, serialize
from activity_planner.models import User

__all__ = [
    "DEFAULT_FILE_NAME",
    "FileUserStore",
    "default_data_path",
]

_LOGGER = logging.getLogger(__name__)

DEFAULT_FILE_NAME = "userData.txt"


def default_data_path() -> Path:
    """
    Default location of the data file.

    Returns:
        Path: `userData.txt` relative to the current working directory.
    """

    return Path(DEFAULT_FILE_NAME)


class FileUserStore:
    """
    File-backed store for the complete `User` graph.

    Purpose:
        Reads/writes planner files through `codec.py` and shields every I/O
        failure: callers get `None` from `load()` and `False` from `save()` and
        must check the result explicitly.

    Notes:
        `strict` switches the codec to strict parsing; a malformed field then
        fails the whole load (result `None`).
    """

    def __init__(
        self,
        path: Optional[str | os.PathLike[str]] = None,
        *,
        strict: bool = False,
        on_warning: Optional[WarningHandler] = None,
        encoding: str = "utf-8",
    ) -> None:
        """
        Initializes the store.

        Parameters:
            path (str | PathLike | None): Data file; defaults to `default_data_path()`.
            strict (bool): Strict parsing of field values.
            on_warning (callable | None): Receives codec warnings (permissive mode).
            encoding (str): Text encoding of the file.
        """

        self.path = Path(path) if path is not None else default_data_path()
        self.strict = strict
        self.on_warning = on_warning
        self.encoding = encoding

    def _resolve(self, path: Optional[str | os.PathLike[str]]) -> Path:
        return Path(path) if path is not None else self.path

    def load(self, path: Optional[str | os.PathLike[str]] = None) -> Optional[User]:
        """
        Loads a user from a file.

        Parameters:
            path (str | PathLike | None): File to read; defaults to `self.path`.

        Returns:
            User | None: Loaded data, or None if the file is missing, unreadable
            or (strict mode) malformed.
        """

        target = self._resolve(path)
        if not target.exists():
            _LOGGER.warning("Data file not found: %s", target)
            return None
        try:
            text = target.read_text(encoding=self.encoding)
            user = deserialize(text, strict=self.strict, on_warning=self.on_warning)
        except FormatError as exc:
            _LOGGER.error("Malformed data file %s: %s", target, exc)
            return None
        except (OSError, UnicodeError):
            _LOGGER.exception("Failed to read data file %s", target)
            return None

        _LOGGER.info("Loaded %d children from %s", len(user.children), target)
        return user

    def save(self, user: User, path: Optional[str | os.PathLike[str]] = None) -> bool:
        """
        Writes a user to a file (whole file is replaced).

        Parameters:
            user (User): Data to write.
            path (str | PathLike | None): Target file; defaults to `self.path`.

        Returns:
            bool: True on success, False on any I/O failure.
        """

        target = self._resolve(path)
        text = serialize(user)
        try:
            target.write_text(text, encoding=self.encoding)
        except (OSError, UnicodeError):
            _LOGGER.exception("Failed to write data file %s", target)
            return False

        _LOGGER.info("Saved %d children to %s", len(user.children), target)
        return True
