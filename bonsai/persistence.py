"""
Save and load of growth progress.

A save file holds exactly two integers separated by a space: the seed
and the number of branches grown. Loading one replays the same tree
without animation until that branch count is reached.
"""

import os
import sys
from pathlib import Path
from typing import NamedTuple

CACHE_NAME = "bonsai"


class PersistenceError(Exception):
    """A save file could not be written, opened or parsed."""


class SavedProgress(NamedTuple):
    seed: int
    target_branch_count: int


def default_cache_path() -> Path:
    """
    Location of the save file when none is given.

    $XDG_CACHE_HOME/bonsai, then $HOME/.cache/bonsai. On Windows
    %LOCALAPPDATA%\\bonsai, then %APPDATA%\\bonsai. Falls back to ./bonsai.
    """
    if sys.platform == "win32":
        candidates = [("LOCALAPPDATA", ()), ("APPDATA", ())]
    else:
        candidates = [("XDG_CACHE_HOME", ()), ("HOME", (".cache",))]
    for variable, parts in candidates:
        value = os.environ.get(variable)
        if value:
            return Path(value, *parts, CACHE_NAME)
    return Path(CACHE_NAME)


def save_progress(path: str | os.PathLike, seed: int, branches: int) -> None:
    try:
        Path(path).write_text(f"{seed} {branches}")
    except OSError as e:
        raise PersistenceError(f"file was not opened properly for writing: {path}") from e


def load_progress(path: str | os.PathLike) -> SavedProgress:
    """
    Read a save file.

    Raises:
        PersistenceError: If the file is missing or does not start with two
            nonnegative integers
    """
    try:
        content = Path(path).read_text()
    except OSError as e:
        raise PersistenceError(f"file was not opened properly for reading: {path}") from e

    fields = content.split()
    if len(fields) < 2:
        raise PersistenceError("save file could not be read")
    try:
        seed, target = (int(token) for token in fields[:2])
    except ValueError as e:
        raise PersistenceError("save file could not be read") from e
    if seed < 0 or target < 0:
        raise PersistenceError("save file could not be read")
    return SavedProgress(seed, target)
