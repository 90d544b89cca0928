# --- models.py ---

import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, List, Optional, Tuple

from utils import get_extension


class EntryKind(Enum):
    FILE = "file"
    DIRECTORY = "directory"


@dataclass(frozen=True)
class Entry:
    """
    One file or directory shown in the browser pane.
    This is an immutable snapshot taken at scan time; a rescan is
    needed to see later changes on disk.
    """
    path: str
    kind: EntryKind

    ext: str = field(default="", init=False)  # e.g. ".txt", empty for directories

    def __post_init__(self):
        if self.kind is EntryKind.FILE:
            object.__setattr__(self, "ext", get_extension(self.path))

    @property
    def name(self) -> str:
        return os.path.basename(self.path.rstrip(os.sep)) or self.path

    @property
    def is_dir(self) -> bool:
        return self.kind is EntryKind.DIRECTORY

    @property
    def is_file(self) -> bool:
        return self.kind is EntryKind.FILE


@dataclass(frozen=True)
class Listing:
    """
    The filtered, sorted entries of a single directory level.
    Directories come first, then files, each group in case-insensitive
    path order.
    """
    directory: str
    entries: Tuple[Entry, ...] = ()

    def __iter__(self) -> Iterator[Entry]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def __getitem__(self, index: int) -> Entry:
        return self.entries[index]

    @property
    def directories(self) -> List[Entry]:
        return [e for e in self.entries if e.is_dir]

    @property
    def files(self) -> List[Entry]:
        return [e for e in self.entries if e.is_file]

    def find(self, path: str) -> Optional[Entry]:
        for entry in self.entries:
            if entry.path == path:
                return entry
        return None


class SessionState(Enum):
    EMPTY = "empty"                  # no file open
    CLEAN = "clean"                  # buffer == saved content
    DIRTY = "dirty"                  # buffer != saved content
    TRANSITIONING = "transitioning"  # waiting for a user decision


@dataclass
class EditSession:
    """
    The single active editing state: which file is open, the content as
    last read from / written to disk, and the live edit buffer.

    The three fields are only ever changed together through load() and
    reset(), so a failed read can never leave a half-updated session.
    """
    open_file: Optional[Entry] = None
    saved_content: str = ""
    buffer_content: str = ""

    @property
    def is_open(self) -> bool:
        return self.open_file is not None

    @property
    def is_dirty(self) -> bool:
        if self.open_file is None:
            return False
        return self.buffer_content != self.saved_content

    @property
    def display_name(self) -> str:
        if self.open_file is None:
            return "No file selected"
        return self.open_file.name

    def load(self, entry: Entry, content: str):
        self.open_file = entry
        self.saved_content = content
        self.buffer_content = content

    def reset(self):
        self.open_file = None
        self.saved_content = ""
        self.buffer_content = ""

    def mark_saved(self):
        self.saved_content = self.buffer_content

    def is_open_path(self, path: str) -> bool:
        return self.open_file is not None and self.open_file.path == path


@dataclass(frozen=True)
class PendingAction:
    """
    A request waiting for a yes/no decision from the user.
    Produced by FileSessionManager.request_*() and consumed by resolve().
    """
    kind: str  # "open", "delete" or "close"
    entry: Optional[Entry]
    title: str
    message: str
