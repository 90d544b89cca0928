# --- filters.py ---

from typing import Iterable, List
from models import Entry
from utils import has_hidden_segment

# --- Configuration for Filters ---

# Plain-text formats the editor is willing to open.
# Stored lower-case; matching is case-insensitive.
SUPPORTED_EXTENSIONS = frozenset({
    ".txt", ".py", ".js", ".html", ".md", ".css", ".json",
    ".xml", ".yaml", ".yml", ".dart", ".java", ".cpp", ".c"
})

# --- Filter Functions ---

def is_supported_file(entry: Entry) -> bool:
    """
    True for file entries whose extension is one the editor can open.
    """
    return entry.is_file and entry.ext.lower() in SUPPORTED_EXTENSIONS


def is_visible_directory(entry: Entry) -> bool:
    """
    True for directory entries with no hidden ('.'-prefixed) segment
    anywhere in their path.
    """
    return entry.is_dir and not has_hidden_segment(entry.path)


def is_listed(entry: Entry) -> bool:
    return is_supported_file(entry) or is_visible_directory(entry)


def filter_entries(entries: Iterable[Entry]) -> List[Entry]:
    """
    Keeps visible directories and supported files, drops everything else.
    """
    return [entry for entry in entries if is_listed(entry)]


def sort_key(entry: Entry):
    # Directories (False) sort before files (True)
    return (not entry.is_dir, entry.path.lower())


def sort_entries(entries: Iterable[Entry]) -> List[Entry]:
    """
    Directories first, then files; each group by case-insensitive path.
    """
    return sorted(entries, key=sort_key)
