# --- scanner.py ---

import logging
import os

from errors import ScanError
from models import Entry, EntryKind, Listing
import filters

logger = logging.getLogger(__name__)


def list_directory(directory_path: str) -> Listing:
    """
    Lists the direct children of one directory (no recursion).

    Only visible sub-directories and files with a supported extension
    are kept; the result is sorted directories-first, then by
    case-insensitive path. Descending into a sub-directory needs a new
    call with that directory's path.

    Raises ScanError if the directory cannot be enumerated. The caller
    should keep whatever listing it was showing before.
    """
    directory_path = os.path.abspath(directory_path)
    logger.debug("Scanning %s", directory_path)

    entries = []
    try:
        with os.scandir(directory_path) as it:
            for dir_entry in it:
                kind = _classify(dir_entry)
                if kind is None:
                    continue
                entries.append(Entry(path=dir_entry.path, kind=kind))
    except OSError as e:
        logger.error("Error scanning directory %s: %s", directory_path, e)
        raise ScanError(directory_path, e) from e

    visible = filters.sort_entries(filters.filter_entries(entries))
    logger.debug("Scanned %s: %d of %d entries listed", directory_path, len(visible), len(entries))
    return Listing(directory=directory_path, entries=tuple(visible))


def _classify(dir_entry: os.DirEntry):
    """Helper: maps a DirEntry to an EntryKind, or None for anything else."""
    try:
        # Symlinks are followed so a link to a folder browses like a folder
        if dir_entry.is_dir():
            return EntryKind.DIRECTORY
        if dir_entry.is_file():
            return EntryKind.FILE
    except OSError as e:
        # Entry vanished or is unreadable; skip it, the rest of the scan is fine
        logger.debug("Skipping %s: %s", dir_entry.path, e)
    return None
