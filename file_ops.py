# --- file_ops.py ---

import logging
import os
from send2trash import send2trash

from errors import CreateError, DeleteError, ReadError, WriteError

logger = logging.getLogger(__name__)

DEFAULT_ENCODING = "utf-8"


def read_text(path: str, encoding: str = DEFAULT_ENCODING) -> str:
    """
    Reads the whole file as text.
    Raises ReadError for I/O failures and for content that is not valid
    text in the given encoding.
    """
    logger.debug("Reading %s", path)
    try:
        with open(path, "r", encoding=encoding, newline="") as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as e:
        logger.error("Error reading %s: %s", path, e)
        raise ReadError(path, e) from e


def write_text(path: str, content: str, encoding: str = DEFAULT_ENCODING):
    """
    Overwrites the file with 'content' in full (never appends).
    Raises WriteError on failure.
    """
    logger.debug("Writing %s (%d chars)", path, len(content))
    try:
        with open(path, "w", encoding=encoding, newline="") as f:
            f.write(content)
    except (OSError, UnicodeEncodeError) as e:
        logger.error("Error writing %s: %s", path, e)
        raise WriteError(path, e) from e


def create_empty_file(path: str):
    """
    Creates an empty file. Fails with CreateError if anything already
    exists at 'path'; nothing is overwritten.
    """
    logger.debug("Creating %s", path)
    try:
        # 'x' mode makes the existence check and the creation one step
        with open(path, "x", encoding=DEFAULT_ENCODING):
            pass
    except FileExistsError as e:
        logger.error("Cannot create %s: already exists", path)
        raise CreateError(path, e, f"A file named {os.path.basename(path)} already exists") from e
    except (OSError, ValueError) as e:
        # ValueError: names the OS cannot represent, e.g. an embedded NUL
        logger.error("Error creating %s: %s", path, e)
        raise CreateError(path, e) from e


def delete_file(path: str, use_trash: bool = True):
    """
    Deletes a single file, either to the Recycle Bin / Trash or
    permanently. Raises DeleteError on failure (e.g. already removed).
    """
    op_type = "Sending to Trash" if use_trash else "Permanently deleting"
    logger.debug("%s: %s", op_type, path)
    try:
        if use_trash:
            _delete_to_trash(path)
        else:
            _delete_permanently(path)
    except Exception as e:
        # send2trash raises its own error types besides OSError
        logger.error("Error deleting %s: %s", path, e)
        raise DeleteError(path, e) from e


def _delete_to_trash(path: str):
    """Private helper to send a single file to trash."""
    if not os.path.lexists(path):
        raise FileNotFoundError(f"No such file: {path}")
    send2trash(path)


def _delete_permanently(path: str):
    """
    Private helper to *permanently* delete a file.
    Directories are refused; the browser only deletes files.
    """
    if os.path.isdir(path) and not os.path.islink(path):
        raise IsADirectoryError(f"Is a directory: {path}")
    os.remove(path)
