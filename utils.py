# --- utils.py ---

import os
from typing import Dict, Optional, Tuple

RGBA = Tuple[float, float, float, float]

# --- Presentation: extension -> icon color ---
# Purely cosmetic, read by ui.kv. Unknown extensions get DEFAULT_FILE_COLOR.

EXTENSION_COLORS: Dict[str, RGBA] = {
    ".py": (0.30, 0.69, 0.31, 1),
    ".js": (0.98, 0.66, 0.15, 1),
    ".html": (1.00, 0.60, 0.00, 1),
    ".css": (0.13, 0.59, 0.95, 1),
    ".json": (0.61, 0.15, 0.69, 1),
    ".xml": (0.96, 0.26, 0.21, 1),
    ".md": (0.62, 0.62, 0.62, 1),
    ".dart": (0.08, 0.40, 0.75, 1),
}

DEFAULT_FILE_COLOR: RGBA = (0.46, 0.46, 0.46, 1)
DIRECTORY_COLOR: RGBA = (1.00, 0.63, 0.00, 1)


def get_extension(path: str) -> str:
    """
Signature: `get_extension(path: str) -> str`

Returns the lower-cased extension of the last path component,
including the leading dot (e.g. ".py"). Returns "" when there is none.
Dots in parent directory names are ignored. A name that is only
an extension (".md") counts as that extension.
"""
    name = os.path.basename(path)
    dot = name.rfind(".")
    return name[dot:].lower() if dot != -1 else ""


def has_hidden_segment(path: str) -> bool:
    """
Signature: `has_hidden_segment(path: str) -> bool`

True if any component of the path starts with '.', e.g. "/home/u/.git".
"""
    drive, rest = os.path.splitdrive(path)
    parts = rest.replace("\\", "/").split("/")
    return any(part.startswith(".") and part not in (".", "..") for part in parts)


def is_within(path: str, root: str) -> bool:
    """
Signature: `is_within(path: str, root: str) -> bool`

Checks that 'path' is 'root' itself or lives somewhere below it.
Both paths are normalised first, symlinks are not resolved.
"""
    path = os.path.normpath(os.path.abspath(path))
    root = os.path.normpath(os.path.abspath(root))
    try:
        return os.path.commonpath([path, root]) == root
    except ValueError:
        # Different drives on Windows
        return False


def safe_join_path(root: str, name: str) -> Optional[str]:
    """
Signature: `safe_join_path(root: str, name: str) -> Optional[str]`

Joins a user supplied relative name onto root.
Returns None if the name is absolute, ends in a separator (a folder,
not a file) or escapes the root with "..".
"""
    if not name or os.path.isabs(name):
        return None
    if name.endswith(("/", "\\", os.sep)):
        return None
    candidate = os.path.normpath(os.path.join(root, name))
    if not is_within(candidate, root) or candidate == os.path.normpath(root):
        return None
    return candidate


def get_extension_color(ext: str) -> RGBA:
    return EXTENSION_COLORS.get(ext.lower(), DEFAULT_FILE_COLOR)
