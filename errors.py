# --- errors.py ---

from typing import Optional


class EditorError(Exception):
    """
    Base class for every recoverable failure of the editor core.
    The UI catches this type and reports it through the notification sink.
    """

    action = "access"

    def __init__(self, path: str, cause: Optional[BaseException] = None, message: str = ""):
        self.path = path
        self.cause = cause
        if not message:
            message = f"Cannot {self.action} {path}"
            if cause is not None:
                message += f": {cause}"
        super().__init__(message)


class ScanError(EditorError):
    """Directory enumeration failed."""
    action = "scan directory"


class ReadError(EditorError):
    """The file could not be opened or decoded."""
    action = "read"


class WriteError(EditorError):
    """Saving the edit buffer failed."""
    action = "save"


class CreateError(EditorError):
    """New-file creation failed (including name collisions)."""
    action = "create"


class DeleteError(EditorError):
    """File removal failed."""
    action = "delete"
