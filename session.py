# --- session.py ---

import logging
import os
from typing import Callable, Optional

import file_ops
from errors import CreateError, DeleteError, ScanError
from models import EditSession, Entry, Listing, PendingAction, SessionState
from scanner import list_directory
from settings import DeleteResetPolicy, EditorSettings
from utils import is_within, safe_join_path

logger = logging.getLogger(__name__)

# Collaborator signatures
# confirm(title, message) -> bool; dismissing the prompt must count as False
ConfirmCallback = Callable[[str, str], bool]
# prompt_text(title, hint) -> entered text, or None if cancelled
PromptTextCallback = Callable[[str, str], Optional[str]]
# notify(message, is_error)
NotifyCallback = Callable[[str, bool], None]

DISCARD_TITLE = "Unsaved changes"
DISCARD_MESSAGE = "Your changes have not been saved. Do you want to discard them?"
DELETE_TITLE = "Delete file"
DELETE_MESSAGE = "Are you sure you want to delete {name}?"
NEW_FILE_TITLE = "Enter a name for the new file:"
NEW_FILE_HINT = "example.txt"


def _decline(title: str, message: str) -> bool:
    return False


def _no_answer(title: str, hint: str) -> Optional[str]:
    return None


def _ignore(message: str, is_error: bool):
    pass


class FileSessionManager:
    """
    Owns the browsing position and the single EditSession, and applies
    the open / edit / save / create / delete / close rules to them.

    Destructive commands are two-phase: request_open(), request_delete()
    and request_close() either apply immediately or return a
    PendingAction, which the UI answers with resolve(action, approved).
    open(), delete() and close() run both phases in one call using the
    synchronous 'confirm' collaborator.

    Failures are raised as EditorError subclasses and leave the session
    and the listing exactly as they were (see DeleteResetPolicy for the
    one configurable exception). Successes are reported via 'notify'.

    The blocking forms (open, delete, close, create_from_prompt) are for
    synchronous callers such as scripts and tests. An event-driven UI
    uses the request_*() / resolve() pair and create_from_answer()
    from its own popup callbacks instead.
    """

    def __init__(self,
                 root_path: str,
                 session: Optional[EditSession] = None,
                 settings: Optional[EditorSettings] = None,
                 confirm: Optional[ConfirmCallback] = None,
                 prompt_text: Optional[PromptTextCallback] = None,
                 notify: Optional[NotifyCallback] = None):

        self.root_path = os.path.abspath(root_path)
        self.session = session if session is not None else EditSession()
        self.settings = settings if settings is not None else EditorSettings()

        # Collaborators
        self.confirm = confirm or _decline
        self.prompt_text = prompt_text or _no_answer
        self.notify = notify or _ignore

        self.current_dir = self.root_path
        self.listing = Listing(directory=self.root_path)
        self.pending: Optional[PendingAction] = None

    # --- State ---

    @property
    def state(self) -> SessionState:
        if self.pending is not None:
            return SessionState.TRANSITIONING
        if not self.session.is_open:
            return SessionState.EMPTY
        if self.session.is_dirty:
            return SessionState.DIRTY
        return SessionState.CLEAN

    @property
    def can_save(self) -> bool:
        return self.pending is None and self.session.is_dirty

    @property
    def at_root(self) -> bool:
        return os.path.normpath(self.current_dir) == os.path.normpath(self.root_path)

    # --- 1. Browsing ---

    def refresh(self) -> Listing:
        """Lists the root directory again and makes it current."""
        return self._show(self.root_path)

    def rescan(self) -> Listing:
        """Lists the current directory again."""
        return self._show(self.current_dir)

    def change_root(self, root_path: str) -> Listing:
        """
        Switches to another root directory (e.g. picked in a folder
        chooser). The open file, if any, stays open. On ScanError the old
        root and listing are kept.
        """
        listing = list_directory(root_path)
        self.root_path = listing.directory
        self.current_dir = listing.directory
        self.listing = listing
        logger.info("Root changed to %s", self.root_path)
        return listing

    def browse(self, entry: Entry) -> Listing:
        """Replaces the listing with the contents of a sub-directory."""
        if not entry.is_dir:
            raise ValueError(f"Not a directory: {entry.path}")
        return self._show(entry.path)

    def browse_parent(self) -> Listing:
        if self.at_root:
            return self.listing
        parent = os.path.dirname(os.path.normpath(self.current_dir))
        if not is_within(parent, self.root_path):
            parent = self.root_path
        return self._show(parent)

    def select(self, entry: Entry) -> Optional[PendingAction]:
        """
        A tap on a listing row: directories are browsed into, files are
        opened (which may need a discard decision first).
        """
        if entry.is_dir:
            self.browse(entry)
            return None
        return self.request_open(entry)

    def _show(self, directory: str) -> Listing:
        # list_directory raises before anything is replaced
        listing = list_directory(directory)
        self.current_dir = listing.directory
        self.listing = listing
        return listing

    def _rescan_after_change(self, from_root: bool = False):
        """
        Refreshes the listing after a successful create/delete. A failing
        rescan is only reported: the mutation itself already happened.
        """
        try:
            if from_root:
                self.refresh()
            else:
                self.rescan()
        except ScanError as e:
            self.notify(str(e), True)

    # --- 2. Two-phase requests ---

    def request_open(self, entry: Entry) -> Optional[PendingAction]:
        _require_file(entry)
        if self.session.is_dirty:
            return self._set_pending("open", entry, DISCARD_TITLE, DISCARD_MESSAGE)
        self._apply_open(entry)
        return None

    def request_delete(self, entry: Entry) -> PendingAction:
        _require_file(entry)
        return self._set_pending("delete", entry, DELETE_TITLE,
                                 DELETE_MESSAGE.format(name=entry.name))

    def request_close(self) -> Optional[PendingAction]:
        if self.session.is_dirty:
            return self._set_pending("close", None, DISCARD_TITLE, DISCARD_MESSAGE)
        self._apply_close()
        return None

    def resolve(self, action: PendingAction, approved: bool) -> bool:
        """
        Applies (approved) or drops (declined) the pending action.
        Returns True if the action was applied. Raises ValueError for an
        action that is not the one currently pending.
        """
        if action is None or action is not self.pending:
            raise ValueError("This action is no longer pending")
        self.pending = None

        if not approved:
            logger.info("User declined %s %s", action.kind, action.entry.path if action.entry else "")
            return False

        if action.kind == "open":
            self._apply_open(action.entry)
        elif action.kind == "delete":
            self._apply_delete(action.entry)
        elif action.kind == "close":
            self._apply_close()
        else:
            raise ValueError(f"Unknown action: {action.kind}")
        return True

    def _set_pending(self, kind: str, entry: Optional[Entry], title: str, message: str) -> PendingAction:
        if self.pending is not None:
            logger.warning("Replacing pending %s with %s", self.pending.kind, kind)
        self.pending = PendingAction(kind=kind, entry=entry, title=title, message=message)
        return self.pending

    # --- 3. Commands (blocking form) ---

    def open(self, entry: Entry) -> bool:
        """Opens a file, asking first if that would discard unsaved changes."""
        action = self.request_open(entry)
        if action is None:
            return True
        return self.resolve(action, self._ask(action))

    def delete(self, entry: Entry) -> bool:
        """Deletes a file after confirmation. Declining changes nothing."""
        action = self.request_delete(entry)
        return self.resolve(action, self._ask(action))

    def close(self) -> bool:
        action = self.request_close()
        if action is None:
            return True
        return self.resolve(action, self._ask(action))

    def _ask(self, action: PendingAction) -> bool:
        try:
            return bool(self.confirm(action.title, action.message))
        except Exception:
            self.pending = None
            raise

    def edit(self, text: str) -> bool:
        """
        Replaces the edit buffer. The dirty flag follows from comparing
        it with the saved content. Ignored when no file is open.
        """
        if not self.session.is_open:
            logger.debug("Edit ignored: no file open")
            return False
        self.session.buffer_content = text
        return True

    def save(self) -> bool:
        """
        Writes the buffer over the open file. Returns False without
        touching the disk if there is nothing to save. On WriteError the
        buffer is kept and the session stays dirty.
        """
        if not self.session.is_dirty:
            return False

        entry = self.session.open_file
        file_ops.write_text(entry.path, self.session.buffer_content, self.settings.encoding)
        self.session.mark_saved()
        logger.info("Saved %s", entry.path)
        self.notify("File saved successfully", False)
        return True

    def create(self, name: str) -> str:
        """
        Creates an empty file 'name' relative to the root directory and
        rescans the root so it shows up. Never opens the file and never
        overwrites an existing one. Returns the new path.
        """
        name = (name or "").strip()
        if not name:
            raise CreateError(self.root_path, message="File name must not be empty")

        path = safe_join_path(self.root_path, name)
        if path is None:
            raise CreateError(os.path.join(self.root_path, name),
                              message=f"Invalid file name: {name}")

        file_ops.create_empty_file(path)
        logger.info("Created %s", path)
        self._rescan_after_change(from_root=True)
        self.notify("New file created", False)
        return path

    def create_from_prompt(self) -> Optional[str]:
        """
        Asks for a file name, then create(). Skipped entirely if the
        prompt is cancelled or left empty.
        """
        return self.create_from_answer(self.prompt_text(NEW_FILE_TITLE, NEW_FILE_HINT))

    def create_from_answer(self, answer: Optional[str]) -> Optional[str]:
        """
        Creates a file from whatever the new-file prompt returned. None or
        a blank answer means the user backed out; nothing happens.
        """
        if not answer or not answer.strip():
            return None
        return self.create(answer)

    # --- 4. Applying decisions ---

    def _apply_open(self, entry: Entry):
        # read_text raises ReadError before the session is touched
        content = file_ops.read_text(entry.path, self.settings.encoding)
        self.session.load(entry, content)
        logger.info("Opened %s", entry.path)

    def _apply_delete(self, entry: Entry):
        is_open = self.session.is_open_path(entry.path)
        try:
            file_ops.delete_file(entry.path, use_trash=self.settings.use_trash)
        except DeleteError:
            if is_open and self._reset_after_failed_delete(entry.path):
                logger.info("Closing %s after failed delete", entry.path)
                self.session.reset()
            raise

        if is_open:
            # Unsaved changes of a deleted file have nowhere to go
            self.session.reset()
        logger.info("Deleted %s", entry.path)
        self._rescan_after_change()
        self.notify("File deleted", False)

    def _apply_close(self):
        if self.session.is_open:
            logger.info("Closed %s", self.session.open_file.path)
        self.session.reset()

    def _reset_after_failed_delete(self, path: str) -> bool:
        policy = self.settings.delete_reset_policy
        if policy is DeleteResetPolicy.ALWAYS:
            return True
        if policy is DeleteResetPolicy.IF_MISSING:
            return not os.path.lexists(path)
        return False


def _require_file(entry: Entry):
    if entry is None or not entry.is_file:
        raise ValueError(f"Not a file: {entry.path if entry else None}")
