# --- main.py ---

import os
import sys
from functools import partial
from typing import Optional

# --- Kivy Imports ---
from kivy.app import App
from kivy.uix.behaviors import ButtonBehavior
from kivy.uix.boxlayout import BoxLayout
from kivy.uix.popup import Popup
from kivy.uix.label import Label
from kivy.uix.button import Button
from kivy.uix.textinput import TextInput
from kivy.clock import Clock
from kivy.core.window import Window
from kivy.logger import Logger
from kivy.metrics import dp
from kivy.properties import BooleanProperty, ListProperty, ObjectProperty, StringProperty
from kivy.lang import Builder
from kivy.utils import platform
from plyer import filechooser, storagepath

# --- Project Imports ---
from errors import EditorError
from models import Entry, PendingAction
from session import FileSessionManager, NEW_FILE_HINT, NEW_FILE_TITLE
from settings import CONFIG_SECTION, EditorSettings
import utils

KV_FILE = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'ui.kv')
LONG_PRESS_SECONDS = 0.6
NOTIFICATION_SECONDS = 2


def resolve_storage_root(settings: EditorSettings) -> str:
    """
    Picks the directory the browser starts in: the configured root if
    set, otherwise external storage on Android and the documents folder
    elsewhere. Falls back to the home directory.
    """
    if settings.root_path and os.path.isdir(settings.root_path):
        return os.path.abspath(settings.root_path)

    try:
        if platform == 'android':
            path = storagepath.get_external_storage_dir()
        else:
            path = storagepath.get_documents_dir()
        if path and os.path.isdir(path):
            return os.path.abspath(path)
    except Exception as e:
        # plyer raises NotImplementedError on platforms it does not cover
        Logger.warning(f"Editor: Could not resolve storage root: {e}")

    return os.path.expanduser('~')


# --- Kivy Widget Definitions ---

class EntryRow(ButtonBehavior, BoxLayout):
    """
    One row of the browser list. Tap opens/browses, long press on a
    file asks to delete it.
    """
    entry = ObjectProperty(None, allownone=True)
    selected = BooleanProperty(False)
    label_text = StringProperty("")
    icon_color = ListProperty(list(utils.DEFAULT_FILE_COLOR))

    _long_press_event = None
    _long_pressed = False

    def on_entry(self, instance, entry: Optional[Entry]):
        if entry is None:
            return
        if entry.is_dir:
            self.label_text = f"{entry.name}/"
            self.icon_color = list(utils.DIRECTORY_COLOR)
        else:
            self.label_text = entry.name
            self.icon_color = list(utils.get_extension_color(entry.ext))

    def on_touch_down(self, touch):
        if self.collide_point(*touch.pos) and self.entry is not None and self.entry.is_file:
            self._long_pressed = False
            self._long_press_event = Clock.schedule_once(self._fire_long_press, LONG_PRESS_SECONDS)
        return super().on_touch_down(touch)

    def on_touch_move(self, touch):
        # Scrolling the list is not a long press
        if self._long_press_event is not None:
            if abs(touch.x - touch.ox) > dp(8) or abs(touch.y - touch.oy) > dp(8):
                self._cancel_long_press()
        return super().on_touch_move(touch)

    def on_touch_up(self, touch):
        self._cancel_long_press()
        return super().on_touch_up(touch)

    def _cancel_long_press(self):
        if self._long_press_event is not None:
            self._long_press_event.cancel()
            self._long_press_event = None

    def _fire_long_press(self, dt):
        self._long_press_event = None
        self._long_pressed = True
        App.get_running_app().on_entry_long_press(self.entry)

    def on_release(self):
        if self._long_pressed:
            self._long_pressed = False
            return
        App.get_running_app().on_entry_tap(self.entry)


class MainLayout(BoxLayout):
    pass

# --- Main Application Class ---

class TreeTextEditorApp(App):

    # --- Properties read by ui.kv ---
    current_dir = StringProperty("")
    file_title = StringProperty("")
    status_text = StringProperty("")
    is_dirty = BooleanProperty(False)
    is_file_open = BooleanProperty(False)
    can_save = BooleanProperty(False)
    at_root = BooleanProperty(True)

    manager: Optional[FileSessionManager] = None
    _is_refreshing: bool = False
    _status_event = None

    def build_config(self, config):
        config.setdefaults(CONFIG_SECTION, EditorSettings.config_defaults())

    def build(self):
        self.title = 'TreeTextEditor'
        settings = EditorSettings.from_config(self.config)
        root_path = resolve_storage_root(settings)
        Logger.info(f"Editor: Storage root is {root_path}")

        self.manager = FileSessionManager(
            root_path,
            settings=settings,
            notify=self.notify
        )
        Window.bind(on_key_down=self._on_key_down)
        return Builder.load_file(KV_FILE)

    def on_start(self):
        self.refresh()

    def on_stop(self):
        if self.manager and self.manager.session.is_dirty:
            Logger.warning(f"Editor: Exiting with unsaved changes in {self.manager.session.open_file.path}")

    # --- UI State Management ---

    def update_ui(self):
        """Pushes the manager's state into the widgets."""
        manager = self.manager
        session = manager.session
        ids = self.root.ids

        ids.file_list_rv.data = [
            {'entry': entry, 'selected': session.is_open_path(entry.path)}
            for entry in manager.listing
        ]
        if len(manager.listing):
            self.current_dir = manager.current_dir
        else:
            self.current_dir = f"{manager.current_dir}  (no files found)"
        self.at_root = manager.at_root

        self.file_title = session.display_name
        self.is_file_open = session.is_open
        self.update_dirty_state()

        # Setting the text fires on_text; don't feed it back as an edit
        if ids.editor.text != session.buffer_content:
            self._is_refreshing = True
            ids.editor.text = session.buffer_content
            Clock.schedule_once(self._release_refresh_lock)

    def update_dirty_state(self):
        self.is_dirty = self.manager.session.is_dirty
        self.can_save = self.manager.can_save

    def _release_refresh_lock(self, dt):
        """Helper function to release the refresh lock."""
        self._is_refreshing = False

    def _run(self, command, *args):
        """Runs a manager command, reporting EditorError as a notification."""
        try:
            return command(*args)
        except EditorError as e:
            self.notify(str(e), True)
            return None
        finally:
            self.update_ui()

    # --- 1. Browsing ---

    def refresh(self):
        self._run(self.manager.refresh)

    def browse_parent(self):
        self._run(self.manager.browse_parent)

    def show_folder_chooser(self):
        try:
            path = filechooser.choose_dir(title="Select a folder to browse")
            if path:
                self._run(self.manager.change_root, path[0])
        except Exception as e:
            self.show_popup("Error", f"Could not open folder chooser: {e}")

    def on_entry_tap(self, entry: Entry):
        action = self._run(self.manager.select, entry)
        if action is not None:
            self.show_confirmation(action)

    def on_entry_long_press(self, entry: Entry):
        if entry is None or not entry.is_file:
            return
        self.show_confirmation(self.manager.request_delete(entry))

    # --- 2. Editing ---

    def on_editor_text(self, text: str):
        if self._is_refreshing:
            return
        if self.manager.edit(text):
            self.update_dirty_state()

    def save_file(self):
        if self.manager.can_save:
            self._run(self.manager.save)

    def close_file(self):
        action = self._run(self.manager.request_close)
        if action is not None:
            self.show_confirmation(action)

    def _on_key_down(self, window, key, scancode, codepoint, modifiers):
        if codepoint == 's' and ('ctrl' in modifiers or 'meta' in modifiers):
            self.save_file()
            return True
        return False

    # --- 3. New file ---

    def show_new_file_prompt(self):
        content = BoxLayout(orientation='vertical', spacing='10dp', padding='10dp')
        name_input = TextInput(hint_text=NEW_FILE_HINT, multiline=False, size_hint_y=None, height='40dp')
        content.add_widget(name_input)

        popup = Popup(
            title=NEW_FILE_TITLE,
            content=content,
            size_hint=(0.8, 0.35)
        )

        def submit(*args):
            popup.dismiss()
            self._run(self.manager.create_from_answer, name_input.text)

        btn_box = BoxLayout(size_hint_y=None, height='40dp', spacing='10dp')
        btn_cancel = Button(text="Cancel")
        btn_cancel.bind(on_press=popup.dismiss)
        btn_ok = Button(text="Create")
        btn_ok.bind(on_press=submit)
        name_input.bind(on_text_validate=submit)
        btn_box.add_widget(btn_cancel)
        btn_box.add_widget(btn_ok)
        content.add_widget(btn_box)

        popup.open()
        Clock.schedule_once(lambda dt: setattr(name_input, 'focus', True))

    # --- 4. Confirmations ---

    def show_confirmation(self, action: PendingAction):
        """
        Asks the user about a pending open/delete/close. Dismissing the
        popup without choosing counts as declining.
        """
        content = BoxLayout(orientation='vertical', spacing='10dp', padding='10dp')
        content.add_widget(Label(text=action.message, halign='center'))

        popup = Popup(
            title=action.title,
            content=content,
            size_hint=(0.8, 0.4)
        )
        decided = []

        def decide(approved: bool, *args):
            if decided:
                return
            decided.append(approved)
            popup.dismiss()
            self._resolve(action, approved)

        confirm_text = "Delete" if action.kind == "delete" else "Discard"
        btn_box = BoxLayout(size_hint_y=None, height='40dp', spacing='10dp')
        btn_cancel = Button(text="Cancel")
        btn_cancel.bind(on_press=partial(decide, False))
        btn_confirm = Button(text=confirm_text, background_color=(1, 0.2, 0.2, 1))
        btn_confirm.bind(on_press=partial(decide, True))
        popup.bind(on_dismiss=partial(decide, False))

        btn_box.add_widget(btn_cancel)
        btn_box.add_widget(btn_confirm)
        content.add_widget(btn_box)
        popup.open()

    def _resolve(self, action: PendingAction, approved: bool):
        try:
            self._run(self.manager.resolve, action, approved)
        except ValueError as e:
            Logger.warning(f"Editor: {e}")

    # --- Helper Methods ---

    def notify(self, message: str, is_error: bool = False):
        """Notification sink: transient status line plus the log."""
        if is_error:
            Logger.error(f"Editor: {message}")
        else:
            Logger.info(f"Editor: {message}")

        self.status_text = message
        if self._status_event is not None:
            self._status_event.cancel()
        self._status_event = Clock.schedule_once(self._clear_status, NOTIFICATION_SECONDS)

    def _clear_status(self, dt):
        self.status_text = ""
        self._status_event = None

    def show_popup(self, title: str, text: str):
        content = BoxLayout(orientation='vertical', padding='10dp')
        content.add_widget(Label(text=text))
        popup = Popup(
            title=title,
            content=content,
            size_hint=(0.75, 0.5)
        )
        btn_close = Button(text="Close", size_hint_y=None, height='40dp')
        btn_close.bind(on_press=popup.dismiss)
        content.add_widget(btn_close)
        popup.open()

# --- Entry Point ---
def run():
    if sys.platform == 'win32':
        try:
            import ctypes
            ctypes.windll.shcore.SetProcessDpiAwareness(1)
        except Exception as e:
            print(f"Could not set DPI awareness: {e}")

    TreeTextEditorApp().run()


if __name__ == "__main__":
    run()
