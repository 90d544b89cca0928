# --- settings.py ---

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from file_ops import DEFAULT_ENCODING

CONFIG_SECTION = "editor"


class DeleteResetPolicy(Enum):
    """
    What happens to the open file's session when deleting that same file
    fails.
    """
    ALWAYS = "always"          # reset whenever the path matches
    IF_MISSING = "if_missing"  # reset only if the file is gone anyway
    NEVER = "never"            # keep the session (and its buffer)


@dataclass
class EditorSettings:
    """
    Runtime options for the editor core.
    """
    root_path: Optional[str] = None  # overrides the platform storage root
    use_trash: bool = True           # False deletes permanently
    delete_reset_policy: DeleteResetPolicy = DeleteResetPolicy.IF_MISSING
    encoding: str = DEFAULT_ENCODING

    # Defaults written into the kivy app's ini file by build_config()
    @staticmethod
    def config_defaults() -> dict:
        return {
            "root_path": "",
            "use_trash": "1",
            "delete_reset_policy": DeleteResetPolicy.IF_MISSING.value,
            "encoding": DEFAULT_ENCODING,
        }

    @classmethod
    def from_config(cls, config, section: str = CONFIG_SECTION) -> "EditorSettings":
        """
        Builds settings from a ConfigParser-like object (kivy's
        ConfigParser included). Missing options keep their defaults;
        an unknown reset policy raises ValueError.
        """
        settings = cls()
        if not config.has_section(section):
            return settings

        if config.has_option(section, "root_path"):
            settings.root_path = config.get(section, "root_path").strip() or None
        if config.has_option(section, "use_trash"):
            settings.use_trash = config.getboolean(section, "use_trash")
        if config.has_option(section, "delete_reset_policy"):
            value = config.get(section, "delete_reset_policy").strip().lower()
            settings.delete_reset_policy = DeleteResetPolicy(value)
        if config.has_option(section, "encoding"):
            settings.encoding = config.get(section, "encoding").strip() or DEFAULT_ENCODING
        return settings
