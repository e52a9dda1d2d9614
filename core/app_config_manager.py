import os
import json
import logging
from PySide6.QtCore import QStandardPaths, QObject, Signal
from PySide6.QtGui import QScreen
from PySide6.QtWidgets import QApplication # For QApplication.screens()
from typing import Optional, List, Dict, Any

MAX_RECENT_FILES_CONFIG = 10
APP_SETTINGS_FILENAME = "app_settings.json"
RECENT_FILES_FILENAME = "recent_files.json"

DEFAULT_APP_SETTINGS: Dict[str, Any] = {
    "output_screen_index": -1, # -1 means the primary screen
    "fullscreen": True,
    "developer_mode": False, # Raise undo-before-execute errors instead of logging them
    "log_level": "INFO",
    "logo_path": None, # Image shown by the logo overlay; the app name is shown when unset
}


def _config_dir() -> str:
    return QStandardPaths.writableLocation(QStandardPaths.StandardLocation.AppConfigLocation)


def _read_json(path: str, expected_type: type, what: str) -> Any:
    """Contents of a JSON file, or None when it is missing, unreadable or of the wrong type."""
    if not os.path.exists(path):
        logging.info(f"ConfigManager: No {what} file at {path}. Using defaults.")
        return None
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logging.warning(f"ConfigManager: Error loading {what} from {path}: {e}. Using defaults.")
        return None
    if not isinstance(data, expected_type):
        logging.warning(f"ConfigManager: {what} file {path} does not hold a {expected_type.__name__}. Using defaults.")
        return None
    return data


def _write_json(path: str, data: Any, what: str):
    try:
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=4)
        logging.debug(f"ConfigManager: Saved {what} to {path}")
    except OSError as e:
        logging.error(f"ConfigManager: Error saving {what}: {e}")


class ApplicationConfigManager(QObject):
    """
    Application-wide settings of the presentation viewer and the list of
    recently opened presentation scripts, both kept as JSON files in the
    per-user config directory.
    """
    recent_files_updated = Signal()
    output_screen_setting_changed = Signal(QScreen) # Emits the new screen

    def __init__(self, settings_path: Optional[str] = None, recent_files_path: Optional[str] = None,
                 parent: Optional[QObject] = None):
        super().__init__(parent)
        self.settings_path = settings_path or os.path.join(_config_dir(), APP_SETTINGS_FILENAME)
        self.recent_files_path = recent_files_path or os.path.join(_config_dir(), RECENT_FILES_FILENAME)

        self._app_settings: Dict[str, Any] = _read_json(self.settings_path, dict, "app settings") or {}
        recent = _read_json(self.recent_files_path, list, "recent files") or []
        self._recent_files_list: List[str] = [f for f in recent if isinstance(f, str)][:MAX_RECENT_FILES_CONFIG]
        self._target_output_screen: Optional[QScreen] = self._screen_from_settings()

    # --- settings ---

    def get_app_setting(self, key: str, default_value: Any = None) -> Any:
        if key in self._app_settings:
            return self._app_settings[key]
        if default_value is None:
            return DEFAULT_APP_SETTINGS.get(key)
        return default_value

    def set_app_setting(self, key: str, value: Any):
        self._app_settings[key] = value
        self._save_app_settings()

    @property
    def developer_mode(self) -> bool:
        return bool(self.get_app_setting("developer_mode"))

    @property
    def fullscreen(self) -> bool:
        return bool(self.get_app_setting("fullscreen"))

    @property
    def log_level(self) -> str:
        return str(self.get_app_setting("log_level"))

    def _save_app_settings(self):
        _write_json(self.settings_path, self._app_settings, "app settings")

    # --- presentation screen ---

    def _screen_from_settings(self) -> Optional[QScreen]:
        screens = QApplication.screens()
        if not screens:
            return None
        index = self.get_app_setting("output_screen_index")
        if isinstance(index, int) and 0 <= index < len(screens):
            logging.info(f"ConfigManager: Presenting on screen {screens[index].name()} (Index {index})")
            return screens[index]
        primary_screen = QApplication.primaryScreen()
        return primary_screen if primary_screen in screens else screens[0]

    def get_target_output_screen(self) -> Optional[QScreen]:
        if self._target_output_screen is None:
            self._target_output_screen = self._screen_from_settings()
        return self._target_output_screen

    def set_target_output_screen(self, screen: Optional[QScreen]):
        if self._target_output_screen == screen:
            return
        self._target_output_screen = screen
        screens = QApplication.screens()
        self._app_settings["output_screen_index"] = screens.index(screen) if screen in screens else -1
        self._save_app_settings()
        if screen: # Only emit if a valid screen is set
            self.output_screen_setting_changed.emit(screen)
        logging.info(f"ConfigManager: Presentation screen set to {screen.name() if screen else 'None'}")

    # --- recent presentations ---

    def get_recent_files(self) -> List[str]:
        return list(self._recent_files_list) # Return a copy

    def add_recent_file(self, filepath: str):
        filepath = os.path.abspath(filepath)
        if filepath in self._recent_files_list:
            self._recent_files_list.remove(filepath)
        self._recent_files_list = [filepath] + self._recent_files_list[:MAX_RECENT_FILES_CONFIG - 1]
        _write_json(self.recent_files_path, self._recent_files_list, "recent files")
        self.recent_files_updated.emit()

    def save_all_configs(self): # Called when the application quits
        self._save_app_settings()
        _write_json(self.recent_files_path, self._recent_files_list, "recent files")
