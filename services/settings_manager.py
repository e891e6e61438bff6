"""
Settings Manager - Quan ly load/save settings cua ung dung.

File: ~/.scripts-explorer/settings.json

API:
    settings = load_app_settings()  # -> AppSettings
    save_app_settings(settings)
    update_app_setting(scripts_folder="/path/to/scripts")

Listeners:
    add_settings_listener(callback) dang ky callback(changed_keys, settings),
    duoc goi sau moi lan update_app_setting() lam thay doi gia tri.
"""

import json
import threading
from typing import Any, Callable, List

from config.app_settings import AppSettings
from config.paths import SETTINGS_FILE
from core.logging_config import log_error, log_warning

# Thread-safe lock de tranh race condition khi save settings
_settings_lock = threading.Lock()

SettingsListener = Callable[[List[str], AppSettings], None]
_listeners: List[SettingsListener] = []


def _load_app_settings_unlocked() -> AppSettings:
    """
    Load settings tu file KHONG co lock.

    Returns:
        AppSettings instance voi values tu file + defaults
    """
    try:
        if SETTINGS_FILE.exists():
            content = SETTINGS_FILE.read_text(encoding="utf-8")
            saved = json.loads(content)
            if isinstance(saved, dict):
                return AppSettings.from_dict(saved)
            log_warning(f"Ignoring malformed settings file: {SETTINGS_FILE}")
    except (OSError, json.JSONDecodeError) as e:
        log_warning(f"Could not read settings: {e}")
    return AppSettings()


def _save_app_settings_unlocked(settings: AppSettings) -> bool:
    """
    Save AppSettings ra file KHONG co lock.

    Merge voi existing data de bao toan extra keys.

    Returns:
        True neu save thanh cong
    """
    try:
        existing_data: dict[str, Any] = {}
        try:
            if SETTINGS_FILE.exists():
                loaded = json.loads(SETTINGS_FILE.read_text(encoding="utf-8"))
                if isinstance(loaded, dict):
                    existing_data = loaded
        except (OSError, json.JSONDecodeError):
            pass

        updated = {**existing_data, **settings.to_dict()}
        SETTINGS_FILE.parent.mkdir(parents=True, exist_ok=True)
        SETTINGS_FILE.write_text(json.dumps(updated, indent=2), encoding="utf-8")
        return True
    except OSError as e:
        log_error("Failed to save settings", e)
        return False


def load_app_settings() -> AppSettings:
    """
    Load settings tu file va tra ve AppSettings typed instance.

    Neu file khong ton tai hoac loi, tra ve defaults.
    """
    return _load_app_settings_unlocked()


def save_app_settings(settings: AppSettings) -> bool:
    """Save AppSettings ra file (thread-safe)."""
    with _settings_lock:
        return _save_app_settings_unlocked(settings)


def update_app_setting(**kwargs: Any) -> bool:
    """
    Update mot hoac nhieu settings fields cung luc (thread-safe, atomic).

    Sau khi save thanh cong, listeners nhan danh sach key da thay doi
    (ngoai lock, de listener co the doc lai settings).

    Raises:
        TypeError: Neu key khong phai la AppSettings field
    """
    valid_fields = set(AppSettings.__dataclass_fields__)
    for key in kwargs:
        if key not in valid_fields:
            raise TypeError(
                f"'{key}' is not a valid AppSettings field. "
                f"Valid fields: {sorted(valid_fields)}"
            )

    with _settings_lock:
        settings = _load_app_settings_unlocked()
        changed_keys = [
            key for key, value in kwargs.items() if getattr(settings, key) != value
        ]
        for key, value in kwargs.items():
            setattr(settings, key, value)
        saved = _save_app_settings_unlocked(settings)

    if saved and changed_keys:
        _notify_listeners(changed_keys, settings)
    return saved


def add_settings_listener(listener: SettingsListener) -> Callable[[], None]:
    """
    Dang ky listener cho thay doi settings.

    Returns:
        Ham huy dang ky
    """
    _listeners.append(listener)

    def remove() -> None:
        if listener in _listeners:
            _listeners.remove(listener)

    return remove


def _notify_listeners(changed_keys: List[str], settings: AppSettings) -> None:
    for listener in list(_listeners):
        try:
            listener(changed_keys, settings)
        except Exception as e:
            log_error("Error in settings listener", e)
