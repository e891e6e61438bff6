"""
Config Package - Chứa các đường dẫn và cấu hình của ứng dụng

Bao gồm:
- paths: Thư mục app data, log, scripts mặc định
- app_settings: Typed settings dataclass
"""

from config.app_settings import AppSettings
from config.paths import APP_DIR, DEFAULT_SCRIPTS_DIR, LOG_DIR, SETTINGS_FILE

__all__ = [
    "AppSettings",
    "APP_DIR",
    "DEFAULT_SCRIPTS_DIR",
    "LOG_DIR",
    "SETTINGS_FILE",
]
