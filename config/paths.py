"""
Application Paths - Centralized path definitions for Scripts Explorer

Module này định nghĩa tất cả các đường dẫn sử dụng trong ứng dụng.
Tập trung ở một nơi để tránh hardcode rải rác và đảm bảo consistency.

App data được lưu tại: ~/.scripts-explorer/
- logs/      : Log files
- scripts/   : Thư mục scripts mặc định (khi chưa cấu hình scripts_folder)
- settings.json
"""

import os
from pathlib import Path


# =============================================================================
# Tên ứng dụng - Single source of truth cho naming
# =============================================================================
APP_NAME = "scripts-explorer"

# =============================================================================
# Thư mục gốc của ứng dụng
# =============================================================================
APP_DIR = Path.home() / f".{APP_NAME}"

# =============================================================================
# Các thư mục con
# =============================================================================
LOG_DIR = APP_DIR / "logs"
DEFAULT_SCRIPTS_DIR = APP_DIR / "scripts"

# =============================================================================
# Các file cấu hình
# =============================================================================
SETTINGS_FILE = APP_DIR / "settings.json"

# =============================================================================
# Environment Variables - Tên biến môi trường cho debug mode
# =============================================================================
DEBUG_ENV_VAR = "SCRIPTS_EXPLORER_DEBUG"

# Kiểm tra debug mode từ environment variable
DEBUG_MODE = os.environ.get(DEBUG_ENV_VAR, "").lower() in ("1", "true", "yes")


def ensure_app_directories() -> None:
    """
    Tạo các thư mục cần thiết nếu chưa tồn tại.
    Gọi hàm này khi khởi động ứng dụng.
    """
    APP_DIR.mkdir(parents=True, exist_ok=True)
    LOG_DIR.mkdir(parents=True, exist_ok=True)


def get_app_dir() -> Path:
    """
    Lấy đường dẫn thư mục gốc của ứng dụng.

    Returns:
        Path đến thư mục ~/.scripts-explorer
    """
    return APP_DIR
