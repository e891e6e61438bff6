"""
AppSettings - Typed settings dataclass cho Scripts Explorer.

Thay the Dict[str, Any] bang dataclass co type hints, validation va default values.
Tat ca settings duoc truy cap qua typed fields thay vi string keys.

Modules:
- AppSettings: Dataclass chua toan bo application settings
- from_dict(): Tao AppSettings tu dict (doc tu settings.json)
- to_dict(): Chuyen doi AppSettings thanh dict de luu xuong file

Su dung:
    settings = load_app_settings()
    if settings.scripts_folder:
        ...
"""

import typing
from dataclasses import dataclass
from typing import Any


@dataclass
class AppSettings:
    """
    Typed settings cho Scripts Explorer.

    Moi field tuong ung voi mot key trong settings.json.
    Default values duoc su dung khi settings.json chua co key tuong ung.
    """

    # --- Scripts Tree Settings ---
    # Thu muc scripts thay the (rong -> dung ~/.scripts-explorer/scripts)
    scripts_folder: str = ""
    # Pattern gitignore-style bo qua khi watch (separated by newline)
    watch_excludes: str = ""
    # Debounce cho watcher, 0 = phan loai event ngay lap tuc
    watch_debounce_ms: int = 0

    # --- SQL Code Lens Settings ---
    # Tat code lens "Run SQL" tren cac SQL block
    disable_sql_codelens: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AppSettings":
        """
        Tao AppSettings tu dict, chi lay cac keys trung voi field names.

        Bao gom type validation: neu value co type khong khop voi
        field declaration, se bo qua va dung default thay the.

        Args:
            data: Dict settings (thuong tu settings.json)

        Returns:
            AppSettings instance voi values tu dict, fallback ve defaults
        """
        # Map field name -> expected type tu dataclass definition
        field_types: dict[str, Any] = {
            f.name: f.type for f in cls.__dataclass_fields__.values()
        }

        filtered: dict[str, Any] = {}
        for key, value in data.items():
            if key not in field_types:
                continue

            expected_type = field_types[key]

            # Xu ly truong hop type annotation la string (forward ref)
            if isinstance(expected_type, str):
                type_map = {"str": str, "bool": bool, "int": int, "float": float}
                expected_type = type_map.get(expected_type, str)

            # Strict type check: reject bool when expecting int
            if expected_type is int and isinstance(value, bool):
                continue

            origin = typing.get_origin(expected_type)
            check_type = origin if origin is not None else expected_type

            if isinstance(value, check_type):
                filtered[key] = value
            # Khong raise loi, chi bo qua value sai type -> dung default

        return cls(**filtered)

    def to_dict(self) -> dict[str, Any]:
        """
        Chuyen doi AppSettings thanh dict de luu xuong file.

        Returns:
            Dict voi toan bo settings
        """
        return {
            "scripts_folder": self.scripts_folder,
            "watch_excludes": self.watch_excludes,
            "watch_debounce_ms": self.watch_debounce_ms,
            "disable_sql_codelens": self.disable_sql_codelens,
        }

    def get_watch_excludes_list(self) -> list[str]:
        """
        Parse watch_excludes string thanh list cac patterns.

        Loai bo dong trong va comments (bat dau bang #).

        Returns:
            List patterns da normalize
        """
        return [
            line.strip()
            for line in self.watch_excludes.splitlines()
            if line.strip() and not line.strip().startswith("#")
        ]
