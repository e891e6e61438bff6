"""
ServiceContainer - Composition root cho Scripts Explorer.

Tap trung viec khoi tao va quan ly lifecycle cua cac services
tai mot diem duy nhat:
- ScriptsExplorer (file system + tree provider)
- SqlCodeLensProvider
- Listener settings -> explorer.on_configuration_changed

Su dung:
    container = ServiceContainer(loop=asyncio.get_running_loop())
    await container.start()
    ...
    container.dispose()
"""

import asyncio
from typing import Any, Callable, Optional

from config.app_settings import AppSettings
from core.logging_config import log_info
from services import settings_manager
from services.scripts_explorer import ExplorerConfig, ScriptsExplorer
from services.sql_codelens_provider import SqlCodeLensProvider


class ServiceContainer:
    """
    Composition root - single point of control cho service lifecycle.

    So huu: ScriptsExplorer, SqlCodeLensProvider, dang ky settings listener.
    """

    def __init__(
        self,
        loop: Optional[asyncio.AbstractEventLoop] = None,
        settings: Optional[AppSettings] = None,
    ) -> None:
        initial = settings or settings_manager.load_app_settings()

        self.explorer = ScriptsExplorer(ExplorerConfig.from_settings(initial), loop=loop)
        self.codelens = SqlCodeLensProvider(settings_manager.load_app_settings)
        self._remove_listener: Optional[Callable[[], None]] = None

        log_info("ServiceContainer initialized")

    async def start(self) -> None:
        """Tao root mac dinh (neu can), bat dau watch, dang ky settings listener."""
        await self.explorer.initialize()
        self._remove_listener = settings_manager.add_settings_listener(
            self.explorer.on_configuration_changed
        )

    def get_health_report(self) -> dict[str, Any]:
        """Trang thai hien tai cua cac services (debug)."""
        watch = self.explorer.active_watch
        return {
            "root": str(self.explorer.get_default_location() or ""),
            "watching": watch is not None and watch.is_running(),
            "active_connection": self.codelens.active_connection_name,
        }

    def dispose(self) -> None:
        if self._remove_listener is not None:
            self._remove_listener()
            self._remove_listener = None
        self.explorer.dispose()
        log_info("ServiceContainer disposed")
