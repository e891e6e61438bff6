"""
Tests cho ServiceContainer - composition root pattern.

Verify:
1. Container tao dung cac service instances
2. start() bat dau watch root, dang ky settings listener
3. Thay doi scripts_folder qua settings_manager -> explorer doi root
4. dispose() huy listener va watcher

Run: pytest tests/test_service_container.py -v
"""

import asyncio
from unittest.mock import patch

from config.app_settings import AppSettings
from services import settings_manager
from services.scripts_explorer import ScriptsExplorer
from services.service_container import ServiceContainer
from services.sql_codelens_provider import SqlCodeLensProvider


class TestServiceContainerCreation:
    """Dam bao container tao dung cac service instances."""

    def test_creates_services(self, tmp_path):
        container = ServiceContainer(settings=AppSettings(scripts_folder=str(tmp_path)))
        try:
            assert isinstance(container.explorer, ScriptsExplorer)
            assert isinstance(container.codelens, SqlCodeLensProvider)
            assert container.explorer.get_default_location() == tmp_path
        finally:
            container.dispose()

    def test_health_report_before_start(self, tmp_path):
        container = ServiceContainer(settings=AppSettings(scripts_folder=str(tmp_path)))
        report = container.get_health_report()

        assert report == {
            "root": str(tmp_path),
            "watching": False,
            "active_connection": None,
        }

    def test_codelens_reads_settings_file(self, tmp_path):
        settings_file = tmp_path / "settings.json"
        with patch("services.settings_manager.SETTINGS_FILE", settings_file):
            container = ServiceContainer(settings=AppSettings(scripts_folder=str(tmp_path)))
            from services.sql_codelens_provider import TextDocument

            document = TextDocument(str(tmp_path / "a.sql"), "select 1;")
            assert len(container.codelens.parse_code_lens(document)) == 1

            settings_manager.update_app_setting(disable_sql_codelens=True)
            assert container.codelens.parse_code_lens(document) == []


class TestServiceContainerLifecycle:
    """start() / settings listener / dispose()."""

    def test_start_watches_root(self, tmp_path):
        async def scenario():
            container = ServiceContainer(
                loop=asyncio.get_running_loop(),
                settings=AppSettings(scripts_folder=str(tmp_path)),
            )
            try:
                await container.start()
                return container.get_health_report()
            finally:
                container.dispose()

        with patch("services.settings_manager.SETTINGS_FILE", tmp_path / "s.json"):
            report = asyncio.run(scenario())

        assert report["watching"] is True
        assert report["root"] == str(tmp_path)

    def test_settings_change_moves_root(self, tmp_path):
        first = tmp_path / "first"
        second = tmp_path / "second"
        first.mkdir()
        second.mkdir()

        async def scenario():
            container = ServiceContainer(
                loop=asyncio.get_running_loop(),
                settings=AppSettings(scripts_folder=str(first)),
            )
            try:
                await container.start()
                settings_manager.update_app_setting(scripts_folder=str(second))
                watch = container.explorer.active_watch
                return container.explorer.get_default_location(), watch.path
            finally:
                container.dispose()

        with patch("services.settings_manager.SETTINGS_FILE", tmp_path / "s.json"):
            root, watched = asyncio.run(scenario())

        assert root == second
        assert watched == second

    def test_dispose_removes_listener(self, tmp_path):
        async def scenario():
            container = ServiceContainer(
                loop=asyncio.get_running_loop(),
                settings=AppSettings(scripts_folder=str(tmp_path)),
            )
            await container.start()
            container.dispose()
            container.dispose()
            settings_manager.update_app_setting(scripts_folder=str(tmp_path / "other"))
            return container

        with patch("services.settings_manager.SETTINGS_FILE", tmp_path / "s.json"):
            container = asyncio.run(scenario())

        assert container.explorer.get_default_location() == tmp_path
        assert container.explorer.active_watch is None

    def test_lifecycle_is_logged_through_app_logger(self, tmp_path):
        with patch("services.service_container.log_info") as log_info:
            container = ServiceContainer(settings=AppSettings(scripts_folder=str(tmp_path)))
            container.dispose()

        messages = [call.args[0] for call in log_info.call_args_list]
        assert messages == ["ServiceContainer initialized", "ServiceContainer disposed"]
