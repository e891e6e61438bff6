"""
Scripts Explorer - Entry Point

In cay scripts folder (thu muc truoc, sort theo ten) va, voi --watch,
in Change Events cho den khi Ctrl+C.

    python main.py [--root DIR] [--watch] [--debug]
"""

import argparse
import asyncio
import locale
import sys
from typing import List, Optional

from config.app_settings import AppSettings
from core.file_types import Entry
from core.logging_config import flush_logs, log_error, log_warning, set_debug_mode
from services import settings_manager
from services.interfaces.file_watcher_service import FileChangeEvent
from services.scripts_explorer import ScriptsExplorer
from services.service_container import ServiceContainer


async def print_tree(
    explorer: ScriptsExplorer, element: Optional[Entry] = None, depth: int = 0
) -> None:
    for entry in await explorer.get_children(element):
        item = explorer.get_tree_item(entry)
        suffix = "/" if entry.is_directory else ""
        print(f"{'  ' * depth}{item.label}{suffix}")
        if entry.is_directory:
            await print_tree(explorer, entry, depth + 1)


def _print_events(events: List[FileChangeEvent]) -> None:
    for event in events:
        print(f"{event.type.name.lower():8} {event.path}")


async def run(root: Optional[str], watch: bool) -> int:
    settings = settings_manager.load_app_settings()
    if root:
        settings = AppSettings.from_dict({**settings.to_dict(), "scripts_folder": root})

    container = ServiceContainer(loop=asyncio.get_running_loop(), settings=settings)
    try:
        await container.start()
        explorer = container.explorer
        print(f"# {explorer.get_default_location()}")
        await print_tree(explorer)

        if watch:
            explorer.on_did_change_file.subscribe(_print_events)
            await asyncio.Event().wait()
    finally:
        container.dispose()
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Browse and watch the scripts folder")
    parser.add_argument("--root", help="Scripts folder (overrides settings)")
    parser.add_argument("--watch", action="store_true", help="Stream change events")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    args = parser.parse_args(argv)

    try:
        # Sort cay theo collation cua user thay vi locale "C"
        locale.setlocale(locale.LC_COLLATE, "")
    except locale.Error as e:
        log_warning(f"Could not apply user collation locale: {e}")

    if args.debug:
        set_debug_mode(True)

    try:
        return asyncio.run(run(args.root, args.watch))
    except KeyboardInterrupt:
        return 0
    except Exception as e:
        log_error("Scripts explorer failed", e)
        return 1
    finally:
        flush_logs()


if __name__ == "__main__":
    sys.exit(main())
