import logging
import os
import sys
from pathlib import Path

from PySide6.QtCore import QStandardPaths
from PySide6.QtWidgets import QApplication

ROOT = Path(__file__).resolve().parent
SRC_DIR = ROOT / "src"

if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from cdcase.core.state import AppState, Notify
from cdcase.db.bookmarks import SqliteBookmarkStore
from cdcase.db.database import get_config, initialize_database, set_config, table_info
from cdcase.library.importer import LibraryImporter
from cdcase.library.library import Library
from cdcase.player.media_session import MediaSession
from cdcase.player.player import Player
from cdcase.player.queue import PlaybackQueue
from cdcase.ui.main_window import MainWindow

logger = logging.getLogger("cdcase")


def debug_print_schema(db) -> None:
    for table in ("bookmarks", "config_data"):
        print(f"\n[{table} table schema]")
        for name, col_type in table_info(db, table):
            print(f"- {name} ({col_type})")


def get_app_data_dir() -> str:
    base = os.getenv("CDCASE_DATA_DIR") or QStandardPaths.writableLocation(QStandardPaths.AppDataLocation)
    os.makedirs(base, exist_ok=True)
    return base


def init_app_state() -> AppState:
    app_state = AppState()

    app_data_dir = get_app_data_dir()
    app_state.app_data_dir = app_data_dir
    app_state.db_path = os.path.join(app_data_dir, "db.sqlite3")

    app_state.db = initialize_database(app_data_dir)
    app_state.config = get_config(app_state.db)

    if os.getenv("CDCASE_DEBUG_SCHEMA") == "1":
        debug_print_schema(app_state.db)

    app_state.library = Library()
    app_state.importer = LibraryImporter(app_state.library, SqliteBookmarkStore(app_state.db))

    try:
        app_state.player = Player(volume=app_state.config.volume)
    except Exception as e:
        logger.exception("Failed to initialize audio player")
        app_state.player = None
        app_state.queued_notifications.append(
            Notify(message=f"Failed to initialize audio player: {e}", notify_type="error")
        )

    app_state.queue = PlaybackQueue(app_state.player)
    app_state.media_session = MediaSession(app_state.queue)

    return app_state


def save_config(app_state: AppState) -> None:
    if app_state.player:
        app_state.config.volume = app_state.player.volume()
    set_config(app_state.db, app_state.config)


def main() -> int:
    logging.basicConfig(
        level=os.getenv("CDCASE_LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    qt_app = QApplication(sys.argv)
    qt_app.setApplicationName("cdcase")

    app_state = init_app_state()
    main_window = MainWindow(app_state)
    main_window.show()

    if app_state.config.restore_on_launch:
        main_window.refresh_library()

    qt_app.aboutToQuit.connect(lambda: save_config(app_state))
    return qt_app.exec()


if __name__ == "__main__":
    raise SystemExit(main())
