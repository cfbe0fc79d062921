import logging
import os
import sqlite3
from dataclasses import dataclass

logger = logging.getLogger(__name__)

CURRENT_DB_VERSION = 2


@dataclass
class Config:
    volume: float = 0.7
    restore_on_launch: bool = True


def connect(sqlite_path: str) -> sqlite3.Connection:
    db = sqlite3.connect(sqlite_path)
    db.row_factory = sqlite3.Row

    existing_version = db.execute("PRAGMA user_version").fetchone()[0]
    upgrade_database_if_needed(db, existing_version)

    return db


def initialize_database(app_data_dir: str) -> sqlite3.Connection:
    os.makedirs(app_data_dir, exist_ok=True)
    sqlite_path = os.path.join(app_data_dir, "db.sqlite3")
    logger.info("Database file path: %s", sqlite_path)
    return connect(sqlite_path)


def upgrade_database_if_needed(db: sqlite3.Connection, existing_version: int):
    logger.info("Existing database version: %s", existing_version)

    if existing_version >= CURRENT_DB_VERSION:
        return

    # v1
    if existing_version <= 0:
        logger.info("Migrate database version 1...")
        db.execute("PRAGMA journal_mode=WAL")
        db.execute("PRAGMA user_version=1")
        db.executescript("""
            CREATE TABLE bookmarks (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL
            );
            CREATE TABLE config_data (
                id INTEGER PRIMARY KEY,
                volume FLOAT
            );
            INSERT INTO config_data (volume) VALUES (0.7);
        """)
        db.commit()

    # v2
    if existing_version <= 1:
        logger.info("Migrate database version 2...")
        db.execute("PRAGMA user_version=2")
        db.execute("ALTER TABLE config_data ADD COLUMN restore_on_launch BOOLEAN DEFAULT 1")
        db.commit()


def table_info(db: sqlite3.Connection, table: str) -> list[tuple[str, str]]:
    cur = db.execute(f"PRAGMA table_info({table})")
    return [(row["name"], row["type"]) for row in cur.fetchall()]


# -------------------------------
# CONFIG
# -------------------------------
def get_config(db: sqlite3.Connection) -> Config:
    row = db.execute("""
        SELECT volume, restore_on_launch
        FROM config_data
        LIMIT 1
    """).fetchone()
    if row is None:
        return Config()
    return Config(
        volume=float(row["volume"]),
        restore_on_launch=bool(row["restore_on_launch"]),
    )


def set_config(db: sqlite3.Connection, config: Config):
    db.execute("""
        UPDATE config_data
        SET volume = ?,
            restore_on_launch = ?
        WHERE 1
    """, (
        min(1.0, max(0.0, float(config.volume))),
        config.restore_on_launch,
    ))
    db.commit()
