"""
Apply pending schema migrations to the SQLite database.

Migrations live in backend/migrations and are named NNN_description.sql or
NNN_description.py (a module exposing run(db_path)). The highest applied
NNN is recorded in schema_migrations.

    python backend/migrate.py
"""

import importlib.util
import logging
import sqlite3
import sys
from pathlib import Path
from urllib.parse import urlparse

sys.path.insert(0, str(Path(__file__).resolve().parent))

from salon_booking.config import settings  # noqa: E402

logger = logging.getLogger("migrate")

MIGRATIONS_DIR = Path(__file__).resolve().parent / "migrations"


def get_db_path() -> Path:
    parsed = urlparse(settings.resolved_database_url)
    if parsed.scheme != "sqlite":
        raise RuntimeError("migrate.py supports only sqlite DATABASE_URL")
    return Path(parsed.path)


def current_version(conn: sqlite3.Connection) -> int:
    conn.execute("""
        CREATE TABLE IF NOT EXISTS schema_migrations (
            version INTEGER PRIMARY KEY,
            applied_at TEXT DEFAULT CURRENT_TIMESTAMP
        );
    """)
    return conn.execute("SELECT COALESCE(MAX(version), 0) FROM schema_migrations;").fetchone()[0]


def pending_migrations(applied: int) -> list[tuple[int, Path]]:
    found = []
    for path in MIGRATIONS_DIR.iterdir():
        if path.suffix not in (".sql", ".py"):
            continue
        version = int(path.name.split("_")[0])
        if version > applied:
            found.append((version, path))
    return sorted(found)


def apply_one(db_path: Path, version: int, path: Path) -> None:
    if path.suffix == ".py":
        spec = importlib.util.spec_from_file_location(f"migration_{version}", path)
        mod = importlib.util.module_from_spec(spec)
        spec.loader.exec_module(mod)
        mod.run(str(db_path))
        with sqlite3.connect(db_path) as conn:
            conn.execute("INSERT INTO schema_migrations(version) VALUES (?)", (version,))
        return

    conn = sqlite3.connect(db_path)
    try:
        # executescript commits on its own; wrap it so a broken script leaves nothing
        conn.executescript(
            "BEGIN;\n"
            + path.read_text(encoding="utf-8")
            + f"\nINSERT INTO schema_migrations(version) VALUES ({version});\nCOMMIT;"
        )
    except sqlite3.Error:
        conn.rollback()
        raise
    finally:
        conn.close()


def apply_migrations() -> int:
    db_path = get_db_path()
    db_path.parent.mkdir(parents=True, exist_ok=True)
    logger.info(f"Using DB: {db_path}")

    with sqlite3.connect(db_path) as conn:
        applied = current_version(conn)
    logger.info(f"Current schema version: {applied}")

    pending = pending_migrations(applied)
    for version, path in pending:
        logger.info(f"Applying migration {path.name}")
        apply_one(db_path, version, path)
        applied = version

    logger.info(f"Schema at version {applied}, {len(pending)} migration(s) applied")
    return applied


if __name__ == "__main__":
    logging.basicConfig(level=settings.log_level, format="%(message)s")
    apply_migrations()
