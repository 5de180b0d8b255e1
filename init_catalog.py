import os
import sqlite3
from pathlib import Path
from urllib.parse import urlparse

from dotenv import load_dotenv


# ======================================================
# ENV
# ======================================================

load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./data/sqlite/salon.db")


# ======================================================
# CATALOG
# ======================================================

# (id, category, name, duration_min, last_booking_time)
SERVICES = [
    ("cut", "cut", "Cut", 60, "19:00"),
    ("color-short", "color", "Color (short)", 90, "18:00"),
    ("color-medium", "color", "Color (medium)", 90, "18:00"),
    ("color-long", "color", "Color (long)", 90, "18:00"),
    ("color-superlong", "color", "Color (extra long)", 90, "18:00"),
    ("perm-point", "perm", "Point perm", 90, "18:00"),
    ("perm-all", "perm", "Full perm", 90, "18:00"),
    ("treatment", "treatment", "Treatment", 60, "19:00"),
    ("straightening", "straightening", "Hair straightening", 100, "18:00"),
    ("spa-massage", "spa", "Massage head spa", 60, "19:00"),
    ("spa-treatment", "spa", "Treatment head spa", 60, "19:00"),
    ("shampoo-blow", "shampoo", "Shampoo & blow dry", 60, "19:00"),
    ("hair-set", "styling", "Hair set", 60, "19:00"),
]


# ======================================================
# DB URL PARSER (SQLite only)
# ======================================================

def get_sqlite_db_path(database_url: str) -> Path:
    """
    Supports:
      sqlite:///./data/sqlite/salon.db
      sqlite:////abs/path/to/salon.db
    """
    parsed = urlparse(database_url)

    if parsed.scheme != "sqlite":
        raise RuntimeError("init_catalog supports only sqlite DATABASE_URL")

    if not parsed.path:
        raise RuntimeError("Invalid sqlite DATABASE_URL")

    raw_path = parsed.path

    # sqlite:///./path or sqlite:///../path  → relative to CWD
    if raw_path.startswith("/./") or raw_path.startswith("/../"):
        return (Path.cwd() / raw_path[1:]).resolve()

    # sqlite:////abs/path → absolute
    return Path(raw_path).resolve()


DB_PATH = get_sqlite_db_path(DATABASE_URL)

if not DB_PATH.exists():
    raise RuntimeError(f"Database file not found: {DB_PATH} (run backend/migrate.py first)")


# ======================================================
# MAIN LOGIC
# ======================================================

def main():
    conn = sqlite3.connect(DB_PATH)
    cur = conn.cursor()

    created = 0
    for service_id, category, name, duration_min, last_booking_time in SERVICES:
        cur.execute("SELECT 1 FROM services WHERE id = ?", (service_id,))
        if cur.fetchone():
            continue

        cur.execute(
            """
            INSERT INTO services (id, category, name, duration_min, last_booking_time)
            VALUES (?, ?, ?, ?, ?)
            """,
            (service_id, category, name, duration_min, last_booking_time)
        )
        created += 1

    conn.commit()
    conn.close()

    print(f"[BOOTSTRAP] Catalog ready: {created} services added, {len(SERVICES) - created} already present")


if __name__ == "__main__":
    main()
