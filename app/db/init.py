# app/db/init.py
import sqlite3
from pathlib import Path

from core.config import DB_PATH

SCHEMA_PATH = Path(__file__).with_name("schema.sql")


def init_db(db_path=DB_PATH, schema_path=SCHEMA_PATH):
    conn = sqlite3.connect(db_path)
    try:
        with open(schema_path, "r", encoding="utf-8") as f:
            conn.executescript(f.read())
        conn.commit()
    finally:
        conn.close()
