from __future__ import annotations
import os
from pathlib import Path
from typing import Optional

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine

from .models import Base

DB_PATH = Path(os.getenv("VDP_ADMIN_DB") or Path(__file__).resolve().parent / 'vdp_admin.db')
ENGINE = create_engine(f'sqlite:///{DB_PATH}', echo=False, future=True)


def init_db(engine: Engine | None = None) -> None:
    """Create the settings table if missing."""
    Base.metadata.create_all(bind=engine or ENGINE)


class SettingsRepository:
    """Durable key/value storage for the client (one row per key, no versioning)."""

    def __init__(self, engine: Engine | None = None) -> None:
        self.engine = engine or ENGINE

    def get(self, key: str) -> Optional[str]:
        with self.engine.connect() as conn:
            row = conn.execute(text("SELECT value FROM app_settings WHERE key=:k"), {"k": key}).fetchone()
            return row[0] if row else None

    def set(self, key: str, value: Optional[str]) -> None:
        with self.engine.connect() as conn:
            if value is None:
                conn.execute(text("DELETE FROM app_settings WHERE key=:k"), {"k": key})
            else:
                conn.execute(text("INSERT INTO app_settings(key,value) VALUES(:k,:v) ON CONFLICT(key) DO UPDATE SET value=excluded.value"), {"k": key, "v": value})
            conn.commit()


# ========= App settings helpers =========
def get_setting(key: str) -> Optional[str]:
    return SettingsRepository().get(key)

def set_setting(key: str, value: Optional[str]) -> None:
    SettingsRepository().set(key, value)
