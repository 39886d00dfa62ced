from __future__ import annotations

import importlib
import logging
import os
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.construction_hr.construction_hr.database.bootstrap import ensure_admin_user
from src.construction_hr.construction_hr.database.connection import DBConfig, DatabaseConnection


def main() -> None:
    load_dotenv(override=False)
    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(name)s - %(message)s")
    settings = importlib.import_module(get_settings_module())
    conn = DatabaseConnection(DBConfig.from_dict(dict(settings.DB_CONFIG)))

    username = os.getenv("ADMIN_USERNAME", "admin")
    password = os.getenv("ADMIN_PASSWORD", getattr(settings, "ADMIN_PASSWORD", "admin123"))
    if ensure_admin_user(conn, username=username, password=password):
        print(f"OK: Admin user '{username}' created")
    else:
        print(f"Admin user '{username}' already exists")


if __name__ == "__main__":
    main()
