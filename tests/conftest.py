from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from appserver.db import Database, init_schema
from appserver.main import create_app
from appserver.settings import PACKAGE_ASSETS_DIR, Settings


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    """Settings pointing every file the app touches into the per-test tmp dir."""
    return Settings(
        database_path=str(tmp_path / "data.db"),
        config_path=str(tmp_path / "config.json"),
        cors_allow_origins=["*"],
        log_level="DEBUG",
        db_max_connections=5,
        db_timeout_seconds=5.0,
        host="127.0.0.1",
        port=3000,
        backup_dir=str(tmp_path / "backups"),
        assets_dir=PACKAGE_ASSETS_DIR,
    )


@pytest.fixture()
def db(tmp_path: Path) -> Database:
    database = Database(str(tmp_path / "store.db"))
    init_schema(database)
    return database


@pytest.fixture()
def client(settings: Settings) -> TestClient:
    return TestClient(create_app(settings))
