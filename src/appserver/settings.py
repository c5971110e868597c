from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List

logger = logging.getLogger(__name__)

DEFAULT_BACKUP_DIR = "./"
DEFAULT_ASSETS_DIR = "./appserver/assets"
PACKAGE_ASSETS_DIR = str(Path(__file__).resolve().parent / "assets")


@dataclass(frozen=True)
class Settings:
    """
    Application settings loaded from environment variables and a JSON config file.

    Env vars:
    - DATABASE_PATH: path to the sqlite db file. Default './data.db'
    - CONFIG_PATH: path to the JSON config file. Default 'config.json'
    - CORS_ALLOW_ORIGINS: comma-separated list of allowed origins; '*' by default
    - LOG_LEVEL: root log level name. Default 'INFO'
    - DB_MAX_CONNECTIONS: max concurrently open sqlite connections. Default 5
    - DB_TIMEOUT_SECONDS: sqlite busy timeout. Default 5.0
    - HOST / PORT: listener address for the bundled server. Default 0.0.0.0:3000

    Config file keys:
    - backup_dir: directory that receives database backups. Default './'
    - assets_dir: directory served under /assets. Default './appserver/assets'
    """

    database_path: str
    config_path: str
    cors_allow_origins: List[str]
    log_level: str
    db_max_connections: int
    db_timeout_seconds: float
    host: str
    port: int
    backup_dir: str
    assets_dir: str


def _get_env(name: str, default: str) -> str:
    value = os.getenv(name, default)
    if value is None or value == "":
        return default
    return value


def _parse_int(value: str, default: int) -> int:
    try:
        parsed = int(value.strip())
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _parse_float(value: str, default: float) -> float:
    try:
        parsed = float(value.strip())
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _parse_origins(origins_value: str) -> List[str]:
    """
    Parse CORS origins from env. Supports:
    - '*' to allow all origins
    - Comma-separated list of origins
    """
    value = origins_value.strip()
    if value == "*":
        return ["*"]
    return [o.strip() for o in value.split(",") if o.strip()]


# PUBLIC_INTERFACE
def read_config_file(path: str) -> Dict[str, str]:
    """
    Read backup_dir and assets_dir from the JSON config file at `path`.

    A missing, unreadable or unparsable file yields the defaults. Unknown keys are
    ignored; non-string values for known keys fall back to the default for that key.
    """
    config = {"backup_dir": DEFAULT_BACKUP_DIR, "assets_dir": DEFAULT_ASSETS_DIR}
    try:
        with open(path, "r", encoding="utf-8") as f:
            raw: Any = json.load(f)
    except FileNotFoundError:
        logger.debug("No config file at %s, using defaults", path)
        return config
    except (OSError, ValueError) as e:
        logger.warning("Could not parse config file %s (%s), using defaults", path, e)
        return config

    if not isinstance(raw, dict):
        logger.warning("Config file %s is not a JSON object, using defaults", path)
        return config

    for key in config:
        value = raw.get(key)
        if isinstance(value, str) and value.strip():
            config[key] = value.strip()
    return config


def _resolve_assets_dir(configured: str) -> str:
    if os.path.isdir(configured):
        return configured
    logger.info("Assets directory %s not found, serving packaged assets", configured)
    return PACKAGE_ASSETS_DIR


# PUBLIC_INTERFACE
def get_settings() -> Settings:
    """Return application settings loaded from environment variables and the config file."""
    config_path = _get_env("CONFIG_PATH", "config.json").strip()
    config = read_config_file(config_path)

    return Settings(
        database_path=_get_env("DATABASE_PATH", "./data.db").strip(),
        config_path=config_path,
        cors_allow_origins=_parse_origins(_get_env("CORS_ALLOW_ORIGINS", "*")),
        log_level=_get_env("LOG_LEVEL", "INFO").strip().upper(),
        db_max_connections=_parse_int(_get_env("DB_MAX_CONNECTIONS", "5"), 5),
        db_timeout_seconds=_parse_float(_get_env("DB_TIMEOUT_SECONDS", "5.0"), 5.0),
        host=_get_env("HOST", "0.0.0.0").strip(),
        port=_parse_int(_get_env("PORT", "3000"), 3000),
        backup_dir=config["backup_dir"],
        assets_dir=_resolve_assets_dir(config["assets_dir"]),
    )
