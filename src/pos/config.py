from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import os
import sys


@dataclass(frozen=True)
class Settings:
    base_dir: Path
    db_path: Path
    logs_dir: Path
    invoices_dir: Path
    invoice_service_url: str = "http://localhost:9001"
    invoice_timeout: float = 10.0
    db_timeout: float = 30.0


def _windows_appdata() -> Path:
    return Path(os.environ.get("APPDATA", str(Path.home() / "AppData" / "Roaming")))


def _mac_app_support() -> Path:
    return Path.home() / "Library" / "Application Support"


def _default_base(app_name: str) -> Path:
    if sys.platform.startswith("win"):
        return _windows_appdata() / app_name
    if sys.platform == "darwin":
        return _mac_app_support() / app_name
    return Path.home() / f".{app_name.lower()}"


def get_settings(app_name: str = "PointOfSale", env: dict[str, str] | None = None) -> Settings:
    env = os.environ if env is None else env

    home = env.get("POS_HOME", "").strip()
    base = Path(home) if home else _default_base(app_name)
    db_override = env.get("POS_DB_PATH", "").strip()
    db = Path(db_override) if db_override else base / "pos.db"

    logs = base / "logs"
    invoices = base / "invoices"

    base.mkdir(parents=True, exist_ok=True)
    logs.mkdir(parents=True, exist_ok=True)
    invoices.mkdir(parents=True, exist_ok=True)

    return Settings(
        base_dir=base,
        db_path=db,
        logs_dir=logs,
        invoices_dir=invoices,
        invoice_service_url=env.get("POS_INVOICE_SERVICE_URL", "http://localhost:9001").rstrip("/"),
        invoice_timeout=float(env.get("POS_INVOICE_TIMEOUT", "10")),
        db_timeout=float(env.get("POS_DB_TIMEOUT", "30")),
    )
