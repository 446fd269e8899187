from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

READ_SOURCES = ("local", "remote")
UPLOAD_MODES = ("inline", "multipart")


def _get_env(name: str, default: Optional[str] = None, required: bool = False) -> str:
    val = os.getenv(name, default)
    if required and (val is None or str(val).strip() == ""):
        raise RuntimeError(f"Missing required env var: {name}")
    return str(val) if val is not None else ""


def _choice(name: str, default: str, allowed: tuple[str, ...]) -> str:
    val = _get_env(name, default).strip().lower()
    if val not in allowed:
        raise RuntimeError(f"{name} must be one of {', '.join(allowed)} (got {val!r})")
    return val


def _optional_float(name: str) -> Optional[float]:
    raw = _get_env(name, "").strip()
    if not raw:
        return None
    try:
        return float(raw)
    except ValueError as e:
        raise RuntimeError(f"{name} must be a number of seconds (got {raw!r})") from e


@dataclass(frozen=True)
class Settings:
    # Dataset served by `read`
    read_source: str = "local"
    csv_file_path: str = "csvtest.csv"
    remote_url: str = ""
    # None keeps the transport default (no deadline)
    remote_timeout: Optional[float] = None

    # Shape accepted by `uploadCSV`
    upload_mode: str = "inline"
    upload_field: str = "file"

    # Runtime
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8080


def load_settings() -> Settings:
    # Env file is optional; real environment variables take precedence.
    env_file = os.getenv("CSV_ENV_FILE", ".env")
    if env_file and Path(env_file).exists():
        load_dotenv(env_file, override=False)

    read_source = _choice("CSV_READ_SOURCE", "local", READ_SOURCES)
    remote_url = _get_env("CSV_REMOTE_URL", "", required=read_source == "remote").strip()

    return Settings(
        read_source=read_source,
        csv_file_path=_get_env("CSV_FILE_PATH", "csvtest.csv"),
        remote_url=remote_url,
        remote_timeout=_optional_float("CSV_REMOTE_TIMEOUT"),
        upload_mode=_choice("CSV_UPLOAD_MODE", "inline", UPLOAD_MODES),
        upload_field=_get_env("CSV_UPLOAD_FIELD", "file").strip() or "file",
        log_level=_get_env("LOG_LEVEL", "INFO").upper(),
        host=_get_env("HOST", "0.0.0.0"),
        port=int(_get_env("PORT", "8080")),
    )
