"""Runtime configuration read from the environment.

A `.env` file in the working directory is loaded first when present; values
already set in the process environment take precedence.

Env vars:
- TMP_DIR: directory receiving uploaded artifacts (required)
- PORT: TCP port to listen on (default: 8000)
- HOST: bind address (default: 0.0.0.0)
- UPLOAD_ERROR_STATUS: uniform|typed (default: uniform)
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from dotenv import load_dotenv


DEFAULT_PORT = 8000
DEFAULT_HOST = "0.0.0.0"
ERROR_STATUS_MODES = {"uniform", "typed"}


class ConfigError(Exception):
    """Raised when the process cannot be configured."""


@dataclass(frozen=True)
class Settings:
    tmp_dir: str
    port: int = DEFAULT_PORT
    host: str = DEFAULT_HOST
    error_status: str = "uniform"

    @property
    def typed_status_codes(self) -> bool:
        return self.error_status == "typed"


def _parse_port(raw: Optional[str]) -> int:
    if raw is None or not raw.strip():
        return DEFAULT_PORT
    try:
        port = int(raw.strip())
    except ValueError:
        raise ConfigError(f"PORT must be an integer, got {raw!r}") from None
    if not 0 < port < 65536:
        raise ConfigError(f"PORT out of range: {port}")
    return port


def settings_from_env(env: Mapping[str, str]) -> Settings:
    tmp_dir = (env.get("TMP_DIR") or "").strip()
    if not tmp_dir:
        raise ConfigError("TMP_DIR is not set")
    mode = (env.get("UPLOAD_ERROR_STATUS") or "uniform").strip().lower()
    if mode not in ERROR_STATUS_MODES:
        raise ConfigError(f"UPLOAD_ERROR_STATUS must be one of {sorted(ERROR_STATUS_MODES)}, got {mode!r}")
    return Settings(
        tmp_dir=tmp_dir,
        port=_parse_port(env.get("PORT")),
        host=(env.get("HOST") or DEFAULT_HOST).strip(),
        error_status=mode,
    )


def load_env_file(dotenv_path: Optional[str] = None) -> None:
    # A missing .env is fine; the environment alone may carry everything.
    load_dotenv(dotenv_path=dotenv_path or os.path.join(os.getcwd(), ".env"), override=False)


def load_settings(dotenv_path: Optional[str] = None) -> Settings:
    load_env_file(dotenv_path)
    return settings_from_env(os.environ)
