from __future__ import annotations

import json
import os
import tempfile
import threading
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any


CONFIG_PATH = Path(os.environ.get("EPISODE_GUIDE_CONFIG") or Path(__file__).resolve().parent.parent / "config.json")

_config_lock = threading.Lock()

MAX_SEASON_WORKERS_LIMIT = 32


@dataclass
class AppConfig:
    # --- Catalog site ---
    scheme: str = "http"
    host: str = "www.tv.com"

    # Episode guide links: <guide url>?<season_param>=<season | all_seasons_token>
    season_param: str = "season"
    all_seasons_token: str = "All"

    # Upper bound for simultaneous per-season fetches.
    # The effective pool size is min(total seasons - 1, max_season_workers).
    max_season_workers: int = 12

    # --- Network ---
    request_timeout_sec: float = 25.0
    request_delay_sec: float = 0.0
    # Example: http://127.0.0.1:7890
    proxy_url: str = ""
    impersonate: str = "chrome"
    verify_ssl: bool = True

    def __post_init__(self) -> None:
        scheme = str(self.scheme or "").strip().lower()
        self.scheme = scheme if scheme in {"http", "https"} else "http"

        host = str(self.host or "").strip().strip("/")
        self.host = host or "www.tv.com"

        self.season_param = str(self.season_param or "").strip() or "season"
        self.all_seasons_token = str(self.all_seasons_token or "").strip() or "All"

        try:
            workers = int(self.max_season_workers)
        except (TypeError, ValueError):
            workers = 12
        self.max_season_workers = max(1, min(workers, MAX_SEASON_WORKERS_LIMIT))

        try:
            timeout = float(self.request_timeout_sec)
        except (TypeError, ValueError):
            timeout = 25.0
        self.request_timeout_sec = timeout if timeout > 0 else 25.0

        try:
            delay = float(self.request_delay_sec)
        except (TypeError, ValueError):
            delay = 0.0
        self.request_delay_sec = max(0.0, delay)

        self.proxy_url = str(self.proxy_url or "").strip()
        self.impersonate = str(self.impersonate or "").strip() or "chrome"
        self.verify_ssl = bool(self.verify_ssl)

    @property
    def base_url(self) -> str:
        return f"{self.scheme}://{self.host}"

    def to_dict(self) -> dict[str, Any]:
        """Convert config to dictionary for serialization."""
        return {f.name: getattr(self, f.name) for f in fields(self)}


def load_config(path: Path | str | None = None) -> AppConfig:
    config_path = Path(path) if path is not None else CONFIG_PATH
    with _config_lock:
        if not config_path.exists():
            return AppConfig()
        try:
            data = json.loads(config_path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            return AppConfig()

    if not isinstance(data, dict):
        return AppConfig()

    known = {f.name for f in fields(AppConfig)}
    # Unknown keys are ignored; __post_init__ normalizes the rest.
    return AppConfig(**{k: v for k, v in data.items() if k in known})


def save_config(cfg: AppConfig, path: Path | str | None = None) -> None:
    config_path = Path(path) if path is not None else CONFIG_PATH
    payload = json.dumps(cfg.to_dict(), ensure_ascii=False, indent=4)
    with _config_lock:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=".config-", suffix=".json", dir=str(config_path.parent))
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
            os.replace(tmp_name, config_path)
        except BaseException:
            try:
                os.unlink(tmp_name)
            except OSError:
                pass
            raise
