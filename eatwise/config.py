from __future__ import annotations

import os
from pathlib import Path
from typing import List, Optional


class Settings:
    """Centralized configuration for the EatWise resolution service."""

    def __init__(self) -> None:
        base_dir = Path(__file__).resolve().parent
        repo_root = base_dir.parent
        data_root_default = repo_root / "data"

        self.data_root: Path = Path(
            os.environ.get("EATWISE_DATA_ROOT") or data_root_default
        ).expanduser()
        self.db_path: Path = Path(
            os.environ.get("EATWISE_DB_PATH") or (self.data_root / "eatwise.db")
        ).expanduser()
        seed_file = os.environ.get("EATWISE_SEED_FILE")
        self.seed_file: Optional[Path] = Path(seed_file).expanduser() if seed_file else None

        # Wall-clock bound for a single store call issued by a resolver.
        self.store_timeout_sec: float = float(
            os.environ.get("EATWISE_STORE_TIMEOUT") or "5"
        )
        # sqlite3 lock wait; kept separate from the resolver bound above.
        self.sqlite_busy_timeout_sec: float = float(
            os.environ.get("EATWISE_SQLITE_BUSY_TIMEOUT") or "5"
        )
        self.max_fanout: int = max(1, int(os.environ.get("EATWISE_MAX_FANOUT") or "8"))

        self.log_level: str = (os.environ.get("EATWISE_LOG_LEVEL") or "INFO").upper()
        self.host: str = os.environ.get("EATWISE_HOST") or os.environ.get("HOST") or "127.0.0.1"
        self.port_raw: str = os.environ.get("EATWISE_PORT") or os.environ.get("PORT") or "8000"

        cors = os.environ.get("EATWISE_CORS_ORIGINS", "*")
        if cors.strip() == "*":
            self.cors_origins: List[str] = ["*"]
        else:
            self.cors_origins = [
                origin.strip() for origin in cors.split(",") if origin.strip()
            ]


settings = Settings()
