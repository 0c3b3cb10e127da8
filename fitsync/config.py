from __future__ import annotations

import os
from pathlib import Path
from typing import List, Optional


class Settings:
    """Centralized configuration for the nutrition sync backend."""

    def __init__(self) -> None:
        base_dir = Path(__file__).resolve().parent
        repo_root = base_dir.parent
        data_root_default = repo_root / "data"

        self.data_root: Path = Path(
            os.environ.get("FITSYNC_DATA_ROOT") or data_root_default
        ).expanduser()
        # Single active session; the id keys both the local files and the remote document.
        self.user_id: str = os.environ.get("FITSYNC_USER_ID") or "local"
        self.sync_debounce_ms: int = int(os.environ.get("FITSYNC_SYNC_DEBOUNCE_MS") or "1000")

        # ---- Remote profile document store ----
        # Unset URL means the in-memory store is used (local development).
        self.profile_store_url: Optional[str] = os.environ.get("FITSYNC_PROFILE_STORE_URL") or None
        self.profile_store_token: Optional[str] = os.environ.get("FITSYNC_PROFILE_STORE_TOKEN") or None
        self.profile_collection: str = os.environ.get("FITSYNC_PROFILE_COLLECTION") or "users"
        self.profile_timeout: float = float(os.environ.get("FITSYNC_PROFILE_TIMEOUT") or "10")

        cors = os.environ.get("FITSYNC_CORS_ORIGINS", "*")
        if cors.strip() == "*":
            self.cors_origins: List[str] = ["*"]
        else:
            self.cors_origins = [
                origin.strip() for origin in cors.split(",") if origin.strip()
            ]

    def user_root(self, user_id: Optional[str] = None) -> Path:
        return self.data_root / "users" / (user_id or self.user_id)


settings = Settings()
