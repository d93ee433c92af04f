from __future__ import annotations

import os
from pathlib import Path

from pydantic import BaseModel


class Settings(BaseModel):
    API_BASE_URL: str = os.getenv("API_BASE_URL", "http://localhost:8080")
    HTTP_TIMEOUT_S: float = float(os.getenv("HTTP_TIMEOUT_S", "10"))
    SESSION_FILE: Path = Path(
        os.getenv("SESSION_FILE", str(Path.home() / ".loan_portal" / "session.json"))
    )
    NOTICE_TTL_S: float = float(os.getenv("NOTICE_TTL_S", "5"))
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")


settings = Settings()
