from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


class FileTokenStore:
    """Token + serialized user identity kept on disk so a reload can restore the session."""

    def __init__(self, path: Path | str):
        self.path = Path(path)

    def _read(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            logger.warning("unreadable session file %s; treating as empty", self.path)
            return {}
        return data if isinstance(data, dict) else {}

    def get_token(self) -> str | None:
        return self._read().get("token") or None

    def get_user(self) -> dict[str, Any] | None:
        return self._read().get("user") or None

    def save(self, token: str, user: dict[str, Any] | None = None) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".part")
        tmp.write_text(json.dumps({"token": token, "user": user}), encoding="utf-8")
        tmp.replace(self.path)

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)
