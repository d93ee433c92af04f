from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Literal

from core.config import settings

Kind = Literal["success", "error"]


@dataclass(frozen=True)
class Notice:
    kind: Kind
    text: str
    expires_at: float


class NoticeBoard:
    """Inline success/error message that clears itself after a fixed delay."""

    def __init__(self, ttl_s: float | None = None, clock: Callable[[], float] = time.monotonic):
        self.ttl_s = settings.NOTICE_TTL_S if ttl_s is None else ttl_s
        self.clock = clock
        self._notices: dict[str, Notice] = {}

    def post(self, kind: Kind, text: str) -> None:
        self._notices[kind] = Notice(kind, text, self.clock() + self.ttl_s)

    def success(self, text: str) -> None:
        self.post("success", text)

    def error(self, text: str) -> None:
        self.post("error", text)

    def clear(self) -> None:
        self._notices.clear()

    def active(self) -> list[Notice]:
        now = self.clock()
        self._notices = {k: n for k, n in self._notices.items() if n.expires_at > now}
        return list(self._notices.values())

    def get(self, kind: Kind) -> str | None:
        notice = next((n for n in self.active() if n.kind == kind), None)
        return notice.text if notice else None
