"""
User Notifications

Transient notices (toasts) raised by the session. The default notifier logs
each notice and keeps them in memory so a UI or a test can read them back.
"""

import logging
from dataclasses import dataclass
from typing import List

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Notice:
    level: str  # "loading" | "info" | "success" | "error"
    message: str


class Notifier:
    """Collects notices for the presentation layer."""

    def __init__(self):
        self.notices: List[Notice] = []

    def _push(self, level: str, message: str) -> None:
        self.notices.append(Notice(level=level, message=message))
        if level == "error":
            logger.warning(f"[notice] {message}")
        else:
            logger.info(f"[notice] {message}")

    def loading(self, message: str) -> None:
        self._push("loading", message)

    def info(self, message: str) -> None:
        self._push("info", message)

    def success(self, message: str) -> None:
        self._push("success", message)

    def error(self, message: str) -> None:
        self._push("error", message)

    @property
    def last(self):
        return self.notices[-1] if self.notices else None
