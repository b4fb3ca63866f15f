"""
Session History

Append-only log of fused emotions for the current session, plus the
frequency table behind the emotion histogram. Nothing is persisted.
"""

import logging
from collections import deque
from datetime import datetime, timezone
from typing import Dict, List, Optional

from fusion.config_loader import load_config
from fusion.models import EmotionLabel, HistoryEntry

logger = logging.getLogger(__name__)

_session_config = load_config().get("session", {})
DEFAULT_MAX_ENTRIES = _session_config.get("history_max_entries")


class SessionHistory:
    """
    Ordered sequence of HistoryEntry objects.

    When max_entries is set the history behaves as a ring buffer and the
    oldest entries drop out; total_recorded still counts every append.
    """

    def __init__(self, max_entries: Optional[int] = DEFAULT_MAX_ENTRIES):
        if max_entries is not None and max_entries <= 0:
            raise ValueError("max_entries must be a positive integer")
        self.max_entries = max_entries
        self._entries = deque(maxlen=max_entries)
        self.total_recorded = 0

    def record_emotion(self, entry: HistoryEntry) -> None:
        self._entries.append(entry)
        self.total_recorded += 1
        logger.debug(f"Recorded {entry.emotion.value} (total: {self.total_recorded})")

    def record(self, emotion: EmotionLabel, timestamp: Optional[datetime] = None) -> HistoryEntry:
        """Create a HistoryEntry stamped now (UTC) unless a timestamp is given, and append it."""
        entry = HistoryEntry(emotion=emotion, timestamp=timestamp or datetime.now(timezone.utc))
        self.record_emotion(entry)
        return entry

    @property
    def entries(self) -> List[HistoryEntry]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self):
        return iter(list(self._entries))

    def frequency_table(self) -> Dict[EmotionLabel, int]:
        """
        Count entries per emotion, recomputed from the full history.

        Keys appear in order of first occurrence.
        """
        counts: Dict[EmotionLabel, int] = {}
        for entry in self._entries:
            counts[entry.emotion] = counts.get(entry.emotion, 0) + 1
        return counts
