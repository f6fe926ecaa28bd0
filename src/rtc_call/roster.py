"""
Roster of connected remote participants, in the order their joins were seen.
"""

import logging
import threading
from typing import Iterator

from rtc_call.models.session import ParticipantId

logger = logging.getLogger(__name__)


class Roster:
    """Deduplicated, join-ordered set of remote uids.

    add/remove are no-ops when membership already matches, so duplicate or
    out-of-order engine events are harmless. Safe to mutate from several
    threads.
    """

    def __init__(self) -> None:
        self._uids: list[ParticipantId] = []
        self._lock = threading.Lock()

    def add(self, uid: ParticipantId) -> bool:
        with self._lock:
            if uid in self._uids:
                return False
            self._uids.append(uid)
        logger.debug(f"Roster add {uid}")
        return True

    def remove(self, uid: ParticipantId) -> bool:
        with self._lock:
            try:
                self._uids.remove(uid)
            except ValueError:
                return False
        logger.debug(f"Roster remove {uid}")
        return True

    def clear(self) -> None:
        with self._lock:
            self._uids.clear()

    def snapshot(self) -> list[ParticipantId]:
        with self._lock:
            return list(self._uids)

    def __contains__(self, uid: object) -> bool:
        with self._lock:
            return uid in self._uids

    def __len__(self) -> int:
        with self._lock:
            return len(self._uids)

    def __iter__(self) -> Iterator[ParticipantId]:
        return iter(self.snapshot())

    def __repr__(self) -> str:
        return f"Roster({self.snapshot()!r})"
