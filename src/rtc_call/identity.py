"""
Local participant uid allocation.

Uids are fixed-length digit strings drawn uniformly at random and read as
integers, so leading zeros shorten the value. 0 is reserved for "let the
engine assign one" and is never handed out.
"""

import logging
import secrets
import threading

from rtc_call.models.session import ENGINE_ASSIGNED_UID, ParticipantId

logger = logging.getLogger(__name__)

DIGITS = "1234567890"
DEFAULT_UID_LENGTH = 10
MAX_UID_LENGTH = 18


class IdentityAllocator:
    def __init__(self, length: int = DEFAULT_UID_LENGTH):
        if not 1 <= length <= MAX_UID_LENGTH:
            raise ValueError(f"uid length must be between 1 and {MAX_UID_LENGTH}, got {length}")
        self._length = length
        self._issued: set[ParticipantId] = set()
        self._lock = threading.Lock()

    @property
    def length(self) -> int:
        return self._length

    def _draw(self) -> ParticipantId:
        return int("".join(secrets.choice(DIGITS) for _ in range(self._length)))

    def allocate(self) -> ParticipantId:
        with self._lock:
            if len(self._issued) >= 10 ** self._length - 1:
                raise RuntimeError(f"uid space of length {self._length} exhausted")
            while True:
                uid = self._draw()
                if uid == ENGINE_ASSIGNED_UID or uid in self._issued:
                    continue
                self._issued.add(uid)
                logger.debug(f"Allocated uid {uid}")
                return uid


_default_allocators: dict[int, IdentityAllocator] = {}
_default_lock = threading.Lock()


def default_allocator(length: int = DEFAULT_UID_LENGTH) -> IdentityAllocator:
    """Process-wide allocator for `length`, shared by every client so uids
    never repeat within the process.
    """
    with _default_lock:
        allocator = _default_allocators.get(length)
        if allocator is None:
            allocator = _default_allocators[length] = IdentityAllocator(length)
        return allocator
