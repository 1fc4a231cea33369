"""
Undo window for deletes.

A delete hands its snapshot to the registry and gets a token back. Until the
window closes the token can put the record back; afterwards it is a no-op.
Expiry is checked against the clock on access, so there is no timer to
cancel when the process goes away.
"""
import logging
import time
import uuid
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional

from followuply.config import config

logger = logging.getLogger(__name__)

Restore = Callable[[str, Any], Awaitable[Any]]


@dataclass
class PendingUndo:
    user_id: str
    entity: str
    snapshot: Any
    restore: Restore
    expires_at: float


class UndoRegistry:
    def __init__(self, window_seconds: Optional[float] = None, clock: Optional[Callable[[], float]] = None):
        self.window_seconds = config.UNDO_WINDOW_SECONDS if window_seconds is None else window_seconds
        self._clock = clock or time.monotonic
        self._pending: Dict[str, PendingUndo] = {}

    def _purge(self, now: float):
        expired = [token for token, entry in self._pending.items() if entry.expires_at <= now]
        for token in expired:
            del self._pending[token]

    def register(self, user_id: str, entity: str, snapshot: Any, restore: Restore) -> str:
        now = self._clock()
        self._purge(now)
        token = uuid.uuid4().hex
        self._pending[token] = PendingUndo(
            user_id=user_id,
            entity=entity,
            snapshot=snapshot,
            restore=restore,
            expires_at=now + self.window_seconds,
        )
        return token

    def is_open(self, token: str) -> bool:
        entry = self._pending.get(token)
        return entry is not None and entry.expires_at > self._clock()

    async def undo(self, user_id: str, token: str) -> Optional[Any]:
        """Restore the deleted record, or None once the window has closed"""
        self._purge(self._clock())
        entry = self._pending.get(token)
        if entry is None or entry.user_id != user_id:
            return None

        del self._pending[token]
        try:
            restored = await entry.restore(user_id, entry.snapshot)
        except Exception:
            # A failed restore leaves the token usable until the window closes
            self._pending[token] = entry
            raise
        logger.info(f"Undo restored {entry.entity} for user {user_id}")
        return restored

    def close(self):
        """Drop everything still pending (shutdown)"""
        self._pending.clear()


_registry: Optional[UndoRegistry] = None


def get_undo_registry() -> UndoRegistry:
    global _registry
    if _registry is None:
        _registry = UndoRegistry()
    return _registry
