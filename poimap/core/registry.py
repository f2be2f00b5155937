"""
Registry of live map sessions, keyed by session id.

Sessions unused for longer than the idle TTL are closed by `prune()`, and
when the registry is full the least recently used session is closed to make
room for a new one.
"""

import logging
import time
from typing import Callable, Dict, List, Optional

from poimap.core.exceptions import SessionNotFoundError
from poimap.core.session import MapSession

logger = logging.getLogger(__name__)

SessionFactory = Callable[..., MapSession]


class SessionRegistry:
    def __init__(
        self,
        factory: SessionFactory = MapSession,
        max_sessions: Optional[int] = None,
        idle_ttl_seconds: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._factory = factory
        self.max_sessions = max_sessions
        self.idle_ttl_seconds = idle_ttl_seconds
        self._clock = clock
        self._sessions: Dict[str, MapSession] = {}
        self._last_used: Dict[str, float] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._sessions

    def ids(self) -> List[str]:
        return list(self._sessions)

    def create(self, **kwargs) -> MapSession:
        session = self._factory(**kwargs)
        self._sessions[session.session_id] = session
        self._last_used[session.session_id] = self._clock()
        logger.info(f"Map session {session.session_id} created", extra={"session_id": session.session_id})
        return session

    def get(self, session_id: str) -> MapSession:
        session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        self._last_used[session_id] = self._clock()
        return session

    async def close(self, session_id: str) -> None:
        session = self._pop(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        await session.close()

    async def prune(self) -> int:
        """
        Close idle sessions, then free one slot if the registry is full.

        Returns the number of sessions closed.
        """
        evicted: List[str] = []
        if self.idle_ttl_seconds is not None:
            cutoff = self._clock() - self.idle_ttl_seconds
            evicted.extend(sid for sid, used in self._last_used.items() if used < cutoff)

        if self.max_sessions is not None:
            remaining = sorted(
                (sid for sid in self._last_used if sid not in evicted),
                key=self._last_used.__getitem__,
            )
            overflow = len(remaining) - self.max_sessions + 1
            evicted.extend(remaining[:max(0, overflow)])

        for session_id in evicted:
            session = self._pop(session_id)
            logger.info(f"Evicting map session {session_id}", extra={"session_id": session_id})
            await self._close_quietly(session)
        return len(evicted)

    async def close_all(self) -> int:
        sessions = list(self._sessions.values())
        self._sessions.clear()
        self._last_used.clear()
        for session in sessions:
            await self._close_quietly(session)
        return len(sessions)

    def _pop(self, session_id: str) -> Optional[MapSession]:
        self._last_used.pop(session_id, None)
        return self._sessions.pop(session_id, None)

    async def _close_quietly(self, session: MapSession) -> None:
        try:
            await session.close()
        except Exception as e:
            logger.error(f"Failed to close map session {session.session_id}: {e}", exc_info=True)
