from __future__ import annotations

import logging
import uuid
from collections import OrderedDict
from typing import Any, Mapping, Protocol

from thumbly.models import GenerationResult

logger = logging.getLogger(__name__)


class ThumbnailBackend(Protocol):
    async def generate(self, raw: Mapping[str, Any] | None) -> GenerationResult: ...

    async def regenerate(self, raw: Mapping[str, Any] | None) -> GenerationResult: ...


class ThumbnailSession:
    """
    Presentation-side state for one user: the single "current thumbnail"
    slot, the last error, and separate in-flight flags for generate and
    regenerate so one action does not block the other's controls.
    """

    def __init__(self, backend: ThumbnailBackend) -> None:
        self.backend = backend
        self.current: str | None = None
        self.error: str | None = None
        self.is_generating = False
        self.is_regenerating = False
        self.closed = False

    def close(self) -> None:
        # Requests still in flight are abandoned; their results are dropped.
        self.closed = True

    def snapshot(self) -> dict[str, Any]:
        return {
            "thumbnail": self.current,
            "error": self.error,
            "isGenerating": self.is_generating,
            "isRegenerating": self.is_regenerating,
        }

    async def generate(self, form: Mapping[str, Any] | None) -> GenerationResult:
        self.error = None
        self.is_generating = True
        try:
            result = await self.backend.generate(form)
        finally:
            self.is_generating = False
        if self.closed:
            return result
        if result.is_ok:
            self.current = result.image_data_uri
        else:
            self.current = None
            self.error = result.error_message
        return result

    async def regenerate(self, form: Mapping[str, Any] | None) -> GenerationResult:
        payload: Any = form
        if isinstance(form, Mapping) and not form.get("previousThumbnail"):
            if not self.current:
                result = GenerationResult.failure("Generate a thumbnail first.")
                self.error = result.error_message
                return result
            payload = {**form, "previousThumbnail": self.current}

        self.error = None
        self.is_regenerating = True
        try:
            result = await self.backend.regenerate(payload)
        finally:
            self.is_regenerating = False
        if self.closed:
            return result
        if result.is_ok:
            self.current = result.image_data_uri
        else:
            # Keep the last good thumbnail on screen next to the error.
            self.error = result.error_message
        return result


class SessionRegistry:
    """In-memory sessions keyed by an opaque id; the oldest are closed past `max_sessions`."""

    def __init__(self, backend: ThumbnailBackend, max_sessions: int = 1024) -> None:
        self.backend = backend
        self.max_sessions = max_sessions
        self._sessions: OrderedDict[str, ThumbnailSession] = OrderedDict()

    def __len__(self) -> int:
        return len(self._sessions)

    def get(self, session_id: str | None) -> tuple[str, ThumbnailSession]:
        if session_id and session_id in self._sessions:
            self._sessions.move_to_end(session_id)
            return session_id, self._sessions[session_id]

        session_id = uuid.uuid4().hex
        session = ThumbnailSession(self.backend)
        self._sessions[session_id] = session
        while len(self._sessions) > self.max_sessions:
            old_id, old = self._sessions.popitem(last=False)
            old.close()
            logger.info("evicted session %s", old_id[:8])
        return session_id, session
