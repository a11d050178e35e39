"""
Session Store for MockInterview Proctor

JSON-file persistence for:
- The single in-progress draft
- Completed interview sessions (newest first)

Storage failures are logged and reported through return values; they are
never raised to callers, so a broken disk can't interrupt an interview.
"""

import asyncio
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Callable

from pydantic import TypeAdapter, ValidationError

from mockinterview.models.progress import Draft
from mockinterview.models.session import InterviewSession

logger = logging.getLogger(__name__)

_sessions_adapter = TypeAdapter(list[InterviewSession])


class SessionStore:
    """File-backed store holding at most one draft and the session history."""

    DRAFT_FILE = "draft.json"
    SESSIONS_FILE = "sessions.json"

    def __init__(self, data_dir: str | Path):
        self.data_dir = Path(data_dir)
        self.draft_path = self.data_dir / self.DRAFT_FILE
        self.sessions_path = self.data_dir / self.SESSIONS_FILE

    # =========================================================================
    # DRAFT
    # =========================================================================

    async def save_draft(self, draft: Draft) -> bool:
        """Replace the stored draft wholesale."""
        try:
            await self._run(self._write_atomic, self.draft_path, draft.model_dump_json())
            logger.debug(f"Draft saved for {draft.session.session_id} at question {draft.current_question_index}")
            return True
        except OSError as e:
            logger.error(f"Failed to save draft: {e}")
            return False

    async def load_draft(self) -> Draft | None:
        try:
            raw = await self._run(self._read, self.draft_path)
            if raw is None:
                return None
            return Draft.model_validate_json(raw)
        except (OSError, ValidationError, ValueError) as e:
            logger.error(f"Failed to load draft: {e}")
            return None

    async def clear_draft(self) -> bool:
        try:
            await self._run(self._unlink, self.draft_path)
            return True
        except OSError as e:
            logger.error(f"Failed to clear draft: {e}")
            return False

    # =========================================================================
    # COMPLETED SESSIONS
    # =========================================================================

    async def load_sessions(self) -> list[InterviewSession]:
        """All stored sessions, newest first."""
        try:
            raw = await self._run(self._read, self.sessions_path)
            if raw is None:
                return []
            sessions = _sessions_adapter.validate_json(raw)
        except (OSError, ValidationError, ValueError) as e:
            logger.error(f"Failed to load sessions: {e}")
            return []
        return sorted(sessions, key=lambda s: s.created_at, reverse=True)

    async def get_session(self, session_id: str) -> InterviewSession | None:
        for session in await self.load_sessions():
            if session.session_id == session_id:
                return session
        return None

    async def save_session(self, session: InterviewSession) -> bool:
        """Insert or replace a session by id."""
        sessions = await self.load_sessions()
        for index, existing in enumerate(sessions):
            if existing.session_id == session.session_id:
                sessions[index] = session
                break
        else:
            sessions.insert(0, session)
        return await self._write_sessions(sessions)

    async def delete_session(self, session_id: str) -> bool:
        sessions = await self.load_sessions()
        remaining = [s for s in sessions if s.session_id != session_id]
        if len(remaining) == len(sessions):
            return False
        return await self._write_sessions(remaining)

    async def _write_sessions(self, sessions: list[InterviewSession]) -> bool:
        try:
            payload = _sessions_adapter.dump_json(sessions).decode("utf-8")
            await self._run(self._write_atomic, self.sessions_path, payload)
            return True
        except OSError as e:
            logger.error(f"Failed to save sessions: {e}")
            return False

    # =========================================================================
    # FILE HELPERS (blocking, run in thread pool)
    # =========================================================================

    async def _run(self, func: Callable[..., Any], *args: Any) -> Any:
        loop = asyncio.get_event_loop()
        return await loop.run_in_executor(None, func, *args)

    def _write_atomic(self, path: Path, content: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, temp_path = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(content)
                f.flush()
                os.fsync(f.fileno())
            os.replace(temp_path, path)
        except OSError:
            Path(temp_path).unlink(missing_ok=True)
            raise

    @staticmethod
    def _read(path: Path) -> str | None:
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    @staticmethod
    def _unlink(path: Path) -> None:
        path.unlink(missing_ok=True)
