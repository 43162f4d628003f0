"""Chat transcript between the student and the math teacher.

The page keeps one ``ChatSession`` per browser session and clears it whenever
the scenario or the parameters change, so the teacher never answers about a
simulation the student is no longer watching.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from uuid import uuid4

import structlog

logger = structlog.get_logger(__name__)

STUDENT = "user"
TEACHER = "assistant"


def _utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


@dataclass(frozen=True)
class ChatMessage:
    """One line of the transcript; ``role`` is ``user`` or ``assistant``."""

    role: str
    content: str
    timestamp: datetime = field(default_factory=_utcnow)

    @property
    def speaker(self) -> str:
        return "Student" if self.role == STUDENT else "Teacher"


@dataclass
class ChatSession:
    """Ordered transcript, oldest message first."""

    session_id: str = field(default_factory=lambda: uuid4().hex[:12])
    messages: list[ChatMessage] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.messages)

    @property
    def message_count(self) -> int:
        return len(self.messages)

    def add_message(self, role: str, content: str) -> ChatMessage:
        """Append a student or teacher message.

        Raises:
            ValueError: Unknown role or blank content
        """
        if role not in (STUDENT, TEACHER):
            raise ValueError(f"Invalid role: {role!r} (expected {STUDENT!r} or {TEACHER!r})")
        if not isinstance(content, str) or not content.strip():
            raise ValueError("Message content must be a non-empty string")

        message = ChatMessage(role, content)
        self.messages.append(message)
        logger.debug("chat_message_added", session_id=self.session_id, role=role, count=len(self))
        return message

    def recent(self, count: int) -> list[ChatMessage]:
        """Last ``count`` messages in chronological order."""
        return self.messages[-count:] if count > 0 else []

    def clear_history(self) -> None:
        if self.messages:
            logger.info("chat_cleared", session_id=self.session_id, dropped=len(self))
        self.messages = []
