"""
Chat Sessions - Transcript and typing delay around the matcher
==============================================================

A chat session owns the append-only transcript of one conversation.
Each accepted message gets exactly one assistant reply, appended after
a short randomized "typing" pause. While a reply is pending the session
refuses new messages, which keeps turns in submission order.
"""

import asyncio
import random
import time
import uuid
from collections import OrderedDict
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, List, Dict, Any, Tuple, Callable

from core.exceptions import ChatError, SessionBusyError
from core.logging import get_logger
from .engine import IntentMatcher
from .faq import GREETING

logger = get_logger("assistant.session")

USER = "user"
ASSISTANT = "assistant"


@dataclass(frozen=True)
class ChatTurn:
    """
    One message in a chat transcript.

    Attributes:
        speaker (str): 'user' or 'assistant'
        text (str): Message text
        timestamp (datetime): When the turn was appended
    """
    speaker: str
    text: str
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "speaker": self.speaker,
            "text": self.text,
            "timestamp": self.timestamp.isoformat(),
        }


class ChatSession:
    """
    A single conversation with the assistant.

    Example:
        session = ChatSession(IntentMatcher(), typing_delay=(0.0, 0.0))
        reply = asyncio.run(session.submit("Where are my saved jobs?"))
        print(reply.text)
    """

    def __init__(
        self,
        matcher: IntentMatcher,
        typing_delay: Tuple[float, float] = (1.0, 2.0),
        rng: Optional[random.Random] = None,
        greeting: Optional[str] = None,
        session_id: Optional[str] = None
    ):
        """
        Initialize a chat session.

        Args:
            matcher: Shared, read-only intent matcher
            typing_delay: (min, max) seconds to wait before replying
            rng: Random source for the typing delay
            greeting: Opening assistant message
            session_id: Identifier (generated if omitted)
        """
        low, high = typing_delay
        if low < 0 or high < low:
            raise ValueError(f"Invalid typing delay range: {typing_delay}")

        self.session_id = session_id or uuid.uuid4().hex
        self.matcher = matcher
        self.typing_delay = (low, high)
        self.rng = rng or random.Random()
        self._turns: List[ChatTurn] = [ChatTurn(ASSISTANT, greeting or GREETING)]
        self._pending = False

    @property
    def turns(self) -> Tuple[ChatTurn, ...]:
        return tuple(self._turns)

    @property
    def is_pending(self) -> bool:
        """True while a reply is being "typed"."""
        return self._pending

    def next_delay(self) -> float:
        low, high = self.typing_delay
        return self.rng.uniform(low, high)

    async def submit(self, text: str) -> ChatTurn:
        """
        Submit a user message and wait for the assistant reply.

        Args:
            text: The user's message

        Returns:
            The appended assistant turn

        Raises:
            ChatError: If the message is blank
            SessionBusyError: If a previous reply is still pending
        """
        if not text or not text.strip():
            raise ChatError("Message cannot be empty")

        if self._pending:
            raise SessionBusyError(
                "Please wait for the current reply",
                {"session_id": self.session_id}
            )

        self._pending = True
        try:
            self._turns.append(ChatTurn(USER, text))

            delay = self.next_delay()
            if delay > 0:
                await asyncio.sleep(delay)

            reply = ChatTurn(ASSISTANT, self.matcher.respond(text))
            self._turns.append(reply)
            logger.debug(f"Replied after {delay:.2f}s", extra={"session_id": self.session_id})
            return reply
        finally:
            self._pending = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "session_id": self.session_id,
            "pending": self._pending,
            "turns": [turn.to_dict() for turn in self._turns],
        }


class SessionStore:
    """
    In-memory registry of chat sessions.

    Sessions share the matcher, which is read-only, so they need no
    locking between each other. Sessions idle for longer than
    ``session_ttl`` seconds are dropped, and once ``max_sessions`` is
    reached the least recently used session makes room for a new one.
    """

    def __init__(
        self,
        matcher: IntentMatcher,
        typing_delay: Tuple[float, float] = (1.0, 2.0),
        greeting: Optional[str] = None,
        max_sessions: int = 1000,
        session_ttl: float = 1800.0,
        clock: Callable[[], float] = time.monotonic
    ):
        if max_sessions < 1:
            raise ValueError(f"max_sessions must be positive, got {max_sessions}")
        if session_ttl <= 0:
            raise ValueError(f"session_ttl must be positive, got {session_ttl}")

        self.matcher = matcher
        self.typing_delay = typing_delay
        self.greeting = greeting
        self.max_sessions = max_sessions
        self.session_ttl = session_ttl
        self._clock = clock

        # Ordered from least to most recently used
        self._sessions: "OrderedDict[str, ChatSession]" = OrderedDict()
        self._last_seen: Dict[str, float] = {}

    def _touch(self, session_id: str) -> None:
        self._sessions.move_to_end(session_id)
        self._last_seen[session_id] = self._clock()

    def _evict(self) -> None:
        cutoff = self._clock() - self.session_ttl
        while self._sessions:
            oldest = next(iter(self._sessions))
            expired = self._last_seen[oldest] < cutoff
            if not expired and len(self._sessions) < self.max_sessions:
                break
            self.remove(oldest)
            logger.info(
                f"Evicted chat session {oldest} ({'idle' if expired else 'capacity'})"
            )

    def create(self) -> ChatSession:
        self._evict()

        session = ChatSession(
            self.matcher,
            typing_delay=self.typing_delay,
            greeting=self.greeting
        )
        self._sessions[session.session_id] = session
        self._touch(session.session_id)
        logger.info(f"Created chat session {session.session_id}")
        return session

    def get(self, session_id: str) -> Optional[ChatSession]:
        session = self._sessions.get(session_id)
        if session is None:
            return None

        if self._last_seen[session_id] < self._clock() - self.session_ttl:
            self.remove(session_id)
            return None

        self._touch(session_id)
        return session

    def remove(self, session_id: str) -> bool:
        self._last_seen.pop(session_id, None)
        return self._sessions.pop(session_id, None) is not None

    def __len__(self) -> int:
        return len(self._sessions)
