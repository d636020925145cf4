"""Chat history persistence for medibot.

History is a JSON array of message records stored in a single file:

    [{"text": "...", "sender": "user", "timestamp": "2026-01-31T10:30:00"},
     {"text": "...", "sender": "bot", "timestamp": "...", "intent": "Cuts"}]

Only the most recent ``max_length`` messages are kept.
"""

from __future__ import annotations

import json
import logging
import threading
from datetime import datetime
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field

from .errors import ChatHistoryError

logger = logging.getLogger(__name__)

MAX_HISTORY_LENGTH = 50


class ChatMessage(BaseModel):
    """A single chat transcript entry.

    Attributes:
        text: Message text
        sender: Who wrote it - the user or the bot
        timestamp: When the message was created
        intent: Resolved intent tag (bot replies only)
    """

    text: str
    sender: Literal["user", "bot"]
    timestamp: datetime = Field(default_factory=datetime.now)
    intent: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for JSON persistence."""
        data: dict[str, Any] = {
            "text": self.text,
            "sender": self.sender,
            "timestamp": self.timestamp.isoformat(),
        }
        if self.intent is not None:
            data["intent"] = self.intent
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ChatMessage:
        """Deserialize from dictionary."""
        timestamp = data.get("timestamp")
        if isinstance(timestamp, str):
            timestamp = datetime.fromisoformat(timestamp)
        elif timestamp is None:
            timestamp = datetime.now()

        return cls(
            text=data["text"],
            sender=data["sender"],
            timestamp=timestamp,
            intent=data.get("intent"),
        )


class ChatHistory:
    """File-backed chat transcript, trimmed to the most recent messages.

    Example:
        >>> history = ChatHistory(Path("~/.medibot/history.json").expanduser())
        >>> history.save_message(ChatMessage(text="I have a fever", sender="user"))
        >>> history.recent(10)
    """

    def __init__(self, path: Path | str, max_length: int = MAX_HISTORY_LENGTH) -> None:
        """Initialize the history store.

        Args:
            path: JSON file holding the transcript
            max_length: Maximum number of messages retained
        """
        if max_length < 1:
            raise ValueError(f"max_length must be positive, got {max_length}")
        self.path = Path(path)
        self.max_length = max_length
        self._lock = threading.Lock()

    def load(self) -> list[ChatMessage]:
        """Load all stored messages, oldest first.

        Raises:
            ChatHistoryError: If the file exists but cannot be read or parsed
        """
        if not self.path.exists():
            return []

        try:
            with self.path.open("r", encoding="utf-8") as f:
                data = json.load(f)
            if not isinstance(data, list):
                raise ValueError("history file does not contain a list")
            return [ChatMessage.from_dict(d) for d in data]
        except Exception as e:
            logger.error(f"Error loading chat history: {e}")
            raise ChatHistoryError(f"Failed to load chat history: {e}") from e

    def save_message(self, message: ChatMessage) -> None:
        """Append a message and trim to the most recent ``max_length``.

        Raises:
            ChatHistoryError: If the history cannot be read or written
        """
        with self._lock:
            messages = self.load()
            messages.append(message)
            if len(messages) > self.max_length:
                messages = messages[-self.max_length :]

            try:
                self._write(messages)
            except Exception as e:
                logger.error(f"Error saving message to history: {e}")
                raise ChatHistoryError(f"Failed to save message to history: {e}") from e

    def recent(self, limit: int = 20) -> list[ChatMessage]:
        """Return up to ``limit`` of the newest messages, oldest first."""
        messages = self.load()
        return messages[-limit:] if limit > 0 else []

    def clear(self) -> None:
        """Delete the stored transcript.

        Raises:
            ChatHistoryError: If the file cannot be removed
        """
        with self._lock:
            try:
                self.path.unlink(missing_ok=True)
            except OSError as e:
                logger.error(f"Error clearing chat history: {e}")
                raise ChatHistoryError(f"Failed to clear chat history: {e}") from e
        logger.debug(f"Cleared chat history at {self.path}")

    def _write(self, messages: list[ChatMessage]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)

        # Atomic write
        temp_file = self.path.with_suffix(".json.tmp")
        try:
            with temp_file.open("w", encoding="utf-8") as f:
                json.dump([m.to_dict() for m in messages], f, indent=2)
            temp_file.replace(self.path)
        except Exception:
            if temp_file.exists():
                temp_file.unlink()
            raise
        logger.debug(f"Saved {len(messages)} chat messages")


__all__ = ["ChatHistory", "ChatMessage", "MAX_HISTORY_LENGTH"]
