"""Bounded conversation history."""

from collections import deque
from collections.abc import Iterator
from dataclasses import asdict, dataclass

ROLES = ("system", "user", "assistant")


@dataclass
class ConversationTurn:
    """One role-tagged message."""

    role: str
    content: str

    def __post_init__(self) -> None:
        """Validate the role."""
        if self.role not in ROLES:
            raise ValueError(f"Unknown message role: {self.role}")

    def to_message(self) -> dict[str, str]:
        """Convert to Ollama message format."""
        return asdict(self)


class ConversationHistory:
    """Fixed-capacity, oldest-first buffer of conversation turns.

    Appending to a full buffer evicts the oldest turn, so the length never
    exceeds ``max_turns``. Exchanges are recorded as user/assistant pairs; with
    an even capacity the buffer therefore always holds whole exchanges.
    """

    def __init__(self, max_turns: int = 20) -> None:
        if max_turns < 1:
            raise ValueError("max_turns must be positive")
        self.max_turns = max_turns
        self._turns: deque[ConversationTurn] = deque(maxlen=max_turns)

    def append(self, turn: ConversationTurn) -> None:
        self._turns.append(turn)

    def record_exchange(self, user_content: str, assistant_content: str) -> None:
        """Append a user turn followed by the assistant's reply."""
        self.append(ConversationTurn(role="user", content=user_content))
        self.append(ConversationTurn(role="assistant", content=assistant_content))

    def record_error(self, user_content: str, error: str) -> None:
        """Record a failed turn so the model sees the attempt next time."""
        self.record_exchange(user_content, f"Error: {error}")

    def clear(self) -> None:
        self._turns.clear()

    def to_messages(self) -> list[dict[str, str]]:
        return [turn.to_message() for turn in self._turns]

    def __len__(self) -> int:
        return len(self._turns)

    def __iter__(self) -> Iterator[ConversationTurn]:
        return iter(self._turns)
