from __future__ import annotations

from typing import Iterator

from learning_assistant.prompts import GREETING
from learning_assistant.schemas import Role, Turn

Snapshot = tuple[Turn, ...]


class ConversationStore:
    """
    Append-only, chronologically ordered dialogue turns.

    Consumers only ever receive tuples, so a snapshot cannot be used to
    mutate the store and stays valid after later appends.
    """

    def __init__(self, *, greeting: str | None = GREETING) -> None:
        self._turns: list[Turn] = []
        if greeting:
            self._turns.append(Turn(role=Role.assistant, content=greeting))

    def append(self, turn: Turn) -> Snapshot:
        self._turns.append(turn)
        return self.snapshot()

    def snapshot(self) -> Snapshot:
        return tuple(self._turns)

    def __len__(self) -> int:
        return len(self._turns)

    def __iter__(self) -> Iterator[Turn]:
        return iter(self.snapshot())
