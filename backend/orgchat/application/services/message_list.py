"""
MessageList - The active conversation's in-memory message list.

This is the only shared mutable state of a chat session. Every writer (history
load, realtime events, sends, mutations) goes through apply(), handing over a
pure function of the previous snapshot. The event loop runs callbacks one at a
time, so no lock is needed.
"""

import logging
from typing import Callable, Iterable, Iterator, Optional

from orgchat.domain.entities.message import Message
from orgchat.domain.services.timeline import Timeline, sort_chronologically

logger = logging.getLogger(__name__)

Listener = Callable[[Timeline], None]


class MessageList:
    def __init__(self, messages: Iterable[Message] = ()):
        self._snapshot: Timeline = sort_chronologically(messages)
        self._listeners: list[Listener] = []

    @property
    def snapshot(self) -> Timeline:
        return self._snapshot

    def apply(self, transform: Callable[[Timeline], Timeline]) -> Timeline:
        updated = transform(self._snapshot)
        if updated is not self._snapshot:
            self._snapshot = updated
            self._notify()
        return self._snapshot

    def reset(self, messages: Iterable[Message] = ()) -> Timeline:
        ordered = sort_chronologically(messages)
        return self.apply(lambda _previous: ordered)

    def find(self, message_id: str) -> Optional[Message]:
        return next((m for m in self._snapshot if m.id == message_id), None)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a change listener; returns a function that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self._snapshot)
            except Exception:
                logger.exception("[MessageList] Listener failed")

    def __len__(self) -> int:
        return len(self._snapshot)

    def __iter__(self) -> Iterator[Message]:
        return iter(self._snapshot)
