"""
Domain events published by the account repositories.

Repositories receive an ``EventSink`` instead of reaching for a global bus,
so any object with an async ``publish(event)`` method can be plugged in.
``EventDispatcher`` is the in-process implementation used by the application:
listeners subscribe to an event type and are awaited in registration order.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime, timezone
from functools import lru_cache
from typing import Any, Awaitable, Callable, DefaultDict, List, Protocol, Sequence, Type

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UserCreated:
    """A user row was created and its roles and permissions were assigned."""

    user: Any
    occurred_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass(frozen=True)
class UsersDeleted:
    """A batch of users was removed together with their related records."""

    users: Sequence[Any]
    occurred_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


Listener = Callable[[Any], Awaitable[None]]


class EventSink(Protocol):
    async def publish(self, event: Any) -> None:
        ...


class EventDispatcher:
    def __init__(self):
        self._listeners: DefaultDict[Type, List[Listener]] = defaultdict(list)

    def subscribe(self, event_type: Type, listener: Listener) -> None:
        self._listeners[event_type].append(listener)

    def listeners_for(self, event_type: Type) -> List[Listener]:
        return list(self._listeners.get(event_type, []))

    async def publish(self, event: Any) -> None:
        listeners = self.listeners_for(type(event))
        logger.info("Publishing %s to %d listener(s)", type(event).__name__, len(listeners))
        for listener in listeners:
            await listener(event)


async def log_user_created(event: UserCreated) -> None:
    logger.info("User created: %s", event.user.email)


async def log_users_deleted(event: UsersDeleted) -> None:
    logger.info("Users deleted: %s", ", ".join(str(user.id) for user in event.users))


@lru_cache()
def get_event_dispatcher() -> EventDispatcher:
    """Application-wide dispatcher with the logging listeners registered."""
    dispatcher = EventDispatcher()
    dispatcher.subscribe(UserCreated, log_user_created)
    dispatcher.subscribe(UsersDeleted, log_users_deleted)
    return dispatcher
