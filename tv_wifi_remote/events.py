#
# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Connection state change notifications published by RemoteController.

Usage:
    async with controller.events.subscribe() as subscription:
        async for event in subscription:
            print(event.state, event.device)
"""

from __future__ import annotations

import asyncio
import enum

from .internal_types import *
from .pkg_logging import logger
from .device import DiscoveredDevice

DEFAULT_EVENT_QUEUE_SIZE = 100

class ControllerState(enum.Enum):
    IDLE = "idle"
    CONNECTING = "connecting"
    CONNECTED = "connected"

class ConnectionEvent(NamedTuple):
    state: ControllerState
    brand: Optional[str]
    device: Optional[DiscoveredDevice]
    protocol_name: Optional[str]

class ConnectionEventSubscription(
        AsyncContextManager['ConnectionEventSubscription'],
        AsyncIterable[ConnectionEvent]
      ):
    """One consumer's queue of ConnectionEvents. Leaving the async context unsubscribes."""

    channel: ConnectionEventChannel
    queue: asyncio.Queue[Optional[ConnectionEvent]]
    eos: bool = False

    def __init__(self, channel: ConnectionEventChannel, max_queue_size: int=DEFAULT_EVENT_QUEUE_SIZE):
        self.channel = channel
        self.queue = asyncio.Queue(max_queue_size)

    async def __aenter__(self) -> ConnectionEventSubscription:
        return self

    async def __aexit__(
            self,
            exc_type: Optional[type[BaseException]],
            exc: Optional[BaseException],
            tb: Optional[TracebackType]
      ) -> bool:
        self.close()
        return False

    def close(self) -> None:
        self.channel.unsubscribe(self)
        self.on_end_of_stream()

    async def receive(self) -> Optional[ConnectionEvent]:
        """Waits for the next event. Returns None once the subscription has ended."""
        if self.eos and self.queue.empty():
            return None
        result = await self.queue.get()
        if result is None:
            self.eos = True
            try:
                self.queue.put_nowait(None)
            except asyncio.QueueFull:
                pass
        return result

    def get_nowait(self) -> Optional[ConnectionEvent]:
        """Returns the next queued event, or None if there is none."""
        try:
            return self.queue.get_nowait()
        except asyncio.QueueEmpty:
            return None

    async def iter_events(self) -> AsyncIterator[ConnectionEvent]:
        while True:
            event = await self.receive()
            if event is None:
                break
            yield event

    def __aiter__(self) -> AsyncIterator[ConnectionEvent]:
        return self.iter_events()

    def on_event(self, event: ConnectionEvent) -> None:
        if not self.eos:
            try:
                self.queue.put_nowait(event)
            except asyncio.QueueFull:
                logger.warning(f"Event queue full, dropping {event}")

    def on_end_of_stream(self) -> None:
        if not self.eos:
            self.eos = True
            try:
                self.queue.put_nowait(None)
            except asyncio.QueueFull:
                pass

class ConnectionEventChannel:
    """Fans out ConnectionEvents to every current subscription."""

    subscriptions: Set[ConnectionEventSubscription]
    closed: bool = False

    def __init__(self) -> None:
        self.subscriptions = set()

    def subscribe(self, max_queue_size: int=DEFAULT_EVENT_QUEUE_SIZE) -> ConnectionEventSubscription:
        """Starts receiving events immediately. Events published before this call are not delivered."""
        subscription = ConnectionEventSubscription(self, max_queue_size=max_queue_size)
        if self.closed:
            subscription.on_end_of_stream()
        else:
            self.subscriptions.add(subscription)
        return subscription

    def unsubscribe(self, subscription: ConnectionEventSubscription) -> None:
        self.subscriptions.discard(subscription)

    def publish(self, event: ConnectionEvent) -> None:
        logger.debug(f"Publishing {event}")
        for subscription in list(self.subscriptions):
            subscription.on_event(event)

    def close(self) -> None:
        self.closed = True
        for subscription in list(self.subscriptions):
            subscription.on_end_of_stream()
        self.subscriptions.clear()
