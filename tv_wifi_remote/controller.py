#
# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
RemoteController -- the single entry point for discovering, connecting to and
controlling a TV.

The controller owns at most one active connection. Connecting while connected
tears down the previous connection first. Commands are sent one at a time;
concurrent send_command() calls wait their turn. Nothing here raises for an
expected network failure: discovery degrades to an empty list and connect or
send degrade to False.
"""

from __future__ import annotations

import asyncio

from .internal_types import *
from .pkg_logging import logger
from .exceptions import InvalidDeviceError
from .device import DiscoveredDevice
from .handlers import ProtocolHandler
from .registry import BrandRegistry
from .events import ControllerState, ConnectionEvent, ConnectionEventChannel

class ConnectionState(NamedTuple):
    """A snapshot of the controller's connection. handler is set if and only if device is set."""
    state: ControllerState
    handler: Optional[ProtocolHandler]
    brand: Optional[str]
    device: Optional[DiscoveredDevice]

IDLE_STATE = ConnectionState(ControllerState.IDLE, None, None, None)

class RemoteController:
    registry: BrandRegistry
    events: ConnectionEventChannel

    _state: ConnectionState
    _generation: int = 0
    """Incremented by every disconnect(); a connect() that straddles one is abandoned."""

    _connect_lock: asyncio.Lock
    _send_lock: asyncio.Lock
    _locks_loop: Optional[asyncio.AbstractEventLoop] = None

    def __init__(
            self,
            registry: Optional[BrandRegistry]=None,
            events: Optional[ConnectionEventChannel]=None,
          ) -> None:
        self.registry = BrandRegistry() if registry is None else registry
        self.events = ConnectionEventChannel() if events is None else events
        self._state = IDLE_STATE

    def _get_locks(self) -> Tuple[asyncio.Lock, asyncio.Lock]:
        """The (connect, send) locks for the running event loop."""
        # asyncio primitives may be bound to the loop they were first used on
        loop = asyncio.get_running_loop()
        if self._locks_loop is not loop:
            self._connect_lock = asyncio.Lock()
            self._send_lock = asyncio.Lock()
            self._locks_loop = loop
        return self._connect_lock, self._send_lock

    def _set_state(self, state: ConnectionState) -> None:
        self._state = state
        handler = state.handler
        self.events.publish(ConnectionEvent(
            state=state.state,
            brand=state.brand,
            device=state.device,
            protocol_name=None if handler is None else handler.protocol_name,
          ))

    @property
    def connection_state(self) -> ConnectionState:
        return self._state

    @property
    def connected_device(self) -> Optional[DiscoveredDevice]:
        return self._state.device

    @property
    def active_brand(self) -> Optional[str]:
        return self._state.brand if self._state.state is ControllerState.CONNECTED else None

    @property
    def protocol_name(self) -> Optional[str]:
        handler = self._state.handler
        return None if handler is None else handler.protocol_name

    def is_connected(self) -> bool:
        handler = self._state.handler
        return handler is not None and handler.is_connected()

    async def discover_devices(self, brand: str, timeout: Optional[float]=None) -> List[DiscoveredDevice]:
        handler = self.registry.resolve(brand)
        try:
            devices = await handler.discover(timeout)
        except Exception as e:
            logger.warning(f"Discovery failed for {brand}: {e!r}")
            return []
        logger.info(f"Found {len(devices)} devices for {brand}")
        return devices

    async def connect(self, brand: str, device: DiscoveredDevice) -> bool:
        connect_lock, _ = self._get_locks()
        async with connect_lock:
            self.disconnect()
            generation = self._generation
            handler = self.registry.resolve(brand)
            self._set_state(ConnectionState(ControllerState.CONNECTING, None, brand, None))
            connected = False
            try:
                try:
                    connected = await handler.connect(device)
                except Exception as e:
                    logger.warning(f"Connecting to {device.display_name} failed: {e!r}")
                    connected = False
            finally:
                if generation != self._generation:
                    # disconnect() was called while the handshake was in progress
                    handler.disconnect()
                    connected = False
                elif connected:
                    self._set_state(ConnectionState(ControllerState.CONNECTED, handler, brand, device))
                    logger.info(f"Connected to {device.display_name} via {handler.protocol_name}")
                else:
                    handler.disconnect()
                    self._set_state(IDLE_STATE)
            return connected

    async def connect_by_address(self, brand: str, ip_address: str) -> bool:
        """Connects to a manually entered address on the brand's default port."""
        try:
            device = DiscoveredDevice(
                name=f"{brand} TV",
                ip_address=ip_address.strip(),
                brand=brand,
                port=self.registry.default_port_for(brand),
              )
        except InvalidDeviceError as e:
            logger.info(f"Cannot connect to {ip_address!r}: {e}")
            return False
        return await self.connect(brand, device)

    async def send_command(self, button_name: str) -> bool:
        if self._state.handler is None:
            return False
        _, send_lock = self._get_locks()
        async with send_lock:
            handler = self._state.handler
            if handler is None:
                return False
            try:
                return await handler.send_key(button_name)
            except Exception as e:
                logger.warning(f"Failed to send {button_name!r}: {e!r}")
                return False

    def disconnect(self) -> None:
        """Drops the active connection, if any. Safe to call at any time, including while a
           command is being sent or a connection is being established."""
        self._generation += 1
        state = self._state
        if state.state is ControllerState.IDLE:
            return
        handler = state.handler
        if handler is not None:
            handler.disconnect()
        self._set_state(IDLE_STATE)
