#
# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
SsdpSocket -- An async UDP socket for SSDP that can:

  1. Bind one ephemeral datagram socket per local interface address
  2. Receive and decode SsdpDatagrams from remote nodes and deliver them to any number of async subscribers
  3. Send SsdpDatagrams to a remote multicast or unicast address

  The subscriber interface is a simple async iterator that returns a sequence of
  (SsdpSocketBinding, HostAndPort, SsdpDatagram) tuples until the socket is closed.
"""

from __future__ import annotations

import asyncio
import socket

from .internal_types import *
from .pkg_logging import logger
from .exceptions import TvRemoteError
from .ssdp_datagram import SsdpDatagram

MAX_QUEUE_SIZE = 1000

ReceivedDatagram = Tuple['SsdpSocketBinding', HostAndPort, SsdpDatagram]

class SsdpSocketBinding:
    """
    The binding of an SsdpSocket to a single low-level datagram socket. There is one
    instance of this class for each local address in use (typically one per network interface).
    """

    sock: Optional[socket.socket]
    """The low-level socket, until it is handed to the transport or closed."""

    transport: Optional[asyncio.DatagramTransport] = None
    """The asyncio transport created by loop.create_datagram_endpoint()."""

    unicast_addr: HostAndPort
    """The local ip address and port of this binding."""

    def __init__(self, sock: socket.socket):
        self.sock = sock
        self.unicast_addr = sock.getsockname()[:2]

    def sendto(self, datagram: SsdpDatagram, addr: HostAndPort) -> None:
        logger.debug(f"Sending SsdpDatagram via {self} to {addr}: {datagram}")
        if self.transport is None:
            raise TvRemoteError(f"{self} is not open")
        self.transport.sendto(datagram.raw_data, addr)

    def close(self) -> None:
        if self.transport is not None:
            self.transport.close()
            self.transport = None
        elif self.sock is not None:
            self.sock.close()
        self.sock = None

    def __str__(self) -> str:
        return f"SsdpSocketBinding({self.unicast_addr[0]}:{self.unicast_addr[1]})"

    def __repr__(self) -> str:
        return str(self)

class _SsdpSocketProtocol(asyncio.DatagramProtocol):
    """An adapter between one asyncio datagram transport and the owning SsdpSocket."""

    def __init__(self, ssdp_socket: SsdpSocket, socket_binding: SsdpSocketBinding):
        self.ssdp_socket = ssdp_socket
        self.socket_binding = socket_binding

    def datagram_received(self, data: bytes, addr: Tuple[str, int]) -> None:
        self.ssdp_socket.datagram_received(self.socket_binding, (addr[0], addr[1]), data)

    def error_received(self, exc: Exception) -> None:
        # ICMP errors (e.g., port unreachable) on an unconnected UDP socket are not fatal
        logger.debug(f"Error received on {self.socket_binding}: {exc}")

    def connection_lost(self, exc: Optional[Exception]) -> None:
        logger.debug(f"Transport closed on {self.socket_binding}, exc={exc}")

class SsdpDatagramSubscriber(
        AsyncContextManager['SsdpDatagramSubscriber'],
        AsyncIterable[ReceivedDatagram]
      ):
    """Receives every datagram that arrives on an SsdpSocket while the subscription is open."""

    ssdp_socket: SsdpSocket
    queue: asyncio.Queue[Optional[ReceivedDatagram]]
    eos: bool = False

    def __init__(self, ssdp_socket: SsdpSocket, max_queue_size: int=MAX_QUEUE_SIZE):
        self.ssdp_socket = ssdp_socket
        self.queue = asyncio.Queue(max_queue_size)

    async def __aenter__(self) -> SsdpDatagramSubscriber:
        self.ssdp_socket.add_subscriber(self)
        return self

    async def __aexit__(
            self,
            exc_type: Optional[type[BaseException]],
            exc: Optional[BaseException],
            tb: Optional[TracebackType]
      ) -> bool:
        self.ssdp_socket.remove_subscriber(self)
        self.on_end_of_stream()
        return False

    async def receive(self) -> Optional[ReceivedDatagram]:
        """Waits for the next datagram. Returns None once the stream has ended."""
        if self.eos and self.queue.empty():
            return None
        result = await self.queue.get()
        if result is None:
            # leave the sentinel for any other waiters
            self.eos = True
            try:
                self.queue.put_nowait(None)
            except asyncio.QueueFull:
                pass
        return result

    async def iter_datagrams(self) -> AsyncIterator[ReceivedDatagram]:
        while True:
            result = await self.receive()
            if result is None:
                break
            yield result

    def __aiter__(self) -> AsyncIterator[ReceivedDatagram]:
        return self.iter_datagrams()

    def on_datagram(self, socket_binding: SsdpSocketBinding, addr: HostAndPort, datagram: SsdpDatagram) -> None:
        if not self.eos:
            try:
                self.queue.put_nowait((socket_binding, addr, datagram))
            except asyncio.QueueFull:
                logger.warning(f"Queue full, dropping datagram from {addr}: {datagram}")

    def on_end_of_stream(self) -> None:
        if not self.eos:
            self.eos = True
            try:
                # wake up any waiting tasks
                self.queue.put_nowait(None)
            except asyncio.QueueFull:
                # queue is full so waiters will wake up soon
                pass

class SsdpSocket(AsyncContextManager['SsdpSocket']):
    """
    An async SSDP socket bound to an ephemeral port on each of a set of local addresses.

    Usage:
        async with SsdpSocket(["192.168.1.10"]) as ssdp_socket:
            async with SsdpDatagramSubscriber(ssdp_socket) as subscriber:
                ssdp_socket.sendto(datagram, ("239.255.255.250", 1900))
                async for socket_binding, addr, datagram in subscriber:
                    ...
    """

    bind_addresses: List[str]
    """The local IP addresses to bind to."""

    multicast_ttl: int = 2
    """The IP TTL applied to outgoing multicast datagrams."""

    socket_bindings: List[SsdpSocketBinding]
    """One SsdpSocketBinding per bind address that could be opened."""

    datagram_subscribers: Set[SsdpDatagramSubscriber]
    """The subscribers that currently wish to receive datagrams."""

    def __init__(self, bind_addresses: Iterable[str], multicast_ttl: int=2):
        self.bind_addresses = list(bind_addresses)
        self.multicast_ttl = multicast_ttl
        self.socket_bindings = []
        self.datagram_subscribers = set()

    def add_subscriber(self, subscriber: SsdpDatagramSubscriber) -> None:
        self.datagram_subscribers.add(subscriber)

    def remove_subscriber(self, subscriber: SsdpDatagramSubscriber) -> None:
        self.datagram_subscribers.discard(subscriber)

    def _create_socket(self, bind_address: str) -> socket.socket:
        sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM, socket.IPPROTO_UDP)
        try:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            sock.setsockopt(socket.IPPROTO_IP, socket.IP_MULTICAST_TTL, self.multicast_ttl)
            if bind_address not in ('', '0.0.0.0'):
                # send multicast out of the interface that owns this address
                try:
                    sock.setsockopt(socket.IPPROTO_IP, socket.IP_MULTICAST_IF, socket.inet_aton(bind_address))
                except OSError as e:
                    logger.debug(f"Unable to select multicast interface {bind_address}: {e}")
            sock.bind((bind_address, 0))
            sock.setblocking(False)
        except BaseException:
            sock.close()
            raise
        return sock

    async def start(self) -> None:
        loop = asyncio.get_running_loop()
        try:
            for bind_address in self.bind_addresses:
                try:
                    sock = self._create_socket(bind_address)
                except OSError as e:
                    logger.info(f"Unable to bind SSDP socket to {bind_address}: {e}")
                    continue
                socket_binding = SsdpSocketBinding(sock)
                self.socket_bindings.append(socket_binding)
                untyped_transport, _ = await loop.create_datagram_endpoint(
                    lambda: _SsdpSocketProtocol(self, socket_binding),
                    sock=sock
                  )
                # asyncio datagram transports do not inherit from asyncio.DatagramTransport,
                # but they implement the same interface.
                socket_binding.transport = untyped_transport # type: ignore[assignment]
                logger.debug(f"Opened {socket_binding}")
            if len(self.socket_bindings) == 0:
                raise TvRemoteError(f"No SSDP sockets could be bound to {self.bind_addresses}")
        except BaseException:
            self.close()
            raise

    def sendto(self, datagram: SsdpDatagram, addr: HostAndPort) -> int:
        """Sends a datagram out of every binding. Returns the number of bindings that sent it."""
        n = 0
        for socket_binding in self.socket_bindings:
            try:
                socket_binding.sendto(datagram, addr)
                n += 1
            except (OSError, TvRemoteError) as e:
                logger.info(f"Unable to send via {socket_binding} to {addr}: {e}")
        return n

    def datagram_received(self, socket_binding: SsdpSocketBinding, addr: HostAndPort, data: bytes) -> None:
        try:
            datagram = SsdpDatagram.from_raw_data(data)
        except Exception as e:
            logger.warning(f"Error parsing datagram from {addr}, raw=[{data!r}]: {e}")
            return
        logger.debug(f"Received datagram from {addr} on {socket_binding}: {datagram}")
        for subscriber in list(self.datagram_subscribers):
            subscriber.on_datagram(socket_binding, addr, datagram)

    def close(self) -> None:
        for subscriber in list(self.datagram_subscribers):
            subscriber.on_end_of_stream()
        for socket_binding in self.socket_bindings:
            try:
                socket_binding.close()
            except Exception as e:
                logger.error(f"Error closing {socket_binding}: {e}")
        self.socket_bindings = []

    async def __aenter__(self) -> Self:
        await self.start()
        return self

    async def __aexit__(
            self,
            exc_type: Optional[type[BaseException]],
            exc: Optional[BaseException],
            tb: Optional[TracebackType]
      ) -> bool:
        self.close()
        return False
