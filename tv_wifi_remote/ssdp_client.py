# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
SsdpClient -- An SSDP client that can:

  1. Send an M-SEARCH request to a multicast UDP address (typically 239.255.255.250:1900)
  2. Receive and decode the HTTP-style unicast replies from devices on the network
  3. Collect and return replies received before a deadline
"""

from __future__ import annotations

import asyncio
import time

from .internal_types import *
from .pkg_logging import logger
from .constants import (
    SSDP_MULTICAST_ADDRESS,
    SSDP_PORT,
    SSDP_MX,
    DEFAULT_DISCOVERY_TIMEOUT,
  )

from .ssdp_datagram import SsdpDatagram, SsdpResponse
from .ssdp_socket import SsdpSocket, SsdpSocketBinding, SsdpDatagramSubscriber
from .util import get_local_ip_addresses

class SsdpResponseInfo:
    socket_binding: SsdpSocketBinding
    """The socket binding on which the response was received"""

    src_addr: HostAndPort
    """The source address of the response"""

    datagram: SsdpDatagram
    """The response datagram"""

    def __init__(self, socket_binding: SsdpSocketBinding, src_addr: HostAndPort, datagram: SsdpDatagram) -> None:
        self.socket_binding = socket_binding
        self.src_addr = src_addr
        self.datagram = datagram

    @property
    def response(self) -> SsdpResponse:
        """The brand-classification summary of this response, keyed by the sender's IP."""
        return SsdpResponse.from_datagram(self.datagram, self.src_addr[0])

class SsdpSearchRequest(
        AsyncContextManager['SsdpSearchRequest'],
        AsyncIterable[SsdpResponseInfo]
      ):
    """A single M-SEARCH on an SsdpClient and all of the replies received before its deadline,
       within an AsyncContextManager/AsyncIterable interface."""

    ssdp_client: SsdpClient
    search_target: str
    response_wait_time: float
    max_responses: int
    include_error_responses: bool
    dg_subscriber: SsdpDatagramSubscriber
    end_time: float = 0.0

    def __init__(
            self,
            ssdp_client: SsdpClient,
            search_target: str="ssdp:all",
            response_wait_time: Optional[float]=None,
            max_responses: int=0,
            include_error_responses: bool=False,
          ):
        """Create an async context manager/iterable that sends an M-SEARCH and returns the replies
        as they arrive.

        Parameters:
            ssdp_client:             The SsdpClient used to send the request and receive replies.
            search_target:           The ST header value. Defaults to "ssdp:all".
            response_wait_time:      Seconds to wait for replies. Defaults to ssdp_client.response_wait_time.
            max_responses:           Stop after this many replies. 0 (the default) means no limit.
            include_error_responses: If True, replies with a status other than 200 are included.
        """
        self.ssdp_client = ssdp_client
        self.search_target = search_target
        self.response_wait_time = ssdp_client.response_wait_time if response_wait_time is None else response_wait_time
        self.max_responses = max_responses
        self.include_error_responses = include_error_responses
        self.dg_subscriber = SsdpDatagramSubscriber(ssdp_client)

    async def __aenter__(self) -> SsdpSearchRequest:
        # Subscribe before sending so that no early reply is missed.
        await self.dg_subscriber.__aenter__()
        try:
            datagram = SsdpDatagram.m_search(
                self.search_target,
                mx=self.ssdp_client.mx,
                multicast_address=self.ssdp_client.multicast_address,
                multicast_port=self.ssdp_client.multicast_port,
              )
            self.ssdp_client.sendto(datagram, (self.ssdp_client.multicast_address, self.ssdp_client.multicast_port))
            self.end_time = time.monotonic() + self.response_wait_time
        except BaseException as e:
            await self.dg_subscriber.__aexit__(type(e), e, e.__traceback__)
            raise
        return self

    async def __aexit__(
            self,
            exc_type: Optional[type[BaseException]],
            exc: Optional[BaseException],
            tb: Optional[TracebackType]
      ) -> bool:
        return await self.dg_subscriber.__aexit__(exc_type, exc, tb)

    async def iter_responses(self) -> AsyncIterator[SsdpResponseInfo]:
        n = 0
        while self.max_responses <= 0 or n < self.max_responses:
            remaining_time = self.end_time - time.monotonic()
            if remaining_time <= 0.0:
                break
            try:
                resp_tuple = await asyncio.wait_for(self.dg_subscriber.receive(), remaining_time)
            except asyncio.TimeoutError:
                break
            if resp_tuple is None:
                break
            socket_binding, addr, datagram = resp_tuple
            status_code = datagram.status_code
            if status_code is None:
                # another client's M-SEARCH or a NOTIFY; not a reply to us
                continue
            logger.debug(f"Received SSDP response from {addr} on {socket_binding}: status_code={status_code}, headers={dict(datagram.headers)}")
            if self.include_error_responses or status_code == 200:
                n += 1
                yield SsdpResponseInfo(socket_binding, addr, datagram)

    def __aiter__(self) -> AsyncIterator[SsdpResponseInfo]:
        return self.iter_responses()


class SsdpClient(SsdpSocket):
    """
    An SSDP client that sends M-SEARCH requests from ephemeral ports on each local
    interface and collects the unicast replies.
    """

    response_wait_time: float
    """The amount of time (in seconds) to wait for replies to come in."""

    multicast_address: str = SSDP_MULTICAST_ADDRESS
    """The address to send M-SEARCH requests to."""

    multicast_port: int = SSDP_PORT
    """The port to send M-SEARCH requests to."""

    mx: int = SSDP_MX
    """The MX header value sent in each M-SEARCH."""

    include_loopback: bool = False
    """If True, loopback addresses are included when binding to all local addresses."""

    def __init__(
            self,
            response_wait_time: float=DEFAULT_DISCOVERY_TIMEOUT,
            multicast_address: str=SSDP_MULTICAST_ADDRESS,
            multicast_port: int=SSDP_PORT,
            bind_addresses: Optional[Iterable[str]]=None,
            include_loopback: bool=False,
            mx: int=SSDP_MX,
          ) -> None:
        self.response_wait_time = response_wait_time
        self.multicast_address = multicast_address
        self.multicast_port = multicast_port
        self.include_loopback = include_loopback
        self.mx = mx
        if bind_addresses is None:
            bind_addresses = get_local_ip_addresses(include_loopback=include_loopback)
            if len(bind_addresses) == 0:
                bind_addresses = ['0.0.0.0']
        super().__init__(bind_addresses)

    def search(
            self,
            search_target: str="ssdp:all",
            response_wait_time: Optional[float]=None,
            max_responses: int=0,
            include_error_responses: bool=False,
          ) -> SsdpSearchRequest:
        """Create an async context manager/iterable that sends one M-SEARCH and yields the replies
           as they arrive.

        Usage:
            async with ssdp_client.search("ssdp:all") as search_request:
                async for info in search_request:
                    print(info.datagram.headers)
                    # It is possible to break out of the loop early if desired
        """
        return SsdpSearchRequest(
                self,
                search_target=search_target,
                response_wait_time=response_wait_time,
                max_responses=max_responses,
                include_error_responses=include_error_responses,
              )

    async def simple_search(
            self,
            search_target: str="ssdp:all",
            response_wait_time: Optional[float]=None,
            max_responses: int=0,
            include_error_responses: bool=False,
          ) -> List[SsdpResponseInfo]:
        """Sends one M-SEARCH, waits for the replies and returns all of them.

           Early out/incremental results can be obtained by using the search() method.
        """
        results: List[SsdpResponseInfo] = []
        async with self.search(
                search_target=search_target,
                response_wait_time=response_wait_time,
                max_responses=max_responses,
                include_error_responses=include_error_responses,
              ) as search_request:
            async for response in search_request:
                results.append(response)
        return results
