#
# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
NetworkProbe -- the low-level network primitives that discovery is built on:

  1. SSDP M-SEARCH over UDP multicast, one socket per search
  2. Concurrent discovery across several search targets under a single deadline
  3. Best-effort TCP port probing, bounded by a semaphore
  4. Local IPv4 address lookup

Nothing in this module raises on network failure; errors are logged and
reported as empty results or False.
"""

from __future__ import annotations

import asyncio
import time

from .internal_types import *
from .pkg_logging import logger
from .constants import SSDP_MULTICAST_ADDRESS, SSDP_PORT
from .config import TvRemoteConfig
from .exceptions import TvRemoteError
from .ssdp_datagram import SsdpResponse
from .ssdp_client import SsdpClient
from .util import get_local_ip_addresses

class NetworkProbe:
    config: TvRemoteConfig
    multicast_address: str
    multicast_port: int
    include_loopback: bool

    _semaphore: Optional[asyncio.Semaphore] = None
    _semaphore_loop: Optional[asyncio.AbstractEventLoop] = None

    def __init__(
            self,
            config: Optional[TvRemoteConfig]=None,
            multicast_address: str=SSDP_MULTICAST_ADDRESS,
            multicast_port: int=SSDP_PORT,
            include_loopback: bool=False,
          ) -> None:
        self.config = TvRemoteConfig() if config is None else config
        self.multicast_address = multicast_address
        self.multicast_port = multicast_port
        self.include_loopback = include_loopback

    def _get_semaphore(self) -> asyncio.Semaphore:
        # asyncio primitives may be bound to the loop they were first used on
        loop = asyncio.get_running_loop()
        if self._semaphore is None or self._semaphore_loop is not loop:
            self._semaphore = asyncio.Semaphore(self.config.max_concurrent_probes)
            self._semaphore_loop = loop
        return self._semaphore

    async def send_multicast_search(self, search_target: str, timeout: float) -> List[SsdpResponse]:
        """Sends one M-SEARCH and collects the 200 OK replies until timeout seconds have elapsed.

        Socket errors are logged; whatever was received before the error is returned.
        """
        results: List[SsdpResponse] = []
        bind_addresses = self.config.bind_addresses
        try:
            async with SsdpClient(
                    response_wait_time=timeout,
                    multicast_address=self.multicast_address,
                    multicast_port=self.multicast_port,
                    bind_addresses=bind_addresses,
                    include_loopback=self.include_loopback,
                  ) as ssdp_client:
                async with ssdp_client.search(search_target) as search_request:
                    async for info in search_request:
                        results.append(info.response)
        except (OSError, TvRemoteError) as e:
            logger.info(f"M-SEARCH for {search_target!r} failed: {e}")
        logger.debug(f"M-SEARCH for {search_target!r} collected {len(results)} responses")
        return results

    async def discover_ssdp(
            self,
            timeout: Optional[float]=None,
            search_targets: Optional[Iterable[str]]=None,
          ) -> List[SsdpResponse]:
        """Searches for every target concurrently and returns one response per source IP.

        All searches share a single deadline. When an IP answers more than one search, the
        reply to the earliest search target (in the order given) wins.
        """
        timeout = self.config.discovery_timeout if timeout is None else timeout
        targets = list(self.config.search_targets if search_targets is None else search_targets)
        deadline = time.monotonic() + timeout

        async def search_one(target: str) -> List[SsdpResponse]:
            return await self.send_multicast_search(target, max(0.0, deadline - time.monotonic()))

        target_results = await asyncio.gather(*(search_one(t) for t in targets), return_exceptions=True)

        merged: List[SsdpResponse] = []
        seen_ips: Set[str] = set()
        for target, result in zip(targets, target_results):
            if isinstance(result, BaseException):
                if isinstance(result, asyncio.CancelledError):
                    raise result
                logger.warning(f"SSDP search for {target!r} failed: {result}")
                continue
            for response in result:
                if response.ip not in seen_ips:
                    seen_ips.add(response.ip)
                    merged.append(response)
        logger.debug(f"SSDP discovery found {len(merged)} distinct hosts")
        return merged

    async def probe_tcp_port(self, ip: str, port: int, timeout: Optional[float]=None) -> bool:
        """True if a TCP connection to ip:port can be opened within timeout seconds."""
        timeout = self.config.probe_timeout if timeout is None else timeout
        async with self._get_semaphore():
            try:
                _, writer = await asyncio.wait_for(asyncio.open_connection(ip, port), timeout)
            except Exception as e:
                logger.debug(f"TCP probe of {ip}:{port} failed: {e!r}")
                return False
            writer.close()
            try:
                await writer.wait_closed()
            except Exception as e:
                logger.debug(f"Error closing probe connection to {ip}:{port}: {e!r}")
        logger.debug(f"TCP probe of {ip}:{port} succeeded")
        return True

    async def probe_tcp_ports(self, ip: str, ports: Iterable[int], timeout: Optional[float]=None) -> List[int]:
        """Probes several ports concurrently. Returns the open ones, in the order given."""
        port_list = list(ports)
        results = await asyncio.gather(*(self.probe_tcp_port(ip, port, timeout) for port in port_list))
        return [ port for port, is_open in zip(port_list, results) if is_open ]

    def local_ipv4_address(self) -> Optional[str]:
        """The preferred non-loopback IPv4 address of this host, or None."""
        try:
            addresses = get_local_ip_addresses(include_loopback=False)
        except (OSError, ValueError) as e:
            logger.info(f"Unable to enumerate local interfaces: {e}")
            return None
        return addresses[0] if len(addresses) > 0 else None
