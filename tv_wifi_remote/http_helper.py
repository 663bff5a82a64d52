#
# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
HTTP transport for talking to TVs on the local network.

TVs are slow, flaky and frequently use self-signed certificates, so every
request gets its own short-lived session with a total timeout, certificate
verification is off, and transport errors are reported as None rather than raised.
"""

from __future__ import annotations

import asyncio

import aiohttp

from .internal_types import *
from .pkg_logging import logger
from .constants import DEFAULT_HTTP_TIMEOUT

def create_tv_session(timeout_seconds: float=DEFAULT_HTTP_TIMEOUT) -> aiohttp.ClientSession:
    """
    Create an aiohttp session for a local TV connection.
    Connections are not pooled; each is closed after its response.
    """
    connector = aiohttp.TCPConnector(
        limit_per_host=2,
        ssl=False,
        force_close=True,
      )
    return aiohttp.ClientSession(
        connector=connector,
        timeout=aiohttp.ClientTimeout(total=timeout_seconds)
      )

class HttpResult(NamedTuple):
    status: int
    text: str

    @property
    def ok(self) -> bool:
        """True for any 2xx status."""
        return 200 <= self.status < 300

class HttpClient:
    """Issues single HTTP requests to TVs. Used by every protocol handler."""

    timeout: float

    def __init__(self, timeout: float=DEFAULT_HTTP_TIMEOUT) -> None:
        self.timeout = timeout

    async def request(
            self,
            method: str,
            url: str,
            data: Optional[Union[str, bytes]]=None,
            headers: Optional[Mapping[str, str]]=None,
            timeout: Optional[float]=None,
          ) -> Optional[HttpResult]:
        """Sends one request and reads the whole response body.

        Returns None on any transport failure (refused, reset, timed out, malformed response).
        An HTTP error status is not a transport failure; check HttpResult.ok.
        """
        timeout = self.timeout if timeout is None else timeout
        logger.debug(f"HTTP {method} {url} headers={dict(headers or {})} body={data!r}")
        try:
            async with create_tv_session(timeout) as session:
                async with session.request(method, url, data=data, headers=headers) as response:
                    text = await response.text(errors='replace')
                    result = HttpResult(response.status, text)
        except (aiohttp.ClientError, asyncio.TimeoutError, OSError, ValueError) as e:
            logger.debug(f"HTTP {method} {url} failed: {e!r}")
            return None
        logger.debug(f"HTTP {method} {url} -> {result.status}")
        return result

    async def get(self, url: str, headers: Optional[Mapping[str, str]]=None) -> Optional[HttpResult]:
        return await self.request('GET', url, headers=headers)

    async def post(
            self,
            url: str,
            data: Optional[Union[str, bytes]]=None,
            headers: Optional[Mapping[str, str]]=None,
          ) -> Optional[HttpResult]:
        return await self.request('POST', url, data=data, headers=headers)

    async def put(
            self,
            url: str,
            data: Optional[Union[str, bytes]]=None,
            headers: Optional[Mapping[str, str]]=None,
          ) -> Optional[HttpResult]:
        return await self.request('PUT', url, data=data, headers=headers)
