# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""In-memory stand-ins for NetworkProbe and HttpClient."""

from __future__ import annotations

from tv_wifi_remote.internal_types import *
from tv_wifi_remote import (
    NetworkProbe,
    HttpClient,
    HttpResult,
    SsdpResponse,
    TvRemoteConfig,
  )

class RecordedRequest(NamedTuple):
    method: str
    url: str
    data: Optional[Union[str, bytes]]
    headers: Dict[str, str]

class FakeProbe(NetworkProbe):
    """Returns canned SSDP responses and reports configured TCP ports as open."""

    def __init__(
            self,
            responses: Iterable[SsdpResponse]=(),
            open_ports: Optional[Mapping[str, Iterable[int]]]=None,
            all_open: bool=False,
            config: Optional[TvRemoteConfig]=None,
          ) -> None:
        super().__init__(config)
        self.responses = list(responses)
        self.open_ports = { ip: set(ports) for ip, ports in (open_ports or {}).items() }
        self.all_open = all_open
        self.probed: List[Tuple[str, int]] = []
        self.search_count = 0

    async def discover_ssdp(self, timeout=None, search_targets=None) -> List[SsdpResponse]:
        self.search_count += 1
        return list(self.responses)

    async def probe_tcp_port(self, ip: str, port: int, timeout: Optional[float]=None) -> bool:
        self.probed.append((ip, port))
        return self.all_open or port in self.open_ports.get(ip, ())

class FakeHttpClient(HttpClient):
    """Answers requests from a (method, url) routing table and records every request."""

    def __init__(self, default: Optional[HttpResult]=None) -> None:
        super().__init__()
        self.default = default
        self.routes: Dict[Tuple[str, str], Optional[HttpResult]] = {}
        self.calls: List[RecordedRequest] = []

    def route(self, method: str, url: str, status: int=200, text: str='') -> None:
        self.routes[(method, url)] = HttpResult(status, text)

    def route_failure(self, method: str, url: str) -> None:
        """Simulates a transport failure (refused, timed out) for a URL."""
        self.routes[(method, url)] = None

    async def request(self, method, url, data=None, headers=None, timeout=None) -> Optional[HttpResult]:
        self.calls.append(RecordedRequest(method, url, data, dict(headers or {})))
        return self.routes.get((method, url), self.default)

OK = HttpResult(200, '')

def ssdp_response(
        ip: str,
        server: str='',
        location: str='',
        search_target: str='upnp:rootdevice',
        usn: str='',
      ) -> SsdpResponse:
    return SsdpResponse(
        location=location,
        server=server,
        search_target=search_target,
        usn=usn or f"uuid:{ip}",
        ip=ip,
      )
