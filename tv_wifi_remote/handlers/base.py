#
# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
ProtocolHandler -- the contract every TV protocol implementation satisfies.

A handler knows how to find TVs of one brand family on the network, how to
decide that one of them will accept commands, and how to translate canonical
button names (e.g., "Volume_Up") into a single request in the vendor's wire
format. The contract fixes semantics only: every operation reports success as
a bool (or an empty list), and expected network failures are never raised.

Subclasses supply class attributes describing the protocol, a command table,
and implementations of handshake() and send_code().
"""

from __future__ import annotations

import abc
import asyncio
from xml.sax.saxutils import escape as xml_escape

from ..internal_types import *
from ..pkg_logging import logger
from ..constants import UNKNOWN_BRAND
from ..config import TvRemoteConfig
from ..device import DiscoveredDevice
from ..command_table import CommandTable, KeyCode
from ..ssdp_datagram import SsdpResponse
from ..network_probe import NetworkProbe
from ..http_helper import HttpClient, HttpResult

SOAP_ENVELOPE_NS = "http://schemas.xmlsoap.org/soap/envelope/"
SOAP_ENCODING_NS = "http://schemas.xmlsoap.org/soap/encoding/"

def soap_envelope(service_urn: str, action: str, arguments: Mapping[str, str]) -> str:
    """Builds a SOAP 1.1 request envelope for a UPnP-style action."""
    args = ''.join(f"<{name}>{xml_escape(value)}</{name}>\n" for name, value in arguments.items())
    return (
        '<?xml version="1.0" encoding="utf-8"?>\n'
        f'<s:Envelope xmlns:s="{SOAP_ENVELOPE_NS}" s:encodingStyle="{SOAP_ENCODING_NS}">\n'
        '<s:Body>\n'
        f'<u:{action} xmlns:u="{service_urn}">\n'
        f'{args}'
        f'</u:{action}>\n'
        '</s:Body>\n'
        '</s:Envelope>'
      )

def soap_headers(service_urn: str, action: str, header_name: str='SOAPAction') -> Dict[str, str]:
    return {
        'Content-Type': 'text/xml; charset=utf-8',
        header_name: f'"{service_urn}#{action}"',
      }

def is_success(result: Optional[HttpResult]) -> bool:
    """True if a request completed with a 2xx status."""
    return result is not None and result.ok

class ProtocolHandler(abc.ABC):
    protocol_name: str = ""
    """Human-readable protocol name, e.g. "Roku ECP"."""

    default_port: int = 80
    """The port a device of this brand listens on for control requests."""

    brand: str = UNKNOWN_BRAND
    """The brand assigned to devices this handler discovers."""

    device_label: str = "Smart TV"
    """The name given to discovered devices when the TV does not report one."""

    server_keywords: Tuple[str, ...] = ()
    """Case-insensitive substrings that identify this brand in an SSDP SERVER header."""

    location_keywords: Tuple[str, ...] = ()
    """Case-insensitive substrings that identify this brand in an SSDP LOCATION URL."""

    st_keywords: Tuple[str, ...] = ()
    """Case-insensitive substrings that identify this brand in an SSDP ST header."""

    probe_ports: Tuple[int, ...] = ()
    """TCP ports probed on SSDP hosts that did not identify themselves, in order of preference."""

    commands: Mapping[str, KeyCode] = {}
    """Canonical button name to native key code."""

    probe: NetworkProbe
    http: HttpClient
    config: TvRemoteConfig
    command_table: CommandTable

    _device: Optional[DiscoveredDevice] = None
    _connected: bool = False

    def __init__(
            self,
            probe: Optional[NetworkProbe]=None,
            http: Optional[HttpClient]=None,
            config: Optional[TvRemoteConfig]=None,
          ) -> None:
        if config is None:
            config = TvRemoteConfig() if probe is None else probe.config
        self.config = config
        self.probe = NetworkProbe(config) if probe is None else probe
        self.http = HttpClient(config.http_timeout) if http is None else http
        self.command_table = CommandTable(self.commands)

    def __str__(self) -> str:
        return f"{self.__class__.__name__}({self.protocol_name})"

    # ----- discovery

    def matches_ssdp_response(self, response: SsdpResponse) -> bool:
        for value, keywords in (
                (response.server, self.server_keywords),
                (response.location, self.location_keywords),
                (response.search_target, self.st_keywords),
              ):
            value = value.lower()
            if any(keyword in value for keyword in keywords):
                return True
        return False

    async def device_from_ssdp(self, response: SsdpResponse) -> Optional[DiscoveredDevice]:
        """Builds the device for an SSDP response that matched this brand."""
        return DiscoveredDevice(
            name=self.device_label,
            ip_address=response.ip,
            brand=self.brand,
            port=self.default_port,
            service_type=response.search_target,
            unique_id=response.usn,
          )

    async def device_from_probe(self, ip_address: str, port: int) -> Optional[DiscoveredDevice]:
        """Builds the device for a host that answered a TCP probe on one of probe_ports.
           Returns None if the host turns out not to be one of ours."""
        return DiscoveredDevice(
            name=self.device_label,
            ip_address=ip_address,
            brand=self.brand,
            port=port,
          )

    async def _probe_candidate(self, ip_address: str) -> Optional[DiscoveredDevice]:
        open_ports = await self.probe.probe_tcp_ports(ip_address, self.probe_ports, self.config.probe_timeout)
        if len(open_ports) == 0:
            return None
        return await self.device_from_probe(ip_address, open_ports[0])

    async def discover(self, timeout: Optional[float]=None) -> List[DiscoveredDevice]:
        """Finds devices of this brand: SSDP keyword matches, plus any other SSDP host that
           answers on one of probe_ports. One device per IP address."""
        responses = await self.probe.discover_ssdp(timeout)
        devices: Dict[str, DiscoveredDevice] = {}
        matched: Dict[str, SsdpResponse] = {}
        for response in responses:
            if response.ip not in matched and self.matches_ssdp_response(response):
                matched[response.ip] = response
        built = await asyncio.gather(*(self.device_from_ssdp(r) for r in matched.values()))
        for ip, device in zip(matched, built):
            if device is not None:
                devices[ip] = device
        if len(self.probe_ports) > 0:
            candidates = list(dict.fromkeys(r.ip for r in responses if r.ip not in devices))
            probed = await asyncio.gather(*(self._probe_candidate(ip) for ip in candidates))
            for ip, device in zip(candidates, probed):
                if device is not None:
                    devices.setdefault(ip, device)
        logger.debug(f"{self} discovered {len(devices)} devices")
        return list(devices.values())

    # ----- connection

    @abc.abstractmethod
    async def handshake(self, device: DiscoveredDevice) -> bool:
        """Returns True if the device looks ready to accept commands."""
        raise NotImplementedError()

    async def connect(self, device: DiscoveredDevice) -> bool:
        try:
            connected = await self.handshake(device)
        except Exception as e:
            logger.info(f"{self}: handshake with {device.display_name} failed: {e!r}")
            connected = False
        if connected:
            self._device = device
            self._connected = True
            logger.info(f"Connected to {device.display_name} via {self.protocol_name}")
        else:
            logger.info(f"{self}: unable to connect to {device.display_name}")
        return connected

    def is_connected(self) -> bool:
        return self._connected and self._device is not None

    @property
    def current_device(self) -> Optional[DiscoveredDevice]:
        return self._device if self._connected else None

    def disconnect(self) -> None:
        if self._device is not None:
            logger.info(f"{self}: disconnected from {self._device.display_name}")
        self._device = None
        self._connected = False

    # ----- commands

    def map_command_name(self, name: str) -> Optional[KeyCode]:
        return self.command_table.lookup(name)

    @abc.abstractmethod
    async def send_code(self, device: DiscoveredDevice, code: KeyCode) -> bool:
        """Issues the protocol request for one native key code."""
        raise NotImplementedError()

    async def send_key(self, button_name: str) -> bool:
        device = self.current_device
        if device is None:
            return False
        code = self.map_command_name(button_name)
        if code is None:
            logger.debug(f"{self}: no key code for {button_name!r}")
            return False
        try:
            sent = await self.send_code(device, code)
        except Exception as e:
            logger.info(f"{self}: sending {button_name!r} to {device.display_name} failed: {e!r}")
            return False
        if sent:
            logger.debug(f"{self}: sent {button_name!r} ({code}) to {device.display_name}")
        else:
            logger.info(f"{self}: {device.display_name} rejected {button_name!r}")
        return sent

    async def probe_reachable(self, device: DiscoveredDevice) -> bool:
        """A TCP reachability check of the device's control port, for protocols
           with no status endpoint."""
        return await self.probe.probe_tcp_port(device.ip_address, device.port, self.config.connect_probe_timeout)
