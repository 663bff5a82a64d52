#
# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
GenericHandler -- best-effort control of TVs with no dedicated handler.

Every SSDP responder is reported as a device, with a brand guessed from its
SERVER and LOCATION headers. Connecting probes a fixed list of vendor control
ports; the first port whose vendor handler accepts the connection becomes the
delegate that all further commands are forwarded to. If no vendor handler
accepts but some port answered, the handler still reports itself connected
and sends keys as UPnP RenderingControl SendKey requests, which some sets
honor.
"""

from __future__ import annotations

from ..internal_types import *
from ..pkg_logging import logger
from ..constants import UNKNOWN_BRAND
from ..device import DiscoveredDevice
from ..command_table import KeyCode
from ..ssdp_datagram import SsdpResponse
from ..util import port_from_url
from .base import ProtocolHandler, soap_envelope, soap_headers, is_success
from .samsung import SamsungHandler
from .lg import LgHandler
from .roku import RokuHandler
from .philips import PhilipsHandler
from .panasonic import PanasonicHandler
from .vizio import VizioHandler

RENDERING_CONTROL_SERVICE = "urn:schemas-upnp-org:service:RenderingControl:1"

KNOWN_PORTS: Tuple[int, ...] = (8001, 8060, 3000, 1925, 55000, 9000, 7345, 80, 8080)
"""Vendor control ports probed when connecting, in order of preference."""

UPNP_CONTROL_PORTS: Tuple[int, ...] = (80, 8080)
"""Ports a UPnP RenderingControl service may answer on, in order of preference."""

PORT_HANDLERS: Dict[int, Type[ProtocolHandler]] = {
    8001: SamsungHandler,
    8002: SamsungHandler,
    3000: LgHandler,
    3001: LgHandler,
    8060: RokuHandler,
    1925: PhilipsHandler,
    1926: PhilipsHandler,
    55000: PanasonicHandler,
    7345: VizioHandler,
    9000: VizioHandler,
}
"""The vendor protocol spoken on each well-known control port."""

BRAND_FINGERPRINTS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("Samsung", ("samsung",)),
    ("LG", ("lg", "webos")),
    ("Sony", ("sony", "bravia")),
    ("Roku", ("roku",)),
    ("Philips", ("philips",)),
    ("Panasonic", ("panasonic", "viera")),
    ("Vizio", ("vizio", "smartcast")),
    ("Toshiba", ("toshiba",)),
    ("Sharp", ("sharp",)),
    ("Hisense", ("hisense",)),
    ("TCL", ("tcl",)),
    ("Xiaomi", ("xiaomi",)),
)

def classify_brand(server: str, location: str) -> Optional[str]:
    """Guesses a brand from SSDP SERVER and LOCATION headers. First fingerprint match wins."""
    combined = f"{server} {location}".lower()
    for brand, keywords in BRAND_FINGERPRINTS:
        if any(keyword in combined for keyword in keywords):
            return brand
    return None

class GenericHandler(ProtocolHandler):
    protocol_name = "Generic UPnP"
    default_port = 80
    brand = UNKNOWN_BRAND
    device_label = "Smart TV"

    commands = {
        "Power": "Power",
        "Volume_Up": "VolumeUp",
        "Volume_Down": "VolumeDown",
        "Channel_Up": "ChannelUp",
        "Channel_Down": "ChannelDown",
        "Mute": "Mute",
        "Up": "Up", "Down": "Down",
        "Left": "Left", "Right": "Right",
        "OK": "Enter", "Enter": "Enter",
        "Back": "Back", "Return": "Return",
        "Home": "Home", "Menu": "Menu",
        "Source": "Source", "Input": "Input",
        "Play": "Play", "Pause": "Pause",
        "Stop": "Stop", "Rewind": "Rewind",
        "Fast_Forward": "FastForward",
        "Info": "Info", "Guide": "Guide",
    }

    delegate: Optional[ProtocolHandler] = None
    """The vendor handler commands are forwarded to, once one has accepted a connection."""

    upnp_port: Optional[int] = None
    """The open UPnP port SendKey requests go to when the device's own port was found closed."""

    @property
    def detected_protocol(self) -> Optional[str]:
        """The delegate's protocol name, or None when not delegating."""
        delegate = self.delegate
        return None if delegate is None else delegate.protocol_name

    def handler_for_port(self, port: int) -> Optional[ProtocolHandler]:
        handler_class = PORT_HANDLERS.get(port)
        if handler_class is None:
            return None
        return handler_class(probe=self.probe, http=self.http, config=self.config)

    def matches_ssdp_response(self, response: SsdpResponse) -> bool:
        return True

    async def device_from_ssdp(self, response: SsdpResponse) -> Optional[DiscoveredDevice]:
        brand = classify_brand(response.server, response.location)
        port = port_from_url(response.location)
        if port is None or not 1 <= port <= 65535:
            port = self.default_port
        return DiscoveredDevice(
            name=f"Smart TV ({response.ip})" if brand is None else brand,
            ip_address=response.ip,
            brand=UNKNOWN_BRAND if brand is None else brand,
            port=port,
            service_type=response.search_target,
            unique_id=response.usn,
          )

    async def handshake(self, device: DiscoveredDevice) -> bool:
        self.upnp_port = None
        open_ports = await self.probe.probe_tcp_ports(device.ip_address, KNOWN_PORTS, self.config.probe_timeout)
        if len(open_ports) == 0:
            return False
        for port in open_ports:
            handler = self.handler_for_port(port)
            if handler is None:
                continue
            if await handler.connect(device.with_port(port)):
                logger.info(f"{device.display_name} speaks {handler.protocol_name} on port {port}")
                self.delegate = handler
                return True
        if device.port in KNOWN_PORTS and device.port not in open_ports:
            self.upnp_port = next((port for port in open_ports if port in UPNP_CONTROL_PORTS), None)
        logger.info(f"No vendor protocol accepted {device.display_name}; open ports {open_ports}; using UPnP SendKey")
        return True

    async def connect(self, device: DiscoveredDevice) -> bool:
        self._release_delegate()
        connected = await super().connect(device)
        delegate = self.delegate
        if connected and delegate is not None:
            self._device = delegate.current_device
        elif connected and self.upnp_port is not None:
            self._device = device.with_port(self.upnp_port)
        return connected

    def _release_delegate(self) -> None:
        delegate = self.delegate
        self.delegate = None
        if delegate is not None:
            delegate.disconnect()

    def disconnect(self) -> None:
        self._release_delegate()
        super().disconnect()

    async def send_key(self, button_name: str) -> bool:
        delegate = self.delegate
        if delegate is not None and self.is_connected():
            return await delegate.send_key(button_name)
        return await super().send_key(button_name)

    async def send_code(self, device: DiscoveredDevice, code: KeyCode) -> bool:
        result = await self.http.post(
            f"http://{device.ip_address}:{device.port}/upnp/control/RenderingControl1",
            data=soap_envelope(RENDERING_CONTROL_SERVICE, "SendKey", {"InstanceID": "0", "KeyName": str(code)}),
            headers=soap_headers(RENDERING_CONTROL_SERVICE, "SendKey"),
          )
        return is_success(result)
