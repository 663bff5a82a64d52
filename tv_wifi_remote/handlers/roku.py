#
# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Roku players and Roku TVs (including TCL and other Roku OS sets), controlled
through the External Control Protocol (ECP) on port 8060.
"""

from __future__ import annotations

from urllib.parse import quote
from xml.etree import ElementTree

from ..internal_types import *
from ..pkg_logging import logger
from ..device import DiscoveredDevice
from ..command_table import KeyCode
from ..ssdp_datagram import SsdpResponse
from .base import ProtocolHandler, is_success

DEFAULT_DEVICE_NAME = "Roku Device"

class RokuHandler(ProtocolHandler):
    protocol_name = "Roku ECP"
    default_port = 8060
    brand = "Roku"
    device_label = DEFAULT_DEVICE_NAME
    server_keywords = ("roku",)
    location_keywords = (":8060",)
    st_keywords = ("roku",)
    probe_ports = (8060,)

    commands = {
        "Power": "Power",
        "PowerOff": "PowerOff",
        "PowerOn": "PowerOn",
        "Volume_Up": "VolumeUp",
        "Volume_Down": "VolumeDown",
        "Mute": "VolumeMute",
        "Up": "Up",
        "Down": "Down",
        "Left": "Left",
        "Right": "Right",
        "OK": "Select",
        "Enter": "Select",
        "Select": "Select",
        "Back": "Back",
        "Return": "Back",
        "Home": "Home",
        "Info": "Info",
        "Play": "Play",
        "Pause": "Play",
        "Rewind": "Rev",
        "Fast_Forward": "Fwd",
        "Stop": "Play",
        "0": "Lit_0", "1": "Lit_1", "2": "Lit_2",
        "3": "Lit_3", "4": "Lit_4", "5": "Lit_5",
        "6": "Lit_6", "7": "Lit_7", "8": "Lit_8",
        "9": "Lit_9",
        "Netflix": "Launch_12",
        "Input": "InputHDMI1",
        "HDMI1": "InputHDMI1",
        "HDMI2": "InputHDMI2",
        "HDMI3": "InputHDMI3",
        "Sleep": "Sleep",
    }

    async def fetch_device_name(self, ip_address: str) -> Optional[str]:
        """The friendly name (or failing that, the model name) from /query/device-info."""
        result = await self.http.get(f"http://{ip_address}:{self.default_port}/query/device-info")
        if result is None or result.status != 200:
            return None
        try:
            root = ElementTree.fromstring(result.text)
        except ElementTree.ParseError as e:
            logger.debug(f"Unparseable device-info from {ip_address}: {e}")
            return None
        for tag in ('friendly-device-name', 'model-name'):
            value = (root.findtext(tag) or '').strip()
            if value != '':
                return value
        return None

    async def device_from_ssdp(self, response: SsdpResponse) -> Optional[DiscoveredDevice]:
        name = await self.fetch_device_name(response.ip)
        return DiscoveredDevice(
            name=DEFAULT_DEVICE_NAME if name is None else name,
            ip_address=response.ip,
            brand=self.brand,
            port=self.default_port,
            service_type=response.search_target,
            unique_id=response.usn,
          )

    async def device_from_probe(self, ip_address: str, port: int) -> Optional[DiscoveredDevice]:
        name = await self.fetch_device_name(ip_address)
        return DiscoveredDevice(
            name=DEFAULT_DEVICE_NAME if name is None else name,
            ip_address=ip_address,
            brand=self.brand,
            port=port,
          )

    async def handshake(self, device: DiscoveredDevice) -> bool:
        result = await self.http.get(f"http://{device.ip_address}:{device.port}/query/device-info")
        return result is not None and result.status == 200

    async def send_code(self, device: DiscoveredDevice, code: KeyCode) -> bool:
        result = await self.http.post(
            f"http://{device.ip_address}:{device.port}/keypress/{quote(str(code))}",
            data=b'',
          )
        return is_success(result)
