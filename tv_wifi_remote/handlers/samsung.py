#
# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Samsung Smart TV (2016 and later) REST remote control on port 8001, with a
fallback to the legacy MultiScreenService SOAP interface on port 55000.
"""

from __future__ import annotations

import json

from ..internal_types import *
from ..pkg_logging import logger
from ..device import DiscoveredDevice
from ..command_table import KeyCode
from .base import ProtocolHandler, soap_envelope, soap_headers, is_success

LEGACY_PORT = 55000
LEGACY_SERVICE = "urn:samsung.com:service:MultiScreenService:1"

class SamsungHandler(ProtocolHandler):
    protocol_name = "Samsung Smart TV"
    default_port = 8001
    brand = "Samsung"
    device_label = "Samsung TV"
    server_keywords = ("samsung",)
    location_keywords = ("samsung",)
    st_keywords = ("samsung",)
    probe_ports = (8001,)

    commands = {
        "Power": "KEY_POWER",
        "Volume_Up": "KEY_VOLUP",
        "Volume_Down": "KEY_VOLDOWN",
        "Channel_Up": "KEY_CHUP",
        "Channel_Down": "KEY_CHDOWN",
        "Mute": "KEY_MUTE",
        "Up": "KEY_UP",
        "Down": "KEY_DOWN",
        "Left": "KEY_LEFT",
        "Right": "KEY_RIGHT",
        "OK": "KEY_ENTER",
        "Enter": "KEY_ENTER",
        "Select": "KEY_ENTER",
        "Back": "KEY_RETURN",
        "Return": "KEY_RETURN",
        "Exit": "KEY_EXIT",
        "Menu": "KEY_MENU",
        "Home": "KEY_HOME",
        "Source": "KEY_SOURCE",
        "Input": "KEY_SOURCE",
        "Info": "KEY_INFO",
        "Guide": "KEY_GUIDE",
        "Play": "KEY_PLAY",
        "Pause": "KEY_PAUSE",
        "Stop": "KEY_STOP",
        "Rewind": "KEY_REWIND",
        "Fast_Forward": "KEY_FF",
        "0": "KEY_0", "1": "KEY_1", "2": "KEY_2",
        "3": "KEY_3", "4": "KEY_4", "5": "KEY_5",
        "6": "KEY_6", "7": "KEY_7", "8": "KEY_8",
        "9": "KEY_9",
        "Red": "KEY_RED", "Green": "KEY_GREEN",
        "Yellow": "KEY_YELLOW", "Blue": "KEY_BLUE",
        "HDMI1": "KEY_HDMI1", "HDMI2": "KEY_HDMI2",
        "HDMI3": "KEY_HDMI3", "HDMI4": "KEY_HDMI4",
        "Netflix": "KEY_NETFLIX",
        "APPS": "KEY_APPS",
        "Sleep": "KEY_SLEEP",
        "Aspect": "KEY_PANELCHG",
        "CC": "KEY_CC",
        "PIP": "KEY_PIP_ONOFF",
        "Zoom": "KEY_ZOOM_IN",
        "Swap": "KEY_ZOOM_MOVE",
    }

    async def fetch_device_name(self, ip_address: str, port: Optional[int]=None) -> Optional[str]:
        """Reads the TV's name from its REST API info document, or None."""
        port = self.default_port if port is None else port
        result = await self.http.get(f"http://{ip_address}:{port}/api/v2/")
        if result is None or result.status != 200:
            return None
        try:
            info = json.loads(result.text)
        except ValueError:
            logger.debug(f"Samsung info document from {ip_address} is not JSON")
            return None
        if not isinstance(info, dict):
            return None
        device_info = info.get('device')
        name = device_info.get('name') if isinstance(device_info, dict) else None
        if not isinstance(name, str) or name == '':
            name = info.get('name')
        if not isinstance(name, str) or name == '':
            return None
        return name

    async def device_from_probe(self, ip_address: str, port: int) -> Optional[DiscoveredDevice]:
        # port 8001 is not unique to Samsung; require the info document to name the TV
        name = await self.fetch_device_name(ip_address, port)
        if name is None:
            return None
        return DiscoveredDevice(name=name, ip_address=ip_address, brand=self.brand, port=port)

    async def handshake(self, device: DiscoveredDevice) -> bool:
        result = await self.http.get(f"http://{device.ip_address}:{device.port}/api/v2/")
        return result is not None and result.status == 200

    async def send_code(self, device: DiscoveredDevice, code: KeyCode) -> bool:
        body = json.dumps(
            {
                "method": "ms.remote.control",
                "params": {
                    "Cmd": "Click",
                    "DataOfCmd": code,
                    "Option": "false",
                    "TypeOfRemote": "SendRemoteKey",
                },
            },
            separators=(',', ':'),
          )
        result = await self.http.post(
            f"http://{device.ip_address}:{device.port}/api/v2/channels/samsung.remote.control",
            data=body,
            headers={'Content-Type': 'application/json'},
          )
        if is_success(result):
            return True
        logger.debug(f"Samsung REST key send to {device.ip_address} failed; trying legacy SOAP")
        return await self.send_code_legacy(device.ip_address, str(code))

    async def send_code_legacy(self, ip_address: str, code: str) -> bool:
        result = await self.http.post(
            f"http://{ip_address}:{LEGACY_PORT}/MultiScreenService/control/SendKeyCode",
            data=soap_envelope(LEGACY_SERVICE, "SendKeyCode", {"KeyCode": code}),
            headers=soap_headers(LEGACY_SERVICE, "SendKeyCode"),
          )
        return is_success(result)
