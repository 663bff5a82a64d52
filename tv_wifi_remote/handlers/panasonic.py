#
# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Panasonic Viera sets, controlled with the p00NetworkControl X_SendKey SOAP
action on port 55000.
"""

from __future__ import annotations

from ..internal_types import *
from ..device import DiscoveredDevice
from ..command_table import KeyCode
from .base import ProtocolHandler, soap_envelope, soap_headers, is_success

NETWORK_CONTROL_SERVICE = "urn:panasonic-com:service:p00NetworkControl:1"

class PanasonicHandler(ProtocolHandler):
    protocol_name = "Panasonic Viera"
    default_port = 55000
    brand = "Panasonic"
    device_label = "Panasonic TV"
    server_keywords = ("panasonic", "viera")
    location_keywords = ("panasonic",)
    probe_ports = (55000,)

    commands = {
        "Power": "NRC_POWER-ONOFF",
        "Volume_Up": "NRC_VOLUP-ONOFF",
        "Volume_Down": "NRC_VOLDOWN-ONOFF",
        "Channel_Up": "NRC_CH_UP-ONOFF",
        "Channel_Down": "NRC_CH_DOWN-ONOFF",
        "Mute": "NRC_MUTE-ONOFF",
        "Up": "NRC_UP-ONOFF",
        "Down": "NRC_DOWN-ONOFF",
        "Left": "NRC_LEFT-ONOFF",
        "Right": "NRC_RIGHT-ONOFF",
        "OK": "NRC_ENTER-ONOFF",
        "Enter": "NRC_ENTER-ONOFF",
        "Select": "NRC_ENTER-ONOFF",
        "Back": "NRC_RETURN-ONOFF",
        "Return": "NRC_RETURN-ONOFF",
        "Exit": "NRC_CANCEL-ONOFF",
        "Menu": "NRC_MENU-ONOFF",
        "Home": "NRC_HOME-ONOFF",
        "Source": "NRC_CHG_INPUT-ONOFF",
        "Input": "NRC_CHG_INPUT-ONOFF",
        "Info": "NRC_INFO-ONOFF",
        "Guide": "NRC_EPG-ONOFF",
        "Play": "NRC_PLAY-ONOFF",
        "Pause": "NRC_PAUSE-ONOFF",
        "Stop": "NRC_STOP-ONOFF",
        "Rewind": "NRC_REW-ONOFF",
        "Fast_Forward": "NRC_FF-ONOFF",
        "0": "NRC_D0-ONOFF", "1": "NRC_D1-ONOFF",
        "2": "NRC_D2-ONOFF", "3": "NRC_D3-ONOFF",
        "4": "NRC_D4-ONOFF", "5": "NRC_D5-ONOFF",
        "6": "NRC_D6-ONOFF", "7": "NRC_D7-ONOFF",
        "8": "NRC_D8-ONOFF", "9": "NRC_D9-ONOFF",
        "Red": "NRC_RED-ONOFF", "Green": "NRC_GREEN-ONOFF",
        "Yellow": "NRC_YELLOW-ONOFF", "Blue": "NRC_BLUE-ONOFF",
        "Netflix": "NRC_NETFLIX-ONOFF",
        "APPS": "NRC_APPS-ONOFF",
        "CC": "NRC_STTL-ONOFF",
        "Aspect": "NRC_DISP_MODE-ONOFF",
        "Sleep": "NRC_OFFTIMER-ONOFF",
        "Surround": "NRC_SURROUND-ONOFF",
        "VieraLink": "NRC_VIERA_LINK-ONOFF",
        "submenu": "NRC_SUBMENU-ONOFF",
    }

    async def handshake(self, device: DiscoveredDevice) -> bool:
        return await self.probe_reachable(device)

    async def send_code(self, device: DiscoveredDevice, code: KeyCode) -> bool:
        result = await self.http.post(
            f"http://{device.ip_address}:{device.port}/nrc/control_0",
            data=soap_envelope(NETWORK_CONTROL_SERVICE, "X_SendKey", {"X_KeyEvent": str(code)}),
            headers=soap_headers(NETWORK_CONTROL_SERVICE, "X_SendKey"),
          )
        return is_success(result)
