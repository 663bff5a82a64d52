#
# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
LG webOS sets, controlled through the ROAP HandleKeyInput command on port 3000.
"""

from __future__ import annotations

from xml.sax.saxutils import escape as xml_escape

from ..internal_types import *
from ..device import DiscoveredDevice
from ..command_table import KeyCode
from .base import ProtocolHandler, is_success

class LgHandler(ProtocolHandler):
    protocol_name = "LG webOS"
    default_port = 3000
    brand = "LG"
    device_label = "LG TV"
    server_keywords = ("lg", "webos")
    st_keywords = ("lge",)
    probe_ports = (3000,)

    commands = {
        "Power": "KEY_POWER",
        "Volume_Up": "volumeUp",
        "Volume_Down": "volumeDown",
        "Channel_Up": "channelUp",
        "Channel_Down": "channelDown",
        "Mute": "KEY_MUTE",
        "Up": "UP",
        "Down": "DOWN",
        "Left": "LEFT",
        "Right": "RIGHT",
        "OK": "ENTER",
        "Enter": "ENTER",
        "Select": "ENTER",
        "Back": "BACK",
        "Return": "BACK",
        "Exit": "EXIT",
        "Menu": "MENU",
        "Home": "HOME",
        "Source": "INPUT",
        "Input": "INPUT",
        "Info": "INFO",
        "Guide": "GUIDE",
        "Play": "PLAY",
        "Pause": "PAUSE",
        "Stop": "STOP",
        "Rewind": "REWIND",
        "Fast_Forward": "FASTFORWARD",
        "0": "0", "1": "1", "2": "2",
        "3": "3", "4": "4", "5": "5",
        "6": "6", "7": "7", "8": "8",
        "9": "9",
        "Red": "RED", "Green": "GREEN",
        "Yellow": "YELLOW", "Blue": "BLUE",
        "Netflix": "NETFLIX",
        "APPS": "MYAPPS",
        "CC": "CC",
        "Aspect": "ASPECTRATIO",
        "Sleep": "SLEEP",
    }

    async def handshake(self, device: DiscoveredDevice) -> bool:
        return await self.probe_reachable(device)

    async def send_code(self, device: DiscoveredDevice, code: KeyCode) -> bool:
        body = (
            '<?xml version="1.0" encoding="utf-8"?>\n'
            '<command>\n'
            '<name>HandleKeyInput</name>\n'
            f'<value>{xml_escape(str(code))}</value>\n'
            '</command>'
          )
        result = await self.http.post(
            f"http://{device.ip_address}:{device.port}/roap/api/command",
            data=body,
            headers={'Content-Type': 'application/atom+xml'},
          )
        return is_success(result)
