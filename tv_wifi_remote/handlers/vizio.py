#
# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Vizio SmartCast sets. Keys are (codeset, code) pairs PUT as JSON to
/key_command/ over HTTPS on port 7345, or over plain HTTP on port 9000 on
older firmware.
"""

from __future__ import annotations

import json

from ..internal_types import *
from ..pkg_logging import logger
from ..device import DiscoveredDevice
from ..command_table import KeyCode, VizioKeyCode
from .base import ProtocolHandler, is_success

HTTP_FALLBACK_PORT = 9000

class VizioHandler(ProtocolHandler):
    protocol_name = "Vizio SmartCast"
    default_port = 7345
    brand = "Vizio"
    device_label = "Vizio TV"
    server_keywords = ("vizio", "smartcast")
    location_keywords = ("vizio",)
    probe_ports = (7345, HTTP_FALLBACK_PORT)

    commands = {
        "Power": VizioKeyCode(1, 0),
        "Volume_Up": VizioKeyCode(5, 1),
        "Volume_Down": VizioKeyCode(5, 0),
        "Channel_Up": VizioKeyCode(8, 1),
        "Channel_Down": VizioKeyCode(8, 0),
        "Mute": VizioKeyCode(5, 4),
        "Up": VizioKeyCode(3, 8),
        "Down": VizioKeyCode(3, 0),
        "Left": VizioKeyCode(3, 1),
        "Right": VizioKeyCode(3, 7),
        "OK": VizioKeyCode(3, 2),
        "Enter": VizioKeyCode(3, 2),
        "Select": VizioKeyCode(3, 2),
        "Back": VizioKeyCode(4, 0),
        "Return": VizioKeyCode(4, 0),
        "Exit": VizioKeyCode(9, 0),
        "Menu": VizioKeyCode(4, 8),
        "Home": VizioKeyCode(4, 3),
        "Info": VizioKeyCode(4, 6),
        "Play": VizioKeyCode(2, 3),
        "Pause": VizioKeyCode(2, 2),
        "Input": VizioKeyCode(7, 1),
        "Source": VizioKeyCode(7, 1),
        "CC": VizioKeyCode(4, 4),
    }

    async def handshake(self, device: DiscoveredDevice) -> bool:
        return await self.probe_reachable(device)

    async def send_code(self, device: DiscoveredDevice, code: KeyCode) -> bool:
        if not isinstance(code, VizioKeyCode):
            raise TypeError(f"Vizio key codes are (codeset, code) pairs, not {code!r}")
        body = json.dumps(
            {"KEYLIST": [{"CODESET": code.codeset, "CODE": code.code, "ACTION": "KEYPRESS"}]},
            separators=(',', ':'),
          )
        headers = {'Content-Type': 'application/json'}
        if self.config.vizio_auth_token is not None:
            headers['AUTH'] = self.config.vizio_auth_token
        result = await self.http.put(
            f"https://{device.ip_address}:{device.port}/key_command/",
            data=body,
            headers=headers,
          )
        if result is None:
            # no HTTPS listener; older sets only speak plain HTTP
            logger.debug(f"Vizio HTTPS key send to {device.ip_address} failed; trying HTTP on {HTTP_FALLBACK_PORT}")
            result = await self.http.put(
                f"http://{device.ip_address}:{HTTP_FALLBACK_PORT}/key_command/",
                data=body,
                headers=headers,
              )
        return is_success(result)
