#
# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Philips sets, controlled through the JointSpace v6 REST API on port 1925.
"""

from __future__ import annotations

import json

from ..internal_types import *
from ..device import DiscoveredDevice
from ..command_table import KeyCode
from .base import ProtocolHandler, is_success

class PhilipsHandler(ProtocolHandler):
    protocol_name = "Philips JointSpace"
    default_port = 1925
    brand = "Philips"
    device_label = "Philips TV"
    server_keywords = ("philips",)
    location_keywords = ("philips",)
    probe_ports = (1925,)

    commands = {
        "Power": "Standby",
        "Volume_Up": "VolumeUp",
        "Volume_Down": "VolumeDown",
        "Channel_Up": "ChannelStepUp",
        "Channel_Down": "ChannelStepDown",
        "Mute": "Mute",
        "Up": "CursorUp",
        "Down": "CursorDown",
        "Left": "CursorLeft",
        "Right": "CursorRight",
        "OK": "Confirm",
        "Enter": "Confirm",
        "Select": "Confirm",
        "Back": "Back",
        "Return": "Back",
        "Exit": "Exit",
        "Menu": "Home",
        "Home": "Home",
        "Source": "Source",
        "Input": "Source",
        "Info": "Info",
        "Guide": "Guide",
        "Play": "Play",
        "Pause": "Pause",
        "Stop": "Stop",
        "Rewind": "Rewind",
        "Fast_Forward": "FastForward",
        "0": "Digit0", "1": "Digit1", "2": "Digit2",
        "3": "Digit3", "4": "Digit4", "5": "Digit5",
        "6": "Digit6", "7": "Digit7", "8": "Digit8",
        "9": "Digit9",
        "Red": "RedColour", "Green": "GreenColour",
        "Yellow": "YellowColour", "Blue": "BlueColour",
        "Netflix": "Netflix",
        "CC": "SubtitlesOnOff",
        "Aspect": "AdjustPicture",
        "Sleep": "Standby",
    }

    async def handshake(self, device: DiscoveredDevice) -> bool:
        result = await self.http.get(f"http://{device.ip_address}:{device.port}/6/system")
        return result is not None and result.status == 200

    async def send_code(self, device: DiscoveredDevice, code: KeyCode) -> bool:
        result = await self.http.post(
            f"http://{device.ip_address}:{device.port}/6/input/key",
            data=json.dumps({"key": code}, separators=(',', ':')),
            headers={'Content-Type': 'application/json'},
          )
        return is_success(result)
