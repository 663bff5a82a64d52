#
# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Sony Bravia sets, controlled with IRCC-IP: base64-encoded legacy IR codes
wrapped in a SOAP X_SendIRCC request, authenticated with a pre-shared key.
"""

from __future__ import annotations

import json

from ..internal_types import *
from ..device import DiscoveredDevice
from ..command_table import KeyCode
from .base import ProtocolHandler, soap_envelope, soap_headers, is_success

IRCC_SERVICE = "urn:schemas-sony-com:service:IRCC:1"

class SonyHandler(ProtocolHandler):
    protocol_name = "Sony Bravia IRCC"
    default_port = 80
    brand = "Sony"
    device_label = "Sony TV"
    server_keywords = ("sony", "bravia")
    location_keywords = ("sony",)
    # port 80 answers on far too many hosts to be evidence of a Bravia
    probe_ports = ()

    commands = {
        "Power": "AAAAAQAAAAEAAAAVAw==",
        "Volume_Up": "AAAAAQAAAAEAAAASAw==",
        "Volume_Down": "AAAAAQAAAAEAAAATAw==",
        "Channel_Up": "AAAAAQAAAAEAAAAQAw==",
        "Channel_Down": "AAAAAQAAAAEAAAARAw==",
        "Mute": "AAAAAQAAAAEAAAAUAw==",
        "Up": "AAAAAQAAAAEAAAB0Aw==",
        "Down": "AAAAAQAAAAEAAAB1Aw==",
        "Left": "AAAAAQAAAAEAAAB2Aw==",
        "Right": "AAAAAQAAAAEAAAB3Aw==",
        "OK": "AAAAAQAAAAEAAABlAw==",
        "Enter": "AAAAAQAAAAEAAABlAw==",
        "Select": "AAAAAQAAAAEAAABlAw==",
        "Back": "AAAAAgAAAJcAAAAjAw==",
        "Return": "AAAAAgAAAJcAAAAjAw==",
        "Exit": "AAAAAQAAAAEAAABjAw==",
        "Menu": "AAAAAgAAAJcAAAA3Aw==",
        "Home": "AAAAAQAAAAEAAABgAw==",
        "Source": "AAAAAQAAAAEAAAAlAw==",
        "Input": "AAAAAQAAAAEAAAAlAw==",
        "Info": "AAAAAQAAAAEAAAA6Aw==",
        "Guide": "AAAAAgAAAKQAAABbAw==",
        "Play": "AAAAAgAAAJcAAAAaAw==",
        "Pause": "AAAAAgAAAJcAAAAZAw==",
        "Stop": "AAAAAgAAAJcAAAAYAw==",
        "Rewind": "AAAAAgAAAJcAAAAbAw==",
        "Fast_Forward": "AAAAAgAAAJcAAAAcAw==",
        "0": "AAAAAQAAAAEAAAAJAw==",
        "1": "AAAAAQAAAAEAAAAAAw==",
        "2": "AAAAAQAAAAEAAAABAw==",
        "3": "AAAAAQAAAAEAAAACAw==",
        "4": "AAAAAQAAAAEAAAADAw==",
        "5": "AAAAAQAAAAEAAAAEAw==",
        "6": "AAAAAQAAAAEAAAAFAw==",
        "7": "AAAAAQAAAAEAAAAGAw==",
        "8": "AAAAAQAAAAEAAAAHAw==",
        "9": "AAAAAQAAAAEAAAAIAw==",
        "Red": "AAAAAgAAAJcAAAAlAw==",
        "Green": "AAAAAgAAAJcAAAAmAw==",
        "Yellow": "AAAAAgAAAJcAAAAnAw==",
        "Blue": "AAAAAgAAAJcAAAAkAw==",
        "Netflix": "AAAAAgAAABoAAAB8Aw==",
        "CC": "AAAAAgAAAJcAAAAoAw==",
        "Sleep": "AAAAAgAAAJcAAAA2Aw==",
        "Aspect": "AAAAAQAAAAEAAABQAW==",
    }

    def _auth_headers(self) -> Dict[str, str]:
        return {'X-Auth-PSK': self.config.sony_psk}

    async def handshake(self, device: DiscoveredDevice) -> bool:
        body = json.dumps(
            {"method": "getSystemInformation", "id": 33, "params": [], "version": "1.0"},
            separators=(',', ':'),
          )
        headers = {'Content-Type': 'application/json'}
        headers.update(self._auth_headers())
        result = await self.http.post(
            f"http://{device.ip_address}:{device.port}/sony/system",
            data=body,
            headers=headers,
          )
        return result is not None and result.status == 200

    async def send_code(self, device: DiscoveredDevice, code: KeyCode) -> bool:
        headers = soap_headers(IRCC_SERVICE, "X_SendIRCC", header_name='SOAPACTION')
        headers.update(self._auth_headers())
        result = await self.http.post(
            f"http://{device.ip_address}:{device.port}/sony/IRCC",
            data=soap_envelope(IRCC_SERVICE, "X_SendIRCC", {"IRCCCode": str(code)}),
            headers=headers,
          )
        return is_success(result)
