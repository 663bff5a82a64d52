#
# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
A TV found on the network (or named by address) that a protocol handler can connect to.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from .internal_types import *
from .exceptions import InvalidDeviceError
from .util import is_ipv4_address

@dataclass(frozen=True)
class DiscoveredDevice:
    name: str
    ip_address: str
    brand: str
    port: int
    service_type: str = ""
    unique_id: str = ""

    def __post_init__(self) -> None:
        if not is_ipv4_address(self.ip_address):
            raise InvalidDeviceError(f"Not a valid IPv4 address: {self.ip_address!r}")
        if isinstance(self.port, bool) or not isinstance(self.port, int) or not 1 <= self.port <= 65535:
            raise InvalidDeviceError(f"Port out of range: {self.port!r}")

    @property
    def display_name(self) -> str:
        if self.name.strip() == '':
            return self.ip_address
        return f"{self.name} ({self.ip_address})"

    def with_port(self, port: int) -> DiscoveredDevice:
        return replace(self, port=port)

    def to_jsonable(self) -> JsonableDict:
        return dict(
            name=self.name,
            ip_address=self.ip_address,
            brand=self.brand,
            port=self.port,
            service_type=self.service_type,
            unique_id=self.unique_id,
          )
