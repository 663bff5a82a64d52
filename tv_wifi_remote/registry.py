#
# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
BrandRegistry -- maps a brand name (as shown to the user) to the protocol
handler that controls that brand's TVs.
"""

from __future__ import annotations

from .internal_types import *
from .config import TvRemoteConfig
from .network_probe import NetworkProbe
from .http_helper import HttpClient
from .handlers import (
    ProtocolHandler,
    SamsungHandler,
    LgHandler,
    SonyHandler,
    RokuHandler,
    PhilipsHandler,
    PanasonicHandler,
    VizioHandler,
    GenericHandler,
  )

NATIVE_HANDLERS: Dict[str, Type[ProtocolHandler]] = {
    'samsung': SamsungHandler,
    'lg': LgHandler,
    'sony': SonyHandler,
    'roku': RokuHandler,
    # most TCL sets run Roku OS
    'tcl': RokuHandler,
    'philips': PhilipsHandler,
    'panasonic': PanasonicHandler,
    'vizio': VizioHandler,
}
"""Brands with a dedicated protocol handler, keyed by lowercase brand name."""

def normalize_brand(brand_name: str) -> str:
    return brand_name.strip().lower()

class BrandRegistry:
    """Resolves brand names to protocol handlers.

    Constructed once and shared; every handler it creates gets the registry's
    probe, HTTP client and configuration.
    """

    probe: NetworkProbe
    http: HttpClient
    config: TvRemoteConfig
    handler_classes: Mapping[str, Type[ProtocolHandler]]
    fallback_class: Type[ProtocolHandler]

    def __init__(
            self,
            probe: Optional[NetworkProbe]=None,
            http: Optional[HttpClient]=None,
            config: Optional[TvRemoteConfig]=None,
            handler_classes: Optional[Mapping[str, Type[ProtocolHandler]]]=None,
            fallback_class: Type[ProtocolHandler]=GenericHandler,
          ) -> None:
        if config is None:
            config = TvRemoteConfig() if probe is None else probe.config
        self.config = config
        self.probe = NetworkProbe(config) if probe is None else probe
        self.http = HttpClient(config.http_timeout) if http is None else http
        if handler_classes is None:
            handler_classes = NATIVE_HANDLERS
        self.handler_classes = { normalize_brand(name): cls for name, cls in handler_classes.items() }
        self.fallback_class = fallback_class

    def handler_class_for(self, brand_name: str) -> Type[ProtocolHandler]:
        return self.handler_classes.get(normalize_brand(brand_name), self.fallback_class)

    def resolve(self, brand_name: str) -> ProtocolHandler:
        """Returns a new, unconnected handler for a brand. Unknown brands get the fallback handler."""
        handler_class = self.handler_class_for(brand_name)
        return handler_class(probe=self.probe, http=self.http, config=self.config)

    def supports_natively(self, brand_name: str) -> bool:
        return normalize_brand(brand_name) in self.handler_classes

    def protocol_name_for(self, brand_name: str) -> str:
        return self.handler_class_for(brand_name).protocol_name

    def default_port_for(self, brand_name: str) -> int:
        return self.handler_class_for(brand_name).default_port

    @property
    def native_brands(self) -> List[str]:
        return sorted(self.handler_classes.keys())
