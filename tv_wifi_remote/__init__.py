# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Package tv_wifi_remote discovers smart TVs on a local network and sends them
remote-control key presses over WiFi.

Every major TV brand speaks its own control protocol: Samsung's REST remote
channel, LG's ROAP commands, Sony's IRCC (legacy IR codes over SOAP), Roku's
External Control Protocol, Philips JointSpace, Panasonic's Viera network
control and Vizio SmartCast. This package hides them behind one interface:

    controller = RemoteController()
    devices = await controller.discover_devices("Roku")
    if await controller.connect("Roku", devices[0]):
        await controller.send_command("Volume_Up")
        controller.disconnect()

TVs are found with SSDP (UPnP M-SEARCH over UDP multicast to 239.255.255.250:1900),
supplemented by probing each brand's well-known control port. Brands with no
dedicated handler get a generic handler that sniffs the control port to pick a
protocol, and falls back to a UPnP RenderingControl SendKey request.
"""

from .version import __version__

from .internal_types import Jsonable, JsonableDict

from .exceptions import TvRemoteError, InvalidDeviceError

from .constants import (
    SSDP_MULTICAST_ADDRESS,
    SSDP_PORT,
    SSDP_SEARCH_TARGETS,
    DEFAULT_DISCOVERY_TIMEOUT,
  )
from .config import TvRemoteConfig
from .device import DiscoveredDevice
from .command_table import CommandTable, VizioKeyCode
from .ssdp_datagram import SsdpDatagram, SsdpResponse
from .ssdp_socket import SsdpSocket, SsdpSocketBinding, SsdpDatagramSubscriber
from .ssdp_client import SsdpClient, SsdpSearchRequest, SsdpResponseInfo
from .network_probe import NetworkProbe
from .http_helper import HttpClient, HttpResult
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
from .registry import BrandRegistry
from .events import ControllerState, ConnectionEvent, ConnectionEventChannel, ConnectionEventSubscription
from .controller import RemoteController, ConnectionState
from .util import CaseInsensitiveDict

__all__ = [
    '__version__',
    'Jsonable', 'JsonableDict',
    'TvRemoteError', 'InvalidDeviceError',
    'SSDP_MULTICAST_ADDRESS', 'SSDP_PORT', 'SSDP_SEARCH_TARGETS', 'DEFAULT_DISCOVERY_TIMEOUT',
    'TvRemoteConfig',
    'DiscoveredDevice',
    'CommandTable', 'VizioKeyCode',
    'SsdpDatagram', 'SsdpResponse',
    'SsdpSocket', 'SsdpSocketBinding', 'SsdpDatagramSubscriber',
    'SsdpClient', 'SsdpSearchRequest', 'SsdpResponseInfo',
    'NetworkProbe',
    'HttpClient', 'HttpResult',
    'ProtocolHandler',
    'SamsungHandler', 'LgHandler', 'SonyHandler', 'RokuHandler',
    'PhilipsHandler', 'PanasonicHandler', 'VizioHandler', 'GenericHandler',
    'BrandRegistry',
    'ControllerState', 'ConnectionEvent', 'ConnectionEventChannel', 'ConnectionEventSubscription',
    'RemoteController', 'ConnectionState',
    'CaseInsensitiveDict',
]
