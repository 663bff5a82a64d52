# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Protocol handlers: one per TV brand family, plus a generic best-effort fallback.
"""

from .base import ProtocolHandler
from .samsung import SamsungHandler
from .lg import LgHandler
from .sony import SonyHandler
from .roku import RokuHandler
from .philips import PhilipsHandler
from .panasonic import PanasonicHandler
from .vizio import VizioHandler
from .generic import GenericHandler

__all__ = [
    'ProtocolHandler',
    'SamsungHandler',
    'LgHandler',
    'SonyHandler',
    'RokuHandler',
    'PhilipsHandler',
    'PanasonicHandler',
    'VizioHandler',
    'GenericHandler',
]
