#
# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Runtime settings shared by the registry, the protocol handlers and the network probe.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from .internal_types import *
from .constants import (
    SSDP_SEARCH_TARGETS,
    DEFAULT_DISCOVERY_TIMEOUT,
    DEFAULT_HTTP_TIMEOUT,
    DEFAULT_PROBE_TIMEOUT,
    DEFAULT_CONNECT_PROBE_TIMEOUT,
    DEFAULT_MAX_CONCURRENT_PROBES,
  )

@dataclass(frozen=True)
class TvRemoteConfig:
    discovery_timeout: float = DEFAULT_DISCOVERY_TIMEOUT
    """Seconds to wait for SSDP replies during discovery."""

    http_timeout: float = DEFAULT_HTTP_TIMEOUT
    """Total timeout in seconds for a single HTTP request to a TV."""

    probe_timeout: float = DEFAULT_PROBE_TIMEOUT
    """TCP connect timeout in seconds for port probes made during discovery."""

    connect_probe_timeout: float = DEFAULT_CONNECT_PROBE_TIMEOUT
    """TCP connect timeout in seconds for reachability checks made while connecting."""

    max_concurrent_probes: int = DEFAULT_MAX_CONCURRENT_PROBES
    """Upper bound on simultaneous outstanding TCP probes."""

    search_targets: Tuple[str, ...] = SSDP_SEARCH_TARGETS
    """The ST values sent during discovery, one M-SEARCH each."""

    bind_addresses: Optional[Tuple[str, ...]] = None
    """Local IPv4 addresses to send M-SEARCH from. None means every non-loopback address."""

    sony_psk: str = "0000"
    """Pre-shared key sent as X-Auth-PSK to Sony Bravia sets."""

    vizio_auth_token: Optional[str] = None
    """Optional AUTH header value for Vizio SmartCast sets."""

    def __post_init__(self) -> None:
        if self.max_concurrent_probes < 1:
            raise ValueError(f"max_concurrent_probes must be at least 1, got {self.max_concurrent_probes}")
        for name in ('discovery_timeout', 'http_timeout', 'probe_timeout', 'connect_probe_timeout'):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive, got {getattr(self, name)}")

    def evolve(self, **changes: Any) -> TvRemoteConfig:
        """Returns a copy with some fields replaced."""
        return replace(self, **changes)
