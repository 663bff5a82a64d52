# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""Constants used by this package"""

SSDP_MULTICAST_ADDRESS = "239.255.255.250"
"""The multicast address used by SSDP for UDP multicast."""

SSDP_PORT = 1900
"""The port number used by SSDP for UDP multicast."""

SSDP_MX = 3
"""The MX (maximum response delay, in seconds) advertised in M-SEARCH requests."""

SSDP_SEARCH_TARGETS = (
    "ssdp:all",
    "urn:schemas-upnp-org:device:MediaRenderer:1",
    "urn:dial-multiscreen-org:service:dial:1",
  )
"""The ST values sent during discovery. Each one gets its own M-SEARCH."""

DEFAULT_DISCOVERY_TIMEOUT = 3.0
"""The default amount of time (in seconds) to wait for discovery responses."""

DEFAULT_HTTP_TIMEOUT = 3.0
"""The default total timeout (in seconds) for a single HTTP request to a TV."""

DEFAULT_PROBE_TIMEOUT = 0.5
"""The default TCP connect timeout (in seconds) used when probing ports during discovery."""

DEFAULT_CONNECT_PROBE_TIMEOUT = 3.0
"""The default TCP connect timeout (in seconds) used by reachability-style connect handshakes."""

DEFAULT_MAX_CONCURRENT_PROBES = 16
"""The maximum number of TCP port probes allowed in flight at once."""

UNKNOWN_BRAND = "Unknown"
"""The brand assigned to discovered devices that match no known vendor fingerprint."""
