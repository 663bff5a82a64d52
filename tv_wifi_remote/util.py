#
# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Simple utility functions used by this package
"""

from __future__ import annotations

import socket
from ipaddress import IPv4Address, IPv6Address
from urllib.parse import urlsplit

import netifaces

from .internal_types import *

from email.parser import BytesHeaderParser
from email.message import Message as EmailParserMessage
from requests.structures import CaseInsensitiveDict

def split_bytes_at_lf_or_crlf(data: bytes, maxsplit: int = -1) -> List[bytes]:
    """Split a byte string at LF or CRLF.

    If maxsplit is given, at most maxsplit splits are done.

    Returns a List[bytes] representing the delimited lines with the delimiters removed.
    """
    parts = data.split(b'\n', maxsplit)
    return [ part[:-1] if i < len(parts) - 1 and part.endswith(b'\r') else part for i, part in enumerate(parts) ]

def split_headers_and_body(data: bytes) -> Tuple[bytes, bytes]:
    """Splits a byte string with HTTP headers and an optional body into the headers and the body.

    Either '\r\n\r\n' or a bare '\n\n' (or a mix) is accepted as the separator.

    Returns a Tuple[headers: bytes, body: bytes]. If there is no body, b'' is returned for the body.
    """
    best: Optional[Tuple[int, int]] = None
    for delim in (b'\n\r\n', b'\n\n'):
        i = data.find(delim)
        if i != -1 and (best is None or i < best[0]):
            best = (i, len(delim))
    if best is None:
        return (data, b'')
    i, n = best
    headers = data[:i]
    if headers.endswith(b'\r'):
        headers = headers[:-1]
    return (headers, data[i + n:])

def parse_http_headers(data: bytes) -> Tuple[CaseInsensitiveDict[str], bytes]:
    """Parse HTTP-style headers out of a byte string. Also returns the body of the message, if any.

    LF is accepted as a line delimiter even though CRLF is required by the standard. Any
    preceding statement line (e.g., "HTTP/1.1 200 OK") must already have been removed.

    Header values are returned with surrounding whitespace stripped but otherwise undecoded.
    When a header is repeated, the last value wins.

    Returns a tuple of (headers: CaseInsensitiveDict[str], body: bytes).
    """
    headers_data, body = split_headers_and_body(data)
    normalized = b'\r\n'.join(split_bytes_at_lf_or_crlf(headers_data))
    msg: EmailParserMessage = BytesHeaderParser().parsebytes(normalized + b'\r\n\r\n')
    headers: CaseInsensitiveDict[str] = CaseInsensitiveDict()
    for name, value in msg.items():
        headers[name.strip()] = str(value).strip()
    return (headers, body)

def encode_http_header(name: str, value: str) -> bytes:
    """Encodes a single HTTP header line, terminated with '\r\n'."""
    return f"{name}: {value}\r\n".encode('utf-8')

def port_from_url(url: str) -> Optional[int]:
    """Returns the explicit port number in a URL such as an SSDP LOCATION header, or None
       if the URL is malformed or carries no port."""
    try:
        return urlsplit(url).port
    except ValueError:
        return None

def is_ipv4_address(value: str) -> bool:
    """True if value is a dotted-quad IPv4 address."""
    try:
        IPv4Address(value)
    except ValueError:
        return False
    return True

def get_local_ip_addresses_and_interfaces(
        address_family: Union[socket.AddressFamily, int]=socket.AF_INET,
        include_loopback: bool=True
    ) -> List[Tuple[str, str]]:
    """Returns a list of Tuple[ip_address: str, interface_name: str] for the IP addresses of the local host
       in a requested address family. The result is sorted in a way that attempts to place the "preferred"
       canonical IP address first in the list, according to the following scheme:
           1. Addresses on the default gateway interface precede all other addresses.
           2. Non-loopback addresses precede loopback addresses.
           3. IPV4 addresses that begin with 172. follow other IPV4 addresses. This is a hack to
              deprioritize local docker network addresses.
    """
    assert int(address_family) in (int(socket.AF_INET), int(socket.AF_INET6))
    is_ipv6 = int(address_family) == int(socket.AF_INET6)
    address_type = IPv6Address if is_ipv6 else IPv4Address
    netiface_family = netifaces.AF_INET6 if is_ipv6 else netifaces.AF_INET
    _, default_gateway_ifname = get_default_ip_gateway(address_family)
    result_with_priority: List[Tuple[int, str, str]] = []
    for ifname in netifaces.interfaces():
        for addrinfo in netifaces.ifaddresses(ifname).get(netiface_family, []):
            ip_str = addrinfo['addr']
            if is_ipv6:
                # strip any "%scope" suffix
                ip_str = ip_str.split('%', 1)[0]
            if address_type(ip_str).is_loopback:
                if not include_loopback:
                    continue
                priority = 3
            elif ifname == default_gateway_ifname:
                priority = 0
            elif not is_ipv6 and ip_str.startswith('172.'):
                priority = 2
            else:
                priority = 1
            result_with_priority.append((priority, ip_str, ifname))
    return [ (ip, ifname) for _, ip, ifname in sorted(result_with_priority) ]

def get_local_ip_addresses(address_family: Union[socket.AddressFamily, int]=socket.AF_INET, include_loopback: bool=True) -> List[str]:
    """Returns a List[ip_address: str] for the IP addresses of the local host in a requested address family,
       preferred address first (see get_local_ip_addresses_and_interfaces)."""
    return [ ip for ip, _ in get_local_ip_addresses_and_interfaces(address_family, include_loopback=include_loopback) ]

def get_default_ip_gateway(address_family: Union[socket.AddressFamily, int]=socket.AF_INET) -> Tuple[Optional[str], Optional[str]]:
    """Returns the (gateway_ip_address: str, gateway_interface_name: str) for the default IP gateway in the
       requested family, if any.
       returns (None, None) if there is no default gateway in the requested family."""
    netiface_family = netifaces.AF_INET if int(address_family) == int(socket.AF_INET) else netifaces.AF_INET6
    default_gateway_infos = netifaces.gateways().get("default", {})
    if netiface_family in default_gateway_infos:
        gw_ip, gw_interface_name = default_gateway_infos[netiface_family][:2]
        return (gw_ip, gw_interface_name)
    return (None, None)
