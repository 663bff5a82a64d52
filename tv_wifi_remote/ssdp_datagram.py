#
# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Abstraction of a datagram packet used in the SSDP protocol, and the
SsdpResponse summary that brand classification works from.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from .internal_types import *
from .constants import SSDP_MULTICAST_ADDRESS, SSDP_PORT, SSDP_MX

from .util import (
    CaseInsensitiveDict,
    split_bytes_at_lf_or_crlf,
    parse_http_headers,
    encode_http_header,
)

_response_statement_re = re.compile(r'^HTTP/(?P<version>[0-9]+\.[0-9]+) +(?P<status_code>[0-9]{3})(?: +(?P<status>.*\S))? *$')

class SsdpDatagram:
    """Wrapper for a raw SSDP datagram.

    Provides parsing and formatting of the HTTP-like packets and a case-insensitive
    dict of the (undecoded) headers. Header order is preserved when formatting, since
    some devices are picky about HOST coming first in an M-SEARCH.
    """

    statement_line: str
    """The first line of the datagram; e.g., "M-SEARCH * HTTP/1.1" or "HTTP/1.1 200 OK"."""

    headers: CaseInsensitiveDict[str]
    """The headers, keyed case-insensitively. Values are raw strings."""

    body: bytes
    """The body of the datagram, if any. If there is no body, b'' is returned."""

    def __init__(
            self,
            statement: str,
            headers: Optional[Mapping[str, str]]=None,
            body: bytes=b'',
          ):
        self.statement_line = statement
        self.headers = CaseInsensitiveDict(headers or {})
        self.body = body

    @classmethod
    def from_raw_data(cls, raw_data: bytes) -> SsdpDatagram:
        """Parse a received UDP payload."""
        statement_and_remainder = split_bytes_at_lf_or_crlf(raw_data, 1)
        statement = statement_and_remainder[0].decode('utf-8', errors='replace').strip()
        remainder = b'' if len(statement_and_remainder) < 2 else statement_and_remainder[1]
        headers, body = parse_http_headers(remainder)
        return cls(statement, headers, body)

    @classmethod
    def m_search(
            cls,
            search_target: str,
            mx: int=SSDP_MX,
            multicast_address: str=SSDP_MULTICAST_ADDRESS,
            multicast_port: int=SSDP_PORT,
          ) -> SsdpDatagram:
        """Build an M-SEARCH request for a single search target."""
        headers: Dict[str, str] = {}
        headers['HOST'] = f"{multicast_address}:{multicast_port}"
        headers['MAN'] = '"ssdp:discover"'
        headers['MX'] = str(mx)
        headers['ST'] = search_target
        return cls("M-SEARCH * HTTP/1.1", headers)

    @property
    def raw_data(self) -> bytes:
        """The datagram encoded for transmission, CRLF-delimited and terminated by a blank line."""
        raw_data = self.statement_line.encode('utf-8') + b'\r\n'
        for name, value in self.headers.items():
            raw_data += encode_http_header(name, value)
        raw_data += b'\r\n'
        return raw_data + self.body

    @property
    def status_code(self) -> Optional[int]:
        """The status code if this is a response datagram (e.g., 200), else None."""
        m = _response_statement_re.match(self.statement_line)
        if m is None:
            return None
        return int(m.group('status_code'))

    @property
    def is_ok_response(self) -> bool:
        return self.status_code == 200

    def get_header(self, name: str) -> str:
        """Returns a header value, or "" if the header is absent."""
        return self.headers.get(name, '')

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, SsdpDatagram):
            return False
        return (self.statement_line == other.statement_line and
                self.headers == other.headers and
                self.body == other.body)

    def __str__(self) -> str:
        return f"SsdpDatagram('{self.statement_line}', headers={dict(self.headers)}, body={self.body!r})"

    def __repr__(self) -> str:
        return str(self)


@dataclass(frozen=True)
class SsdpResponse:
    """The parts of one M-SEARCH reply that matter for brand classification."""
    location: str
    server: str
    search_target: str
    usn: str
    ip: str

    @property
    def st(self) -> str:
        return self.search_target

    @classmethod
    def from_datagram(cls, datagram: SsdpDatagram, ip: str) -> SsdpResponse:
        return cls(
            location=datagram.get_header('LOCATION'),
            server=datagram.get_header('SERVER'),
            search_target=datagram.get_header('ST'),
            usn=datagram.get_header('USN'),
            ip=ip,
          )
