from __future__ import annotations

import netifaces

from tv_wifi_remote import util
from tv_wifi_remote.util import (
    parse_http_headers,
    split_bytes_at_lf_or_crlf,
    encode_http_header,
    port_from_url,
    is_ipv4_address,
    get_local_ip_addresses,
  )

def test_split_accepts_lf_and_crlf():
    assert split_bytes_at_lf_or_crlf(b"a\r\nb\nc") == [b"a", b"b", b"c"]
    assert split_bytes_at_lf_or_crlf(b"a\r\nb\r\nc", 1) == [b"a", b"b\r\nc"]

def test_parse_headers_crlf():
    headers, body = parse_http_headers(b"ST: ssdp:all\r\nUSN: uuid:1234\r\n\r\n")
    assert headers['st'] == 'ssdp:all'
    assert headers['USN'] == 'uuid:1234'
    assert body == b''

def test_parse_headers_bare_lf_with_body():
    headers, body = parse_http_headers(b"LOCATION: http://192.168.1.40:8060/\nServer: Roku/9.4\n\nhello")
    assert headers['Location'] == 'http://192.168.1.40:8060/'
    assert headers['server'] == 'Roku/9.4'
    assert body == b'hello'

def test_parse_headers_strips_values_and_last_duplicate_wins():
    headers, _ = parse_http_headers(b"X-Thing:   one  \r\nx-thing: two\r\n\r\n")
    assert headers['X-THING'] == 'two'

def test_encode_http_header():
    assert encode_http_header('MX', '3') == b'MX: 3\r\n'

def test_port_from_url():
    assert port_from_url('http://192.168.1.2:8060/dial.xml') == 8060
    assert port_from_url('http://192.168.1.2/description.xml') is None
    assert port_from_url('') is None
    assert port_from_url('http://[not-an-address') is None

def test_is_ipv4_address():
    assert is_ipv4_address('192.168.1.1')
    assert not is_ipv4_address('256.1.1.1')
    assert not is_ipv4_address('tv.local')
    assert not is_ipv4_address('::1')
    assert not is_ipv4_address('')

def test_local_addresses_prefer_gateway_interface(monkeypatch):
    addresses = {
        'lo': {netifaces.AF_INET: [{'addr': '127.0.0.1'}]},
        'docker0': {netifaces.AF_INET: [{'addr': '172.17.0.1'}]},
        'eth0': {netifaces.AF_INET: [{'addr': '192.168.1.20'}]},
        'wlan0': {},
    }
    monkeypatch.setattr(util.netifaces, 'interfaces', lambda: list(addresses.keys()))
    monkeypatch.setattr(util.netifaces, 'ifaddresses', lambda ifname: addresses[ifname])
    monkeypatch.setattr(util.netifaces, 'gateways', lambda: {'default': {netifaces.AF_INET: ('192.168.1.1', 'eth0')}})

    assert get_local_ip_addresses(include_loopback=False) == ['192.168.1.20', '172.17.0.1']
    assert get_local_ip_addresses() == ['192.168.1.20', '172.17.0.1', '127.0.0.1']
