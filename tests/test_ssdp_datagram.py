from __future__ import annotations

from tv_wifi_remote import SsdpDatagram, SsdpResponse

ROKU_REPLY = (
    b"HTTP/1.1 200 OK\r\n"
    b"Cache-Control: max-age=3600\r\n"
    b"ST: roku:ecp\r\n"
    b"Location: http://192.168.1.40:8060/\r\n"
    b"USN: uuid:roku:ecp:YN00AB123456\r\n"
    b"Server: Roku/9.4.0 UPnP/1.0 Roku/9.4.0\r\n"
    b"\r\n"
)

def test_m_search_wire_format():
    datagram = SsdpDatagram.m_search("urn:dial-multiscreen-org:service:dial:1")
    assert datagram.raw_data == (
        b"M-SEARCH * HTTP/1.1\r\n"
        b"HOST: 239.255.255.250:1900\r\n"
        b"MAN: \"ssdp:discover\"\r\n"
        b"MX: 3\r\n"
        b"ST: urn:dial-multiscreen-org:service:dial:1\r\n"
        b"\r\n"
    )
    assert datagram.status_code is None

def test_parse_ok_response():
    datagram = SsdpDatagram.from_raw_data(ROKU_REPLY)
    assert datagram.statement_line == "HTTP/1.1 200 OK"
    assert datagram.status_code == 200
    assert datagram.is_ok_response
    assert datagram.get_header('LOCATION') == "http://192.168.1.40:8060/"
    assert datagram.get_header('x-not-there') == ""

def test_parse_response_with_bare_lf():
    datagram = SsdpDatagram.from_raw_data(ROKU_REPLY.replace(b"\r\n", b"\n"))
    assert datagram.is_ok_response
    assert datagram.get_header('st') == "roku:ecp"

def test_error_and_request_statements():
    assert SsdpDatagram.from_raw_data(b"HTTP/1.1 404 Not Found\r\n\r\n").status_code == 404
    notify = SsdpDatagram.from_raw_data(b"NOTIFY * HTTP/1.1\r\nNTS: ssdp:alive\r\n\r\n")
    assert notify.status_code is None
    assert not notify.is_ok_response

def test_response_summary():
    response = SsdpResponse.from_datagram(SsdpDatagram.from_raw_data(ROKU_REPLY), "192.168.1.40")
    assert response.ip == "192.168.1.40"
    assert response.location == "http://192.168.1.40:8060/"
    assert response.server.startswith("Roku/9.4.0")
    assert response.st == "roku:ecp"
    assert response.usn == "uuid:roku:ecp:YN00AB123456"

def test_response_summary_missing_headers_are_empty():
    response = SsdpResponse.from_datagram(SsdpDatagram.from_raw_data(b"HTTP/1.1 200 OK\r\n\r\n"), "10.0.0.9")
    assert response == SsdpResponse(location="", server="", search_target="", usn="", ip="10.0.0.9")
